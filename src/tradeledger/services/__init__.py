"""tradeledger services package.

Each service is independently testable and communicates via Protocol
interfaces using dependency injection.
"""

from tradeledger.services.ledger import CostBasisLedger, ICostBasisLedger
from tradeledger.services.portfolio import PortfolioService

__all__: list[str] = [
    "CostBasisLedger",
    "ICostBasisLedger",
    "PortfolioService",
]
