"""Cost-basis ledger interface (Protocol).

Defines the contract the portfolio aggregator relies on, so alternative
ledgers (or test doubles) can be injected.
"""

from collections.abc import Iterable
from typing import Protocol

from tradeledger.services.ledger.models import CostBasisMethod, PositionState, TradeEvent, TradeWithPL


class ICostBasisLedger(Protocol):
    """
    Cost-basis ledger for one instrument at a time.

    Implementations must be pure: the same events and method always produce
    the same result, and no state survives between calls.

    Example:
        >>> ledger: ICostBasisLedger = CostBasisLedger()
        >>> state = ledger.compute_position(trades, CostBasisMethod.FIFO, symbol="AAPL")
    """

    def compute_position(
        self,
        trades: Iterable[TradeEvent],
        method: CostBasisMethod | str,
        symbol: str | None = None,
    ) -> PositionState:
        """
        Replay trades into the position after the last event.

        Args:
            trades: Events for a single symbol
            method: FIFO or AVERAGE
            symbol: Optional symbol recorded on the result

        Returns:
            PositionState
        """
        ...

    def compute_per_trade_pl(
        self,
        trades: Iterable[TradeEvent],
        method: CostBasisMethod | str,
        symbol: str | None = None,
    ) -> list[TradeWithPL]:
        """
        Replay trades and annotate each with realized P/L, cash flow and running cost.

        Args:
            trades: Events for a single symbol
            method: FIFO or AVERAGE
            symbol: Optional symbol for log context

        Returns:
            One annotation per event in replay order
        """
        ...
