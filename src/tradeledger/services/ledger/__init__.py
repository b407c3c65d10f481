"""Cost-basis ledger.

Replays an instrument's trade history into point-in-time position state
under FIFO lot tracking or weighted-average cost, with optional per-trade
P/L annotation.

Key components:
- compute_position / compute_per_trade_pl: Pure replay functions
- CostBasisLedger: Default ICostBasisLedger implementation
- LotQueue: FIFO lot consumption
- Models: TradeEvent, OptionDetails, Lot, PositionState, TradeWithPL

Example:
    >>> from tradeledger.services.ledger import CostBasisMethod, compute_position
    >>> state = compute_position(trades, CostBasisMethod.FIFO)
    >>> print(f"{state.shares} shares, basis ${state.cost_basis}")
"""

from tradeledger.services.ledger.interface import ICostBasisLedger
from tradeledger.services.ledger.lot_tracker import LotQueue
from tradeledger.services.ledger.models import (
    CONTRACT_MULTIPLIER,
    CostBasisMethod,
    Lot,
    OptionAction,
    OptionDetails,
    PositionState,
    TradeEvent,
    TradeKind,
    TradeWithPL,
)
from tradeledger.services.ledger.service import (
    AverageReplay,
    CostBasisLedger,
    FifoReplay,
    compute_per_trade_pl,
    compute_position,
    sort_trades,
)

__all__ = [
    # Service
    "ICostBasisLedger",
    "CostBasisLedger",
    "FifoReplay",
    "AverageReplay",
    "compute_position",
    "compute_per_trade_pl",
    "sort_trades",
    "LotQueue",
    # Models
    "CONTRACT_MULTIPLIER",
    "CostBasisMethod",
    "Lot",
    "OptionAction",
    "OptionDetails",
    "PositionState",
    "TradeEvent",
    "TradeKind",
    "TradeWithPL",
]
