"""Data models for the cost-basis ledger.

Defines all core entities for trade replay:
- TradeEvent: Immutable, timestamped economic event for one instrument
- OptionDetails: Option premium sub-record (OPTION_PREMIUM only)
- Lot: Block of shares acquired at a specific time and cost (FIFO only)
- PositionState: Ledger output after replaying a trade sequence
- TradeWithPL: Per-trade annotation with running totals
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

# One option contract covers 100 units of the underlying
CONTRACT_MULTIPLIER = Decimal("100")


class TradeKind(str, Enum):
    """Kind of economic event."""

    BUY = "BUY"
    SELL = "SELL"
    OPTION_PREMIUM = "OPTION_PREMIUM"
    DIVIDEND = "DIVIDEND"


class OptionAction(str, Enum):
    """Option order action that produced a premium cash flow."""

    BUY_TO_OPEN = "BUY_TO_OPEN"
    BUY_TO_CLOSE = "BUY_TO_CLOSE"
    SELL_TO_OPEN = "SELL_TO_OPEN"
    SELL_TO_CLOSE = "SELL_TO_CLOSE"

    @property
    def is_credit(self) -> bool:
        """True when the action receives premium (sell to open/close)."""
        return self in (OptionAction.SELL_TO_OPEN, OptionAction.SELL_TO_CLOSE)


class CostBasisMethod(str, Enum):
    """Accounting convention used to replay a symbol's trades."""

    FIFO = "FIFO"
    AVERAGE = "AVERAGE"


class OptionDetails(BaseModel):
    """
    Option premium details attached to an OPTION_PREMIUM event.

    Attributes:
        action: Buy/sell to open/close
        contracts: Number of contracts
        premium_per_contract: Quoted premium per share of underlying
    """

    action: OptionAction
    contracts: Decimal
    premium_per_contract: Decimal

    @property
    def premium_total(self) -> Decimal:
        """Premium cash amount: contracts * premium * 100."""
        return self.contracts * self.premium_per_contract * CONTRACT_MULTIPLIER

    model_config = ConfigDict(frozen=True)


class TradeEvent(BaseModel):
    """
    Immutable economic event for one instrument.

    `executed_at` is the only ordering key. Quantity is a magnitude; the
    direction comes from `kind`. Fees are always added to cost (buys) or
    subtracted from proceeds (sells).

    Attributes:
        trade_id: Unique identifier
        symbol: Ticker symbol (upper-cased)
        kind: BUY, SELL, OPTION_PREMIUM or DIVIDEND
        quantity: Shares (BUY/SELL only)
        price_per_unit: Execution price per share
        total_amount: Gross cash amount of the event
        fees: Commissions and fees
        executed_at: Execution timestamp (naive UTC; aware values are converted)
        option_details: Premium details (OPTION_PREMIUM only)

    Example:
        >>> trade = TradeEvent(
        ...     symbol="AAPL",
        ...     kind=TradeKind.BUY,
        ...     quantity=Decimal("10"),
        ...     price_per_unit=Decimal("150.00"),
        ...     total_amount=Decimal("1500.00"),
        ...     fees=Decimal("1.00"),
        ...     executed_at=datetime(2024, 1, 15, 10, 30),
        ... )
    """

    trade_id: str = Field(default_factory=lambda: str(uuid4()))
    symbol: str
    kind: TradeKind
    quantity: Decimal = Decimal("0")
    price_per_unit: Decimal = Decimal("0")
    total_amount: Decimal = Decimal("0")
    fees: Decimal = Decimal("0")
    executed_at: datetime
    option_details: OptionDetails | None = None

    @field_validator("symbol")
    @classmethod
    def normalize_symbol(cls, v: str) -> str:
        """Symbols are compared upper-case."""
        return v.strip().upper()

    @field_validator("executed_at")
    @classmethod
    def normalize_executed_at(cls, v: datetime) -> datetime:
        """Store timestamps as naive UTC so mixed inputs stay comparable."""
        if v.tzinfo is not None:
            return v.astimezone(timezone.utc).replace(tzinfo=None)
        return v

    @field_validator("quantity")
    @classmethod
    def validate_quantity(cls, v: Decimal) -> Decimal:
        """Validate quantity is a non-negative magnitude."""
        if v < 0:
            raise ValueError(f"Quantity must be non-negative, got {v}")
        return v

    @field_validator("fees")
    @classmethod
    def validate_fees(cls, v: Decimal) -> Decimal:
        """Validate fees are non-negative."""
        if v < 0:
            raise ValueError(f"Fees must be non-negative, got {v}")
        return v

    model_config = ConfigDict(frozen=True)


class Lot(BaseModel):
    """
    Discrete block of shares for FIFO accounting.

    Fees paid on the buy stay attached to the lot (amortized over its shares)
    so that cost_per_share is fixed at creation. When a lot is partially
    consumed it is replaced by a smaller copy carrying the proportional
    remainder of its fees.

    Attributes:
        shares: Shares remaining in lot
        price: Purchase price per share
        fees: Buy fees still allocated to the remaining shares
        acquired_at: When the lot was bought
        source_trade_id: BUY event that created this lot
    """

    shares: Decimal
    price: Decimal
    fees: Decimal = Decimal("0")
    acquired_at: datetime
    source_trade_id: str | None = None

    @field_validator("shares")
    @classmethod
    def validate_shares(cls, v: Decimal) -> Decimal:
        """Validate lot is non-empty."""
        if v <= 0:
            raise ValueError(f"Lot shares must be positive, got {v}")
        return v

    @property
    def cost_per_share(self) -> Decimal:
        """Price plus amortized per-share fee."""
        return self.price + self.fees / self.shares

    @property
    def cost_basis(self) -> Decimal:
        """Total dollar basis of the remaining shares."""
        return self.shares * self.price + self.fees

    model_config = ConfigDict(frozen=True)


class PositionState(BaseModel):
    """
    Position for one symbol after replaying its trades.

    adjusted_cost_basis nets every cash return against the basis:
    cost_basis - options_premium_net - dividends_received - realized_pl.

    Attributes:
        symbol: Ticker symbol (None when replayed without one)
        method: Accounting convention used
        shares: Current holdings (never negative)
        cost_basis: Total basis of current holdings
        avg_cost_per_share: cost_basis / shares (0 when flat)
        realized_pl: Cumulative P/L from SELL events
        options_premium_net: Net option premium (positive = received)
        dividends_received: Cumulative dividends
        adjusted_cost_basis: Basis net of premiums, dividends and realized P/L
        lots: Open lots, oldest first (FIFO only)
    """

    symbol: str | None = None
    method: CostBasisMethod
    shares: Decimal = Decimal("0")
    cost_basis: Decimal = Decimal("0")
    avg_cost_per_share: Decimal = Decimal("0")
    realized_pl: Decimal = Decimal("0")
    options_premium_net: Decimal = Decimal("0")
    dividends_received: Decimal = Decimal("0")
    adjusted_cost_basis: Decimal = Decimal("0")
    lots: list[Lot] = Field(default_factory=list)

    @property
    def is_flat(self) -> bool:
        """True when no shares are held."""
        return self.shares <= 0

    @property
    def adjusted_cost_per_share(self) -> Decimal:
        """Adjusted basis per held share (0 when flat)."""
        if self.shares <= 0:
            return Decimal("0")
        return self.adjusted_cost_basis / self.shares

    model_config = ConfigDict(frozen=True)


class TradeWithPL(BaseModel):
    """
    Trade annotated with its P/L and the running position after it.

    Attributes:
        trade: Originating event
        realized_pl: P/L realized by this event (SELL only, else 0)
        cash_flow: Net cash effect (negative = money out)
        running_shares: Shares held after this event
        running_cost_per_share: Average cost per share after this event
        running_adjusted_cost_per_share: Adjusted cost per share after this event
    """

    trade: TradeEvent
    realized_pl: Decimal = Decimal("0")
    cash_flow: Decimal = Decimal("0")
    running_shares: Decimal = Decimal("0")
    running_cost_per_share: Decimal = Decimal("0")
    running_adjusted_cost_per_share: Decimal = Decimal("0")

    model_config = ConfigDict(frozen=True)
