"""Data models for the portfolio aggregator.

Defines:
- CostBasisSettings: Default method plus per-symbol overrides
- Quote / PricePoint: Market data handed in by the price-feed collaborator
- PositionSummary / PortfolioSummary: Instantaneous portfolio view
- SnapshotPosition / DailySnapshot: One day of the historical P/L series
- PLChartPoint: Chart-ready snapshot row
"""

from datetime import date
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tradeledger.services.ledger.models import CostBasisMethod, Lot


class CostBasisSettings(BaseModel):
    """
    Resolves the accounting method for each symbol.

    Attributes:
        default_method: Method for symbols without an override
        symbol_overrides: symbol -> method (override wins)

    Example:
        >>> settings = CostBasisSettings(default_method="AVERAGE", symbol_overrides={"TSLA": "FIFO"})
        >>> settings.resolve("TSLA")
        <CostBasisMethod.FIFO: 'FIFO'>
    """

    default_method: CostBasisMethod = CostBasisMethod.AVERAGE
    symbol_overrides: dict[str, CostBasisMethod] = Field(default_factory=dict)

    @field_validator("symbol_overrides")
    @classmethod
    def normalize_symbols(cls, v: dict[str, CostBasisMethod]) -> dict[str, CostBasisMethod]:
        """Override keys are compared upper-case."""
        return {symbol.strip().upper(): method for symbol, method in v.items()}

    def resolve(self, symbol: str) -> CostBasisMethod:
        """Method for symbol."""
        return self.symbol_overrides.get(symbol.upper(), self.default_method)

    model_config = ConfigDict(frozen=True)


class Quote(BaseModel):
    """
    Current quote for a symbol.

    Attributes:
        symbol: Ticker
        price: Last price (0 = unknown)
        daily_change: Per-share change since previous close
        name: Company name, if known
    """

    symbol: str
    price: Decimal = Decimal("0")
    daily_change: Decimal = Decimal("0")
    name: str | None = None

    model_config = ConfigDict(frozen=True)


class PricePoint(BaseModel):
    """Historical daily close."""

    date: date
    price: Decimal

    model_config = ConfigDict(frozen=True)


class PositionSummary(BaseModel):
    """
    Position for one symbol merged with its current price.

    Attributes:
        symbol: Ticker
        company: Display name (quote name, else symbol)
        method: Accounting method used
        shares: Shares held
        cost_basis: Basis of held shares
        avg_cost_per_share: cost_basis / shares
        adjusted_cost_basis: Basis net of premiums, dividends and realized P/L
        adjusted_cost_per_share: adjusted_cost_basis / shares
        realized_pl: Lifetime realized P/L
        unrealized_pl: market_value - cost_basis (0 without shares or price)
        options_premium_net: Net option premium received
        dividends_received: Lifetime dividends
        current_price: Price used for valuation (0 if missing)
        market_value: shares * current_price
        total_return: realized + unrealized + premiums + dividends
        total_return_percent: total_return / cost_basis * 100 (0 without basis)
        lots: Open FIFO lots
    """

    symbol: str
    company: str
    method: CostBasisMethod
    shares: Decimal
    cost_basis: Decimal
    avg_cost_per_share: Decimal
    adjusted_cost_basis: Decimal
    adjusted_cost_per_share: Decimal
    realized_pl: Decimal
    unrealized_pl: Decimal
    options_premium_net: Decimal
    dividends_received: Decimal
    current_price: Decimal
    market_value: Decimal
    total_return: Decimal
    total_return_percent: Decimal
    lots: list[Lot] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class PortfolioSummary(BaseModel):
    """
    Instantaneous portfolio view.

    Attributes:
        total_value: Sum of market values
        total_cost_basis: Sum of cost bases
        total_realized_pl: Sum of realized P/L
        total_unrealized_pl: Sum of unrealized P/L
        total_options_premium: Sum of net option premium
        total_dividends: Sum of dividends
        today_return: Sum of daily_change * shares over held positions
        today_return_percent: today_return vs yesterday's implied value, %
        positions: One summary per traded symbol
    """

    total_value: Decimal = Decimal("0")
    total_cost_basis: Decimal = Decimal("0")
    total_realized_pl: Decimal = Decimal("0")
    total_unrealized_pl: Decimal = Decimal("0")
    total_options_premium: Decimal = Decimal("0")
    total_dividends: Decimal = Decimal("0")
    today_return: Decimal = Decimal("0")
    today_return_percent: Decimal = Decimal("0")
    positions: list[PositionSummary] = Field(default_factory=list)

    @property
    def total_return(self) -> Decimal:
        """Realized + unrealized + premiums + dividends across the portfolio."""
        return self.total_realized_pl + self.total_unrealized_pl + self.total_options_premium + self.total_dividends

    model_config = ConfigDict(frozen=True)


class SnapshotPosition(BaseModel):
    """Held position inside a daily snapshot."""

    symbol: str
    shares: Decimal
    cost_basis: Decimal
    market_value: Decimal
    realized_pl: Decimal
    unrealized_pl: Decimal

    model_config = ConfigDict(frozen=True)


class DailySnapshot(BaseModel):
    """
    Portfolio state as of the end of one day.

    Attributes:
        date: Snapshot date
        total_value: Market value of holdings at that day's price
        total_cost_basis: Basis of holdings
        realized_pl: Cumulative realized P/L
        unrealized_pl: Unrealized P/L at that day's price
        options_premium_net: Cumulative net option premium
        positions: Held positions only
    """

    date: date
    total_value: Decimal = Decimal("0")
    total_cost_basis: Decimal = Decimal("0")
    realized_pl: Decimal = Decimal("0")
    unrealized_pl: Decimal = Decimal("0")
    options_premium_net: Decimal = Decimal("0")
    positions: list[SnapshotPosition] = Field(default_factory=list)

    @property
    def total_pl(self) -> Decimal:
        """Realized + unrealized."""
        return self.realized_pl + self.unrealized_pl

    model_config = ConfigDict(frozen=True)


class ChartWindow(str, Enum):
    """Lookback windows for the P/L chart."""

    ONE_MONTH = "1M"
    THREE_MONTHS = "3M"
    SIX_MONTHS = "6M"
    YEAR_TO_DATE = "YTD"
    ONE_YEAR = "1Y"
    ALL = "ALL"


class PLChartPoint(BaseModel):
    """Chart row derived from a DailySnapshot."""

    date: date
    total_value: Decimal
    total_cost_basis: Decimal
    realized_pl: Decimal
    unrealized_pl: Decimal
    total_pl: Decimal

    model_config = ConfigDict(frozen=True)
