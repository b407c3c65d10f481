"""Portfolio aggregator.

Key components:
- PortfolioService: summarize / rolling_snapshot / backfill_snapshots
- price_at_or_before, window_start, chart_points: Snapshot helpers
- IPriceFeed, fetch_quotes, fetch_histories: Price feed boundary
- Models: CostBasisSettings, Quote, PricePoint, summaries and snapshots
"""

from tradeledger.services.portfolio.models import (
    ChartWindow,
    CostBasisSettings,
    DailySnapshot,
    PLChartPoint,
    PortfolioSummary,
    PositionSummary,
    PricePoint,
    Quote,
    SnapshotPosition,
)
from tradeledger.services.portfolio.price_feed import IPriceFeed, fetch_histories, fetch_quotes
from tradeledger.services.portfolio.service import (
    PortfolioService,
    chart_points,
    group_by_symbol,
    price_at_or_before,
    window_start,
)

__all__ = [
    # Service
    "PortfolioService",
    "chart_points",
    "group_by_symbol",
    "price_at_or_before",
    "window_start",
    # Price feed
    "IPriceFeed",
    "fetch_quotes",
    "fetch_histories",
    # Models
    "ChartWindow",
    "CostBasisSettings",
    "DailySnapshot",
    "PLChartPoint",
    "PortfolioSummary",
    "PositionSummary",
    "PricePoint",
    "Quote",
    "SnapshotPosition",
]
