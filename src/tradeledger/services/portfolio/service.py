"""Portfolio aggregator.

Fans the cost-basis ledger out across every traded symbol and merges in
prices supplied by the caller:

- summarize(): instantaneous view from current quotes
- rolling_snapshot(): one historical day from close prices
- backfill_snapshots(): day-by-day series, one snapshot per call step

Missing prices never abort aggregation; they zero the affected symbol's
market value and unrealized P/L.
"""

from bisect import bisect_right
from collections.abc import Iterable, Iterator, Mapping, Sequence
from datetime import date, timedelta
from decimal import Decimal

from tradeledger.services.ledger import CostBasisLedger, ICostBasisLedger, PositionState, TradeEvent
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
from tradeledger.system import LoggerFactory

logger = LoggerFactory.get_logger()

ZERO = Decimal("0")
HUNDRED = Decimal("100")
ALL_TIME_START = date(2000, 1, 1)

_WINDOW_MONTHS = {
    ChartWindow.ONE_MONTH: 1,
    ChartWindow.THREE_MONTHS: 3,
    ChartWindow.SIX_MONTHS: 6,
    ChartWindow.ONE_YEAR: 12,
}


def group_by_symbol(events: Iterable[TradeEvent]) -> dict[str, list[TradeEvent]]:
    """Group events per symbol, keeping first-seen symbol order."""
    grouped: dict[str, list[TradeEvent]] = {}
    for event in events:
        grouped.setdefault(event.symbol, []).append(event)
    return grouped


def price_at_or_before(history: Sequence[PricePoint], as_of: date, presorted: bool = False) -> Decimal:
    """
    Close price for as_of from a daily series.

    Exact date match first, otherwise the latest close dated before as_of.
    Returns 0 when the series has nothing on or before as_of.

    Args:
        history: Daily closes
        as_of: Target date
        presorted: history is already ascending by date
    """
    series = history if presorted else sorted(history, key=lambda p: p.date)
    index = bisect_right(series, as_of, key=lambda p: p.date)
    return series[index - 1].price if index else ZERO


def _sorted_histories(price_history: Mapping[str, Sequence[PricePoint]]) -> dict[str, list[PricePoint]]:
    return {symbol: sorted(points, key=lambda p: p.date) for symbol, points in price_history.items()}


def _unrealized(state: PositionState, price: Decimal) -> tuple[Decimal, Decimal]:
    """(market_value, unrealized_pl) for a position at price."""
    market_value = state.shares * price
    if state.shares > 0 and price > 0:
        return market_value, market_value - state.cost_basis
    return market_value, ZERO


def _months_before(day: date, months: int) -> date:
    """Same day-of-month `months` earlier, clamped to the month's last day."""
    month_index = day.year * 12 + day.month - 1 - months
    year, month = divmod(month_index, 12)
    month += 1
    next_month = date(year + (month // 12), month % 12 + 1, 1)
    last_day = (next_month - timedelta(days=1)).day
    return date(year, month, min(day.day, last_day))


def window_start(window: ChartWindow | str, today: date) -> date:
    """First date included in a chart window ending today."""
    window = ChartWindow(window)
    if window == ChartWindow.ALL:
        return ALL_TIME_START
    if window == ChartWindow.YEAR_TO_DATE:
        return date(today.year, 1, 1)
    return _months_before(today, _WINDOW_MONTHS[window])


def chart_points(
    snapshots: Iterable[DailySnapshot],
    window: ChartWindow | str,
    today: date,
) -> list[PLChartPoint]:
    """
    Chart rows for snapshots inside the window, ascending by date.

    Args:
        snapshots: Stored daily snapshots in any order
        window: 1M, 3M, 6M, YTD, 1Y or ALL
        today: Window end (inclusive)
    """
    start = window_start(window, today)
    selected = sorted((s for s in snapshots if start <= s.date <= today), key=lambda s: s.date)
    return [
        PLChartPoint(
            date=s.date,
            total_value=s.total_value,
            total_cost_basis=s.total_cost_basis,
            realized_pl=s.realized_pl,
            unrealized_pl=s.unrealized_pl,
            total_pl=s.total_pl,
        )
        for s in selected
    ]


class PortfolioService:
    """
    Aggregates ledger positions across symbols.

    The service holds no portfolio state; prices and settings are passed
    per call so one instance can serve any number of users.

    Example:
        >>> service = PortfolioService()
        >>> summary = service.summarize(trades, CostBasisSettings(), {"AAPL": Quote(symbol="AAPL", price=Decimal("190"))})
        >>> print(summary.total_value, summary.total_return)
    """

    def __init__(self, ledger: ICostBasisLedger | None = None):
        """
        Initialize the aggregator.

        Args:
            ledger: Cost-basis ledger (defaults to CostBasisLedger)
        """
        self._ledger = ledger or CostBasisLedger()

    # ==================== Instantaneous Summary ====================

    def summarize(
        self,
        events: Iterable[TradeEvent],
        settings: CostBasisSettings,
        quotes: Mapping[str, Quote],
    ) -> PortfolioSummary | None:
        """
        Summarize every traded symbol at current prices.

        Args:
            events: All trade events, any symbols, any order
            settings: Cost-basis method resolution
            quotes: symbol -> current quote (missing symbols price at 0)

        Returns:
            PortfolioSummary, or None when there are no events
        """
        grouped = group_by_symbol(events)
        if not grouped:
            return None

        positions = []
        today_return = ZERO
        for symbol, trades in grouped.items():
            quote = quotes.get(symbol)
            summary = self._summarize_position(symbol, trades, settings, quote)
            positions.append(summary)
            if summary.shares > 0 and quote is not None:
                today_return += quote.daily_change * summary.shares

        total_value = sum((p.market_value for p in positions), ZERO)
        previous_value = total_value - today_return
        today_return_percent = today_return / previous_value * HUNDRED if previous_value > 0 else ZERO

        result = PortfolioSummary(
            total_value=total_value,
            total_cost_basis=sum((p.cost_basis for p in positions), ZERO),
            total_realized_pl=sum((p.realized_pl for p in positions), ZERO),
            total_unrealized_pl=sum((p.unrealized_pl for p in positions), ZERO),
            total_options_premium=sum((p.options_premium_net for p in positions), ZERO),
            total_dividends=sum((p.dividends_received for p in positions), ZERO),
            today_return=today_return,
            today_return_percent=today_return_percent,
            positions=positions,
        )

        logger.info(
            "portfolio.summary.computed",
            symbols=len(positions),
            total_value=str(result.total_value),
            total_return=str(result.total_return),
        )
        return result

    def _summarize_position(
        self,
        symbol: str,
        trades: list[TradeEvent],
        settings: CostBasisSettings,
        quote: Quote | None,
    ) -> PositionSummary:
        method = settings.resolve(symbol)
        state = self._ledger.compute_position(trades, method, symbol)

        price = quote.price if quote is not None else ZERO
        if state.shares > 0 and price <= 0:
            logger.warning("portfolio.price.missing", symbol=symbol, shares=str(state.shares))

        market_value, unrealized_pl = _unrealized(state, price)
        total_return = state.realized_pl + unrealized_pl + state.options_premium_net + state.dividends_received
        total_return_percent = total_return / state.cost_basis * HUNDRED if state.cost_basis != 0 else ZERO

        return PositionSummary(
            symbol=symbol,
            company=(quote.name if quote is not None and quote.name else symbol),
            method=state.method,
            shares=state.shares,
            cost_basis=state.cost_basis,
            avg_cost_per_share=state.avg_cost_per_share,
            adjusted_cost_basis=state.adjusted_cost_basis,
            adjusted_cost_per_share=state.adjusted_cost_per_share,
            realized_pl=state.realized_pl,
            unrealized_pl=unrealized_pl,
            options_premium_net=state.options_premium_net,
            dividends_received=state.dividends_received,
            current_price=price,
            market_value=market_value,
            total_return=total_return,
            total_return_percent=total_return_percent,
            lots=state.lots,
        )

    # ==================== Historical Snapshots ====================

    def rolling_snapshot(
        self,
        events: Iterable[TradeEvent],
        as_of: date,
        settings: CostBasisSettings,
        price_history: Mapping[str, Sequence[PricePoint]],
    ) -> DailySnapshot | None:
        """
        Portfolio as of the end of one day.

        Only events executed on or before as_of are replayed. Each symbol is
        valued at its close on as_of, or the latest earlier close.

        Args:
            events: All trade events
            as_of: Snapshot date
            settings: Cost-basis method resolution
            price_history: symbol -> daily closes

        Returns:
            DailySnapshot, or None when nothing was traded by as_of
        """
        return self._snapshot(events, as_of, settings, _sorted_histories(price_history))

    def _snapshot(
        self,
        events: Iterable[TradeEvent],
        as_of: date,
        settings: CostBasisSettings,
        sorted_history: Mapping[str, list[PricePoint]],
    ) -> DailySnapshot | None:
        grouped = group_by_symbol(e for e in events if e.executed_at.date() <= as_of)
        if not grouped:
            return None

        total_value = total_cost_basis = realized_pl = unrealized_pl = premium = ZERO
        positions = []
        for symbol, trades in grouped.items():
            state = self._ledger.compute_position(trades, settings.resolve(symbol), symbol)
            price = price_at_or_before(sorted_history.get(symbol, []), as_of, presorted=True)
            market_value, unrealized = _unrealized(state, price)

            total_value += market_value
            total_cost_basis += state.cost_basis
            realized_pl += state.realized_pl
            unrealized_pl += unrealized
            premium += state.options_premium_net

            if state.shares > 0:
                positions.append(
                    SnapshotPosition(
                        symbol=symbol,
                        shares=state.shares,
                        cost_basis=state.cost_basis,
                        market_value=market_value,
                        realized_pl=state.realized_pl,
                        unrealized_pl=unrealized,
                    )
                )

        return DailySnapshot(
            date=as_of,
            total_value=total_value,
            total_cost_basis=total_cost_basis,
            realized_pl=realized_pl,
            unrealized_pl=unrealized_pl,
            options_premium_net=premium,
            positions=positions,
        )

    def backfill_snapshots(
        self,
        events: Iterable[TradeEvent],
        settings: CostBasisSettings,
        price_history: Mapping[str, Sequence[PricePoint]],
        start: date | None = None,
        end: date | None = None,
    ) -> Iterator[DailySnapshot]:
        """
        Yield one snapshot per day from the first trade (or start) to end.

        Days are produced lazily so the caller can persist each one and
        resume later by passing the next unsaved date as start.

        Args:
            events: All trade events
            settings: Cost-basis method resolution
            price_history: symbol -> daily closes
            start: First day to compute (clamped to the first trade date)
            end: Last day to compute (defaults to today)
        """
        events = list(events)
        if not events:
            return

        first_trade = min(e.executed_at.date() for e in events)
        day = max(start, first_trade) if start is not None else first_trade
        end = end or date.today()
        sorted_history = _sorted_histories(price_history)

        while day <= end:
            snapshot = self._snapshot(events, day, settings, sorted_history)
            if snapshot is not None:
                logger.debug("portfolio.backfill.day", date=day.isoformat(), total_value=str(snapshot.total_value))
                yield snapshot
            day += timedelta(days=1)
