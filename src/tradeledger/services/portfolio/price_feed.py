"""Price feed boundary.

The aggregator never fetches prices itself. Callers implement IPriceFeed
over whatever market-data source they use and gather prices with
fetch_quotes / fetch_histories, which run the blocking feed calls in worker
threads in small batches to stay under upstream rate limits.

A failing symbol is logged and left out of the result; the aggregator then
prices it at 0.
"""

import asyncio
from collections.abc import Callable, Sequence
from datetime import date
from typing import Protocol, TypeVar

from tradeledger.services.portfolio.models import PricePoint, Quote
from tradeledger.system import LoggerFactory

logger = LoggerFactory.get_logger()

DEFAULT_BATCH_SIZE = 4
DEFAULT_BATCH_DELAY = 0.25

T = TypeVar("T")


class IPriceFeed(Protocol):
    """Blocking market-data source."""

    def get_quote(self, symbol: str) -> Quote | None:
        """Current quote, or None when unavailable."""
        ...

    def get_history(self, symbol: str, start: date, end: date) -> list[PricePoint]:
        """Daily closes between start and end inclusive."""
        ...


async def _fetch_one(symbol: str, call: Callable[[str], T | None]) -> tuple[str, T | None, str | None]:
    """Returns (symbol, value, error); error is set whenever value is missing."""
    try:
        value = await asyncio.to_thread(call, symbol)
    except Exception as e:
        return symbol, None, str(e)
    return symbol, value, None if value is not None else "no data"


async def _fan_out(
    symbols: Sequence[str],
    call: Callable[[str], T | None],
    kind: str,
    batch_size: int,
    batch_delay: float,
) -> dict[str, T]:
    """Run call per symbol, batch_size at a time, sleeping between batches."""
    unique = list(dict.fromkeys(s.upper() for s in symbols))
    batch_size = max(batch_size, 1)
    results: dict[str, T] = {}

    for start in range(0, len(unique), batch_size):
        if start > 0 and batch_delay > 0:
            await asyncio.sleep(batch_delay)

        batch = unique[start : start + batch_size]
        for symbol, value, error in await asyncio.gather(*(_fetch_one(s, call) for s in batch)):
            if value is None:
                logger.warning("portfolio.price_feed.quote_failed", symbol=symbol, kind=kind, error=error)
                continue
            results[symbol] = value

    return results


async def fetch_quotes(
    feed: IPriceFeed,
    symbols: Sequence[str],
    batch_size: int = DEFAULT_BATCH_SIZE,
    batch_delay: float = DEFAULT_BATCH_DELAY,
) -> dict[str, Quote]:
    """
    Fetch current quotes for symbols.

    Args:
        feed: Market-data source
        symbols: Symbols to price (duplicates fetched once)
        batch_size: Concurrent requests per batch
        batch_delay: Seconds to wait between batches

    Returns:
        symbol -> Quote for every symbol that returned data
    """
    return await _fan_out(symbols, feed.get_quote, "quote", batch_size, batch_delay)


async def fetch_histories(
    feed: IPriceFeed,
    symbols: Sequence[str],
    start: date,
    end: date,
    batch_size: int = DEFAULT_BATCH_SIZE,
    batch_delay: float = DEFAULT_BATCH_DELAY,
) -> dict[str, list[PricePoint]]:
    """
    Fetch daily close series for symbols.

    Empty series count as missing data.

    Returns:
        symbol -> closes for every symbol that returned data
    """

    def history(symbol: str) -> list[PricePoint] | None:
        return feed.get_history(symbol, start, end) or None

    return await _fan_out(symbols, history, "history", batch_size, batch_delay)
