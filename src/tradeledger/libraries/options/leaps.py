"""Deep in-the-money LEAP call screening.

A LEAP is a long-dated option (more than 180 days to expiry). Deep ITM LEAP
calls are used as a stock replacement: high delta, little extrinsic value.
The screen prices every ITM call with Black-Scholes and reports what the
extrinsic value costs per year.
"""

from datetime import date, timedelta
from enum import Enum

from pydantic import BaseModel, ConfigDict

from tradeledger.libraries.options.chain import OptionContract, mid_price
from tradeledger.libraries.options.pricing import BlackScholesParams, OptionType, black_scholes, days_to_years

LEAP_MIN_DAYS = 180
DEFAULT_RISK_FREE_RATE = 0.0425
DEFAULT_MIN_DELTA = 0.70
DEFAULT_IV = 0.30
SWEET_SPOT_DELTA = (0.80, 0.90)


class LeapCandidate(BaseModel):
    """
    Screened ITM call.

    Attributes:
        strike: Strike price
        premium: Mid price
        intrinsic: stock_price - strike
        extrinsic: Time value (premium - intrinsic, floored at 0)
        extrinsic_pct: Extrinsic as % of premium
        delta: Black-Scholes delta
        leverage: stock_price / premium
        annualized_cost: Extrinsic as % of stock price per year held
        break_even: strike + premium
        break_even_pct: Move needed to break even at expiry, %
        open_interest: Open contracts
    """

    strike: float
    premium: float
    intrinsic: float
    extrinsic: float
    extrinsic_pct: float
    delta: float
    leverage: float
    annualized_cost: float
    break_even: float
    break_even_pct: float
    open_interest: int

    model_config = ConfigDict(frozen=True)


class Trend(str, Enum):
    """Moving-average trend alignment."""

    UPTREND = "Uptrend"
    DOWNTREND = "Downtrend"
    MIXED = "Mixed"


def leap_expirations(expirations: list[date], today: date, min_days: int = LEAP_MIN_DAYS) -> list[date]:
    """Expirations strictly more than min_days away, in input order."""
    cutoff = today + timedelta(days=min_days)
    return [expiration for expiration in expirations if expiration > cutoff]


def find_leap_candidates(
    calls: list[OptionContract],
    stock_price: float,
    days_to_expiry: int,
    risk_free_rate: float = DEFAULT_RISK_FREE_RATE,
    min_delta: float = DEFAULT_MIN_DELTA,
    default_iv: float = DEFAULT_IV,
) -> list[LeapCandidate]:
    """
    Screen ITM calls for stock replacement.

    Calls are kept when strike < stock price, the mid price is positive and
    the Black-Scholes delta is at least min_delta. Contracts without IV are
    priced at default_iv.

    Returns:
        Candidates sorted by strike, highest first (empty for bad inputs)
    """
    if stock_price <= 0 or days_to_expiry <= 0:
        return []

    t = days_to_years(days_to_expiry)
    candidates = []
    for contract in calls:
        if contract.strike >= stock_price:
            continue

        premium = mid_price(contract)
        if premium <= 0:
            continue

        result = black_scholes(
            BlackScholesParams(
                spot=stock_price,
                strike=contract.strike,
                time_to_expiry=t,
                risk_free_rate=risk_free_rate,
                volatility=contract.implied_volatility or default_iv,
                option_type=OptionType.CALL,
            )
        )
        if result.delta < min_delta:
            continue

        intrinsic = stock_price - contract.strike
        extrinsic = max(premium - intrinsic, 0.0)
        break_even = contract.strike + premium
        candidates.append(
            LeapCandidate(
                strike=contract.strike,
                premium=premium,
                intrinsic=intrinsic,
                extrinsic=extrinsic,
                extrinsic_pct=extrinsic / premium * 100,
                delta=result.delta,
                leverage=stock_price / premium,
                annualized_cost=(extrinsic / stock_price) / t * 100,
                break_even=break_even,
                break_even_pct=(break_even - stock_price) / stock_price * 100,
                open_interest=contract.open_interest,
            )
        )

    return sorted(candidates, key=lambda c: c.strike, reverse=True)


def select_sweet_spot(
    candidates: list[LeapCandidate],
    delta_range: tuple[float, float] = SWEET_SPOT_DELTA,
) -> LeapCandidate | None:
    """Cheapest annualized extrinsic among candidates inside the delta band."""
    low, high = delta_range
    eligible = [c for c in candidates if low <= c.delta <= high]
    if not eligible:
        return None
    return min(eligible, key=lambda c: c.annualized_cost)


def classify_trend(price: float, sma_short: float, sma_long: float) -> Trend:
    """Uptrend when price > short SMA > long SMA, downtrend when reversed, else mixed."""
    if price > sma_short > sma_long:
        return Trend.UPTREND
    if price < sma_short < sma_long:
        return Trend.DOWNTREND
    return Trend.MIXED
