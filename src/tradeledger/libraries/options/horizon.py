"""Target-price horizon analysis.

Answers "if the stock reaches X by day N, what is each candidate strategy
worth?" by re-pricing every leg with Black-Scholes at the remaining time to
expiry, and picks the best strategy per horizon.
"""

from pydantic import BaseModel, ConfigDict, Field

from tradeledger.libraries.options.pricing import BlackScholesParams, black_scholes, days_to_years
from tradeledger.libraries.options.strategy import CONTRACT_MULTIPLIER, StrategyLeg

# Minimum move suggested for targets when momentum is small
MIN_TARGET_MOVE = 0.05
BEARISH_FLOOR = 0.9


class Horizon(BaseModel):
    """Point in time at which a strategy is valued."""

    label: str
    days_from_now: int

    model_config = ConfigDict(frozen=True)


class HorizonResult(BaseModel):
    """Strategy profit at one horizon."""

    label: str
    days_left: int
    profit: float
    return_pct: float

    model_config = ConfigDict(frozen=True)


class NamedStrategy(BaseModel):
    """Candidate strategy."""

    name: str
    legs: list[StrategyLeg]

    model_config = ConfigDict(frozen=True)


class StrategyHorizonResults(BaseModel):
    """All horizon results for one strategy."""

    strategy: NamedStrategy
    cost: float
    horizons: list[HorizonResult] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class BestPick(BaseModel):
    """Highest-return strategy at a horizon."""

    label: str
    strategy: str
    return_pct: float

    model_config = ConfigDict(frozen=True)


def strategy_cost(legs: list[StrategyLeg]) -> float:
    """Up-front cost: positive = debit paid, negative = credit received."""
    return sum((leg.direction * leg.premium * leg.quantity * CONTRACT_MULTIPLIER for leg in legs), 0.0)


def strategy_value(
    legs: list[StrategyLeg],
    stock_price: float,
    time_to_expiry: float,
    risk_free_rate: float,
) -> float:
    """Mark-to-model value of the legs (bought legs positive, written legs negative)."""
    value = 0.0
    for leg in legs:
        result = black_scholes(
            BlackScholesParams(
                spot=stock_price,
                strike=leg.strike,
                time_to_expiry=time_to_expiry,
                risk_free_rate=risk_free_rate,
                volatility=leg.implied_volatility,
                option_type=leg.option_type,
            )
        )
        value += leg.direction * result.price * leg.quantity * CONTRACT_MULTIPLIER
    return value


def evaluate_horizons(
    strategy: NamedStrategy,
    target_price: float,
    days_to_expiry: int,
    horizons: list[Horizon],
    risk_free_rate: float,
) -> StrategyHorizonResults:
    """
    Value a strategy at each horizon assuming the stock sits at target_price.

    Time left is clamped at zero, so horizons past expiry use intrinsic value.
    Return is measured against |cost| and is 0 for a zero-cost strategy.
    """
    cost = strategy_cost(strategy.legs)
    results = []
    for horizon in horizons:
        days_left = max(days_to_expiry - horizon.days_from_now, 0)
        value = strategy_value(strategy.legs, target_price, days_to_years(days_left), risk_free_rate)
        profit = value - cost
        return_pct = profit / abs(cost) * 100 if cost != 0 else 0.0
        results.append(HorizonResult(label=horizon.label, days_left=days_left, profit=profit, return_pct=return_pct))

    return StrategyHorizonResults(strategy=strategy, cost=cost, horizons=results)


def best_picks(results: list[StrategyHorizonResults]) -> list[BestPick]:
    """Highest-return strategy per horizon (first strategy wins ties)."""
    if not results:
        return []

    picks = []
    for index, horizon in enumerate(results[0].horizons):
        best = max(results, key=lambda r: r.horizons[index].return_pct)
        picks.append(
            BestPick(label=horizon.label, strategy=best.strategy.name, return_pct=best.horizons[index].return_pct)
        )
    return picks


def find_nearest(value: float, strikes: list[float]) -> float:
    """Strike closest to value (first minimum wins); value itself when no strikes."""
    if not strikes:
        return value
    return min(strikes, key=lambda strike: abs(strike - value))


def suggest_targets(price: float, sma_long: float, strikes: list[float]) -> tuple[float, float]:
    """
    Suggest bullish and bearish target prices from trend momentum.

    Momentum is the distance from the long SMA. Targets move at least 5% from
    the current price; a bearish target below zero falls back to 90% of price.
    Targets snap to the nearest strike when strikes are available, otherwise
    they are rounded to cents.

    Returns:
        Tuple of (bullish_target, bearish_target)
    """
    momentum = abs(price - sma_long)

    bull = max(price + momentum, price * (1 + MIN_TARGET_MOVE))
    bear = min(price - momentum, price * (1 - MIN_TARGET_MOVE))
    if bear < 0:
        bear = price * BEARISH_FLOOR

    if strikes:
        return find_nearest(bull, strikes), find_nearest(bear, strikes)
    return round(bull, 2), round(bear, 2)
