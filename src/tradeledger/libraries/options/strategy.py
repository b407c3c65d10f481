"""Multi-leg option strategy analytics.

Combines option legs into a terminal payoff curve, net debit/credit,
max profit/loss, breakevens and aggregated Greeks.

Every curve-derived metric (extrema, unlimited flags, breakevens) is read
off the same sampled payoff curve. Unlimited profit/loss is detected from
the slope at the sampled edges, so a bounded strategy whose flat region
lies outside [0.5x, 1.5x] the current price is reported as unlimited.

Usage:
    >>> legs = [
    ...     StrategyLeg(side="buy", option_type="call", strike=100, premium=5.0, implied_volatility=0.3),
    ...     StrategyLeg(side="sell", option_type="call", strike=110, premium=2.0, implied_volatility=0.28),
    ... ]
    >>> analysis = analyze_strategy(legs, stock_price=100.0, time_to_expiry=30 / 365, risk_free_rate=0.0425)
    >>> analysis.net_debit_credit
    -300.0
"""

from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from tradeledger.libraries.options.chain import OptionChain, find_contract, mid_price
from tradeledger.libraries.options.pricing import BlackScholesParams, OptionType, black_scholes, intrinsic_value

CONTRACT_MULTIPLIER = 100.0
DEFAULT_CURVE_POINTS = 200
CURVE_LOW = 0.5
CURVE_HIGH = 1.5
SLOPE_EPSILON = 0.01
FALLBACK_IV = 0.3


class LegSide(str, Enum):
    """Whether the leg is bought or written."""

    BUY = "buy"
    SELL = "sell"


class StrikeOffset(str, Enum):
    """Strike position relative to the at-the-money strike."""

    ATM = "atm"
    OTM1 = "otm1"
    OTM2 = "otm2"
    ITM1 = "itm1"
    ITM2 = "itm2"


class StrategyLeg(BaseModel):
    """
    One option position within a strategy.

    Attributes:
        leg_id: Identifier for display
        side: buy or sell
        option_type: call or put
        strike: Strike price
        quantity: Contracts
        premium: Premium per share paid/received
        implied_volatility: IV as decimal (0 = unknown, leg skipped for Greeks)
    """

    leg_id: str = Field(default_factory=lambda: str(uuid4())[:8])
    side: LegSide
    option_type: OptionType
    strike: float
    quantity: float = 1.0
    premium: float = 0.0
    implied_volatility: float = 0.0

    @property
    def direction(self) -> int:
        """+1 for bought legs, -1 for written legs."""
        return 1 if self.side == LegSide.BUY else -1

    model_config = ConfigDict(frozen=True)


class PayoffPoint(BaseModel):
    """Strategy P/L at one hypothetical terminal stock price."""

    stock_price: float
    pnl: float

    model_config = ConfigDict(frozen=True)


class StrategyGreeks(BaseModel):
    """Position-level Greeks (already scaled by quantity and multiplier)."""

    delta: float = 0.0
    gamma: float = 0.0
    theta: float = 0.0
    vega: float = 0.0
    rho: float = 0.0

    model_config = ConfigDict(frozen=True)


class StrategyAnalysis(BaseModel):
    """
    Combined risk profile of a strategy.

    Attributes:
        legs: Analysed legs
        net_debit_credit: Positive = net credit received, negative = net debit paid
        max_profit: Highest sampled P/L
        max_loss: Lowest sampled P/L
        max_profit_unlimited: Profit still rising at a sampled edge
        max_loss_unlimited: Loss still deepening at a sampled edge
        breakevens: Zero crossings, ascending, rounded to cents
        greeks: Aggregated Greeks
        payoff_curve: Sampled terminal payoff
    """

    legs: list[StrategyLeg] = Field(default_factory=list)
    net_debit_credit: float = 0.0
    max_profit: float = 0.0
    max_loss: float = 0.0
    max_profit_unlimited: bool = False
    max_loss_unlimited: bool = False
    breakevens: list[float] = Field(default_factory=list)
    greeks: StrategyGreeks = Field(default_factory=StrategyGreeks)
    payoff_curve: list[PayoffPoint] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class PresetLeg(BaseModel):
    """Leg template resolved against live strikes at selection time."""

    side: LegSide
    option_type: OptionType
    strike_offset: StrikeOffset
    quantity: float = 1.0

    model_config = ConfigDict(frozen=True)


class StrategyPreset(BaseModel):
    """Named multi-leg template."""

    name: str
    legs: list[PresetLeg]

    model_config = ConfigDict(frozen=True)


def _preset(name: str, *legs: tuple[str, str, str]) -> StrategyPreset:
    return StrategyPreset(
        name=name,
        legs=[PresetLeg(side=side, option_type=option_type, strike_offset=offset) for side, option_type, offset in legs],
    )


STRATEGY_PRESETS: dict[str, StrategyPreset] = {
    preset.name: preset
    for preset in (
        _preset("Bull Call Spread", ("buy", "call", "atm"), ("sell", "call", "otm1")),
        _preset("Bear Put Spread", ("buy", "put", "atm"), ("sell", "put", "otm1")),
        _preset("Long Straddle", ("buy", "call", "atm"), ("buy", "put", "atm")),
        _preset("Long Strangle", ("buy", "call", "otm1"), ("buy", "put", "otm1")),
        _preset(
            "Iron Condor",
            ("buy", "put", "otm2"),
            ("sell", "put", "otm1"),
            ("sell", "call", "otm1"),
            ("buy", "call", "otm2"),
        ),
    )
}


# ==================== Payoff ====================


def leg_payoff_at_expiry(leg: StrategyLeg, stock_price: float) -> float:
    """Leg P/L at expiration for a terminal stock price (x100 per contract)."""
    intrinsic = intrinsic_value(stock_price, leg.strike, leg.option_type)
    return leg.direction * (intrinsic - leg.premium) * leg.quantity * CONTRACT_MULTIPLIER


def payoff_at_expiry(legs: list[StrategyLeg], stock_price: float) -> float:
    """Sum of all legs' payoff at expiration."""
    return sum((leg_payoff_at_expiry(leg, stock_price) for leg in legs), 0.0)


def payoff_curve(
    legs: list[StrategyLeg],
    current_price: float,
    num_points: int = DEFAULT_CURVE_POINTS,
) -> list[PayoffPoint]:
    """
    Sample terminal payoff uniformly over [0.5x, 1.5x] the current price.

    Args:
        legs: Strategy legs
        current_price: Current underlying price
        num_points: Samples (>= 2 for a proper curve; 1 samples current price only)

    Returns:
        Ordered payoff points, lowest stock price first
    """
    if num_points <= 0:
        return []
    if num_points == 1:
        return [PayoffPoint(stock_price=current_price, pnl=payoff_at_expiry(legs, current_price))]

    low = current_price * CURVE_LOW
    high = current_price * CURVE_HIGH
    step = (high - low) / (num_points - 1)

    points = []
    for i in range(num_points):
        price = low + step * i
        points.append(PayoffPoint(stock_price=price, pnl=payoff_at_expiry(legs, price)))
    return points


def net_debit_credit(legs: list[StrategyLeg]) -> float:
    """Net premium: negative = net debit (you pay), positive = net credit (you receive)."""
    return sum((-leg.direction * leg.premium * leg.quantity * CONTRACT_MULTIPLIER for leg in legs), 0.0)


def max_profit_loss(curve: list[PayoffPoint]) -> tuple[float, float, bool, bool]:
    """
    Scan a payoff curve for extrema and edge-slope unlimited risk/reward.

    Args:
        curve: Sampled payoff curve

    Returns:
        Tuple of (max_profit, max_loss, max_profit_unlimited, max_loss_unlimited)
    """
    if len(curve) < 2:
        pnl = curve[0].pnl if curve else 0.0
        return pnl, pnl, False, False

    pnls = [p.pnl for p in curve]
    max_profit = max(pnls)
    max_loss = min(pnls)

    left_slope = pnls[1] - pnls[0]
    right_slope = pnls[-1] - pnls[-2]

    max_profit_unlimited = (right_slope > SLOPE_EPSILON and pnls[-1] == max_profit) or (
        left_slope < -SLOPE_EPSILON and pnls[0] == max_profit
    )
    max_loss_unlimited = (right_slope < -SLOPE_EPSILON and pnls[-1] == max_loss) or (
        left_slope > SLOPE_EPSILON and pnls[0] == max_loss
    )

    return max_profit, max_loss, max_profit_unlimited, max_loss_unlimited


def breakevens(curve: list[PayoffPoint]) -> list[float]:
    """
    Linear-interpolated zero crossings of the payoff curve.

    A sample sitting exactly on zero is reported once, and segments lying
    flat on zero are not crossings.

    Returns:
        Breakeven stock prices, ascending, rounded to cents
    """
    found: list[float] = []
    for prev, curr in zip(curve, curve[1:]):
        if prev.pnl == 0 and curr.pnl == 0:
            continue
        if (prev.pnl <= 0 <= curr.pnl) or (prev.pnl >= 0 >= curr.pnl):
            ratio = abs(prev.pnl) / (abs(prev.pnl) + abs(curr.pnl))
            price = round(prev.stock_price + ratio * (curr.stock_price - prev.stock_price), 2)
            if not found or found[-1] != price:
                found.append(price)
    return sorted(found)


def aggregated_greeks(
    legs: list[StrategyLeg],
    stock_price: float,
    time_to_expiry: float,
    risk_free_rate: float,
) -> StrategyGreeks:
    """
    Sum Black-Scholes Greeks across legs, signed by side and scaled by quantity x 100.

    Legs without IV, or any leg once time_to_expiry <= 0, contribute nothing.
    """
    totals = {"delta": 0.0, "gamma": 0.0, "theta": 0.0, "vega": 0.0, "rho": 0.0}

    for leg in legs:
        if leg.implied_volatility <= 0 or time_to_expiry <= 0:
            continue

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
        multiplier = leg.direction * leg.quantity * CONTRACT_MULTIPLIER
        for greek in totals:
            totals[greek] += getattr(result, greek) * multiplier

    return StrategyGreeks(**totals)


# ==================== Strikes & presets ====================

_OFFSET_STEPS = {
    StrikeOffset.ATM: 0,
    StrikeOffset.OTM1: 1,
    StrikeOffset.OTM2: 2,
    StrikeOffset.ITM1: -1,
    StrikeOffset.ITM2: -2,
}


def resolve_strike_offset(
    offset: StrikeOffset | str,
    option_type: OptionType | str,
    stock_price: float,
    strikes: list[float],
) -> float:
    """
    Map an offset token to a listed strike.

    ATM is the strike nearest the stock price (first minimum wins). OTM steps
    toward higher strikes for calls and lower strikes for puts; ITM the other
    way. The step clamps at either end of the strike list.

    Args:
        offset: atm, otm1, otm2, itm1 or itm2
        option_type: call or put
        stock_price: Current underlying price
        strikes: Available strikes (any order)

    Returns:
        Resolved strike, or stock_price when no strikes are available
    """
    if not strikes:
        return stock_price

    ordered = sorted(strikes)

    atm_index = 0
    min_distance = float("inf")
    for i, strike in enumerate(ordered):
        distance = abs(strike - stock_price)
        if distance < min_distance:
            min_distance = distance
            atm_index = i

    step = _OFFSET_STEPS[StrikeOffset(offset)]
    if OptionType(option_type) == OptionType.PUT:
        step = -step

    target = max(0, min(len(ordered) - 1, atm_index + step))
    return ordered[target]


def build_preset_legs(
    preset: StrategyPreset | str,
    stock_price: float,
    chain: OptionChain,
) -> list[StrategyLeg]:
    """
    Resolve a preset against an option chain.

    Each leg takes its premium (mid price, rounded to cents) and IV from the
    contract listed at the resolved strike; a missing contract yields a zero
    premium and IV falls back to 30%.

    Raises:
        KeyError: If preset is an unknown name
    """
    if isinstance(preset, str):
        preset = STRATEGY_PRESETS[preset]

    strikes = chain.strikes
    legs = []
    for template in preset.legs:
        strike = resolve_strike_offset(template.strike_offset, template.option_type, stock_price, strikes)
        contract = find_contract(chain.contracts(template.option_type), strike)
        iv = contract.implied_volatility if contract is not None else 0.0
        legs.append(
            StrategyLeg(
                side=template.side,
                option_type=template.option_type,
                strike=strike,
                quantity=template.quantity,
                premium=round(mid_price(contract), 2),
                implied_volatility=iv or FALLBACK_IV,
            )
        )
    return legs


# ==================== Analysis ====================


def analyze_strategy(
    legs: list[StrategyLeg],
    stock_price: float,
    time_to_expiry: float,
    risk_free_rate: float,
    num_points: int = DEFAULT_CURVE_POINTS,
) -> StrategyAnalysis:
    """
    Full risk profile of a strategy.

    Args:
        legs: Strategy legs
        stock_price: Current underlying price
        time_to_expiry: Years to expiry for Greeks
        risk_free_rate: Annual rate as decimal
        num_points: Payoff curve resolution

    Returns:
        StrategyAnalysis (all zeros and an empty curve when there are no legs)
    """
    if not legs:
        return StrategyAnalysis(legs=[])

    curve = payoff_curve(legs, stock_price, num_points)
    max_profit, max_loss, profit_unlimited, loss_unlimited = max_profit_loss(curve)

    return StrategyAnalysis(
        legs=list(legs),
        net_debit_credit=net_debit_credit(legs),
        max_profit=max_profit,
        max_loss=max_loss,
        max_profit_unlimited=profit_unlimited,
        max_loss_unlimited=loss_unlimited,
        breakevens=breakevens(curve),
        greeks=aggregated_greeks(legs, stock_price, time_to_expiry, risk_free_rate),
        payoff_curve=curve,
    )
