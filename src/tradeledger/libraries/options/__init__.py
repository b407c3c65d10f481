"""Options analytics library.

1. **Pricing** (`pricing.py`): Black-Scholes-Merton price and Greeks
2. **Strategy** (`strategy.py`): Multi-leg payoff, breakevens, Greeks, presets
3. **Chain** (`chain.py`): Option chain value objects, mid price
4. **Horizon** (`horizon.py`): Target-price valuation over time
5. **LEAPs** (`leaps.py`): Deep ITM LEAP call screening

Usage:
    >>> from tradeledger.libraries.options import StrategyLeg, analyze_strategy
    >>> analysis = analyze_strategy(legs, stock_price=100.0, time_to_expiry=0.08, risk_free_rate=0.0425)
    >>> print(analysis.breakevens, analysis.max_loss_unlimited)
"""

from tradeledger.libraries.options.chain import OptionChain, OptionContract, find_contract, mid_price
from tradeledger.libraries.options.horizon import (
    BestPick,
    Horizon,
    HorizonResult,
    NamedStrategy,
    StrategyHorizonResults,
    best_picks,
    evaluate_horizons,
    find_nearest,
    strategy_cost,
    suggest_targets,
)
from tradeledger.libraries.options.leaps import (
    LeapCandidate,
    Trend,
    classify_trend,
    find_leap_candidates,
    leap_expirations,
    select_sweet_spot,
)
from tradeledger.libraries.options.pricing import (
    BlackScholesParams,
    BlackScholesResult,
    OptionType,
    black_scholes,
    days_to_years,
    intrinsic_value,
    normal_cdf,
    normal_pdf,
)
from tradeledger.libraries.options.strategy import (
    STRATEGY_PRESETS,
    LegSide,
    PayoffPoint,
    PresetLeg,
    StrategyAnalysis,
    StrategyGreeks,
    StrategyLeg,
    StrategyPreset,
    StrikeOffset,
    aggregated_greeks,
    analyze_strategy,
    breakevens,
    build_preset_legs,
    max_profit_loss,
    net_debit_credit,
    payoff_at_expiry,
    payoff_curve,
    resolve_strike_offset,
)

__all__ = [
    # Pricing
    "OptionType",
    "BlackScholesParams",
    "BlackScholesResult",
    "black_scholes",
    "days_to_years",
    "intrinsic_value",
    "normal_cdf",
    "normal_pdf",
    # Chain
    "OptionChain",
    "OptionContract",
    "find_contract",
    "mid_price",
    # Strategy
    "STRATEGY_PRESETS",
    "LegSide",
    "PayoffPoint",
    "PresetLeg",
    "StrategyAnalysis",
    "StrategyGreeks",
    "StrategyLeg",
    "StrategyPreset",
    "StrikeOffset",
    "aggregated_greeks",
    "analyze_strategy",
    "breakevens",
    "build_preset_legs",
    "max_profit_loss",
    "net_debit_credit",
    "payoff_at_expiry",
    "payoff_curve",
    "resolve_strike_offset",
    # Horizon
    "BestPick",
    "Horizon",
    "HorizonResult",
    "NamedStrategy",
    "StrategyHorizonResults",
    "best_picks",
    "evaluate_horizons",
    "find_nearest",
    "strategy_cost",
    "suggest_targets",
    # LEAPs
    "LeapCandidate",
    "Trend",
    "classify_trend",
    "find_leap_candidates",
    "leap_expirations",
    "select_sweet_spot",
]
