"""Black-Scholes-Merton pricing for vanilla European options.

Pure functions: same inputs always produce the same outputs, no side effects.

Greek scaling conventions:
- theta: per calendar day (annual theta / 365)
- vega: per 1 volatility point (0.01 change in sigma)
- rho: per 1 percentage point change in the risk-free rate

Usage:
    >>> from tradeledger.libraries.options.pricing import BlackScholesParams, OptionType, black_scholes
    >>> result = black_scholes(
    ...     BlackScholesParams(
    ...         spot=100.0,
    ...         strike=100.0,
    ...         time_to_expiry=days_to_years(30),
    ...         risk_free_rate=0.0425,
    ...         volatility=0.30,
    ...         option_type=OptionType.CALL,
    ...     )
    ... )
    >>> print(f"{result.price:.2f} delta={result.delta:.3f}")
"""

import math
from enum import Enum

from pydantic import BaseModel, ConfigDict

DAYS_PER_YEAR = 365.0

# Abramowitz & Stegun 7.1.26 coefficients (|error| < 1.5e-7)
_A1 = 0.254829592
_A2 = -0.284496736
_A3 = 1.421413741
_A4 = -1.453152027
_A5 = 1.061405429
_P = 0.3275911


class OptionType(str, Enum):
    """Option right."""

    CALL = "call"
    PUT = "put"


class BlackScholesParams(BaseModel):
    """
    Inputs for a single option valuation.

    Attributes:
        spot: Underlying price
        strike: Strike price
        time_to_expiry: Years to expiry (days / 365); <= 0 means expired
        risk_free_rate: Annual rate as decimal (0.0425 = 4.25%)
        volatility: Annual volatility as decimal (0.30 = 30%)
        option_type: call or put
    """

    spot: float
    strike: float
    time_to_expiry: float
    risk_free_rate: float
    volatility: float
    option_type: OptionType

    model_config = ConfigDict(frozen=True)


class BlackScholesResult(BaseModel):
    """Option value and Greeks."""

    price: float
    delta: float = 0.0
    gamma: float = 0.0
    theta: float = 0.0
    vega: float = 0.0
    rho: float = 0.0

    model_config = ConfigDict(frozen=True)


def normal_cdf(x: float) -> float:
    """Standard normal CDF via the Abramowitz-Stegun rational approximation."""
    sign = -1.0 if x < 0 else 1.0
    # 7.1.26 approximates erf; N(x) = (1 + erf(x / sqrt 2)) / 2
    z = abs(x) / math.sqrt(2.0)
    t = 1.0 / (1.0 + _P * z)
    y = 1.0 - (((((_A5 * t + _A4) * t) + _A3) * t + _A2) * t + _A1) * t * math.exp(-z * z)
    return 0.5 * (1.0 + sign * y)


def normal_pdf(x: float) -> float:
    """Standard normal probability density."""
    return math.exp(-0.5 * x * x) / math.sqrt(2.0 * math.pi)


def days_to_years(days: float) -> float:
    """Convert calendar days to years on a 365-day basis."""
    return days / DAYS_PER_YEAR


def intrinsic_value(spot: float, strike: float, option_type: OptionType | str) -> float:
    """Exercise value of an option at the given spot."""
    if OptionType(option_type) == OptionType.CALL:
        return max(spot - strike, 0.0)
    return max(strike - spot, 0.0)


def black_scholes(params: BlackScholesParams) -> BlackScholesResult:
    """
    Price a European option and its Greeks.

    An option at or past expiry (time_to_expiry <= 0) is worth its intrinsic
    value with all Greeks zero. Degenerate inputs (non-positive spot, strike
    or volatility) are valued the same way rather than producing NaN.

    Args:
        params: Valuation inputs

    Returns:
        BlackScholesResult with price and Greeks

    Example:
        >>> p = BlackScholesParams(spot=100, strike=100, time_to_expiry=1.0,
        ...                        risk_free_rate=0.0, volatility=0.2, option_type="call")
        >>> round(black_scholes(p).price, 4)
        7.9656
    """
    s = params.spot
    k = params.strike
    t = params.time_to_expiry
    r = params.risk_free_rate
    sigma = params.volatility
    is_call = params.option_type == OptionType.CALL

    if t <= 0 or s <= 0 or k <= 0 or sigma <= 0:
        return BlackScholesResult(price=intrinsic_value(s, k, params.option_type))

    sqrt_t = math.sqrt(t)
    d1 = (math.log(s / k) + (r + 0.5 * sigma * sigma) * t) / (sigma * sqrt_t)
    d2 = d1 - sigma * sqrt_t

    nd1 = normal_pdf(d1)
    discount = math.exp(-r * t)

    if is_call:
        n_d1 = normal_cdf(d1)
        n_d2 = normal_cdf(d2)
        price = s * n_d1 - k * discount * n_d2
        delta = n_d1
        theta = (-(s * nd1 * sigma) / (2 * sqrt_t) - r * k * discount * n_d2) / DAYS_PER_YEAR
        rho = k * t * discount * n_d2 / 100
    else:
        n_neg_d1 = normal_cdf(-d1)
        n_neg_d2 = normal_cdf(-d2)
        price = k * discount * n_neg_d2 - s * n_neg_d1
        delta = normal_cdf(d1) - 1
        theta = (-(s * nd1 * sigma) / (2 * sqrt_t) + r * k * discount * n_neg_d2) / DAYS_PER_YEAR
        rho = -k * t * discount * n_neg_d2 / 100

    gamma = nd1 / (s * sigma * sqrt_t)
    vega = s * nd1 * sqrt_t / 100

    return BlackScholesResult(price=price, delta=delta, gamma=gamma, theta=theta, vega=vega, rho=rho)
