"""Unit tests for multi-leg strategy analytics."""

import pytest

from tradeledger.libraries.options import (
    STRATEGY_PRESETS,
    LegSide,
    OptionChain,
    OptionContract,
    OptionType,
    PayoffPoint,
    StrategyLeg,
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


def _leg(side: str, option_type: str, strike: float, premium: float, iv: float = 0.3, quantity: float = 1) -> StrategyLeg:
    return StrategyLeg(
        side=side,
        option_type=option_type,
        strike=strike,
        premium=premium,
        implied_volatility=iv,
        quantity=quantity,
    )


@pytest.fixture
def long_call():
    """Long 100 call bought for $5."""
    return [_leg("buy", "call", 100, 5)]


@pytest.fixture
def bull_call_spread():
    """Buy 100 call @5, sell 110 call @3."""
    return [_leg("buy", "call", 100, 5), _leg("sell", "call", 110, 3)]


@pytest.fixture
def chain():
    """Chain with strikes 90-110 in $5 steps."""
    strikes = [90.0, 95.0, 100.0, 105.0, 110.0]
    calls = [OptionContract(strike=k, bid=max(101 - k, 0.5), ask=max(101 - k, 0.5) + 0.2, implied_volatility=0.25) for k in strikes]
    puts = [OptionContract(strike=k, bid=max(k - 99, 0.5), ask=max(k - 99, 0.5) + 0.2, implied_volatility=0.0) for k in strikes]
    return OptionChain(calls=calls, puts=puts)


class TestPayoff:
    """Test terminal payoff."""

    def test_long_call_payoff(self, long_call):
        """Below strike lose the premium; above, gain intrinsic minus premium."""
        assert payoff_at_expiry(long_call, 90) == -500
        assert payoff_at_expiry(long_call, 120) == 1500

    def test_short_leg_is_mirror(self):
        """A written call gains the premium and loses intrinsic."""
        short_call = [_leg("sell", "call", 100, 5)]

        assert payoff_at_expiry(short_call, 90) == 500
        assert payoff_at_expiry(short_call, 120) == -1500

    def test_quantity_scales_payoff(self):
        """Two contracts double the payoff."""
        assert payoff_at_expiry([_leg("buy", "put", 100, 2, quantity=2)], 90) == 1600

    def test_curve_range_and_size(self, long_call):
        """Curve spans 0.5x to 1.5x the current price."""
        curve = payoff_curve(long_call, 100, num_points=201)

        assert len(curve) == 201
        assert curve[0].stock_price == pytest.approx(50)
        assert curve[-1].stock_price == pytest.approx(150)
        assert curve[100].stock_price == pytest.approx(100)

    def test_curve_degenerate_sizes(self, long_call):
        """Zero points gives nothing; one point samples the current price."""
        assert payoff_curve(long_call, 100, num_points=0) == []
        single = payoff_curve(long_call, 100, num_points=1)
        assert single == [PayoffPoint(stock_price=100, pnl=-500)]


class TestNetDebitCredit:
    """Test net premium sign."""

    def test_debit_spread(self, bull_call_spread):
        """Pay 5, receive 3: net debit of $200."""
        assert net_debit_credit(bull_call_spread) == pytest.approx(-200)

    def test_credit_spread(self):
        """Receive 3, pay 1: net credit of $200."""
        legs = [_leg("sell", "put", 100, 3), _leg("buy", "put", 90, 1)]

        assert net_debit_credit(legs) == pytest.approx(200)


class TestMaxProfitLoss:
    """Test extrema and unlimited flags."""

    def test_long_call_unlimited_profit(self, long_call):
        """Profit still rising at the right edge."""
        max_profit, max_loss, profit_unlimited, loss_unlimited = max_profit_loss(payoff_curve(long_call, 100))

        assert max_loss == pytest.approx(-500)
        assert profit_unlimited is True
        assert loss_unlimited is False

    def test_short_call_unlimited_loss(self):
        """Loss still deepening at the right edge."""
        curve = payoff_curve([_leg("sell", "call", 100, 5)], 100)

        max_profit, _, profit_unlimited, loss_unlimited = max_profit_loss(curve)

        assert max_profit == pytest.approx(500)
        assert profit_unlimited is False
        assert loss_unlimited is True

    def test_short_put_unlimited_loss_on_left_edge(self):
        """Loss deepest at the lowest sampled price and still falling toward it."""
        curve = payoff_curve([_leg("sell", "put", 100, 5)], 100)

        max_profit, max_loss, profit_unlimited, loss_unlimited = max_profit_loss(curve)

        assert max_profit == pytest.approx(500)
        assert max_loss == pytest.approx(-4500)
        assert profit_unlimited is False
        assert loss_unlimited is True

    def test_long_put_flags_left_edge_profit(self):
        """Profit peaking at the lowest sampled price is flagged unlimited."""
        curve = payoff_curve([_leg("buy", "put", 100, 5)], 100)

        max_profit, max_loss, profit_unlimited, loss_unlimited = max_profit_loss(curve)

        assert max_profit == pytest.approx(4500)
        assert max_loss == pytest.approx(-500)
        assert profit_unlimited is True
        assert loss_unlimited is False

    def test_spread_is_bounded(self, bull_call_spread):
        """Bull call spread: max profit 800, max loss 200."""
        max_profit, max_loss, profit_unlimited, loss_unlimited = max_profit_loss(payoff_curve(bull_call_spread, 100))

        assert max_profit == pytest.approx(800)
        assert max_loss == pytest.approx(-200)
        assert not profit_unlimited
        assert not loss_unlimited

    def test_short_curves(self):
        """Empty and single-point curves give zeros or the single value."""
        assert max_profit_loss([]) == (0.0, 0.0, False, False)
        assert max_profit_loss([PayoffPoint(stock_price=100, pnl=42)]) == (42, 42, False, False)


class TestBreakevens:
    """Test zero-crossing detection."""

    def test_long_call_breakeven(self, long_call):
        """Strike plus premium."""
        assert breakevens(payoff_curve(long_call, 100)) == [pytest.approx(105, abs=0.01)]

    def test_straddle_has_two_breakevens(self):
        """Long straddle at 100 for $4 + $4 breaks even at 92 and 108."""
        legs = [_leg("buy", "call", 100, 4), _leg("buy", "put", 100, 4)]

        assert breakevens(payoff_curve(legs, 100)) == [pytest.approx(92, abs=0.01), pytest.approx(108, abs=0.01)]

    def test_sample_on_zero_reported_once(self):
        """A sample exactly at zero is one breakeven, not two."""
        curve = [
            PayoffPoint(stock_price=1, pnl=-1),
            PayoffPoint(stock_price=2, pnl=0),
            PayoffPoint(stock_price=3, pnl=1),
        ]

        assert breakevens(curve) == [2]

    def test_flat_zero_segment_is_not_a_crossing(self):
        """Segments lying on zero are skipped."""
        curve = [PayoffPoint(stock_price=p, pnl=0) for p in (1, 2, 3)]

        assert breakevens(curve) == []


class TestAggregatedGreeks:
    """Test signed Greek aggregation."""

    def test_long_call_delta_is_scaled(self, long_call):
        """Delta is per-share delta x 100."""
        greeks = aggregated_greeks(long_call, 100, 0.25, 0.0425)

        assert 50 < greeks.delta < 70
        assert greeks.theta < 0

    def test_opposite_legs_cancel(self):
        """Buying and selling the same option nets to zero."""
        legs = [_leg("buy", "call", 100, 5), _leg("sell", "call", 100, 5)]

        greeks = aggregated_greeks(legs, 100, 0.25, 0.0425)

        assert greeks.delta == pytest.approx(0)
        assert greeks.vega == pytest.approx(0)

    def test_legs_without_iv_are_skipped(self):
        """IV of 0 means unknown."""
        greeks = aggregated_greeks([_leg("buy", "call", 100, 5, iv=0.0)], 100, 0.25, 0.0425)

        assert greeks.delta == 0.0

    def test_expired_contributes_nothing(self, long_call):
        """No Greeks at or past expiry."""
        assert aggregated_greeks(long_call, 100, 0.0, 0.0425).delta == 0.0


class TestStrikeOffsets:
    """Test offset-to-strike mapping."""

    STRIKES = [110.0, 90.0, 100.0, 95.0, 105.0]

    @pytest.mark.parametrize(
        "offset,option_type,expected",
        [
            (StrikeOffset.ATM, OptionType.CALL, 100),
            (StrikeOffset.OTM1, OptionType.CALL, 105),
            (StrikeOffset.OTM2, OptionType.CALL, 110),
            (StrikeOffset.ITM1, OptionType.CALL, 95),
            (StrikeOffset.OTM1, OptionType.PUT, 95),
            (StrikeOffset.ITM2, OptionType.PUT, 110),
        ],
    )
    def test_offsets(self, offset, option_type, expected):
        """OTM steps up for calls and down for puts."""
        assert resolve_strike_offset(offset, option_type, 101, self.STRIKES) == expected

    def test_clamps_at_edges(self):
        """Stepping past the last strike stays on it."""
        assert resolve_strike_offset("otm2", "call", 109, self.STRIKES) == 110
        assert resolve_strike_offset("otm2", "put", 91, self.STRIKES) == 90

    def test_no_strikes_returns_stock_price(self):
        """Without a chain the stock price stands in."""
        assert resolve_strike_offset("atm", "call", 101.5, []) == 101.5


class TestPresets:
    """Test the preset catalog and chain resolution."""

    def test_catalog(self):
        """Five presets ship by default."""
        assert set(STRATEGY_PRESETS) == {
            "Bull Call Spread",
            "Bear Put Spread",
            "Long Straddle",
            "Long Strangle",
            "Iron Condor",
        }
        assert len(STRATEGY_PRESETS["Iron Condor"].legs) == 4

    def test_build_bull_call_spread(self, chain):
        """Legs resolve strikes and pick up mid prices and IV."""
        legs = build_preset_legs("Bull Call Spread", 100, chain)

        assert [(leg.side, leg.strike) for leg in legs] == [(LegSide.BUY, 100), (LegSide.SELL, 105)]
        assert legs[0].premium == pytest.approx(1.1)
        assert legs[0].implied_volatility == 0.25

    def test_missing_iv_falls_back(self, chain):
        """Contracts without IV are analysed at 30%."""
        legs = build_preset_legs(STRATEGY_PRESETS["Long Straddle"], 100, chain)

        assert legs[1].option_type == OptionType.PUT
        assert legs[1].implied_volatility == 0.3

    def test_missing_contract_has_zero_premium(self):
        """An empty chain still yields legs, priced at zero."""
        legs = build_preset_legs("Long Strangle", 100, OptionChain())

        assert [leg.strike for leg in legs] == [100, 100]
        assert all(leg.premium == 0 for leg in legs)

    def test_unknown_preset(self, chain):
        """Unknown names raise KeyError."""
        with pytest.raises(KeyError):
            build_preset_legs("Butterfly", 100, chain)


class TestAnalyzeStrategy:
    """Test the full analysis."""

    def test_long_call(self, long_call):
        """Analysis ties together net premium, extrema and breakevens."""
        analysis = analyze_strategy(long_call, stock_price=100, time_to_expiry=0.25, risk_free_rate=0.0425)

        assert analysis.net_debit_credit == pytest.approx(-500)
        assert analysis.max_loss == pytest.approx(-500)
        assert analysis.max_profit_unlimited
        assert analysis.breakevens == [pytest.approx(105, abs=0.01)]
        assert len(analysis.payoff_curve) == 200
        assert analysis.greeks.delta > 0

    def test_no_legs(self):
        """Empty strategies analyse to zeros."""
        analysis = analyze_strategy([], stock_price=100, time_to_expiry=0.25, risk_free_rate=0.0425)

        assert analysis.payoff_curve == []
        assert analysis.breakevens == []
        assert analysis.max_profit == 0.0
