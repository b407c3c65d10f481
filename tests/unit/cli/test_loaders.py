"""Unit tests for CLI YAML input loaders."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from tradeledger.cli.loaders import load_chain, load_legs, load_prices, load_trades
from tradeledger.libraries.options import LegSide, OptionType
from tradeledger.services.ledger import OptionAction, TradeKind, sort_trades


class TestLoadTrades:
    """Test trade file parsing."""

    def test_defaults_filled(self, tmp_path):
        """Kind is upper-cased, total defaults to qty x price, bare dates mean midnight."""
        path = tmp_path / "trades.yaml"
        path.write_text(
            """
trades:
  - symbol: aapl
    kind: buy
    quantity: 3
    price_per_unit: 190.1
    fees: 1
    executed_at: 2024-03-01
"""
        )

        (trade,) = load_trades(path)

        assert trade.symbol == "AAPL"
        assert trade.kind == TradeKind.BUY
        assert trade.total_amount == Decimal("570.3")
        assert trade.fees == Decimal("1")
        assert trade.executed_at == datetime(2024, 3, 1)

    def test_explicit_total_kept(self, tmp_path):
        """An explicit total_amount is not recomputed."""
        path = tmp_path / "trades.yaml"
        path.write_text(
            """
trades:
  - {symbol: MSFT, kind: DIVIDEND, total_amount: 12.5, executed_at: 2024-03-01T16:00:00}
"""
        )

        (trade,) = load_trades(path)

        assert trade.kind == TradeKind.DIVIDEND
        assert trade.total_amount == Decimal("12.5")
        assert trade.executed_at == datetime(2024, 3, 1, 16)

    def test_bare_dates_mix_with_utc_timestamps(self, tmp_path):
        """Bare dates and Z timestamps load as comparable naive UTC values."""
        path = tmp_path / "trades.yaml"
        path.write_text(
            """
trades:
  - {symbol: AAPL, kind: BUY, quantity: 1, price_per_unit: 10, executed_at: 2024-03-02}
  - {symbol: AAPL, kind: BUY, quantity: 1, price_per_unit: 11, executed_at: 2024-03-01T16:00:00Z}
"""
        )

        trades = load_trades(path)

        assert [t.executed_at for t in sort_trades(trades)] == [datetime(2024, 3, 1, 16), datetime(2024, 3, 2)]

    def test_option_premium(self, tmp_path):
        """Option details are nested mappings."""
        path = tmp_path / "trades.yaml"
        path.write_text(
            """
trades:
  - symbol: AAPL
    kind: option_premium
    executed_at: 2024-03-01
    option_details:
      action: SELL_TO_OPEN
      contracts: 2
      premium_per_contract: 1.25
"""
        )

        (trade,) = load_trades(path)

        assert trade.option_details.action == OptionAction.SELL_TO_OPEN
        assert trade.option_details.premium_total == Decimal("250")

    def test_invalid_trade_numbered(self, tmp_path):
        """Validation errors name the offending trade."""
        path = tmp_path / "trades.yaml"
        path.write_text(
            """
trades:
  - {symbol: AAPL, kind: BUY, quantity: 1, price_per_unit: 1, executed_at: 2024-01-01}
  - {symbol: AAPL, kind: BUY, quantity: -1, price_per_unit: 1, executed_at: 2024-01-02}
"""
        )

        with pytest.raises(ValueError, match="Invalid trade #2"):
            load_trades(path)

    def test_malformed_yaml(self, tmp_path):
        """Parse errors surface as ValueError."""
        path = tmp_path / "trades.yaml"
        path.write_text("trades: [unclosed\n")

        with pytest.raises(ValueError, match="Failed to parse YAML"):
            load_trades(path)

    def test_trades_must_be_list(self, tmp_path):
        """The trades key holds a list."""
        path = tmp_path / "trades.yaml"
        path.write_text("trades: {symbol: AAPL}\n")

        with pytest.raises(ValueError, match="must be a list"):
            load_trades(path)


class TestLoadPrices:
    """Test price file parsing."""

    def test_plain_and_detailed_prices(self, tmp_path):
        """Bare numbers are prices; mappings carry change and name."""
        path = tmp_path / "prices.yaml"
        path.write_text(
            """
prices:
  aapl: 190.1
  MSFT:
    price: 410
    daily_change: -2.35
    name: Microsoft
"""
        )

        quotes = load_prices(path)

        assert set(quotes) == {"AAPL", "MSFT"}
        assert quotes["AAPL"].price == Decimal("190.1")
        assert quotes["MSFT"].daily_change == Decimal("-2.35")
        assert quotes["MSFT"].name == "Microsoft"

    def test_prices_must_be_mapping(self, tmp_path):
        """A list of prices is rejected."""
        path = tmp_path / "prices.yaml"
        path.write_text("prices: [1, 2]\n")

        with pytest.raises(ValueError, match="must be a mapping"):
            load_prices(path)


class TestLoadLegsAndChain:
    """Test strategy leg and chain parsing."""

    def test_load_legs(self, tmp_path):
        """Legs validate into StrategyLeg."""
        path = tmp_path / "legs.yaml"
        path.write_text(
            """
legs:
  - {side: buy, option_type: call, strike: 100, premium: 5}
  - {side: sell, option_type: call, strike: 110, premium: 2, quantity: 2}
"""
        )

        legs = load_legs(path)

        assert [(leg.side, leg.option_type, leg.quantity) for leg in legs] == [
            (LegSide.BUY, OptionType.CALL, 1.0),
            (LegSide.SELL, OptionType.CALL, 2.0),
        ]

    def test_invalid_leg(self, tmp_path):
        """Unknown sides fail with the leg number."""
        path = tmp_path / "legs.yaml"
        path.write_text("legs:\n  - {side: hold, option_type: call, strike: 100}\n")

        with pytest.raises(ValueError, match="Invalid leg #1"):
            load_legs(path)

    def test_load_chain(self, tmp_path):
        """Chains are plain OptionChain mappings."""
        path = tmp_path / "chain.yaml"
        path.write_text(
            """
expiration: 2027-01-15
calls:
  - {strike: 100, bid: 10, ask: 10.6}
puts: []
"""
        )

        chain = load_chain(path)

        assert chain.expiration == date(2027, 1, 15)
        assert chain.strikes == [100.0]

    def test_chain_must_be_mapping(self, tmp_path):
        """A bare list is not a chain."""
        path = tmp_path / "chain.yaml"
        path.write_text("- 1\n")

        with pytest.raises(ValueError, match="option chain mapping"):
            load_chain(path)
