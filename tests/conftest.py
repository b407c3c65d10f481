"""Root conftest for all tests - sys.path setup and shared trade builders."""

import sys
from datetime import datetime
from decimal import Decimal
from pathlib import Path

import pytest

# Make the src/ package importable without an editable install
src_root = Path(__file__).parent.parent / "src"
if str(src_root) not in sys.path:
    sys.path.insert(0, str(src_root))

from tradeledger.services.ledger import OptionAction, OptionDetails, TradeEvent, TradeKind  # noqa: E402
from tradeledger.system import LoggerFactory, LoggingConfig  # noqa: E402


def build_trade(
    kind: TradeKind | str,
    quantity="0",
    price="0",
    fees="0",
    day: int = 1,
    symbol: str = "X",
    total_amount=None,
    option_details: OptionDetails | None = None,
    executed_at: datetime | None = None,
) -> TradeEvent:
    """TradeEvent with Decimal fields; total_amount defaults to quantity * price."""
    quantity = Decimal(str(quantity))
    price = Decimal(str(price))
    total = quantity * price if total_amount is None else Decimal(str(total_amount))
    return TradeEvent(
        symbol=symbol,
        kind=kind,
        quantity=quantity,
        price_per_unit=price,
        total_amount=total,
        fees=Decimal(str(fees)),
        executed_at=executed_at or datetime(2024, 1, day, 10, 0),
        option_details=option_details,
    )


def build_premium(action: OptionAction | str, contracts, premium, day: int = 1, symbol: str = "X") -> TradeEvent:
    """OPTION_PREMIUM event with details."""
    details = OptionDetails(
        action=action,
        contracts=Decimal(str(contracts)),
        premium_per_contract=Decimal(str(premium)),
    )
    return build_trade(TradeKind.OPTION_PREMIUM, day=day, symbol=symbol, option_details=details)


@pytest.fixture
def make_trade():
    """Factory fixture for trade events."""
    return build_trade


@pytest.fixture
def make_premium():
    """Factory fixture for option premium events."""
    return build_premium


@pytest.fixture(autouse=True)
def quiet_logging():
    """Keep log files out of the working tree."""
    LoggerFactory.reset()
    LoggerFactory.configure(LoggingConfig(level="ERROR", enable_file=False))
    yield
    LoggerFactory.reset()
