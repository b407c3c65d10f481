"""YAML input files for the CLI.

Each file holds one top-level key:

    trades:  list of TradeEvent mappings
    legs:    list of StrategyLeg mappings
    prices:  symbol -> price, or symbol -> {price, daily_change, name}

Option chains use the OptionChain shape directly (expiration, calls, puts).
"""

from datetime import date, datetime, time
from decimal import Decimal
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from tradeledger.libraries.options import OptionChain, StrategyLeg
from tradeledger.services.ledger import TradeEvent, TradeKind
from tradeledger.services.portfolio import Quote


def _read_yaml(path: Path) -> Any:
    try:
        with open(path, "r") as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse YAML from {path}: {e}")


def _read_section(path: Path, key: str) -> Any:
    data = _read_yaml(path)
    if not isinstance(data, dict) or key not in data:
        raise ValueError(f"{path} must contain a top-level '{key}' key")
    return data[key]


def _normalize_trade(record: dict[str, Any]) -> dict[str, Any]:
    """Fill defaults the YAML form allows to be omitted."""
    record = dict(record)

    executed_at = record.get("executed_at")
    if isinstance(executed_at, date) and not isinstance(executed_at, datetime):
        record["executed_at"] = datetime.combine(executed_at, time())

    kind = str(record.get("kind", "")).upper()
    record["kind"] = kind
    if "total_amount" not in record and kind in (TradeKind.BUY.value, TradeKind.SELL.value):
        quantity = Decimal(str(record.get("quantity", 0)))
        price = Decimal(str(record.get("price_per_unit", 0)))
        record["total_amount"] = quantity * price

    return record


def load_trades(path: Path) -> list[TradeEvent]:
    """
    Load trade events from a YAML file.

    total_amount defaults to quantity * price_per_unit for BUY and SELL, and
    a bare date for executed_at means midnight.

    Raises:
        ValueError: If the file is malformed or a trade fails validation
    """
    records = _read_section(path, "trades")
    if not isinstance(records, list):
        raise ValueError(f"'trades' in {path} must be a list")

    trades = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            raise ValueError(f"Trade #{index + 1} in {path} must be a mapping")
        try:
            trades.append(TradeEvent.model_validate(_normalize_trade(record)))
        except ValidationError as e:
            raise ValueError(f"Invalid trade #{index + 1} in {path}: {e}")
    return trades


def load_legs(path: Path) -> list[StrategyLeg]:
    """
    Load strategy legs from a YAML file.

    Raises:
        ValueError: If the file is malformed or a leg fails validation
    """
    records = _read_section(path, "legs")
    if not isinstance(records, list):
        raise ValueError(f"'legs' in {path} must be a list")

    legs = []
    for index, record in enumerate(records):
        try:
            legs.append(StrategyLeg.model_validate(record))
        except ValidationError as e:
            raise ValueError(f"Invalid leg #{index + 1} in {path}: {e}")
    return legs


def load_prices(path: Path) -> dict[str, Quote]:
    """Load current quotes keyed by upper-case symbol."""
    section = _read_section(path, "prices")
    if not isinstance(section, dict):
        raise ValueError(f"'prices' in {path} must be a mapping of symbol to price")

    quotes = {}
    for symbol, value in section.items():
        symbol = str(symbol).upper()
        fields = value if isinstance(value, dict) else {"price": value}
        try:
            quotes[symbol] = Quote(symbol=symbol, **{k: _as_decimal(v) for k, v in fields.items()})
        except ValidationError as e:
            raise ValueError(f"Invalid price for {symbol} in {path}: {e}")
    return quotes


def _as_decimal(value: Any) -> Any:
    # YAML floats go through str() so 190.1 stays 190.1
    if isinstance(value, float):
        return Decimal(str(value))
    return value


def load_chain(path: Path) -> OptionChain:
    """
    Load an option chain from a YAML file.

    Raises:
        ValueError: If the file is malformed
    """
    data = _read_yaml(path)
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain an option chain mapping")
    try:
        return OptionChain.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid option chain in {path}: {e}")
