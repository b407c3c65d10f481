"""
System configuration.

One configuration for the whole process, loaded from YAML:

    ledger:        cost-basis method defaults and per-symbol overrides
    pricing:       option analytics defaults (rate, curve resolution, LEAP screen)
    market_data:   price-feed fan-out policy (batch size, inter-batch delay)
    logging:       LoggerFactory settings

Lookup order for the file: explicit path, ``$TRADELEDGER_CONFIG``,
``config/system.yaml``. Missing or empty files fall back to built-in defaults.
Values may reference environment variables as ``${VAR}``.

Only the CLI and other boundary code read this; the ledger, pricing and
portfolio functions take their settings as explicit arguments.
"""

import copy
import os
import re
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Literal

import yaml

from tradeledger.system import log_system

DEFAULT_CONFIG_PATH = Path("config/system.yaml")
CONFIG_ENV_VAR = "TRADELEDGER_CONFIG"

_ENV_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


@dataclass
class LedgerConfig:
    """Cost-basis accounting defaults."""

    default_method: str = "AVERAGE"
    symbol_overrides: dict[str, str] = field(default_factory=dict)

    def to_settings(self):
        """Convert to the CostBasisSettings value object used by the aggregator."""
        from tradeledger.services.portfolio.models import CostBasisSettings

        return CostBasisSettings(
            default_method=self.default_method,
            symbol_overrides=self.symbol_overrides,
        )


@dataclass
class PricingConfig:
    """Option analytics defaults."""

    risk_free_rate: float = 0.0425
    payoff_points: int = 200
    leap_min_days: int = 180
    leap_min_delta: float = 0.70


@dataclass
class MarketDataConfig:
    """Price-feed fan-out policy."""

    batch_size: int = 4
    batch_delay_seconds: float = 0.25


@dataclass
class LoggingConfig:
    """Logging section of the system file (plain dataclass, converted on demand)."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["console", "json"] = "console"
    timestamp_format: Literal["iso", "compact", "time", "short"] = "compact"
    enable_file: bool = True
    file_path: str = "logs/tradeledger.log"
    file_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    file_rotation: bool = True
    max_file_size_mb: int = 10
    backup_count: int = 3

    def to_logger_config(self) -> log_system.LoggingConfig:
        """Convert to log_system.LoggingConfig for LoggerFactory.configure()."""
        return log_system.LoggingConfig(
            level=self.level,
            format=self.format,
            timestamp_format=self.timestamp_format,
            enable_file=self.enable_file,
            file_path=Path(self.file_path),
            file_level=self.file_level,
            file_rotation=self.file_rotation,
            max_file_size_mb=self.max_file_size_mb,
            backup_count=self.backup_count,
        )


@dataclass
class SystemConfig:
    """Container for all system configuration sections."""

    ledger: LedgerConfig = field(default_factory=LedgerConfig)
    pricing: PricingConfig = field(default_factory=PricingConfig)
    market_data: MarketDataConfig = field(default_factory=MarketDataConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, path: Path | str | None = None) -> "SystemConfig":
        """
        Load system configuration.

        Args:
            path: Explicit config file. Falls back to $TRADELEDGER_CONFIG, then
                config/system.yaml.

        Returns:
            SystemConfig with file values merged over defaults

        Raises:
            ValueError: If the file is not a YAML mapping
        """
        if path is None:
            env_path = os.environ.get(CONFIG_ENV_VAR)
            path = Path(env_path) if env_path else DEFAULT_CONFIG_PATH
        path = Path(path)

        defaults = asdict(cls())
        if not path.exists():
            return cls._from_dict(defaults)

        with open(path) as f:
            loaded = yaml.safe_load(f)

        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ValueError(f"System config must be a mapping, got {type(loaded).__name__}: {path}")

        merged = _deep_merge(defaults, _substitute_env_vars(loaded))
        return cls._from_dict(merged)

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "SystemConfig":
        """Build config from a (possibly partial) dictionary."""
        ledger = LedgerConfig(**data.get("ledger", {}))
        ledger.default_method = str(ledger.default_method).upper()
        ledger.symbol_overrides = {
            str(symbol).upper(): str(method).upper() for symbol, method in (ledger.symbol_overrides or {}).items()
        }
        return cls(
            ledger=ledger,
            pricing=PricingConfig(**data.get("pricing", {})),
            market_data=MarketDataConfig(**data.get("market_data", {})),
            logging=LoggingConfig(**data.get("logging", {})),
        )


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into a copy of base (override wins)."""
    result = copy.deepcopy(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def _substitute_env_vars(value: Any) -> Any:
    """Replace ${VAR} references with environment values (undefined vars are kept)."""
    if isinstance(value, dict):
        return {key: _substitute_env_vars(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_substitute_env_vars(item) for item in value]
    if isinstance(value, str):
        return _ENV_PATTERN.sub(lambda m: os.environ.get(m.group(1), m.group(0)), value)
    return value


_system_config: SystemConfig | None = None


def get_system_config(path: Path | str | None = None) -> SystemConfig:
    """
    Get the process-wide system config, loading it on first use.

    Args:
        path: Explicit config file; replaces the cached config when given
    """
    global _system_config
    if _system_config is None or path is not None:
        _system_config = SystemConfig.load(path)
    return _system_config


def reload_system_config(path: Path | str | None = None) -> SystemConfig:
    """Force reload of the system config (e.g. after the file changed)."""
    global _system_config
    _system_config = SystemConfig.load(path)
    return _system_config
