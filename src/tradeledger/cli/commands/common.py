"""Options and setup shared by CLI commands."""

from pathlib import Path
from typing import Literal, cast

import click

from tradeledger.system import LoggerFactory, SystemConfig, reload_system_config

log_level_option = click.option(
    "--log-level",
    "-l",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Set logging level (DEBUG shows per-symbol replay details)",
)

config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="System config file (default: $TRADELEDGER_CONFIG or config/system.yaml)",
)


def load_config(config_path: Path | None, log_level: str | None) -> SystemConfig:
    """
    Load the system config and configure logging from it.

    Args:
        config_path: Explicit config file, if given
        log_level: Console log level override

    Returns:
        Loaded SystemConfig
    """
    system_config = reload_system_config(config_path)
    if log_level:
        # click already validated the choice
        level = cast(Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], log_level.upper())
        system_config.logging.level = level
    LoggerFactory.configure(system_config.logging.to_logger_config())
    return system_config
