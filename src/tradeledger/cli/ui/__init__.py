"""CLI UI components - table formatters."""

from tradeledger.cli.ui.formatters import (
    create_greeks_table,
    create_history_table,
    create_leaps_table,
    create_position_table,
    create_presets_table,
    create_strategy_table,
)

__all__ = [
    "create_greeks_table",
    "create_history_table",
    "create_leaps_table",
    "create_position_table",
    "create_presets_table",
    "create_strategy_table",
]
