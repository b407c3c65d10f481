"""Commands __init__ - exports all commands."""

from tradeledger.cli.commands.ledger import history_command, position_command
from tradeledger.cli.commands.options import leaps_command, presets_command, price_command, strategy_command

__all__ = [
    "history_command",
    "leaps_command",
    "position_command",
    "presets_command",
    "price_command",
    "strategy_command",
]
