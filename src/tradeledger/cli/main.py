"""tradeledger CLI main entry point."""

import click

from tradeledger import __version__
from tradeledger.cli.commands import (
    history_command,
    leaps_command,
    position_command,
    presets_command,
    price_command,
    strategy_command,
)


@click.group()
@click.version_option(version=__version__)
def main():
    """tradeledger - Cost basis, P/L and option strategy analytics"""
    pass


# Register commands
main.add_command(position_command)
main.add_command(history_command)
main.add_command(price_command)
main.add_command(strategy_command)
main.add_command(presets_command)
main.add_command(leaps_command)


if __name__ == "__main__":
    main()
