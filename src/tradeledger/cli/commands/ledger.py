"""Position and trade-history commands."""

import sys
from pathlib import Path

import click
from rich.console import Console

from tradeledger.cli.commands.common import config_option, load_config, log_level_option
from tradeledger.cli.loaders import load_prices, load_trades
from tradeledger.cli.ui import create_history_table, create_position_table
from tradeledger.services.ledger import CostBasisLedger, CostBasisMethod
from tradeledger.services.portfolio import CostBasisSettings, PortfolioService

console = Console()

METHOD_CHOICE = click.Choice([m.value for m in CostBasisMethod], case_sensitive=False)

trades_option = click.option(
    "--file",
    "-f",
    "trades_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="Trades file (YAML with a top-level 'trades' list)",
)


@click.command("position")
@trades_option
@click.option(
    "--prices",
    "-p",
    "prices_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Current prices (YAML with a top-level 'prices' mapping)",
)
@click.option("--method", "-m", type=METHOD_CHOICE, help="Cost-basis method for every symbol (overrides config)")
@click.option("--symbol", "-s", help="Only show this symbol")
@config_option
@log_level_option
def position_command(
    trades_file: Path,
    prices_file: Path | None,
    method: str | None,
    symbol: str | None,
    config_path: Path | None,
    log_level: str | None,
):
    """
    Show current positions computed from a trade history.

    Without --prices every symbol is valued at 0, so market value and
    unrealized P/L stay empty.

    \b
    Examples:
        tradeledger position -f trades.yaml
        tradeledger position -f trades.yaml -p prices.yaml --method FIFO
        tradeledger position -f trades.yaml --symbol AAPL
    """
    try:
        system_config = load_config(config_path, log_level)
        settings = system_config.ledger.to_settings()
        if method:
            settings = CostBasisSettings(default_method=method.upper())

        trades = load_trades(trades_file)
        if symbol:
            trades = [t for t in trades if t.symbol == symbol.upper()]
        quotes = load_prices(prices_file) if prices_file else {}

        summary = PortfolioService().summarize(trades, settings, quotes)
        if summary is None:
            console.print("[yellow]No trades found[/yellow]")
            return

        console.print(create_position_table(summary))
        console.print()
        console.print(f"[cyan]Total Return:[/cyan]  ${summary.total_return:,.2f}")
        if quotes:
            console.print(
                f"[cyan]Today:[/cyan]         ${summary.today_return:,.2f} ({summary.today_return_percent:,.2f}%)"
            )

    except Exception as e:
        console.print(f"[bold red]✗ Position failed:[/bold red] {e}")
        sys.exit(1)


@click.command("history")
@trades_option
@click.option("--symbol", "-s", required=True, help="Symbol to replay (e.g., AAPL)")
@click.option("--method", "-m", type=METHOD_CHOICE, help="Cost-basis method (default: from config)")
@config_option
@log_level_option
def history_command(
    trades_file: Path,
    symbol: str,
    method: str | None,
    config_path: Path | None,
    log_level: str | None,
):
    """
    Show per-trade P/L and running cost for one symbol.

    \b
    Examples:
        tradeledger history -f trades.yaml --symbol AAPL
        tradeledger history -f trades.yaml -s TSLA -m FIFO
    """
    try:
        system_config = load_config(config_path, log_level)
        symbol = symbol.upper()
        resolved = CostBasisMethod(method.upper()) if method else system_config.ledger.to_settings().resolve(symbol)

        trades = [t for t in load_trades(trades_file) if t.symbol == symbol]
        if not trades:
            console.print(f"[yellow]No trades found for {symbol}[/yellow]")
            return

        rows = CostBasisLedger().compute_per_trade_pl(trades, resolved, symbol)
        console.print(create_history_table(symbol, rows))
        console.print()
        console.print(f"[dim]Method: {resolved.value}[/dim]")

    except Exception as e:
        console.print(f"[bold red]✗ History failed:[/bold red] {e}")
        sys.exit(1)
