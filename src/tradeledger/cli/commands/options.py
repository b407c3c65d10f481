"""Option analytics commands - pricing, strategies, presets and LEAP screening."""

import sys
from datetime import date
from pathlib import Path

import click
from rich.console import Console

from tradeledger.cli.commands.common import config_option, load_config, log_level_option
from tradeledger.cli.loaders import load_chain, load_legs
from tradeledger.cli.ui import create_greeks_table, create_leaps_table, create_presets_table, create_strategy_table
from tradeledger.libraries.options import (
    STRATEGY_PRESETS,
    BlackScholesParams,
    OptionType,
    analyze_strategy,
    black_scholes,
    build_preset_legs,
    days_to_years,
    find_leap_candidates,
    select_sweet_spot,
)

console = Console()

OPTION_TYPE_CHOICE = click.Choice([t.value for t in OptionType], case_sensitive=False)


@click.command("price")
@click.option("--spot", type=float, required=True, help="Underlying price")
@click.option("--strike", type=float, required=True, help="Strike price")
@click.option("--days", type=int, required=True, help="Calendar days to expiry")
@click.option("--vol", type=float, required=True, help="Volatility as decimal (0.25 = 25%)")
@click.option("--rate", type=float, help="Risk-free rate as decimal (default: from config)")
@click.option("--type", "option_type", type=OPTION_TYPE_CHOICE, default="call", show_default=True)
@config_option
@log_level_option
def price_command(
    spot: float,
    strike: float,
    days: int,
    vol: float,
    rate: float | None,
    option_type: str,
    config_path: Path | None,
    log_level: str | None,
):
    """
    Price a European option with Black-Scholes.

    \b
    Examples:
        tradeledger price --spot 100 --strike 105 --days 30 --vol 0.25
        tradeledger price --spot 100 --strike 95 --days 60 --vol 0.3 --type put
    """
    try:
        system_config = load_config(config_path, log_level)
        params = BlackScholesParams(
            spot=spot,
            strike=strike,
            time_to_expiry=days_to_years(days),
            risk_free_rate=system_config.pricing.risk_free_rate if rate is None else rate,
            volatility=vol,
            option_type=option_type.lower(),
        )
        console.print(create_greeks_table(black_scholes(params)))

    except Exception as e:
        console.print(f"[bold red]✗ Pricing failed:[/bold red] {e}")
        sys.exit(1)


@click.command("strategy")
@click.option(
    "--file",
    "-f",
    "legs_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Legs file (YAML with a top-level 'legs' list)",
)
@click.option("--preset", help="Preset name to resolve against --chain instead of a legs file")
@click.option(
    "--chain",
    "chain_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Option chain file (required with --preset)",
)
@click.option("--spot", type=float, required=True, help="Underlying price")
@click.option("--days", type=int, required=True, help="Calendar days to expiry")
@click.option("--rate", type=float, help="Risk-free rate as decimal (default: from config)")
@config_option
@log_level_option
def strategy_command(
    legs_file: Path | None,
    preset: str | None,
    chain_file: Path | None,
    spot: float,
    days: int,
    rate: float | None,
    config_path: Path | None,
    log_level: str | None,
):
    """
    Analyze a multi-leg option strategy.

    \b
    Examples:
        tradeledger strategy -f legs.yaml --spot 100 --days 30
        tradeledger strategy --preset "Iron Condor" --chain chain.yaml --spot 100 --days 45
    """
    try:
        system_config = load_config(config_path, log_level)

        if preset:
            if chain_file is None:
                raise click.UsageError("--preset requires --chain")
            if preset not in STRATEGY_PRESETS:
                raise ValueError(f"Unknown preset '{preset}'. Available: {list(STRATEGY_PRESETS)}")
            legs = build_preset_legs(preset, spot, load_chain(chain_file))
        elif legs_file is not None:
            legs = load_legs(legs_file)
        else:
            raise click.UsageError("Provide --file or --preset")

        analysis = analyze_strategy(
            legs,
            stock_price=spot,
            time_to_expiry=days_to_years(days),
            risk_free_rate=system_config.pricing.risk_free_rate if rate is None else rate,
            num_points=system_config.pricing.payoff_points,
        )
        console.print(create_strategy_table(analysis))

    except Exception as e:
        console.print(f"[bold red]✗ Strategy analysis failed:[/bold red] {e}")
        sys.exit(1)


@click.command("presets")
def presets_command():
    """List the built-in strategy presets."""
    console.print(create_presets_table(STRATEGY_PRESETS))


@click.command("leaps")
@click.option(
    "--chain",
    "chain_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="Option chain file for one LEAP expiration",
)
@click.option("--spot", type=float, required=True, help="Underlying price")
@click.option("--days", type=int, help="Days to expiry (default: from the chain's expiration)")
@click.option("--min-delta", type=float, help="Minimum delta (default: from config)")
@config_option
@log_level_option
def leaps_command(
    chain_file: Path,
    spot: float,
    days: int | None,
    min_delta: float | None,
    config_path: Path | None,
    log_level: str | None,
):
    """
    Screen deep in-the-money LEAP calls.

    \b
    Examples:
        tradeledger leaps --chain chain.yaml --spot 180
        tradeledger leaps --chain chain.yaml --spot 180 --days 400 --min-delta 0.8
    """
    try:
        system_config = load_config(config_path, log_level)
        pricing = system_config.pricing
        chain = load_chain(chain_file)

        if days is None:
            if chain.expiration is None:
                raise click.UsageError("Chain has no expiration; pass --days")
            days = (chain.expiration - date.today()).days
        if days <= pricing.leap_min_days:
            console.print(f"[yellow]Expiration is {days} days out; LEAPs need more than {pricing.leap_min_days}[/yellow]")

        candidates = find_leap_candidates(
            chain.calls,
            spot,
            days,
            risk_free_rate=pricing.risk_free_rate,
            min_delta=pricing.leap_min_delta if min_delta is None else min_delta,
        )
        if not candidates:
            console.print("[yellow]No qualifying ITM calls[/yellow]")
            return

        sweet_spot = select_sweet_spot(candidates)
        console.print(create_leaps_table(candidates, sweet_spot))
        if sweet_spot is not None:
            console.print(
                f"[green]Sweet spot:[/green] ${sweet_spot.strike:,.2f} strike, "
                f"{sweet_spot.annualized_cost:.2f}% annual cost"
            )

    except Exception as e:
        console.print(f"[bold red]✗ LEAP screen failed:[/bold red] {e}")
        sys.exit(1)
