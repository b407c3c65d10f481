"""Rich table formatters for CLI output."""

from decimal import Decimal

from rich.table import Table

from tradeledger.libraries.options import BlackScholesResult, LeapCandidate, StrategyAnalysis, StrategyPreset
from tradeledger.services.ledger import TradeWithPL
from tradeledger.services.portfolio import PortfolioSummary


def _money(value: Decimal | float) -> str:
    """Format a signed dollar amount, colored by sign."""
    value = float(value)
    if value > 0:
        return f"[green]${value:,.2f}[/green]"
    if value < 0:
        return f"[red]-${abs(value):,.2f}[/red]"
    return "$0.00"


def create_position_table(summary: PortfolioSummary) -> Table:
    """
    Create a Rich table of per-symbol positions.

    Args:
        summary: Portfolio summary

    Returns:
        Table with one row per symbol and a totals row
    """
    table = Table(title="Positions", show_header=True, header_style="bold cyan")
    table.add_column("Symbol", style="cyan", no_wrap=True)
    table.add_column("Method", style="dim")
    table.add_column("Shares", justify="right", style="yellow")
    table.add_column("Avg Cost", justify="right")
    table.add_column("Adj Cost", justify="right")
    table.add_column("Cost Basis", justify="right")
    table.add_column("Mkt Value", justify="right")
    table.add_column("Realized", justify="right")
    table.add_column("Unrealized", justify="right")
    table.add_column("Premium", justify="right")
    table.add_column("Dividends", justify="right")
    table.add_column("Return %", justify="right")

    for p in summary.positions:
        table.add_row(
            p.symbol,
            p.method.value,
            f"{p.shares:,}",
            f"${p.avg_cost_per_share:,.2f}",
            f"${p.adjusted_cost_per_share:,.2f}",
            f"${p.cost_basis:,.2f}",
            f"${p.market_value:,.2f}",
            _money(p.realized_pl),
            _money(p.unrealized_pl),
            _money(p.options_premium_net),
            _money(p.dividends_received),
            f"{p.total_return_percent:,.2f}%",
        )

    table.add_section()
    table.add_row(
        "[bold]Total[/bold]",
        "",
        "",
        "",
        "",
        f"${summary.total_cost_basis:,.2f}",
        f"${summary.total_value:,.2f}",
        _money(summary.total_realized_pl),
        _money(summary.total_unrealized_pl),
        _money(summary.total_options_premium),
        _money(summary.total_dividends),
        "",
    )
    return table


def create_history_table(symbol: str, rows: list[TradeWithPL]) -> Table:
    """
    Create a Rich table of per-trade P/L with running totals.

    Args:
        symbol: Ticker shown in the title
        rows: Annotated trades in replay order
    """
    table = Table(title=f"Trade History - {symbol}", show_header=True, header_style="bold cyan")
    table.add_column("Date", style="dim", no_wrap=True)
    table.add_column("Kind", style="cyan")
    table.add_column("Qty", justify="right", style="yellow")
    table.add_column("Price", justify="right")
    table.add_column("Fees", justify="right", style="dim")
    table.add_column("Cash Flow", justify="right")
    table.add_column("Realized", justify="right")
    table.add_column("Shares", justify="right", style="yellow")
    table.add_column("Avg Cost", justify="right")
    table.add_column("Adj Cost", justify="right")

    for row in rows:
        trade = row.trade
        table.add_row(
            trade.executed_at.strftime("%Y-%m-%d"),
            trade.kind.value,
            f"{trade.quantity:,}" if trade.quantity else "-",
            f"${trade.price_per_unit:,.2f}" if trade.price_per_unit else "-",
            f"${trade.fees:,.2f}",
            _money(row.cash_flow),
            _money(row.realized_pl) if row.realized_pl else "-",
            f"{row.running_shares:,}",
            f"${row.running_cost_per_share:,.2f}",
            f"${row.running_adjusted_cost_per_share:,.2f}",
        )
    return table


def create_greeks_table(result: BlackScholesResult) -> Table:
    """Create a Rich table for a single-option price and Greeks."""
    table = Table(title="Black-Scholes")
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value", style="white", justify="right")

    table.add_row("Price", f"${result.price:,.4f}")
    table.add_row("Delta", f"{result.delta:.4f}")
    table.add_row("Gamma", f"{result.gamma:.4f}")
    table.add_row("Theta (per day)", f"{result.theta:.4f}")
    table.add_row("Vega (per 1%)", f"{result.vega:.4f}")
    table.add_row("Rho (per 1%)", f"{result.rho:.4f}")
    return table


def create_strategy_table(analysis: StrategyAnalysis) -> Table:
    """Create a Rich table summarizing a strategy's risk profile."""
    table = Table(title="Strategy Analysis")
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value", style="white", justify="right")

    net = analysis.net_debit_credit
    label = "Net Credit" if net > 0 else "Net Debit"
    table.add_row(label, f"${abs(net):,.2f}")
    table.add_row("Max Profit", "Unlimited" if analysis.max_profit_unlimited else _money(analysis.max_profit))
    table.add_row("Max Loss", "Unlimited" if analysis.max_loss_unlimited else _money(analysis.max_loss))
    breakevens = ", ".join(f"${b:,.2f}" for b in analysis.breakevens) or "-"
    table.add_row("Breakevens", breakevens)

    greeks = analysis.greeks
    table.add_section()
    table.add_row("Delta", f"{greeks.delta:,.2f}")
    table.add_row("Gamma", f"{greeks.gamma:,.4f}")
    table.add_row("Theta (per day)", f"{greeks.theta:,.2f}")
    table.add_row("Vega (per 1%)", f"{greeks.vega:,.2f}")
    table.add_row("Rho (per 1%)", f"{greeks.rho:,.2f}")
    return table


def create_presets_table(presets: dict[str, StrategyPreset]) -> Table:
    """Create a Rich table listing preset templates."""
    table = Table(title="Strategy Presets", show_header=True, header_style="bold cyan")
    table.add_column("Name", style="green", no_wrap=True)
    table.add_column("Legs", style="white")

    for name, preset in presets.items():
        legs = ", ".join(
            f"{leg.side.value} {leg.quantity:g} {leg.option_type.value} {leg.strike_offset.value}" for leg in preset.legs
        )
        table.add_row(name, legs)
    return table


def create_leaps_table(candidates: list[LeapCandidate], sweet_spot: LeapCandidate | None) -> Table:
    """Create a Rich table of LEAP candidates, marking the sweet spot."""
    table = Table(title="Deep ITM LEAP Calls", show_header=True, header_style="bold cyan")
    table.add_column("Strike", justify="right", style="cyan")
    table.add_column("Premium", justify="right")
    table.add_column("Delta", justify="right", style="yellow")
    table.add_column("Extrinsic", justify="right")
    table.add_column("Ext %", justify="right")
    table.add_column("Annual Cost %", justify="right", style="magenta")
    table.add_column("Leverage", justify="right")
    table.add_column("Break Even", justify="right")
    table.add_column("OI", justify="right", style="dim")

    for c in candidates:
        marker = " ★" if sweet_spot is not None and c.strike == sweet_spot.strike else ""
        table.add_row(
            f"${c.strike:,.2f}{marker}",
            f"${c.premium:,.2f}",
            f"{c.delta:.2f}",
            f"${c.extrinsic:,.2f}",
            f"{c.extrinsic_pct:.1f}%",
            f"{c.annualized_cost:.2f}%",
            f"{c.leverage:.1f}x",
            f"${c.break_even:,.2f} ({c.break_even_pct:+.1f}%)",
            f"{c.open_interest:,}",
        )
    return table
