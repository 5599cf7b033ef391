"""CLI entrypoint for the odds edge scanner."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from edge_scanner.adapters.odds_api import parse_events
from edge_scanner.config import get_settings
from edge_scanner.core.allocator import allocate
from edge_scanner.core.naturalizer import StakeNaturalizer, suspicious_stake
from edge_scanner.core.profiles import default_profiles, load_profiles
from edge_scanner.core.scanner import Scanner
from edge_scanner.core.value import project_value_bet
from edge_scanner.errors import EdgeScannerError
from edge_scanner.models.odds import OddsFormat
from edge_scanner.models.opportunity import Middle
from edge_scanner.models.profile import ProfileTable, RiskTier
from edge_scanner.models.scan import DetectionResult
from edge_scanner.models.stakes import AllocationMode, AllocationResult, NaturalizedResult
from edge_scanner.observability.logging import setup_logging

app = typer.Typer(
    name="edge-scanner",
    help="Arbitrage, middle and value bet detection over bookmaker odds.",
    no_args_is_help=True,
)
console = Console()

_TIER_STYLE = {
    RiskTier.LOW: "green",
    RiskTier.MEDIUM: "yellow",
    RiskTier.HIGH: "dark_orange",
    RiskTier.EXTREME: "red",
}


def _profile_table() -> ProfileTable:
    settings = get_settings()
    path = settings.profiles_path
    if path is None:
        return default_profiles()
    return load_profiles(path)


def _profit_style(profit_pct: float) -> str:
    if profit_pct >= 2.0:
        return "green"
    if profit_pct >= 0:
        return "yellow"
    return "dim"


def _render_opportunities(result: DetectionResult, limit: int) -> None:
    if not result.opportunities:
        console.print("[dim]No arbitrage or middle opportunities[/]")
        return

    table = Table(title="Opportunities", show_header=True, header_style="bold")
    table.add_column("#", style="dim", width=3)
    table.add_column("Event", width=28)
    table.add_column("Kind", width=9)
    table.add_column("Class", width=6)
    table.add_column("Profit", justify="right", width=7)
    table.add_column("Legs", width=48)
    table.add_column("Notes", width=30)

    for i, opp in enumerate(result.opportunities[:limit], 1):
        style = _profit_style(opp.profit_pct)
        legs = "\n".join(
            f"{leg.outcome}{f' {leg.point:+g}' if leg.point is not None else ''} @ {leg.odds:.2f} ({leg.bookmaker})"
            for leg in opp.legs
        )
        notes = ""
        if isinstance(opp, Middle):
            notes = f"{opp.zone.description}\nP={opp.probability:.0%} EV={opp.expected_value:+.2f}"
        table.add_row(
            str(i),
            opp.event.label[:28],
            opp.kind,
            "ARB" if opp.is_arbitrage else "NEAR",
            f"[{style}]{opp.profit_pct:.2f}%[/]",
            legs,
            notes,
        )
    console.print(table)


def _render_value_bets(result: DetectionResult, limit: int, stake: float) -> None:
    if not result.value_bets:
        console.print("[dim]No value bets[/]")
        return

    table = Table(title="Value Bets", show_header=True, header_style="bold")
    table.add_column("#", style="dim", width=3)
    table.add_column("Event", width=28)
    table.add_column("Market", width=8)
    table.add_column("Outcome", width=22)
    table.add_column("Book", width=14)
    table.add_column("Odds", justify="right", width=6)
    table.add_column("Avg", justify="right", width=6)
    table.add_column("Edge", justify="right", width=7)
    table.add_column(f"EV/${stake:g}", justify="right", width=9)

    for i, vb in enumerate(result.value_bets[:limit], 1):
        projection = project_value_bet(vb, stake)
        outcome = vb.leg.outcome if vb.leg.point is None else f"{vb.leg.outcome} {vb.leg.point:+g}"
        table.add_row(
            str(i),
            vb.event.label[:28],
            vb.market.value,
            outcome[:22],
            vb.leg.bookmaker[:14],
            f"{vb.leg.odds:.2f}",
            f"{vb.market_average:.2f}",
            f"[green]{vb.edge_pct:.1f}%[/]",
            f"{projection.expected_value:+.2f}",
        )
    console.print(table)


def _render_stats(result: DetectionResult) -> None:
    s = result.stats
    console.print(
        f"[bold]Events:[/] {s.total_events} ({s.events_with_multiple_bookmakers} with 2+ books)  "
        f"[bold]Bookmakers:[/] {s.total_bookmakers}  "
        f"[bold]Arbs:[/] {s.arbs_found}  [bold]Near:[/] {s.near_arbs_found}  "
        f"[bold]Middles:[/] {s.middles_found}  [bold]Value:[/] {s.value_bets_found}"
    )
    if s.sports_scanned:
        console.print(f"[dim]Sports: {', '.join(s.sports_scanned)}[/]")


def _render_allocation(result: AllocationResult, bookmakers: list[str]) -> None:
    table = Table(title=f"Stakes ({result.mode.value})", show_header=True, header_style="bold")
    table.add_column("Leg", style="dim", width=4)
    table.add_column("Book", width=16)
    table.add_column("Odds", justify="right", width=7)
    table.add_column("Stake", justify="right", width=9)
    table.add_column("Return", justify="right", width=9)
    table.add_column("Profit", justify="right", width=9)
    for i, leg in enumerate(result.legs):
        book = bookmakers[i] if i < len(bookmakers) else ""
        favoured = " *" if result.favoured_index == i and not result.fallback else ""
        table.add_row(
            f"{i + 1}{favoured}",
            book,
            f"{leg.odds:.2f}",
            f"{leg.stake:.2f}",
            f"{leg.payout:.2f}",
            f"{leg.profit:+.2f}",
        )
    console.print(table)
    console.print(
        f"Total {result.total_staked:.2f}  min profit {result.min_profit:+.2f}  "
        f"ROI {result.roi_pct:+.2f}%  combined {result.combined_implied:.4f}"
    )
    for w in result.warnings:
        console.print(f"[yellow]⚠ {w}[/]")


def _render_naturalized(result: NaturalizedResult) -> None:
    table = Table(title="Naturalized Stakes", show_header=True, header_style="bold")
    table.add_column("Book", width=16)
    table.add_column("Original", justify="right", width=9)
    table.add_column("Rounded", justify="right", width=9)
    table.add_column("Diff", justify="right", width=8)
    table.add_column("Strategy", width=34)
    table.add_column("Flags", width=30)
    for leg in result.legs:
        flags = "; ".join(suspicious_stake(leg.original))
        table.add_row(
            leg.bookmaker,
            f"{leg.original:.2f}",
            f"{leg.rounded:.2f}",
            f"{leg.difference:+.2f}",
            leg.strategy,
            f"[dim]{flags}[/]" if flags else "",
        )
    console.print(table)
    allocation = result.allocation
    console.print(
        f"Total {result.naturalized_total:.2f} ({result.total_difference:+.2f})  "
        f"min profit {allocation.min_profit:+.2f}  max profit {allocation.max_profit:+.2f}  "
        f"[dim]{result.profit_impact}[/]"
    )
    for w in result.warnings:
        console.print(f"[yellow]⚠ {w}[/]")


@app.command("scan")
def scan(
    payload: Path = typer.Argument(..., help="Saved odds API response (JSON)"),
    near_arb: Optional[float] = typer.Option(None, "--near-arb", help="Near-arb allowance, e.g. 0.02"),
    value: Optional[float] = typer.Option(None, "--value", help="Min value-bet edge in percent"),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", help="Classifier threads"),
    limit: int = typer.Option(25, "--limit", "-n", help="Rows per table"),
    odds_format: Optional[OddsFormat] = typer.Option(
        None, "--odds-format", help="Price format of the payload; guessed per market when omitted"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the full result as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Detect arbs, near-arbs, middles and value bets in a saved payload."""
    settings = get_settings()
    setup_logging(level="DEBUG" if verbose else settings.log_level)

    if not payload.exists():
        console.print(f"[red]✗ File not found: {payload}[/]")
        raise typer.Exit(1)

    try:
        with open(payload) as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        console.print(f"[red]✗ Invalid JSON in {payload}: {e}[/]")
        raise typer.Exit(1)

    events = parse_events(raw, odds_format=odds_format)
    try:
        scanner = Scanner(settings, near_arb_threshold=near_arb, value_threshold=value, max_workers=workers)
        result = scanner.detect_all(events)
    except (EdgeScannerError, ValueError) as e:
        console.print(f"[red]✗ {e}[/]")
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps(result.model_dump(mode="json"), indent=2))
        return

    _render_opportunities(result, limit)
    _render_value_bets(result, limit, settings.default_total_stake)
    _render_stats(result)


@app.command("stakes")
def stakes(
    odds: list[float] = typer.Argument(..., help="Decimal odds per leg"),
    total: Optional[float] = typer.Option(None, "--total", "-t", help="Total stake"),
    favour: Optional[int] = typer.Option(None, "--favour", "-f", help="Favour leg N (1-based)"),
    stealth: bool = typer.Option(False, "--stealth", "-s", help="Round to natural-looking stakes"),
    bookmakers: Optional[list[str]] = typer.Option(
        None, "--bookmaker", "-b", help="Bookmaker per leg, in leg order (repeat)"
    ),
) -> None:
    """Split a total stake across legs, optionally naturalized."""
    settings = get_settings()
    setup_logging(level=settings.log_level)
    total = total if total is not None else settings.default_total_stake
    books = list(bookmakers or [])

    mode = AllocationMode.FAVOUR if favour is not None else AllocationMode.OPTIMAL
    try:
        result = allocate(odds, total, mode, favoured=favour - 1 if favour is not None else None)
    except ValueError as e:
        console.print(f"[red]✗ {e}[/]")
        raise typer.Exit(1)

    _render_allocation(result, books)

    if stealth:
        if len(books) != len(odds):
            console.print(f"[red]✗ --stealth needs one --bookmaker per leg ({len(odds)})[/]")
            raise typer.Exit(1)
        naturalizer = StakeNaturalizer(_profile_table())
        _render_naturalized(naturalizer.naturalize(result, books, stealth_enabled=True))


@app.command("profile")
def profile(
    name: str = typer.Argument(..., help="Bookmaker key or name"),
) -> None:
    """Show risk guidance for a bookmaker."""
    table = _profile_table()
    found = table.find(name)
    if found is None:
        console.print(f"[yellow]⚠ No profile for '{name}', using defaults[/]")
    p = table.lookup(name)

    style = _TIER_STYLE.get(p.risk_tier, "white")
    console.print(f"[bold]{p.name}[/] [dim]({p.key})[/]")
    console.print(f"Risk: [{style}]{p.risk_tier.value.upper()}[/]  Rounding: {p.rounding.value}  Limits within: {p.limiting_speed}")
    if p.avg_account_lifespan:
        console.print(f"Typical account lifespan: {p.avg_account_lifespan}")
    if p.notes:
        console.print("\n[bold]Notes[/]")
        for note in p.notes:
            console.print(f"  • {note}")
    if p.recommendations:
        console.print("\n[bold]Recommendations[/]")
        for rec in p.recommendations:
            console.print(f"  • {rec}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
