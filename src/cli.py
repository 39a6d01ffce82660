#!/usr/bin/env python3
"""Command Line Interface for roster name deduplication.

Usage:
    cd src
    python cli.py compare "Dan Howard" "Daniel Howard"
    python cli.py diagnose                # Built-in regression pairs
    python cli.py dedupe salespeople.csv  # Duplicate groups and keepers
    python cli.py dedupe salespeople.csv --method levenshtein
    python cli.py match "Eben W" salespeople.csv
    python cli.py info                    # Show configuration
"""
from __future__ import annotations

from typing import Optional

import typer

from core.config import get_settings
from core.exceptions import RosterLoadError
from core.logging_config import get_logger, setup_logging
from services.salesperson_dedupe import MatchMethod

LOGGER = get_logger(__name__)
SETTINGS = get_settings()

app = typer.Typer(help="Roster name deduplication CLI")

THRESHOLD_OPTION = typer.Option(
    None,
    "--threshold",
    "-t",
    min=0.0,
    max=1.0,
    help="Duplicate threshold (defaults to the configured threshold for the method)",
)


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Also write logs to this file"),
) -> None:
    """Find likely duplicate people in freeform name lists."""
    log_level = "DEBUG" if verbose else SETTINGS.log_level
    setup_logging(level=log_level, log_file=log_file, json_format=SETTINGS.is_json_logging())


# =============================================================================
# Similarity Commands
# =============================================================================


@app.command("compare")
def compare_names(
    name_1: str = typer.Argument(..., help="First name"),
    name_2: str = typer.Argument(..., help="Second name"),
    threshold: Optional[float] = THRESHOLD_OPTION,
) -> None:
    """Show how the similarity score for two names is built."""
    from services.similarity_report import explain_similarity, format_breakdown

    breakdown = explain_similarity(name_1, name_2, threshold=threshold)
    typer.echo(format_breakdown(breakdown))


@app.command("diagnose")
def diagnose(
    threshold: Optional[float] = THRESHOLD_OPTION,
) -> None:
    """Run the built-in regression pairs and print a summary."""
    from services.similarity_report import format_breakdown, run_regression_cases, verdict_label

    typer.echo("NAME SIMILARITY DIAGNOSTICS")
    typer.echo("===========================\n")
    results = run_regression_cases(threshold=threshold)
    for index, breakdown in enumerate(results, start=1):
        typer.echo(f"Case {index}: {format_breakdown(breakdown)}\n")

    typer.echo("SUMMARY:")
    typer.echo("========")
    for index, breakdown in enumerate(results, start=1):
        typer.echo(
            f'{index}. "{breakdown.name_1}" vs "{breakdown.name_2}" -> '
            f"{breakdown.score:.3f} ({verdict_label(breakdown)})"
        )


# =============================================================================
# Roster Commands
# =============================================================================


@app.command("dedupe")
def dedupe_roster(
    file_path: str = typer.Argument(..., help="Path to roster CSV (needs a 'name' column)"),
    threshold: Optional[float] = THRESHOLD_OPTION,
    method: MatchMethod = typer.Option(
        MatchMethod.BLENDED,
        "--method",
        "-m",
        case_sensitive=False,
        help="blended (anchor grouping) or levenshtein (transitive edit-distance grouping)",
    ),
) -> None:
    """List duplicate groups in a roster with a suggested keeper for each."""
    from services.salesperson_dedupe import load_roster, plan_merges

    try:
        entries = load_roster(file_path)
    except RosterLoadError as e:
        typer.secho(f"✗ {e}", fg="red")
        raise typer.Exit(1)

    plans = plan_merges(entries, threshold=threshold, method=method, roster=file_path)
    if not plans:
        typer.echo("No duplicate groups found over the threshold.")
        return

    typer.echo(f"Found {len(plans)} potential duplicate group(s).\n")
    for index, plan in enumerate(plans, start=1):
        typer.echo(f"===== Group #{index} (similarity: {plan.score:.2f}) =====")
        for entry in [plan.keeper, *plan.duplicates]:
            typer.echo(
                f"  #{entry.id} | {entry.name} | Telegram: {entry.telegram_id or 'Not Set'} "
                f"| Active estimates: {entry.active_estimates} | Warnings: {entry.warning_count}"
            )
        typer.secho(f"  Keep -> #{plan.keeper.id} ({plan.keeper.name})", fg="green")
        for duplicate in plan.duplicates:
            typer.echo(f"  Merge #{duplicate.id} ({duplicate.name}) into #{plan.keeper.id}")
        typer.echo("")


@app.command("match")
def match_name(
    name: str = typer.Argument(..., help="Name to look up"),
    file_path: str = typer.Argument(..., help="Path to roster CSV"),
    threshold: Optional[float] = THRESHOLD_OPTION,
) -> None:
    """Find the roster entry that best matches a name."""
    from services.salesperson_dedupe import find_best_match, load_roster

    try:
        entries = load_roster(file_path)
    except RosterLoadError as e:
        typer.secho(f"✗ {e}", fg="red")
        raise typer.Exit(1)

    match = find_best_match(name, entries, threshold=threshold)
    if match is None:
        typer.secho(f"No match for {name!r}", fg="yellow")
        raise typer.Exit(1)

    typer.echo(f"#{match.entry.id} {match.entry.name} (similarity: {match.score:.3f})")


@app.command("info")
def show_info() -> None:
    """Show application configuration info."""
    typer.echo("Roster Dedupe Configuration:")
    typer.echo(f"  Environment: {SETTINGS.environment}")
    typer.echo(f"  Log Level: {SETTINGS.log_level}")
    typer.echo(f"  Log Format: {SETTINGS.log_format}")
    typer.echo(f"  Duplicate Threshold: {SETTINGS.duplicate_threshold:.2f}")
    typer.echo(f"  Near-miss Threshold: {SETTINGS.near_miss_threshold:.2f}")
    typer.echo(f"  Levenshtein Threshold: {SETTINGS.levenshtein_threshold:.2f}")
    typer.echo(f"  Min Token Length: {SETTINGS.min_char_token_length}")


if __name__ == "__main__":
    app()
