"""Command-line interface for ddh-remover."""

import json
import logging
import sys
from collections import Counter
from pathlib import Path
from typing import List, Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ddh_remover import __version__
from ddh_remover.core.disposer import Outcome, PathResult
from ddh_remover.core.errors import ConfigError, ReportError
from ddh_remover.core.processor import GroupReport, process_groups
from ddh_remover.core.report import read_report
from ddh_remover.core.resolver import RetentionPolicy
from ddh_remover.utils.config import Config
from ddh_remover.utils.logger import setup_logger

console = Console()
err_console = Console(stderr=True)

EXIT_FAILURE = 1
EXIT_BAD_REPORT = 2


@click.group()
@click.version_option(version=__version__, prog_name="ddh-remover")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Also write a debug log to this file",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, log_file: Optional[Path]) -> None:
    """
    ddh-remover - Remove the duplicate files found by ddh.

    ddh has to be run with its JSON output; the report can be saved in a
    file or piped to ddh-remover on stdin.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    setup_logger(
        "ddh_remover",
        level=logging.DEBUG if verbose else logging.WARNING,
        log_file=log_file,
    )


config_option = click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="DDH_REMOVER_CONFIG",
    help="Config file (default: ~/.ddh-remover/config.json)",
)


@cli.command()
@click.option(
    "--file",
    "-f",
    "report_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Read the JSON report from a file instead of stdin",
)
@click.option(
    "--duplicates",
    "-d",
    "keep_count",
    type=click.IntRange(min=0),
    help="How many duplicates to keep (default: 1, only one file)",
)
@click.option(
    "--move",
    "-m",
    "dest_path",
    type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path),
    help="Move the files to DEST_PATH instead of deleting them",
)
@click.option(
    "--keep",
    "-k",
    "keep_path",
    help="Always keep the files whose path contains this string",
)
@click.option(
    "--dry-run",
    "-n",
    "dry_run",
    is_flag=True,
    help="Don't do anything, no file removal",
)
@click.option(
    "--trash/--no-trash",
    default=None,
    help="Send deleted files to the recycle bin (default: from config)",
)
@click.option(
    "--workers",
    "-w",
    type=click.IntRange(min=1),
    help="Groups processed in parallel (default: from config)",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the per-file results to this JSON file",
)
@click.option(
    "--show-progress/--no-progress",
    default=None,
    help="Show a progress bar (default: from config)",
)
@config_option
def remove(
    report_file: Optional[Path],
    keep_count: Optional[int],
    dest_path: Optional[Path],
    keep_path: Optional[str],
    dry_run: bool,
    trash: Optional[bool],
    workers: Optional[int],
    output: Optional[Path],
    show_progress: Optional[bool],
    config_file: Optional[Path],
) -> None:
    """
    Delete or move the duplicates listed in a ddh report.

    For every group, the first N files in sorted order are kept, or the
    files whose path contains the --keep string.

    Example:
        ddh . -o no -v all -f json | ddh-remover remove --keep Photos/best -n
    """
    config = Config(config_file)

    policy = RetentionPolicy(
        keep_count=keep_count if keep_count is not None else config.get("keep_count", 1),
        preferred_substring=keep_path,
        destination=dest_path,
        dry_run=dry_run,
        use_trash=trash if trash is not None else bool(config.get("use_trash", False)),
    )
    if show_progress is None:
        show_progress = bool(config.get("show_progress", True))

    try:
        groups = read_report(report_file)
    except ReportError as e:
        err_console.print(f"[red]✗ {escape(str(e))}[/red]")
        sys.exit(EXIT_BAD_REPORT)
    except OSError as e:
        err_console.print(f"[red]✗ Error reading the report:[/red] {escape(str(e))}")
        sys.exit(EXIT_FAILURE)

    try:
        reports = process_groups(
            groups,
            policy,
            max_workers=workers if workers is not None else config.get("workers"),
            show_progress=show_progress,
        )
    except ConfigError as e:
        err_console.print(f"[red]✗ {escape(str(e))}[/red]")
        sys.exit(EXIT_FAILURE)

    _display_results(reports, policy)

    if output:
        _save_results_json(reports, output)
        console.print(f"\n[green]✓ Results saved to:[/green] {escape(str(output))}")

    if not all(report.ok for report in reports):
        sys.exit(EXIT_FAILURE)


@cli.command(name="config-show")
@config_option
def config_show(config_file: Optional[Path]) -> None:
    """Show the current configuration."""
    config = Config(config_file)

    table = Table(show_header=False, box=None)
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for key, value in sorted(config.settings.items()):
        table.add_row(key, json.dumps(value))

    console.print(f"[dim]{escape(str(config.config_file))}[/dim]")
    console.print(table)


@cli.command(name="config-set")
@click.argument("key")
@click.argument("value")
@config_option
def config_set(key: str, value: str, config_file: Optional[Path]) -> None:
    """
    Set a configuration value (keep_count, workers, use_trash, show_progress).

    VALUE is read as JSON when possible (e.g. 2, true), else as a string.
    """
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError:
        parsed = value

    config = Config(config_file)
    try:
        config.set(key, parsed)
    except ConfigError as e:
        err_console.print(f"[red]✗ {escape(str(e))}[/red]")
        sys.exit(EXIT_FAILURE)
    console.print(f"[green]✓ {escape(key)} = {escape(json.dumps(parsed))}[/green]")


def _describe(result: PathResult, policy: RetentionPolicy) -> str:
    """One line per path, e.g. 'Moving duplicate a.jpg to /out... Done'."""
    path = escape(result.path)
    if policy.moves:
        action = f"Moving duplicate {path} to {escape(str(policy.destination))}..."
    else:
        action = f"Deleting duplicate {path}..."

    if result.outcome is Outcome.skipped:
        status = "[yellow]Done (not really)[/yellow]"
    elif result.ok:
        status = "[green]Done[/green]"
    else:
        status = f"[red]Error ({escape(result.reason or 'unknown error')})[/red]"
    return f"{action}{status}"


def _display_results(reports: List[GroupReport], policy: RetentionPolicy) -> None:
    """Print each disposal and a summary table."""
    counts: Counter = Counter()
    ignored = 0

    for report in reports:
        if not report.eligible:
            ignored += 1
            continue
        for result in report.results:
            counts[result.outcome] += 1
            console.print(_describe(result, policy))

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Outcome")
    table.add_column("Files", justify="right")
    for outcome in Outcome:
        if counts[outcome]:
            table.add_row(outcome.value, str(counts[outcome]))
    table.add_row("[dim]groups without duplicates[/dim]", f"[dim]{ignored}[/dim]")

    console.print()
    console.print(table)

    if counts[Outcome.failed]:
        console.print(f"[red]✗ {counts[Outcome.failed]} files could not be disposed of[/red]")


def _save_results_json(reports: List[GroupReport], output_path: Path) -> None:
    """Save per-group results to a JSON file."""
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w", encoding="utf-8") as f:
        json.dump([report.to_dict() for report in reports], f, indent=2)


def main() -> None:
    """Main entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
