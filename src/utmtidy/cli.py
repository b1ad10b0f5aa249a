"""
utmtidy CLI - Command Line Interface

Entry point for command-line operations: checking pasted URL lists or
spreadsheet ranges, writing cleaned exports, and managing ruleset files.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.panel import Panel
from rich.markup import escape

from utmtidy import __version__
from utmtidy.core.constants import ExportFormat, PatchKind, Severity
from utmtidy.core.exceptions import UtmTidyError

# Create CLI app
app = typer.Typer(
    name="utmtidy",
    help="utmtidy - Lint, clean and review UTM-tagged URLs",
    add_completion=False,
    no_args_is_help=True,
)

ruleset_app = typer.Typer(help="Validate and inspect ruleset files")
app.add_typer(ruleset_app, name="ruleset")

# Rich console for output
console = Console()

SEVERITY_COLORS = {
    Severity.ERROR: "red",
    Severity.WARNING: "yellow",
    Severity.INFO: "dim",
}

KIND_COLORS = {
    PatchKind.SAFE: "green",
    PatchKind.SEMANTIC: "yellow",
    PatchKind.ERROR: "red",
}


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _read_input(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    path = Path(source)
    if not path.exists():
        raise UtmTidyError(f"Input file not found: {path}")
    return path.read_text(encoding="utf-8")


# ============================================================================
# Main Commands
# ============================================================================

@app.command()
def check(
    source: str = typer.Argument(..., help="Input file with URLs or a TSV range ('-' for stdin)"),
    ruleset: Optional[Path] = typer.Option(
        None,
        "--ruleset",
        "-r",
        help="Ruleset file (YAML or JSON)",
        exists=True,
    ),
    max_rows: Optional[int] = typer.Option(
        None,
        "--max-rows",
        "-n",
        help="Process at most this many URLs",
        min=0,
    ),
    suggest: bool = typer.Option(
        False,
        "--suggest",
        "-s",
        help="Include allow-list suggestions",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the full result as JSON",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Also write the full result as JSON to this file",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Verbose output",
    ),
) -> None:
    """
    Lint URLs and show the classified changes cleaning would make.

    Exits with code 1 when any row has an Error-severity issue.
    """
    from utmtidy.core.config import load_ruleset_config
    from utmtidy.orchestrator.pipeline import run_pipeline
    from utmtidy.reporting.exporters.json import JSONExporter, to_json
    from utmtidy.reporting.generator import build_summary

    _configure_logging(verbose)

    try:
        config = load_ruleset_config(ruleset)
        result = run_pipeline(_read_input(source), config, max_rows=max_rows, suggest=suggest)
        if output:
            output.parent.mkdir(parents=True, exist_ok=True)
            JSONExporter().export(result, output)
            if not as_json:
                console.print(f"[green]✓[/green] Result written to: {output}")
    except UtmTidyError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    if as_json:
        console.print_json(to_json(result))
        raise typer.Exit(code=1 if result.has_errors else 0)

    if result.all_issues:
        issues_table = Table(title="Issues")
        issues_table.add_column("Row", justify="right")
        issues_table.add_column("Field")
        issues_table.add_column("Severity")
        issues_table.add_column("Code")
        issues_table.add_column("Message")
        for issue in result.all_issues:
            color = SEVERITY_COLORS.get(issue.severity, "white")
            issues_table.add_row(
                str(issue.row_index + 1),
                escape(issue.field),
                f"[{color}]{issue.severity.value}[/{color}]",
                issue.code,
                escape(issue.message),
            )
        console.print(issues_table)

    if result.all_patches:
        patches_table = Table(title="Changes")
        patches_table.add_column("Row", justify="right")
        patches_table.add_column("Field")
        patches_table.add_column("Kind")
        patches_table.add_column("Before")
        patches_table.add_column("After")
        for patch in result.all_patches:
            color = KIND_COLORS.get(patch.kind, "white")
            patches_table.add_row(
                str(patch.row_index + 1),
                escape(patch.field),
                f"[{color}]{patch.kind.value}[/{color}]",
                escape(patch.before),
                escape(patch.after),
            )
        console.print(patches_table)

    summary = build_summary(result)
    counts = summary.counts
    console.print(Panel.fit(
        f"Mode: [cyan]{summary.mode}[/cyan]\n"
        f"Rows: [yellow]{summary.processed_rows}[/yellow]"
        + (f" of {summary.total_rows} (row cap reached)" if summary.truncated else "")
        + f"\nClean rows: [green]{summary.clean_rows}[/green]\n"
        f"Errors: [red]{counts.errors}[/red]  Warnings: [yellow]{counts.warnings}[/yellow]\n"
        f"Changes: [green]{counts.safe} safe[/green], [yellow]{counts.semantic} semantic[/yellow], "
        f"[red]{counts.patch_errors} error[/red]",
        title="Summary",
    ))

    if summary.has_errors:
        raise typer.Exit(code=1)


@app.command()
def clean(
    source: str = typer.Argument(..., help="Input file with URLs or a TSV range ('-' for stdin)"),
    ruleset: Optional[Path] = typer.Option(
        None,
        "--ruleset",
        "-r",
        help="Ruleset file (YAML or JSON)",
        exists=True,
    ),
    format: ExportFormat = typer.Option(
        ExportFormat.URL_LIST,
        "--format",
        "-f",
        help="Export format",
        case_sensitive=False,
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output file path (stdout when omitted)",
    ),
    max_rows: Optional[int] = typer.Option(
        None,
        "--max-rows",
        "-n",
        help="Process at most this many URLs",
        min=0,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Verbose output",
    ),
) -> None:
    """
    Write cleaned URLs as a URL list, TSV or CSV.
    """
    from utmtidy.core.config import load_ruleset_config
    from utmtidy.orchestrator.pipeline import run_pipeline
    from utmtidy.reporting.exporters import get_exporter

    _configure_logging(verbose)

    try:
        config = load_ruleset_config(ruleset)
        result = run_pipeline(_read_input(source), config, max_rows=max_rows)
        exporter = get_exporter(format)

        if output:
            output.parent.mkdir(parents=True, exist_ok=True)
            exporter.export(result.cleaned_urls, output)
            console.print(f"[green]✓[/green] Exported {len(result.cleaned_urls)} rows to: {output}")
        else:
            typer.echo(exporter.render(result.cleaned_urls))
    except UtmTidyError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)


@app.command()
def detect(
    source: str = typer.Argument(..., help="Input file ('-' for stdin)"),
) -> None:
    """Show the detected input mode and likely URL columns."""
    from utmtidy.core.constants import InputMode
    from utmtidy.ingest import detect_input_mode, detect_likely_url_columns, parse_tsv_range

    try:
        text = _read_input(source)
    except UtmTidyError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    mode = detect_input_mode(text)
    console.print(f"[blue]Mode:[/blue] {mode.value}")
    if mode == InputMode.TSV_RANGE:
        rows = parse_tsv_range(text)
        columns = detect_likely_url_columns(rows)
        console.print(f"[blue]Rows:[/blue] {len(rows)}")
        console.print(f"[blue]URL columns:[/blue] {', '.join(str(c) for c in columns) or 'none'}")


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold cyan]utmtidy[/bold cyan] version [yellow]{__version__}[/yellow]")


# ============================================================================
# Ruleset Commands
# ============================================================================

@ruleset_app.command("validate")
def ruleset_validate(
    path: Path = typer.Argument(..., help="Ruleset file (YAML or JSON)"),
) -> None:
    """Validate a ruleset file."""
    from utmtidy.core.config import load_ruleset_config
    from utmtidy.core.exceptions import InvalidRulesetError

    try:
        config = load_ruleset_config(path)
    except InvalidRulesetError as e:
        console.print(f"[red]✗[/red] Invalid ruleset: {path}")
        for error in e.errors:
            console.print(f"  - {error}")
        raise typer.Exit(code=1)
    except UtmTidyError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    console.print(f"[green]✓[/green] Ruleset '{config.name}' is valid")


@ruleset_app.command("show")
def ruleset_show(
    path: Optional[Path] = typer.Argument(None, help="Ruleset file (defaults when omitted)"),
) -> None:
    """Print the effective ruleset as JSON."""
    from utmtidy.core.config import dump_ruleset_config, load_ruleset_config

    try:
        config = load_ruleset_config(path)
    except UtmTidyError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    typer.echo(dump_ruleset_config(config))


def main() -> None:
    """Main entry point for CLI."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    main()
