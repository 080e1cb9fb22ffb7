"""setstate-guard CLI - find this.state reads inside this.setState arguments."""
import json
import time
from pathlib import Path
from typing import List

import typer
from rich.table import Table
from rich.markup import escape
from rich.progress import (
    Progress,
    SpinnerColumn,
    TextColumn,
    BarColumn,
    TaskProgressColumn,
    TimeElapsedColumn,
)

from setstate_guard.config import __version__, get_config
from setstate_guard.analyzer.checker import SetStateChecker
from setstate_guard.analyzer.discovery import discover_files, display_path, missing_paths
from setstate_guard.analyzer.parser import LanguageParser
from setstate_guard.analyzer.report import RULE_ID
from setstate_guard.utils.safe_console import SafeConsole

app = typer.Typer(
    name="setstate-guard",
    help="Detect reads of this.state inside this.setState() arguments",
    add_completion=False
)

OUTPUT_FORMATS = ('text', 'json')


def run_checks(files: List[Path], checker: SetStateChecker, console: SafeConsole,
               show_progress: bool = True):
    """Analyze each file independently.

    Returns:
        (violations by file, skipped files)
    """
    results = {}
    skipped = []

    if show_progress:
        progress_ctx = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TimeElapsedColumn(),
            console=console,
            transient=True
        )
    else:
        from contextlib import nullcontext
        progress_ctx = nullcontext()

    with progress_ctx as progress:
        if show_progress:
            task = progress.add_task("[cyan]Checking components...", total=len(files))

        for file_path in files:
            start = time.perf_counter()
            violations = checker.check_file(file_path)
            elapsed = time.perf_counter() - start

            if violations is None:
                skipped.append(file_path)
                console.debug(f"skipped (unreadable): {escape(str(file_path))}")
            else:
                results[file_path] = violations
                console.debug(f"{escape(str(file_path))}: {len(violations)} violation(s) in {elapsed * 1000:.1f}ms")

            if show_progress:
                progress.advance(task)

    return results, skipped


def _print_text_report(results, skipped, console: SafeConsole):
    total = 0
    for file_path, violations in results.items():
        if not violations:
            continue
        total += len(violations)

        table = Table(title=escape(display_path(file_path)), title_justify="left")
        table.add_column("Line", style="green", justify="right")
        table.add_column("Col", style="green", justify="right")
        table.add_column("Source", style="cyan", no_wrap=False)
        table.add_column("Message", style="yellow")

        for violation in violations:
            table.add_row(
                str(violation.line),
                str(violation.column),
                escape(violation.source),
                violation.message,
            )
        console.print(table)

    files_with_problems = sum(1 for v in results.values() if v)
    console.print(f"\n[bold yellow]Summary:[/bold yellow]")
    console.print(f"  Files checked: {len(results)}")
    if skipped:
        console.print(f"  Files skipped: {len(skipped)}")
    if total:
        console.print(f"  [bold red]✗ {total} violation(s)[/bold red] in {files_with_problems} file(s) [dim]({RULE_ID})[/dim]")
    else:
        console.print("[bold green]✓ No state reads inside setState arguments found![/bold green]")


def _violations_as_json(results) -> str:
    payload: List[dict] = []
    for violations in results.values():
        payload.extend(violation.to_dict() for violation in violations)
    return json.dumps(payload, indent=2)


@app.command()
def check(
    paths: List[str] = typer.Argument(None, help="Files or directories to check (default: current directory)"),
    output_format: str = typer.Option("text", "--format", "-f", help="Output format: text or json"),
    include_vendored: bool = typer.Option(False, "--include-vendored", help="Also check node_modules/vendor directories"),
    no_progress: bool = typer.Option(False, "--no-progress", help="Disable the progress bar"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Print skipped files and per-file timing"),
):
    """Check components for this.state reads inside this.setState() arguments."""
    console = SafeConsole(verbose=verbose)

    if output_format not in OUTPUT_FORMATS:
        console.error(f"Unknown format '{output_format}' (expected one of: {', '.join(OUTPUT_FORMATS)})")
        raise typer.Exit(1)

    paths = paths or ["."]
    missing = missing_paths(paths)
    if missing:
        for path in missing:
            console.error(f"Path does not exist: {path}")
        raise typer.Exit(1)

    config = get_config()
    files = discover_files(paths, config.excluded_dirs, include_vendored=include_vendored)
    console.debug(f"Discovered {len(files)} file(s)")

    checker = SetStateChecker(config)
    show_progress = not no_progress and output_format == 'text' and console.is_terminal
    results, skipped = run_checks(files, checker, console, show_progress=show_progress)

    if output_format == 'json':
        typer.echo(_violations_as_json(results))
    else:
        _print_text_report(results, skipped, console)

    if any(results.values()):
        raise typer.Exit(1)


@app.command()
def languages():
    """List supported file extensions and the grammar used for each."""
    console = SafeConsole()
    table = Table(title="Supported Languages")
    table.add_column("Extension", style="cyan")
    table.add_column("Grammar", style="magenta")
    for extension, language in LanguageParser.SUPPORTED_LANGUAGES.items():
        table.add_row(extension, language)
    console.print(table)


@app.command()
def version():
    """Print the setstate-guard version."""
    typer.echo(f"setstate-guard {__version__}")


@app.callback()
def main():
    """setstate-guard - flags this.state reads that race with pending setState updates."""
    pass


if __name__ == "__main__":
    app()
