"""
Typer CLI entry point.

    westwood analyze PATH... [--format human|machine|json] [--order location|rule]
                             [--min-severity LEVEL] [--jobs N] [--disable RULE]...
                             [--headers] [--color/--no-color] [--verbose]
    westwood rules

analyze writes the rendered report to stdout and exits 1 when any diagnostic
is at or above --min-severity. Logging goes to stderr.
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional

import typer

from westwood.aggregator import Ordering
from westwood.config import get_default_config, get_enabled_rules
from westwood.errors import RegistryError
from westwood.findings.models import Severity
from westwood.reporting.base import OutputKind
from westwood.reporting.console import print_rules
from westwood.runner import lint_paths

logger = logging.getLogger(__name__)

app = typer.Typer(help="Westwood - code standard linter for C source files.")


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@app.command()
def analyze(
    paths: List[Path] = typer.Argument(..., help="C files or directories to lint."),
    output: OutputKind = typer.Option(OutputKind.HUMAN, "--format", "-f", help="Output format."),
    order: Ordering = typer.Option(Ordering.LOCATION, "--order", help="Sort diagnostics by location or by rule."),
    min_severity: Severity = typer.Option(
        Severity.WARNING, "--min-severity", help="Lowest severity that makes the run fail."
    ),
    jobs: Optional[int] = typer.Option(None, "--jobs", "-j", min=1, help="Worker threads (default: CPU count)."),
    disable: Optional[List[str]] = typer.Option(None, "--disable", "-d", help="Rule id to skip (repeatable)."),
    headers: bool = typer.Option(False, "--headers", help="Also lint .h files found in directories."),
    color: Optional[bool] = typer.Option(None, "--color/--no-color", help="Colorize human output (default: if a TTY)."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """
    Lint C files, or every .c file under the given directories.
    """
    configure_logging(verbose)
    if color is None:
        color = sys.stdout.isatty()

    config = get_default_config(
        output=output,
        order=order,
        min_severity=min_severity,
        jobs=jobs,
        color=color,
        include_headers=headers,
    )
    try:
        config.registry = get_enabled_rules(config, disable or ())
    except RegistryError as e:
        raise typer.BadParameter(str(e), param_hint="--disable")

    if not len(config.registry):
        logger.warning("Every rule is disabled; only pipeline errors will be reported")

    result = lint_paths(paths, config)
    logger.info("Checked %d file(s): %d diagnostic(s)", result.files_checked, len(result.diagnostics))
    typer.echo(result.output.decode("utf-8"), nl=False)
    raise typer.Exit(code=result.exit_code)


@app.command()
def rules() -> None:
    """List every rule, in the order they run."""
    print_rules(get_default_config().registry)


def main() -> None:
    """Entry point for the `westwood` console script and `python -m westwood.main`."""
    app()


if __name__ == "__main__":
    main()
