"""
Typer CLI entry point.

A thin caller around the rule engine:
- `serverlint lint FILE...` parses each given .swift file, runs the enabled
  rules and prints diagnostics (exit code 1 if any error-severity diagnostic
  is shown)
- `serverlint rules` lists the registered rules

Files are linted in the order given; the CLI does not walk directories.
"""

import logging
from pathlib import Path
from typing import List, Optional

import typer

from serverlint.config import get_default_config
from serverlint.diagnostics.models import Diagnostic, Severity
from serverlint.linter import Linter
from serverlint.parser import create_parser
from serverlint.reporting.console import print_diagnostics, print_rules
from serverlint.rules.registry import default_registry

logger = logging.getLogger(__name__)

app = typer.Typer(help="serverlint - static analysis rules for Swift server code.")


@app.callback()
def _configure(
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging."),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command()
def lint(
    files: List[Path] = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        readable=True,
        help="Swift files to lint.",
    ),
    profile: Optional[str] = typer.Option(None, "--profile", "-p", help="Configuration profile to apply."),
    rule: Optional[List[str]] = typer.Option(None, "--rule", "-r", help="Only run these rule identifiers."),
    min_severity: Severity = typer.Option(
        Severity.INFO, "--min-severity", help="Hide diagnostics below this severity."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show fixes and notes."),
) -> None:
    """Lint the given Swift files."""
    linter = Linter(get_default_config(), profile=profile, only=rule or None)
    if not linter.rules:
        typer.echo("No rules are enabled in the current configuration.")
        raise typer.Exit(code=1)

    parser = create_parser()
    shown: List[Diagnostic] = []
    for path in files:
        for diagnostic in linter.lint_file(path, parser=parser):
            if diagnostic.severity >= min_severity:
                shown.append(diagnostic)

    print_diagnostics(shown, verbose=verbose)
    if any(d.severity is Severity.ERROR for d in shown):
        raise typer.Exit(code=1)


@app.command()
def rules() -> None:
    """List the registered rules."""
    print_rules(default_registry().all_info())


def main() -> None:
    """Entry point for `python -m serverlint.main`."""
    app()


if __name__ == "__main__":
    main()
