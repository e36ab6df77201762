# Rich console output: render diagnostics and rule listings in the terminal.

from __future__ import annotations

from typing import Optional, Sequence

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from serverlint.diagnostics.models import Diagnostic, Severity
from serverlint.rules.registry import RuleInfo

SEVERITY_STYLE = {
    Severity.ERROR: "bold red",
    Severity.WARNING: "bold yellow",
    Severity.INFO: "bold blue",
}


def _severity_text(severity: Severity) -> Text:
    return Text(severity.value.upper(), style=SEVERITY_STYLE[severity])


def print_diagnostics(
    diagnostics: Sequence[Diagnostic],
    console: Optional[Console] = None,
    verbose: bool = False,
) -> None:
    """
    Print diagnostics grouped by file, in the order they were produced.

    With verbose, each diagnostic's fix and notes are listed under the table.
    """
    console = console or Console()

    if not diagnostics:
        console.print(
            Panel(
                "[green]No issues found.[/green]",
                title="serverlint",
                border_style="green",
                box=box.ROUNDED,
            )
        )
        return

    by_file: dict[str, list[Diagnostic]] = {}
    for d in diagnostics:
        by_file.setdefault(d.file_path, []).append(d)

    for path, file_diagnostics in by_file.items():
        console.print()
        console.print(f"[bold cyan]{path}[/bold cyan]")

        table = Table(show_header=True, header_style="bold magenta", box=box.SIMPLE, padding=(0, 1))
        table.add_column("Line", justify="right", style="dim", width=5)
        table.add_column("Col", justify="right", style="dim", width=4)
        table.add_column("Severity", width=8)
        table.add_column("Rule", style="dim")
        table.add_column("Message")

        for d in file_diagnostics:
            table.add_row(
                str(d.location.line),
                str(d.location.column),
                _severity_text(d.severity),
                d.rule_identifier,
                d.message,
            )
        console.print(table)

        if verbose:
            for d in file_diagnostics:
                if d.fix is not None:
                    console.print(
                        f"  [dim]{d.location.line}:{d.location.column} fix:[/dim] "
                        f"{d.fix.description} -> [green]{d.fix.replacement!r}[/green]"
                    )
                for note in d.notes:
                    console.print(f"  [dim]note:[/dim] {note.message}")

    _print_summary(diagnostics, console)


def _print_summary(diagnostics: Sequence[Diagnostic], console: Console) -> None:
    counts = {severity: 0 for severity in Severity}
    for d in diagnostics:
        counts[d.severity] += 1

    total = len(diagnostics)
    parts = [f"[bold]{total} diagnostic{'s' if total != 1 else ''}[/bold]"]
    for severity in sorted(Severity, reverse=True):
        if counts[severity]:
            parts.append(f"[{SEVERITY_STYLE[severity]}]{counts[severity]} {severity.value}[/]")

    console.print()
    console.print(
        Panel(
            " | ".join(parts),
            title="Summary",
            border_style="red" if counts[Severity.ERROR] else "yellow",
            box=box.ROUNDED,
        )
    )


def print_rules(rules: Sequence[RuleInfo], console: Optional[Console] = None) -> None:
    """Print a table of registered rules."""
    console = console or Console()
    table = Table(title="Rules", show_header=True, header_style="bold cyan", box=box.ROUNDED)
    table.add_column("Identifier", style="bold")
    table.add_column("Category")
    table.add_column("Default", width=8)
    table.add_column("Name")
    for info in rules:
        table.add_row(
            info.identifier,
            info.category.value,
            _severity_text(info.default_severity),
            info.name,
        )
    console.print(table)
