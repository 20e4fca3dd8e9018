# Human output: compiler-style lines rendered through a rich Console, plus the rule listing table.

from __future__ import annotations

import io
from typing import Iterable, Sequence

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from westwood.findings.models import Diagnostic, Severity
from westwood.reporting.base import Formatter, OutputKind, start_of, summarize
from westwood.rules.base import Rule

# Severity -> Rich style
SEVERITY_STYLE = {
    "internal-error": "bold magenta",
    "error": "bold red",
    "warning": "bold yellow",
    "info": "bold blue",
}

DEFAULT_SEVERITY_STYLE = "bold white"


def _severity_style(severity: Severity) -> str:
    return SEVERITY_STYLE.get(str(severity), DEFAULT_SEVERITY_STYLE)


def make_console(color: bool, file=None) -> Console:
    """
    A Console that never wraps or highlights on its own.

    Without color no escape codes are written at all, so the output is the
    same whether or not stdout is a terminal.
    """
    return Console(
        file=file,
        force_terminal=color,
        no_color=not color,
        color_system="standard" if color else None,
        highlight=False,
        emoji=False,
        markup=False,
        soft_wrap=True,
        width=10_000,
    )


def _location(file: str, line: int, column: int) -> str:
    return f"{file}:{line}:{column}"


def diagnostic_lines(diagnostic: Diagnostic) -> list[Text]:
    """
    The header line, the primary label line (if any), one line per secondary
    span and one `    = note: ...` line per note.
    """
    start = start_of(diagnostic.primary)
    header = Text.assemble(
        (_location(diagnostic.file, start.line, start.column), "bold"),
        ": ",
        (str(diagnostic.severity), _severity_style(diagnostic.severity)),
        " ",
        (f"[{diagnostic.rule_id}]", "dim"),
        " ",
        diagnostic.message,
    )
    lines = [header]
    if diagnostic.primary_label:
        lines.append(Text.assemble("    = ", (diagnostic.primary_label, "cyan")))
    for label in diagnostic.secondary:
        position = start_of(label.span)
        lines.append(
            Text.assemble(
                "    ",
                (label.label, "cyan"),
                " at ",
                _location(diagnostic.file, position.line, position.column),
            )
        )
    for note in diagnostic.notes:
        lines.append(Text.assemble("    = ", ("note", "bold"), ": ", note))
    return lines


def summary_line(diagnostics: Sequence[Diagnostic]) -> Text:
    total = len(diagnostics)
    counts = summarize(diagnostics)
    parts: list = [(f"{total} diagnostic{'s' if total != 1 else ''}", "bold"), " ("]
    for i, (severity, count) in enumerate(counts.items()):
        if i:
            parts.append(", ")
        style = SEVERITY_STYLE.get(severity, DEFAULT_SEVERITY_STYLE) if count else "dim"
        parts.append((f"{count} {severity}", style))
    parts.append(")")
    return Text.assemble(*parts)


class HumanFormatter(Formatter):
    """
    One `file:line:col: severity [rule-id] message` line per diagnostic,
    indented label lines under it, and a summary line at the end.
    """

    kind = OutputKind.HUMAN

    def render(self, diagnostics: Sequence[Diagnostic], *, color: bool = False) -> bytes:
        buffer = io.StringIO()
        console = make_console(color, file=buffer)
        for diagnostic in diagnostics:
            for line in diagnostic_lines(diagnostic):
                console.print(line)
        console.print(summary_line(diagnostics))
        return buffer.getvalue().encode("utf-8")


def print_rules(rules: Iterable[Rule], console: Console | None = None) -> None:
    """Print the rule registry as a table (used by `westwood rules`)."""
    if console is None:
        console = Console()
    table = Table(
        title="Westwood rules",
        show_header=True,
        header_style="bold magenta",
        box=box.ROUNDED,
        padding=(0, 1),
    )
    table.add_column("Code", style="dim", no_wrap=True)
    table.add_column("Id", style="bold cyan", no_wrap=True)
    table.add_column("Severity", width=10)
    table.add_column("Description", style="white")
    for rule in rules:
        table.add_row(
            rule.code,
            rule.id,
            Text(str(rule.severity), style=_severity_style(rule.severity)),
            rule.description,
        )
    console.print(table)
