# Machine output: one tab-separated record per diagnostic, fields in a fixed order.

from __future__ import annotations

from typing import Sequence

from westwood.findings.models import Diagnostic, Label
from westwood.reporting.base import Formatter, OutputKind, end_of, start_of

_ESCAPES = str.maketrans({"\\": "\\\\", "\t": "\\t", "\n": "\\n", "\r": "\\r"})


def escape(field: str) -> str:
    """Backslash-escape the characters that would break a record apart."""
    return field.translate(_ESCAPES)


def _secondary_field(label: Label) -> str:
    start = start_of(label.span)
    end = end_of(label.span)
    return f"{start.line}:{start.column}:{end.line}:{end.column}:{escape(label.label)}"


def _note_field(note: str) -> str:
    return f"note:{escape(note)}"


def format_record(diagnostic: Diagnostic) -> str:
    """
    file, line, column, end line, end column, severity, rule id, kind,
    message, primary label (empty when absent), then one
    line:column:end_line:end_column:label field per secondary span and one
    note:text field per note.
    """
    start = start_of(diagnostic.primary)
    end = end_of(diagnostic.primary)
    fields = [
        escape(diagnostic.file),
        str(start.line),
        str(start.column),
        str(end.line),
        str(end.column),
        str(diagnostic.severity),
        diagnostic.rule_id,
        str(diagnostic.kind),
        escape(diagnostic.message),
        escape(diagnostic.primary_label or ""),
    ]
    fields.extend(_secondary_field(label) for label in diagnostic.secondary)
    fields.extend(_note_field(note) for note in diagnostic.notes)
    return "\t".join(fields)


class MachineFormatter(Formatter):
    kind = OutputKind.MACHINE

    def render(self, diagnostics: Sequence[Diagnostic], *, color: bool = False) -> bytes:
        return "".join(format_record(d) + "\n" for d in diagnostics).encode("utf-8")
