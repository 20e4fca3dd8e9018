# Rule II:A: lines must fit within 80 columns.

from __future__ import annotations

from westwood.context import FileContext
from westwood.findings.models import RuleViolation, Span
from westwood.rules.base import Rule
from westwood.rules.helpers import char_width

DEFAULT_MAX_COLUMNS = 80


class LineLengthRule(Rule):
    """
    Each line must be kept within 80 columns so it fits on printouts.

    Width is measured the way an editor displays it: tabs count as 8 columns
    and wide characters as 2. The violation starts at the first character
    past the limit and runs to the end of the line. Indentation of wrapped
    continuation lines is not checked.
    """

    id = "line-length"
    code = "II:A"
    name = "LineLength"
    description = "lines must not exceed 80 columns"

    def __init__(self, max_columns: int = DEFAULT_MAX_COLUMNS) -> None:
        if max_columns < 1:
            raise ValueError("max_columns must be positive")
        self.max_columns = max_columns

    def run(self, context: FileContext) -> list[RuleViolation]:
        violations: list[RuleViolation] = []
        for _number, start, raw in context.lines():
            line = raw.decode("utf-8")
            if line.endswith("\r"):
                line = line[:-1]

            width = 0
            overflow_at = None
            offset = start
            for ch in line:
                width += char_width(ch)
                if width > self.max_columns and overflow_at is None:
                    overflow_at = offset
                offset += len(ch.encode("utf-8"))

            if overflow_at is None:
                continue
            violations.append(
                self.violation(
                    f"Line is {width} columns long; the maximum is {self.max_columns}",
                    Span(start=overflow_at, end=offset),
                    label=f"{width - self.max_columns} column(s) over the limit",
                )
            )
        return violations
