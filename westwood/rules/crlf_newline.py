# Rule XI:B: use only UNIX newlines; DOS line endings (\r\n) are prohibited.

from __future__ import annotations

from typing import Optional

from westwood.context import FileContext
from westwood.findings.models import RuleViolation, Span
from westwood.rules.base import Rule
from westwood.rules.tab_indentation import DEFAULT_MAX_DIAGNOSTICS, cap_violations

VIM_TIP = "Use the `fileformat' option in Vim to fix this"


class CrlfNewlineRule(Rule):
    id = "crlf-newline"
    code = "XI:B"
    name = "NoCRLF"
    description = "do not use DOS-style newlines (\\r\\n)"

    def __init__(self, max_diagnostics: Optional[int] = DEFAULT_MAX_DIAGNOSTICS) -> None:
        self.max_diagnostics = max_diagnostics

    def run(self, context: FileContext) -> list[RuleViolation]:
        violations = [
            self.violation(
                "Line contains DOS-style ending",
                Span(start=start + len(line) - 1, end=start + len(line)),
                label="carriage return here",
                notes=[VIM_TIP],
            )
            for _number, start, line in context.lines()
            if line.endswith(b"\r")
        ]
        return cap_violations(violations, self.max_diagnostics, "contain DOS endings")
