# Rule III:E: never put trailing whitespace at the end of a line.

from __future__ import annotations

from westwood.context import FileContext
from westwood.findings.models import RuleViolation, Span
from westwood.rules.base import Rule

WHITESPACE = b" \t\f\v"


class TrailingWhitespaceRule(Rule):
    id = "trailing-whitespace"
    code = "III:E"
    name = "TrailingWhitespace"
    description = "lines must not have trailing whitespace"

    def run(self, context: FileContext) -> list[RuleViolation]:
        violations: list[RuleViolation] = []
        for _number, start, line in context.lines():
            # A CR of a DOS line ending is reported by crlf-newline.
            content = line[:-1] if line.endswith(b"\r") else line
            trimmed = content.rstrip(WHITESPACE)
            if len(trimmed) == len(content):
                continue
            violations.append(
                self.violation(
                    "Line contains trailing whitespace",
                    Span(start=start + len(trimmed), end=start + len(content)),
                )
            )
        return violations
