# Rule I:C: #define constants must be uppercase, at least 2 characters, numeric values parenthesized.

from __future__ import annotations

from typing import Iterable

from westwood.context import FileContext
from westwood.findings.models import RuleViolation
from westwood.patterns import Captures, Pattern, field, node, text
from westwood.rules.base import Rule

SHORT_NAME = Pattern(
    node("preproc_def", field("name", node("identifier", text(r"^.$"), capture="short"))),
    name="short-constant-name",
)

LOWERCASE_NAME = Pattern(
    node("preproc_def", field("name", node("identifier", text("[a-z]"), capture="lowercase"))),
    name="lowercase-constant-name",
)

# A bare number such as `#define SIZE 10`; `(10)` and expressions are left alone.
UNWRAPPED_NUMBER = Pattern(
    node(
        "preproc_def",
        field("value", node("preproc_arg", text(r"^\s*-?[0-9][0-9A-Za-z.]*\s*$"), capture="number")),
    ),
    name="unwrapped-numeric-constant",
)

MESSAGES = {
    "short": "Constant name must contain at least 2 characters",
    "lowercase": "Constant name must use upper snake case",
    "number": "Numeric constant value must be wrapped in parentheses",
}


class ConstantNamesRule(Rule):
    """
    Constants are declared with #define, named in uppercase with at least two
    characters; numeric values are enclosed in parentheses, e.g.
    `#define TEMPERATURE_OF_THE_ROOM (10)`.
    """

    id = "constant-names"
    code = "I:C"
    name = "ConstantNames"
    description = "constants must be uppercase #defines with parenthesized numeric values"
    patterns = (SHORT_NAME, LOWERCASE_NAME, UNWRAPPED_NUMBER)

    def evaluate(self, context: FileContext, captures: Captures) -> Iterable[RuleViolation]:
        for capture_name, message in MESSAGES.items():
            if capture_name in captures:
                yield self.violation(
                    message,
                    captures.span(capture_name),
                    label=captures.text(capture_name).strip(),
                )
