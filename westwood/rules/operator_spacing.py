# Rule III:B: one space before and after binary and assignment operators.

from __future__ import annotations

from typing import Iterable

from westwood.context import FileContext
from westwood.findings.models import RuleViolation
from westwood.patterns import Captures, Pattern, any_node, field, node, sequence, token
from westwood.rules.base import Rule
from westwood.rules.helpers import is_single_space_or_break

BINARY_OPERATOR = Pattern(
    node(
        "binary_expression",
        field("left", any_node(capture="left")),
        field("operator", any_node(capture="operator")),
        field("right", any_node(capture="right")),
    ),
    name="binary-operator",
)

ASSIGNMENT_OPERATOR = Pattern(
    node(
        "assignment_expression",
        field("left", any_node(capture="left")),
        field("operator", any_node(capture="operator")),
        field("right", any_node(capture="right")),
    ),
    name="assignment-operator",
)

INITIALIZER = Pattern(
    node(
        "init_declarator",
        sequence(any_node(capture="left"), token("=", capture="operator"), any_node(capture="right")),
    ),
    name="initializer",
)


class OperatorSpacingRule(Rule):
    """
    One space must be placed before and after all logical and arithmetic
    operators, except unary and data reference operators ([], ., &, *, ->),
    which are different node kinds and never match here.

    Breaking a long expression across lines right before or after an
    operator is accepted.
    """

    id = "operator-spacing"
    code = "III:B"
    name = "OperatorSpacing"
    description = "one space must surround binary operators"
    patterns = (BINARY_OPERATOR, ASSIGNMENT_OPERATOR, INITIALIZER)

    def evaluate(self, context: FileContext, captures: Captures) -> Iterable[RuleViolation]:
        left = captures.node("left")
        operator = captures.node("operator")
        right = captures.node("right")
        source = context.source
        if is_single_space_or_break(left, operator, source) and is_single_space_or_break(operator, right, source):
            return
        yield self.violation(
            f"Expected a single space before and after `{context.text(operator)}'",
            captures.span("operator"),
        )
