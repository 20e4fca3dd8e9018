# Rule III:F: no space between a function name and the parenthesis of its argument list.

from __future__ import annotations

from typing import Iterable

from westwood.context import FileContext, span_between
from westwood.findings.models import RuleViolation
from westwood.patterns import Captures, Pattern, any_node, child, field, node, token
from westwood.rules.base import Rule

FUNCTION_DECLARATOR = Pattern(
    node(
        "function_declarator",
        field("declarator", any_node(capture="function")),
        field("parameters", node("parameter_list", child(token("(", capture="paren"), index=0))),
    ),
    name="function-declarator",
)

FUNCTION_CALL = Pattern(
    node(
        "call_expression",
        field("function", any_node(capture="function")),
        field("arguments", node("argument_list", child(token("(", capture="paren"), index=0))),
    ),
    name="function-call",
)

MACRO_DEFINITION = Pattern(
    node(
        "preproc_function_def",
        field("name", any_node(capture="function")),
        field("parameters", node("preproc_params", child(token("(", capture="paren"), index=0))),
    ),
    name="function-macro",
)


class FunctionParenSpacingRule(Rule):
    """Never place spaces between function names and the parenthesis preceding the argument list."""

    id = "function-paren-spacing"
    code = "III:F"
    name = "FunctionParenSpacing"
    description = "no space between a function name and its argument list"
    patterns = (FUNCTION_DECLARATOR, FUNCTION_CALL, MACRO_DEFINITION)

    def evaluate(self, context: FileContext, captures: Captures) -> Iterable[RuleViolation]:
        function = captures.node("function")
        paren = captures.node("paren")
        if function.end_byte == paren.start_byte:
            return
        yield self.violation(
            "Expected no space between function and parenthesis",
            span_between(function, paren),
            label=f"after `{context.text(function)}'",
        )
