# Rule XII:A: no more than one variable may be defined on a single line.

from __future__ import annotations

from typing import Iterable

from westwood.context import FileContext, node_span
from westwood.findings.models import RuleViolation
from westwood.patterns import Captures, Pattern, ancestor, any_of, child, node, not_, text
from westwood.rules.base import Rule
from westwood.rules.helpers import is_function_declaration

# Declarations inside functions, and global ones unless they are extern.
VARIABLE_DECLARATION = Pattern(
    node(
        "declaration",
        any_of(
            ancestor("function_definition"),
            not_(child(node("storage_class_specifier", text(r"^extern$")))),
        ),
        capture="declaration",
    ),
    name="variable-declaration",
)


class MultipleDefinitionsRule(Rule):
    """
    DON'T DO THIS:

        int side_a, side_b, side_c = 0;

    Do it this way:

        int side_a = 0;
        int side_b = 0;
        int side_c = 0;
    """

    id = "multiple-definitions"
    code = "XII:A"
    name = "MultipleDefinitions"
    description = "at most one variable may be defined on a single line"
    patterns = (VARIABLE_DECLARATION,)

    def evaluate(self, context: FileContext, captures: Captures) -> Iterable[RuleViolation]:
        declaration = captures.node("declaration")
        if is_function_declaration(declaration):
            return
        declarators = declaration.children_by_field_name("declarator")
        if len(declarators) < 2:
            return
        first = declarators[0]
        for extra in declarators[1:]:
            yield self.violation(
                "No more than one variable may be defined on a single line",
                node_span(extra),
                label="additional definition here",
                secondary=[("first definition here", node_span(first))],
            )
