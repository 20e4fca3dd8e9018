# Rule I:D (placement): file-scope declarations must come before the first function definition.

from __future__ import annotations

from westwood.context import FileContext, node_span
from westwood.findings.models import RuleViolation
from westwood.patterns import Pattern, any_of, node, parent
from westwood.rules.base import Rule

TOP_LEVEL_FUNCTION = Pattern(
    node("function_definition", parent("translation_unit"), capture="function"),
    name="top-level-function",
)

TOP_LEVEL_DECLARATION = Pattern(
    node(
        None,
        parent("translation_unit"),
        any_of(
            node("declaration"),
            node("type_definition"),
            node("struct_specifier"),
            node("union_specifier"),
            node("enum_specifier"),
        ),
        capture="declaration",
    ),
    name="top-level-declaration",
)


class DeclarationsAtTopRule(Rule):
    """
    Declarations and definitions should be at the top of the file.

    Interpreted as: every top-level declaration (variables, prototypes,
    typedefs, struct/union/enum types) precedes the first function
    definition.
    """

    id = "declarations-at-top"
    code = "I:D"
    name = "DeclarationsAtTop"
    description = "top-level declarations must come before function definitions"
    patterns = (TOP_LEVEL_FUNCTION, TOP_LEVEL_DECLARATION)

    def run(self, context: FileContext) -> list[RuleViolation]:
        root = context.root_node
        first_function = next(
            (c.node("function") for c in TOP_LEVEL_FUNCTION.matches(root, context.source)),
            None,
        )
        if first_function is None:
            return []

        violations: list[RuleViolation] = []
        for captures in TOP_LEVEL_DECLARATION.matches(root, context.source):
            declaration = captures.node("declaration")
            if declaration.start_byte < first_function.end_byte:
                continue
            function_header = first_function.child_by_field_name("declarator") or first_function
            violations.append(
                self.violation(
                    "All top-level declarations must come before function definitions",
                    node_span(declaration),
                    secondary=[("first function defined here", node_span(function_header))],
                )
            )
        return violations
