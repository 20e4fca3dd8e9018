# Rule III:D: #define statements must be grouped together, before the functions.

from __future__ import annotations

from typing import Sequence

from tree_sitter import Node as TSNode

from westwood.context import FileContext, node_span
from westwood.findings.models import RuleViolation, Span
from westwood.patterns import Pattern, ancestor, any_of, node, not_
from westwood.rules.base import Rule
from westwood.rules.helpers import function_definition_name

DEFINE = Pattern(
    any_of(node("preproc_def"), node("preproc_function_def"), capture="define"),
    name="define",
)

GLOBAL_DEFINE = Pattern(
    node(
        None,
        any_of(node("preproc_def"), node("preproc_function_def")),
        not_(ancestor("function_definition")),
        capture="define",
    ),
    name="global-define",
)

FUNCTION_BODY = Pattern(node("function_definition", capture="function"), name="function-body")


def group_adjacent(defines: Sequence[TSNode]) -> list[Span]:
    """
    Collapse #define nodes into groups of consecutive lines.

    A #define node includes its terminating newline, so two defines on
    consecutive lines touch; a blank line or any other code starts a new group.
    """
    groups: list[Span] = []
    for define in defines:
        if groups and groups[-1].end == define.start_byte:
            groups[-1] = Span(start=groups[-1].start, end=define.end_byte)
        else:
            groups.append(Span(start=define.start_byte, end=define.end_byte))
    return groups


def _without_trailing_eol(span: Span, source: bytes) -> Span:
    end = span.end
    while end > span.start and source[end - 1 : end] in (b"\n", b"\r"):
        end -= 1
    return Span(start=span.start, end=end)


class DefinePlacementRule(Rule):
    """
    #define expressions need to be grouped together in column 1, typically
    at the top of the file beneath the includes.

    Checked:
     - top-level #defines come before all function definitions;
     - all top-level #defines form a single group;
     - all #defines inside one function form a single group.
    """

    id = "define-placement"
    code = "III:D"
    name = "DefinePlacement"
    description = "#define statements must be grouped together at the top of the file"
    patterns = (DEFINE, GLOBAL_DEFINE, FUNCTION_BODY)

    def run(self, context: FileContext) -> list[RuleViolation]:
        root, source = context.root_node, context.source
        defines = [c.node("define") for c in DEFINE.matches(root, source)]
        global_defines = [c.node("define") for c in GLOBAL_DEFINE.matches(root, source)]
        functions = [c.node("function") for c in FUNCTION_BODY.matches(root, source)]

        violations: list[RuleViolation] = []
        global_groups = [_without_trailing_eol(g, source) for g in group_adjacent(global_defines)]

        if functions:
            first_function = functions[0]
            header = first_function.child_by_field_name("declarator") or first_function
            for group in global_groups:
                if group.start > first_function.end_byte:
                    violations.append(
                        self.violation(
                            "Global preprocessor definitions must be placed at the top of the file, "
                            "before all functions",
                            group,
                            label="macro(s) defined here",
                            secondary=[("first function defined here", node_span(header))],
                        )
                    )

        violations.extend(
            self._scattered(global_groups, "All top-level #define statements must be grouped together")
        )

        all_groups = [_without_trailing_eol(g, source) for g in group_adjacent(defines)]
        for function in functions:
            inside = [g for g in all_groups if function.start_byte <= g.start and g.end <= function.end_byte]
            name = function_definition_name(function, source)
            violations.extend(
                self._scattered(
                    inside,
                    "All #define statements in each function must be grouped together",
                    notes=[f"In function `{name}()'"],
                )
            )
        return violations

    def _scattered(self, groups: Sequence[Span], message: str, notes: Sequence[str] = ()) -> list[RuleViolation]:
        """One violation per group after the first, pointing back at the first group."""
        if len(groups) < 2:
            return []
        first = groups[0]
        return [
            self.violation(
                message,
                group,
                label="more #define statements found here",
                notes=notes,
                secondary=[("first group of #define statements found here", first)],
            )
            for group in groups[1:]
        ]
