# Rule I:D (names): file-scope variables must start with "g_".

from __future__ import annotations

from typing import Iterable

from westwood.context import FileContext
from westwood.findings.models import RuleViolation
from westwood.patterns import Captures, Pattern, ancestor, in_field, node, not_, parent, text
from westwood.rules.base import Rule

# Declared identifiers outside any function that are not function names or
# parameters of a prototype.
GLOBAL_WITHOUT_PREFIX = Pattern(
    node(
        "identifier",
        in_field("declarator"),
        not_(text(r"^g_")),
        not_(parent("function_declarator")),
        not_(ancestor("function_definition")),
        not_(ancestor("parameter_list")),
        capture="name",
    ),
    name="global-without-prefix",
)


class GlobalPrefixRule(Rule):
    """All global variables must be named with the prefix "g_"."""

    id = "global-prefix"
    code = "I:D"
    name = "GlobalPrefix"
    description = 'global variables must start with "g_"'
    patterns = (GLOBAL_WITHOUT_PREFIX,)

    def evaluate(self, context: FileContext, captures: Captures) -> Iterable[RuleViolation]:
        yield self.violation(
            f'Global variable "{captures.text("name")}" must be prefixed with "g_"',
            captures.span("name"),
        )
