# Rule I:A: declared names must be lower snake case.

from __future__ import annotations

from typing import Iterable

from westwood.context import FileContext
from westwood.findings.models import RuleViolation
from westwood.patterns import Captures, Pattern, in_field, node, text
from westwood.rules.base import Rule

# Any identifier in a declarator position that contains an uppercase letter.
UPPERCASE_DECLARATOR = Pattern(
    node("identifier", in_field("declarator"), text("[A-Z]"), capture="name"),
    name="uppercase-declarator",
)


class LowercaseNamesRule(Rule):
    """
    Variable and function names must be all lowercase, with words separated
    by underscores.

    Only the lowercase part can be checked; splitting a name into words is
    subjective.
    """

    id = "lowercase-names"
    code = "I:A"
    name = "LowercaseNames"
    description = "variable names must be in lower snake case"
    patterns = (UPPERCASE_DECLARATOR,)

    def evaluate(self, context: FileContext, captures: Captures) -> Iterable[RuleViolation]:
        name = captures.text("name")
        yield self.violation(
            f'Name "{name}" must be in lower snake case',
            captures.span("name"),
        )
