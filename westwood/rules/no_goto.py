# Rule XI:E: the use of goto is forbidden.

from __future__ import annotations

from typing import Iterable

from westwood.context import FileContext
from westwood.findings.models import RuleViolation
from westwood.patterns import Captures, Pattern, node
from westwood.rules.base import Rule

GOTO = Pattern(node("goto_statement", capture="goto"), name="goto")


class NoGotoRule(Rule):
    id = "no-goto"
    code = "XI:E"
    name = "NoGoto"
    description = "goto is forbidden"
    patterns = (GOTO,)

    def evaluate(self, context: FileContext, captures: Captures) -> Iterable[RuleViolation]:
        yield self.violation("Do not use `goto'", captures.span("goto"))
