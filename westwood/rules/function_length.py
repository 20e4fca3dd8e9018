# Rule II:B: functions must be kept small (at most two printed pages).

from __future__ import annotations

from typing import Iterable

from westwood.context import FileContext
from westwood.findings.models import RuleViolation
from westwood.patterns import Captures, Pattern, node
from westwood.rules.base import Rule
from westwood.rules.helpers import function_definition_name

# Number of lines per printed page
PAGE_SIZE = 61
# Maximum number of pages a function definition may span
MAX_PAGES_PER_FUNCTION = 2

FUNCTION_DEFINITION = Pattern(node("function_definition", capture="function"), name="function-definition")


class FunctionLengthRule(Rule):
    """Each function should be kept small for modularity; the limit is two pages."""

    id = "function-length"
    code = "II:B"
    name = "FunctionLength"
    description = "functions must be kept reasonably small"
    patterns = (FUNCTION_DEFINITION,)

    def __init__(self, max_lines: int = PAGE_SIZE * MAX_PAGES_PER_FUNCTION) -> None:
        self.max_lines = max_lines

    def evaluate(self, context: FileContext, captures: Captures) -> Iterable[RuleViolation]:
        function = captures.node("function")
        length = function.end_point[0] - function.start_point[0] + 1
        if length <= self.max_lines:
            return
        name = function_definition_name(function, context.source)
        yield self.violation(
            f"Functions must be no longer than {self.max_lines} lines",
            captures.span("function"),
            label=f"Function `{name}()' is {length} lines long",
        )
