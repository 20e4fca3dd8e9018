# Rule interface (abstract base class): defines the contract all rules must implement.
# Concrete rules (line_length, no_goto, etc.) subclass Rule and declare patterns
# plus evaluate(), or override run() for line-based checks.

from __future__ import annotations

from abc import ABC
from typing import Iterable, Optional, Sequence

from westwood.context import FileContext
from westwood.findings.models import Label, RuleViolation, Severity, Span
from westwood.patterns import Captures, Pattern


class Rule(ABC):
    """
    Abstract base class for all code standard rules.

    Subclasses must define:
    - id: str - stable rule identifier (e.g. "line-length"); used for sorting,
      suppression and output
    - code: str - section of the code standard (e.g. "II:A")
    - name: str - short CamelCase name (e.g. "LineLength")
    - description: str - one-line summary of what the standard requires

    and either
    - patterns + evaluate(context, captures), or
    - run(context) for rules that work on raw lines instead of the tree.

    Rules hold no per-file state, so one instance is shared by every file
    and every worker.
    """

    id: str
    code: str
    name: str
    description: str
    severity: Severity = Severity.WARNING
    patterns: Sequence[Pattern] = ()

    def run(self, context: FileContext) -> list[RuleViolation]:
        """
        Analyze one file and return its violations.

        The default implementation runs each pattern in order and passes
        every match to evaluate().
        """
        violations: list[RuleViolation] = []
        for pattern in self.patterns:
            for captures in pattern.matches(context.root_node, context.source):
                violations.extend(self.evaluate(context, captures))
        return violations

    def evaluate(self, context: FileContext, captures: Captures) -> Iterable[RuleViolation]:
        """Decide whether one pattern match is a violation."""
        return ()

    def violation(
        self,
        message: str,
        primary: Span,
        *,
        label: Optional[str] = None,
        secondary: Iterable[tuple[str, Span]] = (),
        notes: Iterable[str] = (),
    ) -> RuleViolation:
        """Build a RuleViolation attributed to this rule."""
        return RuleViolation(
            rule_id=self.id,
            severity=self.severity,
            message=message,
            primary=primary,
            primary_label=label,
            secondary=tuple(Label(label=text, span=span) for text, span in secondary),
            notes=tuple(notes),
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.id}>"
