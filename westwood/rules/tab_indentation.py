# Rule XI:A: do not use tabs for indentation.

from __future__ import annotations

from typing import Optional

from westwood.context import FileContext
from westwood.findings.models import RuleViolation, Span
from westwood.rules.base import Rule

DEFAULT_MAX_DIAGNOSTICS = 10


def cap_violations(
    violations: list[RuleViolation], limit: Optional[int], what: str
) -> list[RuleViolation]:
    """
    Keep at most `limit` violations; the last kept one gets a note saying how
    many more were hidden so a file full of tabs does not drown everything else.

    `what` completes the note, e.g. "contain tabs".
    """
    if limit is None or len(violations) <= limit:
        return violations
    hidden = len(violations) - limit
    kept = violations[:limit]
    last = kept[-1]
    note = f"{hidden} more line(s) {what}, but those warnings are suppressed to avoid noise"
    kept[-1] = last.model_copy(update={"notes": last.notes + (note,)})
    return kept


class TabIndentationRule(Rule):
    """
    Indentation must use spaces only. A line indented purely with tabs gets
    one violation covering the whole indentation; a line mixing tabs and
    spaces gets one covering the tabs.
    """

    id = "tab-indentation"
    code = "XI:A"
    name = "TabIndentation"
    description = "do not use tabs for indentation"

    def __init__(self, max_diagnostics: Optional[int] = DEFAULT_MAX_DIAGNOSTICS) -> None:
        if max_diagnostics is not None and max_diagnostics < 1:
            raise ValueError("max_diagnostics must be positive or None")
        self.max_diagnostics = max_diagnostics

    def run(self, context: FileContext) -> list[RuleViolation]:
        violations: list[RuleViolation] = []
        for _number, start, line in context.lines():
            indentation = line[: len(line) - len(line.lstrip(b" \t"))]
            if b"\t" not in indentation:
                continue
            if indentation.strip(b"\t") == b"":
                violations.append(
                    self.violation(
                        "Use spaces instead of tabs for indentation",
                        Span(start=start, end=start + len(indentation)),
                        label="indentation uses tabs",
                    )
                )
            else:
                first = indentation.index(b"\t")
                last = indentation.rindex(b"\t")
                violations.append(
                    self.violation(
                        "Use spaces instead of tabs for indentation",
                        Span(start=start + first, end=start + last + 1),
                        label="line mixes spaces and tabs",
                    )
                )
        return cap_violations(violations, self.max_diagnostics, "contain tabs")
