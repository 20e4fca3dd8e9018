"""
Inline suppression markers.

The Engine only sees an opaque predicate `(file, line, rule_id) -> bool`;
this module is the driver-side code that builds one from comments:

    x = 1;  // westwood-ignore                       all rules, this line
    x = 1;  // westwood-ignore: line-length, no-goto listed rules, this line
    // westwood-ignore-next-line: global-prefix      listed rules, next line

Markers are only recognised inside comment nodes, so string literals that
happen to contain the text are ignored.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Optional

from westwood.context import FileContext
from westwood.patterns import Pattern, node, text

logger = logging.getLogger(__name__)

SuppressionPredicate = Callable[[str, int, str], bool]

MARKER = re.compile(
    r"westwood-ignore(?P<next>-next-line)?(?:\s*:\s*(?P<rules>[A-Za-z0-9_\-]+(?:\s*,\s*[A-Za-z0-9_\-]+)*))?"
)

# Sentinel rule id meaning "every rule".
ALL_RULES = "*"

MARKED_COMMENT = Pattern(node("comment", text("westwood-ignore"), capture="comment"), name="suppression-comment")


def parse_marker(comment: str) -> Optional[tuple[bool, frozenset[str]]]:
    """
    Parse one comment's text.

    Returns (applies_to_next_line, rule ids) or None when there is no marker.
    An empty rule set is never returned; "all rules" is {ALL_RULES}.
    """
    match = MARKER.search(comment)
    if match is None:
        return None
    rules = match.group("rules")
    if rules:
        ids = frozenset(part.strip() for part in rules.split(",") if part.strip())
    else:
        ids = frozenset({ALL_RULES})
    return match.group("next") is not None, ids


class Suppressions:
    """Per-file map of line -> suppressed rule ids; callable as the Engine's predicate."""

    def __init__(self) -> None:
        self._by_file: dict[str, dict[int, set[str]]] = {}

    def add(self, file: str, line: int, rule_ids: frozenset[str]) -> None:
        self._by_file.setdefault(file, {}).setdefault(line, set()).update(rule_ids)

    def collect(self, context: FileContext) -> None:
        """Register every marker found in the comments of one parsed file."""
        for captures in MARKED_COMMENT.matches(context.root_node, context.source):
            comment = captures.node("comment")
            parsed = parse_marker(captures.text("comment"))
            if parsed is None:
                continue
            next_line, rule_ids = parsed
            line, _column = context.index.resolve(comment.start_byte)
            target = line + 1 if next_line else line
            self.add(context.path, target, rule_ids)
            logger.debug("Suppression in %s line %d: %s", context.path, target, sorted(rule_ids))

    def is_suppressed(self, file: str, line: int, rule_id: str) -> bool:
        ids = self._by_file.get(file, {}).get(line)
        if not ids:
            return False
        return ALL_RULES in ids or rule_id in ids

    __call__ = is_suppressed

    def __len__(self) -> int:
        return sum(len(lines) for lines in self._by_file.values())


def collect_suppressions(context: FileContext) -> Suppressions:
    suppressions = Suppressions()
    suppressions.collect(context)
    return suppressions
