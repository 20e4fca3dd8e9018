# Cross-file merge point: deduplicate diagnostics and put them in a total order.

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Iterable, Iterator

from westwood.findings.models import Diagnostic, Severity

logger = logging.getLogger(__name__)


class Ordering(str, Enum):
    """Total orders the aggregated output can be sorted by."""

    LOCATION = "location"
    RULE = "rule"

    def __str__(self) -> str:
        return self.value


def _by_location(d: Diagnostic) -> tuple:
    return (d.file, d.primary.start, d.rule_id)


def _by_rule(d: Diagnostic) -> tuple:
    return (d.rule_id, d.file, d.primary.start)


SORT_KEYS: dict[Ordering, Callable[[Diagnostic], tuple]] = {
    Ordering.LOCATION: _by_location,
    Ordering.RULE: _by_rule,
}


def deduplicate(diagnostics: Iterable[Diagnostic]) -> list[Diagnostic]:
    """
    Drop exact repeats: same file, rule id, primary span and message.
    The first occurrence (in emission order) wins.
    """
    seen: set[tuple] = set()
    unique: list[Diagnostic] = []
    for diagnostic in diagnostics:
        key = diagnostic.dedup_key
        if key in seen:
            continue
        seen.add(key)
        unique.append(diagnostic)
    return unique


def aggregate(diagnostics: Iterable[Diagnostic], order: Ordering = Ordering.LOCATION) -> list[Diagnostic]:
    """Deduplicate, then sort. The sort is stable, so full ties keep emission order."""
    unique = deduplicate(diagnostics)
    return sorted(unique, key=SORT_KEYS[Ordering(order)])


class Aggregator:
    """
    Collects the per-file diagnostic batches of a run.

    Batches must all be added before finalize(); ordering is only well
    defined across files once every file has been analyzed.
    """

    def __init__(self) -> None:
        self._diagnostics: list[Diagnostic] = []
        self._files = 0

    def add_all(self, diagnostics: Iterable[Diagnostic]) -> None:
        """Add one file's diagnostics (in engine emission order)."""
        self._diagnostics.extend(diagnostics)
        self._files += 1

    @property
    def files(self) -> int:
        return self._files

    def finalize(self, order: Ordering = Ordering.LOCATION) -> list[Diagnostic]:
        result = aggregate(self._diagnostics, order)
        logger.info(
            "Aggregated %d diagnostic(s) from %d file(s) (%d duplicate(s) dropped), ordered by %s",
            len(result),
            self._files,
            len(self._diagnostics) - len(result),
            Ordering(order).value,
        )
        return result

    def __len__(self) -> int:
        return len(self._diagnostics)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._diagnostics)


def count_by_severity(diagnostics: Iterable[Diagnostic]) -> dict[Severity, int]:
    """Counts for every severity (zero included), most severe first."""
    counts = {severity: 0 for severity in sorted(Severity, key=lambda s: s.rank, reverse=True)}
    for diagnostic in diagnostics:
        counts[diagnostic.severity] += 1
    return counts


def exceeds(diagnostics: Iterable[Diagnostic], min_severity: Severity) -> bool:
    """True if any diagnostic is at or above min_severity."""
    threshold = Severity(min_severity).rank
    return any(d.severity.rank >= threshold for d in diagnostics)
