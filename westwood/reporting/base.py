# Formatter interface and the output kinds a run can be rendered as.

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Sequence

from westwood.aggregator import count_by_severity
from westwood.findings.models import Diagnostic, Position, Span


class OutputKind(str, Enum):
    HUMAN = "human"
    MACHINE = "machine"
    JSON = "json"

    def __str__(self) -> str:
        return self.value


class Formatter(ABC):
    """
    Turns an already ordered diagnostic sequence into output bytes.

    Formatters never mutate or reorder their input; the Aggregator decides
    the order.
    """

    kind: OutputKind

    @abstractmethod
    def render(self, diagnostics: Sequence[Diagnostic], *, color: bool = False) -> bytes:
        """Render every diagnostic (plus any summary the format carries)."""


def start_of(span: Span) -> Position:
    if span.start_position is None:
        raise ValueError(f"span {span.start}..{span.end} has not been resolved")
    return span.start_position


def end_of(span: Span) -> Position:
    if span.end_position is None:
        raise ValueError(f"span {span.start}..{span.end} has not been resolved")
    return span.end_position


def summarize(diagnostics: Sequence[Diagnostic]) -> dict[str, int]:
    """Severity value -> count, every severity present, most severe first."""
    return {severity.value: count for severity, count in count_by_severity(diagnostics).items()}
