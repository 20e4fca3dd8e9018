# Pydantic data models for lint results: Severity, Span, Label, RuleViolation, Diagnostic.

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class Severity(str, Enum):
    """How serious a diagnostic is. Ordered: info < warning < error < internal-error."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    INTERNAL_ERROR = "internal-error"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANKS[self]

    def __str__(self) -> str:
        return self.value


_SEVERITY_RANKS = {
    Severity.INFO: 0,
    Severity.WARNING: 1,
    Severity.ERROR: 2,
    Severity.INTERNAL_ERROR: 3,
}


class DiagnosticKind(str, Enum):
    """What produced a diagnostic: a rule finding or a pipeline failure."""

    FINDING = "finding"
    PARSE_ERROR = "parse-error"
    DECODE_ERROR = "decode-error"
    INTERNAL_RULE_ERROR = "internal-rule-error"
    IO_ERROR = "io-error"

    def __str__(self) -> str:
        return self.value


class Position(BaseModel):
    """A resolved source position."""

    line: int = Field(..., ge=1, description="1-based line number")
    column: int = Field(..., ge=1, description="1-based column, in Unicode scalar values")

    model_config = {"frozen": True}


class Span(BaseModel):
    """
    Half-open byte range [start, end) in one source buffer.

    start_position/end_position are filled in once the span has been resolved
    through the file's SourceIndex.
    """

    start: int = Field(..., ge=0)
    end: int = Field(..., ge=0)
    start_position: Optional[Position] = None
    end_position: Optional[Position] = None

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_order(self) -> "Span":
        if self.start > self.end:
            raise ValueError(f"span start {self.start} is after end {self.end}")
        return self

    @property
    def is_resolved(self) -> bool:
        return self.start_position is not None and self.end_position is not None


class Label(BaseModel):
    """A secondary span with a description of its role (e.g. "first definition here")."""

    label: str
    span: Span

    model_config = {"frozen": True}


class RuleViolation(BaseModel):
    """
    What a rule reports for one match, before spans are resolved.

    notes are free-form remarks shown after the labels, e.g. the function a
    finding belongs to or how many similar findings were left out.
    """

    rule_id: str
    severity: Severity
    message: str
    primary: Span
    primary_label: Optional[str] = None
    secondary: tuple[Label, ...] = ()
    notes: tuple[str, ...] = ()

    model_config = {"frozen": True}


class Diagnostic(BaseModel):
    """
    A fully resolved, render-ready report: one rule violation or one pipeline
    failure (parse error, undecodable file, crashed rule, unreadable file).
    """

    file: str
    rule_id: str
    severity: Severity
    kind: DiagnosticKind = DiagnosticKind.FINDING
    message: str
    primary: Span
    primary_label: Optional[str] = None
    secondary: tuple[Label, ...] = ()
    notes: tuple[str, ...] = ()

    model_config = {"frozen": True}

    @property
    def dedup_key(self) -> tuple[str, str, int, int, str]:
        """Identity used for deduplication; secondary labels and notes are ignored."""
        return (self.file, self.rule_id, self.primary.start, self.primary.end, self.message)

    def _start(self) -> Position:
        if self.primary.start_position is None:
            raise ValueError(f"diagnostic {self.rule_id} in {self.file} has an unresolved primary span")
        return self.primary.start_position

    @property
    def line(self) -> int:
        return self._start().line

    @property
    def column(self) -> int:
        return self._start().column
