# JSON output: a versioned pydantic report model wrapping every Diagnostic field.

from __future__ import annotations

from typing import Sequence

from pydantic import BaseModel

from westwood.findings.models import Diagnostic
from westwood.reporting.base import Formatter, OutputKind, summarize

REPORT_VERSION = 1


class Summary(BaseModel):
    total: int
    by_severity: dict[str, int]

    model_config = {"frozen": True}


class JsonReport(BaseModel):
    """Top-level JSON document: {"version", "diagnostics", "summary"}."""

    version: int = REPORT_VERSION
    diagnostics: list[Diagnostic]
    summary: Summary

    @classmethod
    def build(cls, diagnostics: Sequence[Diagnostic]) -> "JsonReport":
        return cls(
            diagnostics=list(diagnostics),
            summary=Summary(total=len(diagnostics), by_severity=summarize(diagnostics)),
        )


class JsonFormatter(Formatter):
    kind = OutputKind.JSON

    def render(self, diagnostics: Sequence[Diagnostic], *, color: bool = False) -> bytes:
        report = JsonReport.build(diagnostics)
        return (report.model_dump_json(indent=2) + "\n").encode("utf-8")
