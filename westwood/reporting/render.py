# Formatter lookup by output kind and the single render() entry point.

from __future__ import annotations

from typing import Sequence

from westwood.findings.models import Diagnostic
from westwood.reporting.base import Formatter, OutputKind
from westwood.reporting.console import HumanFormatter
from westwood.reporting.json_report import JsonFormatter
from westwood.reporting.machine import MachineFormatter

FORMATTERS: dict[OutputKind, type[Formatter]] = {
    OutputKind.HUMAN: HumanFormatter,
    OutputKind.MACHINE: MachineFormatter,
    OutputKind.JSON: JsonFormatter,
}


def get_formatter(kind: OutputKind) -> Formatter:
    return FORMATTERS[OutputKind(kind)]()


def render(diagnostics: Sequence[Diagnostic], kind: OutputKind = OutputKind.HUMAN, *, color: bool = False) -> bytes:
    """Render diagnostics (already deduplicated and ordered) as bytes."""
    return get_formatter(kind).render(diagnostics, color=color)
