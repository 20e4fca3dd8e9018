"""
The Engine: run every registered rule against one file and resolve the
results into Diagnostics.

Per file:
    1. A tree with syntax errors short-circuits everything into a single
       parse-error diagnostic; no rule runs, so no partial output.
    2. Otherwise rules run in registry order. Each rule's evaluation and the
       resolution of its spans is isolated: an exception becomes one
       internal-rule-error diagnostic for that rule and the remaining rules
       still run.
    3. Findings on lines the suppression predicate marks for their rule id
       are dropped.

No I/O happens here; the caller reads sources before and renders after.
"""

from __future__ import annotations

import logging
from typing import Optional

from westwood.context import FileContext, node_span
from westwood.errors import DecodeError, IoError, ParseError
from westwood.findings.models import (
    Diagnostic,
    DiagnosticKind,
    Label,
    Position,
    RuleViolation,
    Severity,
    Span,
)
from westwood.parser import describe_syntax_error, first_error_node
from westwood.registry import RuleRegistry
from westwood.rules.base import Rule
from westwood.source_index import SourceIndex
from westwood.suppression import SuppressionPredicate

logger = logging.getLogger(__name__)

PARSE_ERROR_ID = "parse-error"
DECODE_ERROR_ID = "decode-error"
IO_ERROR_ID = "io-error"

_FILE_START = Span(start=0, end=0, start_position=Position(line=1, column=1), end_position=Position(line=1, column=1))


def _resolve_violation(path: str, index: SourceIndex, violation: RuleViolation) -> Diagnostic:
    return Diagnostic(
        file=path,
        rule_id=violation.rule_id,
        severity=violation.severity,
        kind=DiagnosticKind.FINDING,
        message=violation.message,
        primary=index.resolve_span(violation.primary),
        primary_label=violation.primary_label,
        secondary=tuple(
            Label(label=label.label, span=index.resolve_span(label.span)) for label in violation.secondary
        ),
        notes=violation.notes,
    )


def parse_error_diagnostic(context: FileContext) -> Diagnostic:
    """The single diagnostic reported for a file that does not parse."""
    error_node = first_error_node(context.tree)
    secondary: tuple[Label, ...] = ()
    if error_node is not None:
        secondary = (Label(label="first syntax error here", span=context.index.resolve_span(node_span(error_node))),)
    return Diagnostic(
        file=context.path,
        rule_id=PARSE_ERROR_ID,
        severity=Severity.ERROR,
        kind=DiagnosticKind.PARSE_ERROR,
        message=f"{describe_syntax_error(error_node, context.source)}; "
        "fix syntax errors before the file can be checked",
        primary=_FILE_START,
        secondary=secondary,
    )


def parser_failure_diagnostic(path: str, error: ParseError) -> Diagnostic:
    """Reported when tree-sitter produced no tree at all (e.g. it was cancelled)."""
    return Diagnostic(
        file=path,
        rule_id=PARSE_ERROR_ID,
        severity=Severity.ERROR,
        kind=DiagnosticKind.PARSE_ERROR,
        message=f"File could not be parsed: {error}",
        primary=_FILE_START,
    )


def decode_error_diagnostic(path: str, error: DecodeError) -> Diagnostic:
    position = Position(line=error.line, column=error.column)
    return Diagnostic(
        file=path,
        rule_id=DECODE_ERROR_ID,
        severity=Severity.ERROR,
        kind=DiagnosticKind.DECODE_ERROR,
        message=f"File is not valid UTF-8 ({error.reason})",
        primary=Span(start=error.offset, end=error.offset, start_position=position, end_position=position),
    )


def io_error_diagnostic(error: IoError) -> Diagnostic:
    return Diagnostic(
        file=error.path,
        rule_id=IO_ERROR_ID,
        severity=Severity.ERROR,
        kind=DiagnosticKind.IO_ERROR,
        message=f"Cannot read file: {error.reason}",
        primary=_FILE_START,
    )


def internal_error_diagnostic(path: str, rule: Rule, exc: BaseException) -> Diagnostic:
    return Diagnostic(
        file=path,
        rule_id=rule.id,
        severity=Severity.INTERNAL_ERROR,
        kind=DiagnosticKind.INTERNAL_RULE_ERROR,
        message=f"Internal error while checking this rule: {type(exc).__name__}: {exc}",
        primary=_FILE_START,
    )


class Engine:
    """Runs a RuleRegistry over one file at a time. Holds no per-file state."""

    def __init__(self, registry: RuleRegistry) -> None:
        self.registry = registry

    def run(
        self,
        context: FileContext,
        suppressed: Optional[SuppressionPredicate] = None,
    ) -> list[Diagnostic]:
        if context.has_parse_errors:
            logger.info("Skipping rules for %s: file has syntax errors", context.path)
            return [parse_error_diagnostic(context)]

        diagnostics: list[Diagnostic] = []
        for rule in self.registry:
            try:
                violations = rule.run(context)
                resolved = [_resolve_violation(context.path, context.index, v) for v in violations]
            except Exception as exc:
                logger.exception("Rule %s failed on %s: %s", rule.id, context.path, exc)
                diagnostics.append(internal_error_diagnostic(context.path, rule, exc))
                continue

            if suppressed is not None:
                kept = [d for d in resolved if not suppressed(d.file, d.line, d.rule_id)]
                if len(kept) != len(resolved):
                    logger.debug(
                        "Suppressed %d %s diagnostic(s) in %s", len(resolved) - len(kept), rule.id, context.path
                    )
                resolved = kept
            diagnostics.extend(resolved)

        logger.info("Checked %s: %d diagnostic(s)", context.path, len(diagnostics))
        return diagnostics
