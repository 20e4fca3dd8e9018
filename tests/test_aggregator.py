"""Tests for westwood.aggregator: deduplication and total ordering."""

import logging

import pytest

from westwood.aggregator import Aggregator, Ordering, aggregate, count_by_severity, deduplicate, exceeds
from westwood.findings.models import Diagnostic, Label, Position, Severity, Span


def _span(start: int, end: int = None, line: int = 1) -> Span:
    end = start if end is None else end
    return Span(
        start=start,
        end=end,
        start_position=Position(line=line, column=start + 1),
        end_position=Position(line=line, column=end + 1),
    )


def _diagnostic(file="a.c", rule_id="no-goto", start=0, message="m", severity=Severity.WARNING, **kwargs) -> Diagnostic:
    return Diagnostic(
        file=file,
        rule_id=rule_id,
        severity=severity,
        message=message,
        primary=_span(start, start + 1),
        **kwargs,
    )


def test_deduplicate_keeps_first_occurrence():
    first = _diagnostic(secondary=(Label(label="one", span=_span(5)),))
    repeat = _diagnostic(secondary=(Label(label="two", span=_span(6)),))
    other_message = _diagnostic(message="different")
    assert deduplicate([first, repeat, other_message]) == [first, other_message]


def test_location_order():
    diagnostics = [
        _diagnostic(file="b.c", rule_id="a-rule", start=0),
        _diagnostic(file="a.c", rule_id="z-rule", start=10),
        _diagnostic(file="a.c", rule_id="m-rule", start=10),
        _diagnostic(file="a.c", rule_id="z-rule", start=2),
    ]
    ordered = aggregate(diagnostics, Ordering.LOCATION)
    assert [(d.file, d.primary.start, d.rule_id) for d in ordered] == [
        ("a.c", 2, "z-rule"),
        ("a.c", 10, "m-rule"),
        ("a.c", 10, "z-rule"),
        ("b.c", 0, "a-rule"),
    ]


def test_rule_order_groups_rules_contiguously():
    diagnostics = [
        _diagnostic(file="a.c", rule_id="no-goto", start=4),
        _diagnostic(file="b.c", rule_id="line-length", start=9),
        _diagnostic(file="a.c", rule_id="line-length", start=7),
        _diagnostic(file="b.c", rule_id="no-goto", start=1),
    ]
    ordered = aggregate(diagnostics, Ordering.RULE)
    assert [(d.rule_id, d.file) for d in ordered] == [
        ("line-length", "a.c"),
        ("line-length", "b.c"),
        ("no-goto", "a.c"),
        ("no-goto", "b.c"),
    ]


def test_full_ties_keep_emission_order():
    first = _diagnostic(message="first")
    second = _diagnostic(message="second")
    assert aggregate([first, second]) == [first, second]
    assert aggregate([second, first]) == [second, first]


def test_secondary_labels_are_not_reordered():
    labels = (Label(label="late", span=_span(9)), Label(label="early", span=_span(1)))
    ordered = aggregate([_diagnostic(secondary=labels)])
    assert [label.label for label in ordered[0].secondary] == ["late", "early"]


def test_aggregator_merges_batches(caplog):
    aggregator = Aggregator()
    aggregator.add_all([_diagnostic(file="b.c")])
    aggregator.add_all([_diagnostic(file="a.c"), _diagnostic(file="a.c")])
    assert aggregator.files == 2
    assert len(aggregator) == 3
    with caplog.at_level(logging.INFO):
        result = aggregator.finalize(Ordering.LOCATION)
    assert [d.file for d in result] == ["a.c", "b.c"]
    assert "1 duplicate(s) dropped" in caplog.text


def test_count_by_severity_includes_zeros():
    counts = count_by_severity([_diagnostic(), _diagnostic(start=3, severity=Severity.ERROR)])
    assert list(counts) == [Severity.INTERNAL_ERROR, Severity.ERROR, Severity.WARNING, Severity.INFO]
    assert counts[Severity.WARNING] == 1
    assert counts[Severity.ERROR] == 1
    assert counts[Severity.INFO] == 0


@pytest.mark.parametrize(
    "severities,threshold,expected",
    [
        ([], Severity.INFO, False),
        ([Severity.INFO], Severity.WARNING, False),
        ([Severity.WARNING], Severity.WARNING, True),
        ([Severity.INTERNAL_ERROR], Severity.ERROR, True),
        ([Severity.WARNING, Severity.ERROR], Severity.INTERNAL_ERROR, False),
    ],
)
def test_exceeds(severities, threshold, expected):
    diagnostics = [_diagnostic(start=i, severity=s) for i, s in enumerate(severities)]
    assert exceeds(diagnostics, threshold) is expected
