"""Unit tests for the constant-names rule."""

import pytest

from westwood.context import FileContext
from westwood.parser import create_parser, parse_bytes
from westwood.rules.constant_names import ConstantNamesRule
from westwood.source_index import SourceIndex


def _run_rule(source: bytes) -> list:
    tree = parse_bytes(source, parser=create_parser())
    ctx = FileContext(path="test.c", source=source, tree=tree, index=SourceIndex.build(source))
    return ConstantNamesRule().run(ctx)


@pytest.mark.parametrize(
    "source",
    [
        b"#define ROOM_TEMPERATURE (10)\n",
        b"#define PI (3.14)\n",
        b"#define GREETING \"hello\"\n",
        b"#define MAX_SIZE (MIN_SIZE * 2)\n",
        b"#define HAVE_FEATURE\n",
    ],
)
def test_valid_constants(source):
    assert _run_rule(source) == []


def test_short_name():
    violations = _run_rule(b"#define N (10)\n")
    assert len(violations) == 1
    assert "at least 2 characters" in violations[0].message
    assert violations[0].primary_label == "N"


def test_lowercase_name():
    violations = _run_rule(b"#define max_size (10)\n")
    assert len(violations) == 1
    assert "upper snake case" in violations[0].message


def test_unwrapped_number():
    source = b"#define MAX_SIZE 10\n"
    violations = _run_rule(source)
    assert len(violations) == 1
    assert "parentheses" in violations[0].message
    assert violations[0].primary_label == "10"


def test_several_problems_in_one_define():
    messages = [v.message for v in _run_rule(b"#define n 5\n")]
    assert len(messages) == 3
    assert messages[0].startswith("Constant name must contain")
    assert messages[1].startswith("Constant name must use upper")
    assert messages[2].startswith("Numeric constant")
