"""Unit tests for the comma-spacing rule."""

import pytest

from westwood.context import FileContext
from westwood.parser import create_parser, parse_bytes
from westwood.rules.comma_spacing import CommaSpacingRule
from westwood.source_index import SourceIndex


def _run_rule(source: bytes) -> list:
    tree = parse_bytes(source, parser=create_parser())
    ctx = FileContext(path="test.c", source=source, tree=tree, index=SourceIndex.build(source))
    return CommaSpacingRule().run(ctx)


@pytest.mark.parametrize(
    "source",
    [
        b"int add(int a, int b);\n",
        b"void f(void)\n{\n    printf(\"%d %d\\n\", 1, 2);\n}\n",
        b"void f(int i)\n{\n    for (i = 0; i < 3; i++) {\n    }\n}\n",
        b"void f(void)\n{\n    for (int i = 0; i < 3; i++) {\n    }\n}\n",
        b"void f(int i)\n{\n    for (;;) {\n    }\n}\n",
        b"int g_values[] = {1, 2, 3,};\n",
        b"void f(void)\n{\n    g(1,\n      2);\n}\n",
    ],
)
def test_correct_spacing(source):
    assert _run_rule(source) == []


def test_missing_space_after_comma():
    source = b"int add(int a,int b);\n"
    violations = _run_rule(source)
    assert len(violations) == 1
    assert violations[0].message == "Expected a single space after `,'"
    assert violations[0].primary.start == source.index(b",")


def test_missing_space_after_for_semicolons():
    source = b"void f(int i)\n{\n    for (i = 0;i < 3;i++) {\n    }\n}\n"
    violations = _run_rule(source)
    assert len(violations) == 2
    assert all(v.message == "Expected a single space after `;'" for v in violations)


def test_missing_space_after_declaration_semicolon_in_for():
    source = b"void f(void)\n{\n    for (int i = 0;i < 3; i++) {\n    }\n}\n"
    assert len(_run_rule(source)) == 1


def test_statement_semicolons_are_ignored():
    source = b"void f(int i)\n{\n    for (i = 0; i < 3; i++) {\n        i++;i++;\n    }\n}\n"
    assert _run_rule(source) == []
