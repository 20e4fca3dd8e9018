"""Unit tests for the flow-control-spacing rule."""

import pytest

from westwood.context import FileContext
from westwood.parser import create_parser, parse_bytes
from westwood.rules.flow_control_spacing import FlowControlSpacingRule
from westwood.source_index import SourceIndex


def _run_rule(body: bytes) -> list:
    """Wrap body in a function, run FlowControlSpacingRule, return violations."""
    source = b"void f(int x)\n{\n" + body + b"}\n"
    tree = parse_bytes(source, parser=create_parser())
    assert not tree.root_node.has_error
    ctx = FileContext(path="test.c", source=source, tree=tree, index=SourceIndex.build(source))
    return FlowControlSpacingRule().run(ctx)


@pytest.mark.parametrize(
    "body",
    [
        b"    if (x) {\n        x = 1;\n    }\n",
        b"    while (x) {\n        x--;\n    }\n",
        b"    for (x = 0; x < 3; x++) {\n        g_y++;\n    }\n",
        b"    switch (x) {\n    default:\n        break;\n    }\n",
        b"    do {\n        x--;\n    } while (x);\n",
        b"    if (x)\n        x = 1;\n",
    ],
)
def test_correct_spacing(body):
    assert _run_rule(body) == []


@pytest.mark.parametrize(
    "body,keyword",
    [
        (b"    if(x) {\n        x = 1;\n    }\n", "if"),
        (b"    while  (x) {\n        x--;\n    }\n", "while"),
        (b"    for(x = 0; x < 3; x++) {\n        g_y++;\n    }\n", "for"),
        (b"    switch(x) {\n    default:\n        break;\n    }\n", "switch"),
        (b"    do{\n        x--;\n    } while (x);\n", "do"),
        (b"    do {\n        x--;\n    } while(x);\n", "while"),
    ],
)
def test_missing_space_after_keyword(body, keyword):
    violations = _run_rule(body)
    assert len(violations) == 1
    assert violations[0].message == f"Expected a single space after `{keyword}'"


@pytest.mark.parametrize(
    "body",
    [
        b"    if (x){\n        x = 1;\n    }\n",
        b"    while (x)  {\n        x--;\n    }\n",
        b"    for (x = 0; x < 3; x++){\n        g_y++;\n    }\n",
        b"    switch (x)\n    {\n    default:\n        break;\n    }\n",
    ],
)
def test_brace_spacing(body):
    violations = _run_rule(body)
    assert len(violations) == 1
    assert "closing parenthesis and the opening brace" in violations[0].message


def test_span_covers_keyword_and_parenthesis():
    body = b"    if(x) {\n        x = 1;\n    }\n"
    source = b"void f(int x)\n{\n" + body + b"}\n"
    violation = _run_rule(body)[0]
    start = source.index(b"if(")
    assert (violation.primary.start, violation.primary.end) == (start, start + 3)
