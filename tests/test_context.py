"""Tests for westwood.context: FileContext, create_context, read_source, node/function counts."""

import logging
from pathlib import Path

import pytest

from westwood.context import (
    FileContext,
    count_tree_stats,
    create_context,
    node_span,
    read_source,
    span_between,
)
from westwood.errors import DecodeError, IoError
from westwood.parser import create_parser, parse_bytes
from westwood.source_index import SourceIndex


def test_count_tree_stats():
    tree = parse_bytes(b"int main(void) { return 0; }\nvoid f(void) { }\n", parser=create_parser())
    nodes, funcs = count_tree_stats(tree.root_node)
    assert nodes > 1
    assert funcs == 2


def test_create_context(caplog):
    source = b"int main(void) { return 0; }\n"
    with caplog.at_level(logging.INFO):
        ctx = create_context("main.c", source)
    assert ctx.path == "main.c"
    assert ctx.source == source
    assert ctx.root_node.type == "translation_unit"
    assert ctx.has_parse_errors is False
    assert ctx.index.line_count == 2
    assert "Parsed main.c" in caplog.text
    assert "1 function(s)" in caplog.text


def test_create_context_malformed_still_returns_context(caplog):
    with caplog.at_level(logging.WARNING):
        ctx = create_context("bad.c", b"int main( { return 0; }\n")
    assert ctx.has_parse_errors is True
    assert "syntax errors" in caplog.text


def test_create_context_invalid_utf8():
    with pytest.raises(DecodeError):
        create_context("bad.c", b"int \xfe;\n")


def test_text_and_spans():
    source = b"int x = 42;"
    tree = parse_bytes(source)
    ctx = FileContext(path="x.c", source=source, tree=tree, index=SourceIndex.build(source))
    declaration = ctx.root_node.children[0]
    init = declaration.child_by_field_name("declarator")
    assert ctx.text(init) == "x = 42"
    span = node_span(init)
    assert (span.start, span.end) == (4, 10)
    kind = declaration.child_by_field_name("type")
    gap = span_between(kind, init)
    assert (gap.start, gap.end) == (3, 4)


def test_lines_delegates_to_index():
    source = b"a\nb\n"
    tree = parse_bytes(source)
    ctx = FileContext(path="x.c", source=source, tree=tree, index=SourceIndex.build(source))
    assert list(ctx.lines()) == [(1, 0, b"a"), (2, 2, b"b")]


def test_read_source(tmp_path):
    c_file = tmp_path / "main.c"
    c_file.write_bytes(b"int main(void) { return 0; }\n")
    assert read_source(c_file) == b"int main(void) { return 0; }\n"


def test_read_source_missing_file(caplog):
    with caplog.at_level(logging.ERROR):
        with pytest.raises(IoError) as excinfo:
            read_source(Path("/nonexistent/file.c"))
    assert excinfo.value.path == "/nonexistent/file.c"
    assert "Failed to read" in caplog.text
