"""Tests for westwood.patterns: matcher combinators, captures and grammar validation."""

import pytest

from westwood.errors import PatternError
from westwood.parser import create_parser, get_c_language, parse_bytes
from westwood.patterns import (
    Pattern,
    ancestor,
    any_node,
    any_of,
    bind,
    child,
    field,
    in_field,
    node,
    not_,
    parent,
    sequence,
    text,
    token,
)

SOURCE = b"""int g_total = 0;

int add(int a, int b)
{
    int sum = a + b;
    if (sum > 10) {
        return 10;
    }
    return sum;
}
"""


def _matches(pattern: Pattern, source: bytes = SOURCE) -> list:
    tree = parse_bytes(source, parser=create_parser())
    return list(pattern.matches(tree.root_node, source))


def test_node_kind_matches_in_preorder():
    found = _matches(Pattern(node("identifier", capture="id")))
    names = [c.text("id") for c in found]
    assert names[:3] == ["g_total", "add", "a"]
    assert names.count("sum") == 3


def test_field_and_capture_text():
    pattern = Pattern(
        node("function_definition", field("declarator", node("function_declarator", field("declarator", node("identifier", capture="name"))))),
        name="function-name",
    )
    found = _matches(pattern)
    assert len(found) == 1
    assert found[0].text("name") == "add"
    assert found[0].kind("name") == "identifier"
    assert found[0].root.type == "function_definition"


def test_capture_may_bind_several_nodes():
    pattern = Pattern(
        node("parameter_list", child(node("parameter_declaration", capture="param"))),
    )
    # child() stops at the first matching child, so only one binding per match
    found = _matches(pattern)
    assert len(found) == 1
    assert len(found[0].nodes("param")) == 1

    both = Pattern(
        node(
            "parameter_list",
            sequence(
                node("parameter_declaration", capture="param"),
                token(","),
                node("parameter_declaration", capture="param"),
            ),
        )
    )
    found = _matches(both)
    assert [SOURCE[n.start_byte : n.end_byte] for n in found[0].nodes("param")] == [b"int a", b"int b"]


def test_child_index_and_token():
    pattern = Pattern(
        node("if_statement", child(token("if", capture="keyword"), index=0)),
    )
    found = _matches(pattern)
    assert len(found) == 1
    assert found[0].text("keyword") == "if"
    assert found[0].span("keyword").end - found[0].span("keyword").start == 2


def test_text_regex():
    pattern = Pattern(node("number_literal", text(r"^10$"), capture="ten"))
    assert len(_matches(pattern)) == 2


def test_in_field():
    pattern = Pattern(node("identifier", in_field("left"), capture="left"))
    assert [c.text("left") for c in _matches(pattern)] == ["a", "sum"]


def test_parent_and_ancestor():
    top_level = Pattern(node("declaration", parent("translation_unit"), capture="decl"))
    in_function = Pattern(node("declaration", ancestor("function_definition"), capture="decl"))
    assert [c.text("decl") for c in _matches(top_level)] == ["int g_total = 0;"]
    assert [c.text("decl") for c in _matches(in_function)] == ["int sum = a + b;"]


def test_not_excludes_matches_and_binds_nothing():
    pattern = Pattern(node("return_statement", not_(child(node("number_literal", capture="n"))), capture="ret"))
    found = _matches(pattern)
    assert [c.text("ret") for c in found] == ["return sum;"]
    assert "n" not in pattern.capture_names
    assert "n" not in found[0]


def test_any_of_rolls_back_failed_branch():
    pattern = Pattern(
        node(
            "binary_expression",
            any_of(
                sequence(node("identifier", capture="ident"), token("<")),
                sequence(node("identifier", capture="ident"), token(">")),
            ),
        )
    )
    found = _matches(pattern)
    assert len(found) == 1
    ident = found[0].nodes("ident")[0]
    assert SOURCE[ident.start_byte : ident.end_byte] == b"sum"
    assert len(found[0].nodes("ident")) == 1


def test_bind_and_any_node():
    pattern = Pattern(node("init_declarator", bind("value", field("value", any_node(capture="v")))))
    found = _matches(pattern)
    assert [c.text("v") for c in found] == ["0", "a + b"]


def test_matches_is_fresh_per_call():
    pattern = Pattern(node("return_statement", capture="ret"))
    tree = parse_bytes(SOURCE, parser=create_parser())
    first = [c.text("ret") for c in pattern.matches(tree.root_node, SOURCE)]
    second = [c.text("ret") for c in pattern.matches(tree.root_node, SOURCE)]
    assert first == second == ["return 10;", "return sum;"]


class TestCaptures:
    def test_unknown_capture_name_raises(self):
        found = _matches(Pattern(node("return_statement", capture="ret"), name="ret"))
        with pytest.raises(PatternError):
            found[0].nodes("nope")

    def test_node_requires_exactly_one(self):
        pattern = Pattern(
            node(
                "parameter_list",
                sequence(
                    node("parameter_declaration", capture="param"),
                    token(","),
                    node("parameter_declaration", capture="param"),
                ),
            )
        )
        found = _matches(pattern)
        with pytest.raises(PatternError):
            found[0].node("param")
        assert found[0].get("param").start_byte < found[0].nodes("param")[1].start_byte

    def test_get_and_contains(self):
        pattern = Pattern(node("return_statement", any_of(child(node("number_literal", capture="n")), child(node("identifier", capture="i")))))
        found = _matches(pattern)
        assert "n" in found[0] and "i" not in found[0]
        assert found[1].get("n") is None
        assert found[1].names() == ["i"]


class TestValidation:
    def test_valid_pattern(self):
        Pattern(node("if_statement", field("condition", node("parenthesized_expression")))).validate(get_c_language())

    def test_unknown_node_kind(self):
        with pytest.raises(PatternError, match="if_stmt"):
            Pattern(node("if_stmt"), name="bad").validate(get_c_language())

    def test_unknown_field(self):
        with pytest.raises(PatternError, match="conditon"):
            Pattern(node("if_statement", field("conditon", node("parenthesized_expression")))).validate(get_c_language())

    def test_unknown_token(self):
        with pytest.raises(PatternError):
            Pattern(token("unless")).validate(get_c_language())

    def test_unknown_ancestor_kind(self):
        with pytest.raises(PatternError):
            Pattern(node("identifier", ancestor("function"))).validate(get_c_language())

    def test_invalid_regex(self):
        with pytest.raises(PatternError):
            text("(")

    def test_degenerate_combinators(self):
        with pytest.raises(PatternError):
            sequence()
        with pytest.raises(PatternError):
            any_of(node("identifier"))
