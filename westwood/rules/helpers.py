# Small helpers shared by several rules: node names, spacing checks, display widths.

from __future__ import annotations

import unicodedata

from tree_sitter import Node as TSNode

# Columns a tab occupies when measuring line length.
TAB_WIDTH = 8


def char_width(ch: str) -> int:
    """Display width of one character: tabs are 8 columns, wide CJK/emoji are 2."""
    if ch == "\t":
        return TAB_WIDTH
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in ("W", "F"):
        return 2
    return 1


def display_width(line: str) -> int:
    """Display width of a line, as an editor would show it."""
    return sum(char_width(ch) for ch in line)


def function_definition_name(node: TSNode, source: bytes) -> str:
    """
    Name of the function defined by a function_definition node.

    Follows the declarator field (through pointer/function declarators)
    until an identifier is reached.
    """
    current = node
    while current.type != "identifier":
        declarator = current.child_by_field_name("declarator")
        if declarator is None:
            return "<anonymous>"
        current = declarator
    return source[current.start_byte : current.end_byte].decode("utf-8", errors="replace")


def is_function_declaration(node: TSNode) -> bool:
    """True if a function_declarator is reachable by following declarator fields."""
    current = node
    while current is not None:
        if current.type == "function_declarator":
            return True
        current = current.child_by_field_name("declarator")
    return False


def gap(left: TSNode, right: TSNode, source: bytes) -> bytes:
    """Source bytes between the end of left and the start of right."""
    return source[left.end_byte : right.start_byte]


def is_single_space(left: TSNode, right: TSNode, source: bytes) -> bool:
    """Exactly one space separates the two nodes."""
    return gap(left, right, source) == b" "


def is_single_space_or_break(left: TSNode, right: TSNode, source: bytes) -> bool:
    """One space, or a line break (wrapped expressions are allowed)."""
    between = gap(left, right, source)
    return between == b" " or b"\n" in between
