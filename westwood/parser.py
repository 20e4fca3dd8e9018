# Tree-sitter setup: parse C source into a concrete syntax tree and locate syntax errors.

import logging
from typing import Iterator, Optional

import tree_sitter
from tree_sitter import Language
from tree_sitter import Node as TSNode
from tree_sitter_c import language as _c_language_capsule

from westwood.errors import ParseError

logger = logging.getLogger(__name__)

# C language grammar: wrap tree-sitter-c capsule for use with tree_sitter.Parser
_C_LANGUAGE = Language(_c_language_capsule())


def get_c_language() -> Language:
    """Return the Tree-sitter Language object for C."""
    return _C_LANGUAGE


def create_parser() -> tree_sitter.Parser:
    """
    Create a Parser configured for C.

    Parsers are not shared between threads; each worker creates its own.
    """
    return tree_sitter.Parser(_C_LANGUAGE)


def parse_bytes(
    source: bytes,
    parser: Optional[tree_sitter.Parser] = None,
) -> tree_sitter.Tree:
    """
    Parse C source bytes into a syntax tree.

    A tree is returned even for malformed input; check tree.root_node.has_error.

    Raises:
        ParseError: if tree-sitter gives up without producing a tree.
    """
    if parser is None:
        parser = create_parser()
    tree = parser.parse(source)
    if tree is None:
        raise ParseError("parser did not produce a syntax tree")
    if tree.root_node.has_error:
        logger.warning("Parse completed with errors: root=%s", tree.root_node.type)
    else:
        logger.debug("Parse succeeded: root=%s", tree.root_node.type)
    return tree


def walk(node: TSNode) -> Iterator[TSNode]:
    """
    Yield node and every descendant in document order (pre-order DFS).

    Uses a tree cursor instead of recursion so deeply nested input (long
    else-if chains, nested initializers) cannot exhaust the Python stack.
    """
    cursor = node.walk()
    depth = 0
    while True:
        yield cursor.node
        if cursor.goto_first_child():
            depth += 1
            continue
        while True:
            if depth == 0:
                return
            if cursor.goto_next_sibling():
                break
            cursor.goto_parent()
            depth -= 1


def first_error_node(tree: tree_sitter.Tree) -> Optional[TSNode]:
    """Return the first ERROR or MISSING node in document order, if any."""
    if not tree.root_node.has_error:
        return None
    for node in walk(tree.root_node):
        if node.is_error or node.is_missing:
            return node
    return None


def describe_syntax_error(node: Optional[TSNode], source: bytes) -> str:
    """Human-readable description of a syntax error node."""
    if node is None:
        return "Syntax error"
    if node.is_missing:
        return f"Syntax error: missing `{node.type}'"
    text = source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")
    text = text.strip().splitlines()[0] if text.strip() else ""
    if not text:
        return "Syntax error: unexpected end of input"
    if len(text) > 40:
        text = text[:37] + "..."
    return f"Syntax error: unexpected `{text}'"
