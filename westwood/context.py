# Per-file analysis context: file identifier, source bytes, syntax tree and SourceIndex.
# Handles reading and parsing C files and logging node/function counts so the
# tree is ready for rules. Rules only ever see a FileContext.

import logging
from pathlib import Path
from typing import Iterator, Optional

from tree_sitter import Node as TSNode
from tree_sitter import Parser, Tree

from westwood.errors import IoError
from westwood.findings.models import Span
from westwood.parser import create_parser, parse_bytes, walk
from westwood.source_index import SourceIndex

logger = logging.getLogger(__name__)


def count_tree_stats(root: TSNode) -> tuple[int, int]:
    """
    Return (total node count, function definition count) for the tree.

    Useful for logging how much was parsed (nodes and functions).
    """
    nodes = 0
    functions = 0
    for node in walk(root):
        nodes += 1
        if node.type == "function_definition":
            functions += 1
    return nodes, functions


class FileContext:
    """
    Everything a rule may look at for one file.

    path is the file identifier used in diagnostics (a path or a buffer
    name). index resolves byte offsets; the Engine drops the context once
    the file's diagnostics have been resolved.
    """

    def __init__(self, path: str, source: bytes, tree: Tree, index: SourceIndex) -> None:
        self.path = path
        self.source = source
        self.tree = tree
        self.index = index

    @property
    def root_node(self) -> TSNode:
        """Convenience access to the tree root."""
        return self.tree.root_node

    @property
    def has_parse_errors(self) -> bool:
        return self.tree.root_node.has_error

    def text(self, node: TSNode) -> str:
        """Source text of a node; decodes with errors="replace" so bad UTF-8 does not crash."""
        return self.source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")

    def lines(self) -> Iterator[tuple[int, int, bytes]]:
        """(line number, start offset, line bytes without newline) for every line."""
        return self.index.lines()


def node_span(node: TSNode) -> Span:
    """Unresolved span covering a node."""
    return Span(start=node.start_byte, end=node.end_byte)


def span_between(left: TSNode, right: TSNode) -> Span:
    """Span from the end of left to the start of right (the gap between two nodes)."""
    return Span(start=left.end_byte, end=right.start_byte)


def read_source(path: Path) -> bytes:
    """
    Read a source file.

    Raises:
        IoError: if the file cannot be read (missing, permissions, ...).
    """
    try:
        return path.read_bytes()
    except OSError as e:
        logger.error("Failed to read file %s: %s", path, e)
        raise IoError(str(path), e.strerror or str(e)) from e


def create_context(
    path: str,
    source: bytes,
    parser: Optional[Parser] = None,
) -> FileContext:
    """
    Index and parse one source buffer into a FileContext.

    - Invalid UTF-8: raises DecodeError from SourceIndex.build; nothing is parsed.
    - Malformed C (syntax errors): still returns a context; the Engine turns
      it into a single parse-error diagnostic.
    - Success: logs node count and function count.
    """
    index = SourceIndex.build(source)

    if parser is None:
        parser = create_parser()
    tree = parse_bytes(source, parser=parser)
    has_errors = tree.root_node.has_error
    if has_errors:
        logger.warning("File %s parsed with syntax errors; rules will not run", path)

    node_count, func_count = count_tree_stats(tree.root_node)
    logger.info(
        "Parsed %s: %d nodes, %d function(s)%s",
        path,
        node_count,
        func_count,
        " (with parse errors)" if has_errors else "",
    )

    return FileContext(path=path, source=source, tree=tree, index=index)
