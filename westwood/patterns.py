"""
Structural patterns over tree-sitter C syntax trees.

A Pattern is built from a small, closed set of matcher combinators:

    node(kind, *constraints, capture=None)   node of a given kind (None = any named node)
    token(text, capture=None)                anonymous token such as "(" or "if"
    field(name, matcher)                     some child in the named field matches
    in_field(name)                           the node itself sits in its parent's named field
    child(matcher, index=None)               some child (or the child at index) matches
    sequence(*matchers)                      consecutive children match in order
    any_of(*matchers)                        alternation: first matching branch wins
    not_(matcher)                            the matcher does not match
    parent(kind) / ancestor(kind)            parent / some ancestor has the given kind
    text(regex)                              the node's source text matches (re.search)
    bind(name, matcher)                      capture whatever node matcher accepts

Constraints are matchers applied to the same node, so they compose freely:

    FUNCTION_CALL = Pattern(
        node(
            "call_expression",
            field("function", node(None, capture="function")),
            field("arguments", node("argument_list", child(token("(", capture="paren"), index=0))),
        ),
        name="function-call",
    )

Patterns are validated against the C grammar (Pattern.validate) so a typo
in a node kind or field name is reported when the rule registry is built,
not silently never matching. Matching is side-effect free: each call to
Pattern.matches() walks the tree again in pre-order and yields one Captures
object per node where the root matcher succeeds.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Iterator, Optional, Sequence

from tree_sitter import Language
from tree_sitter import Node as TSNode

from westwood.errors import PatternError
from westwood.findings.models import Span
from westwood.parser import walk


class _MatchState:
    """Capture bindings accumulated while matching one candidate node."""

    def __init__(self, source: bytes) -> None:
        self.source = source
        self.bindings: dict[str, list[TSNode]] = {}

    def attempt(self, matcher: "Matcher", node: TSNode) -> bool:
        """Run matcher; on failure roll back any bindings it made."""
        saved = {name: list(nodes) for name, nodes in self.bindings.items()}
        if matcher.match(node, self):
            return True
        self.bindings = saved
        return False

    def bind(self, name: str, node: TSNode) -> None:
        self.bindings.setdefault(name, []).append(node)

    def text(self, node: TSNode) -> str:
        return self.source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


class Matcher(ABC):
    """A predicate over one syntax node that may bind captures."""

    @abstractmethod
    def match(self, node: TSNode, state: _MatchState) -> bool:
        ...

    def children(self) -> Sequence["Matcher"]:
        return ()

    def validate(self, language: Language) -> None:
        for sub in self.children():
            sub.validate(language)

    def capture_names(self) -> set[str]:
        names: set[str] = set()
        for sub in self.children():
            names |= sub.capture_names()
        return names


def _check_kind(language: Language, kind: str, named: bool) -> None:
    if not language.id_for_node_kind(kind, named):
        what = "node kind" if named else "token"
        raise PatternError(f"unknown {what} {kind!r} in C grammar")


class NodeMatcher(Matcher):
    def __init__(self, kind: Optional[str], constraints: Sequence[Matcher], named: Optional[bool]) -> None:
        self.kind = kind
        self.constraints = tuple(constraints)
        self.named = named

    def match(self, node: TSNode, state: _MatchState) -> bool:
        if self.kind is not None and node.type != self.kind:
            return False
        if self.named is not None and node.is_named != self.named:
            return False
        return all(constraint.match(node, state) for constraint in self.constraints)

    def children(self) -> Sequence[Matcher]:
        return self.constraints

    def validate(self, language: Language) -> None:
        if self.kind is not None:
            _check_kind(language, self.kind, bool(self.named))
        super().validate(language)


class Bind(Matcher):
    def __init__(self, name: str, matcher: Matcher) -> None:
        if not name:
            raise PatternError("capture name must not be empty")
        self.name = name
        self.matcher = matcher

    def match(self, node: TSNode, state: _MatchState) -> bool:
        if not self.matcher.match(node, state):
            return False
        state.bind(self.name, node)
        return True

    def children(self) -> Sequence[Matcher]:
        return (self.matcher,)

    def capture_names(self) -> set[str]:
        return {self.name} | super().capture_names()


class FieldMatcher(Matcher):
    def __init__(self, name: str, matcher: Matcher) -> None:
        self.name = name
        self.matcher = matcher

    def match(self, node: TSNode, state: _MatchState) -> bool:
        return any(state.attempt(self.matcher, sub) for sub in node.children_by_field_name(self.name))

    def children(self) -> Sequence[Matcher]:
        return (self.matcher,)

    def validate(self, language: Language) -> None:
        if not language.field_id_for_name(self.name):
            raise PatternError(f"unknown field {self.name!r} in C grammar")
        super().validate(language)


class InFieldMatcher(Matcher):
    def __init__(self, name: str) -> None:
        self.name = name

    def match(self, node: TSNode, state: _MatchState) -> bool:
        up = node.parent
        return up is not None and any(sub == node for sub in up.children_by_field_name(self.name))

    def validate(self, language: Language) -> None:
        if not language.field_id_for_name(self.name):
            raise PatternError(f"unknown field {self.name!r} in C grammar")


class ChildMatcher(Matcher):
    def __init__(self, matcher: Matcher, index: Optional[int]) -> None:
        self.matcher = matcher
        self.index = index

    def match(self, node: TSNode, state: _MatchState) -> bool:
        kids = node.children
        if self.index is None:
            return any(state.attempt(self.matcher, kid) for kid in kids)
        if -len(kids) <= self.index < len(kids):
            return state.attempt(self.matcher, kids[self.index])
        return False

    def children(self) -> Sequence[Matcher]:
        return (self.matcher,)


class SequenceMatcher(Matcher):
    def __init__(self, matchers: Sequence[Matcher]) -> None:
        if not matchers:
            raise PatternError("sequence() needs at least one matcher")
        self.matchers = tuple(matchers)

    def match(self, node: TSNode, state: _MatchState) -> bool:
        kids = node.children
        width = len(self.matchers)
        for start in range(len(kids) - width + 1):
            saved = {name: list(nodes) for name, nodes in state.bindings.items()}
            if all(m.match(kids[start + i], state) for i, m in enumerate(self.matchers)):
                return True
            state.bindings = saved
        return False

    def children(self) -> Sequence[Matcher]:
        return self.matchers


class AnyOf(Matcher):
    def __init__(self, matchers: Sequence[Matcher]) -> None:
        if len(matchers) < 2:
            raise PatternError("any_of() needs at least two alternatives")
        self.matchers = tuple(matchers)

    def match(self, node: TSNode, state: _MatchState) -> bool:
        return any(state.attempt(m, node) for m in self.matchers)

    def children(self) -> Sequence[Matcher]:
        return self.matchers


class Not(Matcher):
    def __init__(self, matcher: Matcher) -> None:
        self.matcher = matcher

    def match(self, node: TSNode, state: _MatchState) -> bool:
        probe = _MatchState(state.source)
        return not self.matcher.match(node, probe)

    def children(self) -> Sequence[Matcher]:
        return (self.matcher,)

    def capture_names(self) -> set[str]:
        # Nothing inside a negation is ever bound.
        return set()


class ParentMatcher(Matcher):
    def __init__(self, kind: str) -> None:
        self.kind = kind

    def match(self, node: TSNode, state: _MatchState) -> bool:
        return node.parent is not None and node.parent.type == self.kind

    def validate(self, language: Language) -> None:
        _check_kind(language, self.kind, True)


class AncestorMatcher(Matcher):
    def __init__(self, kind: str) -> None:
        self.kind = kind

    def match(self, node: TSNode, state: _MatchState) -> bool:
        current = node.parent
        while current is not None:
            if current.type == self.kind:
                return True
            current = current.parent
        return False

    def validate(self, language: Language) -> None:
        _check_kind(language, self.kind, True)


class TextMatcher(Matcher):
    def __init__(self, pattern: str) -> None:
        try:
            self.regex = re.compile(pattern)
        except re.error as exc:
            raise PatternError(f"invalid text pattern {pattern!r}: {exc}") from exc

    def match(self, node: TSNode, state: _MatchState) -> bool:
        return self.regex.search(state.text(node)) is not None


def _maybe_bind(matcher: Matcher, capture: Optional[str]) -> Matcher:
    return Bind(capture, matcher) if capture else matcher


def node(kind: Optional[str], *constraints: Matcher, capture: Optional[str] = None) -> Matcher:
    """Named node of the given kind (any named node when kind is None)."""
    return _maybe_bind(NodeMatcher(kind, constraints, named=True), capture)


def any_node(*constraints: Matcher, capture: Optional[str] = None) -> Matcher:
    """Any node, named or anonymous."""
    return _maybe_bind(NodeMatcher(None, constraints, named=None), capture)


def token(text_: str, *constraints: Matcher, capture: Optional[str] = None) -> Matcher:
    """Anonymous token, e.g. token("(") or token("while")."""
    return _maybe_bind(NodeMatcher(text_, constraints, named=False), capture)


def field(name: str, matcher: Matcher) -> Matcher:
    return FieldMatcher(name, matcher)


def in_field(name: str) -> Matcher:
    """The node sits in its parent's named field."""
    return InFieldMatcher(name)


def child(matcher: Matcher, index: Optional[int] = None) -> Matcher:
    return ChildMatcher(matcher, index)


def sequence(*matchers: Matcher) -> Matcher:
    return SequenceMatcher(matchers)


def any_of(*matchers: Matcher, capture: Optional[str] = None) -> Matcher:
    return _maybe_bind(AnyOf(matchers), capture)


def not_(matcher: Matcher) -> Matcher:
    return Not(matcher)


def parent(kind: str) -> Matcher:
    return ParentMatcher(kind)


def ancestor(kind: str) -> Matcher:
    return AncestorMatcher(kind)


def text(pattern: str) -> Matcher:
    return TextMatcher(pattern)


def bind(name: str, matcher: Matcher) -> Matcher:
    return Bind(name, matcher)


class Captures:
    """Nodes bound by one successful match of a Pattern."""

    def __init__(
        self,
        pattern: "Pattern",
        root: TSNode,
        bindings: dict[str, list[TSNode]],
        source: bytes,
    ) -> None:
        self.pattern = pattern
        self.root = root
        self._bindings = bindings
        self._source = source

    def _check_name(self, name: str) -> None:
        if name not in self.pattern.capture_names:
            raise PatternError(f"pattern {self.pattern.name or '<anonymous>'} has no capture named {name!r}")

    def __contains__(self, name: str) -> bool:
        return bool(self._bindings.get(name))

    def nodes(self, name: str) -> list[TSNode]:
        self._check_name(name)
        return list(self._bindings.get(name, ()))

    def get(self, name: str) -> Optional[TSNode]:
        nodes = self.nodes(name)
        return nodes[0] if nodes else None

    def node(self, name: str) -> TSNode:
        """The single node bound to name; fails if there is not exactly one."""
        nodes = self.nodes(name)
        if len(nodes) != 1:
            raise PatternError(f"expected exactly one node for capture {name!r}, got {len(nodes)}")
        return nodes[0]

    def text(self, name: str) -> str:
        found = self.node(name)
        return self._source[found.start_byte : found.end_byte].decode("utf-8", errors="replace")

    def kind(self, name: str) -> str:
        return self.node(name).type

    def span(self, name: str) -> Span:
        found = self.node(name)
        return Span(start=found.start_byte, end=found.end_byte)

    def names(self) -> list[str]:
        return sorted(name for name, nodes in self._bindings.items() if nodes)


class Pattern:
    """A validated structural query with named captures."""

    def __init__(self, root: Matcher, name: str = "") -> None:
        self.root = root
        self.name = name
        self.capture_names = frozenset(root.capture_names())

    def __repr__(self) -> str:
        return f"Pattern({self.name!r}, captures={sorted(self.capture_names)})"

    def validate(self, language: Language) -> None:
        """Raise PatternError if any node kind or field is unknown to the grammar."""
        try:
            self.root.validate(language)
        except PatternError as exc:
            raise PatternError(f"pattern {self.name or '<anonymous>'}: {exc}") from exc

    def matches(self, root: TSNode, source: bytes) -> Iterator[Captures]:
        """Yield captures for every node (pre-order) the pattern matches."""
        for candidate in walk(root):
            state = _MatchState(source)
            if self.root.match(candidate, state):
                yield Captures(self, candidate, state.bindings, source)
