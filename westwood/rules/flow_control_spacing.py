# Rule III:A: one space after flow control keywords and between `)` and `{`.

from __future__ import annotations

from typing import Iterable

from tree_sitter import Node as TSNode

from westwood.context import FileContext
from westwood.findings.models import RuleViolation, Span
from westwood.patterns import Captures, Matcher, Pattern, child, field, node, sequence, token
from westwood.rules.base import Rule
from westwood.rules.helpers import is_single_space


def _opening_paren(capture: str) -> Matcher:
    return node("parenthesized_expression", child(token("(", capture=capture), index=0))


def _closing_paren_condition() -> Matcher:
    return node("parenthesized_expression", child(token(")", capture="rparen"), index=-1))


def _braced(capture: str) -> Matcher:
    return node("compound_statement", child(token("{", capture=capture), index=0))


# Keyword followed by its opening parenthesis (or, for `do`, its opening brace).
KEYWORD_SPACING = (
    Pattern(
        node("if_statement", child(token("if", capture="keyword"), index=0), field("condition", _opening_paren("opening"))),
        name="if-keyword",
    ),
    Pattern(
        node("while_statement", child(token("while", capture="keyword"), index=0), field("condition", _opening_paren("opening"))),
        name="while-keyword",
    ),
    Pattern(
        node("switch_statement", child(token("switch", capture="keyword"), index=0), field("condition", _opening_paren("opening"))),
        name="switch-keyword",
    ),
    Pattern(
        node("for_statement", child(token("for", capture="keyword"), index=0), child(token("(", capture="opening"), index=1)),
        name="for-keyword",
    ),
    Pattern(
        node("do_statement", child(token("do", capture="keyword"), index=0), field("body", _braced("opening"))),
        name="do-keyword",
    ),
    Pattern(
        node("do_statement", sequence(token("while", capture="keyword"), _opening_paren("opening"))),
        name="do-while-keyword",
    ),
)

# Closing parenthesis of the condition followed by the opening brace of the body.
BRACE_SPACING = (
    Pattern(
        node("if_statement", field("condition", _closing_paren_condition()), field("consequence", _braced("lbrace"))),
        name="if-brace",
    ),
    Pattern(
        node("while_statement", field("condition", _closing_paren_condition()), field("body", _braced("lbrace"))),
        name="while-brace",
    ),
    Pattern(
        node("switch_statement", field("condition", _closing_paren_condition()), field("body", _braced("lbrace"))),
        name="switch-brace",
    ),
    Pattern(
        node("for_statement", sequence(token(")", capture="rparen"), _braced("lbrace"))),
        name="for-brace",
    ),
)


class FlowControlSpacingRule(Rule):
    """
    One space after all structure control and flow commands, and one space
    between the closing parenthesis and the opening brace:

        if (temperature == room_temperature) {
    """

    id = "flow-control-spacing"
    code = "III:A"
    name = "FlowControlSpacing"
    description = "one space must be placed between flow control constructs"
    patterns = KEYWORD_SPACING + BRACE_SPACING

    def evaluate(self, context: FileContext, captures: Captures) -> Iterable[RuleViolation]:
        if "keyword" in captures:
            keyword = captures.node("keyword")
            message = f"Expected a single space after `{context.text(keyword)}'"
            yield from self._check(context, keyword, captures.node("opening"), message)
        else:
            message = "Expected a single space between the closing parenthesis and the opening brace"
            yield from self._check(context, captures.node("rparen"), captures.node("lbrace"), message)

    def _check(
        self, context: FileContext, left: TSNode, right: TSNode, message: str
    ) -> Iterable[RuleViolation]:
        if not is_single_space(left, right, context.source):
            yield self.violation(message, Span(start=left.start_byte, end=right.end_byte))
