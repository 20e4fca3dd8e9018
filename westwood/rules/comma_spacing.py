# Rule III:C: one space after internal semicolons and commas.

from __future__ import annotations

from typing import Iterable, Optional

from tree_sitter import Node as TSNode

from westwood.context import FileContext
from westwood.findings.models import RuleViolation
from westwood.patterns import Captures, Pattern, ancestor, token
from westwood.rules.base import Rule
from westwood.rules.helpers import is_single_space_or_break

COMMA = Pattern(token(",", capture="delim"), name="comma")

# Candidate `;` tokens inside a for statement; evaluate() keeps only the
# ones separating the clauses of the header.
FOR_SEMICOLON = Pattern(token(";", ancestor("for_statement"), capture="delim"), name="for-semicolon")

# Tokens that may directly follow a delimiter without a space.
CLOSERS = frozenset({")", "}", "]", ";"})


def _is_for_header_semicolon(delim: TSNode) -> bool:
    owner = delim.parent
    if owner is None:
        return False
    if owner.type == "for_statement":
        return True
    # `for (int i = 0; ...)`: the declaration owns its own semicolon
    return (
        owner.type == "declaration"
        and owner.parent is not None
        and owner.parent.type == "for_statement"
        and owner.parent.child_by_field_name("initializer") == owner
    )


def _next_token(delim: TSNode) -> Optional[TSNode]:
    following = delim.next_sibling
    if following is None and delim.parent is not None:
        following = delim.parent.next_sibling
    return following


class CommaSpacingRule(Rule):
    """
    One space must be placed after internal semicolons and commas:

        for (i = 0; i < limit; ++i)
        printf("%f %f %f\\n", temperature, volume, area);
    """

    id = "comma-spacing"
    code = "III:C"
    name = "CommaSpacing"
    description = "one space must follow commas and internal semicolons"
    patterns = (COMMA, FOR_SEMICOLON)

    def evaluate(self, context: FileContext, captures: Captures) -> Iterable[RuleViolation]:
        delim = captures.node("delim")
        if delim.type == ";" and not _is_for_header_semicolon(delim):
            return
        following = _next_token(delim)
        if following is None or following.type in CLOSERS:
            return
        if is_single_space_or_break(delim, following, context.source):
            return
        yield self.violation(
            f"Expected a single space after `{delim.type}'",
            captures.span("delim"),
        )
