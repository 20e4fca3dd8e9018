"""
The rule registry: the fixed, ordered list of every known rule.

Built once at start-up and read-only afterwards, so it is shared between
worker threads without locking. Building a registry validates that rule
ids are unique and that every pattern of every rule only uses node kinds
and fields that exist in the C grammar.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, Optional, Sequence

from westwood.errors import PatternError, RegistryError
from westwood.parser import get_c_language
from westwood.rules.base import Rule
from westwood.rules.comma_spacing import CommaSpacingRule
from westwood.rules.constant_names import ConstantNamesRule
from westwood.rules.crlf_newline import CrlfNewlineRule
from westwood.rules.declarations_at_top import DeclarationsAtTopRule
from westwood.rules.define_placement import DefinePlacementRule
from westwood.rules.flow_control_spacing import FlowControlSpacingRule
from westwood.rules.function_length import MAX_PAGES_PER_FUNCTION, PAGE_SIZE, FunctionLengthRule
from westwood.rules.function_paren_spacing import FunctionParenSpacingRule
from westwood.rules.global_prefix import GlobalPrefixRule
from westwood.rules.line_length import DEFAULT_MAX_COLUMNS, LineLengthRule
from westwood.rules.lowercase_names import LowercaseNamesRule
from westwood.rules.multiple_definitions import MultipleDefinitionsRule
from westwood.rules.no_goto import NoGotoRule
from westwood.rules.operator_spacing import OperatorSpacingRule
from westwood.rules.tab_indentation import DEFAULT_MAX_DIAGNOSTICS, TabIndentationRule
from westwood.rules.trailing_whitespace import TrailingWhitespaceRule

logger = logging.getLogger(__name__)

# Ids reserved for pipeline diagnostics; no rule may use them.
RESERVED_IDS = frozenset({"parse-error", "decode-error", "io-error"})


class RuleRegistry:
    """Immutable, ordered collection of rules keyed by rule id."""

    def __init__(self, rules: Iterable[Rule], *, validate: bool = True) -> None:
        ordered = tuple(rules)
        by_id: dict[str, Rule] = {}
        for rule in ordered:
            if rule.id in RESERVED_IDS:
                raise RegistryError(f"rule id {rule.id!r} is reserved")
            if rule.id in by_id:
                raise RegistryError(f"duplicate rule id {rule.id!r}")
            by_id[rule.id] = rule
        self._rules = ordered
        self._by_id = by_id
        if validate:
            self._validate_patterns()
        logger.debug("Rule registry built with %d rule(s)", len(ordered))

    def _validate_patterns(self) -> None:
        language = get_c_language()
        for rule in self._rules:
            for pattern in rule.patterns:
                try:
                    pattern.validate(language)
                except PatternError as exc:
                    raise RegistryError(f"rule {rule.id}: {exc}") from exc

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._by_id

    def get(self, rule_id: str) -> Optional[Rule]:
        return self._by_id.get(rule_id)

    def ids(self) -> list[str]:
        return [rule.id for rule in self._rules]

    def without(self, rule_ids: Iterable[str]) -> "RuleRegistry":
        """A new registry with the given rule ids removed (unknown ids are an error)."""
        excluded = set(rule_ids)
        unknown = sorted(excluded - set(self._by_id))
        if unknown:
            raise RegistryError(f"unknown rule id(s): {', '.join(unknown)}")
        return RuleRegistry((r for r in self._rules if r.id not in excluded), validate=False)


def default_rules(
    max_line_length: int = DEFAULT_MAX_COLUMNS,
    max_function_lines: int = PAGE_SIZE * MAX_PAGES_PER_FUNCTION,
    max_tab_diagnostics: Optional[int] = DEFAULT_MAX_DIAGNOSTICS,
) -> Sequence[Rule]:
    """Every implemented rule, in code standard order."""
    return [
        LowercaseNamesRule(),
        ConstantNamesRule(),
        GlobalPrefixRule(),
        DeclarationsAtTopRule(),
        LineLengthRule(max_columns=max_line_length),
        FunctionLengthRule(max_lines=max_function_lines),
        FlowControlSpacingRule(),
        OperatorSpacingRule(),
        CommaSpacingRule(),
        DefinePlacementRule(),
        TrailingWhitespaceRule(),
        FunctionParenSpacingRule(),
        TabIndentationRule(max_diagnostics=max_tab_diagnostics),
        CrlfNewlineRule(max_diagnostics=max_tab_diagnostics),
        NoGotoRule(),
        MultipleDefinitionsRule(),
    ]


def build_default_registry(**limits) -> RuleRegistry:
    return RuleRegistry(default_rules(**limits))
