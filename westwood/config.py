"""
Linter configuration: which rules run, their limits, and how results are
ordered, filtered and rendered.

The CLI in main.py builds one Config from its options; library callers use
get_default_config() with keyword overrides.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from westwood.aggregator import Ordering
from westwood.findings.models import Severity
from westwood.registry import RuleRegistry, build_default_registry
from westwood.reporting.base import OutputKind
from westwood.rules.function_length import MAX_PAGES_PER_FUNCTION, PAGE_SIZE
from westwood.rules.line_length import DEFAULT_MAX_COLUMNS
from westwood.rules.tab_indentation import DEFAULT_MAX_DIAGNOSTICS


@dataclass
class Config:
    """
    Linter configuration.

    registry is built from the limit fields by get_default_config(); jobs=None
    means one worker per CPU.
    """

    registry: RuleRegistry = field(default_factory=build_default_registry)
    output: OutputKind = OutputKind.HUMAN
    order: Ordering = Ordering.LOCATION
    min_severity: Severity = Severity.WARNING
    jobs: Optional[int] = None
    color: bool = False
    include_headers: bool = False
    max_line_length: int = DEFAULT_MAX_COLUMNS
    max_function_lines: int = PAGE_SIZE * MAX_PAGES_PER_FUNCTION
    max_tab_diagnostics: Optional[int] = DEFAULT_MAX_DIAGNOSTICS


def get_default_config(**overrides) -> Config:
    """
    Return the default configuration with every implemented rule enabled.

    Keyword overrides set Config fields; the rule limits are applied when
    the registry is built, so they take effect here and not by assigning
    to an existing Config later.
    """
    overrides.setdefault("registry", None)
    config = Config(**overrides)
    if config.registry is None:
        config.registry = build_default_registry(
            max_line_length=config.max_line_length,
            max_function_lines=config.max_function_lines,
            max_tab_diagnostics=config.max_tab_diagnostics,
        )
    return config


def get_enabled_rules(config: Config | None = None, disabled: Iterable[str] = ()) -> RuleRegistry:
    """
    Return the registry of rules to run: the config's registry minus the
    disabled ids.

    Raises:
        RegistryError: if a disabled id is not a known rule.
    """
    if config is None:
        config = get_default_config()
    disabled = list(disabled)
    if not disabled:
        return config.registry
    return config.registry.without(disabled)
