"""
Driver: lint a set of sources and produce the rendered report.

For every source (a file on disk or an in-memory SourceBuffer):
    read -> SourceIndex + parse -> collect suppression markers -> Engine
Per-file results are collected in input order, handed to one Aggregator,
ordered, then rendered. Files are checked in a thread pool when jobs > 1;
each worker thread owns its own tree-sitter parser and every worker shares
the read-only rule registry.
"""

from __future__ import annotations

import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Sequence, Union

import tree_sitter

from westwood.aggregator import Aggregator, exceeds
from westwood.config import Config, get_default_config
from westwood.context import create_context, read_source
from westwood.engine import (
    Engine,
    decode_error_diagnostic,
    io_error_diagnostic,
    parser_failure_diagnostic,
)
from westwood.errors import DecodeError, IoError, ParseError
from westwood.findings.models import Diagnostic
from westwood.parser import create_parser
from westwood.reporting.render import render
from westwood.suppression import collect_suppressions
from westwood.traversal import collect_sources

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceBuffer:
    """An in-memory source; name is the file identifier used in diagnostics."""

    name: str
    data: bytes


Source = Union[Path, SourceBuffer]


@dataclass
class LintResult:
    diagnostics: list[Diagnostic]
    output: bytes
    files_checked: int
    exit_code: int


_worker = threading.local()


def _thread_parser() -> tree_sitter.Parser:
    parser = getattr(_worker, "parser", None)
    if parser is None:
        parser = _worker.parser = create_parser()
    return parser


def analyze_source(
    name: str,
    data: bytes,
    engine: Engine,
    parser: Optional[tree_sitter.Parser] = None,
) -> list[Diagnostic]:
    """
    Lint one buffer and return its diagnostics in engine emission order.

    Undecodable and unparseable buffers become a single diagnostic each;
    nothing here raises for a bad source file.
    """
    try:
        context = create_context(name, data, parser=parser)
    except DecodeError as e:
        logger.error("File %s is not valid UTF-8: %s", name, e)
        return [decode_error_diagnostic(name, e)]
    except ParseError as e:
        logger.error("File %s could not be parsed: %s", name, e)
        return [parser_failure_diagnostic(name, e)]

    suppressions = None
    if not context.has_parse_errors:
        suppressions = collect_suppressions(context)
    return engine.run(context, suppressions)


def _check_source(source: Source, engine: Engine) -> list[Diagnostic]:
    if isinstance(source, SourceBuffer):
        name, data = source.name, source.data
    else:
        name = str(source)
        try:
            data = read_source(source)
        except IoError as e:
            return [io_error_diagnostic(e)]
    return analyze_source(name, data, engine, parser=_thread_parser())


def _worker_count(jobs: Optional[int], files: int) -> int:
    if jobs is None:
        jobs = os.cpu_count() or 1
    if jobs < 1:
        raise ValueError(f"jobs must be at least 1, got {jobs}")
    return max(1, min(jobs, files))


def lint_sources(sources: Iterable[Source], config: Optional[Config] = None) -> LintResult:
    """
    Lint every source and render the aggregated report.

    The output does not depend on config.jobs: batches are merged in input
    order and the Aggregator imposes the final order.
    """
    if config is None:
        config = get_default_config()
    sources = list(sources)
    engine = Engine(config.registry)
    workers = _worker_count(config.jobs, len(sources))

    if workers == 1:
        batches: Sequence[list[Diagnostic]] = [_check_source(source, engine) for source in sources]
    else:
        logger.debug("Checking %d file(s) with %d worker(s)", len(sources), workers)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="westwood") as pool:
            batches = list(pool.map(lambda source: _check_source(source, engine), sources))

    aggregator = Aggregator()
    for batch in batches:
        aggregator.add_all(batch)
    diagnostics = aggregator.finalize(config.order)

    output = render(diagnostics, config.output, color=config.color)
    exit_code = 1 if exceeds(diagnostics, config.min_severity) else 0
    return LintResult(
        diagnostics=diagnostics,
        output=output,
        files_checked=len(sources),
        exit_code=exit_code,
    )


def lint_paths(paths: Iterable[Path], config: Optional[Config] = None) -> LintResult:
    """Expand directories into their C files, then lint_sources()."""
    if config is None:
        config = get_default_config()
    files = collect_sources(paths, include_headers=config.include_headers)
    return lint_sources(files, config)
