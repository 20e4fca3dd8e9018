"""
File system traversal: expand lint targets into the C files to check.

Directories are walked recursively, collecting .c files (and .h files when
asked), skipping version control, build and cache directories. Results are
sorted so a run always visits files in the same order.

Typical usage:
    from pathlib import Path
    from westwood.traversal import collect_sources

    files = collect_sources([Path("src"), Path("main.c")], include_headers=True)
"""

import logging
from pathlib import Path
from typing import AbstractSet, FrozenSet, Iterable, Iterator, Optional

logger = logging.getLogger(__name__)

# Directory names never descended into: version control metadata, build
# output and tool caches. Student projects keep their sources next to these.
DEFAULT_IGNORE_DIRS: FrozenSet[str] = frozenset(
    {
        ".git", ".hg", ".svn", "CVS",
        "build", "cmake-build-debug", "cmake-build-release", "obj", "out",
        ".cache", ".idea", ".vscode", "__pycache__", ".pytest_cache", ".venv",
    }
)

C_SUFFIX = ".c"
HEADER_SUFFIX = ".h"


def is_source_file(path: Path, include_headers: bool = False) -> bool:
    """
    Check if a file should be linted.

    Examples:
        >>> is_source_file(Path("main.c"))
        True
        >>> is_source_file(Path("list.h"))
        False
        >>> is_source_file(Path("list.h"), include_headers=True)
        True
    """
    suffix = path.suffix.lower()
    if suffix == C_SUFFIX:
        return True
    return include_headers and suffix == HEADER_SUFFIX


def _iter_sources(
    directory: Path,
    include_headers: bool,
    ignore_dirs: AbstractSet[str],
    follow_symlinks: bool,
) -> Iterator[Path]:
    try:
        entries = list(directory.iterdir())
    except OSError as e:
        # Unreadable subdirectories are skipped, not fatal.
        logger.warning("Cannot list %s: %s", directory, e)
        return
    for entry in entries:
        if entry.is_symlink() and not follow_symlinks:
            continue
        if entry.is_dir():
            if entry.name not in ignore_dirs:
                yield from _iter_sources(entry, include_headers, ignore_dirs, follow_symlinks)
            else:
                logger.debug("Not descending into %s", entry)
        elif entry.is_file() and is_source_file(entry, include_headers=include_headers):
            yield entry


def find_source_files(
    root: Path,
    include_headers: bool = False,
    ignore_dirs: Optional[AbstractSet[str]] = None,
    follow_symlinks: bool = False,
) -> list[Path]:
    """
    Every .c file (and .h file with include_headers) below root, sorted.

    Directories named in ignore_dirs (DEFAULT_IGNORE_DIRS when None) are
    pruned; symlinks are skipped unless follow_symlinks is set.

    Raises:
        FileNotFoundError: root does not exist.
        NotADirectoryError: root is a file.
    """
    if not root.exists():
        logger.error("Lint target does not exist: %s", root)
        raise FileNotFoundError(f"No such directory: {root}")
    if not root.is_dir():
        logger.error("Lint target is not a directory: %s", root)
        raise NotADirectoryError(f"Not a directory: {root}")

    pruned = DEFAULT_IGNORE_DIRS if ignore_dirs is None else ignore_dirs
    found = sorted(_iter_sources(root, include_headers, pruned, follow_symlinks))
    logger.info("Found %d source file(s) in %s", len(found), root)
    return found


def collect_sources(
    targets: Iterable[Path],
    include_headers: bool = False,
    ignore_dirs: Optional[AbstractSet[str]] = None,
) -> list[Path]:
    """
    Expand lint targets: directories are walked, files are taken as given.

    Explicitly named files are always kept, whatever their suffix, and
    missing ones too, so the run can report them as io-error diagnostics.
    Duplicates are dropped, keeping the first occurrence.
    """
    files: list[Path] = []
    seen: set[Path] = set()
    for target in targets:
        if target.is_dir():
            found = find_source_files(target, include_headers=include_headers, ignore_dirs=ignore_dirs)
            if not found:
                logger.warning("No C files found under %s", target)
        else:
            found = [target]
        for path in found:
            if path not in seen:
                seen.add(path)
                files.append(path)
    return files
