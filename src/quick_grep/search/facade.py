"""Search entry point routing a path to the file scanner or directory walker."""

from __future__ import annotations

import threading
from collections.abc import Iterator
from pathlib import Path

from quick_grep.config import SearchConfig
from quick_grep.search.models import FILE_UNREADABLE, MatchRecord, ScanWarning, SearchResult
from quick_grep.search.patterns import CompiledPattern, build_from_config
from quick_grep.search.scanner import FileUnreadableError, scan_file
from quick_grep.search.walker import walk_directory


class PathNotFoundError(Exception):
    """Raised when the search target is neither a file nor a directory."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Path does not exist: {path}")
        self.path = path
        self.reason = "QG cannot find the path specified."
        self.hint = "Pass an existing file or directory."


def search(
    path: str | Path,
    query: str,
    config: SearchConfig,
    warnings: list[ScanWarning] | None = None,
    cancel_event: threading.Event | None = None,
) -> Iterator[MatchRecord]:
    """Validate the target and pattern, then return a lazy match iterator.

    Raises PathNotFoundError before the pattern is compiled, and
    InvalidPatternError before any file is read. Per-entry read failures are
    appended to ``warnings`` instead of raised.
    """
    target = Path(path)
    is_directory = target.is_dir()
    if not is_directory and not target.is_file():
        raise PathNotFoundError(str(path))
    pattern = build_from_config(query, config)
    if is_directory:
        return walk_directory(
            target,
            pattern,
            recursive=config.recursive,
            file_glob=config.file_glob,
            max_workers=config.max_workers,
            encoding=config.encoding,
            warnings=warnings,
            cancel_event=cancel_event,
        )
    return _search_file(target, pattern, config.encoding, warnings)


def search_all(
    path: str | Path,
    query: str,
    config: SearchConfig,
    cancel_event: threading.Event | None = None,
) -> SearchResult:
    """Run a search to completion and return matches with warnings."""
    warnings: list[ScanWarning] = []
    matches = tuple(search(path, query, config, warnings=warnings, cancel_event=cancel_event))
    return SearchResult(matches=matches, warnings=tuple(warnings))


def _search_file(
    path: Path,
    pattern: CompiledPattern,
    encoding: str,
    warnings: list[ScanWarning] | None,
) -> Iterator[MatchRecord]:
    try:
        records = scan_file(path, pattern, encoding=encoding)
    except FileUnreadableError as error:
        if warnings is not None:
            warnings.append(
                ScanWarning(path=error.path, kind=FILE_UNREADABLE, reason=error.reason)
            )
        return
    yield from records
