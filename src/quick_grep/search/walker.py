"""Directory traversal with parallel per-file scanning."""

from __future__ import annotations

import fnmatch
import os
import threading
from collections.abc import Iterator
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from quick_grep.config import DEFAULT_ENCODING, DEFAULT_FILE_GLOB
from quick_grep.search.models import (
    DIRECTORY_UNREADABLE,
    FILE_UNREADABLE,
    MatchRecord,
    ScanWarning,
)
from quick_grep.search.patterns import CompiledPattern
from quick_grep.search.scanner import FileUnreadableError, scan_file


@dataclass(slots=True, frozen=True)
class _DirectoryListing:
    """Name-ordered files and subdirectories of one directory."""

    files: tuple[Path, ...]
    subdirectories: tuple[Path, ...]


@dataclass(slots=True, frozen=True)
class _FileOutcome:
    """Result of scanning one file on a worker thread."""

    records: list[MatchRecord]
    warning: ScanWarning | None


def walk_directory(
    directory: Path,
    pattern: CompiledPattern,
    recursive: bool = False,
    file_glob: str = DEFAULT_FILE_GLOB,
    *,
    max_workers: int | None = None,
    encoding: str = DEFAULT_ENCODING,
    warnings: list[ScanWarning] | None = None,
    cancel_event: threading.Event | None = None,
) -> Iterator[MatchRecord]:
    """Yield matches for a directory, then for its subdirectories when recursive.

    Files of one directory are scanned concurrently, but batches are yielded in
    file-name order so each file's matches stay contiguous and offset-ordered.
    Subdirectories are visited depth-first in name order from an explicit stack.
    """
    executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="quick-grep")
    try:
        stack: list[Path] = [directory]
        visited: set[tuple[int, int]] = set()
        while stack:
            if _cancelled(cancel_event):
                return
            current = stack.pop()
            listing = _list_directory(current, file_glob, visited, warnings)
            if listing is None:
                continue
            futures: list[Future[_FileOutcome]] = [
                executor.submit(_scan_one, path, pattern, encoding, cancel_event)
                for path in listing.files
            ]
            for future in futures:
                outcome = future.result()
                if outcome.warning is not None and warnings is not None:
                    warnings.append(outcome.warning)
                yield from outcome.records
            if recursive:
                stack.extend(reversed(listing.subdirectories))
    finally:
        executor.shutdown(wait=True, cancel_futures=True)


def matches_file_glob(name: str, file_glob: str) -> bool:
    """Return True when a file name matches the configured glob."""
    if file_glob == DEFAULT_FILE_GLOB:
        return True
    return fnmatch.fnmatch(name, file_glob)


def _list_directory(
    directory: Path,
    file_glob: str,
    visited: set[tuple[int, int]],
    warnings: list[ScanWarning] | None,
) -> _DirectoryListing | None:
    """List one directory, or record a warning and return None."""
    try:
        stat = directory.stat()
        key = (stat.st_dev, stat.st_ino)
        if key in visited:
            return None
        visited.add(key)
        with os.scandir(directory) as entries:
            ordered_entries = sorted(entries, key=lambda item: item.name)
    except OSError as error:
        _warn(warnings, str(directory), DIRECTORY_UNREADABLE, error)
        return None

    files: list[Path] = []
    subdirectories: list[Path] = []
    for entry in ordered_entries:
        # Classifying may stat through a symlink; a failure skips only this entry.
        try:
            is_dir = entry.is_dir()
            is_file = not is_dir and entry.is_file()
        except OSError as error:
            _warn(warnings, entry.path, FILE_UNREADABLE, error)
            continue
        if is_dir:
            subdirectories.append(Path(entry.path))
        elif is_file and matches_file_glob(entry.name, file_glob):
            files.append(Path(entry.path))
    return _DirectoryListing(files=tuple(files), subdirectories=tuple(subdirectories))


def _warn(
    warnings: list[ScanWarning] | None,
    path: str,
    kind: str,
    error: OSError,
) -> None:
    if warnings is not None:
        warnings.append(ScanWarning(path=path, kind=kind, reason=error.strerror or str(error)))


def _scan_one(
    path: Path,
    pattern: CompiledPattern,
    encoding: str,
    cancel_event: threading.Event | None,
) -> _FileOutcome:
    if _cancelled(cancel_event):
        return _FileOutcome(records=[], warning=None)
    try:
        records = scan_file(path, pattern, encoding=encoding)
    except FileUnreadableError as error:
        return _FileOutcome(
            records=[],
            warning=ScanWarning(path=error.path, kind=FILE_UNREADABLE, reason=error.reason),
        )
    return _FileOutcome(records=records, warning=None)


def _cancelled(cancel_event: threading.Event | None) -> bool:
    return cancel_event is not None and cancel_event.is_set()
