"""Single-file scanning: read, match, and locate."""

from __future__ import annotations

from pathlib import Path

from quick_grep.config import DEFAULT_ENCODING
from quick_grep.search.line_index import build_line_index
from quick_grep.search.models import MatchRecord
from quick_grep.search.patterns import CompiledPattern


class FileUnreadableError(Exception):
    """Raised when a file cannot be opened or read."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


def read_file_text(path: Path, encoding: str = DEFAULT_ENCODING) -> str:
    """Read a whole file without newline translation."""
    try:
        with path.open("r", encoding=encoding, errors="replace", newline="") as handle:
            return handle.read()
    except OSError as error:
        raise FileUnreadableError(path=str(path), reason=error.strerror or str(error)) from error


def scan_file(
    path: Path,
    pattern: CompiledPattern,
    encoding: str = DEFAULT_ENCODING,
) -> list[MatchRecord]:
    """Return every match in one file in ascending offset order."""
    text = read_file_text(path, encoding=encoding)
    if not text:
        return []
    index = build_line_index(text)
    file_path = str(path)
    records: list[MatchRecord] = []
    for match in pattern.finditer(text):
        offset = match.start()
        line, column = index.locate(offset)
        records.append(
            MatchRecord(
                file_path=file_path,
                file_name=path.name,
                matched_text=match.group(0),
                offset=offset,
                line=line,
                column=column,
            )
        )
    return records
