"""Match-locating search engine."""

from .facade import PathNotFoundError, search, search_all
from .line_index import LineIndex, build_line_index
from .models import (
    DIRECTORY_UNREADABLE,
    FILE_UNREADABLE,
    MatchRecord,
    ScanWarning,
    SearchResult,
)
from .patterns import (
    CompiledPattern,
    InvalidPatternError,
    build_from_config,
    build_pattern,
    build_raw_pattern,
)
from .scanner import FileUnreadableError, scan_file
from .walker import walk_directory

__all__ = [
    "CompiledPattern",
    "DIRECTORY_UNREADABLE",
    "FILE_UNREADABLE",
    "FileUnreadableError",
    "InvalidPatternError",
    "LineIndex",
    "MatchRecord",
    "PathNotFoundError",
    "ScanWarning",
    "SearchResult",
    "build_from_config",
    "build_line_index",
    "build_pattern",
    "build_raw_pattern",
    "scan_file",
    "search",
    "search_all",
    "walk_directory",
]
