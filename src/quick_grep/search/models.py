"""Typed models for search results."""

from __future__ import annotations

from dataclasses import dataclass

FILE_UNREADABLE = "FILE_UNREADABLE"
DIRECTORY_UNREADABLE = "DIRECTORY_UNREADABLE"


@dataclass(slots=True, frozen=True)
class MatchRecord:
    """One pattern occurrence with its file coordinates."""

    file_path: str
    file_name: str
    matched_text: str
    offset: int
    line: int
    column: int


@dataclass(slots=True, frozen=True)
class ScanWarning:
    """Non-fatal failure for one file or directory during a search."""

    path: str
    kind: str
    reason: str


@dataclass(slots=True, frozen=True)
class SearchResult:
    """Materialized search output."""

    matches: tuple[MatchRecord, ...]
    warnings: tuple[ScanWarning, ...]
