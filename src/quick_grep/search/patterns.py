"""Compile search text into immutable, shareable regex patterns."""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

from quick_grep.config import SearchConfig


class InvalidPatternError(Exception):
    """Raised when search text cannot be compiled into a pattern."""

    def __init__(self, reason: str, hint: str) -> None:
        super().__init__(reason)
        self.reason = reason
        self.hint = hint


@dataclass(slots=True, frozen=True)
class CompiledPattern:
    """Read-only compiled pattern shared by all scan workers."""

    source: str
    match_case: bool
    regex: re.Pattern[str]

    def finditer(self, text: str) -> Iterator[re.Match[str]]:
        """Yield non-overlapping matches from left to right."""
        return self.regex.finditer(text)


def build_pattern(
    text: str,
    match_case: bool = False,
    match_whole_word: bool = False,
) -> CompiledPattern:
    """Build a pattern matching ``text`` literally.

    Whole-word matches may not touch a word character on either side, even when
    ``text`` itself starts or ends with punctuation.
    """
    source = re.escape(text)
    if match_whole_word:
        source = rf"(?<!\w){source}(?!\w)"
    return _compile(source, match_case)


def build_raw_pattern(source: str, match_case: bool = False) -> CompiledPattern:
    """Build a pattern from a regular expression used as-is."""
    return _compile(source, match_case)


def build_from_config(query: str, config: SearchConfig) -> CompiledPattern:
    """Build a literal or raw pattern according to the search configuration."""
    if config.raw_pattern:
        return build_raw_pattern(query, match_case=config.match_case)
    return build_pattern(
        query,
        match_case=config.match_case,
        match_whole_word=config.match_whole_word,
    )


def _compile(source: str, match_case: bool) -> CompiledPattern:
    flags = 0 if match_case else re.IGNORECASE
    try:
        regex = re.compile(source, flags)
    except re.error as error:
        raise InvalidPatternError(
            reason=f"Pattern does not compile: {error}",
            hint="Check the expression syntax, or search literally without --pattern.",
        ) from error
    return CompiledPattern(source=source, match_case=match_case, regex=regex)
