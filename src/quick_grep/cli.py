"""Command-line entrypoint."""

from __future__ import annotations

import argparse
import json
import os
import sys
from dataclasses import asdict
from pathlib import Path
from typing import TextIO

from quick_grep.config import AppConfig, CliOverrides, load_effective_config
from quick_grep.logging import AuditEvent, JsonlAuditLogger, sanitize_arguments, utc_timestamp
from quick_grep.search import (
    InvalidPatternError,
    MatchRecord,
    PathNotFoundError,
    ScanWarning,
    search,
)

EXIT_OK = 0
EXIT_ERROR = 1


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for one search invocation."""
    parser = argparse.ArgumentParser(
        prog="quick-grep",
        description="Performs a quick search on the file or directory of files.",
    )
    parser.add_argument(
        "first",
        metavar="[path]",
        nargs="?",
        help="File or directory to search (defaults to the current directory).",
    )
    parser.add_argument("second", metavar="text", nargs="?", help="Text to search for.")
    parser.add_argument(
        "-r", "--recursive", action="store_true", default=None, help="Search recursively."
    )
    parser.add_argument(
        "-p",
        "--pattern",
        dest="raw_pattern",
        action="store_true",
        default=None,
        help="Text is a regular expression pattern.",
    )
    parser.add_argument(
        "-c", "--match-case", action="store_true", default=None, help="Search case sensitively."
    )
    parser.add_argument(
        "-w",
        "--whole-word",
        dest="match_whole_word",
        action="store_true",
        default=None,
        help="Match whole words only.",
    )
    parser.add_argument("-f", "--file-glob", default=None, help="File name search pattern.")
    parser.add_argument("--workers", type=int, default=None, help="Parallel file scanners.")
    parser.add_argument("--encoding", default=None, help="Text encoding of searched files.")
    parser.add_argument("--config", type=Path, default=None, help="Path to quick_grep.toml.")
    parser.add_argument("--audit-log", type=Path, default=None, help="JSONL audit log path.")
    parser.add_argument(
        "--show-config",
        action="store_true",
        help="Print the merged configuration as JSON and exit.",
    )
    parser.add_argument(
        "--audit-tail",
        type=int,
        default=None,
        metavar="N",
        help="Print the N most recent audit events and exit.",
    )
    return parser


def format_match(match: MatchRecord) -> str:
    """Render one match in the console output shape."""
    return f'"{match.file_path}"\n  Line: {match.line}    Column: {match.column}\n\n'


def format_warning(warning: ScanWarning) -> str:
    """Render one non-fatal warning for stderr."""
    return f"warning: {warning.kind} {warning.path}: {warning.reason}\n"


def run(argv: list[str] | None, out_stream: TextIO, err_stream: TextIO) -> int:
    """Parse arguments, run the search and write results to the given streams."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    reporting = args.show_config or args.audit_tail is not None
    if args.first is None and not reporting:
        parser.error("the search text is required")
    if args.audit_tail is not None and args.audit_tail < 1:
        parser.error("--audit-tail must be a positive integer")

    overrides = CliOverrides(
        recursive=args.recursive,
        raw_pattern=args.raw_pattern,
        match_case=args.match_case,
        match_whole_word=args.match_whole_word,
        file_glob=args.file_glob,
        max_workers=args.workers,
        encoding=args.encoding,
        audit_log=args.audit_log,
    )
    try:
        config = load_effective_config(config_path=args.config, overrides=overrides)
    except (OSError, ValueError) as error:
        err_stream.write(f"quick-grep: {error}\n")
        return EXIT_ERROR

    if reporting:
        return _report(config, args.show_config, args.audit_tail, out_stream, err_stream)

    if args.second is None:
        path, text = os.getcwd(), args.first
    else:
        path, text = args.first, args.second

    warnings: list[ScanWarning] = []
    match_count = 0
    error_code: str | None = None
    try:
        for match in search(path, text, config.search, warnings=warnings):
            out_stream.write(format_match(match))
            match_count += 1
    except PathNotFoundError as error:
        error_code = "PATH_NOT_FOUND"
        err_stream.write(f"{error.reason}\n\n")
    except InvalidPatternError as error:
        error_code = "INVALID_PATTERN"
        err_stream.write(f"quick-grep: {error.reason}\n{error.hint}\n")
    for warning in warnings:
        err_stream.write(format_warning(warning))

    _log_invocation(
        config,
        arguments={"path": path, "query": text, **asdict(config.search)},
        error_code=error_code,
        match_count=match_count,
        warning_count=len(warnings),
    )
    return EXIT_OK if error_code is None else EXIT_ERROR


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for the quick-grep console script."""
    return run(argv, out_stream=sys.stdout, err_stream=sys.stderr)


def _report(
    config: AppConfig,
    show_config: bool,
    audit_tail: int | None,
    out_stream: TextIO,
    err_stream: TextIO,
) -> int:
    """Write the config snapshot and/or recent audit events as JSON lines."""
    if show_config:
        out_stream.write(json.dumps(config.to_public_dict(), sort_keys=True))
        out_stream.write("\n")
    if audit_tail is None:
        return EXIT_OK
    if config.logging.audit_log is None:
        err_stream.write(
            "quick-grep: No audit log is configured.\n"
            "Pass --audit-log or set [logging].audit_log in quick_grep.toml.\n"
        )
        return EXIT_ERROR
    logger = JsonlAuditLogger(path=config.logging.audit_log)
    for event in logger.read(limit=audit_tail, command="search"):
        out_stream.write(json.dumps(event, sort_keys=True))
        out_stream.write("\n")
    return EXIT_OK


def _log_invocation(
    config: AppConfig,
    arguments: dict[str, object],
    error_code: str | None,
    match_count: int,
    warning_count: int,
) -> None:
    if config.logging.audit_log is None:
        return
    event = AuditEvent(
        timestamp=utc_timestamp(),
        command="search",
        ok=error_code is None,
        error_code=error_code,
        match_count=match_count,
        warning_count=warning_count,
        metadata=sanitize_arguments(arguments),
    )
    JsonlAuditLogger(path=config.logging.audit_log).append(event)


if __name__ == "__main__":
    raise SystemExit(main())
