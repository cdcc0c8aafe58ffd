"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import codecs
import tomllib
from dataclasses import dataclass
from pathlib import Path

CONFIG_FILE_NAME = "quick_grep.toml"
DEFAULT_FILE_GLOB = "*"
DEFAULT_ENCODING = "utf-8-sig"
MAX_WORKERS_CAP = 256


@dataclass(slots=True, frozen=True)
class SearchConfig:
    """Immutable per-invocation search settings."""

    recursive: bool = False
    raw_pattern: bool = False
    match_case: bool = False
    match_whole_word: bool = False
    file_glob: str = DEFAULT_FILE_GLOB
    max_workers: int | None = None
    encoding: str = DEFAULT_ENCODING


@dataclass(slots=True, frozen=True)
class LoggingConfig:
    """Audit log settings."""

    audit_log: Path | None = None


@dataclass(slots=True, frozen=True)
class AppConfig:
    """Fully merged configuration."""

    search: SearchConfig
    logging: LoggingConfig

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable config snapshot."""
        return {
            "search": {
                "recursive": self.search.recursive,
                "raw_pattern": self.search.raw_pattern,
                "match_case": self.search.match_case,
                "match_whole_word": self.search.match_whole_word,
                "file_glob": self.search.file_glob,
                "max_workers": self.search.max_workers,
                "encoding": self.search.encoding,
            },
            "logging": {
                "audit_log": str(self.logging.audit_log) if self.logging.audit_log else None,
            },
        }


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional command-line overrides applied at highest precedence."""

    recursive: bool | None = None
    raw_pattern: bool | None = None
    match_case: bool | None = None
    match_whole_word: bool | None = None
    file_glob: str | None = None
    max_workers: int | None = None
    encoding: str | None = None
    audit_log: Path | None = None


def default_config() -> AppConfig:
    """Build the default configuration."""
    return AppConfig(search=SearchConfig(), logging=LoggingConfig())


def load_config_file(config_path: Path | None = None) -> dict[str, object]:
    """Load an explicit config file, or ./quick_grep.toml when present."""
    if config_path is None:
        config_path = Path.cwd() / CONFIG_FILE_NAME
        if not config_path.exists():
            return {}
    with config_path.open("rb") as handle:
        payload = tomllib.load(handle)
    if not isinstance(payload, dict):
        raise ValueError(f"{CONFIG_FILE_NAME} must contain a top-level table.")
    return payload


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{key}' must be a table.")
    return value


def _optional_bool(value: object, name: str, default: bool) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ValueError(f"Config field '{name}' must be a boolean.")
    return value


def _optional_string(value: object, name: str, default: str) -> str:
    if value is None:
        return default
    if not isinstance(value, str) or not value:
        raise ValueError(f"Config field '{name}' must be a non-empty string.")
    return value


def _optional_workers(value: object, name: str, default: int | None) -> int | None:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"Config field '{name}' must be a positive integer.")
    if value > MAX_WORKERS_CAP:
        raise ValueError(f"Config field '{name}' must be <= {MAX_WORKERS_CAP}.")
    return value


def _optional_encoding(value: object, name: str, default: str) -> str:
    encoding = _optional_string(value, name, default)
    try:
        codecs.lookup(encoding)
    except LookupError as error:
        raise ValueError(f"Config field '{name}' names an unknown encoding.") from error
    return encoding


def merge_config(
    base: AppConfig, file_payload: dict[str, object], overrides: CliOverrides
) -> AppConfig:
    """Merge defaults, config file, then command-line overrides."""
    search_payload = _get_table(file_payload, "search")
    logging_payload = _get_table(file_payload, "logging")

    if "raw_pattern" in search_payload:
        raise ValueError(
            "Config field 'search.raw_pattern' is not supported; pass --pattern per invocation."
        )

    search = SearchConfig(
        recursive=_optional_bool(
            search_payload.get("recursive"), "search.recursive", base.search.recursive
        ),
        raw_pattern=base.search.raw_pattern,
        match_case=_optional_bool(
            search_payload.get("match_case"), "search.match_case", base.search.match_case
        ),
        match_whole_word=_optional_bool(
            search_payload.get("match_whole_word"),
            "search.match_whole_word",
            base.search.match_whole_word,
        ),
        file_glob=_optional_string(
            search_payload.get("file_glob"), "search.file_glob", base.search.file_glob
        ),
        max_workers=_optional_workers(
            search_payload.get("max_workers"), "search.max_workers", base.search.max_workers
        ),
        encoding=_optional_encoding(
            search_payload.get("encoding"), "search.encoding", base.search.encoding
        ),
    )

    audit_log = base.logging.audit_log
    if "audit_log" in logging_payload:
        raw_audit_log = logging_payload["audit_log"]
        if not isinstance(raw_audit_log, str) or not raw_audit_log:
            raise ValueError("Config field 'logging.audit_log' must be a non-empty string.")
        audit_log = Path(raw_audit_log)

    merged = AppConfig(search=search, logging=LoggingConfig(audit_log=audit_log))
    return apply_cli_overrides(merged, overrides)


def apply_cli_overrides(config: AppConfig, overrides: CliOverrides) -> AppConfig:
    """Apply command-line overrides at highest precedence."""
    current = config.search
    search = SearchConfig(
        recursive=_optional_bool(overrides.recursive, "overrides.recursive", current.recursive),
        raw_pattern=_optional_bool(
            overrides.raw_pattern, "overrides.raw_pattern", current.raw_pattern
        ),
        match_case=_optional_bool(overrides.match_case, "overrides.match_case", current.match_case),
        match_whole_word=_optional_bool(
            overrides.match_whole_word, "overrides.match_whole_word", current.match_whole_word
        ),
        file_glob=_optional_string(overrides.file_glob, "overrides.file_glob", current.file_glob),
        max_workers=_optional_workers(
            overrides.max_workers, "overrides.max_workers", current.max_workers
        ),
        encoding=_optional_encoding(overrides.encoding, "overrides.encoding", current.encoding),
    )
    audit_log = overrides.audit_log or config.logging.audit_log
    return AppConfig(
        search=search,
        logging=LoggingConfig(audit_log=audit_log.resolve() if audit_log else None),
    )


def load_effective_config(
    config_path: Path | None = None, overrides: CliOverrides | None = None
) -> AppConfig:
    """Load effective config using merge order defaults -> config file -> overrides."""
    base = default_config()
    payload = load_config_file(config_path)
    return merge_config(base, payload, overrides or CliOverrides())
