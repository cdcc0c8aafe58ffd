from __future__ import annotations

from pathlib import Path

import pytest

from quick_grep.config import CliOverrides, load_effective_config


def _write_config(tmp_path: Path, lines: list[str]) -> Path:
    config_path = tmp_path / "quick_grep.toml"
    config_path.write_text("\n".join(lines), encoding="utf-8")
    return config_path


def test_invalid_boolean_type_raises_value_error(tmp_path: Path) -> None:
    config_path = _write_config(tmp_path, ["[search]", 'recursive = "yes"'])

    with pytest.raises(ValueError, match="search.recursive"):
        load_effective_config(config_path=config_path)


def test_invalid_section_type_raises_value_error(tmp_path: Path) -> None:
    config_path = _write_config(tmp_path, ['search = "not-a-table"'])

    with pytest.raises(ValueError, match="section 'search'"):
        load_effective_config(config_path=config_path)


def test_worker_count_above_cap_is_rejected(tmp_path: Path) -> None:
    config_path = _write_config(tmp_path, ["[search]", "max_workers = 1000"])

    with pytest.raises(ValueError, match="search.max_workers"):
        load_effective_config(config_path=config_path)


def test_cli_worker_count_must_be_positive(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    with pytest.raises(ValueError, match="overrides.max_workers"):
        load_effective_config(
            config_path=None,
            overrides=CliOverrides(max_workers=0),
        )


def test_unknown_encoding_is_rejected(tmp_path: Path) -> None:
    config_path = _write_config(tmp_path, ["[search]", 'encoding = "no-such-codec"'])

    with pytest.raises(ValueError, match="search.encoding"):
        load_effective_config(config_path=config_path)


def test_raw_pattern_cannot_be_set_from_config_file(tmp_path: Path) -> None:
    config_path = _write_config(tmp_path, ["[search]", "raw_pattern = true"])

    with pytest.raises(ValueError, match="search.raw_pattern"):
        load_effective_config(config_path=config_path)


def test_empty_audit_log_path_is_rejected(tmp_path: Path) -> None:
    config_path = _write_config(tmp_path, ["[logging]", 'audit_log = ""'])

    with pytest.raises(ValueError, match="logging.audit_log"):
        load_effective_config(config_path=config_path)
