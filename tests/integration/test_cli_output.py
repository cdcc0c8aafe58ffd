from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from quick_grep.cli import run


def _run(argv: list[str]) -> tuple[int, str, str]:
    out_stream = io.StringIO()
    err_stream = io.StringIO()
    code = run(argv, out_stream=out_stream, err_stream=err_stream)
    return code, out_stream.getvalue(), err_stream.getvalue()


def test_match_output_shape(tmp_path: Path) -> None:
    path = tmp_path / "File1.txt"
    path.write_text("Listing in <DIR>\n", encoding="utf-8")

    code, out, err = _run([str(path), "in", "-w"])

    assert code == 0
    assert err == ""
    assert out == f'"{path}"\n  Line: 1    Column: 9\n\n'


def test_case_sensitive_literal_search(default_txt: Path) -> None:
    code, out, _ = _run([str(default_txt), "Media", "--match-case"])

    assert code == 0
    assert out.count("Line: 7    Column: 4\n") == 1
    assert out.count("Line: 7    Column: 40\n") == 1
    assert out.count("Column:") == 10


def test_pattern_flag_enables_regular_expressions(default_txt: Path) -> None:
    code, out, _ = _run([str(default_txt), r"(\d+\.){3}(\d+)", "-p"])

    assert code == 0
    assert [line.strip() for line in out.splitlines() if "Line:" in line] == [
        "Line: 14    Column: 40",
        "Line: 15    Column: 40",
        "Line: 16    Column: 40",
    ]


def test_recursive_directory_search_with_file_glob(listing_tree: Path) -> None:
    flat_code, flat_out, _ = _run([str(listing_tree), "<DIR>"])
    deep_code, deep_out, _ = _run([str(listing_tree), "<DIR>", "-r", "-f", "File*.txt"])

    assert flat_code == deep_code == 0
    assert flat_out.count("Column:") == 20
    assert deep_out.count("Column:") == 40


def test_single_positional_searches_current_directory(
    listing_tree: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(listing_tree)

    code, out, _ = _run(["<DIR>", "--workers", "2"])

    assert code == 0
    assert out.count("Column:") == 20


def test_missing_path_reports_error_without_results(tmp_path: Path) -> None:
    code, out, err = _run([str(tmp_path / "missing"), "text"])

    assert code == 1
    assert out == ""
    assert err == "QG cannot find the path specified.\n\n"


def test_invalid_pattern_reports_error(default_txt: Path) -> None:
    code, out, err = _run([str(default_txt), "(unclosed", "--pattern"])

    assert code == 1
    assert out == ""
    assert err.startswith("quick-grep: Pattern does not compile")


def test_invalid_config_file_reports_error(tmp_path: Path, default_txt: Path) -> None:
    config_path = tmp_path / "bad.toml"
    config_path.write_text("[search]\nmax_workers = -1\n", encoding="utf-8")

    code, _, err = _run([str(default_txt), "Media", "--config", str(config_path)])

    assert code == 1
    assert "search.max_workers" in err


def test_audit_log_records_invocation_without_search_text(
    tmp_path: Path, default_txt: Path
) -> None:
    audit_path = tmp_path / "audit" / "quick_grep.jsonl"

    _run([str(default_txt), "Media", "--audit-log", str(audit_path)])
    _run([str(tmp_path / "missing"), "Media", "--audit-log", str(audit_path)])

    events = [json.loads(line) for line in audit_path.read_text(encoding="utf-8").splitlines()]
    assert [(e["ok"], e["error_code"], e["match_count"]) for e in events] == [
        (True, None, 10),
        (False, "PATH_NOT_FOUND", 0),
    ]
    assert events[0]["metadata"]["query_length"] == 5
    assert "Media" not in json.dumps(events[0]["metadata"])


def test_show_config_prints_merged_settings(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "quick_grep.toml").write_text(
        '[search]\nfile_glob = "*.log"\nmax_workers = 3\n', encoding="utf-8"
    )

    code, out, err = _run(["--show-config", "-w"])

    assert code == 0
    assert err == ""
    snapshot = json.loads(out)
    assert snapshot["search"]["file_glob"] == "*.log"
    assert snapshot["search"]["max_workers"] == 3
    assert snapshot["search"]["match_whole_word"] is True
    assert snapshot["logging"] == {"audit_log": None}


def test_audit_tail_prints_most_recent_search_events(tmp_path: Path, default_txt: Path) -> None:
    audit_path = tmp_path / "audit.jsonl"
    _run([str(default_txt), "Media", "--audit-log", str(audit_path)])
    _run([str(default_txt), "meow meow", "--audit-log", str(audit_path)])
    _run([str(tmp_path / "missing"), "Media", "--audit-log", str(audit_path)])

    code, out, err = _run(["--audit-tail", "2", "--audit-log", str(audit_path)])

    assert code == 0
    assert err == ""
    events = [json.loads(line) for line in out.splitlines()]
    assert [(e["ok"], e["match_count"]) for e in events] == [(True, 0), (False, 0)]
    assert events[1]["error_code"] == "PATH_NOT_FOUND"


def test_audit_tail_without_audit_log_reports_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)

    code, out, err = _run(["--audit-tail", "5"])

    assert code == 1
    assert out == ""
    assert err.startswith("quick-grep: No audit log is configured.")


@pytest.mark.parametrize("argv", [[], ["--audit-tail", "0", "--audit-log", "a.jsonl"]])
def test_usage_errors_exit_through_argparse(argv: list[str]) -> None:
    with pytest.raises(SystemExit) as error:
        _run(argv)

    assert error.value.code == 2
