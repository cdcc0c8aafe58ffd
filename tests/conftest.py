from __future__ import annotations

from pathlib import Path

import pytest

MEDIA_LINES = (7, 20, 25, 30, 35)
ADDRESS_LINES = (14, 15, 16)
DIR_COUNTS = {
    "File1.txt": 5,
    "File2.txt": 7,
    "File3.txt": 8,
    "Nested/File4.txt": 10,
    "Nested/File5.txt": 4,
    "Other/File6.txt": 6,
}


def build_default_text() -> str:
    lines: list[str] = []
    for number in range(1, 41):
        if number in MEDIA_LINES:
            head = "   Media"
            lines.append(head + " " * (39 - len(head)) + "Media player entry")
            continue
        if number in ADDRESS_LINES:
            lines.append(f"{'Host address:':<39}192.168.10.{number}")
            continue
        lines.append(f"Plain filler line number {number} of the sample.")
    return "\n".join(lines) + "\n"


@pytest.fixture
def default_txt(tmp_path: Path) -> Path:
    path = tmp_path / "Default.txt"
    path.write_text(build_default_text(), encoding="utf-8")
    return path


@pytest.fixture
def listing_tree(tmp_path: Path) -> Path:
    root = tmp_path / "Directory"
    (root / "Nested").mkdir(parents=True)
    (root / "Other").mkdir()
    for relative, count in DIR_COUNTS.items():
        if relative == "File1.txt":
            text = "Listing in" + " <DIR>" * count + "\n"
        else:
            text = "".join(f"Volume entry <DIR> item {index}\n" for index in range(count))
        (root / relative).write_text(text, encoding="utf-8")
    return root
