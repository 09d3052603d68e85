"""Tests for shipscore.walker."""

from __future__ import annotations

from pathlib import Path

import pytest

from shipscore.walker import build_ignore_rule, build_ignore_rules, detect_language, iter_files


def _write(path: Path, content: str = "x\n") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def test_iter_files_prunes_noise_directories(tmp_path: Path) -> None:
    _write(tmp_path / "src" / "app.py")
    _write(tmp_path / ".venv" / "lib.py")
    _write(tmp_path / "web" / "node_modules" / "react" / "index.js")
    _write(tmp_path / "web" / "dist" / "bundle.js")
    _write(tmp_path / ".DS_Store")

    assert sorted(iter_files(tmp_path)) == ["src/app.py"]


def test_iter_files_applies_rules_and_extensions(tmp_path: Path) -> None:
    _write(tmp_path / "src" / "app.py")
    _write(tmp_path / "src" / "generated" / "client.py")
    _write(tmp_path / "fixtures" / "data.json")
    _write(tmp_path / "debug.log")

    rules = build_ignore_rules(["generated/", "/fixtures", "# comment", ""])
    files = sorted(iter_files(tmp_path, rules, [".LOG"]))

    assert files == ["src/app.py"]


def test_ignore_rule_forms() -> None:
    assert build_ignore_rule("   ") is None
    assert build_ignore_rule("# note") is None

    directory = build_ignore_rule("build/")
    assert directory.directory_only is True
    assert directory.matches("pkg/build", is_dir=True)
    assert not directory.matches("pkg/build", is_dir=False)

    anchored = build_ignore_rule("/docs/*.md")
    assert anchored.anchored is True
    assert anchored.matches("docs/intro.md", is_dir=False)
    assert not anchored.matches("site/docs/intro.md", is_dir=False)

    glob = build_ignore_rule("*.min.js")
    assert glob.matches("static/js/app.min.js", is_dir=False)


@pytest.mark.parametrize(
    ("path", "language"),
    [
        ("src/app.tsx", "typescript"),
        ("lib/util.JS", "javascript"),
        ("main.py", "python"),
        ("cmd/server.go", "go"),
        ("README.md", None),
        ("Dockerfile", None),
    ],
)
def test_detect_language(path: str, language: str | None) -> None:
    assert detect_language(path) == language
