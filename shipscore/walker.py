"""Directory walking with noise-directory pruning and ignore patterns."""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence

EXCLUDED_DIRS = frozenset(
    {
        "node_modules",
        ".git",
        ".next",
        "dist",
        "build",
        "coverage",
        ".nyc_output",
        ".vscode",
        ".idea",
        ".hg",
        ".svn",
        ".venv",
        "venv",
        "__pycache__",
        ".pytest_cache",
        ".mypy_cache",
        ".tox",
    }
)

EXCLUDED_FILES = frozenset({".DS_Store", "Thumbs.db"})

LANGUAGE_BY_SUFFIX = {
    ".ts": "typescript",
    ".tsx": "typescript",
    ".js": "javascript",
    ".jsx": "javascript",
    ".py": "python",
    ".java": "java",
    ".kt": "kotlin",
    ".go": "go",
    ".rs": "rust",
    ".rb": "ruby",
    ".php": "php",
    ".cs": "csharp",
    ".cpp": "cpp",
    ".c": "c",
    ".swift": "swift",
}


@dataclass(frozen=True)
class IgnoreRule:
    """Gitignore-style pattern applied to relative paths during the walk."""

    pattern: str
    directory_only: bool
    anchored: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        if self.anchored or self.has_slash:
            if fnmatchcase(rel_path, self.pattern):
                return True
            return self.directory_only and rel_path.startswith(f"{self.pattern}/")

        return any(fnmatchcase(part, self.pattern) for part in rel_path.split("/"))


def build_ignore_rule(pattern: str) -> Optional[IgnoreRule]:
    pattern = pattern.strip()
    if not pattern or pattern.startswith("#"):
        return None

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern[:-1]

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]

    return IgnoreRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        has_slash="/" in pattern,
    )


def build_ignore_rules(patterns: Iterable[str]) -> List[IgnoreRule]:
    rules: List[IgnoreRule] = []
    for pattern in patterns:
        rule = build_ignore_rule(pattern)
        if rule is not None:
            rules.append(rule)
    return rules


def _should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    return any(rule.matches(rel_path, is_dir) for rule in rules)


def iter_files(
    root: Path,
    rules: Sequence[IgnoreRule] = (),
    ignore_extensions: Sequence[str] = (),
) -> Iterator[str]:
    """Yield relative POSIX paths of every file under ``root``.

    Unreadable directories are skipped silently so partial checkouts still
    produce a listing.
    """
    suffixes = tuple(ext.lower() for ext in ignore_extensions)
    for dirpath, dirnames, filenames in os.walk(root, onerror=lambda _exc: None):
        current_dir = Path(dirpath)
        rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

        kept = []
        for name in sorted(dirnames):
            if name in EXCLUDED_DIRS:
                continue
            rel_path = f"{rel_dir}/{name}" if rel_dir else name
            if _should_ignore(rel_path, True, rules):
                continue
            kept.append(name)
        dirnames[:] = kept

        for filename in sorted(filenames):
            if filename in EXCLUDED_FILES:
                continue
            if suffixes and filename.lower().endswith(suffixes):
                continue
            rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
            if _should_ignore(rel_path, False, rules):
                continue
            yield rel_path


def detect_language(rel_path: str) -> Optional[str]:
    suffix = os.path.splitext(rel_path)[1].lower()
    return LANGUAGE_BY_SUFFIX.get(suffix)


__all__ = [
    "EXCLUDED_DIRS",
    "IgnoreRule",
    "LANGUAGE_BY_SUFFIX",
    "build_ignore_rule",
    "build_ignore_rules",
    "detect_language",
    "iter_files",
]
