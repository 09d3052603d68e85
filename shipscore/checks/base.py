"""Check definitions and helpers shared by every check family."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Optional, Pattern, Sequence, Tuple

from ..config import Thresholds
from ..models import CheckOutcome, RepoContext
from ..stores import CachedReader

JS_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx")
SOURCE_EXTENSIONS = (
    ".ts",
    ".tsx",
    ".js",
    ".jsx",
    ".py",
    ".java",
    ".cpp",
    ".c",
    ".h",
    ".go",
    ".rs",
    ".php",
    ".rb",
    ".scala",
    ".kt",
)


@dataclass
class CheckEnv:
    """Shared, read-only services handed to every checker."""

    reader: CachedReader = field(default_factory=CachedReader)
    thresholds: Thresholds = field(default_factory=Thresholds)


Checker = Callable[[RepoContext, CheckEnv], CheckOutcome]


@dataclass(frozen=True)
class Check:
    """A named rule evaluated against a repository context."""

    id: str
    title: str
    category: str
    severity: str
    checker: Checker
    automated: bool = True
    effort: str = "medium"
    remediation: Optional[str] = None

    def run(self, context: RepoContext, env: CheckEnv) -> CheckOutcome:
        return self.checker(context, env)


def not_applicable(reason: str) -> CheckOutcome:
    """Inapplicable checks pass so they never penalise the score."""
    return CheckOutcome(passed=True, message=reason)


def files_with_extensions(
    context: RepoContext, extensions: Sequence[str], limit: Optional[int] = None
) -> List[str]:
    """Relative paths from the context walk whose name ends with an extension."""
    suffixes = tuple(extensions)
    matches = [path for path in context.files if path.lower().endswith(suffixes)]
    return matches[:limit] if limit is not None else matches


def iter_contents(
    context: RepoContext, env: CheckEnv, paths: Sequence[str]
) -> Iterator[Tuple[str, str]]:
    """Yield ``(relative_path, text)`` for readable, non-empty files."""
    for rel_path in paths:
        content = env.reader.read_text(context.abspath(rel_path))
        if content:
            yield rel_path, content


def first_existing(context: RepoContext, env: CheckEnv, names: Sequence[str]) -> Optional[str]:
    for name in names:
        if env.reader.is_file(context.abspath(name)):
            return name
    return None


def count_matches(patterns: Sequence[Pattern[str]], content: str) -> int:
    """Count pattern hits; each pattern contributes at most one match."""
    return sum(1 for pattern in patterns if pattern.search(content))


def compile_all(*patterns: str, flags: int = 0) -> Tuple[Pattern[str], ...]:
    return tuple(re.compile(pattern, flags) for pattern in patterns)


def summarize(items: Sequence[str], limit: int) -> str:
    text = ", ".join(items[:limit])
    return f"{text}..." if len(items) > limit else text


def presence_check(
    names: Sequence[str], found_message: str, missing_message: str
) -> Checker:
    """Build a checker that passes when any of ``names`` exists at the root."""

    def _checker(context: RepoContext, env: CheckEnv) -> CheckOutcome:
        found = first_existing(context, env, names) is not None
        return CheckOutcome(
            passed=found,
            message=found_message if found else missing_message,
            auto_fixable=None if found else True,
        )

    return _checker


__all__ = [
    "Check",
    "CheckEnv",
    "Checker",
    "JS_EXTENSIONS",
    "SOURCE_EXTENSIONS",
    "compile_all",
    "count_matches",
    "files_with_extensions",
    "first_existing",
    "iter_contents",
    "not_applicable",
    "presence_check",
    "summarize",
]
