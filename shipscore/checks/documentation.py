"""Documentation checks."""

from __future__ import annotations

from typing import List

from ..models import BLOCKER, HIGH, CheckOutcome, RepoContext
from .base import Check, CheckEnv

MIN_README_WORDS = 100


def _readme_present(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    found = env.reader.is_file(context.abspath("README.md"))
    return CheckOutcome(
        passed=found,
        message="README.md found" if found else "README.md is missing at repository root",
        auto_fixable=None if found else True,
    )


def _readme_length(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    readme = env.reader.read_text(context.abspath("README.md"))
    if not readme:
        return CheckOutcome(passed=False, message="README.md not found")
    words = len(readme.split())
    return CheckOutcome(
        passed=words >= MIN_README_WORDS,
        message=f"README contains {words} words",
    )


CHECKS: List[Check] = [
    Check(
        id="doc-001",
        title="README.md present",
        category="documentation",
        severity=BLOCKER,
        checker=_readme_present,
        effort="low",
        remediation="Add a README.md at the repository root describing purpose, setup and usage.",
    ),
    Check(
        id="doc-002",
        title="README has at least 100 words",
        category="documentation",
        severity=HIGH,
        checker=_readme_length,
        effort="low",
        remediation="Expand the README with installation, configuration and usage sections.",
    ),
]
