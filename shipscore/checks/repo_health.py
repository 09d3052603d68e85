"""Repository hygiene and layout checks."""

from __future__ import annotations

from typing import List

from ..models import HIGH, LOW, MEDIUM, CheckOutcome, RepoContext
from .base import Check, CheckEnv, presence_check

MANIFESTS = ("package.json", "requirements.txt")
LICENSE_FILES = ("LICENSE", "LICENSE.md", "LICENSE.txt")
CHANGELOG_FILES = ("CHANGELOG.md", "CHANGES.md", "RELEASES.md")


def _src_directory(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    found = env.reader.is_dir(context.abspath("src"))
    return CheckOutcome(
        passed=found,
        message=(
            "src/ directory present at repository root"
            if found
            else "src/ directory not found at repository root"
        ),
    )


CHECKS: List[Check] = [
    Check(
        id="repo-001",
        title="Manifest file present (package.json or requirements.txt)",
        category="repoHealth",
        severity=HIGH,
        checker=presence_check(
            MANIFESTS,
            "Found package.json or requirements.txt",
            "No package.json or requirements.txt found at repository root",
        ),
        effort="low",
        remediation="Declare dependencies in package.json or requirements.txt at the repository root.",
    ),
    Check(
        id="repo-010",
        title="License file present",
        category="repoHealth",
        severity=MEDIUM,
        checker=presence_check(
            LICENSE_FILES,
            "License file detected at repository root",
            "No license file detected at repository root",
        ),
        effort="low",
        remediation="Add a LICENSE file stating the terms the code is distributed under.",
    ),
    Check(
        id="repo-020",
        title="Changelog or release notes present",
        category="repoHealth",
        severity=LOW,
        checker=presence_check(
            CHANGELOG_FILES,
            "Changelog or release notes detected",
            "No changelog or release notes detected at repository root",
        ),
        effort="low",
        remediation="Keep a CHANGELOG.md describing notable changes per release.",
    ),
    Check(
        id="arch-001",
        title="Conventional src/ directory present",
        category="architecture",
        severity=MEDIUM,
        checker=_src_directory,
        remediation="Move application code under a src/ directory.",
    ),
]
