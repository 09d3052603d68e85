"""Continuous integration, container and build tooling checks."""

from __future__ import annotations

from typing import List

from ..models import HIGH, LOW, MEDIUM, CheckOutcome, RepoContext
from .base import Check, CheckEnv, not_applicable, presence_check

ENV_TEMPLATES = (".env.example", ".env.template", ".env.sample")


def _has_ci(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    return CheckOutcome(
        passed=context.has_ci,
        message=(
            "CI configuration detected (.github/, .gitlab-ci.yml, or azure-pipelines.yml)"
            if context.has_ci
            else "No CI configuration detected"
        ),
    )


def _has_dockerfile(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    return CheckOutcome(
        passed=context.has_dockerfile,
        message=(
            "Dockerfile present at repository root"
            if context.has_dockerfile
            else "Dockerfile not found at repository root"
        ),
    )


def _script_check(names: tuple[str, ...], label: str):
    def _checker(context: RepoContext, env: CheckEnv) -> CheckOutcome:
        if context.package_json is None:
            return not_applicable(f"No package.json found; skipping {label} script check")
        scripts = context.scripts()
        found = any(name in scripts for name in names)
        return CheckOutcome(
            passed=found,
            message=(
                f"package.json contains a {label} script"
                if found
                else f"No {label} script found in package.json"
            ),
        )

    return _checker


CHECKS: List[Check] = [
    Check(
        id="devops-001",
        title="Continuous integration configuration present",
        category="devops",
        severity=HIGH,
        checker=_has_ci,
        remediation="Add a CI workflow (for example .github/workflows/ci.yml) that builds and tests every change.",
    ),
    Check(
        id="devops-002",
        title="Dockerfile present",
        category="devops",
        severity=MEDIUM,
        checker=_has_dockerfile,
        remediation="Add a Dockerfile at the repository root so the service builds reproducibly.",
    ),
    Check(
        id="devops-010",
        title="Environment template file present",
        category="devops",
        severity=MEDIUM,
        checker=presence_check(
            ENV_TEMPLATES,
            "Environment template file detected (.env.example / .env.template / .env.sample)",
            "No environment template file detected at repo root",
        ),
        effort="low",
        remediation="Commit a .env.example listing every required variable without real values.",
    ),
    Check(
        id="devops-020",
        title="Build script defined in package.json",
        category="devops",
        severity=MEDIUM,
        checker=_script_check(("build",), "build"),
        effort="low",
        remediation='Add a "build" script to package.json.',
    ),
    Check(
        id="devops-030",
        title="Lint or format script defined in package.json",
        category="devops",
        severity=LOW,
        checker=_script_check(("lint", "format"), "lint or format"),
        effort="low",
        remediation='Add "lint" and "format" scripts to package.json.',
    ),
]
