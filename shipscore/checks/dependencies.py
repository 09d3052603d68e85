"""Dependency hygiene checks."""

from __future__ import annotations

import re
from typing import Any, Dict, List

from ..models import HIGH, MEDIUM, CheckOutcome, RepoContext
from .base import Check, CheckEnv, first_existing, not_applicable

LOCKFILES = (
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "poetry.lock",
    "Pipfile.lock",
    "uv.lock",
)

_GIT_URL = re.compile(r"^(git\+|https?://|github:)")
_ZERO_MAJOR = re.compile(r"^\^?0\.")


def _lockfile(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    found = first_existing(context, env, LOCKFILES)
    return CheckOutcome(
        passed=found is not None,
        message=f"Dependency lockfile found ({found})" if found else "No dependency lockfile found",
    )


def _sections(package: Dict[str, Any]) -> List[Dict[str, Any]]:
    sections = []
    for key in ("dependencies", "devDependencies"):
        deps = package.get(key)
        if isinstance(deps, dict):
            sections.append(deps)
    return sections


def _no_git_urls(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    if context.package_json is None:
        return not_applicable("No package.json found; skipping git URL dependency check")

    offenders = [
        name
        for deps in _sections(context.package_json)
        for name, version in deps.items()
        if _GIT_URL.match(str(version if version is not None else ""))
    ]
    return CheckOutcome(
        passed=not offenders,
        message=(
            "No git URL dependencies detected in package.json"
            if not offenders
            else f"Git URL dependencies detected for: {', '.join(offenders)}"
        ),
    )


def _stable_versions(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    if context.package_json is None:
        return not_applicable("No package.json found; skipping dependency version quality check")

    offenders: List[str] = []
    for deps in _sections(context.package_json):
        for name, raw in deps.items():
            version = str(raw if raw is not None else "").strip()
            if not version:
                continue
            if version == "*" or version.lower() == "latest" or _ZERO_MAJOR.match(version):
                offenders.append(name)

    return CheckOutcome(
        passed=not offenders,
        message=(
            "No obviously unstable dependency version ranges detected"
            if not offenders
            else f"Potentially unstable versions detected for: {', '.join(offenders)}"
        ),
    )


CHECKS: List[Check] = [
    Check(
        id="deps-001",
        title="Lockfile present (package-lock.json / yarn.lock / pnpm-lock.yaml)",
        category="dependencies",
        severity=HIGH,
        checker=_lockfile,
        effort="low",
        remediation="Commit the lockfile produced by your package manager so installs are reproducible.",
    ),
    Check(
        id="deps-010",
        title="No git URL dependencies in package.json",
        category="dependencies",
        severity=MEDIUM,
        checker=_no_git_urls,
        remediation="Replace git URL dependencies with published, versioned packages.",
    ),
    Check(
        id="deps-020",
        title='No wildcard or "latest" dependency versions in package.json',
        category="dependencies",
        severity=MEDIUM,
        checker=_stable_versions,
        effort="low",
        remediation="Pin dependencies to explicit semver ranges and avoid 0.x, '*' and 'latest'.",
    ),
]
