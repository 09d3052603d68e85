"""Framework-specific checks.

Each check only applies when the detector found its framework; otherwise it
reports "not applicable" and passes.
"""

from __future__ import annotations

import re
from typing import List

from ..models import HIGH, LOW, MEDIUM, CheckOutcome, RepoContext
from .base import (
    JS_EXTENSIONS,
    Check,
    CheckEnv,
    files_with_extensions,
    first_existing,
    iter_contents,
    not_applicable,
    summarize,
)

NEXT_CONFIGS = ("next.config.js", "next.config.ts", "next.config.mjs", "next.config.cjs")

_DANGEROUS_HTML = re.compile(r"dangerouslySetInnerHTML")
_DJANGO_DEBUG = re.compile(r"^\s*DEBUG\s*=\s*True\b", re.MULTILINE)
_FLASK_DEBUG = re.compile(r"\.run\([^)]*debug\s*=\s*True")


def _offenders(context: RepoContext, env: CheckEnv, extensions, pattern) -> List[str]:
    paths = files_with_extensions(context, extensions)
    return [rel for rel, content in iter_contents(context, env, paths) if pattern.search(content)]


def _next_config(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    if not context.has_framework("nextjs"):
        return not_applicable("Next.js not detected; skipping Next.js configuration check")
    found = first_existing(context, env, NEXT_CONFIGS)
    return CheckOutcome(
        passed=found is not None,
        message=f"Next.js configuration found ({found})" if found else "Next.js detected but no next.config file found",
        auto_fixable=None if found else True,
    )


def _react_inner_html(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    if not context.has_framework("react", "nextjs", "remix"):
        return not_applicable("React not detected; skipping dangerouslySetInnerHTML check")
    offenders = _offenders(context, env, JS_EXTENSIONS, _DANGEROUS_HTML)
    return CheckOutcome(
        passed=not offenders,
        message=(
            "No dangerouslySetInnerHTML usage detected"
            if not offenders
            else f"dangerouslySetInnerHTML used in: {summarize(offenders, 5)}"
        ),
    )


def _express_helmet(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    if not context.has_framework("express"):
        return not_applicable("Express not detected; skipping helmet check")
    found = "helmet" in context.dependencies()
    return CheckOutcome(
        passed=found,
        message="helmet middleware dependency detected" if found else "Express detected without helmet security headers",
    )


def _django_debug(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    if not context.has_framework("django"):
        return not_applicable("Django not detected; skipping DEBUG setting check")
    offenders = _offenders(context, env, (".py",), _DJANGO_DEBUG)
    return CheckOutcome(
        passed=not offenders,
        message=(
            "DEBUG is not hard-coded to True"
            if not offenders
            else f"DEBUG = True hard-coded in: {summarize(offenders, 5)}"
        ),
    )


def _flask_debug(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    if not context.has_framework("flask"):
        return not_applicable("Flask not detected; skipping debug server check")
    offenders = _offenders(context, env, (".py",), _FLASK_DEBUG)
    return CheckOutcome(
        passed=not offenders,
        message=(
            "No Flask app started with debug=True"
            if not offenders
            else f"Flask app started with debug=True in: {summarize(offenders, 5)}"
        ),
    )


CHECKS: List[Check] = [
    Check(
        id="fw-001",
        title="Next.js configuration present",
        category="frameworkSpecific",
        severity=LOW,
        checker=_next_config,
        effort="low",
        remediation="Add a next.config.js to pin image, header and build settings explicitly.",
    ),
    Check(
        id="fw-002",
        title="No dangerouslySetInnerHTML in React components",
        category="frameworkSpecific",
        severity=HIGH,
        checker=_react_inner_html,
        remediation="Render markup through components or sanitize it with DOMPurify first.",
    ),
    Check(
        id="fw-003",
        title="Express applications use helmet",
        category="frameworkSpecific",
        severity=MEDIUM,
        checker=_express_helmet,
        effort="low",
        remediation="Install helmet and register it as the first middleware.",
    ),
    Check(
        id="fw-004",
        title="Django DEBUG not hard-coded to True",
        category="frameworkSpecific",
        severity=HIGH,
        checker=_django_debug,
        effort="low",
        remediation="Read DEBUG from the environment and default it to False.",
    ),
    Check(
        id="fw-005",
        title="Flask not run with debug=True",
        category="frameworkSpecific",
        severity=HIGH,
        checker=_flask_debug,
        effort="low",
        remediation="Drive Flask debug mode from configuration instead of app.run(debug=True).",
    ),
]
