"""Test presence and tooling checks."""

from __future__ import annotations

import re
from typing import List

from ..models import BLOCKER, MEDIUM, CheckOutcome, RepoContext
from .base import Check, CheckEnv, files_with_extensions, not_applicable

_JS_TEST_FILE = re.compile(r"\.test\.(t|j)sx?$")
_PY_TEST_FILE = re.compile(r"(^|/)(test_[^/]*|[^/]*_test)\.py$")

JS_TEST_FRAMEWORKS = (
    "jest",
    "vitest",
    "@playwright/test",
    "cypress",
    "@testing-library/react",
    "@testing-library/vue",
    "@testing-library/angular",
)


def _is_js_test(path: str) -> bool:
    lower = path.lower()
    return "__tests__" in lower or _JS_TEST_FILE.search(lower) is not None


def _is_python_test(path: str) -> bool:
    lower = path.lower()
    return "tests/" in lower or _PY_TEST_FILE.search(lower) is not None


def _test_files(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    js_found = any(_is_js_test(path) for path in files_with_extensions(context, (".ts", ".tsx", ".js", ".jsx")))
    py_found = any(_PY_TEST_FILE.search(path.lower()) for path in files_with_extensions(context, (".py",)))
    found = js_found or py_found
    return CheckOutcome(
        passed=found,
        message=(
            "Test files detected (e.g. *.test.ts, __tests__, test_*.py)"
            if found
            else "No test files detected"
        ),
    )


def _test_script(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    if context.package_json is None:
        return not_applicable("No package.json found; skipping test script check")
    found = "test" in context.scripts()
    return CheckOutcome(
        passed=found,
        message="package.json contains a test script" if found else "No test script found in package.json",
    )


def _python_tests(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    py_files = files_with_extensions(context, (".py",))
    if not py_files:
        return not_applicable("No Python source files detected; skipping Python tests check")
    found = any(_is_python_test(path) for path in py_files)
    return CheckOutcome(
        passed=found,
        message=(
            "Python test files detected (tests/ or test_*.py/_test.py)"
            if found
            else "No Python test files detected alongside Python source"
        ),
    )


def _test_framework(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    if context.package_json is None:
        return not_applicable(
            "No package.json found; skipping JavaScript/TypeScript testing tooling check"
        )
    deps = context.dependencies()
    found = any(name in deps for name in JS_TEST_FRAMEWORKS)
    return CheckOutcome(
        passed=found,
        message=(
            "Testing framework detected (Jest, Vitest, Playwright, Cypress, or Testing Library)"
            if found
            else "No common JavaScript/TypeScript testing framework detected in dependencies"
        ),
    )


CHECKS: List[Check] = [
    Check(
        id="test-001",
        title="Test files present",
        category="testing",
        severity=BLOCKER,
        checker=_test_files,
        effort="high",
        remediation="Add automated tests (for example *.test.ts or tests/test_*.py) covering core behaviour.",
    ),
    Check(
        id="test-010",
        title="Test script defined in package.json",
        category="testing",
        severity=MEDIUM,
        checker=_test_script,
        effort="low",
        remediation='Add a "test" script to package.json that runs the suite.',
    ),
    Check(
        id="test-020",
        title="Python tests present (tests/ or test_*.py)",
        category="testing",
        severity=MEDIUM,
        checker=_python_tests,
        remediation="Add a tests/ package with pytest tests for the Python modules.",
    ),
    Check(
        id="test-030",
        title="Testing framework or runner detected",
        category="testing",
        severity=MEDIUM,
        checker=_test_framework,
        effort="low",
        remediation="Install a test runner such as Vitest, Jest or Playwright as a dev dependency.",
    ),
]
