"""Mock, simulation and placeholder detection.

Every check here uses the ``mock-`` id prefix; the scoring engine applies an
extra global penalty for failures in this family and the readiness evaluator
treats a concentration of them as a non-production signal.
"""

from __future__ import annotations

import re
from typing import List

from ..models import HIGH, MEDIUM, CheckOutcome, RepoContext
from .base import (
    SOURCE_EXTENSIONS,
    Check,
    CheckEnv,
    compile_all,
    count_matches,
    files_with_extensions,
    iter_contents,
    summarize,
)

MOCK_PATH_PATTERNS = compile_all(
    r"\.mock\.",
    r"\.stub\.",
    r"\.fake\.",
    r"\.dummy\.",
    r"\.test\.",
    r"\.spec\.",
    r"mock(s)?/",
    r"stub(s)?/",
    r"fake(s)?/",
    r"dummy(s)?/",
    r"test(s)?/",
    r"spec(s)?/",
)
MOCK_FILE_ALLOWANCE = 5

SIMULATION_PATH_PATTERNS = compile_all(
    r"simulation(s)?",
    r"demo(s)?",
    r"example(s)?",
    r"sample(s)?",
    r"prototype(s)?",
    r"proof[-_]?of[-_]?concept",
    r"poc",
    r"sandbox",
    r"experimental",
    flags=re.IGNORECASE,
)
SIMULATION_FILE_ALLOWANCE = 3

PLACEHOLDER_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx", ".py", ".java", ".cpp", ".c", ".go", ".rs")
PLACEHOLDER_PATTERNS = (
    re.compile(r"TODO[^\n]*implement", re.IGNORECASE),
    re.compile(r"TODO[^\n]*add logic", re.IGNORECASE),
    re.compile(r"TODO[^\n]*write code", re.IGNORECASE),
    re.compile(r"FIXME[^\n]*implement", re.IGNORECASE),
    re.compile(r"XXX[^\n]*implement", re.IGNORECASE),
    re.compile(r"HACK[^\n]*implement", re.IGNORECASE),
    re.compile(r"NOTE[^\n]*placeholder", re.IGNORECASE),
    re.compile(r"// PLACEHOLDER", re.IGNORECASE),
    re.compile(r"# PLACEHOLDER", re.IGNORECASE),
    re.compile(r"function.*\{\s*\}"),  # empty function body
    re.compile(r"class.*\{\s*\}"),  # empty class body
    re.compile(r"if\s*\(.*\)\s*\{\s*\}"),
    re.compile(r"for\s*\(.*\)\s*\{\s*\}"),
    re.compile(r"while\s*\(.*\)\s*\{\s*\}"),
    re.compile(r"throw new Error\([\"']?(not implemented|todo|placeholder|coming soon)", re.IGNORECASE),
    re.compile(r"raise NotImplementedError", re.IGNORECASE),
    re.compile(r"pass\s*(?=#.*placeholder)", re.IGNORECASE),
    re.compile(r"return null;?\s*(?=\n.*placeholder)", re.IGNORECASE),
    re.compile(r"return undefined;?\s*(?=\n.*placeholder)", re.IGNORECASE),
)

TEST_DATA_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx", ".py", ".json")
TEST_DATA_PATTERNS = compile_all(
    r"const.*test.*data.*=.*\[",
    r"const.*mock.*data.*=.*\[",
    r"const.*dummy.*data.*=.*\[",
    r"test.*user.*=.*\{",
    r"mock.*user.*=.*\{",
    r"dummy.*user.*=.*\{",
    r"example.*data.*=.*\{",
    r"sample.*data.*=.*\{",
    r"\"test@example\.com\"",
    r"\"mock.*@.*\.com\"",
    r"\"123.*test.*street\"",
    r"\"555-.*test\"",
    r"\b(test|mock|dummy|example|sample)_?(id|name|email|phone|address)\b.*[:=].*[\"'`][^\"'`]+[\"'`]",
    flags=re.IGNORECASE,
)
_TEST_PATH = re.compile(r"test|spec|mock|stub")
MAX_TEST_DATA_MATCHES = 15
MIN_TEST_DATA_PER_FILE = 3

DEV_CODE_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx", ".py", ".java")
DEV_CODE_PATTERNS = (
    re.compile(r"console\.log\(['\"`]test|['\"`]debug|['\"`]todo", re.IGNORECASE),
    re.compile(r"console\.log\(['\"`].*placeholder", re.IGNORECASE),
    re.compile(r"debugger;"),
    re.compile(r"alert\(['\"`]test", re.IGNORECASE),
    re.compile(r"print\(['\"`]test", re.IGNORECASE),
    re.compile(r"System\.out\.println\(['\"`]test", re.IGNORECASE),
    re.compile(r"System\.out\.println\(['\"`]debug", re.IGNORECASE),
    re.compile(r"// DEBUG", re.IGNORECASE),
    re.compile(r"// TEST", re.IGNORECASE),
    re.compile(r"# DEBUG", re.IGNORECASE),
    re.compile(r"# TEST", re.IGNORECASE),
    re.compile(r"if\s*\(\s*false\s*\)\s*\{[\s\S]*?console\.log", re.IGNORECASE),
    re.compile(r"if\s*\(\s*true\s*\)\s*\{[\s\S]*?console\.log", re.IGNORECASE),
    re.compile(r"//.*remove.*before.*production", re.IGNORECASE),
    re.compile(r"//.*delete.*before.*deploy", re.IGNORECASE),
)


def _path_concentration(
    context: RepoContext,
    patterns,
    allowance: int,
    max_ratio: float,
    label: str,
) -> CheckOutcome:
    matched = [path for path in context.files if any(p.search(path) for p in patterns)]
    code_files = len(files_with_extensions(context, SOURCE_EXTENSIONS))
    ratio = len(matched) / code_files if code_files else 0.0
    passed = len(matched) <= allowance or ratio <= max_ratio
    share = f"{ratio * 100:.1f}% of code files"
    return CheckOutcome(
        passed=passed,
        message=(
            f"Found {len(matched)} {label} files ({share})"
            if passed
            else f"High concentration of {label} files: {len(matched)} files ({share}). "
            "May indicate non-production-ready code."
        ),
    )


def _mock_files(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    return _path_concentration(
        context,
        MOCK_PATH_PATTERNS,
        MOCK_FILE_ALLOWANCE,
        env.thresholds.max_mock_file_ratio,
        "mock/stub",
    )


def _simulation_files(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    return _path_concentration(
        context,
        SIMULATION_PATH_PATTERNS,
        SIMULATION_FILE_ALLOWANCE,
        env.thresholds.max_simulation_file_ratio,
        "simulation/demo",
    )


def _placeholders(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    paths = files_with_extensions(context, PLACEHOLDER_EXTENSIONS)
    total = 0
    offenders: List[str] = []
    for rel_path, content in iter_contents(context, env, paths):
        hits = count_matches(PLACEHOLDER_PATTERNS, content)
        if hits:
            total += hits
            offenders.append(f"{rel_path} ({hits})")

    passed = total <= env.thresholds.max_placeholder_count
    return CheckOutcome(
        passed=passed,
        message=(
            f"Found {total} placeholder patterns across {len(offenders)} files"
            if passed
            else f"High number of placeholder patterns: {total} found. Files: {summarize(offenders, 5)}"
        ),
    )


def _test_data(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    paths = [
        path
        for path in files_with_extensions(context, TEST_DATA_EXTENSIONS)
        if not _TEST_PATH.search(path)
    ]
    total = 0
    offenders: List[str] = []
    for rel_path, content in iter_contents(context, env, paths):
        hits = count_matches(TEST_DATA_PATTERNS, content)
        if hits >= MIN_TEST_DATA_PER_FILE:
            total += hits
            offenders.append(f"{rel_path} ({hits})")

    passed = total <= MAX_TEST_DATA_MATCHES
    return CheckOutcome(
        passed=passed,
        message=(
            f"Found {total} hard-coded test data patterns"
            if passed
            else f"Extensive hard-coded test data found: {total} patterns. Files: {summarize(offenders, 3)}"
        ),
    )


def _dev_code(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    paths = files_with_extensions(context, DEV_CODE_EXTENSIONS)
    total = 0
    offenders: List[str] = []
    for rel_path, content in iter_contents(context, env, paths):
        hits = count_matches(DEV_CODE_PATTERNS, content)
        if hits:
            total += hits
            offenders.append(f"{rel_path} ({hits})")

    passed = total <= env.thresholds.max_dev_code_patterns
    return CheckOutcome(
        passed=passed,
        message=(
            f"Found {total} development/debug code patterns"
            if passed
            else f"High number of development/debug patterns: {total} found. Files: {summarize(offenders, 3)}"
        ),
    )


CHECKS: List[Check] = [
    Check(
        id="mock-001",
        title="Mock/stub file patterns are limited",
        category="codeQuality",
        severity=HIGH,
        checker=_mock_files,
        effort="high",
        remediation="Replace mock and stub modules in production paths with real implementations.",
    ),
    Check(
        id="mock-002",
        title="Simulation/demo file patterns are limited",
        category="codeQuality",
        severity=HIGH,
        checker=_simulation_files,
        effort="high",
        remediation="Move demo, sample and prototype code out of the shipped tree.",
    ),
    Check(
        id="mock-003",
        title="Placeholder code patterns limited",
        category="codeQuality",
        severity=MEDIUM,
        checker=_placeholders,
        remediation="Implement or remove empty bodies and not-implemented stubs.",
    ),
    Check(
        id="mock-004",
        title="Hard-coded test/simulation data limited",
        category="codeQuality",
        severity=MEDIUM,
        checker=_test_data,
        remediation="Load fixtures from test directories or real data sources instead of inlining them.",
    ),
    Check(
        id="mock-005",
        title="Development/debug code patterns limited",
        category="codeQuality",
        severity=MEDIUM,
        checker=_dev_code,
        effort="low",
        remediation="Remove debugger statements and debug logging before release.",
    ),
]
