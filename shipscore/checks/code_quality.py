"""Code quality checks: markers, tooling configuration, complexity and maintainability."""

from __future__ import annotations

import re
from collections import Counter
from typing import List, Optional

from ..models import LOW, MEDIUM, CheckOutcome, RepoContext
from .base import (
    Check,
    CheckEnv,
    compile_all,
    files_with_extensions,
    first_existing,
    iter_contents,
    not_applicable,
    summarize,
)

TODO_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx", ".py", ".ipynb", ".md", ".yml", ".yaml")
_TODO = re.compile(r"TODO|FIXME", re.IGNORECASE)

ESLINT_CONFIGS = (
    ".eslintrc",
    ".eslintrc.json",
    ".eslintrc.js",
    ".eslintrc.cjs",
    ".eslintrc.yml",
    ".eslintrc.yaml",
    "eslint.config.js",
    "eslint.config.mjs",
    "eslint.config.cjs",
    "eslint.config.ts",
    "biome.json",
    "biome.jsonc",
)
PYTHON_LINT_CONFIGS = ("ruff.toml", ".ruff.toml", ".flake8", ".pylintrc", "pylintrc")
PYTHON_LINT_SECTIONS = ("[tool.ruff", "[tool.pylint", "[tool.flake8", "[flake8]", "[pylint")

PRETTIER_CONFIGS = (
    ".prettierrc",
    ".prettierrc.json",
    ".prettierrc.js",
    ".prettierrc.cjs",
    ".prettierrc.yml",
    ".prettierrc.yaml",
    "prettier.config.js",
    "prettier.config.cjs",
    "prettier.config.mjs",
)
PYTHON_FORMAT_SECTIONS = ("[tool.black", "[tool.ruff.format", "[tool.ruff", "[tool.isort")

COMPLEXITY_EXTENSIONS = (".js", ".jsx", ".ts", ".tsx", ".py")
COMPLEXITY_FILE_LIMIT = 20
MAX_COMPLEX_FUNCTION_RATIO = 0.3
_FUNCTION = re.compile(r"function\s+\w+|const\s+\w+\s*=\s*\(|def\s+\w+")
_COMPLEXITY_INDICATORS = compile_all(
    r"if\s*\(.*\)",
    r"else\s*if",
    r"for\s*\(",
    r"while\s*\(",
    r"switch\s*\(",
    r"try\s*\{",
    r"catch\s*\(",
    r"&&|\|\|",
)

SIZE_EXTENSIONS = (".js", ".jsx", ".ts", ".tsx", ".py", ".java", ".go", ".rs")
MAX_LARGE_FILES = 3

DUPLICATION_EXTENSIONS = COMPLEXITY_EXTENSIONS
DUPLICATION_FILE_LIMIT = 15
MIN_BLOCK_LENGTH = 50
_BLOCK_SPLIT = re.compile(r"\n\s*\n|\n\s*(?:function|class|def)\s+")

ERROR_HANDLING_EXTENSIONS = (".js", ".jsx", ".ts", ".tsx", ".py", ".java", ".go")
ERROR_HANDLING_FILE_LIMIT = 20
_ERROR_BRANCH = re.compile(r"\bif\s*\(?\s*!?\s*err(or)?\b")


def _todo_markers(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    paths = files_with_extensions(context, TODO_EXTENSIONS)
    count = sum(len(_TODO.findall(content)) for _, content in iter_contents(context, env, paths))
    return CheckOutcome(
        passed=count <= env.thresholds.max_todo_count,
        message=f"Found {count} TODO/FIXME markers",
    )


def _tsconfig(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    if not files_with_extensions(context, (".ts", ".tsx"), limit=1):
        return not_applicable("No TypeScript source files detected; skipping tsconfig check")
    found = env.reader.is_file(context.abspath("tsconfig.json"))
    return CheckOutcome(
        passed=found,
        message=(
            "tsconfig.json present at repository root"
            if found
            else "TypeScript files detected but tsconfig.json is missing at repository root"
        ),
        auto_fixable=None if found else True,
    )


def _python_config_sections(context: RepoContext, env: CheckEnv, sections) -> Optional[str]:
    for name in ("pyproject.toml", "setup.cfg", "tox.ini"):
        text = env.reader.read_text(context.abspath(name))
        if text and any(section in text for section in sections):
            return name
    return None


def _is_script_project(context: RepoContext) -> bool:
    return context.has_language("typescript", "javascript", "python")


def _lint_config(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    if not _is_script_project(context):
        return not_applicable("No JavaScript, TypeScript or Python sources; skipping lint configuration check")

    found = first_existing(context, env, ESLINT_CONFIGS)
    if found is None and context.has_language("python"):
        found = first_existing(context, env, PYTHON_LINT_CONFIGS) or _python_config_sections(
            context, env, PYTHON_LINT_SECTIONS
        )
    return CheckOutcome(
        passed=found is not None,
        message=(
            f"Lint configuration detected ({found})"
            if found
            else "No lint configuration file detected at repository root"
        ),
    )


def _formatter_config(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    if not _is_script_project(context):
        return not_applicable("No JavaScript, TypeScript or Python sources; skipping formatter configuration check")

    found = first_existing(context, env, PRETTIER_CONFIGS)
    if found is None and context.has_language("python"):
        found = _python_config_sections(context, env, PYTHON_FORMAT_SECTIONS)
    return CheckOutcome(
        passed=found is not None,
        message=(
            "Prettier or formatter configuration detected"
            if found
            else "No Prettier/formatter configuration detected at repository root"
        ),
    )


def _function_complexity(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    paths = files_with_extensions(context, COMPLEXITY_EXTENSIONS, COMPLEXITY_FILE_LIMIT)
    limit = env.thresholds.max_function_complexity
    total_functions = 0
    complex_functions = 0
    complex_files: List[str] = []

    for rel_path, content in iter_contents(context, env, paths):
        functions = len(_FUNCTION.findall(content))
        total_functions += functions
        indicators = sum(len(pattern.findall(content)) for pattern in _COMPLEXITY_INDICATORS)
        if functions and indicators / functions > limit:
            complex_functions += functions
            complex_files.append(rel_path)

    ratio = complex_functions / total_functions if total_functions else 0.0
    passed = ratio <= MAX_COMPLEX_FUNCTION_RATIO
    return CheckOutcome(
        passed=passed,
        message=(
            f"Function complexity acceptable: {complex_functions}/{total_functions} functions flagged as complex"
            if passed
            else f"High function complexity detected: {complex_functions}/{total_functions} functions flagged. "
            f"Files: {summarize(complex_files, 3)}"
        ),
    )


def _file_size(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    limit_bytes = env.thresholds.max_file_size * 1000
    label = f"{env.thresholds.max_file_size}KB"
    large: List[str] = []
    for rel_path in files_with_extensions(context, SIZE_EXTENSIONS):
        size = env.reader.size(context.abspath(rel_path))
        if size is not None and size > limit_bytes:
            large.append(f"{rel_path} ({round(size / 1024)}KB)")

    passed = len(large) <= MAX_LARGE_FILES
    return CheckOutcome(
        passed=passed,
        message=(
            f"File sizes acceptable: {len(large)} files > {label}"
            if passed
            else f"Large files detected: {len(large)} files > {label}. Files: {summarize(large, 5)}"
        ),
    )


def _duplication(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    paths = files_with_extensions(context, DUPLICATION_EXTENSIONS, DUPLICATION_FILE_LIMIT)
    blocks: Counter[str] = Counter()
    for _, content in iter_contents(context, env, paths):
        for block in _BLOCK_SPLIT.split(content):
            trimmed = block.strip()
            if len(trimmed) > MIN_BLOCK_LENGTH:
                blocks[trimmed] += 1

    total = sum(blocks.values())
    duplicated = sum(1 for count in blocks.values() if count > 1)
    ratio = duplicated / total if total else 0.0
    passed = ratio <= env.thresholds.max_code_duplication_ratio
    return CheckOutcome(
        passed=passed,
        message=(
            f"Code duplication acceptable: {duplicated}/{total} blocks duplicated"
            if passed
            else f"High code duplication detected: {duplicated}/{total} blocks duplicated ({ratio * 100:.1f}%)"
        ),
    )


def _has_error_handling(content: str) -> bool:
    return (
        ("try" in content and "catch" in content)
        or ("try:" in content and "except" in content)
        or ".catch(" in content
        or ("error" in content and "handle" in content)
        or _ERROR_BRANCH.search(content) is not None
    )


def _error_handling(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    paths = files_with_extensions(context, ERROR_HANDLING_EXTENSIONS, ERROR_HANDLING_FILE_LIMIT)
    handled = 0
    total = 0
    unhandled: List[str] = []
    for rel_path, content in iter_contents(context, env, paths):
        total += 1
        if _has_error_handling(content):
            handled += 1
        else:
            unhandled.append(rel_path)

    if not total:
        return not_applicable("No source files detected; skipping error handling check")

    passed = handled / total >= env.thresholds.min_error_handling_ratio
    return CheckOutcome(
        passed=passed,
        message=(
            f"Error handling adequate: {handled}/{total} files have error handling"
            if passed
            else f"Insufficient error handling: only {handled}/{total} files have error handling. "
            f"Files without: {summarize(unhandled, 5)}"
        ),
    )


CHECKS: List[Check] = [
    Check(
        id="code-001",
        title="TODO / FIXME markers are limited",
        category="codeQuality",
        severity=LOW,
        checker=_todo_markers,
        remediation="Resolve outstanding TODO/FIXME markers or move them into the issue tracker.",
    ),
    Check(
        id="code-010",
        title="TypeScript configuration present for TypeScript projects",
        category="codeQuality",
        severity=MEDIUM,
        checker=_tsconfig,
        effort="low",
        remediation="Add a tsconfig.json with strict mode enabled.",
    ),
    Check(
        id="code-020",
        title="Lint configuration present for JavaScript/TypeScript projects",
        category="codeQuality",
        severity=MEDIUM,
        checker=_lint_config,
        effort="low",
        remediation="Add an ESLint or Biome configuration (or ruff/flake8 for Python) and run it in CI.",
    ),
    Check(
        id="code-030",
        title="Formatter configuration present for JavaScript/TypeScript projects",
        category="codeQuality",
        severity=LOW,
        checker=_formatter_config,
        effort="low",
        remediation="Add a Prettier configuration (or black/ruff format for Python).",
    ),
    Check(
        id="complex-001",
        title="Function complexity monitoring",
        category="codeQuality",
        severity=MEDIUM,
        checker=_function_complexity,
        effort="high",
        remediation="Split branch-heavy functions into smaller, single-purpose helpers.",
    ),
    Check(
        id="complex-002",
        title="File size and length monitoring",
        category="codeQuality",
        severity=MEDIUM,
        checker=_file_size,
        remediation="Break very large source files into cohesive modules.",
    ),
    Check(
        id="maintain-001",
        title="Code duplication detection",
        category="codeQuality",
        severity=MEDIUM,
        checker=_duplication,
        remediation="Extract repeated blocks into shared functions or modules.",
    ),
    Check(
        id="maintain-002",
        title="Error handling patterns",
        category="codeQuality",
        severity=MEDIUM,
        checker=_error_handling,
        remediation="Handle failures explicitly (try/catch, error returns) around I/O and external calls.",
    ),
]
