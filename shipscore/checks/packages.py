"""Checks contributed by specific detected packages.

``PACKAGE_CHECKS`` maps a detected package name to the extra checks that only
make sense when that package is a dependency.
"""

from __future__ import annotations

import re
from typing import Dict, List

from ..models import BLOCKER, LOW, MEDIUM, CheckOutcome, RepoContext
from .base import (
    JS_EXTENSIONS,
    Check,
    CheckEnv,
    files_with_extensions,
    iter_contents,
    not_applicable,
    summarize,
)

_OPENAI_KEY = re.compile(r"sk-[A-Za-z0-9]{20,}")
_ANTHROPIC_KEY = re.compile(r"sk-ant-[A-Za-z0-9_-]{20,}")
_WAIT_FOR_TIMEOUT = re.compile(r"\.waitForTimeout\s*\(")
_CYPRESS_WAIT = re.compile(r"\bcy\.wait\s*\(\s*\d+\s*\)")

LLM_CLIENT_MARKERS = ("openai", "anthropic", "langchain")
LLM_RESILIENCE_MARKERS = ("timeout", "maxRetries", "max_retries")
KEY_EXTENSIONS = JS_EXTENSIONS + (".py",)


def _files_matching(context: RepoContext, env: CheckEnv, extensions, pattern) -> List[str]:
    paths = files_with_extensions(context, extensions)
    return [rel for rel, content in iter_contents(context, env, paths) if pattern.search(content)]


def _openai_keys(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    found = _files_matching(context, env, KEY_EXTENSIONS, _OPENAI_KEY)
    return CheckOutcome(
        passed=not found,
        message=(
            "No OpenAI-style API keys detected in source"
            if not found
            else f"Possible OpenAI-style keys found in: {', '.join(found)}"
        ),
    )


def _anthropic_keys(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    found = _files_matching(context, env, KEY_EXTENSIONS, _ANTHROPIC_KEY)
    return CheckOutcome(
        passed=not found,
        message=(
            "No Anthropic API keys detected in source"
            if not found
            else f"Possible Anthropic API keys found in: {', '.join(found)}"
        ),
    )


def _llm_resilience(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    clients = [
        (rel, content)
        for rel, content in iter_contents(context, env, files_with_extensions(context, KEY_EXTENSIONS))
        if any(marker in content.lower() for marker in LLM_CLIENT_MARKERS)
    ]
    if not clients:
        return not_applicable("No LLM client usage found in source; skipping timeout/retry check")

    bare = [
        rel
        for rel, content in clients
        if not any(marker in content for marker in LLM_RESILIENCE_MARKERS)
    ]
    return CheckOutcome(
        passed=not bare,
        message=(
            "LLM client calls configure timeouts or retries"
            if not bare
            else f"LLM client usage without timeout/retry settings in: {summarize(bare, 5)}"
        ),
    )


def _playwright_waits(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    offenders = _files_matching(context, env, JS_EXTENSIONS, _WAIT_FOR_TIMEOUT)
    return CheckOutcome(
        passed=not offenders,
        message=(
            "No hard-coded Playwright waits detected"
            if not offenders
            else f"page.waitForTimeout found in: {', '.join(offenders)}"
        ),
    )


def _cypress_waits(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    offenders = _files_matching(context, env, JS_EXTENSIONS, _CYPRESS_WAIT)
    return CheckOutcome(
        passed=not offenders,
        message=(
            "No hard-coded Cypress waits detected"
            if not offenders
            else f"cy.wait(<ms>) found in: {', '.join(offenders)}"
        ),
    )


OPENAI_KEYS = Check(
    id="ai-001",
    title="OpenAI-style API keys not exposed in source",
    category="security",
    severity=BLOCKER,
    checker=_openai_keys,
    effort="low",
    remediation="Load the OpenAI key from the environment and rotate any key committed to the repository.",
)
LLM_RESILIENCE = Check(
    id="ai-002",
    title="LLM client timeouts and retries configured",
    category="aiSpecific",
    severity=LOW,
    checker=_llm_resilience,
    effort="low",
    remediation="Pass explicit timeout and max retry settings when constructing LLM clients.",
)
ANTHROPIC_KEYS = Check(
    id="ai-003",
    title="Anthropic API keys not exposed in source",
    category="security",
    severity=BLOCKER,
    checker=_anthropic_keys,
    effort="low",
    remediation="Load the Anthropic key from the environment and rotate any key committed to the repository.",
)
PLAYWRIGHT_WAITS = Check(
    id="pw-001",
    title="Avoid hard-coded waits in Playwright tests",
    category="testing",
    severity=MEDIUM,
    checker=_playwright_waits,
    effort="low",
    remediation="Wait on locators or network events instead of page.waitForTimeout().",
)
CYPRESS_WAITS = Check(
    id="cy-001",
    title="Avoid hard-coded waits in Cypress tests",
    category="testing",
    severity=MEDIUM,
    checker=_cypress_waits,
    effort="low",
    remediation="Wait on aliased requests (cy.wait('@alias')) instead of fixed delays.",
)

PACKAGE_CHECKS: Dict[str, List[Check]] = {
    "openai": [OPENAI_KEYS, LLM_RESILIENCE],
    "anthropic": [ANTHROPIC_KEYS, LLM_RESILIENCE],
    "langchain": [LLM_RESILIENCE],
    "playwright": [PLAYWRIGHT_WAITS],
    "@playwright/test": [PLAYWRIGHT_WAITS],
    "cypress": [CYPRESS_WAITS],
}
