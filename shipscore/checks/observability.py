"""Observability checks: logging, health endpoints and metrics."""

from __future__ import annotations

import re
from typing import List

from ..models import LOW, MEDIUM, CheckOutcome, RepoContext
from .base import (
    Check,
    CheckEnv,
    compile_all,
    files_with_extensions,
    iter_contents,
    not_applicable,
)

OBSERVED_EXTENSIONS = (".js", ".jsx", ".ts", ".tsx", ".py", ".java", ".go")

LOGGING_LIBRARIES = (
    "winston",
    "pino",
    "bunyan",
    "log4js",
    "debug",
    "morgan",
    "helmet",
    "@sentry/node",
    "loglevel",
    "consola",
)
LOGGING_MARKERS = (
    "console.log",
    "console.error",
    "console.warn",
    "logger.",
    "log.",
    "print(",
    "logging.",
)
LOGGING_FILE_LIMIT = 15

HEALTH_PATTERNS = compile_all(
    r"health", r"status", r"ping", r"alive", r"ready", flags=re.IGNORECASE
)
HEALTH_FILE_LIMIT = 20

METRICS_TOOLS = (
    "prometheus-client",
    "prom-client",
    "metrics",
    "statsd",
    "datadog",
    "newrelic",
    "appdynamics",
    "dynatrace",
    "@opentelemetry/api",
    "@elastic/apm",
)
METRICS_CONFIG_EXTENSIONS = (".js", ".ts", ".json", ".yml", ".yaml")
METRICS_MARKERS = ("metrics", "monitoring", "prometheus", "datadog", "newrelic")
METRICS_FILE_LIMIT = 10


def _logging(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    deps = context.dependencies()
    found = any(deps.get(name) for name in LOGGING_LIBRARIES)
    if not found:
        paths = files_with_extensions(context, OBSERVED_EXTENSIONS, LOGGING_FILE_LIMIT)
        found = any(
            any(marker in content for marker in LOGGING_MARKERS)
            for _, content in iter_contents(context, env, paths)
        )
    return CheckOutcome(
        passed=found,
        message="Logging implementation detected" if found else "No logging implementation found",
    )


def _health_endpoint(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    paths = files_with_extensions(context, OBSERVED_EXTENSIONS, HEALTH_FILE_LIMIT)
    found = any(
        any(pattern.search(content) for pattern in HEALTH_PATTERNS)
        for _, content in iter_contents(context, env, paths)
    )
    return CheckOutcome(
        passed=found,
        message="Health check endpoints detected" if found else "No health check endpoints found",
    )


def _metrics(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    if context.package_json is None:
        return not_applicable("No package.json found; skipping metrics check")
    deps = context.dependencies()
    found = any(deps.get(name) for name in METRICS_TOOLS)
    if not found:
        paths = files_with_extensions(context, METRICS_CONFIG_EXTENSIONS, METRICS_FILE_LIMIT)
        found = any(
            any(marker in content for marker in METRICS_MARKERS)
            for _, content in iter_contents(context, env, paths)
        )
    return CheckOutcome(
        passed=found,
        message=(
            "Metrics and monitoring configuration detected"
            if found
            else "No metrics and monitoring configuration found"
        ),
    )


CHECKS: List[Check] = [
    Check(
        id="obs-001",
        title="Logging implementation",
        category="observability",
        severity=MEDIUM,
        checker=_logging,
        remediation="Adopt a structured logger (pino, winston or the logging module) for application events.",
    ),
    Check(
        id="obs-002",
        title="Health check endpoints",
        category="observability",
        severity=LOW,
        checker=_health_endpoint,
        effort="low",
        remediation="Expose a /health endpoint that reports service readiness.",
    ),
    Check(
        id="obs-003",
        title="Metrics and monitoring configuration",
        category="observability",
        severity=LOW,
        checker=_metrics,
        remediation="Export service metrics with prom-client or OpenTelemetry.",
    ),
]
