"""Check registry and discovery utilities."""

from __future__ import annotations

from importlib import metadata
from typing import Dict, Iterable, List, Optional, Set

from ..logging import get_logger
from ..models import RepoContext
from . import (
    accessibility,
    code_quality,
    data_quality,
    dependencies,
    devops,
    documentation,
    frameworks,
    observability,
    performance,
    placeholders,
    repo_health,
    security,
    testing,
)
from .base import Check, CheckEnv, Checker
from .packages import PACKAGE_CHECKS

_ENTRY_POINT_GROUP = "shipscore.checks"
_LOGGER = get_logger("checks")

BASE_CHECKS: List[Check] = [
    *documentation.CHECKS,
    *devops.CHECKS,
    *dependencies.CHECKS,
    *security.CHECKS,
    *testing.CHECKS,
    *repo_health.CHECKS,
    *code_quality.CHECKS,
    *placeholders.CHECKS,
    *performance.CHECKS,
    *observability.CHECKS,
    *frameworks.CHECKS,
    *accessibility.CHECKS,
    *data_quality.CHECKS,
]


def get_applicable_checks(context: RepoContext) -> List[Check]:
    """Return base checks plus package-conditional checks for detected packages.

    Order is stable: base checks first in registry order, then plugin checks,
    then package checks in detection order. A check id appears at most once.
    """
    applicable: List[Check] = []
    seen: Set[str] = set()

    def _add(check: Check) -> None:
        if check.id in seen:
            return
        seen.add(check.id)
        applicable.append(check)

    for check in BASE_CHECKS:
        _add(check)
    for check in _plugin_checks():
        _add(check)
    for package in context.detected_packages:
        for check in PACKAGE_CHECKS.get(package.name, ()):
            _add(check)
    return applicable


def all_checks() -> List[Check]:
    """Every registered check, including all package-conditional ones."""
    checks: Dict[str, Check] = {}
    for check in BASE_CHECKS:
        checks.setdefault(check.id, check)
    for check in _plugin_checks():
        checks.setdefault(check.id, check)
    for package_checks in PACKAGE_CHECKS.values():
        for check in package_checks:
            checks.setdefault(check.id, check)
    return list(checks.values())


def get_check(check_id: str) -> Optional[Check]:
    for check in all_checks():
        if check.id == check_id:
            return check
    return None


def _plugin_checks() -> List[Check]:
    """Load entry-point checks; a broken plugin is logged and skipped."""
    checks: List[Check] = []
    for entry in _iter_entry_points():
        try:
            checks.extend(_coerce_checks(entry.name, entry.load()))
        except Exception as exc:
            _LOGGER.warning(
                "Skipping check entry point '%s': %s: %s", entry.name, type(exc).__name__, exc
            )
    return checks


def _coerce_checks(name: str, obj: object) -> List[Check]:
    if callable(obj) and not isinstance(obj, Check):
        obj = obj()
    if isinstance(obj, Check):
        return [obj]
    if isinstance(obj, (list, tuple)) and all(isinstance(item, Check) for item in obj):
        return list(obj)
    raise TypeError(f"Check entry point '{name}' must provide a Check or a list of Checks")


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points().select(group=_ENTRY_POINT_GROUP)


__all__ = [
    "BASE_CHECKS",
    "Check",
    "CheckEnv",
    "Checker",
    "PACKAGE_CHECKS",
    "all_checks",
    "get_applicable_checks",
    "get_check",
]
