"""Execute applicable checks against a repository context and build the report."""

from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import List, Optional, Sequence

from .checks import Check, CheckEnv, get_applicable_checks
from .config import ScannerConfig, Thresholds
from .logging import get_logger
from .models import CheckResult, QuickWin, RepoContext, ScanReport, severity_rank
from .readiness import evaluate_production_readiness
from .scoring import calculate_category_scores, calculate_score
from .stores import CachedReader, FileCache

_LOGGER = get_logger("runner")

QUICK_WIN_LIMIT = 3


@dataclass
class ScanOptions:
    """Per-run selection and execution settings."""

    parallel: bool = True
    max_concurrency: int = 10
    enable_cache: bool = True
    categories: Optional[Sequence[str]] = None
    exclude_checks: Sequence[str] = field(default_factory=tuple)
    min_severity: str = "low"

    @classmethod
    def from_config(cls, config: ScannerConfig) -> "ScanOptions":
        return cls(
            parallel=config.parallel,
            max_concurrency=config.max_concurrency,
            enable_cache=config.enable_cache,
            categories=list(config.enabled_categories),
            exclude_checks=tuple(config.disabled_checks),
            min_severity=config.min_severity,
        )


def select_checks(context: RepoContext, options: ScanOptions) -> List[Check]:
    """Apply registry selection, category allow-list, id deny-list and severity floor."""
    checks = get_applicable_checks(context)
    if options.categories:
        allowed = set(options.categories)
        checks = [check for check in checks if check.category in allowed]
    if options.exclude_checks:
        excluded = set(options.exclude_checks)
        checks = [check for check in checks if check.id not in excluded]
    floor = severity_rank(options.min_severity)
    if floor:
        checks = [check for check in checks if severity_rank(check.severity) >= floor]
    return checks


def run_check(
    check: Check, context: RepoContext, env: CheckEnv, *, include_auto_fix: bool = True
) -> CheckResult:
    """Run one check; exceptions and malformed outcomes become a failing result."""
    started = time.perf_counter()
    try:
        outcome = check.run(context, env)
        result = CheckResult(
            check_id=check.id,
            title=check.title,
            category=check.category,
            severity=check.severity,
            passed=bool(outcome.passed),
            message=outcome.message,
            error=outcome.error,
            auto_fixable=outcome.auto_fixable if include_auto_fix else None,
        )
    except Exception as exc:
        _LOGGER.warning("Check %s raised %s: %s", check.id, type(exc).__name__, exc)
        return CheckResult(
            check_id=check.id,
            title=check.title,
            category=check.category,
            severity=check.severity,
            passed=False,
            error=str(exc) or type(exc).__name__,
        )
    _LOGGER.debug(
        "Check %s %s in %.1fms",
        check.id,
        "passed" if result.passed else "failed",
        (time.perf_counter() - started) * 1000,
    )
    return result


def run_all_checks(
    context: RepoContext,
    options: ScanOptions | None = None,
    *,
    reader: CachedReader | None = None,
    config: ScannerConfig | None = None,
) -> ScanReport:
    """Run every selected check and assemble a :class:`ScanReport`.

    Results keep registry order whether checks ran in parallel or not. A
    checker that raises yields a failing result; nothing is raised here.
    """
    options = options or ScanOptions()
    config = config or ScannerConfig()
    timestamp = datetime.now(UTC).isoformat().replace("+00:00", "Z")

    if reader is None:
        reader = CachedReader(FileCache(ttl=config.cache_ttl) if options.enable_cache else None)
    env = CheckEnv(reader=reader, thresholds=config.thresholds or Thresholds())

    checks = select_checks(context, options)
    auto_fix = config.include_auto_fix_suggestions
    _LOGGER.debug("Selected %d checks for %s", len(checks), context.path)

    if options.parallel and len(checks) > 1:
        workers = max(1, options.max_concurrency)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="shipscore") as pool:
            futures = [
                pool.submit(run_check, check, context, env, include_auto_fix=auto_fix)
                for check in checks
            ]
            results = [future.result() for future in futures]
    else:
        results = [run_check(check, context, env, include_auto_fix=auto_fix) for check in checks]

    weights = config.category_weights
    impact = config.severity_impact
    category_scores = calculate_category_scores(results, weights, impact)
    score = calculate_score(results, weights, impact, category_scores)
    verdict = evaluate_production_readiness(results, category_scores, score)

    quick_wins: List[QuickWin] = []
    if config.include_quick_wins:
        quick_wins = build_quick_wins(checks, results, score, config)

    _LOGGER.info(
        "Scanned %s: %d checks, %d failed, score %d",
        context.path,
        len(results),
        sum(1 for result in results if not result.passed),
        score,
    )
    return ScanReport(
        score=score,
        results=tuple(results),
        timestamp=timestamp,
        repo_path=context.path,
        category_scores=category_scores,
        production_ready=verdict.production_ready,
        readiness_reasons=verdict.reasons,
        quick_wins=tuple(quick_wins),
    )


def build_quick_wins(
    checks: Sequence[Check],
    results: Sequence[CheckResult],
    score: int,
    config: ScannerConfig,
    limit: int = QUICK_WIN_LIMIT,
) -> List[QuickWin]:
    """Surface the first failing non-blocker results with their score gain."""
    by_id = {check.id: check for check in checks}
    wins: List[QuickWin] = []
    for index, result in enumerate(results):
        if result.passed or result.severity == "blocker":
            continue
        check = by_id.get(result.check_id)
        flipped = list(results)
        flipped[index] = replace(result, passed=True, error=None)
        gain = calculate_score(flipped, config.category_weights, config.severity_impact) - score
        if check is not None and check.remediation:
            instructions = check.remediation
        else:
            detail = result.message or result.error or "check failed"
            instructions = f"Address '{result.title}' ({result.check_id}): {detail}"
        wins.append(
            QuickWin(
                check=result,
                effort=check.effort if check is not None else "medium",
                points=max(0, gain),
                instructions=instructions,
            )
        )
        if len(wins) >= limit:
            break
    return wins


__all__ = [
    "QUICK_WIN_LIMIT",
    "ScanOptions",
    "build_quick_wins",
    "run_all_checks",
    "run_check",
    "select_checks",
]
