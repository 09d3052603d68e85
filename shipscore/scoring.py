"""Category and overall scoring for check results."""

from __future__ import annotations

import math
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from .constants import (
    BLOCKER_PENALTY,
    CATEGORY_WEIGHTS,
    MOCK_CHECK_PREFIX,
    MOCK_PENALTY,
    MOCK_PENALTY_CAP,
    SEVERITY_IMPACT,
)
from .models import BLOCKER, CATEGORIES, CheckResult


def round_half_up(value: float) -> int:
    """Round .5 upwards; Python's round() would round half to even."""
    return int(math.floor(value + 0.5))


def calculate_category_score(
    results: Sequence[CheckResult],
    severity_impact: Optional[Mapping[str, float]] = None,
) -> Optional[int]:
    """Score one category's results on a 0-100 scale.

    Returns ``None`` for a category with no evaluated checks so that it is left
    out of the weighted mean rather than counted as a perfect score. Any failing
    blocker zeroes the category. Otherwise each failure multiplies the running
    score by ``1 - (1 - impact) / n`` where ``n`` is the category's check count.
    """
    if not results:
        return None
    if has_failing_blocker(results):
        return 0

    impact = _merged(SEVERITY_IMPACT, severity_impact)
    count = len(results)
    score = 100.0
    for result in results:
        if result.passed:
            continue
        penalty = 1.0 - impact.get(result.severity, 1.0)
        score *= 1.0 - penalty / count
    return round_half_up(score)


def calculate_category_scores(
    results: Iterable[CheckResult],
    weights: Optional[Mapping[str, float]] = None,
    severity_impact: Optional[Mapping[str, float]] = None,
) -> Dict[str, int]:
    """Return scores for every category that has at least one result."""
    by_category: Dict[str, List[CheckResult]] = {}
    for result in results:
        by_category.setdefault(result.category, []).append(result)

    scores: Dict[str, int] = {}
    for category in _category_order(weights):
        score = calculate_category_score(by_category.get(category, ()), severity_impact)
        if score is not None:
            scores[category] = score
    return scores


def calculate_score(
    results: Sequence[CheckResult],
    weights: Optional[Mapping[str, float]] = None,
    severity_impact: Optional[Mapping[str, float]] = None,
    category_scores: Optional[Mapping[str, int]] = None,
) -> int:
    """Return the overall 0-100 score.

    The weighted mean of defined category scores, minus a flat penalty when any
    blocker failed and a capped penalty for failing ``mock-`` checks.
    """
    merged_weights = _merged(CATEGORY_WEIGHTS, weights)
    if category_scores is None:
        category_scores = calculate_category_scores(results, merged_weights, severity_impact)

    weighted_total = 0.0
    total_weight = 0.0
    for category, weight in merged_weights.items():
        if weight <= 0:
            continue
        score = category_scores.get(category)
        if score is None:
            continue
        weighted_total += score * weight
        total_weight += weight

    if total_weight == 0:
        return 0

    final = round_half_up(weighted_total / total_weight)
    if has_failing_blocker(results):
        final = max(0, final - BLOCKER_PENALTY)

    penalty = mock_penalty(results)
    if penalty:
        final = max(0, final - penalty)
    return final


def mock_penalty(results: Iterable[CheckResult]) -> int:
    total = 0
    for result in failing_mock_checks(results):
        total += MOCK_PENALTY.get(result.severity, MOCK_PENALTY["low"])
    return min(total, MOCK_PENALTY_CAP)


def failing_mock_checks(results: Iterable[CheckResult]) -> List[CheckResult]:
    return [
        result
        for result in results
        if not result.passed and result.check_id.startswith(MOCK_CHECK_PREFIX)
    ]


def has_failing_blocker(results: Iterable[CheckResult]) -> bool:
    return any(not result.passed and result.severity == BLOCKER for result in results)


def _category_order(weights: Optional[Mapping[str, float]]) -> List[str]:
    order = list(CATEGORIES)
    for category in weights or {}:
        if category not in order:
            order.append(category)
    return order


def _merged(defaults: Mapping[str, float], overrides: Optional[Mapping[str, float]]) -> Dict[str, float]:
    merged = dict(defaults)
    if overrides:
        merged.update(overrides)
    return merged


__all__ = [
    "calculate_category_score",
    "calculate_category_scores",
    "calculate_score",
    "failing_mock_checks",
    "has_failing_blocker",
    "mock_penalty",
    "round_half_up",
]
