"""Production-readiness verdict derived from results and scores."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Mapping, Sequence, Tuple

from .models import BLOCKER, HIGH, CheckResult
from .scoring import failing_mock_checks

# (category, label, minimum score) in evaluation order.
CATEGORY_MINIMUMS: Tuple[Tuple[str, str, int], ...] = (
    ("security", "Security", 85),
    ("devops", "DevOps", 80),
    ("testing", "Testing", 75),
    ("codeQuality", "Code quality", 70),
)
OVERALL_MINIMUM = 85
HIGH_MOCK_LIMIT = 2
ANY_MOCK_LIMIT = 3


@dataclass(frozen=True)
class ReadinessVerdict:
    production_ready: bool
    reasons: Tuple[str, ...] = field(default_factory=tuple)


def evaluate_production_readiness(
    results: Sequence[CheckResult],
    category_scores: Mapping[str, int],
    overall_score: int,
) -> ReadinessVerdict:
    """Apply the readiness rules in order and collect every failing reason.

    A repository is production ready only when no rule produced a reason.
    Categories without a score are skipped rather than treated as failing.
    """
    reasons: List[str] = []

    blockers = [result for result in results if not result.passed and result.severity == BLOCKER]
    if blockers:
        listed = "; ".join(f"[{result.category}] {result.title}" for result in blockers)
        reasons.append(f"One or more blocker-level checks failed: {listed}")

    mocks = failing_mock_checks(results)
    high_mocks = [result for result in mocks if result.severity == HIGH]
    if len(high_mocks) >= HIGH_MOCK_LIMIT:
        reasons.append(
            "High concentration of mock/simulation code detected: "
            f"{len(high_mocks)} high-severity issues found."
        )
    elif len(mocks) >= ANY_MOCK_LIMIT:
        reasons.append(
            f"Multiple mock/placeholder issues detected: {len(mocks)} issues found. "
            "Code may not be production-ready."
        )

    for category, label, minimum in CATEGORY_MINIMUMS:
        score = category_scores.get(category)
        if score is not None and score < minimum:
            reasons.append(f"{label} score below {minimum} (got {score}).")

    if overall_score < OVERALL_MINIMUM:
        reasons.append(f"Overall score below {OVERALL_MINIMUM} (got {overall_score}).")

    return ReadinessVerdict(production_ready=not reasons, reasons=tuple(reasons))


__all__ = ["ReadinessVerdict", "evaluate_production_readiness"]
