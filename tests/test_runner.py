"""Check selection, execution and report assembly."""

from __future__ import annotations

import logging
import threading
import time
from typing import List

import pytest

from shipscore import runner
from shipscore.checks import Check, CheckEnv
from shipscore.config import ScannerConfig
from shipscore.models import CheckOutcome, RepoContext
from shipscore.runner import ScanOptions, run_all_checks, run_check, select_checks


def _check(
    check_id: str,
    *,
    category: str = "codeQuality",
    severity: str = "medium",
    passed: bool = True,
    remediation: str | None = None,
    delay: float = 0.0,
) -> Check:
    def _checker(context: RepoContext, env: CheckEnv) -> CheckOutcome:
        if delay:
            time.sleep(delay)
        return CheckOutcome(passed=passed, message=f"{check_id} {'ok' if passed else 'failed'}")

    return Check(
        id=check_id,
        title=f"Title {check_id}",
        category=category,
        severity=severity,
        checker=_checker,
        effort="low",
        remediation=remediation,
    )


def _raising_check(check_id: str) -> Check:
    def _checker(context: RepoContext, env: CheckEnv) -> CheckOutcome:
        raise ValueError("boom")

    return Check(
        id=check_id,
        title="Explodes",
        category="security",
        severity="high",
        checker=_checker,
    )


@pytest.fixture
def context() -> RepoContext:
    return RepoContext(path="/tmp/example")


def _install(monkeypatch: pytest.MonkeyPatch, checks: List[Check]) -> None:
    monkeypatch.setattr(runner, "get_applicable_checks", lambda _context: list(checks))


def test_select_checks_applies_filters_in_order(
    monkeypatch: pytest.MonkeyPatch, context: RepoContext
) -> None:
    _install(
        monkeypatch,
        [
            _check("a", category="security", severity="blocker"),
            _check("b", category="security", severity="low"),
            _check("c", category="testing", severity="high"),
            _check("d", category="security", severity="high"),
        ],
    )

    options = ScanOptions(categories=["security"], exclude_checks=("d",), min_severity="medium")

    assert [check.id for check in select_checks(context, options)] == ["a"]


def test_default_options_select_everything(
    monkeypatch: pytest.MonkeyPatch, context: RepoContext
) -> None:
    _install(monkeypatch, [_check("a", severity="low"), _check("b", severity="blocker")])

    assert [check.id for check in select_checks(context, ScanOptions())] == ["a", "b"]


def test_parallel_run_preserves_registry_order(
    monkeypatch: pytest.MonkeyPatch, context: RepoContext
) -> None:
    # Earlier checks sleep longer so they finish last.
    checks = [_check(f"c{index}", delay=0.02 * (5 - index)) for index in range(5)]
    _install(monkeypatch, checks)

    parallel = run_all_checks(context, ScanOptions(parallel=True, max_concurrency=5))
    sequential = run_all_checks(context, ScanOptions(parallel=False))

    expected = [check.id for check in checks]
    assert [result.check_id for result in parallel.results] == expected
    assert [result.check_id for result in sequential.results] == expected


def test_max_concurrency_bounds_worker_threads(
    monkeypatch: pytest.MonkeyPatch, context: RepoContext
) -> None:
    active = 0
    peak = 0
    lock = threading.Lock()

    def _tracking(context: RepoContext, env: CheckEnv) -> CheckOutcome:
        nonlocal active, peak
        with lock:
            active += 1
            peak = max(peak, active)
        time.sleep(0.01)
        with lock:
            active -= 1
        return CheckOutcome(passed=True)

    checks = [
        Check(id=f"t{index}", title="t", category="testing", severity="low", checker=_tracking)
        for index in range(8)
    ]
    _install(monkeypatch, checks)

    run_all_checks(context, ScanOptions(parallel=True, max_concurrency=2))

    assert peak <= 2


def test_raising_checker_becomes_failed_result(
    caplog: pytest.LogCaptureFixture,
) -> None:
    context = RepoContext(path="/tmp/example")

    with caplog.at_level(logging.WARNING, logger="shipscore"):
        result = run_check(_raising_check("x-001"), context, CheckEnv())

    assert result.passed is False
    assert result.error == "boom"
    assert result.message is None
    assert "x-001" in caplog.text


def test_one_raising_check_does_not_abort_the_scan(
    monkeypatch: pytest.MonkeyPatch, context: RepoContext
) -> None:
    _install(monkeypatch, [_check("a"), _raising_check("x-001"), _check("b")])

    report = run_all_checks(context)

    assert [result.check_id for result in report.results] == ["a", "x-001", "b"]
    assert report.results[1].error == "boom"
    assert report.results[0].passed and report.results[2].passed


def test_malformed_outcome_becomes_failed_result(
    monkeypatch: pytest.MonkeyPatch, context: RepoContext
) -> None:
    malformed = Check(
        id="plug-001",
        title="Returns a bare bool",
        category="repoHealth",
        severity="low",
        checker=lambda _context, _env: True,
    )
    _install(monkeypatch, [malformed, _check("a")])

    report = run_all_checks(context, ScanOptions(parallel=False))

    assert report.results[0].passed is False
    assert "passed" in report.results[0].error
    assert report.results[1].passed


def test_run_check_can_drop_auto_fix_flag(context: RepoContext) -> None:
    fixable = Check(
        id="fix-001",
        title="Fixable",
        category="codeQuality",
        severity="low",
        checker=lambda _context, _env: CheckOutcome(passed=False, auto_fixable=True),
    )

    assert run_check(fixable, context, CheckEnv()).auto_fixable is True
    assert run_check(fixable, context, CheckEnv(), include_auto_fix=False).auto_fixable is None


def test_auto_fix_suggestions_can_be_disabled(
    monkeypatch: pytest.MonkeyPatch, context: RepoContext
) -> None:
    fixable = Check(
        id="fix-001",
        title="Fixable",
        category="codeQuality",
        severity="low",
        checker=lambda _context, _env: CheckOutcome(passed=False, auto_fixable=True),
    )
    _install(monkeypatch, [fixable])

    report = run_all_checks(context, config=ScannerConfig(include_auto_fix_suggestions=False))

    assert report.results[0].auto_fixable is None
    assert report.to_dict()["results"][0]["autoFixable"] is None


def test_report_fields(monkeypatch: pytest.MonkeyPatch, context: RepoContext) -> None:
    _install(monkeypatch, [_check("a", category="security", severity="high")])

    report = run_all_checks(context)

    assert report.timestamp.endswith("Z")
    assert report.repo_path == "/tmp/example"
    assert report.score == 100
    assert report.category_scores == {"security": 100}
    assert report.production_ready is True
    assert report.quick_wins == ()


def test_quick_wins_skip_blockers_and_respect_limit(
    monkeypatch: pytest.MonkeyPatch, context: RepoContext
) -> None:
    _install(
        monkeypatch,
        [
            _check("block", category="security", severity="blocker", passed=False),
            _check("m1", severity="medium", passed=False, remediation="Add a linter."),
            _check("m2", severity="low", passed=False),
            _check("m3", category="performance", severity="medium", passed=False),
            _check("m4", category="performance", severity="low", passed=False),
            _check("ok", category="testing", severity="high"),
        ],
    )

    report = run_all_checks(context)

    assert [win.check.check_id for win in report.quick_wins] == ["m1", "m2", "m3"]
    first, second, _ = report.quick_wins
    assert first.instructions == "Add a linter."
    assert first.effort == "low"
    assert second.instructions == "Address 'Title m2' (m2): m2 failed"
    assert all(win.points >= 0 for win in report.quick_wins)


def test_quick_win_points_match_rescoring(
    monkeypatch: pytest.MonkeyPatch, context: RepoContext
) -> None:
    _install(
        monkeypatch,
        [
            _check("p1", category="performance", severity="medium", passed=False),
            _check("p2", category="performance", severity="medium"),
        ],
    )

    report = run_all_checks(context)

    assert report.score == 88
    assert report.quick_wins[0].points == 12


def test_quick_wins_can_be_disabled(
    monkeypatch: pytest.MonkeyPatch, context: RepoContext
) -> None:
    _install(monkeypatch, [_check("m1", passed=False)])
    config = ScannerConfig(include_quick_wins=False)

    report = run_all_checks(context, config=config)

    assert report.quick_wins == ()
    assert report.results[0].passed is False
