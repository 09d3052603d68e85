from __future__ import annotations

from typing import Callable

import pytest

from shipscore.checks import CheckEnv, get_check
from shipscore.models import CheckOutcome, RepoContext

RunCheck = Callable[[str, RepoContext], CheckOutcome]


@pytest.fixture
def run(env: CheckEnv) -> RunCheck:
    """Run a registered check by id against a context."""

    def _run(check_id: str, context: RepoContext) -> CheckOutcome:
        check = get_check(check_id)
        assert check is not None, f"unknown check {check_id}"
        return check.run(context, env)

    return _run
