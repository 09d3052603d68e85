from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from shipscore.checks import CheckEnv
from tests._fixtures.repo_builder import RepoBuilder


@pytest.fixture
def repo_builder(tmp_path: Path) -> RepoBuilder:
    """Provide a reusable repo builder rooted at the pytest tmp_path."""
    return RepoBuilder(tmp_path)


@pytest.fixture
def env() -> CheckEnv:
    """Uncached check environment with default thresholds."""
    return CheckEnv()


@pytest.fixture(autouse=True)
def _propagating_logger() -> Iterator[None]:
    """CLI runs detach the shipscore logger; restore propagation for caplog."""
    logger = logging.getLogger("shipscore")
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
