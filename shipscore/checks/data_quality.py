"""Data hygiene checks for datasets committed alongside code."""

from __future__ import annotations

from typing import List

from ..models import MEDIUM, CheckOutcome, RepoContext
from .base import Check, CheckEnv, files_with_extensions, not_applicable, summarize

DATA_EXTENSIONS = (
    ".csv",
    ".tsv",
    ".jsonl",
    ".ndjson",
    ".parquet",
    ".feather",
    ".xlsx",
    ".xls",
    ".sqlite",
    ".db",
    ".pkl",
    ".h5",
)
MAX_DATA_FILE_BYTES = 10 * 1024 * 1024


def _large_data_files(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    paths = files_with_extensions(context, DATA_EXTENSIONS)
    if not paths:
        return not_applicable("No data files detected; skipping committed data check")

    large: List[str] = []
    for rel_path in paths:
        size = env.reader.size(context.abspath(rel_path))
        if size is not None and size > MAX_DATA_FILE_BYTES:
            large.append(f"{rel_path} ({size // (1024 * 1024)}MB)")

    return CheckOutcome(
        passed=not large,
        message=(
            f"{len(paths)} data files detected, none larger than 10MB"
            if not large
            else f"Large data files committed: {summarize(large, 5)}"
        ),
    )


CHECKS: List[Check] = [
    Check(
        id="data-001",
        title="No large data files committed",
        category="dataQuality",
        severity=MEDIUM,
        checker=_large_data_files,
        remediation="Store datasets in object storage or Git LFS and fetch them at build time.",
    ),
]
