"""Accessibility checks over markup and component files."""

from __future__ import annotations

import re
from typing import List

from ..models import LOW, CheckOutcome, RepoContext
from .base import Check, CheckEnv, files_with_extensions, iter_contents, not_applicable, summarize

MARKUP_EXTENSIONS = (".html", ".htm", ".jsx", ".tsx", ".vue", ".svelte")
MARKUP_FILE_LIMIT = 30

# An <img> tag whose attributes never declare alt.
_IMG_WITHOUT_ALT = re.compile(r"<img\b(?![^>]*\balt\s*=)[^>]*>", re.IGNORECASE)


def _image_alt_text(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    paths = files_with_extensions(context, MARKUP_EXTENSIONS, MARKUP_FILE_LIMIT)
    if not paths:
        return not_applicable("No markup or component files detected; skipping alt text check")

    offenders: List[str] = []
    missing = 0
    for rel_path, content in iter_contents(context, env, paths):
        count = len(_IMG_WITHOUT_ALT.findall(content))
        if count:
            missing += count
            offenders.append(rel_path)

    return CheckOutcome(
        passed=not offenders,
        message=(
            "All detected <img> elements declare alt text"
            if not offenders
            else f"{missing} <img> elements without alt text in: {summarize(offenders, 5)}"
        ),
    )


CHECKS: List[Check] = [
    Check(
        id="a11y-001",
        title="Images declare alt text",
        category="accessibility",
        severity=LOW,
        checker=_image_alt_text,
        effort="low",
        remediation='Give every <img> an alt attribute (alt="" for decorative images).',
    ),
]
