"""High-level scan orchestration: config, context detection, check execution."""

from __future__ import annotations

import os
from dataclasses import replace
from pathlib import Path
from typing import Any

from .config import ScannerConfig, load_config
from .detector import analyze_repo
from .logging import get_logger
from .models import ScanReport
from .reporting import save_report
from .runner import ScanOptions, run_all_checks
from .stores import CachedReader, FileCache

_LOGGER = get_logger("scanner")


class Scanner:
    """Coordinates one or more scans sharing a single file cache."""

    def __init__(
        self,
        config: ScannerConfig | None = None,
        cache: FileCache | None = None,
    ) -> None:
        self.config = config
        base = config or ScannerConfig()
        self.cache = cache if cache is not None else FileCache(ttl=base.cache_ttl)

    def scan(self, repo_path: str | os.PathLike[str], options: ScanOptions | None = None) -> ScanReport:
        """Scan ``repo_path`` and return the report.

        When the scanner was built without a config, ``.shipscore.yml`` is
        loaded from the repository itself. Explicit ``options`` override the
        config-derived options.
        """
        root = Path(repo_path)
        config = self.config if self.config is not None else load_config(root)
        options = options or ScanOptions.from_config(config)

        reader = CachedReader(self.cache if options.enable_cache else None)
        _LOGGER.info("Scanning %s", root)
        context = analyze_repo(
            root,
            reader=reader,
            ignore_paths=config.ignore_paths,
            ignore_extensions=config.ignore_extensions,
        )
        return run_all_checks(context, options, reader=reader, config=config)

    def clear_cache(self) -> None:
        self.cache.clear()


def scan_repository(
    repo_path: str | os.PathLike[str],
    *,
    config_path: str | os.PathLike[str] | None = None,
    output_path: str | os.PathLike[str] | None = None,
    fmt: str = "json",
    **options: Any,
) -> ScanReport:
    """Scan a repository in one call, optionally saving the rendered report.

    Keyword ``options`` are :class:`ScanOptions` fields and take precedence
    over the configuration file.
    """
    config = load_config(config_path if config_path is not None else repo_path)
    scan_options = replace(ScanOptions.from_config(config), **options)
    report = Scanner(config).scan(repo_path, scan_options)

    if output_path is not None:
        saved = save_report(report, output_path, fmt)
        _LOGGER.info("Report saved to %s", saved)
    return report


__all__ = ["Scanner", "scan_repository"]
