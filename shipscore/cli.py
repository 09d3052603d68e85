"""CLI entrypoints for shipscore commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .checks import get_applicable_checks
from .config import CONFIG_FILENAME, ScannerConfig, load_config, save_config
from .detector import analyze_repo
from .logging import configure_logging, set_verbosity
from .models import CATEGORIES, SEVERITIES
from .reporting import FORMAT_EXTENSIONS, render, save_report
from .runner import ScanOptions
from .scanner import Scanner


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the repository root (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shipscore",
        description="Score a repository's production readiness with static checks.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan_parser = subparsers.add_parser(
        "scan",
        help="Scan a repository and print its readiness report.",
    )
    _add_verbose_option(scan_parser, suppress_default=True)
    _add_path_argument(scan_parser)
    scan_parser.add_argument(
        "--config",
        help=f"Configuration file to use instead of the repository's {CONFIG_FILENAME}.",
    )
    scan_parser.add_argument(
        "--format",
        dest="fmt",
        choices=sorted(FORMAT_EXTENSIONS),
        default="json",
        help="Report format (default: json).",
    )
    scan_parser.add_argument(
        "--output",
        help="Write the report to this file instead of stdout.",
    )
    scan_parser.add_argument(
        "--sequential",
        action="store_true",
        help="Run checks one at a time instead of in parallel.",
    )
    scan_parser.add_argument(
        "--max-concurrency",
        type=int,
        help="Maximum number of checks running at once.",
    )
    scan_parser.add_argument(
        "--category",
        action="append",
        choices=CATEGORIES,
        help="Only run checks in this category (repeatable).",
    )
    scan_parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        help="Skip the check with this id (repeatable).",
    )
    scan_parser.add_argument(
        "--min-severity",
        choices=SEVERITIES,
        help="Only run checks at or above this severity.",
    )
    scan_parser.add_argument(
        "--no-cache",
        action="store_true",
        help="Disable the file content cache for this run.",
    )
    scan_parser.add_argument(
        "--log-file",
        type=Path,
        help="Also write log records, including debug output, to this file.",
    )
    scan_parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 when the repository is not production ready.",
    )

    checks_parser = subparsers.add_parser(
        "checks",
        help="List the checks that apply to a repository.",
    )
    _add_verbose_option(checks_parser, suppress_default=True)
    _add_path_argument(checks_parser)

    init_parser = subparsers.add_parser(
        "init-config",
        help=f"Write a default {CONFIG_FILENAME} into a repository.",
    )
    _add_verbose_option(init_parser, suppress_default=True)
    _add_path_argument(init_parser)
    init_parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing configuration file.",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for shipscore commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=getattr(args, "log_file", None))

    repo = Path(args.path)
    if not repo.is_dir():
        parser.exit(1, f"Repository path not found: {args.path}\n")

    if args.command == "scan":
        _run_scan(parser, args, repo)
    elif args.command == "checks":
        context = analyze_repo(repo)
        for check in get_applicable_checks(context):
            print(f"{check.id:<14} {check.severity:<7} {check.category:<18} {check.title}")
    elif args.command == "init-config":
        target = repo / CONFIG_FILENAME
        if target.exists() and not args.force:
            parser.exit(1, f"{_relativize(target)} already exists; use --force to overwrite\n")
        save_config(ScannerConfig(), target)
        print(f"Config written to {_relativize(target)}")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _run_scan(parser: argparse.ArgumentParser, args: argparse.Namespace, repo: Path) -> None:
    if args.config and not Path(args.config).is_file():
        parser.exit(1, f"Config file not found: {args.config}\n")
    config = load_config(args.config or repo)
    if config.verbose_output and not args.verbose:
        set_verbosity(True)

    options = ScanOptions.from_config(config)
    if args.sequential:
        options.parallel = False
    if args.max_concurrency is not None:
        if args.max_concurrency < 1:
            parser.exit(1, "--max-concurrency must be at least 1\n")
        options.max_concurrency = args.max_concurrency
    if args.category:
        options.categories = list(args.category)
    if args.exclude:
        options.exclude_checks = tuple(options.exclude_checks) + tuple(args.exclude)
    if args.min_severity:
        options.min_severity = args.min_severity
    if args.no_cache:
        options.enable_cache = False

    report = Scanner(config).scan(repo, options)

    if args.output:
        saved = save_report(report, args.output, args.fmt)
        print(f"Report written to {_relativize(saved)}")
    else:
        print(render(report, args.fmt), end="" if args.fmt != "json" else "\n")

    if args.strict and not report.production_ready:
        parser.exit(1)


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
