"""Configuration loading for shipscore (.shipscore.yml)."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml

from .constants import CATEGORY_WEIGHTS, SEVERITY_IMPACT
from .logging import get_logger
from .models import CATEGORIES, SEVERITIES
from .stores.file_cache import DEFAULT_TTL

CONFIG_FILENAME = ".shipscore.yml"

_LOGGER = get_logger("config")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class Thresholds:
    """Limits used by the content-scanning checks."""

    max_file_size: int = 50  # KB
    max_function_complexity: float = 5.0
    max_code_duplication_ratio: float = 0.15
    max_todo_count: int = 50
    max_mock_file_ratio: float = 0.2
    max_simulation_file_ratio: float = 0.15
    max_placeholder_count: int = 10
    max_dev_code_patterns: int = 8
    min_error_handling_ratio: float = 0.6


@dataclass
class ScannerConfig:
    """Represents the settings defined in .shipscore.yml merged over defaults."""

    parallel: bool = True
    max_concurrency: int = 10
    enable_cache: bool = True
    cache_ttl: float = DEFAULT_TTL
    enabled_categories: List[str] = field(default_factory=lambda: list(CATEGORIES))
    disabled_checks: List[str] = field(default_factory=list)
    min_severity: str = "low"
    thresholds: Thresholds = field(default_factory=Thresholds)
    ignore_paths: List[str] = field(
        default_factory=lambda: [
            "node_modules",
            ".git",
            ".next",
            "dist",
            "build",
            "coverage",
            ".nyc_output",
            ".vscode",
            ".idea",
            ".DS_Store",
        ]
    )
    ignore_extensions: List[str] = field(default_factory=lambda: [".log", ".tmp", ".cache"])
    category_weights: Dict[str, float] = field(default_factory=lambda: dict(CATEGORY_WEIGHTS))
    severity_impact: Dict[str, float] = field(default_factory=lambda: dict(SEVERITY_IMPACT))
    include_quick_wins: bool = True
    include_auto_fix_suggestions: bool = True
    verbose_output: bool = False


def load_config(config_path: Path | str) -> ScannerConfig:
    """Load configuration from a repository directory or explicit file.

    A missing file yields defaults. Any problem with the file is logged as a
    warning and the affected settings fall back to their defaults.
    """
    config_file = _resolve_config_path(Path(config_path))
    if not config_file.exists():
        return ScannerConfig()

    try:
        data = _read_config(config_file)
    except ConfigError as exc:
        _LOGGER.warning("%s; using default configuration", exc)
        return ScannerConfig()

    return config_from_mapping(data, source=config_file.name)


def config_from_mapping(data: Any, *, source: str = "overrides") -> ScannerConfig:
    """Merge a structured override object over the defaults."""
    if data is None:
        return ScannerConfig()
    if not isinstance(data, Mapping):
        _LOGGER.warning("%s must contain a mapping at the root; using defaults", source)
        return ScannerConfig()

    config = ScannerConfig()
    known = {item.name for item in fields(ScannerConfig)}
    for key in data:
        if key not in known:
            _LOGGER.warning("Ignoring unknown setting '%s' in %s", key, source)

    config.parallel = _field(data, "parallel", _as_bool, config.parallel, source)
    config.max_concurrency = _field(
        data, "max_concurrency", _as_int, config.max_concurrency, source
    )
    config.enable_cache = _field(data, "enable_cache", _as_bool, config.enable_cache, source)
    config.cache_ttl = _field(data, "cache_ttl", _as_float, config.cache_ttl, source)
    config.enabled_categories = _field(
        data, "enabled_categories", _as_str_list, config.enabled_categories, source
    )
    config.disabled_checks = _field(
        data, "disabled_checks", _as_str_list, config.disabled_checks, source
    )
    config.min_severity = _field(data, "min_severity", _as_str, config.min_severity, source)
    config.ignore_paths = _field(data, "ignore_paths", _as_str_list, config.ignore_paths, source)
    config.ignore_extensions = _field(
        data, "ignore_extensions", _as_str_list, config.ignore_extensions, source
    )
    config.include_quick_wins = _field(
        data, "include_quick_wins", _as_bool, config.include_quick_wins, source
    )
    config.include_auto_fix_suggestions = _field(
        data,
        "include_auto_fix_suggestions",
        _as_bool,
        config.include_auto_fix_suggestions,
        source,
    )
    config.verbose_output = _field(
        data, "verbose_output", _as_bool, config.verbose_output, source
    )

    threshold_data = _as_dict(data.get("thresholds"))
    if threshold_data:
        config.thresholds = _merge_thresholds(config.thresholds, threshold_data, source)

    weights = _as_number_map(data.get("category_weights"), CATEGORIES, "category_weights", source)
    config.category_weights.update(weights)
    impact = _as_number_map(data.get("severity_impact"), SEVERITIES, "severity_impact", source)
    config.severity_impact.update(impact)

    errors = validate_config(config)
    if errors:
        for error in errors:
            _LOGGER.warning("Invalid configuration in %s: %s", source, error)
        _LOGGER.warning("Falling back to default configuration for %s", source)
        return ScannerConfig()
    return config


def validate_config(config: ScannerConfig) -> List[str]:
    """Return human-readable problems with ``config``; empty when valid."""
    errors: List[str] = []
    thresholds = config.thresholds

    if config.max_concurrency < 1 or config.max_concurrency > 50:
        errors.append("max_concurrency must be between 1 and 50")
    if config.cache_ttl < 0:
        errors.append("cache_ttl must be non-negative")
    if config.min_severity not in SEVERITIES:
        errors.append(f"min_severity must be one of {', '.join(SEVERITIES)}")
    unknown = sorted(set(config.enabled_categories) - set(CATEGORIES))
    if unknown:
        errors.append(f"unknown categories in enabled_categories: {', '.join(unknown)}")
    if thresholds.max_file_size < 0:
        errors.append("max_file_size threshold must be non-negative")
    if thresholds.max_function_complexity < 0:
        errors.append("max_function_complexity threshold must be non-negative")
    for name in (
        "max_code_duplication_ratio",
        "max_mock_file_ratio",
        "max_simulation_file_ratio",
        "min_error_handling_ratio",
    ):
        value = getattr(thresholds, name)
        if value < 0 or value > 1:
            errors.append(f"{name} must be between 0 and 1")
    if any(weight < 0 for weight in config.category_weights.values()):
        errors.append("category_weights must be non-negative")
    if any(value < 0 or value > 1 for value in config.severity_impact.values()):
        errors.append("severity_impact values must be between 0 and 1")
    return errors


def save_config(config: ScannerConfig, config_path: Path | str) -> Path:
    """Write ``config`` as YAML and return the file path."""
    target = Path(config_path)
    if target.is_dir():
        target = target / CONFIG_FILENAME
    target.write_text(
        yaml.safe_dump(asdict(config), sort_keys=False, default_flow_style=False),
        encoding="utf-8",
    )
    _LOGGER.info("Config saved to %s", target)
    return target


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        return yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc


def _merge_thresholds(
    current: Thresholds, data: Mapping[str, Any], source: str
) -> Thresholds:
    updates: Dict[str, Any] = {}
    for item in fields(Thresholds):
        if item.name not in data:
            continue
        value = _as_float(data[item.name])
        if value is None:
            _LOGGER.warning("Ignoring non-numeric threshold '%s' in %s", item.name, source)
            continue
        updates[item.name] = int(value) if isinstance(getattr(current, item.name), int) else value
    return replace(current, **updates)


def _field(data: Mapping[str, Any], key: str, convert: Any, default: Any, source: str) -> Any:
    if key not in data:
        return default
    value = convert(data[key])
    if value is None:
        _LOGGER.warning("Ignoring invalid value for '%s' in %s", key, source)
        return default
    return value


def _as_number_map(
    value: Any, allowed: Sequence[str], name: str, source: str
) -> Dict[str, float]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        _LOGGER.warning("Ignoring '%s' in %s: expected a mapping", name, source)
        return {}
    result: Dict[str, float] = {}
    for key, raw in value.items():
        number = _as_float(raw)
        if key not in allowed or number is None:
            _LOGGER.warning("Ignoring %s entry '%s' in %s", name, key, source)
            continue
        result[key] = number
    return result


def _as_dict(value: Any) -> Dict[str, Any]:
    return dict(value) if isinstance(value, Mapping) else {}


def _as_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> Optional[List[str]]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return None


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "ScannerConfig",
    "Thresholds",
    "config_from_mapping",
    "load_config",
    "save_config",
    "validate_config",
]
