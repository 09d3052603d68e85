"""Core data models shared across shipscore components."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

BLOCKER = "blocker"
HIGH = "high"
MEDIUM = "medium"
LOW = "low"

# Ordered from most to least severe.
SEVERITIES: Tuple[str, ...] = (BLOCKER, HIGH, MEDIUM, LOW)

CATEGORIES: Tuple[str, ...] = (
    "codeQuality",
    "security",
    "dependencies",
    "devops",
    "architecture",
    "frameworkSpecific",
    "testing",
    "documentation",
    "performance",
    "aiSpecific",
    "accessibility",
    "observability",
    "dataQuality",
    "repoHealth",
)

PACKAGE_CATEGORIES: Tuple[str, ...] = (
    "ml",
    "testing",
    "automation",
    "data",
    "ui",
    "infra",
    "blockchain",
    "realtime",
    "custom",
)

RISK_LEVELS: Tuple[str, ...] = ("low", "medium", "high", "critical")

EFFORT_LEVELS: Tuple[str, ...] = ("low", "medium", "high")


def severity_rank(severity: str) -> int:
    """Return a sortable rank where larger means more severe."""
    try:
        return len(SEVERITIES) - SEVERITIES.index(severity)
    except ValueError:
        return 0


@dataclass(frozen=True)
class DetectedPackage:
    """Dependency matched against the curated niche package table."""

    name: str
    category: str
    risk_level: str
    version: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "name": self.name,
            "category": self.category,
            "riskLevel": self.risk_level,
        }
        if self.version is not None:
            data["version"] = self.version
        return data


@dataclass(frozen=True)
class RepoContext:
    """Immutable snapshot of a single repository scan pass."""

    path: str
    package_json: Optional[Dict[str, Any]] = None
    requirements_txt: Optional[str] = None
    package_json_paths: Tuple[str, ...] = ()
    requirements_paths: Tuple[str, ...] = ()
    has_dockerfile: bool = False
    has_ci: bool = False
    frameworks: Tuple[str, ...] = ()
    languages: Tuple[str, ...] = ()
    detected_packages: Tuple[DetectedPackage, ...] = ()
    files: Tuple[str, ...] = ()

    def abspath(self, relative: str) -> str:
        return os.path.join(self.path, *relative.split("/"))

    def has_language(self, *languages: str) -> bool:
        return any(language in self.languages for language in languages)

    def has_framework(self, *frameworks: str) -> bool:
        return any(framework in self.frameworks for framework in frameworks)

    def dependencies(self) -> Dict[str, Any]:
        """Return root package.json runtime and dev dependencies merged."""
        if not self.package_json:
            return {}
        merged: Dict[str, Any] = {}
        for key in ("dependencies", "devDependencies"):
            section = self.package_json.get(key)
            if isinstance(section, dict):
                merged.update(section)
        return merged

    def scripts(self) -> Dict[str, Any]:
        if not self.package_json:
            return {}
        scripts = self.package_json.get("scripts")
        return scripts if isinstance(scripts, dict) else {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "packageJson": self.package_json,
            "requirementsTxt": self.requirements_txt,
            "packageJsonPaths": list(self.package_json_paths),
            "requirementsPaths": list(self.requirements_paths),
            "hasDockerfile": self.has_dockerfile,
            "hasCI": self.has_ci,
            "frameworks": list(self.frameworks),
            "languages": list(self.languages),
            "detectedPackages": [package.to_dict() for package in self.detected_packages],
        }


@dataclass
class CheckOutcome:
    """Value returned by an individual checker function."""

    passed: bool
    message: Optional[str] = None
    error: Optional[str] = None
    auto_fixable: Optional[bool] = None


@dataclass(frozen=True)
class CheckResult:
    """Outcome of one check stamped with the check's metadata."""

    check_id: str
    title: str
    category: str
    severity: str
    passed: bool
    message: Optional[str] = None
    error: Optional[str] = None
    auto_fixable: Optional[bool] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "checkId": self.check_id,
            "title": self.title,
            "category": self.category,
            "severity": self.severity,
            "passed": self.passed,
            "message": self.message,
            "error": self.error,
            "autoFixable": self.auto_fixable,
        }


@dataclass(frozen=True)
class QuickWin:
    """Failing non-blocker check surfaced with a remediation estimate."""

    check: CheckResult
    effort: str
    points: int
    instructions: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "check": self.check.to_dict(),
            "effort": self.effort,
            "points": self.points,
            "instructions": self.instructions,
        }


@dataclass(frozen=True)
class ScanReport:
    """Terminal artifact of a scan."""

    score: int
    results: Tuple[CheckResult, ...]
    timestamp: str
    repo_path: str
    category_scores: Mapping[str, int] = field(default_factory=dict)
    production_ready: bool = False
    readiness_reasons: Tuple[str, ...] = ()
    quick_wins: Tuple[QuickWin, ...] = ()

    def failed(self) -> List[CheckResult]:
        return [result for result in self.results if not result.passed]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "results": [result.to_dict() for result in self.results],
            "timestamp": self.timestamp,
            "repoPath": self.repo_path,
            "categoryScores": dict(self.category_scores),
            "productionReady": self.production_ready,
            "readinessReasons": list(self.readiness_reasons),
            "quickWins": [win.to_dict() for win in self.quick_wins],
        }

    def to_json(self, *, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)
