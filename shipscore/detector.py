"""Repository context detection: manifests, frameworks, languages and niche packages."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from .constants import NICHE_PACKAGES
from .logging import get_logger
from .models import DetectedPackage, RepoContext
from .stores import CachedReader
from .walker import build_ignore_rules, detect_language

_LOGGER = get_logger("detector")

_CI_FILES = {
    ".gitlab-ci.yml",
    "azure-pipelines.yml",
    ".circleci",
    "Jenkinsfile",
    "bitbucket-pipelines.yml",
    ".travis.yml",
}

_PYTHON_MANIFESTS = {"requirements.txt", "pyproject.toml", "pipfile"}

# dependency name -> framework identifier
_NODE_FRAMEWORKS = (
    (("next",), "nextjs"),
    (("react",), "react"),
    (("remix",), "remix"),
    (("nuxt", "nuxt3"), "nuxt"),
    (("svelte", "@sveltejs/kit"), "sveltekit"),
    (("@nestjs/core",), "nestjs"),
    (("express",), "express"),
    (("fastify",), "fastify"),
    (("koa",), "koa"),
    (("react-native",), "react-native"),
    (("expo",), "expo"),
)

_MONOREPO_TOOLS = (("turbo", "turbo-repo"), ("nx", "nx-workspace"))

_PYTHON_FRAMEWORKS = ("django", "flask", "fastapi")

_REQUIREMENT_SPLIT = re.compile(r"==|>=|<=|~=|!=|>|<")


def analyze_repo(
    repo_path: str | os.PathLike[str],
    *,
    reader: CachedReader | None = None,
    ignore_paths: Sequence[str] = (),
    ignore_extensions: Sequence[str] = (),
) -> RepoContext:
    """Build a :class:`RepoContext` from a single walk of ``repo_path``.

    Missing or malformed manifests leave the matching fields empty; this
    function does not raise for an unreadable repository.
    """
    reader = reader or CachedReader()
    root = Path(repo_path)
    root_str = str(root)

    package_json = _as_mapping(reader.read_json(root / "package.json"))
    requirements_txt = reader.read_text(root / "requirements.txt")

    root_entries = reader.list_dir(root)
    has_dockerfile = any(name == "Dockerfile" and not is_dir for name, is_dir in root_entries)
    has_ci = any(
        (is_dir and name == ".github") or name in _CI_FILES for name, is_dir in root_entries
    )

    files = reader.walk(root, build_ignore_rules(ignore_paths), ignore_extensions)
    _LOGGER.debug("Walk of %s found %d files", root_str, len(files))

    package_json_paths: List[str] = []
    requirements_paths: List[str] = []
    for rel_path in files:
        base = rel_path.rsplit("/", 1)[-1].lower()
        if base == "package.json":
            package_json_paths.append(rel_path)
        elif base in _PYTHON_MANIFESTS:
            requirements_paths.append(rel_path)

    frameworks: List[str] = []

    def _add(name: str) -> None:
        if name not in frameworks:
            frameworks.append(name)

    if package_json is not None:
        _detect_node_frameworks(package_json, _add)
    for rel_path in package_json_paths:
        if rel_path == "package.json":
            continue
        nested = _as_mapping(reader.read_json(root / rel_path))
        if nested is not None:
            _detect_node_frameworks(nested, _add)

    if requirements_txt:
        _detect_python_frameworks(requirements_txt, _add)
    for rel_path in requirements_paths:
        if rel_path == "requirements.txt":
            continue
        text = reader.read_text(root / rel_path)
        if text:
            _detect_python_frameworks(text, _add)

    languages: List[str] = []
    for rel_path in files:
        language = detect_language(rel_path)
        if language and language not in languages:
            languages.append(language)

    context = RepoContext(
        path=root_str,
        package_json=package_json,
        requirements_txt=requirements_txt,
        package_json_paths=tuple(package_json_paths),
        requirements_paths=tuple(requirements_paths),
        has_dockerfile=has_dockerfile,
        has_ci=has_ci,
        frameworks=tuple(frameworks),
        languages=tuple(languages),
        detected_packages=tuple(detect_packages(package_json, requirements_txt)),
        files=tuple(files),
    )
    _LOGGER.debug(
        "Context for %s: languages=%s frameworks=%s packages=%d",
        root_str,
        ",".join(context.languages) or "-",
        ",".join(context.frameworks) or "-",
        len(context.detected_packages),
    )
    return context


def detect_packages(
    package_json: Optional[Dict[str, Any]], requirements_txt: Optional[str] = None
) -> List[DetectedPackage]:
    """Classify dependencies against the niche package table; first match wins."""
    detected: List[DetectedPackage] = []
    seen: set[str] = set()

    def _add(name: str, version: Optional[str]) -> None:
        key = name.lower()
        niche = NICHE_PACKAGES.get(key)
        if niche is None or key in seen:
            return
        seen.add(key)
        category, risk_level = niche
        detected.append(
            DetectedPackage(name=key, category=category, risk_level=risk_level, version=version)
        )

    if package_json is not None:
        for section in ("dependencies", "devDependencies"):
            deps = package_json.get(section)
            if not isinstance(deps, dict):
                continue
            for name, version in deps.items():
                _add(str(name), str(version) if version is not None else None)

    if requirements_txt:
        for name, version in parse_requirements(requirements_txt):
            _add(name, version)

    return detected


def parse_requirements(text: str) -> List[tuple[str, Optional[str]]]:
    """Return ``(name, version)`` pairs from requirements.txt content."""
    packages: List[tuple[str, Optional[str]]] = []
    for line in text.splitlines():
        stripped = line.split("#", 1)[0].strip()
        if not stripped or stripped.startswith("-"):
            continue
        stripped = stripped.split(";", 1)[0].strip()
        parts = _REQUIREMENT_SPLIT.split(stripped, maxsplit=1)
        name = parts[0].split("[", 1)[0].strip()
        if not name:
            continue
        version = parts[1].split(",", 1)[0].strip() if len(parts) > 1 else None
        packages.append((name, version or None))
    return packages


def _detect_node_frameworks(package: Dict[str, Any], add: Callable[[str], None]) -> None:
    names = set(_dependency_names(package))

    for candidates, framework in _NODE_FRAMEWORKS:
        if any(candidate in names for candidate in candidates):
            add(framework)

    if "workspaces" in package or package.get("packages"):
        add("monorepo")

    for dependency, framework in _MONOREPO_TOOLS:
        if dependency in names:
            add(framework)


def _detect_python_frameworks(content: str, add: Callable[[str], None]) -> None:
    lower = content.lower()
    for framework in _PYTHON_FRAMEWORKS:
        if framework in lower:
            add(framework)


def _dependency_names(package: Dict[str, Any]) -> Iterable[str]:
    for section in ("dependencies", "devDependencies"):
        deps = package.get(section)
        if isinstance(deps, dict):
            for name, version in deps.items():
                if version:
                    yield str(name)


def _as_mapping(value: Any) -> Optional[Dict[str, Any]]:
    return value if isinstance(value, dict) else None


__all__ = ["analyze_repo", "detect_packages", "parse_requirements"]
