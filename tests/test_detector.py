"""Tests for shipscore.detector."""

from __future__ import annotations

from pathlib import Path

from shipscore.detector import analyze_repo, detect_packages, parse_requirements
from shipscore.models import DetectedPackage
from tests._fixtures.repo_builder import RepoBuilder


def test_detects_manifests_ci_and_docker(repo_builder: RepoBuilder) -> None:
    repo_builder.write_json("package.json", {"dependencies": {"react": "^18.0.0"}})
    repo_builder.write(
        {
            "requirements.txt": "flask==3.0.0\n",
            "Dockerfile": "FROM python:3.12-slim\n",
            ".github/workflows/ci.yml": "name: ci\n",
            "src/app.tsx": "export const App = () => null;\n",
            "service/main.py": "print('ok')\n",
        }
    )

    context = repo_builder.context()

    assert context.package_json == {"dependencies": {"react": "^18.0.0"}}
    assert context.requirements_txt == "flask==3.0.0\n"
    assert context.has_dockerfile is True
    assert context.has_ci is True
    assert context.frameworks == ("react", "flask")
    assert set(context.languages) == {"typescript", "python"}
    assert context.path == str(repo_builder.path())


def test_react_does_not_imply_other_frameworks(repo_builder: RepoBuilder) -> None:
    repo_builder.write_json("package.json", {"dependencies": {"react": "^18.0.0"}})

    context = repo_builder.context()

    assert "react" in context.frameworks
    assert "nextjs" not in context.frameworks
    assert "express" not in context.frameworks


def test_monorepo_markers_and_nested_manifests(repo_builder: RepoBuilder) -> None:
    repo_builder.write_json(
        "package.json",
        {"workspaces": ["apps/*"], "devDependencies": {"turbo": "^1.10.0"}},
    )
    repo_builder.write_json("apps/web/package.json", {"dependencies": {"next": "14.0.0"}})
    repo_builder.write({"services/api/pyproject.toml": "[project]\ndependencies = ['fastapi']\n"})

    context = repo_builder.context()

    assert context.package_json_paths == ("apps/web/package.json", "package.json")
    assert context.requirements_paths == ("services/api/pyproject.toml",)
    assert set(context.frameworks) == {"monorepo", "turbo-repo", "nextjs", "fastapi"}


def test_ci_detection_accepts_root_ci_files(repo_builder: RepoBuilder) -> None:
    repo_builder.write({".gitlab-ci.yml": "stages: [test]\n"})
    assert repo_builder.context().has_ci is True


def test_dockerfile_must_be_at_root(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"infra/Dockerfile": "FROM alpine\n"})
    assert repo_builder.context().has_dockerfile is False


def test_noise_and_configured_ignores_are_skipped(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "src/index.js": "module.exports = {};\n",
            "node_modules/lib/index.js": "module.exports = {};\n",
            "vendor/lib.js": "module.exports = {};\n",
            "server.log": "started\n",
        }
    )

    context = repo_builder.context(ignore_paths=["vendor/"], ignore_extensions=[".log"])

    assert context.files == ("src/index.js",)


def test_malformed_manifests_degrade_to_empty(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"package.json": "{ not json"})

    context = repo_builder.context()

    assert context.package_json is None
    assert context.frameworks == ()
    assert context.detected_packages == ()
    assert context.package_json_paths == ("package.json",)


def test_missing_repository_yields_empty_context(tmp_path: Path) -> None:
    context = analyze_repo(tmp_path / "missing")

    assert context.files == ()
    assert context.package_json is None
    assert context.has_ci is False


def test_detect_packages_first_occurrence_wins() -> None:
    packages = detect_packages(
        {"dependencies": {"openai": "^4.0.0", "left-pad": "1.0.0"}},
        "openai==1.2.0\nplaywright>=1.40\n",
    )

    assert packages == [
        DetectedPackage(name="openai", category="ml", risk_level="critical", version="^4.0.0"),
        DetectedPackage(name="playwright", category="automation", risk_level="medium", version="1.40"),
    ]


def test_parse_requirements_handles_extras_markers_and_comments() -> None:
    text = """
    # pinned
    Django[argon2]==5.0 ; python_version >= "3.10"
    requests>=2.31,<3
    -r base.txt
    rich
    """

    assert parse_requirements(text) == [
        ("Django", "5.0"),
        ("requests", "2.31"),
        ("rich", None),
    ]
