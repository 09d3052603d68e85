"""Documentation, devops and dependency checks."""

from __future__ import annotations

from tests._fixtures.repo_builder import HEALTHY_README, RepoBuilder


def test_missing_readme_fails_both_documentation_checks(repo_builder: RepoBuilder, run) -> None:
    context = repo_builder.context()

    presence = run("doc-001", context)
    length = run("doc-002", context)

    assert presence.passed is False
    assert presence.auto_fixable is True
    assert length.passed is False
    assert length.message == "README.md not found"


def test_short_readme_reports_word_count(repo_builder: RepoBuilder, run) -> None:
    repo_builder.write({"README.md": "# Title\n\nToo short.\n"})

    outcome = run("doc-002", repo_builder.context())

    assert outcome.passed is False
    assert outcome.message == "README contains 4 words"


def test_healthy_readme_passes(repo_builder: RepoBuilder, run) -> None:
    repo_builder.write({"README.md": HEALTHY_README})
    context = repo_builder.context()

    assert run("doc-001", context).passed
    assert run("doc-002", context).passed


def test_ci_and_docker_checks_follow_context(repo_builder: RepoBuilder, run) -> None:
    repo_builder.write({".github/workflows/ci.yml": "name: ci\n"})
    context = repo_builder.context()

    assert run("devops-001", context).passed
    assert run("devops-002", context).passed is False


def test_env_template_variants(repo_builder: RepoBuilder, run) -> None:
    assert run("devops-010", repo_builder.context()).passed is False

    repo_builder.write({".env.sample": "API_KEY=\n"})

    assert run("devops-010", repo_builder.context()).passed


def test_script_checks_skip_without_package_json(repo_builder: RepoBuilder, run) -> None:
    context = repo_builder.context()

    build = run("devops-020", context)
    assert build.passed is True
    assert build.message.startswith("No package.json found")


def test_script_checks_read_package_scripts(repo_builder: RepoBuilder, run) -> None:
    repo_builder.write_json("package.json", {"scripts": {"format": "prettier -w ."}})
    context = repo_builder.context()

    assert run("devops-020", context).passed is False
    assert run("devops-030", context).passed


def test_lockfile_detection(repo_builder: RepoBuilder, run) -> None:
    assert run("deps-001", repo_builder.context()).passed is False

    repo_builder.write({"poetry.lock": "# lock\n"})
    outcome = run("deps-001", repo_builder.context())

    assert outcome.passed
    assert outcome.message == "Dependency lockfile found (poetry.lock)"


def test_git_url_dependencies_are_listed(repo_builder: RepoBuilder, run) -> None:
    repo_builder.write_json(
        "package.json",
        {
            "dependencies": {"lib": "github:acme/lib", "ok": "^1.2.0"},
            "devDependencies": {"tool": "git+https://example.com/tool.git"},
        },
    )

    outcome = run("deps-010", repo_builder.context())

    assert outcome.passed is False
    assert outcome.message == "Git URL dependencies detected for: lib, tool"


def test_unstable_versions_are_flagged(repo_builder: RepoBuilder, run) -> None:
    repo_builder.write_json(
        "package.json",
        {"dependencies": {"a": "*", "b": "latest", "c": "^0.4.1", "d": "~1.0.0", "e": "10.0.0"}},
    )

    outcome = run("deps-020", repo_builder.context())

    assert outcome.passed is False
    assert outcome.message == "Potentially unstable versions detected for: a, b, c"
