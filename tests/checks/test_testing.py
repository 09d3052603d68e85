from __future__ import annotations

import pytest

from tests._fixtures.repo_builder import RepoBuilder


@pytest.mark.parametrize(
    "path",
    [
        "src/__tests__/app.js",
        "src/app.test.tsx",
        "lib/util.test.js",
        "tests/test_api.py",
        "pkg/api_test.py",
    ],
)
def test_test_file_conventions(repo_builder: RepoBuilder, run, path: str) -> None:
    repo_builder.write({path: "// test\n"})

    assert run("test-001", repo_builder.context()).passed


def test_no_tests_is_a_failure(repo_builder: RepoBuilder, run) -> None:
    repo_builder.write({"src/app.ts": "export {};\n", "docs/testing.md": "# Testing\n"})

    outcome = run("test-001", repo_builder.context())

    assert outcome.passed is False
    assert outcome.message == "No test files detected"


def test_test_script_requires_package_json(repo_builder: RepoBuilder, run) -> None:
    assert run("test-010", repo_builder.context()).passed

    repo_builder.write_json("package.json", {"scripts": {"build": "tsc"}})
    assert run("test-010", repo_builder.context()).passed is False

    repo_builder.write_json("package.json", {"scripts": {"test": "vitest run"}})
    assert run("test-010", repo_builder.context()).passed


def test_python_tests_only_apply_to_python_sources(repo_builder: RepoBuilder, run) -> None:
    outcome = run("test-020", repo_builder.context())
    assert outcome.passed
    assert outcome.message.startswith("No Python source files detected")

    repo_builder.write({"app/main.py": "print('hi')\n"})
    assert run("test-020", repo_builder.context()).passed is False

    repo_builder.write({"tests/conftest.py": "\n"})
    assert run("test-020", repo_builder.context()).passed


def test_test_framework_dependency(repo_builder: RepoBuilder, run) -> None:
    repo_builder.write_json("package.json", {"devDependencies": {"mocha": "^10.0.0"}})
    assert run("test-030", repo_builder.context()).passed is False

    repo_builder.write_json("package.json", {"devDependencies": {"@playwright/test": "^1.40.0"}})
    assert run("test-030", repo_builder.context()).passed
