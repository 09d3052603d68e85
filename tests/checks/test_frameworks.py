"""Framework, accessibility, data and repository layout checks."""

from __future__ import annotations

import pytest

from tests._fixtures.repo_builder import RepoBuilder


@pytest.mark.parametrize("check_id", ["fw-001", "fw-002", "fw-003", "fw-004", "fw-005"])
def test_framework_checks_skip_when_framework_absent(
    repo_builder: RepoBuilder, run, check_id: str
) -> None:
    repo_builder.write({"main.go": "package main\n"})

    outcome = run(check_id, repo_builder.context())

    assert outcome.passed is True
    assert "not detected" in outcome.message


def test_next_config_required_for_next_projects(repo_builder: RepoBuilder, run) -> None:
    repo_builder.write_json("package.json", {"dependencies": {"next": "14.1.0"}})
    assert run("fw-001", repo_builder.context()).passed is False

    repo_builder.write({"next.config.mjs": "export default {};\n"})
    assert run("fw-001", repo_builder.context()).message == (
        "Next.js configuration found (next.config.mjs)"
    )


def test_dangerously_set_inner_html(repo_builder: RepoBuilder, run) -> None:
    repo_builder.write_json("package.json", {"dependencies": {"react": "^18.2.0"}})
    repo_builder.write(
        {"src/Bio.tsx": "export const Bio = ({ html }) => <div dangerouslySetInnerHTML={{ __html: html }} />;\n"}
    )

    outcome = run("fw-002", repo_builder.context())

    assert outcome.passed is False
    assert outcome.message == "dangerouslySetInnerHTML used in: src/Bio.tsx"


def test_express_requires_helmet(repo_builder: RepoBuilder, run) -> None:
    repo_builder.write_json("package.json", {"dependencies": {"express": "^4.19.0"}})
    assert run("fw-003", repo_builder.context()).passed is False

    repo_builder.write_json(
        "package.json", {"dependencies": {"express": "^4.19.0", "helmet": "^7.0.0"}}
    )
    assert run("fw-003", repo_builder.context()).passed


def test_django_debug_setting(repo_builder: RepoBuilder, run) -> None:
    repo_builder.write(
        {
            "requirements.txt": "Django==5.0\n",
            "site/settings.py": "import os\nDEBUG = True\n",
            "site/prod.py": "DEBUG = os.environ.get('DEBUG') == '1'\n",
        }
    )

    outcome = run("fw-004", repo_builder.context())

    assert outcome.passed is False
    assert outcome.message == "DEBUG = True hard-coded in: site/settings.py"


def test_flask_debug_server(repo_builder: RepoBuilder, run) -> None:
    repo_builder.write(
        {
            "requirements.txt": "flask\n",
            "app.py": "if __name__ == '__main__':\n    app.run(host='0.0.0.0', debug=True)\n",
        }
    )

    assert run("fw-005", repo_builder.context()).passed is False


def test_images_without_alt_text(repo_builder: RepoBuilder, run) -> None:
    repo_builder.write(
        {
            "public/index.html": '<img src="logo.png">\n<img alt="" src="spacer.gif">\n',
            "src/Card.jsx": 'export const Card = () => <img src={photo} className="c" />;\n',
            "src/Ok.tsx": 'export const Ok = () => <img src={p} alt="Profile" />;\n',
        }
    )

    outcome = run("a11y-001", repo_builder.context())

    assert outcome.passed is False
    assert outcome.message == "2 <img> elements without alt text in: public/index.html, src/Card.jsx"


def test_alt_text_skips_without_markup(repo_builder: RepoBuilder, run) -> None:
    repo_builder.write({"main.py": "print('hi')\n"})

    assert run("a11y-001", repo_builder.context()).message.startswith("No markup")


def test_large_data_files(repo_builder: RepoBuilder, run) -> None:
    assert run("data-001", repo_builder.context()).passed

    repo_builder.write({"data/small.csv": "a,b\n1,2\n"})
    assert run("data-001", repo_builder.context()).message == (
        "1 data files detected, none larger than 10MB"
    )

    repo_builder.write_bytes("data/big.parquet", 10 * 1024 * 1024 + 1)
    outcome = run("data-001", repo_builder.context())
    assert outcome.passed is False
    assert outcome.message == "Large data files committed: data/big.parquet (10MB)"


def test_repository_hygiene_files(repo_builder: RepoBuilder, run) -> None:
    context = repo_builder.context()
    for check_id in ("repo-001", "repo-010", "repo-020", "arch-001"):
        assert run(check_id, context).passed is False

    repo_builder.write(
        {
            "requirements.txt": "requests\n",
            "LICENSE.md": "MIT\n",
            "CHANGES.md": "## 1.0.0\n",
            "src/app.py": "x = 1\n",
        }
    )
    context = repo_builder.context()
    for check_id in ("repo-001", "repo-010", "repo-020", "arch-001"):
        assert run(check_id, context).passed
