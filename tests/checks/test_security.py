from __future__ import annotations

import pytest

from tests._fixtures.repo_builder import RepoBuilder

FAKE_GITHUB_TOKEN = "ghp_" + "a1B2" * 9


def test_committed_env_files_are_reported(repo_builder: RepoBuilder, run) -> None:
    repo_builder.write(
        {
            ".env.example": "API_KEY=\n",
            ".env.template": "API_KEY=\n",
            "config/.env.production": "API_KEY=real\n",
            ".envrc": "use nix\n",
        }
    )

    outcome = run("sec-001", repo_builder.context())

    assert outcome.passed is False
    assert outcome.message == "Potential runtime .env files detected: config/.env.production"


def test_env_templates_alone_pass(repo_builder: RepoBuilder, run) -> None:
    repo_builder.write({".env.example": "API_KEY=\n", ".env.sample": "API_KEY=\n"})

    assert run("sec-001", repo_builder.context()).passed


def test_secret_tokens_in_source_fail(repo_builder: RepoBuilder, run) -> None:
    repo_builder.write(
        {
            "src/client.ts": f'const token = "{FAKE_GITHUB_TOKEN}";\n',
            "src/safe.ts": "const token = process.env.GITHUB_TOKEN;\n",
            "notes.md": f"{FAKE_GITHUB_TOKEN}\n",
        }
    )

    outcome = run("sec-010", repo_builder.context())

    assert outcome.passed is False
    assert outcome.message == "Potential secrets detected in: src/client.ts"


def test_secret_assignment_in_yaml(repo_builder: RepoBuilder, run) -> None:
    repo_builder.write({"deploy/values.yaml": "api_key: abcdefghijklmnop1234\n"})

    assert run("sec-010", repo_builder.context()).passed is False


@pytest.mark.parametrize(
    ("path", "content"),
    [
        ("server.js", "res.setHeader('Access-Control-Allow-Origin', '*');\n"),
        ("app.ts", "app.use(cors({ origin: '*' }));\n"),
        ("main.py", 'app.add_middleware(CORSMiddleware, allow_origins=["*"])\n'),
        ("settings.py", "CORS_ALLOW_ALL_ORIGINS = True\n"),
    ],
)
def test_wildcard_cors_forms(repo_builder: RepoBuilder, run, path: str, content: str) -> None:
    repo_builder.write({path: content})

    assert run("sec-015", repo_builder.context()).passed is False


def test_explicit_cors_origin_passes(repo_builder: RepoBuilder, run) -> None:
    repo_builder.write({"app.ts": "app.use(cors({ origin: 'https://example.com' }));\n"})

    assert run("sec-015", repo_builder.context()).passed


@pytest.mark.parametrize(
    "content",
    ["const value = eval(input);\n", "const fn = new Function('a', 'return a');\n"],
)
def test_dynamic_evaluation_fails(repo_builder: RepoBuilder, run, content: str) -> None:
    repo_builder.write({"src/run.js": content})

    assert run("sec-020", repo_builder.context()).passed is False


def test_method_named_eval_is_not_flagged(repo_builder: RepoBuilder, run) -> None:
    repo_builder.write(
        {
            "train.py": "model.eval()\nvalue = ast.literal_eval(text)\n",
            "src/retrieval.js": "const ok = retrieval(data);\n",
        }
    )

    assert run("sec-020", repo_builder.context()).passed


def test_dependency_scanning(repo_builder: RepoBuilder, run) -> None:
    assert run("sec-030", repo_builder.context()).message.startswith("No package.json found")

    repo_builder.write_json("package.json", {"dependencies": {"express": "^4.0.0"}})
    assert run("sec-030", repo_builder.context()).passed is False

    repo_builder.write_json("package.json", {"scripts": {"audit": "npm audit --production"}})
    assert run("sec-030", repo_builder.context()).passed


def test_input_validation_detection(repo_builder: RepoBuilder, run) -> None:
    repo_builder.write({"api/handler.py": "def handle(payload):\n    return payload\n"})
    assert run("sec-040", repo_builder.context()).passed is False

    repo_builder.write({"api/models.py": "from pydantic import BaseModel\n"})
    assert run("sec-040", repo_builder.context()).passed


def test_authentication_from_library_or_code(repo_builder: RepoBuilder, run) -> None:
    repo_builder.write_json("package.json", {"dependencies": {"express": "^4.0.0"}})
    assert run("sec-050", repo_builder.context()).passed is False

    repo_builder.write({"src/auth/session.ts": "export function verify(jwt: string) {}\n"})
    assert run("sec-050", repo_builder.context()).passed
