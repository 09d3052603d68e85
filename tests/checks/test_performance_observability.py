from __future__ import annotations

from tests._fixtures.repo_builder import RepoBuilder


def test_bundle_analysis_from_script_or_dependency(repo_builder: RepoBuilder, run) -> None:
    assert run("perf-001", repo_builder.context()).passed

    repo_builder.write_json("package.json", {"scripts": {"build": "vite build"}})
    assert run("perf-001", repo_builder.context()).passed is False

    repo_builder.write_json(
        "package.json", {"devDependencies": {"rollup-plugin-visualizer": "^5.0.0"}}
    )
    assert run("perf-001", repo_builder.context()).passed


def test_image_optimization_only_applies_with_images_or_next(
    repo_builder: RepoBuilder, run
) -> None:
    repo_builder.write({"src/index.ts": "export {};\n"})
    assert run("perf-002", repo_builder.context()).message.startswith("No Next.js project")

    repo_builder.write_bytes("public/logo.png", 10)
    assert run("perf-002", repo_builder.context()).passed is False

    repo_builder.write_json("package.json", {"dependencies": {"sharp": "^0.33.0"}})
    assert run("perf-002", repo_builder.context()).passed


def test_next_config_image_settings(repo_builder: RepoBuilder, run) -> None:
    repo_builder.write_json("package.json", {"dependencies": {"next": "14.0.0"}})
    assert run("perf-002", repo_builder.context()).passed is False

    repo_builder.write(
        {"next.config.js": "module.exports = { images: { remotePatterns: [] } };\n"}
    )
    assert run("perf-002", repo_builder.context()).passed


def test_code_splitting(repo_builder: RepoBuilder, run) -> None:
    repo_builder.write({"app.py": "import os\n"})
    assert run("perf-003", repo_builder.context()).passed

    repo_builder.write({"src/index.js": "import routes from './routes';\n"})
    assert run("perf-003", repo_builder.context()).passed is False

    repo_builder.write({"vite.config.ts": "export default { build: { dynamicImport: true } };\n"})
    assert run("perf-003", repo_builder.context()).passed


def test_dynamic_import_in_source(repo_builder: RepoBuilder, run) -> None:
    repo_builder.write({"src/App.jsx": "const Page = React.lazy(() => import('./Page'));\n"})

    assert run("perf-003", repo_builder.context()).passed


def test_caching_patterns(repo_builder: RepoBuilder, run) -> None:
    repo_builder.write({"svc/views.py": "def index():\n    return 'ok'\n"})
    assert run("perf-004", repo_builder.context()).passed is False

    repo_builder.write(
        {"svc/lookup.py": "from functools import lru_cache\n\n@lru_cache\ndef f():\n    return 1\n"}
    )
    assert run("perf-004", repo_builder.context()).passed


def test_monitoring_dependency(repo_builder: RepoBuilder, run) -> None:
    repo_builder.write_json("package.json", {"dependencies": {"express": "^4.0.0"}})
    assert run("perf-005", repo_builder.context()).passed is False

    repo_builder.write_json("package.json", {"dependencies": {"web-vitals": "^3.0.0"}})
    assert run("perf-005", repo_builder.context()).passed


def test_logging_from_library_or_source(repo_builder: RepoBuilder, run) -> None:
    repo_builder.write({"src/math.ts": "export const add = (a: number, b: number) => a + b;\n"})
    assert run("obs-001", repo_builder.context()).passed is False

    repo_builder.write({"src/main.py": "import logging\nlogging.getLogger(__name__)\n"})
    assert run("obs-001", repo_builder.context()).passed


def test_logging_library_dependency(repo_builder: RepoBuilder, run) -> None:
    repo_builder.write_json("package.json", {"dependencies": {"winston": "^3.0.0"}})

    assert run("obs-001", repo_builder.context()).passed


def test_health_endpoint(repo_builder: RepoBuilder, run) -> None:
    repo_builder.write({"src/math.ts": "export const add = (a: number, b: number) => a + b;\n"})
    assert run("obs-002", repo_builder.context()).passed is False

    repo_builder.write({"src/routes.ts": "router.get('/healthz', handler);\n"})
    assert run("obs-002", repo_builder.context()).passed


def test_metrics_configuration(repo_builder: RepoBuilder, run) -> None:
    assert run("obs-003", repo_builder.context()).passed

    repo_builder.write_json("package.json", {"dependencies": {"express": "^4.0.0"}})
    assert run("obs-003", repo_builder.context()).passed is False

    repo_builder.write({"deploy/monitoring.yml": "prometheus:\n  scrape_interval: 15s\n"})
    assert run("obs-003", repo_builder.context()).passed
