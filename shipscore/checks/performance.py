"""Performance checks: bundle analysis, image optimisation, code splitting, caching, monitoring."""

from __future__ import annotations

import re
from typing import List

from ..models import LOW, MEDIUM, CheckOutcome, RepoContext
from .base import (
    JS_EXTENSIONS,
    Check,
    CheckEnv,
    files_with_extensions,
    iter_contents,
    not_applicable,
)

ANALYZE_SCRIPTS = ("analyze", "bundle-analyzer", "build:analyze", "webpack-bundle-analyzer")
ANALYZER_DEPENDENCIES = ("webpack-bundle-analyzer", "bundle-analyzer", "rollup-plugin-visualizer")

NEXT_CONFIGS = ("next.config.js", "next.config.ts", "next.config.mjs")
NEXT_IMAGE_KEYS = ("images", "loader", "domains", "remotePatterns")
IMAGE_OPTIMIZATION_PACKAGES = (
    "next-optimized-images",
    "next-image",
    "image-loader",
    "sharp",
    "imagemin",
    "webp-loader",
    "responsive-loader",
    "lqip-loader",
    "blurhash",
    "plaiceholder",
)
IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".gif", ".webp", ".svg", ".avif")

BUNDLER_CONFIGS = (
    "webpack.config.js",
    "webpack.config.ts",
    "webpack.config.mjs",
    "vite.config.js",
    "vite.config.ts",
    "vite.config.mjs",
    "rollup.config.js",
    "rollup.config.ts",
    "rollup.config.mjs",
) + NEXT_CONFIGS
SPLITTING_CONFIG_MARKERS = ("splitChunks", "codeSplit", "dynamicImport", "lazy", "import(")
DYNAMIC_IMPORT_MARKERS = ("import(", "React.lazy", "lazy(", "defineAsyncComponent")
DYNAMIC_IMPORT_FILE_LIMIT = 20

CACHING_EXTENSIONS = (".js", ".jsx", ".ts", ".tsx", ".py", ".go", ".rs", ".java")
CACHING_PATTERNS = (
    re.compile(r"cache-control", re.IGNORECASE),
    re.compile(r"etag", re.IGNORECASE),
    re.compile(r"last-modified", re.IGNORECASE),
    re.compile(r"expires", re.IGNORECASE),
    re.compile(r"max-age", re.IGNORECASE),
    re.compile(r"swr", re.IGNORECASE),
    re.compile(r"react-query"),
    re.compile(r"apollo-client"),
    re.compile(r"urql"),
    re.compile(r"useSWR"),
    re.compile(r"useQuery"),
    re.compile(r"localStorage"),
    re.compile(r"sessionStorage"),
    re.compile(r"indexedDB"),
    re.compile(r"redis"),
    re.compile(r"memcached"),
    re.compile(r"lru_cache"),
)
CACHING_FILE_LIMIT = 30
SERVER_PATH_HINTS = ("server", "api", "app")
SERVER_FILE_LIMIT = 10
SERVER_CACHE_HEADERS = ("Cache-Control", "ETag", "Last-Modified")

MONITORING_TOOLS = (
    "web-vitals",
    "@sentry/browser",
    "@sentry/node",
    "newrelic",
    "datadog",
    "bugsnag",
    "rollbar",
    "logrocket",
    "fullstory",
    "hotjar",
    "clarity",
    "analytics",
)


def _bundle_analysis(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    if context.package_json is None:
        return not_applicable("No package.json found; skipping bundle optimization check")
    scripts = context.scripts()
    has_script = any(name in scripts for name in ANALYZE_SCRIPTS)
    has_dependency = any(
        marker in name for name in context.dependencies() for marker in ANALYZER_DEPENDENCIES
    )
    passed = has_script or has_dependency
    return CheckOutcome(
        passed=passed,
        message=(
            "Bundle size optimization tools detected"
            if passed
            else "No bundle size optimization tools or scripts found"
        ),
    )


def _image_optimization(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    if not context.has_framework("nextjs") and not files_with_extensions(
        context, IMAGE_EXTENSIONS, limit=1
    ):
        return not_applicable("No Next.js project or image assets detected; skipping image optimization check")

    has_next_config = False
    for name in NEXT_CONFIGS:
        config = env.reader.read_text(context.abspath(name))
        if config and any(key in config for key in NEXT_IMAGE_KEYS):
            has_next_config = True
            break
    deps = context.dependencies()
    has_package = any(name in deps for name in IMAGE_OPTIMIZATION_PACKAGES)

    passed = has_next_config or has_package
    return CheckOutcome(
        passed=passed,
        message=(
            "Image optimization configuration detected"
            if passed
            else "No image optimization configuration found"
        ),
    )


def _code_splitting(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    if not context.has_language("typescript", "javascript"):
        return not_applicable("No JavaScript or TypeScript sources; skipping code splitting check")

    configured = any(
        any(marker in content for marker in SPLITTING_CONFIG_MARKERS)
        for _, content in iter_contents(context, env, BUNDLER_CONFIGS)
    )
    found = configured or any(
        any(marker in content for marker in DYNAMIC_IMPORT_MARKERS)
        for _, content in iter_contents(
            context, env, files_with_extensions(context, JS_EXTENSIONS, DYNAMIC_IMPORT_FILE_LIMIT)
        )
    )
    return CheckOutcome(
        passed=found,
        message=(
            "Code splitting configuration or usage detected"
            if found
            else "No code splitting configuration or dynamic imports found"
        ),
    )


def _caching(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    files = files_with_extensions(context, CACHING_EXTENSIONS)
    found = any(
        any(pattern.search(content) for pattern in CACHING_PATTERNS)
        for _, content in iter_contents(context, env, files[:CACHING_FILE_LIMIT])
    )
    if not found:
        server_files = [
            path for path in files if any(hint in path for hint in SERVER_PATH_HINTS)
        ][:SERVER_FILE_LIMIT]
        found = any(
            any(header in content for header in SERVER_CACHE_HEADERS)
            for _, content in iter_contents(context, env, server_files)
        )
    return CheckOutcome(
        passed=found,
        message="Caching strategies detected" if found else "No caching strategies found",
    )


def _monitoring(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    if context.package_json is None:
        return not_applicable("No package.json found; skipping performance monitoring check")
    deps = context.dependencies()
    found = any(deps.get(name) for name in MONITORING_TOOLS)
    return CheckOutcome(
        passed=found,
        message=(
            "Performance monitoring tools detected"
            if found
            else "No performance monitoring tools found"
        ),
    )


CHECKS: List[Check] = [
    Check(
        id="perf-001",
        title="Bundle size optimization present",
        category="performance",
        severity=MEDIUM,
        checker=_bundle_analysis,
        effort="low",
        remediation='Add a bundle analyzer (for example an "analyze" script with webpack-bundle-analyzer).',
    ),
    Check(
        id="perf-002",
        title="Image optimization configuration present",
        category="performance",
        severity=MEDIUM,
        checker=_image_optimization,
        remediation="Configure next/image (images in next.config) or an image pipeline such as sharp.",
    ),
    Check(
        id="perf-003",
        title="Code splitting configuration present",
        category="performance",
        severity=MEDIUM,
        checker=_code_splitting,
        remediation="Lazy-load heavy routes and components with dynamic import().",
    ),
    Check(
        id="perf-004",
        title="Caching strategies implemented",
        category="performance",
        severity=MEDIUM,
        checker=_caching,
        remediation="Set Cache-Control headers or add a data cache (SWR, React Query, Redis).",
    ),
    Check(
        id="perf-005",
        title="Performance monitoring tools present",
        category="performance",
        severity=LOW,
        checker=_monitoring,
        effort="low",
        remediation="Report web vitals or APM data (web-vitals, Sentry, New Relic).",
    ),
]
