"""Security checks: committed secrets, dangerous evaluation, CORS and auth hygiene.

The pattern tables are heuristics. They are expected to produce the occasional
false positive or negative and are kept as literal tables so they are easy to
audit and extend.
"""

from __future__ import annotations

import re
from typing import List

from ..models import BLOCKER, HIGH, CheckOutcome, RepoContext
from .base import (
    JS_EXTENSIONS,
    Check,
    CheckEnv,
    compile_all,
    files_with_extensions,
    iter_contents,
    not_applicable,
)

_ENV_FILE = re.compile(r"^\.env(\..+)?$", re.IGNORECASE)
_ENV_TEMPLATE_MARKERS = ("example", "template", "sample")

SECRET_PATTERNS = compile_all(
    r"ghp_[0-9A-Za-z]{20,}",  # GitHub personal access token
    r"sk-[A-Za-z0-9]{20,}",  # OpenAI-style key
    r"AIza[0-9A-Za-z\-_]{20,}",  # Google API key
    r"xox[baprs]-[0-9A-Za-z-]{10,}",  # Slack token
    r"-----BEGIN (RSA|DSA|EC) PRIVATE KEY-----",
    r"(?i)(aws_access_key_id|aws_secret_access_key)\s*[:=]\s*['\"]?[A-Za-z0-9/+=]{16,}",
    r"(?i)(api_key|apikey|secret_key)\s*[:=]\s*['\"]?[A-Za-z0-9_-]{16,}",
)
SECRET_EXTENSIONS = JS_EXTENSIONS + (".py", ".ipynb", ".yml", ".yaml", ".json", ".env")

EVAL_PATTERNS = compile_all(r"(?<![.\w])eval\s*\(", r"\bnew\s+Function\s*\(")

CORS_PATTERNS = compile_all(
    r"Access-Control-Allow-Origin\s*['\"`]?[:,]?\s*['\"`]\*",
    r"origin\s*:\s*['\"`]\*",
    r"allow_origins\s*=\s*\[\s*['\"]\*['\"]",
    r"CORS_(ORIGIN_ALLOW_ALL|ALLOW_ALL_ORIGINS)\s*=\s*True",
)

AUDIT_TOOLS = (
    "npm audit",
    "yarn audit",
    "pnpm audit",
    "snyk",
    "audit-ci",
    "npm-audit-resolver",
    "audit-resolve-core",
)
SECURITY_DEPENDENCIES = (
    "snyk",
    "audit-ci",
    "@sentry/cli",
    "helmet",
    "bcrypt",
    "jsonwebtoken",
    "passport",
    "cors",
)

VALIDATION_PATTERNS = compile_all(
    r"joi",
    r"yup",
    r"zod",
    r"validator",
    r"express-validator",
    r"sanitize",
    r"escape",
    r"htmlspecialchars",
    r"DOMPurify",
    r"bleach",
    r"pydantic",
    r"marshmallow",
    r"(?i)input.*validation",
    r"(?i)form.*validation",
    r"req\.body",
    r"req\.query",
    r"req\.params",
)
VALIDATION_EXTENSIONS = (".js", ".jsx", ".ts", ".tsx", ".py", ".php", ".java", ".go")
VALIDATION_FILE_LIMIT = 25

AUTH_LIBRARIES = (
    "passport",
    "jsonwebtoken",
    "bcrypt",
    "argon2",
    "next-auth",
    "@auth0/nextjs-auth0",
    "supertokens-node",
    "firebase-admin",
    "aws-amplify",
    "cognito",
    "keycloak",
    "auth0-js",
    "@okta/okta-react",
    "clerk",
)
AUTH_PATH_HINTS = ("auth", "login", "signin", "register", "middleware")
AUTH_CONTENT_HINTS = ("authenticate", "authorize", "login", "signin", "jwt", "token")
AUTH_FILE_LIMIT = 10


def _no_env_files(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    present: List[str] = []
    for rel_path in context.files:
        base = rel_path.rsplit("/", 1)[-1]
        if not _ENV_FILE.match(base):
            continue
        if any(marker in base.lower() for marker in _ENV_TEMPLATE_MARKERS):
            continue
        present.append(rel_path)

    return CheckOutcome(
        passed=not present,
        message=(
            "No committed runtime .env files detected in repository"
            if not present
            else f"Potential runtime .env files detected: {', '.join(present)}"
        ),
    )


def _pattern_offenders(
    context: RepoContext, env: CheckEnv, extensions, patterns
) -> List[str]:
    paths = files_with_extensions(context, extensions)
    return [
        rel_path
        for rel_path, content in iter_contents(context, env, paths)
        if any(pattern.search(content) for pattern in patterns)
    ]


def _no_secrets(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    offenders = _pattern_offenders(context, env, SECRET_EXTENSIONS, SECRET_PATTERNS)
    return CheckOutcome(
        passed=not offenders,
        message=(
            "No obvious secret tokens detected in source"
            if not offenders
            else f"Potential secrets detected in: {', '.join(offenders)}"
        ),
    )


def _no_wildcard_cors(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    offenders = _pattern_offenders(context, env, JS_EXTENSIONS + (".py",), CORS_PATTERNS)
    return CheckOutcome(
        passed=not offenders,
        message=(
            "No obvious CORS wildcard origins detected"
            if not offenders
            else f"Wildcard CORS origins detected in: {', '.join(offenders)}"
        ),
    )


def _no_eval(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    offenders = _pattern_offenders(context, env, JS_EXTENSIONS + (".py",), EVAL_PATTERNS)
    return CheckOutcome(
        passed=not offenders,
        message=(
            "No eval()/Function() usage detected"
            if not offenders
            else f"Potential eval()/Function() usage in: {', '.join(offenders)}"
        ),
    )


def _dependency_scanning(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    if context.package_json is None:
        return not_applicable("No package.json found; skipping dependency vulnerability check")

    deps = context.dependencies()
    scripts = context.scripts()
    has_audit_script = any(
        tool in f"{name} {command}".lower()
        for name, command in scripts.items()
        for tool in AUDIT_TOOLS
    )
    has_security_deps = any(deps.get(name) for name in SECURITY_DEPENDENCIES)

    passed = has_audit_script or has_security_deps
    return CheckOutcome(
        passed=passed,
        message=(
            "Security scanning tools or dependencies detected"
            if passed
            else "No dependency vulnerability scanning tools found"
        ),
    )


def _input_validation(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    paths = files_with_extensions(context, VALIDATION_EXTENSIONS, VALIDATION_FILE_LIMIT)
    found = any(
        any(pattern.search(content) for pattern in VALIDATION_PATTERNS)
        for _, content in iter_contents(context, env, paths)
    )
    return CheckOutcome(
        passed=found,
        message=(
            "Input validation or sanitization detected"
            if found
            else "No input validation or sanitization found"
        ),
    )


def _authentication(context: RepoContext, env: CheckEnv) -> CheckOutcome:
    if context.package_json is None:
        return not_applicable("No package.json found; skipping auth check")

    deps = context.dependencies()
    has_auth_libs = any(deps.get(name) for name in AUTH_LIBRARIES)

    auth_files = [
        path for path in context.files if any(hint in path for hint in AUTH_PATH_HINTS)
    ][:AUTH_FILE_LIMIT]
    has_implementation = any(
        any(hint in content for hint in AUTH_CONTENT_HINTS)
        for _, content in iter_contents(context, env, auth_files)
    )

    passed = has_auth_libs or has_implementation
    return CheckOutcome(
        passed=passed,
        message=(
            "Authentication/authorization libraries or implementation detected"
            if passed
            else "No authentication or authorization implementation found"
        ),
    )


CHECKS: List[Check] = [
    Check(
        id="sec-001",
        title="No obvious .env files committed",
        category="security",
        severity=BLOCKER,
        checker=_no_env_files,
        effort="low",
        remediation="Remove committed .env files, rotate the values they held and add them to .gitignore.",
    ),
    Check(
        id="sec-010",
        title="No obvious secrets or access tokens in source",
        category="security",
        severity=HIGH,
        checker=_no_secrets,
        remediation="Move credentials to environment variables or a secret manager and rotate exposed keys.",
    ),
    Check(
        id="sec-015",
        title="No obvious wildcard CORS configuration",
        category="security",
        severity=BLOCKER,
        checker=_no_wildcard_cors,
        remediation="Restrict allowed CORS origins to an explicit list of trusted domains.",
    ),
    Check(
        id="sec-020",
        title="No use of eval() or Function() in source",
        category="security",
        severity=BLOCKER,
        checker=_no_eval,
        remediation="Replace eval()/new Function() with explicit parsing or dispatch tables.",
    ),
    Check(
        id="sec-030",
        title="Dependency vulnerability scanning",
        category="security",
        severity=HIGH,
        checker=_dependency_scanning,
        effort="low",
        remediation="Add an audit step (npm audit, snyk or audit-ci) to scripts and CI.",
    ),
    Check(
        id="sec-040",
        title="Input validation and sanitization",
        category="security",
        severity=HIGH,
        checker=_input_validation,
        remediation="Validate request payloads with a schema library such as zod, joi or pydantic.",
    ),
    Check(
        id="sec-050",
        title="Authentication and authorization implementation",
        category="security",
        severity=HIGH,
        checker=_authentication,
        effort="high",
        remediation="Protect endpoints with an established authentication library and authorization checks.",
    ),
]
