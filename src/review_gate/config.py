"""Configuration loading and validation for Review Gate."""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from review_gate.models.severity import Severity

DEFAULT_MESSAGE = "Sonar review at ${sonar.host.url}"
DEFAULT_ISSUE_COMMENT = (
    "[${issue.isNew}] New: ${issue.ruleKey} Severity: ${issue.severity}, Message: ${issue.message}"
)

BACKENDS = ("github", "gerrit")

_ENV_VAR = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)\}")


@dataclass
class ReviewSettings:
    """Threshold, votes and templates used to build the review."""

    enabled: bool = True
    threshold: str = Severity.INFO.value
    vote_no_issue: int = 1
    vote_below_threshold: int = 1
    vote_above_threshold: int = -1
    label: str = "Code-Review"
    new_issues_only: bool = False
    message: str = DEFAULT_MESSAGE
    issue_comment: str = DEFAULT_ISSUE_COMMENT


@dataclass
class GitHubSettings:
    """GitHub pull request target."""

    token: str = ""
    base_url: str | None = None  # For GitHub Enterprise
    repo: str = ""
    pr_number: int = 0
    path_prefix: str = ""
    allow_approve: bool = True


@dataclass
class GerritSettings:
    """Gerrit change target."""

    url: str = ""
    change_id: str = ""
    revision_id: str = "current"
    username: str | None = None
    password: str | None = None
    path_prefix: str = ""
    timeout_seconds: int = 30


@dataclass
class Config:
    """Complete application configuration."""

    backend: str = "github"
    review: ReviewSettings = field(default_factory=ReviewSettings)
    properties: dict[str, str] = field(default_factory=dict)
    github: GitHubSettings = field(default_factory=GitHubSettings)
    gerrit: GerritSettings = field(default_factory=GerritSettings)


def load_config(config_path: Path | None = None) -> Config:
    """Load configuration from file and environment.

    Args:
        config_path: Path to config file (default: review-gate.yaml)

    Returns:
        Loaded configuration
    """
    # Find config file
    if config_path is None:
        config_path = Path("review-gate.yaml")

    # Load from file if exists
    raw_config: dict[str, Any] = {}
    if config_path.exists():
        with open(config_path) as f:
            raw_config = yaml.safe_load(f) or {}

    # Expand environment variables
    raw_config = _expand_env_vars(raw_config)

    return _parse_config(raw_config)


def _expand_env_vars(obj: Any) -> Any:
    """Recursively expand environment variables in config.

    Only whole values naming an upper-case variable (``${GITHUB_TOKEN}``) are
    expanded; message placeholders such as ``${issue.message}`` are kept.
    """
    if isinstance(obj, str):
        match = _ENV_VAR.fullmatch(obj)
        if match:
            return os.environ.get(match.group(1), "")
        return obj
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


def flatten_properties(obj: Any, prefix: str = "") -> dict[str, str]:
    """Flatten nested mappings into dotted keys with string values.

    ``{"sonar": {"host": {"url": "x"}}}`` becomes ``{"sonar.host.url": "x"}``.
    """
    flat: dict[str, str] = {}
    if isinstance(obj, dict):
        for key, value in obj.items():
            name = f"{prefix}.{key}" if prefix else str(key)
            flat.update(flatten_properties(value, name))
    elif obj is not None and prefix:
        if isinstance(obj, bool):
            flat[prefix] = "true" if obj else "false"
        else:
            flat[prefix] = str(obj)
    return flat


_TRUE_VALUES = ("true", "1", "yes", "on")
_FALSE_VALUES = ("false", "0", "no", "off")


def _as_bool(value: Any, default: bool) -> bool:
    """Coerce a YAML or environment value to a bool.

    Environment expansion always yields strings, so "false" must not be
    taken as truthy. An empty value (unset variable) keeps the default.
    """
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ValueError(f"Expected a boolean, got {value!r}")


def _parse_config(raw: dict[str, Any]) -> Config:
    """Parse raw config dict into Config object."""
    defaults = ReviewSettings()

    # Review settings
    review_raw = raw.get("review", {})
    review = ReviewSettings(
        enabled=_as_bool(review_raw.get("enabled"), defaults.enabled),
        threshold=str(review_raw.get("threshold", defaults.threshold)),
        vote_no_issue=int(review_raw.get("vote_no_issue", defaults.vote_no_issue)),
        vote_below_threshold=int(
            review_raw.get("vote_below_threshold", defaults.vote_below_threshold)
        ),
        vote_above_threshold=int(
            review_raw.get("vote_above_threshold", defaults.vote_above_threshold)
        ),
        label=review_raw.get("label", defaults.label),
        new_issues_only=_as_bool(review_raw.get("new_issues_only"), defaults.new_issues_only),
        message=review_raw.get("message", defaults.message),
        issue_comment=review_raw.get("issue_comment", defaults.issue_comment),
    )

    # GitHub config
    github_raw = raw.get("github", {})
    github = GitHubSettings(
        token=github_raw.get("token") or os.environ.get("GITHUB_TOKEN", ""),
        base_url=github_raw.get("base_url"),
        repo=github_raw.get("repo", ""),
        pr_number=int(github_raw.get("pr_number") or 0),
        path_prefix=github_raw.get("path_prefix", ""),
        allow_approve=_as_bool(github_raw.get("allow_approve"), True),
    )

    # Gerrit config
    gerrit_raw = raw.get("gerrit", {})
    gerrit = GerritSettings(
        url=gerrit_raw.get("url", ""),
        change_id=str(gerrit_raw.get("change_id", "")),
        revision_id=str(gerrit_raw.get("revision_id", "current")),
        username=gerrit_raw.get("username") or os.environ.get("GERRIT_USERNAME"),
        password=gerrit_raw.get("password") or os.environ.get("GERRIT_PASSWORD"),
        path_prefix=gerrit_raw.get("path_prefix", ""),
        timeout_seconds=gerrit_raw.get("timeout_seconds", 30),
    )

    return Config(
        backend=raw.get("backend", "github"),
        review=review,
        properties=flatten_properties(raw.get("properties", {})),
        github=github,
        gerrit=gerrit,
    )


def validate_config(config: Config) -> list[str]:
    """Validate configuration and return list of errors.

    Args:
        config: Configuration to validate

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []

    if config.review.threshold not in Severity.__members__:
        errors.append(
            f"Unknown severity threshold {config.review.threshold!r} "
            f"(expected one of {', '.join(Severity.__members__)})"
        )

    if config.backend not in BACKENDS:
        errors.append(f"Unknown backend {config.backend!r} (expected one of {', '.join(BACKENDS)})")

    if config.backend == "github":
        if not config.github.token:
            errors.append("Missing GitHub token (set GITHUB_TOKEN or github.token)")
        if not config.github.repo:
            errors.append("Missing GitHub repository (github.repo)")
        if config.github.pr_number < 1:
            errors.append("Missing GitHub pull request number (github.pr_number)")

    if config.backend == "gerrit":
        if not config.gerrit.url:
            errors.append("Missing Gerrit URL (gerrit.url)")
        if not config.gerrit.change_id:
            errors.append("Missing Gerrit change id (gerrit.change_id)")

    return errors
