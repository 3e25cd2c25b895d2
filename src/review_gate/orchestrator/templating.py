"""Message templating for review comments and the review summary.

Templates use ``${name}`` placeholders where names may contain dots
(``${sonar.host.url}``, ``${issue.ruleKey}``). ``$${name}`` renders a
literal ``${name}``. Placeholders without a value are left untouched.
"""

import string
from collections import ChainMap
from collections.abc import Mapping
from typing import Any

from review_gate.models.findings import Finding

ISSUE_PREFIX = "issue"
ISSUE_SEPARATOR = "."
ISSUE_IS_NEW = "isNew"
ISSUE_RULE_KEY = "ruleKey"
ISSUE_SEVERITY = "severity"
ISSUE_MESSAGE = "message"


class _PlaceholderTemplate(string.Template):
    """string.Template that only recognizes the braced ``${...}`` form."""

    pattern = r"""
    \$(?:
        (?P<escaped>\$(?=\{))     |
        \{(?P<braced>[^{}$]+)\}   |
        (?P<named>(?!))           |
        (?P<invalid>)
    )
    """


def prefix_key(key: str, prefix: str = ISSUE_PREFIX) -> str:
    """Build a namespaced template key, e.g. ``issue.severity``."""
    return f"{prefix}{ISSUE_SEPARATOR}{key}"


def _render_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def issue_variables(finding: Finding) -> dict[str, str]:
    """Template variables exposed for a single finding."""
    return {
        prefix_key(ISSUE_IS_NEW): _render_value(finding.is_new),
        prefix_key(ISSUE_RULE_KEY): finding.rule_key,
        prefix_key(ISSUE_SEVERITY): finding.severity,
        prefix_key(ISSUE_MESSAGE): finding.message,
    }


def substitute(
    template: str,
    settings: Mapping[str, Any],
    overlay: Mapping[str, Any] | None = None,
) -> str:
    """Replace placeholders using the overlay first, then the settings.

    Args:
        template: Text containing ``${...}`` placeholders
        settings: Global settings (name -> value)
        overlay: Optional per-finding variables, which win over settings

    Returns:
        The rendered text
    """
    if overlay:
        variables = ChainMap(dict(overlay), dict(settings))
    else:
        variables = dict(settings)
    rendered = {key: _render_value(value) for key, value in variables.items()}
    return _PlaceholderTemplate(template).safe_substitute(rendered)


def create_issue_message(template: str, settings: Mapping[str, Any], finding: Finding) -> str:
    """Render a per-finding comment from the issue template."""
    return substitute(template, settings, issue_variables(finding))


def create_message(template: str, settings: Mapping[str, Any]) -> str:
    """Render the review summary, which only sees the global settings."""
    return substitute(template, settings)
