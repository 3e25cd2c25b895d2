"""Loader for static-analysis issues reports.

The report is the JSON written by a SonarQube scanner in issues mode::

    {
      "issues": [
        {"component": "proj:src/Foo.java", "line": 12, "severity": "MAJOR",
         "rule": "java:S1234", "message": "...", "isNew": true}
      ],
      "components": [
        {"key": "proj:src/Foo.java", "path": "src/Foo.java"}
      ]
    }
"""

import json
import logging
from pathlib import Path
from typing import Any

from review_gate.models.findings import FileRef, Finding

logger = logging.getLogger(__name__)

# Component qualifiers that never denote a single file
DIRECTORY_QUALIFIERS = frozenset({"DIR", "TRK", "BRC", "VW", "SVW", "APP"})


class ReportError(Exception):
    """Raised when an analysis report cannot be read."""

    pass


def _file_ref(component: dict[str, Any], base_dir: Path | None) -> FileRef | None:
    path = component.get("path")
    if not path:
        return None

    if component.get("qualifier") in DIRECTORY_QUALIFIERS:
        return FileRef(path=path, is_file=False)
    if base_dir is not None:
        return FileRef(path=path, is_file=(base_dir / path).is_file())
    return FileRef(path=path)


def _component_path_from_key(key: str) -> str | None:
    """Fallback for reports without components: "project:path/to/File"."""
    if ":" not in key:
        return None
    return key.split(":", 1)[1] or None


def parse_report(data: dict[str, Any], base_dir: Path | None = None) -> list[Finding]:
    """Build findings from a decoded report.

    Args:
        data: Decoded report JSON
        base_dir: Optional analysis workspace, used to check that paths are files

    Returns:
        Findings in report order

    Raises:
        ReportError: If the report has no issues list or an issue is malformed
    """
    issues = data.get("issues")
    if not isinstance(issues, list):
        raise ReportError("Report has no 'issues' list")

    refs: dict[str, FileRef | None] = {}
    for component in data.get("components", []):
        key = component.get("key")
        if key:
            refs[key] = _file_ref(component, base_dir)

    findings = []
    for issue in issues:
        if not isinstance(issue, dict):
            raise ReportError(f"Invalid issue {issue!r}: not a JSON object")
        key = issue.get("component", "")
        if key in refs:
            file_ref = refs[key]
        else:
            path = _component_path_from_key(key)
            file_ref = _file_ref({"path": path}, base_dir) if path else None

        line = issue.get("line")
        try:
            finding = Finding(
                file=file_ref,
                line=int(line) if line else None,
                severity=str(issue.get("severity", "")),
                rule_key=str(issue.get("rule", "")),
                message=str(issue.get("message", "")),
                is_new=bool(issue.get("isNew", False)),
            )
        except (TypeError, ValueError) as e:
            raise ReportError(f"Invalid issue {issue!r}: {e}") from e
        findings.append(finding)

    logger.info(f"Loaded {len(findings)} issues from report")
    return findings


def load_report(report_path: Path, base_dir: Path | None = None) -> list[Finding]:
    """Read findings from a report file.

    Raises:
        ReportError: If the file is missing or is not a valid report
    """
    try:
        with open(report_path) as f:
            data = json.load(f)
    except OSError as e:
        raise ReportError(f"Could not read report {report_path}: {e}") from e
    except ValueError as e:
        raise ReportError(f"Report {report_path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ReportError(f"Report {report_path} is not a JSON object")
    return parse_report(data, base_dir)
