"""Data models for Review Gate."""

from review_gate.models.findings import FileRef, Finding
from review_gate.models.review import (
    ReviewFileComment,
    ReviewInput,
    ReviewLineComment,
    ReviewStateError,
)
from review_gate.models.severity import (
    UNKNOWN,
    UNKNOWN_RANK,
    UNKNOWN_VALUE,
    Resolved,
    Severity,
    Unknown,
    level_to_rank,
    rank_to_level,
)

__all__ = [
    "FileRef",
    "Finding",
    "Resolved",
    "ReviewFileComment",
    "ReviewInput",
    "ReviewLineComment",
    "ReviewStateError",
    "Severity",
    "UNKNOWN",
    "UNKNOWN_RANK",
    "UNKNOWN_VALUE",
    "Unknown",
    "level_to_rank",
    "rank_to_level",
]
