"""Review payload models."""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from review_gate.models.severity import UNKNOWN_RANK, UNKNOWN_VALUE, Resolved, Unknown


class ReviewStateError(Exception):
    """Raised when a finalized review field is set a second time."""

    pass


@dataclass(frozen=True)
class ReviewFileComment:
    """A comment attached to a whole file."""

    message: str

    def to_payload(self) -> dict[str, Any]:
        """Wire form of the comment."""
        return {"message": self.message}


@dataclass(frozen=True)
class ReviewLineComment(ReviewFileComment):
    """A comment on a specific line, carrying the finding's resolved severity.

    Line 0 means the finding had no line; it is sent as a file comment.
    A severity of UNKNOWN_RANK never counts towards the review maximum.
    """

    line: int = 0
    severity: Resolved | Unknown = UNKNOWN_RANK

    def to_payload(self) -> dict[str, Any]:
        """Wire form of the comment. The severity is kept local."""
        payload: dict[str, Any] = {}
        if self.line > 0:
            payload["line"] = self.line
        payload["message"] = self.message
        return payload


class ReviewInput:
    """Aggregate of everything posted for one analysis run.

    A new instance is created for every run; comments accumulate per file
    and the message and vote are set once all findings are processed.
    """

    def __init__(self) -> None:
        self.comments: dict[str, list[ReviewFileComment]] = {}
        self.message: str | None = None
        self.labels: dict[str, int] = {}
        self._max_severity: Resolved | None = None
        self._vote_set = False

    def add_comments(self, file_id: str, comments: Iterable[ReviewFileComment]) -> None:
        """Append comments for a file, keeping earlier ones for the same file."""
        batch = list(comments)
        self.comments.setdefault(file_id, []).extend(batch)
        for comment in batch:
            if not isinstance(comment, ReviewLineComment):
                continue
            severity = comment.severity
            if isinstance(severity, Resolved) and (
                self._max_severity is None or severity.rank > self._max_severity.rank
            ):
                self._max_severity = severity

    def size(self) -> int:
        """Total number of comments across all files."""
        return sum(len(c) for c in self.comments.values())

    def is_empty(self) -> bool:
        """True if no comment was ever added."""
        return self.size() == 0

    @property
    def max_severity(self) -> Resolved | None:
        """Highest resolved severity among added comments, None if there is none."""
        return self._max_severity

    def max_level_severity(self) -> int:
        """Highest severity rank among added comments, UNKNOWN_VALUE if none."""
        if self._max_severity is None:
            return UNKNOWN_VALUE
        return self._max_severity.rank

    def set_message(self, message: str) -> None:
        if self.message is not None:
            raise ReviewStateError("Review message has already been set")
        self.message = message

    def set_value_and_label(self, value: int, label: str) -> None:
        if self._vote_set:
            raise ReviewStateError("Review vote has already been set")
        self.labels = {label: value}
        self._vote_set = True

    @property
    def vote(self) -> tuple[int, str] | None:
        """The (value, label) pair, or None before it is set."""
        if not self._vote_set:
            return None
        label, value = next(iter(self.labels.items()))
        return value, label

    def to_payload(self) -> dict[str, Any]:
        """Build the review body handed to the review system."""
        return {
            "message": self.message or "",
            "labels": dict(self.labels),
            "comments": {
                file_id: [c.to_payload() for c in comments]
                for file_id, comments in self.comments.items()
            },
        }

    def __repr__(self) -> str:
        return (
            f"ReviewInput(files={len(self.comments)}, comments={self.size()}, "
            f"max_severity={self.max_level_severity()}, labels={self.labels})"
        )
