"""GitHub integration for Review Gate."""

from review_gate.github.client import GitHubReviewFacade, diff_lines, vote_to_event

__all__ = [
    "GitHubReviewFacade",
    "diff_lines",
    "vote_to_event",
]
