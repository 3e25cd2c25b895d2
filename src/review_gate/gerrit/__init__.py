"""Gerrit integration for Review Gate."""

from review_gate.gerrit.client import GerritReviewFacade

__all__ = [
    "GerritReviewFacade",
]
