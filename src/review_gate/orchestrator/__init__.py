"""Orchestrator components for Review Gate."""

from review_gate.orchestrator.correlator import FileCorrelator
from review_gate.orchestrator.post_job import ReviewPostJob, group_by_file
from review_gate.orchestrator.templating import create_issue_message, create_message

__all__ = [
    "FileCorrelator",
    "ReviewPostJob",
    "create_issue_message",
    "create_message",
    "group_by_file",
]
