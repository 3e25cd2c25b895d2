"""Pytest configuration and shared fixtures."""

import pytest

from review_gate.config import ReviewSettings
from review_gate.facade import ReviewFacade, ReviewSystemError
from review_gate.models.findings import FileRef, Finding


class FakeFacade(ReviewFacade):
    """In-memory review system recording what it is asked to do."""

    NAME = "fake"

    def __init__(
        self,
        files: list[str],
        path_prefix: str = "",
        list_error: bool = False,
        post_error: bool = False,
    ) -> None:
        super().__init__(path_prefix=path_prefix)
        self.files = files
        self.list_error = list_error
        self.post_error = post_error
        self.list_calls = 0
        self.posted = []

    def list_files(self) -> list[str]:
        self.list_calls += 1
        if self.list_error:
            raise ReviewSystemError("service unavailable")
        return list(self.files)

    def set_review(self, review) -> None:
        if self.post_error:
            raise ReviewSystemError("payload rejected")
        self.posted.append(review)


def make_finding(
    path: str | None = "src/Foo.java",
    line: int | None = 12,
    severity: str = "MAJOR",
    rule_key: str = "java:S1234",
    message: str = "Remove this unused variable",
    is_new: bool = True,
    is_file: bool = True,
) -> Finding:
    """Build a finding with sensible defaults."""
    file_ref = FileRef(path=path, is_file=is_file) if path is not None else None
    return Finding(
        file=file_ref,
        line=line,
        severity=severity,
        rule_key=rule_key,
        message=message,
        is_new=is_new,
    )


@pytest.fixture
def fake_facade() -> FakeFacade:
    """Review system with two changed files."""
    return FakeFacade(["src/Foo.java", "src/Bar.java"])


@pytest.fixture
def review_settings() -> ReviewSettings:
    """Settings with distinct votes so each outcome is recognizable."""
    return ReviewSettings(
        threshold="MAJOR",
        vote_no_issue=1,
        vote_below_threshold=0,
        vote_above_threshold=-1,
        label="Code-Review",
        message="Sonar review at ${sonar.host.url}",
        issue_comment="[${issue.severity}] ${issue.ruleKey}: ${issue.message}",
    )


@pytest.fixture
def properties() -> dict[str, str]:
    """Global template variables."""
    return {"sonar.host.url": "https://sonar.example.com"}
