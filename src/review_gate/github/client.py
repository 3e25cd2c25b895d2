"""GitHub pull request facade."""

import logging
import re
from typing import Any

from github import Github
from github.File import File
from github.GithubException import GithubException
from github.PullRequest import PullRequest

from review_gate.facade import ReviewFacade, ReviewSystemError
from review_gate.models.review import ReviewInput, ReviewLineComment

logger = logging.getLogger(__name__)

# Diff-style prefixes GitHub users often keep in analysis paths
DIFF_PREFIXES = ("a/", "b/")

# "@@ -12,7 +14,9 @@": start and length of the hunk on the new side
_HUNK_HEADER = re.compile(r"^@@ -\d+(?:,\d+)? \+(\d+)(?:,(\d+))? @@", re.MULTILINE)


def diff_lines(patch: str | None) -> set[int]:
    """New-side line numbers covered by the hunks of a unified diff patch.

    GitHub leaves the patch out for binary and very large files; no line of
    such a file can take an inline comment.
    """
    lines: set[int] = set()
    for match in _HUNK_HEADER.finditer(patch or ""):
        start = int(match.group(1))
        length = int(match.group(2)) if match.group(2) is not None else 1
        lines.update(range(start, start + length))
    return lines


def vote_to_event(value: int, allow_approve: bool = True) -> str:
    """Map a numeric vote to a GitHub review event.

    Args:
        value: Vote chosen by the post job
        allow_approve: Whether APPROVE may be used (not in GitHub Actions)

    Returns:
        APPROVE, REQUEST_CHANGES or COMMENT
    """
    if value < 0:
        return "REQUEST_CHANGES"
    if value > 0 and allow_approve:
        return "APPROVE"
    return "COMMENT"


class GitHubReviewFacade(ReviewFacade):
    """Posts reviews to a GitHub pull request."""

    NAME = "github"

    def __init__(
        self,
        token: str,
        repo: str,
        pr_number: int,
        base_url: str | None = None,
        path_prefix: str = "",
        allow_approve: bool = True,
    ) -> None:
        """Initialize the GitHub facade.

        Args:
            token: GitHub personal access token or app token
            repo: Repository in "owner/name" format
            pr_number: Pull request number
            base_url: Optional base URL for GitHub Enterprise
            path_prefix: Prefix stripped by parse_file_name
            allow_approve: Whether positive votes may APPROVE the pull request
        """
        super().__init__(path_prefix=path_prefix)
        if base_url:
            self._gh = Github(token, base_url=base_url)
        else:
            self._gh = Github(token)
        self.repo = repo
        self.pr_number = pr_number
        self.allow_approve = allow_approve
        self._pr: PullRequest | None = None
        self._files: list[File] | None = None

    def get_pull_request(self) -> PullRequest:
        """Get the pull request under review, fetched once."""
        if self._pr is None:
            self._pr = self._gh.get_repo(self.repo).get_pull(self.pr_number)
        return self._pr

    def get_files(self) -> list[File]:
        """Get the changed files of the pull request, fetched once."""
        if self._files is None:
            self._files = list(self.get_pull_request().get_files())
        return self._files

    def list_files(self) -> list[str]:
        try:
            files = [f.filename for f in self.get_files()]
        except GithubException as e:
            raise ReviewSystemError(
                f"Could not list files of {self.repo}#{self.pr_number}: {e}"
            ) from e
        logger.debug(f"Files in PR #{self.pr_number}: {files}")
        return files

    def commentable_lines(self) -> dict[str, set[int]]:
        """New-side line numbers covered by each file's diff hunks."""
        return {f.filename: diff_lines(f.patch) for f in self.get_files()}

    def parse_file_name(self, path: str) -> str:
        """Normalize a path, also dropping a diff-style ``a/`` or ``b/`` prefix."""
        name = super().parse_file_name(path)
        for prefix in DIFF_PREFIXES:
            if name.startswith(prefix):
                return name[len(prefix) :]
        return name

    def build_review(
        self,
        review: ReviewInput,
        commentable: dict[str, set[int]] | None = None,
    ) -> tuple[str, str, list[dict[str, Any]]]:
        """Split the review into body, event and inline comments.

        Comments without a line cannot be placed inline and are listed in the
        body instead. So are comments on lines outside the diff, which GitHub
        would reject.

        Args:
            review: Finalized review
            commentable: Lines that can take inline comments, per file. None
                places every line comment inline.

        Returns:
            (body, event, comments)
        """
        vote = review.vote
        value, label = vote if vote else (0, "")

        inline: list[dict[str, Any]] = []
        file_notes: list[str] = []
        line_notes: list[str] = []
        for path, comments in review.comments.items():
            for comment in comments:
                line = comment.line if isinstance(comment, ReviewLineComment) else 0
                if line <= 0:
                    file_notes.append(f"- `{path}`: {comment.message}")
                elif commentable is None or line in commentable.get(path, ()):
                    inline.append({"path": path, "line": line, "body": comment.message})
                else:
                    line_notes.append(f"- `{path}` line {line}: {comment.message}")

        parts = [review.message or ""]
        if label:
            parts.append(f"**{label}: {value:+d}**")
        if file_notes:
            parts.append("\n".join(file_notes))
        if line_notes:
            parts.append("Outside the diff:\n" + "\n".join(line_notes))
        body = "\n\n".join(p for p in parts if p)

        return body, vote_to_event(value, self.allow_approve), inline

    def set_review(self, review: ReviewInput) -> None:
        try:
            body, event, comments = self.build_review(review, self.commentable_lines())
            logger.info(
                f"Posting review to PR #{self.pr_number}: {event}, {len(comments)} comments"
            )
            pr = self.get_pull_request()
            try:
                pr.create_review(body=body, event=event, comments=comments)
            except GithubException as e:
                if e.status != 422:
                    raise
                if "pending review" in str(e.data).lower():
                    logger.warning("User has a pending review, falling back to issue comment")
                    self._post_as_comment(pr, body)
                elif comments:
                    # Inline comments can fail if a line isn't in the diff
                    logger.warning(f"Inline comments rejected, moving them to the body: {e}")
                    body, event, _ = self.build_review(review, commentable={})
                    pr.create_review(body=body, event=event, comments=[])
                else:
                    raise
        except GithubException as e:
            raise ReviewSystemError(
                f"Could not post review to {self.repo}#{self.pr_number}: {e}"
            ) from e

    def _post_as_comment(self, pr: PullRequest, body: str) -> None:
        """Post the review body as a regular issue comment (fallback).

        Args:
            pr: Pull request object
            body: Comment body
        """
        comment_body = (
            f"⚠️ *Posted as comment because there is a pending review on this PR.*\n\n---\n\n{body}"
        )
        pr.create_issue_comment(comment_body)
        logger.info(f"Posted review as issue comment on PR #{pr.number}")
