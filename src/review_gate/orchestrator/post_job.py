"""Post job that turns analysis findings into a review and a vote."""

import logging
from collections.abc import Iterable, Mapping

from review_gate.config import ReviewSettings
from review_gate.facade import ReviewFacade, ReviewSystemError
from review_gate.models.findings import FileRef, Finding
from review_gate.models.review import ReviewInput, ReviewLineComment
from review_gate.models.severity import Unknown, level_to_rank
from review_gate.orchestrator.correlator import FileCorrelator
from review_gate.orchestrator.templating import create_issue_message, create_message

logger = logging.getLogger(__name__)


def group_by_file(findings: Iterable[Finding]) -> dict[FileRef, list[Finding]]:
    """Group findings by component, in first-seen order.

    Findings without a file location are left out.
    """
    groups: dict[FileRef, list[Finding]] = {}
    for finding in findings:
        if finding.file is None:
            continue
        groups.setdefault(finding.file, []).append(finding)
    return groups


class ReviewPostJob:
    """Correlates findings with the files under review and posts the result."""

    def __init__(
        self,
        settings: ReviewSettings,
        properties: Mapping[str, str],
        facade: ReviewFacade,
        dry_run: bool = False,
    ) -> None:
        """Initialize the post job.

        Args:
            settings: Threshold, votes and templates
            properties: Global template variables
            facade: Review system to read changed files from and post to
            dry_run: Build the review but do not post it
        """
        self.settings = settings
        self.properties = properties
        self.facade = facade
        self.dry_run = dry_run

    def execute(self, findings: Iterable[Finding]) -> ReviewInput | None:
        """Run one review pass over the findings.

        Errors from the review system are logged and never raised.

        Args:
            findings: Findings of the analysis run

        Returns:
            The finalized review, or None when the job is disabled or the
            changed files could not be fetched
        """
        if not self.settings.enabled:
            logger.info("Analysis has finished. Review posting is disabled. No actions taken.")
            return None

        review = ReviewInput()
        correlator = FileCorrelator(self.facade)

        try:
            for file_ref, issues in group_by_file(findings).items():
                self.decorate(file_ref, issues, correlator, review)
        except ReviewSystemError as e:
            logger.error(f"Error getting files under review: {e}")
            return None
        except Exception:
            logger.exception("Unexpected error while building the review")
            return None

        try:
            self.finalize(review)
            self.send(review)
        except ReviewSystemError as e:
            logger.error(f"Error sending review: {e}")
        except Exception:
            logger.exception("Unexpected error while sending the review")

        return review

    def decorate(
        self,
        file_ref: FileRef,
        issues: list[Finding],
        correlator: FileCorrelator,
        review: ReviewInput,
    ) -> None:
        """Add the comments for one analysis component to the review."""
        logger.debug(f"Decorate: {file_ref.path}")
        if not file_ref.is_file:
            logger.debug(f"{file_ref.path} is not a file")
            return

        filename = correlator.resolve(file_ref.path)
        if filename is None:
            return

        comments = self.comment_issues(issues)
        if comments:
            review.add_comments(filename, comments)

    def comment_issues(self, issues: list[Finding]) -> list[ReviewLineComment]:
        """Convert the findings of one file, dropping old ones if configured."""
        logger.info(f"Found {len(issues)} issues")
        comments = []
        for issue in issues:
            if self.settings.new_issues_only and not issue.is_new:
                logger.info(
                    f"Issue {issue.rule_key} is not new and only new ones should be commented"
                )
                continue
            comments.append(self.issue_to_comment(issue))
        return comments

    def issue_to_comment(self, issue: Finding) -> ReviewLineComment:
        comment = ReviewLineComment(
            message=create_issue_message(self.settings.issue_comment, self.properties, issue),
            line=issue.line or 0,
            severity=level_to_rank(issue.severity),
        )
        logger.debug(f"issue_to_comment {comment}")
        return comment

    def compute_vote(self, review: ReviewInput) -> int:
        """Pick the vote for the review against the configured threshold.

        An unrecognized threshold name cannot be compared against, so any
        review with comments gets the above-threshold vote.
        """
        settings = self.settings
        threshold = level_to_rank(settings.threshold)
        max_severity = review.max_severity
        logger.debug(
            f"Configured threshold {settings.threshold}, "
            f"max review level {max_severity.level.value if max_severity else '-'}"
        )

        if review.is_empty():
            logger.debug(f"No issues! Vote {settings.vote_no_issue} for label {settings.label}")
            return settings.vote_no_issue
        if isinstance(threshold, Unknown):
            logger.warning(
                f"Unknown threshold {settings.threshold!r}. Vote {settings.vote_above_threshold} "
                f"for label {settings.label}"
            )
            return settings.vote_above_threshold
        if max_severity is None or max_severity.rank < threshold.rank:
            logger.debug(
                f"Issues below threshold. Vote {settings.vote_below_threshold} "
                f"for label {settings.label}"
            )
            return settings.vote_below_threshold
        logger.debug(
            f"Issues above threshold. Vote {settings.vote_above_threshold} "
            f"for label {settings.label}"
        )
        return settings.vote_above_threshold

    def finalize(self, review: ReviewInput) -> None:
        """Set the summary message and the vote once all comments are in."""
        logger.info("Analysis has finished. Building the review.")
        review.set_message(create_message(self.settings.message, self.properties))
        logger.debug(f"Define message: {review.message}")
        logger.debug(f"Number of comments: {review.size()}")
        review.set_value_and_label(self.compute_vote(review), self.settings.label)

    def send(self, review: ReviewInput) -> None:
        if self.dry_run:
            logger.info(f"Dry run, not sending {review!r}")
            return
        logger.info(f"Sending review to {self.facade.NAME}")
        self.facade.set_review(review)
