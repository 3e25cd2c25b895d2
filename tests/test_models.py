"""Tests for data models."""

import logging

import pytest


class TestSeverityScale:
    """Tests for severity conversions."""

    def test_levels_are_ordered(self):
        """Test that ranks follow INFO < MINOR < MAJOR < CRITICAL < BLOCKER."""
        from review_gate.models.severity import Severity

        assert [s.rank for s in Severity] == [0, 1, 2, 3, 4]
        assert Severity.INFO.rank < Severity.BLOCKER.rank

    @pytest.mark.parametrize("name", ["INFO", "MINOR", "MAJOR", "CRITICAL", "BLOCKER"])
    def test_round_trip(self, name):
        """Test that every level converts to a rank and back."""
        from review_gate.models.severity import Resolved, level_to_rank, rank_to_level

        result = level_to_rank(name)

        assert isinstance(result, Resolved)
        assert rank_to_level(result.rank) == name

    def test_unknown_name_returns_sentinel(self, caplog):
        """Test that an unrecognized name is logged, not raised."""
        from review_gate.models.severity import UNKNOWN_RANK, Unknown, level_to_rank

        with caplog.at_level(logging.WARNING):
            result = level_to_rank("SEVERE")

        assert result is UNKNOWN_RANK
        assert isinstance(result, Unknown)
        assert not hasattr(result, "rank")
        assert "SEVERE" in caplog.text

    def test_names_are_case_sensitive(self):
        """Test that lower-case names are not recognized."""
        from review_gate.models.severity import UNKNOWN_RANK, level_to_rank

        assert level_to_rank("major") is UNKNOWN_RANK

    @pytest.mark.parametrize("rank", [-1, 5, 100])
    def test_out_of_range_rank(self, rank, caplog):
        """Test that out-of-range ranks map to UNKNOWN with a warning."""
        from review_gate.models.severity import UNKNOWN, rank_to_level

        with caplog.at_level(logging.WARNING):
            assert rank_to_level(rank) == UNKNOWN
        assert caplog.records

    def test_rank_to_level_names(self):
        """Test ranks used for display map back to names."""
        from review_gate.models.severity import Severity, level_to_rank, rank_to_level

        assert level_to_rank("CRITICAL").level is Severity.CRITICAL
        assert rank_to_level(2) == "MAJOR"


class TestFinding:
    """Tests for Finding model."""

    def test_finding_creation(self):
        """Test creating a basic finding."""
        from review_gate.models.findings import FileRef, Finding

        finding = Finding(
            file=FileRef("src/Foo.java"),
            line=15,
            severity="CRITICAL",
            rule_key="java:S2077",
            message="Make sure this SQL query is safe",
            is_new=True,
        )

        assert finding.file.path == "src/Foo.java"
        assert finding.file.is_file
        assert finding.has_location

    def test_finding_without_location(self):
        """Test a project-level finding."""
        from review_gate.models.findings import Finding

        finding = Finding(
            file=None, line=None, severity="INFO", rule_key="r", message="m", is_new=False
        )

        assert not finding.has_location

    def test_rejects_negative_line(self):
        """Test that negative line numbers are rejected."""
        from review_gate.models.findings import FileRef, Finding

        with pytest.raises(ValueError):
            Finding(file=FileRef("a.py"), line=-1, severity="INFO", rule_key="r", message="m")


class TestReviewInput:
    """Tests for the review aggregate."""

    def test_empty_review(self):
        """Test a review with no comments."""
        from review_gate.models.review import ReviewInput
        from review_gate.models.severity import UNKNOWN_VALUE

        review = ReviewInput()

        assert review.is_empty()
        assert review.size() == 0
        assert review.max_severity is None
        assert review.max_level_severity() == UNKNOWN_VALUE
        assert review.vote is None

    def test_add_comments_is_cumulative(self):
        """Test that two batches for one file are both kept, in order."""
        from review_gate.models.review import ReviewInput, ReviewLineComment
        from review_gate.models.severity import level_to_rank

        first = ReviewLineComment("A", line=1, severity=level_to_rank("INFO"))
        second = ReviewLineComment("B", line=2, severity=level_to_rank("MINOR"))

        review = ReviewInput()
        review.add_comments("src/Foo.java", [first])
        review.add_comments("src/Foo.java", [second])

        assert review.comments["src/Foo.java"] == [first, second]
        assert review.size() == 2

    def test_max_severity_never_decreases(self):
        """Test the running maximum over added comments."""
        from review_gate.models.review import ReviewInput, ReviewLineComment
        from review_gate.models.severity import Severity, level_to_rank

        def comment(name):
            return ReviewLineComment("x", line=1, severity=level_to_rank(name))

        review = ReviewInput()
        review.add_comments("a.py", [comment("MAJOR")])
        assert review.max_level_severity() == 2

        review.add_comments("b.py", [comment("BLOCKER")])
        assert review.max_level_severity() == 4

        review.add_comments("c.py", [comment("MINOR")])
        assert review.max_level_severity() == 4
        assert review.max_severity.level is Severity.BLOCKER

    def test_unknown_severity_does_not_count(self):
        """Test that comments with an unrecognized severity leave the maximum untouched."""
        from review_gate.models.review import ReviewInput, ReviewLineComment
        from review_gate.models.severity import UNKNOWN_RANK, UNKNOWN_VALUE, level_to_rank

        review = ReviewInput()
        review.add_comments("a.py", [ReviewLineComment("x", line=1, severity=UNKNOWN_RANK)])

        assert review.size() == 1
        assert review.max_severity is None
        assert review.max_level_severity() == UNKNOWN_VALUE

        info = ReviewLineComment("y", line=2, severity=level_to_rank("INFO"))
        review.add_comments("a.py", [info])
        assert review.max_level_severity() == 0

    def test_file_comments_do_not_count_towards_severity(self):
        """Test that plain file comments leave the maximum untouched."""
        from review_gate.models.review import ReviewFileComment, ReviewInput
        from review_gate.models.severity import UNKNOWN_VALUE

        review = ReviewInput()
        review.add_comments("a.py", [ReviewFileComment("general remark")])

        assert not review.is_empty()
        assert review.max_level_severity() == UNKNOWN_VALUE

    def test_vote_and_message_are_set_once(self):
        """Test that finalized fields cannot be overwritten."""
        from review_gate.models.review import ReviewInput, ReviewStateError

        review = ReviewInput()
        review.set_message("done")
        review.set_value_and_label(-1, "Code-Review")

        assert review.vote == (-1, "Code-Review")
        with pytest.raises(ReviewStateError):
            review.set_message("again")
        with pytest.raises(ReviewStateError):
            review.set_value_and_label(1, "Code-Review")

    def test_comments_are_immutable(self):
        """Test that comments cannot be changed after creation."""
        from dataclasses import FrozenInstanceError

        from review_gate.models.review import ReviewLineComment
        from review_gate.models.severity import level_to_rank

        comment = ReviewLineComment("x", line=3, severity=level_to_rank("MAJOR"))
        with pytest.raises(FrozenInstanceError):
            comment.line = 4

    def test_to_payload(self):
        """Test the wire form of a finalized review."""
        from review_gate.models.review import ReviewInput, ReviewLineComment
        from review_gate.models.severity import level_to_rank

        review = ReviewInput()
        review.add_comments(
            "src/Foo.java",
            [
                ReviewLineComment("on a line", line=7, severity=level_to_rank("MAJOR")),
                ReviewLineComment("on the file", line=0, severity=level_to_rank("MINOR")),
            ],
        )
        review.set_message("Sonar review")
        review.set_value_and_label(-1, "Code-Review")

        assert review.to_payload() == {
            "message": "Sonar review",
            "labels": {"Code-Review": -1},
            "comments": {
                "src/Foo.java": [
                    {"line": 7, "message": "on a line"},
                    {"message": "on the file"},
                ]
            },
        }
