"""Correlation of analysis file paths with the files under review."""

import logging

from review_gate.facade import ReviewFacade

logger = logging.getLogger(__name__)


class FileCorrelator:
    """Matches analysis paths to review-system file names for one run."""

    def __init__(self, facade: ReviewFacade) -> None:
        """Initialize the correlator.

        Args:
            facade: Review system supplying the changed files and path
                normalization
        """
        self.facade = facade
        self._changed_files: list[str] | None = None
        self._normalized_index: dict[str, str] | None = None

    @property
    def changed_files(self) -> list[str]:
        """Files under review, fetched on first access and cached.

        Raises:
            ReviewSystemError: If the first fetch fails
        """
        if self._changed_files is None:
            self._changed_files = list(self.facade.list_files())
            logger.debug(f"Modified files in review: {self._changed_files}")
        return self._changed_files

    def _index(self) -> dict[str, str]:
        """Map each normalized changed file back to its first original entry."""
        if self._normalized_index is None:
            index: dict[str, str] = {}
            for name in self.changed_files:
                index.setdefault(self.facade.parse_file_name(name), name)
            self._normalized_index = index
        return self._normalized_index

    def resolve(self, analysis_path: str) -> str | None:
        """Find the review-system name of an analysis path.

        Strategies, first match wins:
        1. the raw path is a changed file
        2. the normalized path is a changed file
        3. a changed file normalizes to the raw path

        Args:
            analysis_path: Path as reported by the analysis engine

        Returns:
            The changed-file entry to comment on, or None if the file is
            not under review
        """
        changed = self.changed_files

        if analysis_path in changed:
            logger.info(f"Found a match for {analysis_path}")
            return analysis_path

        parsed = self.facade.parse_file_name(analysis_path)
        if parsed in changed:
            logger.info(f"Found a match for {analysis_path} as {parsed}")
            return parsed

        logger.debug(f"Parse the review file list to look for {analysis_path}")
        match = self._index().get(analysis_path)
        if match is not None:
            logger.info(f"Found a match for {analysis_path} as {match}")
            return match

        logger.debug(f"File {analysis_path!r} was not found in the review list")
        logger.debug(f"Tried to find it as {analysis_path!r} and {parsed!r}")
        return None
