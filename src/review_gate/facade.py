"""Contract shared by the review-system clients."""

from abc import ABC, abstractmethod

from review_gate.models.review import ReviewInput


class ReviewSystemError(Exception):
    """Raised when the review system cannot list files or accept a review."""

    pass


class ReviewFacade(ABC):
    """Base class for review-system clients."""

    # Subclasses should override this
    NAME: str = "base"

    def __init__(self, path_prefix: str = "") -> None:
        """Initialize the facade.

        Args:
            path_prefix: Leading path segment the review system adds to (or the
                analysis engine keeps on) file names, stripped by parse_file_name
        """
        self.path_prefix = self._clean(path_prefix).rstrip("/")

    @abstractmethod
    def list_files(self) -> list[str]:
        """List the files under review, in review-system naming.

        Raises:
            ReviewSystemError: If the files cannot be fetched
        """

    @abstractmethod
    def set_review(self, review: ReviewInput) -> None:
        """Post the finalized review.

        Raises:
            ReviewSystemError: If the review system rejects the payload
        """

    def parse_file_name(self, path: str) -> str:
        """Normalize a path to the review system's naming convention.

        Args:
            path: File path as reported by either side

        Returns:
            Path with "/" separators, no leading "./" or "/", and the
            configured prefix removed
        """
        name = self._clean(path)
        if self.path_prefix and name.startswith(self.path_prefix + "/"):
            name = name[len(self.path_prefix) + 1 :]
        return name

    @staticmethod
    def _clean(path: str) -> str:
        name = path.replace("\\", "/")
        while name.startswith("./"):
            name = name[2:]
        return name.lstrip("/")
