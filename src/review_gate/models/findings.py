"""Finding models produced by the analysis engine."""

from dataclasses import dataclass


@dataclass(frozen=True)
class FileRef:
    """Handle to a component in the analysis workspace.

    Only components with is_file set are reviewed; directory-level or
    module-level components carry findings that are not attached to a
    changed file.
    """

    path: str
    is_file: bool = True


@dataclass(frozen=True)
class Finding:
    """A single static-analysis result (rule violation)."""

    file: FileRef | None
    line: int | None
    severity: str
    rule_key: str
    message: str
    is_new: bool = True

    def __post_init__(self) -> None:
        """Validate finding data."""
        if self.line is not None and self.line < 0:
            raise ValueError(f"line must be >= 0, got {self.line}")

    @property
    def has_location(self) -> bool:
        """Whether the finding points at a concrete component."""
        return self.file is not None
