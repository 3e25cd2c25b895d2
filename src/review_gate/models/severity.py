"""Severity scale shared by findings, comments and the vote threshold."""

import logging
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)

UNKNOWN = "UNKNOWN"
UNKNOWN_VALUE = -1


class Severity(Enum):
    """Severity levels reported by the analysis engine, lowest first.

    The ordinal of a level is its position in this declaration, so
    INFO=0 and BLOCKER=4.
    """

    INFO = "INFO"
    MINOR = "MINOR"
    MAJOR = "MAJOR"
    CRITICAL = "CRITICAL"
    BLOCKER = "BLOCKER"

    @property
    def rank(self) -> int:
        """Ordinal of this level in the scale."""
        return _LEVELS.index(self)


_LEVELS = list(Severity)


@dataclass(frozen=True)
class Resolved:
    """A severity name that maps to a real level."""

    rank: int
    level: Severity


class Unknown:
    """Result for a severity name that is not part of the scale.

    It has no rank; callers decide what an unknown level means for them.
    """

    def __repr__(self) -> str:
        return "UNKNOWN_RANK"


UNKNOWN_RANK = Unknown()


def level_to_rank(name: str) -> Resolved | Unknown:
    """Map a severity name to its ordinal.

    Args:
        name: Severity name, e.g. "MAJOR"

    Returns:
        Resolved(rank, level) or UNKNOWN_RANK when the name is not recognized
    """
    try:
        level = Severity[name]
    except (KeyError, TypeError):
        logger.warning(f"Cannot convert severity {name!r} to a rank, using {UNKNOWN}")
        return UNKNOWN_RANK

    result = Resolved(rank=level.rank, level=level)
    logger.debug(f"{name} is converted to {result.rank}")
    return result


def rank_to_level(rank: int) -> str:
    """Map an ordinal back to its severity name, or UNKNOWN if out of range."""
    if isinstance(rank, int) and 0 <= rank < len(_LEVELS):
        name = _LEVELS[rank].value
        logger.debug(f"{rank} is converted to {name}")
        return name

    logger.warning(f"Cannot convert rank {rank!r} to a severity, using {UNKNOWN}")
    return UNKNOWN

