"""ID Generation System.

ULID-based ids for builder component nodes.

Features:
- ULIDs: Lexicographically sortable, timestamp-based
- Type-safe: NewType wrapper for component ids
- Prefixed: cmp_* ids are recognizable in logs and saved pages
- Injectable: the store takes any IdGenerator, so tests can run
  against a deterministic counter instead of wall-clock ULIDs
"""

import itertools
import os
from datetime import datetime
from typing import NewType, Protocol
from ulid import ULID

# ============================================================================
# Type-Safe ID Wrappers
# ============================================================================

ComponentID = NewType("ComponentID", str)
"""Component node identifier"""

# ============================================================================
# ID Prefixes (for debugging and type identification)
# ============================================================================


class Prefix:
    """ID prefix constants."""

    COMPONENT = "cmp"


# ============================================================================
# Generators
# ============================================================================


class IdGenerator(Protocol):
    """Protocol for id sources injected into the builder store."""

    def generate(self) -> str:
        """Return a new id, never returned before by this generator."""
        ...


class Generator:
    """ULID generator.

    Monotonic within the same millisecond, so ids generated during
    one burst of edits (paste of a large subtree) still sort in
    creation order.
    """

    def __init__(self, prefix: str | None = Prefix.COMPONENT) -> None:
        self.prefix = prefix

    def generate(self) -> str:
        """Generate a new (optionally prefixed) ULID."""
        raw = str(ULID())
        return f"{self.prefix}_{raw}" if self.prefix else raw

    @staticmethod
    def timestamp(id_str: str) -> int:
        """Extract timestamp (milliseconds) from ULID."""
        try:
            # Remove prefix if present
            ulid_str = id_str.split("_")[1] if "_" in id_str else id_str
            ulid = ULID.from_str(ulid_str)
            return int(ulid.timestamp * 1000)
        except (ValueError, IndexError):
            return 0


class SequentialGenerator:
    """Deterministic counter ids: ``cmp-1``, ``cmp-2``, ...

    Counter + process id keeps two generators in different processes
    from colliding when ``include_pid`` is set.
    """

    def __init__(self, prefix: str = Prefix.COMPONENT, start: int = 1, include_pid: bool = False) -> None:
        self.prefix = f"{prefix}-{os.getpid()}" if include_pid else prefix
        self._counter = itertools.count(start)

    def generate(self) -> str:
        return f"{self.prefix}-{next(self._counter)}"


# Singleton instance
_generator = Generator()


def new_component_id() -> ComponentID:
    """Generate new component id."""
    return ComponentID(_generator.generate())


# ============================================================================
# Validation and Parsing
# ============================================================================


def is_valid(id_str: str) -> bool:
    """Check if string is a valid (optionally prefixed) ULID.

    Args:
        id_str: ID string to validate

    Returns:
        True if valid ULID format
    """
    try:
        ulid_part = id_str.split("_")[1] if "_" in id_str else id_str

        # ULID is 26 characters
        if len(ulid_part) != 26:
            return False

        ULID.from_str(ulid_part)
        return True
    except (ValueError, IndexError):
        return False


def extract_timestamp(id_str: str) -> datetime | None:
    """Extract creation time from a ULID id.

    Args:
        id_str: ULID string

    Returns:
        Datetime object or None if invalid
    """
    timestamp_ms = Generator.timestamp(id_str)
    return datetime.fromtimestamp(timestamp_ms / 1000.0) if timestamp_ms > 0 else None


def extract_prefix(id_str: str) -> str | None:
    """Extract prefix from prefixed ID.

    Args:
        id_str: Prefixed ID string

    Returns:
        Prefix string or None if no prefix
    """
    parts = id_str.split("_")
    return parts[0] if len(parts) == 2 else None


def is_component_id(id_str: str) -> bool:
    """Check if ID is a ULID component id."""
    return id_str.startswith(f"{Prefix.COMPONENT}_") and is_valid(id_str)
