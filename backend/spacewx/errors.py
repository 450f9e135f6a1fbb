"""Error taxonomy.

None of these are fatal. Each is absorbed at the boundary of the component
that detects it:

- FetchFailure: DataFeed falls back to an empty series.
- PersistedStateCorrupt: the affected store falls back to its defaults.
- ValidationFailure: surfaced to the caller; nothing is mutated.
"""

from __future__ import annotations


class SpaceWxError(Exception):
    """Base class for all errors raised by the core."""


class FetchFailure(SpaceWxError):
    """The Kp series resource could not be retrieved."""


class PersistedStateCorrupt(SpaceWxError):
    """A persisted record exists but cannot be decoded or validated."""

    def __init__(self, key: str, reason: str):
        super().__init__(f"persisted state '{key}' is unreadable: {reason}")
        self.key = key
        self.reason = reason


class ValidationFailure(SpaceWxError):
    """A user-submitted change was rejected."""
