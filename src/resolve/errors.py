"""Error taxonomy for implementation resolution."""

from __future__ import annotations


class ResolutionError(Exception):
    """Base class for resolution failures."""


class ReferenceLookupUnavailable(ResolutionError):
    """Raised when the reference supplier itself fails.

    Ends the session without partial results.
    """


class FileLoadFailure(ResolutionError):
    """Raised by a file loader when one file's text cannot be read.

    The classifier skips the reference and keeps scanning.
    """

    def __init__(self, file_id: str, reason: str) -> None:
        super().__init__(f"{file_id}: {reason}")
        self.file_id = file_id
        self.reason = reason


__all__ = ["FileLoadFailure", "ReferenceLookupUnavailable", "ResolutionError"]
