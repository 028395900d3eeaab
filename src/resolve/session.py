"""Per-lookup session state and terminal outcome policy."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from contract.models import CandidateMatch

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NoReferences:
    """The reference supplier returned nothing."""


@dataclass(frozen=True)
class NoImplementations:
    """References existed but none was an implementation site."""


@dataclass(frozen=True)
class SingleImplementation:
    """Exactly one site; navigate to it directly."""

    match: CandidateMatch


@dataclass(frozen=True)
class ManyImplementations:
    """Several sites, in first-classified-first order."""

    matches: tuple[CandidateMatch, ...]


Outcome = NoReferences | NoImplementations | SingleImplementation | ManyImplementations


class ResolutionSession:
    """State of one user-triggered lookup.

    Only the scanning thread appends matches. The cancellation flag moves from
    unset to set exactly once and is only observed at reference boundaries, so
    a late observation is acceptable.
    """

    def __init__(self, interface_name: str, method_name: str | None = None) -> None:
        self.interface_name = interface_name
        self.method_name = method_name
        self.reference_count = 0
        self._matches: list[CandidateMatch] = []
        self._cancelled = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def matches(self) -> tuple[CandidateMatch, ...]:
        return tuple(self._matches)

    def cancel(self) -> None:
        if not self._cancelled.is_set():
            logger.debug("Cancelling lookup for %s", self.interface_name)
        self._cancelled.set()

    def dismiss(self) -> None:
        """Called when the UI surface showing this session goes away."""
        self.cancel()

    def offer(self, candidate: CandidateMatch) -> bool:
        """Append ``candidate`` unless its (file, line) key is already present."""
        if self.cancelled:
            return False
        key = candidate.key
        if any(existing.key == key for existing in self._matches):
            return False
        self._matches.append(candidate)
        return True

    def finalize(self) -> Outcome:
        if self.reference_count == 0:
            return NoReferences()
        if not self._matches:
            return NoImplementations()
        if len(self._matches) == 1:
            return SingleImplementation(self._matches[0])
        return ManyImplementations(tuple(self._matches))


__all__ = [
    "ManyImplementations",
    "NoImplementations",
    "NoReferences",
    "Outcome",
    "ResolutionSession",
    "SingleImplementation",
]
