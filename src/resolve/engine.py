"""Implementation resolution: references in, streamed matches and an outcome out."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from resolve.classifier import classify_references
from resolve.errors import ReferenceLookupUnavailable
from resolve.session import ResolutionSession

if TYPE_CHECKING:
    from collections.abc import Callable

    from contract.models import CandidateMatch, Position, SymbolReference
    from resolve.session import Outcome

logger = logging.getLogger(__name__)


class ReferenceSupplier(Protocol):
    """Find-references capability provided by the host."""

    def find_references(
        self, file_id: str, position: Position
    ) -> list[SymbolReference] | None: ...


class TextLoader(Protocol):
    """File-access capability; raises FileLoadFailure for unreadable files."""

    def load_text(self, file_id: str) -> str: ...


class ImplementationResolver:
    """Runs lookups against a reference supplier and a file loader.

    The resolver keeps no per-lookup state, so sessions opened from it are
    independent and may run concurrently on separate threads.
    """

    def __init__(self, supplier: ReferenceSupplier, loader: TextLoader) -> None:
        self._supplier = supplier
        self._loader = loader

    def open_session(
        self, interface_name: str, method_name: str | None = None
    ) -> ResolutionSession:
        return ResolutionSession(interface_name, method_name)

    def run(
        self,
        session: ResolutionSession,
        file_id: str,
        position: Position,
        *,
        on_match_added: Callable[[CandidateMatch], None] | None = None,
        on_scan_complete: Callable[[Outcome], None] | None = None,
    ) -> Outcome:
        """Scan the references of the symbol at ``position`` for implementations.

        Args:
            session: Session created by :meth:`open_session`
            file_id: File holding the interface declaration
            position: Position of the interface name in that file
            on_match_added: Called synchronously with each new unique match
            on_scan_complete: Called once with the outcome, after every
                reference is processed or cancellation stops the scan

        Returns:
            The session's final outcome.

        Raises:
            ReferenceLookupUnavailable: If the reference supplier fails.
        """
        try:
            references = self._supplier.find_references(file_id, position)
        except ReferenceLookupUnavailable:
            raise
        except Exception as exc:
            msg = f"Reference lookup failed for {session.interface_name}: {exc}"
            raise ReferenceLookupUnavailable(msg) from exc

        references = list(references or [])
        session.reference_count = len(references)
        logger.debug(
            "%d references for %s", session.reference_count, session.interface_name
        )

        for candidate in classify_references(
            session, references, self._loader.load_text
        ):
            logger.debug(
                "Implementation %s at %s:%d",
                candidate.class_name,
                candidate.file_id,
                candidate.line,
            )
            if on_match_added is not None:
                on_match_added(candidate)

        outcome = session.finalize()
        logger.info(
            "Lookup for %s finished: %s%s",
            session.interface_name,
            type(outcome).__name__,
            " (cancelled)" if session.cancelled else "",
        )
        if on_scan_complete is not None:
            on_scan_complete(outcome)
        return outcome


def resolve_implementations(
    supplier: ReferenceSupplier,
    loader: TextLoader,
    interface_name: str,
    file_id: str,
    position: Position,
    *,
    method_name: str | None = None,
    on_match_added: Callable[[CandidateMatch], None] | None = None,
) -> Outcome:
    """One-shot lookup without external cancellation."""
    resolver = ImplementationResolver(supplier, loader)
    session = resolver.open_session(interface_name, method_name)
    return resolver.run(session, file_id, position, on_match_added=on_match_added)


__all__ = [
    "ImplementationResolver",
    "ReferenceSupplier",
    "TextLoader",
    "resolve_implementations",
]
