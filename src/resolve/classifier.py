"""Single-line classification of references as implementation sites.

A reference is an implementation site when its line reads like
``class <Name> ... implements ... <Interface>`` before the class body opens.
The regular expression is the classification oracle: class headers whose
``implements`` list continues on a following line are not recognised.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from contract.models import CandidateMatch
from resolve.errors import FileLoadFailure
from utils import line_starts, line_text, offset_to_position

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator

    from contract.models import SymbolReference
    from resolve.session import ResolutionSession

logger = logging.getLogger(__name__)


def build_implementation_pattern(interface_name: str) -> re.Pattern[str]:
    """Match a class header naming ``interface_name`` as a whole word."""
    name = re.escape(interface_name)
    return re.compile(
        rf"class\s+(\w+)[^{{]*implements\s+[^{{]*\b{name}\b", re.IGNORECASE
    )


def build_method_pattern(method_name: str) -> re.Pattern[str]:
    return re.compile(rf"function\s+{re.escape(method_name)}\b", re.IGNORECASE)


def classify_line(text: str, pattern: re.Pattern[str]) -> str | None:
    """Return the declaring class name if ``text`` matches, else None."""
    match = pattern.search(text)
    if match is None:
        return None
    return match.group(1)


def narrow_to_method(
    text: str,
    class_line: int,
    method_pattern: re.Pattern[str],
) -> int:
    """Return the line of the first method declaration after the class header.

    Searches the whole file from just past the start of ``class_line`` and
    falls back to ``class_line`` when nothing follows.
    """
    starts = line_starts(text)
    class_offset = starts[class_line - 1]
    match = method_pattern.search(text, class_offset + 1)
    if match is None:
        return class_line
    line, _column = offset_to_position(starts, match.start())
    return line


def classify_references(
    session: ResolutionSession,
    references: Iterable[SymbolReference],
    load_text: Callable[[str], str],
) -> Iterator[CandidateMatch]:
    """Yield each new implementation site found among ``references``.

    References are processed one at a time in the order given. The session's
    cancellation flag is checked before each file load; a file that fails to
    load contributes nothing.
    """
    pattern = build_implementation_pattern(session.interface_name)
    method_pattern = (
        build_method_pattern(session.method_name) if session.method_name else None
    )

    for reference in references:
        if session.cancelled:
            logger.debug("Scan for %s halted by cancellation", session.interface_name)
            return

        try:
            text = load_text(reference.file_id)
        except FileLoadFailure as exc:
            logger.debug("Skipping reference: %s", exc)
            continue

        current = line_text(text, reference.line)
        if current is None:
            logger.debug(
                "Skipping %s:%d, line outside file", reference.file_id, reference.line
            )
            continue

        class_name = classify_line(current, pattern)
        if class_name is None:
            continue

        line = reference.line
        if method_pattern is not None:
            line = narrow_to_method(text, reference.line, method_pattern)

        candidate = CandidateMatch(
            file_id=reference.file_id, line=line, class_name=class_name
        )
        if session.offer(candidate):
            yield candidate


__all__ = [
    "build_implementation_pattern",
    "build_method_pattern",
    "classify_line",
    "classify_references",
    "narrow_to_method",
]
