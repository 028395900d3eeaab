"""Line-oriented discovery of interface and method declarations.

The scanner never matches braces. A method is associated with the interface
declared textually above it in the same file, which mis-associates methods
when interfaces, classes and free functions are interleaved unusually. This
is a known heuristic limitation.
"""

from __future__ import annotations

import re

from contract.models import Anchor, Declaration, NavigationTarget, Position
from utils import line_starts, offset_to_position

_INTERFACE_DECLARATION = re.compile(r"\binterface\s+([A-Za-z_]\w*)")
_METHOD_DECLARATION = re.compile(
    r"(?:\b(?:public|protected|private)\s+(?:static\s+)?)?\bfunction\s+([A-Za-z_]\w*)"
)


def _line_end(text: str, offset: int) -> int:
    end = text.find("\n", offset)
    return len(text) if end == -1 else end


def _scan(pattern: re.Pattern[str], text: str) -> list[Declaration]:
    return [
        Declaration(
            name=match.group(1),
            start_offset=match.start(1),
            line_end_offset=_line_end(text, match.start(1)),
        )
        for match in pattern.finditer(text)
    ]


def find_interface_declarations(text: str) -> list[Declaration]:
    """Return every ``interface <Name>`` declaration in document order."""
    return _scan(_INTERFACE_DECLARATION, text)


def find_method_declarations(text: str) -> list[Declaration]:
    """Return every ``[visibility] function <name>`` declaration in document order."""
    return _scan(_METHOD_DECLARATION, text)


def _nearest(interfaces: list[Declaration], offset: int) -> Declaration | None:
    nearest: Declaration | None = None
    for declaration in interfaces:
        if declaration.start_offset >= offset:
            break
        nearest = declaration
    return nearest


def nearest_preceding_interface(text: str, method_offset: int) -> Declaration | None:
    """Return the last interface declared before ``method_offset``, if any."""
    return _nearest(find_interface_declarations(text), method_offset)


def _position(starts: list[int], offset: int) -> Position:
    line, column = offset_to_position(starts, offset)
    return Position(line=line, column=column)


def list_interface_anchors(text: str, file_id: str) -> list[Anchor]:
    """Build anchors that resolve implementations of each declared interface."""
    starts = line_starts(text)
    return [
        Anchor(
            kind="interface",
            name=declaration.name,
            start_offset=declaration.start_offset,
            line_end_offset=declaration.line_end_offset,
            target=NavigationTarget(
                file_id=file_id,
                position=_position(starts, declaration.start_offset),
            ),
        )
        for declaration in find_interface_declarations(text)
    ]


def list_method_anchors(text: str, file_id: str) -> list[Anchor]:
    """Build anchors that resolve a method inside each implementing class.

    Methods with no interface declared above them get no anchor.
    """
    starts = line_starts(text)
    interfaces = find_interface_declarations(text)
    anchors: list[Anchor] = []

    for method in find_method_declarations(text):
        owner = _nearest(interfaces, method.start_offset)
        if owner is None:
            continue

        anchors.append(
            Anchor(
                kind="method",
                name=method.name,
                start_offset=method.start_offset,
                line_end_offset=method.line_end_offset,
                target=NavigationTarget(
                    file_id=file_id,
                    position=_position(starts, owner.start_offset),
                    method_name=method.name,
                ),
            )
        )

    return anchors


__all__ = [
    "find_interface_declarations",
    "find_method_declarations",
    "list_interface_anchors",
    "list_method_anchors",
    "nearest_preceding_interface",
]
