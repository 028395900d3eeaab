"""Record models shared by the resolution engine and its host adapters.

Lines and columns are 1-based. ``file_id`` is a POSIX path relative to the
workspace root.
"""

from __future__ import annotations

from typing import Literal, NamedTuple

from pydantic import BaseModel, ConfigDict, Field

AnchorKind = Literal["interface", "method"]


class MatchKey(NamedTuple):
    """Deduplication identity of an implementation site."""

    file_id: str
    line: int


class Position(BaseModel):
    """Cursor position inside a file."""

    model_config = ConfigDict(frozen=True)

    line: int = Field(ge=1)
    column: int = Field(ge=1)


class SymbolReference(BaseModel):
    """A location reported by a reference supplier."""

    model_config = ConfigDict(frozen=True)

    file_id: str
    line: int = Field(ge=1)
    column: int = Field(ge=1)


class CandidateMatch(BaseModel):
    """A class declaration line whose implements clause names the interface."""

    model_config = ConfigDict(frozen=True)

    file_id: str
    line: int = Field(ge=1)
    class_name: str

    @property
    def key(self) -> MatchKey:
        return MatchKey(self.file_id, self.line)


class Declaration(BaseModel):
    """An interface or method name found by the declaration scanner."""

    model_config = ConfigDict(frozen=True)

    name: str
    start_offset: int = Field(description="Offset of the name, not the keyword")
    line_end_offset: int = Field(description="Offset of the end of the line")


class NavigationTarget(BaseModel):
    """Entry point for a resolution run triggered from an anchor."""

    model_config = ConfigDict(frozen=True)

    file_id: str
    position: Position
    method_name: str | None = None


class Anchor(BaseModel):
    """Clickable trigger placed on an interface or method declaration."""

    model_config = ConfigDict(frozen=True)

    kind: AnchorKind
    name: str
    start_offset: int
    line_end_offset: int
    target: NavigationTarget


__all__ = [
    "Anchor",
    "AnchorKind",
    "CandidateMatch",
    "Declaration",
    "MatchKey",
    "NavigationTarget",
    "Position",
    "SymbolReference",
]
