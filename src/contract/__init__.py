"""Stable record surface for phpimpl-core.

Treat these exports as the boundary between the resolution engine and the
host adapters (reference suppliers, file loaders, presentation).
"""

from contract.models import (
    Anchor,
    AnchorKind,
    CandidateMatch,
    Declaration,
    MatchKey,
    NavigationTarget,
    Position,
    SymbolReference,
)

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
