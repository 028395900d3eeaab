"""Workspace-wide find-references suppliers."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from contract.models import SymbolReference
from parse.treesitter_refs import extract_name_references
from resolve.errors import FileLoadFailure, ReferenceLookupUnavailable
from scan.files import find_php_files
from utils import word_at

if TYPE_CHECKING:
    from contract.models import Position
    from rules.config import PhpImplConfig
    from workspace.loader import FileSystemLoader

logger = logging.getLogger(__name__)


class _WorkspaceSupplier:
    """Shared walk over every PHP file of the workspace."""

    def __init__(self, loader: FileSystemLoader, config: PhpImplConfig) -> None:
        self.loader = loader
        self.config = config

    def _matches_in(self, text: str, word: str) -> list[tuple[int, int]]:
        raise NotImplementedError

    def find_references(
        self, file_id: str, position: Position
    ) -> list[SymbolReference] | None:
        try:
            declaration_text = self.loader.load_text(file_id)
        except FileLoadFailure as exc:
            raise ReferenceLookupUnavailable(str(exc)) from exc

        word = word_at(declaration_text, position)
        if word is None:
            return None

        references: list[SymbolReference] = []
        for path in find_php_files(
            self.loader.root,
            extensions=self.config.extensions,
            include_patterns=self.config.include or None,
            exclude_patterns=self.config.exclude or None,
            nested_gitignore=self.config.nested_gitignore,
        ):
            ref_file_id = self.loader.file_id(path)
            try:
                text = self.loader.load_text(ref_file_id)
            except FileLoadFailure as exc:
                logger.debug("Not indexing %s", exc)
                continue

            references.extend(
                SymbolReference(file_id=ref_file_id, line=line, column=column)
                for line, column in self._matches_in(text, word)
            )

        logger.debug(
            "%s: %d references to %s", type(self).__name__, len(references), word
        )
        return references


class TreeSitterReferenceSupplier(_WorkspaceSupplier):
    """References are tree-sitter ``name`` nodes spelling the symbol."""

    def _matches_in(self, text: str, word: str) -> list[tuple[int, int]]:
        return extract_name_references(text, word)


class TextReferenceSupplier(_WorkspaceSupplier):
    """References are whole-word, case-insensitive textual mentions."""

    def _matches_in(self, text: str, word: str) -> list[tuple[int, int]]:
        pattern = re.compile(rf"\b{re.escape(word)}\b", re.IGNORECASE)
        found: list[tuple[int, int]] = []
        for index, line in enumerate(text.split("\n"), start=1):
            found.extend((index, match.start() + 1) for match in pattern.finditer(line))
        return found


def build_reference_supplier(
    loader: FileSystemLoader, config: PhpImplConfig
) -> _WorkspaceSupplier:
    """Instantiate the supplier selected by ``[references] supplier``."""
    if config.references.supplier == "text":
        return TextReferenceSupplier(loader, config)
    return TreeSitterReferenceSupplier(loader, config)


__all__ = [
    "TextReferenceSupplier",
    "TreeSitterReferenceSupplier",
    "build_reference_supplier",
]
