"""Host adapters backed by a workspace directory."""

from workspace.loader import FileSystemLoader
from workspace.references import (
    TextReferenceSupplier,
    TreeSitterReferenceSupplier,
    build_reference_supplier,
)

__all__ = [
    "FileSystemLoader",
    "TextReferenceSupplier",
    "TreeSitterReferenceSupplier",
    "build_reference_supplier",
]
