"""Implementation resolution engine."""

from resolve.classifier import (
    build_implementation_pattern,
    build_method_pattern,
    classify_line,
    classify_references,
    narrow_to_method,
)
from resolve.engine import (
    ImplementationResolver,
    ReferenceSupplier,
    TextLoader,
    resolve_implementations,
)
from resolve.errors import FileLoadFailure, ReferenceLookupUnavailable, ResolutionError
from resolve.session import (
    ManyImplementations,
    NoImplementations,
    NoReferences,
    Outcome,
    ResolutionSession,
    SingleImplementation,
)

__all__ = [
    "FileLoadFailure",
    "ImplementationResolver",
    "ManyImplementations",
    "NoImplementations",
    "NoReferences",
    "Outcome",
    "ReferenceLookupUnavailable",
    "ReferenceSupplier",
    "ResolutionError",
    "ResolutionSession",
    "SingleImplementation",
    "TextLoader",
    "build_implementation_pattern",
    "build_method_pattern",
    "classify_line",
    "classify_references",
    "narrow_to_method",
    "resolve_implementations",
]
