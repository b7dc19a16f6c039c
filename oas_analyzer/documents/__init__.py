"""Document helpers: JSON pointers, tree walking, loading, dereferencing."""

from oas_analyzer.documents.dereferencer import DereferenceResult, Dereferencer, get_dereferencer
from oas_analyzer.documents.loader import load_document
from oas_analyzer.documents.pointers import parse_pointer, resolve_pointer, to_pointer, walk

__all__ = [
    "DereferenceResult",
    "Dereferencer",
    "get_dereferencer",
    "load_document",
    "parse_pointer",
    "resolve_pointer",
    "to_pointer",
    "walk",
]
