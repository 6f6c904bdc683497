"""Importers turning external document representations into document trees."""

from .json_importer import DocumentImportError, document_version, load_document, parse_document, parse_node

__all__ = [
    "DocumentImportError",
    "document_version",
    "load_document",
    "parse_document",
    "parse_node",
]
