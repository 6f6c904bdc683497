from __future__ import annotations

"""JSON document importer.

Turns the raw JSON document shape (a list of sections, each holding a
``children`` list of typed dictionaries) into an immutable
:class:`~contract_renderer.core.models.Document`.

:func:`parse_document` never raises: anything that is not a list yields an
empty document and malformed children are skipped. :func:`load_document` is
the I/O edge and reports unreadable files with :class:`DocumentImportError`.
"""

import hashlib
import json
import logging
from pathlib import Path
from typing import Any, Dict, FrozenSet, Optional, Tuple, Union

from contract_renderer.core.models import Document, DocumentNode, Formatting, NodeKind

logger = logging.getLogger(__name__)

__all__ = ["DocumentImportError", "parse_document", "parse_node", "load_document", "document_version"]


class DocumentImportError(Exception):
    """Exception raised when a document file cannot be read or decoded."""

    def __init__(self, message: str, file_path: Optional[Path] = None, cause: Optional[Exception] = None):
        self.file_path = file_path
        self.cause = cause
        super().__init__(message)


# Raw ``type`` values as written by the editor that produced the JSON, plus
# the canonical kind names so already-normalised input round-trips.
_TYPE_MAP: Dict[str, NodeKind] = {
    "h1": NodeKind.HEADING_1,
    "h4": NodeKind.HEADING_4,
    "p": NodeKind.PARAGRAPH,
    "ul": NodeKind.LIST,
    "li": NodeKind.LIST_ITEM,
    "lic": NodeKind.LIST_ITEM_CONTENT,
    "mention": NodeKind.MENTION,
    "clause": NodeKind.CLAUSE,
    "block": NodeKind.GENERIC_BLOCK,
}
_TYPE_MAP.update({kind.value: kind for kind in NodeKind if kind is not NodeKind.TEXT})


def _optional_str(raw: Dict[str, Any], key: str) -> Optional[str]:
    value = raw.get(key)
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def _formatting(raw: Dict[str, Any]) -> FrozenSet[Formatting]:
    return frozenset(flag for flag in Formatting if raw.get(flag.value))


def _children(raw: Dict[str, Any]) -> Tuple[DocumentNode, ...]:
    children = raw.get("children")
    if not isinstance(children, list):
        return ()
    parsed = (parse_node(child) for child in children)
    return tuple(node for node in parsed if node is not None)


def parse_node(raw: Any) -> Optional[DocumentNode]:
    """Convert one raw dictionary into a :class:`DocumentNode`.

    Returns None for anything that is not a dictionary. A dictionary with a
    ``text`` key is a text node regardless of its ``type``.
    """
    if not isinstance(raw, dict):
        logger.debug("Import: skipping non-object node type=%s", type(raw).__name__)
        return None

    if "text" in raw:
        text = raw.get("text")
        return DocumentNode(
            kind=NodeKind.TEXT,
            text=text if isinstance(text, str) else ("" if text is None else str(text)),
            formatting=_formatting(raw),
        )

    raw_type = raw.get("type")
    kind = _TYPE_MAP.get(raw_type, NodeKind.CONTAINER) if isinstance(raw_type, str) else NodeKind.CONTAINER

    if kind is NodeKind.MENTION:
        return DocumentNode(
            kind=kind,
            children=_children(raw),
            id=_optional_str(raw, "id"),
            color=_optional_str(raw, "color"),
            title=_optional_str(raw, "title"),
            value=_optional_str(raw, "value"),
            variable_type=_optional_str(raw, "variableType"),
        )

    return DocumentNode(
        kind=kind,
        formatting=_formatting(raw),
        children=_children(raw),
        title=_optional_str(raw, "title"),
    )


def document_version(data: Any) -> str:
    """Return a stable fingerprint of raw document data.

    Data that cannot be dumped as canonical JSON (mixed-type or non-string
    keys that do not sort, circular references) is fingerprinted through its
    ``repr`` instead.
    """
    try:
        canonical = json.dumps(data, sort_keys=True, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        logger.debug("Import: version falls back to repr type=%s", type(data).__name__)
        canonical = repr(data)
    return hashlib.sha256(canonical.encode("utf-8", "surrogatepass")).hexdigest()[:16]


def parse_document(data: Any) -> Document:
    """Build a :class:`Document` from decoded JSON.

    Each top-level entry becomes a ``document-section`` node whatever its own
    ``type``; its ``children`` are parsed recursively. Non-list or empty
    input gives an empty document.
    """
    if not isinstance(data, list) or not data:
        logger.info("Import: empty or malformed document input type=%s", type(data).__name__)
        return Document(sections=(), version=document_version(data if isinstance(data, list) else None))

    sections = []
    for raw_section in data:
        if not isinstance(raw_section, dict):
            logger.debug("Import: skipping non-object section type=%s", type(raw_section).__name__)
            continue
        sections.append(DocumentNode(
            kind=NodeKind.DOCUMENT_SECTION,
            children=_children(raw_section),
            title=_optional_str(raw_section, "title"),
        ))

    document = Document(sections=tuple(sections), version=document_version(data))
    logger.debug("Import OK: sections=%d version=%s", len(document.sections), document.version)
    return document


def load_document(path: Union[str, Path]) -> Document:
    """Read a UTF-8 JSON file and parse it into a :class:`Document`.

    Raises
    ------
    DocumentImportError
        If the file is missing, unreadable or not valid JSON.
    """
    file_path = Path(path)
    try:
        raw_text = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        logger.error("Import FAIL: cannot read path=%s", file_path, exc_info=True)
        raise DocumentImportError(f"Failed to load document data: {exc}", file_path, exc) from exc

    try:
        data = json.loads(raw_text)
    except json.JSONDecodeError as exc:
        logger.error("Import FAIL: invalid JSON path=%s line=%d", file_path, exc.lineno)
        raise DocumentImportError(f"Document is not valid JSON: {exc}", file_path, exc) from exc

    logger.info("Import: loaded path=%s", file_path)
    return parse_document(data)
