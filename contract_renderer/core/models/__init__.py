from __future__ import annotations

"""Shared data structures used across the Contract Renderer core.

This package exposes dataclasses and value objects used by services and other
core layers. It is intentionally free of rendering and I/O code so that the
contained objects can be reused in any context (unit-tests, CLI, services).

Document trees are immutable: every node is a frozen dataclass and children
are stored as tuples. Edits to mention values never touch the tree; they go
to the mention registry instead.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterator, Optional, Tuple

__all__ = [
    "NodeKind",
    "Formatting",
    "DocumentNode",
    "Document",
    "MentionRecord",
    "ValidationResult",
]


class NodeKind(str, Enum):
    """Closed set of node kinds a document tree may contain."""

    TEXT = "text"
    HEADING_1 = "heading-1"
    HEADING_4 = "heading-4"
    PARAGRAPH = "paragraph"
    LIST = "list"
    LIST_ITEM = "list-item"
    LIST_ITEM_CONTENT = "list-item-content"
    MENTION = "mention"
    CLAUSE = "clause"
    GENERIC_BLOCK = "generic-block"
    CONTAINER = "container"
    DOCUMENT_SECTION = "document-section"


class Formatting(str, Enum):
    BOLD = "bold"
    ITALIC = "italic"
    UNDERLINE = "underline"


@dataclass(frozen=True)
class DocumentNode:
    """One node of a parsed document tree.

    Attributes
    ----------
    kind
        Node classification driving how the renderer treats it.
    text
        Literal content; only set on ``TEXT`` nodes. May contain ``\\n``.
    formatting
        Inline formatting flags (text and container nodes).
    children
        Ordered child nodes; empty for text nodes.
    id, color, title, value, variable_type
        Mention fields. ``title`` is also used by clauses as a debug label.
    """

    kind: NodeKind
    text: Optional[str] = None
    formatting: FrozenSet[Formatting] = frozenset()
    children: Tuple["DocumentNode", ...] = ()
    id: Optional[str] = None
    color: Optional[str] = None
    title: Optional[str] = None
    value: Optional[str] = None
    variable_type: Optional[str] = None

    @property
    def is_text(self) -> bool:
        return self.text is not None

    def first_child_text(self) -> str:
        """Return the text of the first child, or ``""`` when there is none."""
        if self.children and self.children[0].text is not None:
            return self.children[0].text
        return ""

    def embedded_value(self) -> str:
        """Return the display string carried by a mention node itself."""
        return self.value or self.first_child_text()

    def iter_depth_first(self) -> Iterator["DocumentNode"]:
        """Yield this node and all descendants in document order."""
        yield self
        for child in self.children:
            yield from child.iter_depth_first()


@dataclass(frozen=True)
class Document:
    """A parsed document: top-level sections plus a content fingerprint.

    ``version`` changes whenever the raw input changes and is what services
    use to decide whether the mention registry must be rebuilt.
    """

    sections: Tuple[DocumentNode, ...] = ()
    version: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.sections

    def iter_nodes(self) -> Iterator[DocumentNode]:
        for section in self.sections:
            yield from section.iter_depth_first()


@dataclass(frozen=True)
class MentionRecord:
    """Canonical state of one mention identifier in the registry."""

    value: str = ""
    color: Optional[str] = None
    title: Optional[str] = None
    variable_type: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "value": self.value,
            "color": self.color,
            "title": self.title,
            "variableType": self.variable_type,
        }


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"isValid": self.is_valid}
        if self.error is not None:
            payload["error"] = self.error
        return payload


# Shared instance for the common "nothing to report" case
VALID = ValidationResult(True)
