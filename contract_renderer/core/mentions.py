from __future__ import annotations

"""Mention registry: one canonical record per mention identifier.

A document may mention the same variable (a party name, an effective date)
in many places. :class:`MentionRegistry` keeps exactly one
:class:`MentionRecord` per identifier and the renderer resolves every
occurrence against it through :func:`resolve_mention`, so an edit shows up
everywhere on the next render pass without touching the document tree.

The registry is an immutable value. ``with_*`` methods return a new registry
whose mapping differs from the old one by a single, wholly replaced record,
so a reader never observes a half-applied update.
"""

from dataclasses import dataclass, replace
import logging
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from contract_renderer.core.models import (
    Document,
    DocumentNode,
    MentionRecord,
    NodeKind,
    VALID,
    ValidationResult,
)
from contract_renderer.core.utils import normalize_color, sanitize_mention_value, validate_mention_value

__all__ = [
    "MentionRegistry",
    "ResolvedMention",
    "extract_mentions",
    "resolve_mention",
]

logger = logging.getLogger(__name__)

TreeInput = Union[Document, DocumentNode, Iterable[DocumentNode], None]

# Fields a partial update may change. variable_type is fixed at extraction.
_UPDATABLE_FIELDS = ("value", "color", "title")


def _iter_roots(tree: TreeInput) -> Iterator[DocumentNode]:
    if tree is None:
        return
    if isinstance(tree, Document):
        yield from tree.sections
    elif isinstance(tree, DocumentNode):
        yield tree
    else:
        for node in tree:
            if isinstance(node, DocumentNode):
                yield node


class MentionRegistry:
    """Immutable mapping of mention identifier to :class:`MentionRecord`."""

    __slots__ = ("_records",)

    def __init__(self, records: Optional[Mapping[str, MentionRecord]] = None) -> None:
        self._records: Mapping[str, MentionRecord] = MappingProxyType(dict(records or {}))

    # ------------------------------------------------------------ construction

    @classmethod
    def extract(cls, tree: TreeInput) -> "MentionRegistry":
        """Build a registry from every mention in *tree*.

        Traversal is depth-first in document order. Mentions without an
        ``id`` are ignored. When an identifier occurs more than once, the
        last occurrence visited provides the record.
        """
        records: Dict[str, MentionRecord] = {}
        for root in _iter_roots(tree):
            for node in root.iter_depth_first():
                if node.kind is not NodeKind.MENTION or not node.id:
                    continue
                records[node.id] = MentionRecord(
                    value=sanitize_mention_value(node.embedded_value()),
                    color=node.color,
                    title=node.title,
                    variable_type=node.variable_type,
                )
                logger.debug("Mentions: extracted id=%s value=%r", node.id, records[node.id].value)
        logger.info("Mentions: extracted count=%d", len(records))
        return cls(records)

    # ------------------------------------------------------------------- reads

    def lookup(self, mention_id: Optional[str]) -> Optional[MentionRecord]:
        if not mention_id:
            return None
        return self._records.get(mention_id)

    def ids(self) -> List[str]:
        return list(self._records)

    def snapshot(self) -> Dict[str, MentionRecord]:
        """Return a plain ``dict`` copy of the current records."""
        return dict(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, mention_id: object) -> bool:
        return mention_id in self._records

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MentionRegistry):
            return NotImplemented
        return dict(self._records) == dict(other._records)

    def __repr__(self) -> str:
        return f"MentionRegistry({dict(self._records)!r})"

    # ------------------------------------------------------------------ writes

    def _with_record(self, mention_id: str, record: MentionRecord) -> "MentionRegistry":
        records = dict(self._records)
        records[mention_id] = record
        return MentionRegistry(records)

    def _base(self, mention_id: str) -> MentionRecord:
        return self._records.get(mention_id) or MentionRecord()

    def with_value(self, mention_id: str, new_value: Any) -> Tuple["MentionRegistry", ValidationResult]:
        """Return a registry with the record's ``value`` replaced.

        The value is sanitised first. When the record carries a
        ``variable_type`` the sanitised value is validated; a failure is
        logged and returned but the value is stored anyway.
        """
        sanitized = sanitize_mention_value(new_value)
        base = self._base(mention_id)
        validation = VALID
        if base.variable_type:
            validation = validate_mention_value(sanitized, base.variable_type)
            if not validation.is_valid:
                logger.warning("Mentions: invalid value for id=%s: %s", mention_id, validation.error)
        return self._with_record(mention_id, replace(base, value=sanitized)), validation

    def with_color(self, mention_id: str, new_color: Any) -> "MentionRegistry":
        """Return a registry with the record's ``color`` replaced."""
        return self._with_record(mention_id, replace(self._base(mention_id), color=normalize_color(new_color)))

    def with_fields(self, mention_id: str, updates: Mapping[str, Any]) -> "MentionRegistry":
        """Merge *updates* into the record for *mention_id*.

        ``value`` is always sanitised (so ``None`` becomes ``""``), ``color``
        is normalised when non-empty and a non-None ``title`` is stored as a
        string. ``variable_type`` and unknown keys are ignored with a
        warning. A missing record is treated as an empty one.
        """
        changes: Dict[str, Any] = {}
        for key, raw in updates.items():
            if key not in _UPDATABLE_FIELDS:
                logger.warning("Mentions: ignoring field=%s in update for id=%s", key, mention_id)
                continue
            if key == "value":
                raw = sanitize_mention_value(raw)
            elif key == "color" and raw:
                raw = normalize_color(raw)
            elif key == "title" and raw is not None:
                raw = str(raw)
            changes[key] = raw
        return self._with_record(mention_id, replace(self._base(mention_id), **changes))

    # -------------------------------------------------------------- validation

    def validate_all(self) -> Dict[str, ValidationResult]:
        """Validate every record; untyped records are always valid."""
        results: Dict[str, ValidationResult] = {}
        for mention_id, record in self._records.items():
            if record.variable_type:
                results[mention_id] = validate_mention_value(record.value, record.variable_type)
            else:
                results[mention_id] = VALID
        return results


def extract_mentions(tree: TreeInput) -> MentionRegistry:
    """Functional alias for :meth:`MentionRegistry.extract`."""
    return MentionRegistry.extract(tree)


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ResolvedMention:
    """Display data for one mention occurrence."""

    id: Optional[str]
    value: str
    color: Optional[str]
    title: Optional[str]
    from_registry: bool


def resolve_mention(node: DocumentNode, registry: Optional[MentionRegistry]) -> ResolvedMention:
    """Resolve what a mention node should display.

    Precedence: the registry record for ``node.id`` wins for value, colour and
    title together. Without an id, or when the registry has no record for it,
    the node's own ``value`` (else its first child's text), ``color`` and
    ``title`` are used.
    """
    record = registry.lookup(node.id) if registry is not None else None
    if record is not None:
        return ResolvedMention(node.id, record.value, record.color, record.title, True)
    return ResolvedMention(node.id, node.embedded_value(), node.color, node.title, False)


