from __future__ import annotations

"""Service owning the mention registry of the loaded document.

This is the edit interface used by editing front-ends. It keeps the current
:class:`~contract_renderer.core.mentions.MentionRegistry` for one document
version and swaps in a new registry on every edit.

Examples
--------
Basic usage:

    service = MentionService()
    service.load(document)
    result = service.update_mention_value("effective_date", "March 3, 2024")
    if not result.validation.is_valid:
        print(result.validation.error)
"""

from dataclasses import dataclass
import logging
from typing import Any, Dict, List, Mapping, Optional

from contract_renderer.core.mentions import MentionRegistry
from contract_renderer.core.models import Document, MentionRecord, VALID, ValidationResult
from contract_renderer.core.utils import MentionStatistics, get_mention_statistics

__all__ = ["MentionService", "MentionUpdateResult"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MentionUpdateResult:
    """Outcome of an edit made through :class:`MentionService`.

    Attributes
    ----------
    success
        True when the registry was updated. Validation problems do not make
        an update fail; check ``validation`` for them.
    message
        Human-readable summary suitable for logs or UI display.
    record
        The record as stored after the update.
    validation
        Result of type validation for value updates; always valid otherwise.
    """
    success: bool
    message: str
    record: Optional[MentionRecord] = None
    validation: ValidationResult = VALID


class MentionService:
    """Owns the mention registry for the currently loaded document version.

    ``load`` rebuilds the registry only when the document version changes, so
    re-loading the same document keeps edits made since. Every edit swaps in
    a new :class:`MentionRegistry`.
    """

    def __init__(self, document: Optional[Document] = None) -> None:
        self._registry = MentionRegistry()
        self._version: Optional[str] = None
        if document is not None:
            self.load(document)

    @property
    def registry(self) -> MentionRegistry:
        return self._registry

    @property
    def version(self) -> Optional[str]:
        return self._version

    def load(self, document: Optional[Document]) -> bool:
        """Adopt *document*; return True when the registry was rebuilt."""
        version = document.version if document is not None else None
        if version and version == self._version:
            logger.debug("Mentions: load skipped, version unchanged=%s", version)
            return False
        self._registry = MentionRegistry.extract(document)
        self._version = version
        logger.info("Mentions: registry rebuilt version=%s count=%d", version, len(self._registry))
        return True

    # ----------------------------------------------------------------- edits

    def update_mention_value(self, mention_id: str, new_value: Any) -> MentionUpdateResult:
        if not mention_id:
            return MentionUpdateResult(False, "Mention id is required.")
        self._registry, validation = self._registry.with_value(mention_id, new_value)
        record = self._registry.lookup(mention_id)
        logger.info("Edit: update_mention_value id=%s value=%r", mention_id, record.value if record else None)
        message = "Value updated." if validation.is_valid else f"Value updated with warning: {validation.error}"
        return MentionUpdateResult(True, message, record, validation)

    def update_mention_color(self, mention_id: str, new_color: Any) -> MentionUpdateResult:
        if not mention_id:
            return MentionUpdateResult(False, "Mention id is required.")
        self._registry = self._registry.with_color(mention_id, new_color)
        record = self._registry.lookup(mention_id)
        logger.info("Edit: update_mention_color id=%s color=%s", mention_id, record.color if record else None)
        return MentionUpdateResult(True, "Color updated.", record)

    def update_mention(self, mention_id: str, updates: Mapping[str, Any]) -> MentionUpdateResult:
        if not mention_id:
            return MentionUpdateResult(False, "Mention id is required.")
        self._registry = self._registry.with_fields(mention_id, updates)
        record = self._registry.lookup(mention_id)
        logger.info("Edit: update_mention id=%s fields=%s", mention_id, sorted(updates))
        return MentionUpdateResult(True, "Mention updated.", record)

    # --------------------------------------------------------------- queries

    def get_mention(self, mention_id: str) -> Optional[MentionRecord]:
        return self._registry.lookup(mention_id)

    def get_mention_ids(self) -> List[str]:
        return self._registry.ids()

    def validate_all_mentions(self) -> Dict[str, ValidationResult]:
        results = self._registry.validate_all()
        invalid = [mention_id for mention_id, res in results.items() if not res.is_valid]
        if invalid:
            logger.info("Mentions: validation found invalid ids=%s", invalid)
        return results

    def statistics(self) -> MentionStatistics:
        return get_mention_statistics(self._registry.snapshot())
