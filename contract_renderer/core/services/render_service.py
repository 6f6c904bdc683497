from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Any, Dict, Optional

from lxml import etree as ET  # type: ignore

from contract_renderer.core.models import Document, MentionRecord
from contract_renderer.core.renderer import render_document, to_html
from contract_renderer.core.services.mention_service import MentionService

__all__ = ["RenderResult", "RenderService"]

logger = logging.getLogger(__name__)


@dataclass
class RenderResult:
    """Structured result of one render pass.

    Attributes
    ----------
    success : bool
        Indicates whether the pass completed.
    content : Optional[str]
        Serialised HTML when successful, otherwise None.
    message : str
        Human-readable outcome message. Clear on failure, empty on success.
    element : Optional[ET.Element]
        The presentation tree the HTML was serialised from.
    version : Optional[str]
        Document version the pass rendered. Callers compare it with
        :attr:`RenderService.version` to discard output of a superseded pass.
    registry : Dict[str, MentionRecord]
        Snapshot of the mention registry the pass resolved against.
    details : Optional[Dict[str, Any]]
        Structured ancillary data (error kinds, counts).
    """
    success: bool
    content: Optional[str]
    message: str
    element: Optional[ET.Element] = None
    version: Optional[str] = None
    registry: Dict[str, MentionRecord] = field(default_factory=dict)
    details: Optional[Dict[str, Any]] = None


class RenderService:
    """Service wrapper combining the mention registry with the renderer.

    Every call to :meth:`render` is a new render pass with its own clause
    counter, resolving mentions against the registry as it stands at that
    moment. Edits go through :attr:`mentions` and are picked up by the next
    pass.

    The service follows a non-raising pattern: :meth:`render` returns a
    ``RenderResult`` with ``success=False`` and a clear message instead of
    propagating unexpected exceptions.

    Examples
    --------
    >>> service = RenderService()
    >>> service.load(parse_document(data))
    >>> service.mentions.update_mention_color("m1", "#00ff00")
    >>> result = service.render()
    >>> if result.success:
    ...     html = result.content
    """

    def __init__(self, mention_service: Optional[MentionService] = None) -> None:
        self._mentions = mention_service or MentionService()
        self._document: Optional[Document] = None

    @property
    def mentions(self) -> MentionService:
        return self._mentions

    @property
    def document(self) -> Optional[Document]:
        return self._document

    @property
    def version(self) -> Optional[str]:
        return self._document.version if self._document is not None else None

    def load(self, document: Optional[Document]) -> bool:
        """Adopt *document*; return True when its mentions were re-extracted."""
        self._document = document
        rebuilt = self._mentions.load(document)
        logger.info("Render: document loaded version=%s rebuilt_registry=%s", self.version, rebuilt)
        return rebuilt

    def is_current(self, result: RenderResult) -> bool:
        """Return True if *result* was rendered from the loaded document version."""
        return result.version == self.version

    def render(self, *, pretty: bool = False) -> RenderResult:
        """Render the loaded document to HTML.

        With no document loaded the pass still succeeds and yields the empty
        document container.
        """
        registry = self._mentions.registry
        version = self.version
        logger.debug("Render: pass start version=%s mentions=%d", version, len(registry))
        try:
            element = render_document(self._document, registry)
            html = to_html(element, pretty=pretty)
        except Exception as exc:  # noqa: BLE001 - intentionally broad for service boundary
            logger.error("Render FAIL: exception type=%s msg=%s", exc.__class__.__name__, str(exc), exc_info=True)
            return RenderResult(
                success=False,
                content=None,
                message="Failed to render document.",
                version=version,
                registry=registry.snapshot(),
                details={
                    "reason": "exception",
                    "exception_type": exc.__class__.__name__,
                    "exception_message": str(exc),
                },
            )

        logger.debug("Render OK: version=%s len=%d", version, len(html))
        return RenderResult(
            success=True,
            content=html,
            message="",
            element=element,
            version=version,
            registry=registry.snapshot(),
        )
