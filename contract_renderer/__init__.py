"""Top-level package for Contract Renderer.

Renders contract document trees (headings, paragraphs, lists, numbered
clauses, mention placeholders) into an HTML presentation tree and keeps a
single registry of mention values so every occurrence of a mention stays in
sync. Front-ends should only depend on the public API exposed here.
"""

from .core.importers import load_document, parse_document
from .core.mentions import MentionRegistry, extract_mentions, resolve_mention
from .core.models import Document, DocumentNode, MentionRecord, NodeKind
from .core.services import MentionService, RenderService

__all__: list[str] = [
    "Document",
    "DocumentNode",
    "MentionRecord",
    "MentionRegistry",
    "MentionService",
    "NodeKind",
    "RenderService",
    "extract_mentions",
    "load_document",
    "parse_document",
    "resolve_mention",
]
