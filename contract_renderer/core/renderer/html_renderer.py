from __future__ import annotations

"""Render document trees into an HTML presentation tree.

The output is an ``lxml`` element tree and this module has no I/O. Drawing
the tree is left to whatever consumes the HTML.

Dispatch happens on the node's shape, in this order: text nodes, mentions,
clauses, then every other children-bearing kind through
:data:`_CONTAINER_TAGS`. Every :class:`NodeKind` must be covered; the check
at the bottom of the module fails at import time when a kind is added
without a renderer.

Clause numbers come from a :class:`ClauseCounter` that is threaded through
the whole walk. The walk must therefore run top to bottom in document order;
a later clause's number depends on every earlier clause having been counted.

Every string handed to lxml goes through :func:`xml_safe_text` first, since
lxml refuses control characters that contract text pasted from word
processors often carries.
"""

import logging
from typing import Dict, Iterable, Optional, Tuple, Union

from lxml import etree as ET  # type: ignore

from contract_renderer.config import ConfigManager
from contract_renderer.core.mentions import MentionRegistry, resolve_mention
from contract_renderer.core.models import Document, DocumentNode, Formatting, NodeKind
from contract_renderer.core.renderer.counter import ClauseCounter
from contract_renderer.core.utils import xml_safe_text

__all__ = [
    "render",
    "render_document",
    "to_html",
    "TOP_LEVEL_PARENTS",
]

logger = logging.getLogger(__name__)

# A clause directly inside one of these is numbered; anywhere else it is lettered.
TOP_LEVEL_PARENTS = frozenset({
    NodeKind.PARAGRAPH,
    NodeKind.GENERIC_BLOCK,
    NodeKind.DOCUMENT_SECTION,
})

_FORMAT_STYLES: Tuple[Tuple[Formatting, str], ...] = (
    (Formatting.BOLD, "font-weight: bold"),
    (Formatting.ITALIC, "font-style: italic"),
    (Formatting.UNDERLINE, "text-decoration: underline"),
)

# kind -> (tag, css class)
_CONTAINER_TAGS: Dict[NodeKind, Tuple[str, Optional[str]]] = {
    NodeKind.HEADING_1: ("h1", None),
    NodeKind.HEADING_4: ("h4", None),
    NodeKind.PARAGRAPH: ("p", None),
    NodeKind.LIST: ("ul", None),
    NodeKind.LIST_ITEM: ("li", None),
    NodeKind.LIST_ITEM_CONTENT: ("span", None),
    NodeKind.GENERIC_BLOCK: ("div", "block"),
    NodeKind.DOCUMENT_SECTION: ("div", "document-section"),
    NodeKind.CONTAINER: ("span", None),
}

_DEFAULT_MENTION_CSS = {
    "color": "#fff",
    "padding": "2px 6px",
    "border-radius": "3px",
    "display": "inline-block",
    "font-size": "0.9em",
    "font-weight": "500",
}


# ---------------------------------------------------------------------------
# Styling helpers
# ---------------------------------------------------------------------------

def _style_for(formatting: Iterable[Formatting]) -> str:
    flags = set(formatting)
    return "; ".join(css for flag, css in _FORMAT_STYLES if flag in flags)


def _make_element(tag: str, formatting: Iterable[Formatting] = (), css_class: Optional[str] = None) -> ET.Element:
    el = ET.Element(tag)
    if css_class:
        el.set("class", css_class)
    style = _style_for(formatting)
    if style:
        el.set("style", style)
    return el


def _mention_style_config() -> Tuple[str, str, Dict[str, str]]:
    cfg = ConfigManager().get_mention_style()
    css = cfg.get("css") or _DEFAULT_MENTION_CSS
    return (
        str(cfg.get("css_class") or "mention"),
        str(cfg.get("id_attribute") or "data-mention-id"),
        {str(k): str(v) for k, v in css.items()},
    )


# ---------------------------------------------------------------------------
# Node renderers
# ---------------------------------------------------------------------------

def _render_text(node: DocumentNode) -> ET.Element:
    span = _make_element("span", node.formatting)
    segments = xml_safe_text(node.text).split("\n")
    span.text = segments[0]
    for segment in segments[1:]:
        br = ET.SubElement(span, "br")
        br.tail = segment
    return span


def _render_mention(node: DocumentNode, registry: Optional[MentionRegistry]) -> ET.Element:
    resolved = resolve_mention(node, registry)
    css_class, id_attribute, css = _mention_style_config()

    declarations = []
    if resolved.color:
        declarations.append(f"background-color: {xml_safe_text(resolved.color, soft_break=' ')}")
    declarations.extend(f"{prop}: {value}" for prop, value in css.items())

    span = ET.Element("span")
    span.set("class", css_class)
    span.set("style", "; ".join(declarations))
    if resolved.title is not None:
        span.set("title", xml_safe_text(resolved.title, soft_break=" "))
    if resolved.id:
        span.set(id_attribute, xml_safe_text(resolved.id, soft_break=" "))
    span.text = xml_safe_text(resolved.value, soft_break=" ")
    logger.debug(
        "Render: mention id=%s value=%r from_registry=%s",
        resolved.id, resolved.value, resolved.from_registry,
    )
    return span


def _render_clause(
    node: DocumentNode,
    counter: ClauseCounter,
    is_top_level: bool,
    registry: Optional[MentionRegistry],
) -> ET.Element:
    if is_top_level:
        label = f"{counter.increment_main()}."
    else:
        label = counter.increment_sub()
    logger.debug("Render: clause title=%r top_level=%s label=%s", node.title or "Untitled", is_top_level, label)

    wrapper = ET.Element("div")
    wrapper.set("class", "clause" if is_top_level else "clause clause-nested")
    number = ET.SubElement(wrapper, "div")
    number.set("class", "clause-number")
    number.text = label
    content = ET.SubElement(wrapper, "div")
    content.set("class", "clause-content")
    # Nested clauses and ordinary children alike see a clause parent, which
    # makes any clause among them lettered.
    _render_children(content, node, counter, NodeKind.CLAUSE, registry)
    return wrapper


def _render_container(
    node: DocumentNode,
    counter: ClauseCounter,
    parent_kind: Optional[NodeKind],
    registry: Optional[MentionRegistry],
) -> ET.Element:
    tag, css_class = _CONTAINER_TAGS[node.kind]
    if node.kind is NodeKind.PARAGRAPH and parent_kind is NodeKind.PARAGRAPH:
        tag = "div"  # <p> may not contain <p>
    el = _make_element(tag, node.formatting, css_class)
    _render_children(el, node, counter, node.kind, registry)
    return el


def _render_children(
    parent_el: ET.Element,
    node: DocumentNode,
    counter: ClauseCounter,
    parent_kind: NodeKind,
    registry: Optional[MentionRegistry],
) -> None:
    for index, child in enumerate(node.children):
        try:
            rendered = render(child, counter, parent_kind, registry)
        except Exception:  # noqa: BLE001 - one bad node must not abort the pass
            logger.error(
                "Render FAIL: skipped child index=%d kind=%s parent=%s",
                index, getattr(child, "kind", None), parent_kind.value, exc_info=True,
            )
            continue
        if rendered is not None:
            parent_el.append(rendered)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def render(
    node: Optional[DocumentNode],
    counter: ClauseCounter,
    parent_kind: Optional[NodeKind] = None,
    registry: Optional[MentionRegistry] = None,
) -> Optional[ET.Element]:
    """Render *node* and its subtree.

    Parameters
    ----------
    node
        Node to render; ``None`` produces no output.
    counter
        Clause counter of the current render pass, mutated in place.
    parent_kind
        Kind of the immediate container. Decides whether a clause is
        numbered (paragraph, generic block, document section) or lettered
        (anything else), and whether a paragraph degrades to a ``<div>``.
    registry
        Mention registry consulted for every mention occurrence.

    Returns
    -------
    Optional[ET.Element]
        The presentation element, or None for an absent node.
    """
    if node is None:
        return None
    if node.text is not None or node.kind is NodeKind.TEXT:
        return _render_text(node)
    if node.kind is NodeKind.MENTION:
        return _render_mention(node, registry)
    if node.kind is NodeKind.CLAUSE:
        return _render_clause(node, counter, parent_kind in TOP_LEVEL_PARENTS, registry)
    return _render_container(node, counter, parent_kind, registry)


def render_document(
    document: Union[Document, Iterable[DocumentNode], None],
    registry: Optional[MentionRegistry] = None,
) -> ET.Element:
    """Render a whole document with a fresh clause counter.

    Returns ``<div class="document-container"><div class="document-content">``
    holding one ``document-section`` div per section. Absent or malformed
    input gives the empty container.
    """
    container = ET.Element("div")
    container.set("class", "document-container")
    content = ET.SubElement(container, "div")
    content.set("class", "document-content")

    if isinstance(document, Document):
        sections: Tuple[DocumentNode, ...] = document.sections
    elif document is None:
        sections = ()
    else:
        try:
            sections = tuple(s for s in document if isinstance(s, DocumentNode))
        except TypeError:
            logger.warning("Render: document input is not iterable type=%s", type(document).__name__)
            sections = ()

    counter = ClauseCounter()
    for section in sections:
        section_el = _make_element("div", css_class="document-section")
        _render_children(section_el, section, counter, NodeKind.DOCUMENT_SECTION, registry)
        content.append(section_el)

    logger.debug("Render OK: sections=%d clauses=%d", len(sections), counter.current())
    return container


def to_html(element: ET.Element, *, pretty: bool = False) -> str:
    """Serialise a presentation element to an HTML string."""
    return ET.tostring(element, method="html", encoding="unicode", pretty_print=pretty)


# Every kind needs a renderer: text, mention and clause have dedicated
# branches in render(); everything else must be in _CONTAINER_TAGS.
_UNRENDERED_KINDS = set(NodeKind) - set(_CONTAINER_TAGS) - {NodeKind.TEXT, NodeKind.MENTION, NodeKind.CLAUSE}
if _UNRENDERED_KINDS:
    raise RuntimeError(f"No renderer for node kinds: {sorted(k.value for k in _UNRENDERED_KINDS)}")
