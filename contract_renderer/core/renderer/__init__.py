"""Document tree to HTML presentation tree rendering.

No I/O here; the public functions work purely on in-memory trees.
"""

from .counter import ClauseCounter, letter_label
from .html_renderer import TOP_LEVEL_PARENTS, render, render_document, to_html

__all__ = [
    "ClauseCounter",
    "letter_label",
    "render",
    "render_document",
    "to_html",
    "TOP_LEVEL_PARENTS",
]
