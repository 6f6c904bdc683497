from __future__ import annotations

"""High-level orchestration services (mention editing, rendering).

Services are instantiated directly; ``RenderService`` accepts an existing
``MentionService`` so that an editing front-end and the renderer share one
registry.
"""

from .mention_service import MentionService, MentionUpdateResult  # noqa: F401
from .render_service import RenderResult, RenderService  # noqa: F401

__all__: list[str] = [
    "MentionService",
    "MentionUpdateResult",
    "RenderResult",
    "RenderService",
]
