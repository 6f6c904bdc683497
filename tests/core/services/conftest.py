import os
import sys
import pytest

# Ensure project root is importable when running pytest from repository root
_THIS_DIR = os.path.dirname(__file__)
_REPO_ROOT = os.path.abspath(os.path.join(_THIS_DIR, "..", "..", ".."))
if _REPO_ROOT not in sys.path:
    sys.path.insert(0, _REPO_ROOT)

lxml = pytest.importorskip("lxml")

from contract_renderer.core.importers import parse_document
from contract_renderer.core.services import MentionService, RenderService


def _mention(mention_id, text, variable_type=None, color="rgb(20, 170, 245)"):
    raw = {"type": "mention", "id": mention_id, "color": color, "title": mention_id.title(),
           "children": [{"text": text}]}
    if variable_type:
        raw["variableType"] = variable_type
    return raw


@pytest.fixture
def typed_document():
    """Document holding one mention per validation type."""
    return parse_document([
        {"children": [
            {"type": "p", "children": [
                _mention("signed_on", "May 1, 2024", "date"),
                _mention("fee", "1500", "number"),
                _mention("contact", "legal@acme.com", "email"),
                _mention("party", "Acme"),
            ]},
        ]},
    ])


@pytest.fixture
def mention_service(typed_document):
    return MentionService(typed_document)


@pytest.fixture
def render_service(service_agreement):
    service = RenderService()
    service.load(service_agreement)
    return service
