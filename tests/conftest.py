"""Shared fixtures for Contract Renderer tests.

Provides sample documents in the raw JSON shape, parsed documents, and an
isolated configuration directory so user overrides on the test machine never
leak into assertions.
"""

import copy
import logging
import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from contract_renderer.config import ConfigManager
from contract_renderer.core.importers import parse_document

# Configure test logging
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


SERVICE_AGREEMENT = [
    {
        "title": "Service Agreement",
        "type": "block",
        "children": [
            {"type": "h1", "children": [{"text": "Service Agreement"}]},
            {
                "type": "p",
                "children": [
                    {"text": "This agreement is made on "},
                    {
                        "type": "mention",
                        "id": "effective_date",
                        "color": "rgb(20, 170, 245)",
                        "title": "Effective Date",
                        "variableType": "Date",
                        "value": "November 17, 2021",
                        "children": [{"text": "November 17, 2021"}],
                    },
                    {"text": " between "},
                    {
                        "type": "mention",
                        "id": "provider",
                        "color": "rgb(245, 66, 66)",
                        "title": "Provider",
                        "children": [{"text": "Acme Corp"}],
                    },
                    {"text": "."},
                ],
            },
            {
                "type": "p",
                "children": [
                    {
                        "type": "clause",
                        "title": "Services",
                        "children": [
                            {"text": "The ", "bold": True},
                            {
                                "type": "mention",
                                "id": "provider",
                                "color": "rgb(245, 66, 66)",
                                "title": "Provider",
                                "children": [{"text": "Acme Corp"}],
                            },
                            {"text": " shall provide the services."},
                        ],
                    }
                ],
            },
            {
                "type": "p",
                "children": [
                    {
                        "type": "clause",
                        "title": "Payment",
                        "children": [
                            {"text": "Payment terms:"},
                            {"type": "clause", "children": [{"text": "Net 30"}]},
                            {"type": "clause", "children": [{"text": "Late fees apply"}]},
                        ],
                    }
                ],
            },
            {
                "type": "ul",
                "children": [
                    {
                        "type": "li",
                        "children": [
                            {"type": "lic", "children": [{"text": "Line one\nLine two", "italic": True}]}
                        ],
                    }
                ],
            },
        ],
    }
]


@pytest.fixture
def service_agreement_data():
    """Raw JSON-shaped document (deep copy, safe to mutate)."""
    return copy.deepcopy(SERVICE_AGREEMENT)


@pytest.fixture
def service_agreement(service_agreement_data):
    """Parsed :class:`Document` for the sample agreement."""
    return parse_document(service_agreement_data)


@pytest.fixture
def write_json(tmp_path):
    """Write a JSON payload to a temp file and return its path."""
    import json

    def writer(payload, name="input.json"):
        path = tmp_path / name
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path
    return writer


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point user overrides at an empty directory and reset the config singleton."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setenv("CONTRACT_RENDERER_CONFIG_DIR", str(config_dir))
    ConfigManager.reset()
    yield config_dir
    ConfigManager.reset()
