"""
Pytest Configuration and Fixtures
"""

import json
import sys
from pathlib import Path
from typing import Any, Dict

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture
def sample_presentation() -> Dict[str, Any]:
    """A small presentation document in generator format."""
    return {
        "id": "p-1",
        "title": "Test Deck",
        "theme": "Minimalist",
        "palette": "Sunset",
        "slides": [
            {"id": "s1", "title": "Test Deck", "subtitle": "Fixtures", "layout": "title"},
            {"id": "s2", "title": "Points", "content": ["one", "two", "$x^2$"], "layout": "content"},
        ],
    }


@pytest.fixture
def presentation_file(tmp_path: Path, sample_presentation: Dict[str, Any]) -> Path:
    """The sample presentation written to a JSON file."""
    path = tmp_path / "presentation.json"
    path.write_text(json.dumps(sample_presentation), encoding="utf-8")
    return path
