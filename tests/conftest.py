"""Test configuration and shared fixtures for the label editor.

Every test runs against an isolated per-user config directory so that the
developer's own ``~/.label_editor`` overrides never leak into assertions.
"""

import logging
import sys
from pathlib import Path
from typing import Dict, List

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from label_editor.config import ConfigManager
from label_editor.core.defaults import create_blank_design, create_element
from label_editor.core.models import LabelDesign

# Configure test logging
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the user config directory at a temp dir and reset the singleton."""
    config_dir = tmp_path / "user_config"
    monkeypatch.setenv("LABEL_EDITOR_CONFIG_DIR", str(config_dir))
    ConfigManager.reset()
    yield config_dir
    ConfigManager.reset()


@pytest.fixture
def blank_design() -> LabelDesign:
    return create_blank_design()


@pytest.fixture
def make_design():
    """Build a blank design holding text elements laid out per section.

    ``make_design({"identity": ["a", "b"], "dpp": ["c"]})`` creates text
    elements with ids ``a``, ``b`` (sort orders 0, 1) in *identity* and ``c``
    in *dpp*.
    """
    def factory(layout: Dict[str, List[str]]) -> LabelDesign:
        design = create_blank_design()
        elements = []
        for section_id, ids in layout.items():
            for order, element_id in enumerate(ids):
                element = create_element("text", section_id, order, content=element_id.upper())
                elements.append(_with_id(element, element_id))
        design.elements = elements
        return design
    return factory


@pytest.fixture
def section_ids():
    """Return the element ids of a section in display order."""
    def getter(design: LabelDesign, section_id: str) -> List[str]:
        return [e.id for e in design.section_elements(section_id)]
    return getter


def _with_id(element, element_id: str):
    import dataclasses
    return dataclasses.replace(element, id=element_id)
