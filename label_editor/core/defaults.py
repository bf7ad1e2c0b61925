from __future__ import annotations

"""Factory functions for default sections, elements and blank designs."""

from typing import Any, List

from label_editor.core.models import ELEMENT_CLASSES, LabelDesign, LabelElement, LabelSection
from label_editor.core.utils import generate_element_id

__all__ = [
    "A6_WIDTH_PT",
    "A6_HEIGHT_PT",
    "create_default_sections",
    "create_element",
    "create_blank_design",
]

A6_WIDTH_PT = 297.64
A6_HEIGHT_PT = 419.53

_SECTION_BORDER = "#d1d5db"


def create_default_sections() -> List[LabelSection]:
    return [
        LabelSection("identity", "ml.section.identity", 0, show_border=True, border_color=_SECTION_BORDER),
        LabelSection("dpp", "ml.section.dpp", 1, show_border=True, border_color=_SECTION_BORDER),
        LabelSection("compliance", "ml.section.compliance", 2, show_border=True, border_color=_SECTION_BORDER),
        LabelSection("sustainability", "ml.section.sustainability", 3),
        LabelSection("custom", "ml.section.custom", 4, visible=False),
        LabelSection("footer", "ml.section.footer", 5, visible=False, padding_top=4, padding_bottom=0),
    ]


def create_element(element_type: str, section_id: str, sort_order: int = 0, **payload: Any) -> LabelElement:
    """Create a new element of *element_type* with a fresh id and default payload.

    Keyword arguments override individual payload fields.

    Raises
    ------
    ValueError
        If *element_type* is not a known element type.
    """
    cls = ELEMENT_CLASSES.get(element_type)
    if cls is None:
        raise ValueError(f"Unknown element type {element_type!r}")
    return cls(id=generate_element_id(), section_id=section_id, sort_order=sort_order, **payload)


def create_blank_design() -> LabelDesign:
    return LabelDesign(
        page_size="A6",
        page_width=A6_WIDTH_PT,
        page_height=A6_HEIGHT_PT,
        sections=create_default_sections(),
        elements=[],
    )
