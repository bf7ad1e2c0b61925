from __future__ import annotations

"""Shared data structures used across the label editor core.

This package exposes the label document model: design-level settings plus
two independent ordered collections, sections and elements. It is
intentionally free of UI / I/O code so that the contained objects can be
reused in any context (unit-tests, CLI, GUI, etc.).

The model carries shape only. All edits go through
:class:`~label_editor.core.services.label_editing_service.LabelEditingService`,
which never mutates a design in place and always returns a new one.
"""

import copy
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional

from label_editor.core.utils import to_camel_case, to_snake_case

from .elements import (
    ELEMENT_CLASSES,
    ELEMENT_TYPES,
    DesignFormatError,
    ElementType,
    LabelElement,
    SectionId,
    element_from_dict,
    element_to_dict,
)

__all__ = [
    "DESIGN_VERSION",
    "SECTION_IDS",
    "DesignFormatError",
    "ElementType",
    "LabelDesign",
    "LabelElement",
    "LabelSection",
    "SectionId",
    "ELEMENT_CLASSES",
    "ELEMENT_TYPES",
]

DESIGN_VERSION = 2

# Fixed section catalog. Order here is the default top-to-bottom order.
SECTION_IDS = ("identity", "dpp", "compliance", "sustainability", "custom", "footer")


@dataclass(frozen=True)
class LabelSection:
    """User-orderable region of the label containing elements.

    Attributes
    ----------
    id
        One of :data:`SECTION_IDS`; the catalog is fixed per document.
    label
        i18n key of the section heading.
    sort_order
        Rank among sections; unique within a design.
    visible
        Hidden sections keep their elements but are not rendered.
    collapsed
        Editor-only state, never recorded in undo history.
    """

    id: str
    label: str
    sort_order: int
    visible: bool = True
    collapsed: bool = False
    padding_top: float = 0
    padding_bottom: float = 6
    show_border: bool = False
    border_color: str = "#d1d5db"
    background_color: Optional[str] = None


@dataclass
class LabelDesign:
    """The complete in-memory model of one label being edited.

    Attributes
    ----------
    sections
        Section collection; order is defined by ``sort_order``, not list position.
    elements
        Element collection across all sections; membership is ``section_id``
        and sibling order is ``sort_order``.
    """

    page_size: str = "A6"
    page_width: float = 297.64
    page_height: float = 419.53
    padding: float = 14
    background_color: str = "#ffffff"
    font_family: str = "Helvetica"
    base_font_size: float = 6.5
    base_text_color: str = "#1a1a1a"
    sections: List[LabelSection] = field(default_factory=list)
    elements: List[LabelElement] = field(default_factory=list)
    version: int = DESIGN_VERSION

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    def get_element(self, element_id: str) -> Optional[LabelElement]:
        for element in self.elements:
            if element.id == element_id:
                return element
        return None

    def get_section(self, section_id: str) -> Optional[LabelSection]:
        for section in self.sections:
            if section.id == section_id:
                return section
        return None

    def section_elements(self, section_id: str) -> List[LabelElement]:
        """Return the full-section ordering: every element of the section by ``sort_order``."""
        return sorted(
            (e for e in self.elements if e.section_id == section_id),
            key=lambda e: e.sort_order,
        )

    def sorted_sections(self) -> List[LabelSection]:
        return sorted(self.sections, key=lambda s: s.sort_order)

    def clone(self) -> "LabelDesign":
        """Return a deep, fully independent copy."""
        return copy.deepcopy(self)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:
        """Return the JSON-compatible storage form used by saved templates."""
        data: Dict[str, Any] = {"_version": self.version}
        for f in fields(self):
            if f.name in ("version", "sections", "elements"):
                continue
            data[to_camel_case(f.name)] = getattr(self, f.name)
        data["sections"] = [_section_to_dict(s) for s in self.sections]
        data["elements"] = [element_to_dict(e) for e in self.elements]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LabelDesign":
        """Build a design from its storage form.

        Raises
        ------
        DesignFormatError
            If the payload is not a mapping, has an unsupported version or
            contains an undecodable section or element.
        """
        if not isinstance(data, dict):
            raise DesignFormatError(f"Design must be a mapping, got {type(data).__name__}")
        version = data.get("_version", DESIGN_VERSION)
        if version != DESIGN_VERSION:
            raise DesignFormatError(f"Unsupported design version {version!r}")

        settings = {f.name for f in fields(cls)} - {"version", "sections", "elements"}
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            name = to_snake_case(key)
            if name in settings:
                kwargs[name] = value

        sections = [_section_from_dict(s) for s in data.get("sections") or []]
        elements = [element_from_dict(e) for e in data.get("elements") or []]
        return cls(sections=sections, elements=elements, **kwargs)


def _section_to_dict(section: LabelSection) -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    for f in fields(section):
        value = getattr(section, f.name)
        if value is None:
            continue
        data[to_camel_case(f.name)] = value
    return data


def _section_from_dict(data: Dict[str, Any]) -> LabelSection:
    if not isinstance(data, dict):
        raise DesignFormatError(f"Section must be a mapping, got {type(data).__name__}")
    known = {f.name for f in fields(LabelSection)}
    kwargs = {to_snake_case(k): v for k, v in data.items() if to_snake_case(k) in known}
    missing = [name for name in ("id", "label", "sort_order") if name not in kwargs]
    if missing:
        raise DesignFormatError(f"Section is missing {', '.join(missing)}")
    return LabelSection(**kwargs)
