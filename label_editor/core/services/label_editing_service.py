from __future__ import annotations

"""Service layer for edits on the in-memory label design.

This module provides a UI-agnostic, testable service that encapsulates every
mutation of a :class:`LabelDesign`: inserting, updating, deleting, duplicating
and reordering elements, moving elements across sections, and reordering or
restyling sections.

Scope and guarantees:
- Operates purely in-memory, no file I/O nor UI imports.
- Never mutates the design it is given. Each operation builds and returns a
  new design inside an :class:`OperationResult`; on a no-op the result carries
  the input design unchanged.
- Invalid references (stale element or section ids, out-of-range indices) are
  expected because drag and keyboard events can race with deletions. They
  produce ``OperationResult(success=False, ...)``, never an exception.
- After every successful operation, sibling ``sort_order`` values are
  pairwise distinct within each section and section ``sort_order`` values are
  pairwise distinct.

Ordering policy
---------------
``delete_element`` leaves gaps in ``sort_order``; only relative order matters.
Inserts place the new element relative to stored sort orders, never by
counting siblings, so gaps never misplace it.
``reorder_element``, ``move_element_to_section`` and ``reorder_sections``
renumber the affected collection contiguously (0..N-1).

Examples
--------
Basic usage:

    service = LabelEditingService()
    result = service.insert_element(design, "text", "identity")
    if result.success:
        design = result.design
        new_id = result.details["element_id"]
"""

import dataclasses
from dataclasses import dataclass
import logging
from typing import Any, Dict, List, Literal, Optional

from label_editor.core.defaults import create_element
from label_editor.core.models import ELEMENT_CLASSES, LabelDesign, LabelElement, LabelSection
from label_editor.core.utils import clamp, generate_element_id

__all__ = ["OperationResult", "LabelEditingService"]

logger = logging.getLogger(__name__)

# Design-level settings that update_design_settings may replace.
_DESIGN_SETTINGS = frozenset({
    "page_size",
    "page_width",
    "page_height",
    "padding",
    "background_color",
    "font_family",
    "base_font_size",
    "base_text_color",
})


@dataclass(frozen=True)
class OperationResult:
    """Result of an editing operation.

    Attributes
    ----------
    success
        Whether the operation changed the design.
    message
        Human-readable summary suitable for logs or UI display.
    design
        The resulting design: a new object on success, the input on a no-op.
    details
        Optional structured details for diagnostics or caller logic, e.g. the
        id of an inserted element under ``"element_id"``.
    """
    success: bool
    message: str
    design: LabelDesign
    details: Optional[Dict[str, Any]] = None


class LabelEditingService:
    """Encapsulates edit operations on a label design.

    Design principles:
    - No UI dependencies, no disk I/O.
    - No exceptions for expected invalid actions; return OperationResult.
    - Index arguments are clamped, ids are looked up, never trusted.
    """

    # -------------------------------------------------------------------------
    # Element operations
    # -------------------------------------------------------------------------

    def insert_element(
        self,
        design: LabelDesign,
        element_type: str,
        section_id: str,
        after_index: int = -1,
    ) -> OperationResult:
        """Insert a new element with default payload into a section.

        The new element goes right after the element at position *after_index*
        of the full-section ordering, or after the last one when
        ``after_index < 0`` (append). Placement uses stored sort orders, so gaps
        left by deletions are respected. Every sibling with
        ``sort_order >= new sort_order`` shifts up by one.
        """
        logger.info("Edit: insert_element type=%s section=%s after=%d", element_type, section_id, after_index)
        if element_type not in ELEMENT_CLASSES:
            logger.warning("Edit FAIL: insert_element unknown_type type=%s", element_type)
            return OperationResult(False, f"Unknown element type '{element_type}'.", design, {"element_type": element_type})
        element = create_element(element_type, section_id)
        return self.insert_configured_element(design, element, section_id, after_index)

    def insert_configured_element(
        self,
        design: LabelDesign,
        element: LabelElement,
        section_id: str,
        after_index: int = -1,
    ) -> OperationResult:
        """Insert a pre-configured element using the same placement rules as insert_element.

        The element's own ``section_id``/``sort_order`` are overwritten; a fresh
        id is assigned if the given one already exists in the design.
        """
        if design.get_section(section_id) is None:
            logger.warning("Edit FAIL: insert_element section_not_found section=%s", section_id)
            return OperationResult(False, f"Section not found for id '{section_id}'.", design, {"section_id": section_id})

        ordered = design.section_elements(section_id)
        after_index = clamp(after_index, -1, len(ordered) - 1)
        if not ordered:
            new_sort_order = 0
        elif after_index < 0:
            new_sort_order = ordered[-1].sort_order + 1
        else:
            new_sort_order = ordered[after_index].sort_order + 1

        element_id = element.id
        if design.get_element(element_id) is not None:
            element_id = generate_element_id()
        new_element = dataclasses.replace(
            element, id=element_id, section_id=section_id, sort_order=new_sort_order
        )

        elements = [
            dataclasses.replace(e, sort_order=e.sort_order + 1)
            if e.section_id == section_id and e.sort_order >= new_sort_order
            else e
            for e in design.elements
        ]
        elements.append(new_element)

        logger.info("Edit OK: insert_element id=%s section=%s sort_order=%d", element_id, section_id, new_sort_order)
        return OperationResult(
            True,
            "Inserted element.",
            dataclasses.replace(design, elements=elements),
            {"element_id": element_id, "section_id": section_id, "sort_order": new_sort_order},
        )

    def update_element(self, design: LabelDesign, updated: LabelElement) -> OperationResult:
        """Replace the element with the same id.

        Ownership and ordering are not edited here: the stored element's
        ``section_id`` and ``sort_order`` win over whatever *updated* carries.
        """
        current = design.get_element(updated.id)
        if current is None:
            logger.warning("Edit FAIL: update_element element_not_found id=%s", updated.id)
            return OperationResult(False, f"Element not found for id '{updated.id}'.", design, {"element_id": updated.id})
        if current.type != updated.type:
            logger.warning("Edit FAIL: update_element type_change id=%s %s->%s", updated.id, current.type, updated.type)
            return OperationResult(
                False,
                "Element type cannot change.",
                design,
                {"element_id": updated.id, "type": current.type},
            )

        replacement = dataclasses.replace(updated, section_id=current.section_id, sort_order=current.sort_order)
        elements = [replacement if e.id == updated.id else e for e in design.elements]
        logger.debug("Edit OK: update_element id=%s", updated.id)
        return OperationResult(True, "Updated element.", dataclasses.replace(design, elements=elements), {"element_id": updated.id})

    def delete_element(self, design: LabelDesign, element_id: str) -> OperationResult:
        """Remove an element. Remaining siblings keep their sort_order (gaps allowed)."""
        logger.info("Edit: delete_element id=%s", element_id)
        if design.get_element(element_id) is None:
            logger.info("Edit noop: delete_element element_not_found id=%s", element_id)
            return OperationResult(False, f"Element not found for id '{element_id}'.", design, {"element_id": element_id})
        elements = [e for e in design.elements if e.id != element_id]
        logger.info("Edit OK: delete_element id=%s", element_id)
        return OperationResult(True, "Deleted element.", dataclasses.replace(design, elements=elements), {"element_id": element_id})

    def duplicate_element(self, design: LabelDesign, element_id: str) -> OperationResult:
        """Clone an element right after its source within the same section."""
        logger.info("Edit: duplicate_element id=%s", element_id)
        source = design.get_element(element_id)
        if source is None:
            logger.info("Edit noop: duplicate_element element_not_found id=%s", element_id)
            return OperationResult(False, f"Element not found for id '{element_id}'.", design, {"element_id": element_id})

        clone = dataclasses.replace(source, id=generate_element_id(), sort_order=source.sort_order + 1)
        elements = [
            dataclasses.replace(e, sort_order=e.sort_order + 1)
            if e.section_id == source.section_id and e.sort_order > source.sort_order
            else e
            for e in design.elements
        ]
        elements.append(clone)
        logger.info("Edit OK: duplicate_element source=%s clone=%s", element_id, clone.id)
        return OperationResult(
            True,
            "Duplicated element.",
            dataclasses.replace(design, elements=elements),
            {"element_id": clone.id, "source_id": element_id},
        )

    def move_element_adjacent(
        self,
        design: LabelDesign,
        element_id: str,
        direction: Literal["up", "down"],
    ) -> OperationResult:
        """Swap sort_order with the immediate sibling in *direction*."""
        logger.info("Edit: move_element direction=%s id=%s", direction, element_id)
        if direction not in ("up", "down"):
            return OperationResult(False, f"Unsupported move direction '{direction}'.", design, {"allowed": ["up", "down"]})
        element = design.get_element(element_id)
        if element is None:
            logger.warning("Edit FAIL: move_element element_not_found id=%s", element_id)
            return OperationResult(False, f"Element not found for id '{element_id}'.", design, {"element_id": element_id})

        siblings = design.section_elements(element.section_id)
        idx = next(i for i, e in enumerate(siblings) if e.id == element_id)
        swap_idx = idx - 1 if direction == "up" else idx + 1
        if swap_idx < 0 or swap_idx >= len(siblings):
            logger.info("Edit noop: move_element direction=%s boundary id=%s", direction, element_id)
            return OperationResult(False, f"Cannot move {direction} (at boundary).", design, {"element_id": element_id})

        other = siblings[swap_idx]
        new_orders = {element.id: other.sort_order, other.id: element.sort_order}
        elements = [
            dataclasses.replace(e, sort_order=new_orders[e.id]) if e.id in new_orders else e
            for e in design.elements
        ]
        logger.info("Edit OK: move_element direction=%s id=%s", direction, element_id)
        return OperationResult(
            True,
            f"Moved element {direction}.",
            dataclasses.replace(design, elements=elements),
            {"element_id": element_id, "swapped_with": other.id},
        )

    def reorder_element(
        self,
        design: LabelDesign,
        section_id: str,
        from_index: int,
        to_index: int,
    ) -> OperationResult:
        """Move the element at *from_index* to *to_index* within a section.

        Indices refer to the full-section ordering. The whole section is then
        renumbered contiguously. ``from_index == to_index`` is a no-op.
        """
        logger.info("Edit: reorder_element section=%s from=%d to=%d", section_id, from_index, to_index)
        ordered = design.section_elements(section_id)
        if not ordered:
            logger.info("Edit noop: reorder_element empty_section section=%s", section_id)
            return OperationResult(False, f"Section '{section_id}' has no elements.", design, {"section_id": section_id})

        from_index = clamp(from_index, 0, len(ordered) - 1)
        to_index = clamp(to_index, 0, len(ordered) - 1)
        if from_index == to_index:
            logger.info("Edit noop: reorder_element same_position section=%s index=%d", section_id, from_index)
            return OperationResult(False, "Element already at target position.", design, {"section_id": section_id})

        moved = ordered.pop(from_index)
        ordered.insert(to_index, moved)
        elements = _renumber(design.elements, ordered)
        logger.info("Edit OK: reorder_element id=%s section=%s from=%d to=%d", moved.id, section_id, from_index, to_index)
        return OperationResult(
            True,
            "Reordered element.",
            dataclasses.replace(design, elements=elements),
            {"element_id": moved.id, "section_id": section_id, "from_index": from_index, "to_index": to_index},
        )

    def move_element_to_section(
        self,
        design: LabelDesign,
        element_id: str,
        from_section_id: str,
        to_section_id: str,
        to_index: int,
    ) -> OperationResult:
        """Move an element into another section at *to_index*.

        This is the only operation that changes ``section_id``. *to_index* is
        clamped to ``[0, target element count]``; both the source and the
        target section are renumbered contiguously afterwards.
        """
        logger.info(
            "Edit: move_element_to_section id=%s from=%s to=%s index=%d",
            element_id, from_section_id, to_section_id, to_index,
        )
        element = design.get_element(element_id)
        if element is None:
            logger.warning("Edit FAIL: move_element_to_section element_not_found id=%s", element_id)
            return OperationResult(False, f"Element not found for id '{element_id}'.", design, {"element_id": element_id})
        if design.get_section(to_section_id) is None:
            logger.warning("Edit FAIL: move_element_to_section section_not_found section=%s", to_section_id)
            return OperationResult(False, f"Section not found for id '{to_section_id}'.", design, {"section_id": to_section_id})

        if element.section_id != from_section_id:
            # Drag payloads can be stale; the element's current section is authoritative.
            logger.debug(
                "move_element_to_section stale source section=%s actual=%s", from_section_id, element.section_id
            )
            from_section_id = element.section_id

        if from_section_id == to_section_id:
            ordered = design.section_elements(from_section_id)
            from_index = next(i for i, e in enumerate(ordered) if e.id == element_id)
            return self.reorder_element(design, to_section_id, from_index, to_index)

        target = [e for e in design.section_elements(to_section_id)]
        to_index = clamp(to_index, 0, len(target))
        target.insert(to_index, dataclasses.replace(element, section_id=to_section_id))
        source = [e for e in design.section_elements(from_section_id) if e.id != element_id]

        positions = {e.id: i for i, e in enumerate(source)}
        positions.update({e.id: i for i, e in enumerate(target)})
        elements: List[LabelElement] = []
        for e in design.elements:
            if e.id == element_id:
                e = dataclasses.replace(e, section_id=to_section_id)
            if e.id in positions:
                e = dataclasses.replace(e, sort_order=positions[e.id])
            elements.append(e)

        logger.info(
            "Edit OK: move_element_to_section id=%s from=%s to=%s index=%d",
            element_id, from_section_id, to_section_id, to_index,
        )
        return OperationResult(
            True,
            "Moved element to section.",
            dataclasses.replace(design, elements=elements),
            {"element_id": element_id, "from_section": from_section_id, "to_section": to_section_id, "to_index": to_index},
        )

    # -------------------------------------------------------------------------
    # Section operations
    # -------------------------------------------------------------------------

    def reorder_sections(self, design: LabelDesign, from_index: int, to_index: int) -> OperationResult:
        """Move a section to a new position and renumber all sections contiguously."""
        logger.info("Edit: reorder_sections from=%d to=%d", from_index, to_index)
        ordered = design.sorted_sections()
        if not ordered:
            return OperationResult(False, "Design has no sections.", design)

        from_index = clamp(from_index, 0, len(ordered) - 1)
        to_index = clamp(to_index, 0, len(ordered) - 1)
        if from_index == to_index:
            logger.info("Edit noop: reorder_sections same_position index=%d", from_index)
            return OperationResult(False, "Section already at target position.", design)

        moved = ordered.pop(from_index)
        ordered.insert(to_index, moved)
        positions = {s.id: i for i, s in enumerate(ordered)}
        sections = [dataclasses.replace(s, sort_order=positions[s.id]) for s in design.sections]
        logger.info("Edit OK: reorder_sections id=%s from=%d to=%d", moved.id, from_index, to_index)
        return OperationResult(
            True,
            "Reordered sections.",
            dataclasses.replace(design, sections=sections),
            {"section_id": moved.id, "from_index": from_index, "to_index": to_index},
        )

    def toggle_section_collapsed(self, design: LabelDesign, section_id: str) -> OperationResult:
        """Flip a section's collapsed flag. View-only state: not recorded in history."""
        section = design.get_section(section_id)
        if section is None:
            return OperationResult(False, f"Section not found for id '{section_id}'.", design, {"section_id": section_id})
        sections = [
            dataclasses.replace(s, collapsed=not s.collapsed) if s.id == section_id else s
            for s in design.sections
        ]
        return OperationResult(
            True,
            "Collapsed section." if not section.collapsed else "Expanded section.",
            dataclasses.replace(design, sections=sections),
            {"section_id": section_id, "record_history": False},
        )

    def set_section_visible(self, design: LabelDesign, section_id: str, visible: bool) -> OperationResult:
        """Show or hide a section. Sections are never removed."""
        logger.info("Edit: set_section_visible section=%s visible=%s", section_id, visible)
        section = design.get_section(section_id)
        if section is None:
            logger.warning("Edit FAIL: set_section_visible section_not_found section=%s", section_id)
            return OperationResult(False, f"Section not found for id '{section_id}'.", design, {"section_id": section_id})
        if section.visible == bool(visible):
            return OperationResult(False, "Section visibility unchanged.", design, {"section_id": section_id})
        sections = [
            dataclasses.replace(s, visible=bool(visible)) if s.id == section_id else s
            for s in design.sections
        ]
        return OperationResult(
            True,
            "Section shown." if visible else "Section hidden.",
            dataclasses.replace(design, sections=sections),
            {"section_id": section_id},
        )

    def update_section(self, design: LabelDesign, updated: LabelSection) -> OperationResult:
        """Replace a section's styling fields; its id and sort_order are preserved."""
        current = design.get_section(updated.id)
        if current is None:
            logger.warning("Edit FAIL: update_section section_not_found section=%s", updated.id)
            return OperationResult(False, f"Section not found for id '{updated.id}'.", design, {"section_id": updated.id})
        replacement = dataclasses.replace(updated, sort_order=current.sort_order)
        sections = [replacement if s.id == updated.id else s for s in design.sections]
        return OperationResult(True, "Updated section.", dataclasses.replace(design, sections=sections), {"section_id": updated.id})

    # -------------------------------------------------------------------------
    # Design settings
    # -------------------------------------------------------------------------

    def update_design_settings(self, design: LabelDesign, **settings: Any) -> OperationResult:
        """Replace design-level settings such as background color or base font size."""
        unknown = sorted(set(settings) - _DESIGN_SETTINGS)
        if unknown:
            logger.warning("Edit FAIL: update_design_settings unknown=%s", unknown)
            return OperationResult(False, f"Unknown design settings: {', '.join(unknown)}.", design, {"unknown": unknown})
        if not settings:
            return OperationResult(False, "No settings given.", design)
        return OperationResult(
            True,
            "Updated design settings.",
            dataclasses.replace(design, **settings),
            {"settings": sorted(settings)},
        )


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------

def _renumber(elements: List[LabelElement], ordered: List[LabelElement]) -> List[LabelElement]:
    """Assign each element in *ordered* its position as sort_order, keeping list order of *elements*."""
    positions = {e.id: i for i, e in enumerate(ordered)}
    return [
        dataclasses.replace(e, sort_order=positions[e.id]) if e.id in positions else e
        for e in elements
    ]
