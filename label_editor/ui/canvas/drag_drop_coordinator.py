from __future__ import annotations

"""Drag-and-drop reconciliation for the label canvas.

The coordinator keeps the drag state across discrete pointer events and, on
drop, translates a (source, target) pair into exactly one call on the
:class:`LabelEditingService`.

A page-break calculator may split one section across several rendered pages,
so the element index a view knows about can be page-local. Payload indices
are therefore informational only: every drop re-derives positions by id from
the complete design.
"""

from dataclasses import dataclass
from enum import Enum
import logging
from typing import Optional, Union

from label_editor.core.models import LabelDesign, LabelElement
from label_editor.core.services.label_editing_service import LabelEditingService, OperationResult

__all__ = [
    "DragState",
    "ElementDragData",
    "SectionDragData",
    "PaletteDragData",
    "DragData",
    "DropTarget",
    "DragDropCoordinator",
]

logger = logging.getLogger(__name__)


class DragState(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


@dataclass(frozen=True)
class ElementDragData:
    element_id: str
    section_id: str
    index: int = -1


@dataclass(frozen=True)
class SectionDragData:
    section_id: str
    index: int = -1


@dataclass(frozen=True)
class PaletteDragData:
    element_type: str


DragData = Union[ElementDragData, SectionDragData, PaletteDragData]
DropTarget = Union[ElementDragData, SectionDragData]


class DragDropCoordinator:
    """Track an in-flight drag and dispatch the drop to the editing service."""

    def __init__(self, editing_service: Optional[LabelEditingService] = None) -> None:
        self._service = editing_service or LabelEditingService()
        self._active: Optional[DragData] = None
        self._over_section_id: Optional[str] = None

    # ------------------------------------------------------------------
    @property
    def state(self) -> DragState:
        return DragState.DRAGGING if self._active is not None else DragState.IDLE

    @property
    def active(self) -> Optional[DragData]:
        return self._active

    @property
    def over_section_id(self) -> Optional[str]:
        return self._over_section_id

    def drag_start(self, data: DragData) -> None:
        if self._active is not None:
            logger.debug("DnD: drag_start while dragging, replacing %r", self._active)
        self._active = data
        self._over_section_id = None
        logger.debug("DnD: drag_start %r", data)

    def drag_over(self, target: Optional[DropTarget]) -> None:
        self._over_section_id = target.section_id if target is not None else None

    def drag_cancel(self) -> None:
        logger.debug("DnD: drag_cancel %r", self._active)
        self._reset()

    def active_element(self, design: LabelDesign) -> Optional[LabelElement]:
        """Return the element being dragged, for an overlay preview."""
        if isinstance(self._active, ElementDragData):
            return design.get_element(self._active.element_id)
        return None

    # ------------------------------------------------------------------
    def drag_end(self, design: LabelDesign, target: Optional[DropTarget]) -> OperationResult:
        """Finish the drag and apply the matching edit.

        The coordinator is back in the idle state afterwards whatever the
        outcome. Unsupported pairs, a missing target or no active drag give a
        no-op result carrying *design* unchanged.
        """
        source = self._active
        self._reset()

        if source is None:
            return OperationResult(False, "No active drag.", design)
        if target is None:
            logger.debug("DnD: dropped outside any target %r", source)
            return OperationResult(False, "No drop target.", design)

        logger.debug("DnD: drag_end source=%r target=%r", source, target)
        if isinstance(source, ElementDragData):
            if isinstance(target, ElementDragData):
                return self._element_on_element(design, source, target)
            if isinstance(target, SectionDragData):
                return self._element_on_section(design, source, target)
        elif isinstance(source, PaletteDragData):
            if isinstance(target, ElementDragData):
                return self._palette_on_element(design, source, target)
            if isinstance(target, SectionDragData):
                return self._service.insert_element(design, source.element_type, target.section_id)
        elif isinstance(source, SectionDragData):
            if isinstance(target, SectionDragData):
                return self._section_on_section(design, source, target)

        logger.debug("DnD: unsupported drop %s -> %s", type(source).__name__, type(target).__name__)
        return OperationResult(False, "Unsupported drop.", design)

    # ------------------------------------------------------------------
    def _element_on_element(
        self, design: LabelDesign, source: ElementDragData, target: ElementDragData
    ) -> OperationResult:
        dragged = design.get_element(source.element_id)
        over = design.get_element(target.element_id)
        if dragged is None or over is None:
            return OperationResult(False, "Drag source or target no longer exists.", design)

        if dragged.section_id == over.section_id:
            old_index = _full_index(design, dragged.section_id, dragged.id)
            new_index = _full_index(design, over.section_id, over.id)
            if old_index == new_index:
                return OperationResult(False, "Dropped on itself.", design)
            return self._service.reorder_element(design, dragged.section_id, old_index, new_index)

        target_count = len(design.section_elements(over.section_id))
        index = _full_index(design, over.section_id, over.id)
        if index < 0:
            index = target_count
        return self._service.move_element_to_section(
            design, dragged.id, dragged.section_id, over.section_id, index
        )

    def _element_on_section(
        self, design: LabelDesign, source: ElementDragData, target: SectionDragData
    ) -> OperationResult:
        dragged = design.get_element(source.element_id)
        if dragged is None:
            return OperationResult(False, "Drag source no longer exists.", design)
        if dragged.section_id == target.section_id:
            return OperationResult(False, "Element already in section.", design)
        count = len(design.section_elements(target.section_id))
        return self._service.move_element_to_section(
            design, dragged.id, dragged.section_id, target.section_id, count
        )

    def _palette_on_element(
        self, design: LabelDesign, source: PaletteDragData, target: ElementDragData
    ) -> OperationResult:
        over = design.get_element(target.element_id)
        if over is None:
            return OperationResult(False, "Drop target no longer exists.", design)
        index = _full_index(design, over.section_id, over.id)
        return self._service.insert_element(design, source.element_type, over.section_id, index)

    def _section_on_section(
        self, design: LabelDesign, source: SectionDragData, target: SectionDragData
    ) -> OperationResult:
        if source.section_id == target.section_id:
            return OperationResult(False, "Dropped on itself.", design)
        order = [s.id for s in design.sorted_sections()]
        if source.section_id not in order or target.section_id not in order:
            return OperationResult(False, "Section no longer exists.", design)
        return self._service.reorder_sections(
            design, order.index(source.section_id), order.index(target.section_id)
        )

    def _reset(self) -> None:
        self._active = None
        self._over_section_id = None


def _full_index(design: LabelDesign, section_id: str, element_id: str) -> int:
    """Position of *element_id* in the full section ordering, or -1."""
    for i, element in enumerate(design.section_elements(section_id)):
        if element.id == element_id:
            return i
    return -1
