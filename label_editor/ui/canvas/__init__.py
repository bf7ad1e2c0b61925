"""Canvas interaction helpers (drag and drop)."""

from .drag_drop_coordinator import (  # noqa: F401
    DragDropCoordinator,
    DragState,
    ElementDragData,
    PaletteDragData,
    SectionDragData,
)

__all__: list[str] = [
    "DragDropCoordinator",
    "DragState",
    "ElementDragData",
    "PaletteDragData",
    "SectionDragData",
]
