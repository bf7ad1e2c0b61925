from __future__ import annotations

import logging
from typing import Callable, Literal, Optional

from label_editor.config import ConfigManager
from label_editor.core.defaults import create_blank_design, create_element
from label_editor.core.models import LabelDesign, LabelElement, LabelSection
from label_editor.core.models.view_state import PANEL_TABS, EditorViewState
from label_editor.core.services.autosave_service import AutosaveService
from label_editor.core.services.label_editing_service import LabelEditingService, OperationResult
from label_editor.core.services.undo_service import UndoService
from label_editor.core.templates import LabelTemplate
from label_editor.core.utils import clamp
from label_editor.ui.canvas.drag_drop_coordinator import (
    DragData,
    DragDropCoordinator,
    DropTarget,
    PaletteDragData,
)

__all__ = ["LabelEditorController"]

logger = logging.getLogger(__name__)


class LabelEditorController:
    """Session controller coordinating label editing actions with services.

    The controller owns the live design and the transient view state of one
    editing session, and delegates every structural change to the
    :class:`LabelEditingService`. It contains no UI toolkit code: a host
    (canvas widget, keyboard handler, tests) calls its methods and redraws
    from :attr:`design` and :attr:`view_state`.

    Parameters
    ----------
    design : LabelDesign, optional
        Initial design; a blank design when omitted.
    editing_service : LabelEditingService, optional
    undo_service : UndoService, optional
        Defaults to a history bounded by ``history.max_entries``.
    autosave_service : AutosaveService, optional
        Every recorded edit schedules a debounced save. Defaults to an
        :class:`AutosaveService` using the configured delay whenever a
        *save_callback* is given.
    save_callback : callable, optional
        Persists a design, ``save_callback(design)``. Used by :meth:`save`
        and by autosave.

    Notes
    -----
    - Routine failures (stale ids, indices out of range) are non-raising;
      methods return booleans or :class:`OperationResult` objects.
    - Every successful edit goes through :meth:`_apply`, which is the only
      place the design is swapped and history is recorded.
    """

    def __init__(
        self,
        design: Optional[LabelDesign] = None,
        editing_service: Optional[LabelEditingService] = None,
        undo_service: Optional[UndoService] = None,
        autosave_service: Optional[AutosaveService] = None,
        save_callback: Optional[Callable[[LabelDesign], None]] = None,
    ) -> None:
        config = ConfigManager()
        # Dependencies
        self.editing_service: LabelEditingService = editing_service or LabelEditingService()
        self.undo_service: UndoService = undo_service or UndoService(max_history=config.get_history_limit())
        self.drag_drop = DragDropCoordinator(self.editing_service)
        if autosave_service is None and save_callback is not None:
            autosave_service = AutosaveService()
        self.autosave_service: Optional[AutosaveService] = autosave_service
        self._save_callback = save_callback

        # Session state
        self.design: LabelDesign = design if design is not None else create_blank_design()
        self.view_state = EditorViewState()
        self.active_template: Optional[LabelTemplate] = None
        self.has_changes: bool = False
        self._zoom_bounds = config.get_zoom_bounds()

        self.undo_service.reset(self.design)

    # ---------------------------------------------------------------------------------
    # Internal helpers
    # ---------------------------------------------------------------------------------

    def _apply(self, result: OperationResult) -> OperationResult:
        """Adopt a successful result: swap design, record history, mark dirty."""
        if not result.success:
            return result
        self.design = result.design
        record = (result.details or {}).get("record_history", True)
        if record:
            self.undo_service.push_snapshot(self.design)
            self.has_changes = True
            self._schedule_autosave()
        return result

    def _restore(self, design: LabelDesign) -> None:
        self.design = design
        # Reacting to the change like any other; the history latch swallows this push
        self.undo_service.push_snapshot(design)
        self.has_changes = True
        if self.view_state.selected_element_id and design.get_element(self.view_state.selected_element_id) is None:
            self.view_state.selected_element_id = None
        self._schedule_autosave()

    def _schedule_autosave(self) -> None:
        if self.autosave_service is None or self._save_callback is None:
            return
        self.autosave_service.schedule(self.has_changes, self._autosave)

    def _autosave(self) -> None:
        # Runs at fire time: reads the live design
        self._save_callback(self.design)  # type: ignore[misc]
        self.has_changes = False

    def _first_visible_section(self) -> Optional[LabelSection]:
        for section in self.design.sorted_sections():
            if section.visible:
                return section
        return None

    # ---------------------------------------------------------------------------------
    # Element operations
    # ---------------------------------------------------------------------------------

    def add_element(self, element_type: str, section_id: str, after_index: int = -1) -> OperationResult:
        result = self._apply(self.editing_service.insert_element(self.design, element_type, section_id, after_index))
        if result.success:
            self.view_state.selected_element_id = result.details["element_id"]
            self.view_state.right_panel_tab = "settings"
        return result

    def update_element(self, updated: LabelElement) -> OperationResult:
        return self._apply(self.editing_service.update_element(self.design, updated))

    def delete_element(self, element_id: str) -> OperationResult:
        result = self._apply(self.editing_service.delete_element(self.design, element_id))
        if result.success and self.view_state.selected_element_id == element_id:
            self.view_state.selected_element_id = None
        if result.success and self.view_state.hovered_element_id == element_id:
            self.view_state.hovered_element_id = None
        return result

    def duplicate_element(self, element_id: str) -> OperationResult:
        result = self._apply(self.editing_service.duplicate_element(self.design, element_id))
        if result.success:
            self.view_state.selected_element_id = result.details["element_id"]
        return result

    def move_element(self, element_id: str, direction: Literal["up", "down"]) -> OperationResult:
        return self._apply(self.editing_service.move_element_adjacent(self.design, element_id, direction))

    def reorder_element(self, section_id: str, from_index: int, to_index: int) -> OperationResult:
        return self._apply(self.editing_service.reorder_element(self.design, section_id, from_index, to_index))

    def move_element_to_section(
        self, element_id: str, from_section_id: str, to_section_id: str, to_index: int
    ) -> OperationResult:
        result = self._apply(
            self.editing_service.move_element_to_section(
                self.design, element_id, from_section_id, to_section_id, to_index
            )
        )
        if result.success:
            self.view_state.selected_element_id = element_id
        return result

    # ---------------------------------------------------------------------------------
    # Section and design operations
    # ---------------------------------------------------------------------------------

    def reorder_sections(self, from_index: int, to_index: int) -> OperationResult:
        return self._apply(self.editing_service.reorder_sections(self.design, from_index, to_index))

    def toggle_section_collapsed(self, section_id: str) -> OperationResult:
        return self._apply(self.editing_service.toggle_section_collapsed(self.design, section_id))

    def set_section_visible(self, section_id: str, visible: bool) -> OperationResult:
        return self._apply(self.editing_service.set_section_visible(self.design, section_id, visible))

    def update_section(self, section: LabelSection) -> OperationResult:
        return self._apply(self.editing_service.update_section(self.design, section))

    def update_design_settings(self, **settings) -> OperationResult:
        return self._apply(self.editing_service.update_design_settings(self.design, **settings))

    # ---------------------------------------------------------------------------------
    # Quick inserts
    # ---------------------------------------------------------------------------------

    def _insert_and_select(self, element: LabelElement, section_id: str) -> OperationResult:
        result = self._apply(self.editing_service.insert_configured_element(self.design, element, section_id))
        if result.success:
            self.view_state.selected_element_id = result.details["element_id"]
        return result

    def add_field_element(self, field_key: str) -> OperationResult:
        """Append a product-data field to the first visible section."""
        section = self._first_visible_section()
        if section is None:
            return OperationResult(False, "No visible section.", self.design)
        element = create_element("field-value", section.id, field_key=field_key, show_label=True, layout="inline")
        return self._insert_and_select(element, section.id)

    def add_compliance_badge(self, badge_id: str, symbol: str) -> OperationResult:
        """Append a badge to the compliance section, or the first visible one if it is hidden."""
        compliance = self.design.get_section("compliance")
        section = compliance if compliance is not None and compliance.visible else self._first_visible_section()
        if section is None:
            return OperationResult(False, "No visible section.", self.design)
        element = create_element("compliance-badge", section.id, badge_id=badge_id, symbol=symbol)
        return self._insert_and_select(element, section.id)

    def add_compliance_pictogram(self, pictogram_id: str) -> OperationResult:
        compliance = self.design.get_section("compliance")
        section = compliance if compliance is not None and compliance.visible else self._first_visible_section()
        if section is None:
            return OperationResult(False, "No visible section.", self.design)
        element = create_element("pictogram", section.id, pictogram_id=pictogram_id, source="builtin")
        return self._insert_and_select(element, section.id)

    def insert_pictogram(self, pictogram_id: str, category: str, name: str) -> OperationResult:
        """Insert a labelled built-in pictogram; recycling symbols go to sustainability."""
        section_id = "sustainability" if category == "recycling" else "compliance"
        element = create_element(
            "pictogram", section_id,
            pictogram_id=pictogram_id, source="builtin", show_label=True, label_text=name,
        )
        return self._insert_and_select(element, section_id)

    def handle_canvas_drop(self, payload: str) -> OperationResult:
        """Handle a plain-text palette drop on the canvas background.

        ``"field:<key>"`` adds a product-data field; any other payload is an
        element type appended to the first visible section.
        """
        if payload.startswith("field:"):
            return self.add_field_element(payload[len("field:"):])
        section = self._first_visible_section()
        if not payload or section is None:
            return OperationResult(False, "Nothing to drop.", self.design)
        return self.add_element(payload, section.id)

    # ---------------------------------------------------------------------------------
    # Drag and drop
    # ---------------------------------------------------------------------------------

    def drag_start(self, data: DragData) -> None:
        self.drag_drop.drag_start(data)

    def drag_over(self, target: Optional[DropTarget]) -> None:
        self.drag_drop.drag_over(target)

    def drag_end(self, target: Optional[DropTarget]) -> OperationResult:
        """Finish the active drag; the inserted or moved element becomes selected."""
        source = self.drag_drop.active
        result = self._apply(self.drag_drop.drag_end(self.design, target))
        if not result.success or not result.details:
            return result
        if isinstance(source, PaletteDragData):
            self.view_state.selected_element_id = result.details["element_id"]
            self.view_state.right_panel_tab = "settings"
        elif "to_section" in result.details:
            self.view_state.selected_element_id = result.details["element_id"]
        return result

    def drag_cancel(self) -> None:
        self.drag_drop.drag_cancel()

    # ---------------------------------------------------------------------------------
    # History
    # ---------------------------------------------------------------------------------

    def undo(self) -> bool:
        previous = self.undo_service.undo()
        if previous is None:
            return False
        self._restore(previous)
        return True

    def redo(self) -> bool:
        following = self.undo_service.redo()
        if following is None:
            return False
        self._restore(following)
        return True

    def can_undo(self) -> bool:
        return self.undo_service.can_undo()

    def can_redo(self) -> bool:
        return self.undo_service.can_redo()

    # ---------------------------------------------------------------------------------
    # Selection and view
    # ---------------------------------------------------------------------------------

    @property
    def selected_element(self) -> Optional[LabelElement]:
        if not self.view_state.selected_element_id:
            return None
        return self.design.get_element(self.view_state.selected_element_id)

    @property
    def has_counter_element(self) -> bool:
        return any(e.type == "package-counter" for e in self.design.elements)

    def select_element(self, element_id: Optional[str]) -> None:
        self.view_state.selected_element_id = element_id

    def hover_element(self, element_id: Optional[str]) -> None:
        self.view_state.hovered_element_id = element_id

    def select_adjacent(self, direction: Literal["up", "down"]) -> bool:
        """Select the previous or next sibling of the selected element."""
        current = self.selected_element
        if current is None:
            return False
        siblings = self.design.section_elements(current.section_id)
        idx = next(i for i, e in enumerate(siblings) if e.id == current.id)
        nxt = idx - 1 if direction == "up" else idx + 1
        if nxt < 0 or nxt >= len(siblings):
            return False
        self.view_state.selected_element_id = siblings[nxt].id
        return True

    def delete_selected(self) -> OperationResult:
        if not self.view_state.selected_element_id:
            return OperationResult(False, "Nothing selected.", self.design)
        return self.delete_element(self.view_state.selected_element_id)

    def duplicate_selected(self) -> OperationResult:
        if not self.view_state.selected_element_id:
            return OperationResult(False, "Nothing selected.", self.design)
        return self.duplicate_element(self.view_state.selected_element_id)

    def set_zoom(self, zoom: int) -> int:
        lower, upper = self._zoom_bounds
        self.view_state.zoom = clamp(int(zoom), lower, upper)
        return self.view_state.zoom

    def set_right_panel_tab(self, tab: str) -> bool:
        if tab not in PANEL_TABS:
            return False
        self.view_state.right_panel_tab = tab  # type: ignore[assignment]
        return True

    def handle_key(self, key: str, ctrl: bool = False, shift: bool = False, in_text_input: bool = False) -> bool:
        """Dispatch an editor keyboard shortcut. Return True if it was handled.

        Delete/Backspace and arrow navigation are ignored while a text input
        has focus.
        """
        if self.view_state.view != "editor":
            return False
        key_lower = key.lower()
        if ctrl and key_lower == "z":
            return self.redo() if shift else self.undo()
        if ctrl and key_lower == "s":
            return self.save()
        if ctrl and key_lower == "d":
            return self.duplicate_selected().success
        if key in ("Delete", "Backspace") and not ctrl and not in_text_input:
            return self.delete_selected().success
        if key == "Escape":
            self.view_state.selected_element_id = None
            return True
        if key in ("ArrowUp", "ArrowDown") and not ctrl and not in_text_input:
            return self.select_adjacent("up" if key == "ArrowUp" else "down")
        return False

    # ---------------------------------------------------------------------------------
    # Document lifecycle
    # ---------------------------------------------------------------------------------

    def _open(self, design: LabelDesign, template: Optional[LabelTemplate]) -> None:
        if self.autosave_service is not None:
            self.autosave_service.cancel()
        self.drag_drop.drag_cancel()
        self.active_template = template
        self.design = design
        self.undo_service.reset(design)
        self.view_state.view = "editor"
        self.view_state.clear_selection()
        self.has_changes = False

    def load_template(self, template: LabelTemplate) -> None:
        """Start editing a private deep copy of *template*'s design."""
        logger.info("Editor: load template id=%s", template.id)
        self._open(template.design.clone(), template)

    def new_blank(self) -> None:
        logger.info("Editor: new blank design")
        self._open(create_blank_design(), None)

    def save(self) -> bool:
        """Persist the current design through the save callback."""
        if self._save_callback is None:
            return False
        if self.autosave_service is not None:
            self.autosave_service.cancel()
        try:
            self._save_callback(self.design)
        except Exception:
            logger.error("Save failed", exc_info=True)
            if self.autosave_service is not None:
                self.autosave_service.status = "error"
            return False
        self.has_changes = False
        if self.autosave_service is not None:
            self.autosave_service.mark_saved()
        return True
