import dataclasses

import pytest

from label_editor.core.services.autosave_service import AutosaveService
from label_editor.core.services.validation_service import check_invariants
from label_editor.core.templates import get_builtin_templates
from label_editor.ui.canvas.drag_drop_coordinator import ElementDragData, PaletteDragData, SectionDragData
from label_editor.ui.controllers.label_editor_controller import LabelEditorController


# ---------------------------
# Fakes
# ---------------------------

class FakeTimer:
    def __init__(self, delay, fn):
        self.fn = fn
        self.daemon = False
        self.cancelled = False

    def start(self):
        pass

    def cancel(self):
        self.cancelled = True


class SaveSpy:
    def __init__(self, fail=False):
        self.saved = []
        self.fail = fail

    def __call__(self, design):
        if self.fail:
            raise OSError("backing store unavailable")
        self.saved.append(design)


@pytest.fixture
def ctrl(make_design):
    c = LabelEditorController(design=make_design({"identity": ["a", "b", "c"], "dpp": ["q"]}))
    c.view_state.view = "editor"
    return c


# ---------------------------
# Edits and history
# ---------------------------

def test_add_element_selects_and_records(ctrl, section_ids):
    ctrl.set_right_panel_tab("check")
    res = ctrl.add_element("text", "identity")
    assert res.success
    assert ctrl.view_state.selected_element_id == res.details["element_id"]
    assert ctrl.view_state.right_panel_tab == "settings"
    assert section_ids(ctrl.design, "identity")[-1] == res.details["element_id"]
    assert ctrl.has_changes is True
    assert ctrl.can_undo() is True


def test_failed_edit_changes_nothing(ctrl):
    before = ctrl.design
    res = ctrl.delete_element("ghost")
    assert res.success is False
    assert ctrl.design is before
    assert ctrl.has_changes is False
    assert ctrl.can_undo() is False


def test_undo_redo_round_trip(ctrl):
    d0 = ctrl.design
    ctrl.move_element("b", "up")
    d1 = ctrl.design

    assert ctrl.undo() is True
    assert ctrl.design == d0
    assert ctrl.can_redo() is True
    assert ctrl.redo() is True
    assert ctrl.design == d1
    assert ctrl.redo() is False


def test_undo_at_initial_state_returns_false(ctrl):
    assert ctrl.undo() is False


def test_edit_after_undo_discards_redo(ctrl):
    ctrl.move_element("b", "up")
    ctrl.undo()
    ctrl.move_element("c", "up")
    assert ctrl.can_redo() is False
    assert ctrl.undo() is True
    assert ctrl.undo() is False


def test_toggle_collapsed_is_not_in_history(ctrl):
    ctrl.toggle_section_collapsed("identity")
    assert ctrl.design.get_section("identity").collapsed is True
    assert ctrl.can_undo() is False
    assert ctrl.has_changes is False


def test_toggle_collapsed_after_undo_does_not_swallow_next_edit(ctrl):
    ctrl.move_element("b", "up")
    ctrl.undo()
    ctrl.toggle_section_collapsed("dpp")
    ctrl.duplicate_element("q")
    assert ctrl.can_undo() is True
    assert ctrl.can_redo() is False


def test_history_is_bounded_by_config(ctrl):
    for i in range(60):
        ctrl.update_design_settings(padding=i + 1)
    assert len(ctrl.undo_service) == 50
    assert ctrl.can_undo() is True


def test_update_element_never_moves_it(ctrl):
    stored = ctrl.design.get_element("a")
    ctrl.update_element(dataclasses.replace(stored, content="New", section_id="dpp"))
    element = ctrl.design.get_element("a")
    assert element.content == "New"
    assert element.section_id == "identity"


def test_delete_clears_selection_of_deleted_element(ctrl):
    ctrl.select_element("b")
    ctrl.delete_element("b")
    assert ctrl.view_state.selected_element_id is None

    ctrl.select_element("a")
    ctrl.delete_element("c")
    assert ctrl.view_state.selected_element_id == "a"


def test_undo_drops_selection_of_element_that_no_longer_exists(ctrl):
    res = ctrl.add_element("spacer", "dpp")
    assert ctrl.view_state.selected_element_id == res.details["element_id"]
    ctrl.undo()
    assert ctrl.view_state.selected_element_id is None


def test_duplicate_selects_clone(ctrl):
    res = ctrl.duplicate_element("a")
    assert ctrl.view_state.selected_element_id == res.details["element_id"] != "a"


def test_move_to_section_selects_moved_element(ctrl, section_ids):
    ctrl.move_element_to_section("c", "identity", "dpp", 0)
    assert ctrl.view_state.selected_element_id == "c"
    assert section_ids(ctrl.design, "dpp") == ["c", "q"]
    assert check_invariants(ctrl.design) == []


def test_reorder_and_section_operations(ctrl, section_ids):
    ctrl.reorder_element("identity", 2, 0)
    assert section_ids(ctrl.design, "identity") == ["c", "a", "b"]
    ctrl.reorder_sections(1, 0)
    assert ctrl.design.sorted_sections()[0].id == "dpp"
    ctrl.set_section_visible("footer", True)
    assert ctrl.design.get_section("footer").visible is True


# ---------------------------
# Selection, keyboard, view
# ---------------------------

def test_select_adjacent_navigates_siblings(ctrl):
    assert ctrl.select_adjacent("down") is False  # nothing selected
    ctrl.select_element("a")
    assert ctrl.select_adjacent("up") is False
    assert ctrl.select_adjacent("down") is True
    assert ctrl.selected_element.id == "b"


def test_keyboard_shortcuts(ctrl):
    ctrl.select_element("b")
    assert ctrl.handle_key("ArrowDown") is True
    assert ctrl.view_state.selected_element_id == "c"

    assert ctrl.handle_key("d", ctrl=True) is True
    clone_id = ctrl.view_state.selected_element_id
    assert clone_id not in ("b", "c")

    assert ctrl.handle_key("Delete", in_text_input=True) is False
    assert ctrl.handle_key("Delete") is True
    assert ctrl.design.get_element(clone_id) is None

    assert ctrl.handle_key("z", ctrl=True) is True
    assert ctrl.design.get_element(clone_id) is not None
    assert ctrl.handle_key("z", ctrl=True, shift=True) is True
    assert ctrl.design.get_element(clone_id) is None

    ctrl.select_element("a")
    assert ctrl.handle_key("Escape") is True
    assert ctrl.view_state.selected_element_id is None


def test_keyboard_ignored_outside_editor_view(ctrl):
    ctrl.view_state.view = "gallery"
    ctrl.select_element("a")
    assert ctrl.handle_key("Delete") is False
    assert ctrl.design.get_element("a") is not None


def test_zoom_is_clamped_to_config_bounds(ctrl):
    assert ctrl.set_zoom(10) == 25
    assert ctrl.set_zoom(1000) == 400
    assert ctrl.set_zoom(150) == 150


def test_right_panel_tab(ctrl):
    assert ctrl.set_right_panel_tab("check") is True
    assert ctrl.set_right_panel_tab("bogus") is False
    assert ctrl.view_state.right_panel_tab == "check"


def test_has_counter_element(ctrl):
    assert ctrl.has_counter_element is False
    ctrl.add_element("package-counter", "footer")
    assert ctrl.has_counter_element is True


# ---------------------------
# Quick inserts and palette drops
# ---------------------------

def test_canvas_drop_field_payload_adds_field_to_first_visible_section(ctrl):
    ctrl.set_section_visible("identity", False)
    res = ctrl.handle_canvas_drop("field:batchNumber")
    element = ctrl.design.get_element(res.details["element_id"])
    assert element.type == "field-value"
    assert element.field_key == "batchNumber"
    assert element.section_id == "dpp"
    assert ctrl.view_state.selected_element_id == element.id


def test_canvas_drop_element_type_appends_to_first_visible_section(ctrl):
    res = ctrl.handle_canvas_drop("barcode")
    element = ctrl.design.get_element(res.details["element_id"])
    assert element.type == "barcode"
    assert element.section_id == "identity"
    assert element.sort_order == 3
    assert ctrl.handle_canvas_drop("").success is False


def test_compliance_badge_falls_back_when_section_hidden(ctrl):
    res = ctrl.add_compliance_badge("ce", "CE")
    assert ctrl.design.get_element(res.details["element_id"]).section_id == "compliance"

    ctrl.set_section_visible("compliance", False)
    res = ctrl.add_compliance_badge("ukca", "UKCA")
    badge = ctrl.design.get_element(res.details["element_id"])
    assert badge.section_id == "identity"
    assert badge.symbol == "UKCA"


@pytest.mark.parametrize("category,section_id", [
    ("recycling", "sustainability"),
    ("hazard", "compliance"),
])
def test_insert_pictogram_routes_by_category(ctrl, category, section_id):
    res = ctrl.insert_pictogram("mobius", category, "Recyclable")
    element = ctrl.design.get_element(res.details["element_id"])
    assert element.section_id == section_id
    assert element.show_label is True
    assert element.label_text == "Recyclable"
    assert check_invariants(ctrl.design) == []


def test_add_compliance_pictogram(ctrl):
    res = ctrl.add_compliance_pictogram("ghs-flame")
    element = ctrl.design.get_element(res.details["element_id"])
    assert element.pictogram_id == "ghs-flame"
    assert element.section_id == "compliance"


# ---------------------------
# Drag and drop
# ---------------------------

def test_drag_lifecycle_records_history(ctrl, section_ids):
    ctrl.drag_start(ElementDragData("a", "identity", 0))
    ctrl.drag_over(SectionDragData("dpp"))
    res = ctrl.drag_end(SectionDragData("dpp"))
    assert res.success
    assert section_ids(ctrl.design, "dpp") == ["q", "a"]
    assert ctrl.undo() is True
    assert section_ids(ctrl.design, "identity") == ["a", "b", "c"]


def test_drag_cancel_leaves_design(ctrl):
    before = ctrl.design
    ctrl.drag_start(PaletteDragData("text"))
    ctrl.drag_cancel()
    assert ctrl.drag_end(SectionDragData("dpp")).success is False
    assert ctrl.design is before


def test_palette_drop_selects_new_element_and_opens_settings(ctrl, section_ids):
    ctrl.set_right_panel_tab("check")
    ctrl.drag_start(PaletteDragData("spacer"))
    res = ctrl.drag_end(SectionDragData("dpp"))
    assert res.success
    new_id = res.details["element_id"]
    assert section_ids(ctrl.design, "dpp") == ["q", new_id]
    assert ctrl.view_state.selected_element_id == new_id
    assert ctrl.view_state.right_panel_tab == "settings"


def test_cross_section_drag_selects_moved_element(ctrl, section_ids):
    ctrl.select_element("b")
    ctrl.drag_start(ElementDragData("c", "identity", 2))
    res = ctrl.drag_end(ElementDragData("q", "dpp", 0))
    assert res.success
    assert section_ids(ctrl.design, "dpp") == ["c", "q"]
    assert ctrl.view_state.selected_element_id == "c"


def test_same_section_drag_keeps_selection(ctrl, section_ids):
    ctrl.select_element("b")
    ctrl.drag_start(ElementDragData("c", "identity", 2))
    ctrl.drag_end(ElementDragData("a", "identity", 0))
    assert section_ids(ctrl.design, "identity") == ["c", "a", "b"]
    assert ctrl.view_state.selected_element_id == "b"


# ---------------------------
# Document lifecycle, save and autosave
# ---------------------------

def test_load_template_clones_and_resets(ctrl):
    template = get_builtin_templates()[0]
    ctrl.add_element("text", "identity")
    ctrl.load_template(template)

    assert ctrl.active_template is template
    assert ctrl.design == template.design
    assert ctrl.design is not template.design
    assert ctrl.can_undo() is False
    assert ctrl.has_changes is False
    assert ctrl.view_state.selected_element_id is None
    assert ctrl.view_state.view == "editor"

    first = ctrl.design.elements[0]
    ctrl.delete_element(first.id)
    assert template.design.get_element(first.id) is not None


def test_new_blank(ctrl):
    ctrl.new_blank()
    assert ctrl.active_template is None
    assert ctrl.design.elements == []
    assert len(ctrl.undo_service) == 1


def test_save_uses_current_design(make_design):
    spy = SaveSpy()
    ctrl = LabelEditorController(design=make_design({"identity": ["a"]}), save_callback=spy)
    ctrl.add_element("spacer", "identity")
    assert ctrl.save() is True
    assert spy.saved == [ctrl.design]
    assert ctrl.has_changes is False


def test_save_without_callback_or_on_failure_returns_false(ctrl, make_design):
    assert ctrl.save() is False
    failing = LabelEditorController(design=make_design({}), save_callback=SaveSpy(fail=True))
    assert failing.save() is False


def test_autosave_saves_live_design_at_fire_time(make_design):
    spy = SaveSpy()
    autosave = AutosaveService(delay=1, timer_factory=FakeTimer)
    ctrl = LabelEditorController(
        design=make_design({"identity": ["a"]}), autosave_service=autosave, save_callback=spy,
    )
    ctrl.add_element("text", "identity")
    ctrl.add_element("divider", "identity")
    assert autosave.status == "unsaved"

    assert autosave.flush() is True
    assert spy.saved == [ctrl.design]
    assert len(spy.saved[0].elements) == 3
    assert autosave.status == "saved"
    assert ctrl.has_changes is False


def test_autosave_failure_is_reported_not_raised(make_design):
    autosave = AutosaveService(delay=1, timer_factory=FakeTimer)
    ctrl = LabelEditorController(
        design=make_design({}), autosave_service=autosave, save_callback=SaveSpy(fail=True),
    )
    ctrl.add_element("text", "identity")
    autosave.flush()
    assert autosave.status == "error"
    assert ctrl.has_changes is True
