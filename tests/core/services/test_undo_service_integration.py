"""Undo/redo over real editing-service results."""

from label_editor.core.services.label_editing_service import LabelEditingService
from label_editor.core.services.undo_service import UndoService
from label_editor.core.services.validation_service import check_invariants


def test_edit_sequence_can_be_walked_back_and_forth(make_design, section_ids):
    svc = LabelEditingService()
    history = UndoService(max_history=50)

    design = make_design({"identity": ["a", "b", "c"], "dpp": []})
    history.reset(design)
    states = [design]

    for step in (
        lambda d: svc.reorder_element(d, "identity", 0, 2),
        lambda d: svc.move_element_to_section(d, "b", "identity", "dpp", 0),
        lambda d: svc.duplicate_element(d, "c"),
        lambda d: svc.delete_element(d, "a"),
    ):
        result = step(states[-1])
        assert result.success
        history.push_snapshot(result.design)
        states.append(result.design)

    # Walk all the way back
    for expected in reversed(states[:-1]):
        restored = history.undo()
        history.push_snapshot(restored)  # host reacting to the change
        assert restored == expected
        assert check_invariants(restored) == []
    assert history.undo() is None

    # And forward again
    for expected in states[1:]:
        restored = history.redo()
        history.push_snapshot(restored)
        assert restored == expected
    assert history.redo() is None

    assert section_ids(states[-1], "dpp") == ["b"]


def test_new_edit_after_undo_drops_redo_branch(make_design, section_ids):
    svc = LabelEditingService()
    history = UndoService()

    d0 = make_design({"identity": ["a", "b"]})
    history.reset(d0)
    d1 = svc.move_element_adjacent(d0, "b", "up").design
    history.push_snapshot(d1)

    restored = history.undo()
    history.push_snapshot(restored)
    d2 = svc.insert_element(restored, "spacer", "identity").design
    history.push_snapshot(d2)

    assert history.can_redo() is False
    assert history.undo() == d0
    history.push_snapshot(d0)
    assert history.redo() == d2
