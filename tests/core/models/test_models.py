import dataclasses
import json

import pytest

from label_editor.core.defaults import create_blank_design, create_element
from label_editor.core.models import (
    DESIGN_VERSION,
    ELEMENT_CLASSES,
    ELEMENT_TYPES,
    DesignFormatError,
    LabelDesign,
)
from label_editor.core.models.elements import element_from_dict, element_to_dict
from label_editor.core.models.pagination import PageContent, SectionSlice
from label_editor.core.models.view_state import EditorViewState
from label_editor.core.templates import get_default_design_for_group


def test_registry_covers_all_twelve_element_types():
    assert len(ELEMENT_TYPES) == 12
    for element_type, cls in ELEMENT_CLASSES.items():
        assert cls.type == element_type


def test_elements_are_frozen():
    element = create_element("text", "identity")
    with pytest.raises(dataclasses.FrozenInstanceError):
        element.sort_order = 3


def test_factory_rejects_unknown_type():
    with pytest.raises(ValueError):
        create_element("hologram", "identity")


def test_factory_assigns_unique_ids():
    ids = {create_element("spacer", "footer").id for _ in range(50)}
    assert len(ids) == 50


def test_blank_design_has_six_sections_in_catalog_order():
    design = create_blank_design()
    assert [s.id for s in design.sorted_sections()] == [
        "identity", "dpp", "compliance", "sustainability", "custom", "footer",
    ]
    assert [s.visible for s in design.sorted_sections()] == [True, True, True, True, False, False]
    assert design.elements == []


def test_section_elements_sorts_by_sort_order_not_list_position():
    design = create_blank_design()
    late = create_element("text", "identity", 5)
    early = create_element("text", "identity", 1)
    other = create_element("text", "dpp", 0)
    design.elements = [late, other, early]
    assert design.section_elements("identity") == [early, late]
    assert design.section_elements("footer") == []


def test_clone_is_deep_and_equal():
    design = get_default_design_for_group("electronics")
    copy = design.clone()
    assert copy == design
    copy.elements.pop()
    copy.sections.pop()
    assert len(design.elements) != len(copy.elements)
    assert len(design.sections) == 6


def test_to_dict_uses_camel_case_storage_keys():
    design = create_blank_design()
    design.elements = [create_element("field-value", "identity", 0, field_key="gtin")]
    data = design.to_dict()

    assert data["_version"] == DESIGN_VERSION
    assert data["pageSize"] == "A6"
    assert data["sections"][0]["sortOrder"] == 0
    element = data["elements"][0]
    assert element["type"] == "field-value"
    assert element["sectionId"] == "identity"
    assert element["fieldKey"] == "gtin"
    # Unset optional payload fields are omitted
    assert "labelText" not in element


def test_json_round_trip_preserves_every_field():
    design = get_default_design_for_group("electronics")
    design.elements.append(create_element("material-code", "sustainability", 9, codes=("PAP 20", "LDPE 4")))
    restored = LabelDesign.from_dict(json.loads(json.dumps(design.to_dict())))
    assert restored == design


def test_from_dict_ignores_unknown_element_keys():
    data = element_to_dict(create_element("spacer", "footer", 2))
    data["futureField"] = 1
    element = element_from_dict(data)
    assert element.height == 8
    assert element.sort_order == 2


@pytest.mark.parametrize("payload", [
    {"_version": 1, "sections": [], "elements": []},
    {"_version": 2, "sections": [], "elements": [{"type": "hologram", "id": "x", "sectionId": "dpp", "sortOrder": 0}]},
    {"_version": 2, "sections": [], "elements": [{"type": "text", "sectionId": "dpp", "sortOrder": 0}]},
    {"_version": 2, "sections": [{"id": "dpp"}], "elements": []},
    ["not", "a", "mapping"],
])
def test_from_dict_rejects_malformed_designs(payload):
    with pytest.raises(DesignFormatError):
        LabelDesign.from_dict(payload)


def test_design_format_error_is_value_error():
    assert issubclass(DesignFormatError, ValueError)


def test_section_slice_maps_local_positions_to_full_section():
    design = create_blank_design()
    design.elements = [create_element("text", "identity", i, content=str(i)) for i in range(6)]
    page_two = PageContent(page_index=1, sections=[SectionSlice("identity", (4, 6), is_partial=True)])

    piece = page_two.sections[0]
    assert [e.content for e in piece.visible_elements(design)] == ["4", "5"]
    assert piece.to_full_index(0) == 4
    assert piece.start == 4 and piece.end == 6


def test_view_state_defaults_and_clear_selection():
    state = EditorViewState()
    assert state.zoom == 100
    assert state.right_panel_tab == "settings"
    state.selected_element_id = "a"
    state.hovered_element_id = "b"
    state.clear_selection()
    assert state.selected_element_id is None
    assert state.hovered_element_id is None
