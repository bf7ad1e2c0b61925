from __future__ import annotations

"""Label templates and the built-in template catalog.

A template wraps a stored design. Loading a template always works on a deep
clone of :attr:`LabelTemplate.design`; the stored original is never edited.
"""

from dataclasses import dataclass
from typing import List, Optional

from label_editor.core.defaults import create_blank_design, create_element
from label_editor.core.models import LabelDesign

__all__ = [
    "LabelTemplate",
    "DEFAULT_TEMPLATES",
    "get_builtin_templates",
    "get_default_design_for_group",
]

_MUTED = "#6b7280"


@dataclass
class LabelTemplate:
    id: str
    name: str
    design: LabelDesign
    description: str = ""
    category: str = "custom"  # electronics | textiles | toys | household | general | custom
    variant: str = "universal"  # b2b | b2c | universal
    is_default: bool = False
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


def _heading(section_id: str, sort_order: int, content: str):
    return create_element(
        "text", section_id, sort_order,
        content=content, font_size=5, font_weight="bold", color=_MUTED, uppercase=True,
    )


def _field(section_id: str, sort_order: int, field_key: str, **payload):
    payload.setdefault("font_size", 6)
    return create_element("field-value", section_id, sort_order, field_key=field_key, **payload)


def _electronics_template() -> LabelTemplate:
    design = create_blank_design()
    design.elements = [
        _heading("identity", 0, "IDENTITY & TRACEABILITY"),
        _field("identity", 1, "productName", show_label=False, font_size=9, layout="stacked"),
        _field("identity", 2, "gtin", label_text="Model/SKU"),
        _field("identity", 3, "batchNumber"),
        _field("identity", 4, "manufacturerName", font_weight="normal"),
        _field("identity", 5, "importerName", label_text="EU Importer", font_weight="normal"),
        _heading("dpp", 0, "DIGITAL PRODUCT PASSPORT"),
        create_element("qr-code", "dpp", 1),
        _heading("compliance", 0, "COMPLIANCE"),
        create_element("compliance-badge", "compliance", 1, badge_id="ce", symbol="CE"),
        create_element("compliance-badge", "compliance", 2, badge_id="weee", symbol="WEEE"),
        create_element("compliance-badge", "compliance", 3, badge_id="rohs", symbol="RoHS"),
        create_element("pictogram", "compliance", 4, pictogram_id="weee-bin", size=20),
        _field("compliance", 5, "eprelNumber", label_text="EPREL", font_size=5.5, font_weight="normal"),
        _heading("sustainability", 0, "SUSTAINABILITY & DISPOSAL"),
        create_element("material-code", "sustainability", 1),
        create_element(
            "pictogram", "sustainability", 2,
            pictogram_id="energy-arrow", size=18, show_label=True, label_text="Energy",
        ),
    ]
    return LabelTemplate(
        id="builtin-electronics",
        name="Electronics Standard",
        description="CE, WEEE, RoHS badges with EPREL field and energy pictogram.",
        category="electronics",
        design=design,
        is_default=True,
        created_at="2026-01-01T00:00:00Z",
        updated_at="2026-01-01T00:00:00Z",
    )


def _textiles_template() -> LabelTemplate:
    design = create_blank_design()
    design.elements = [
        _heading("identity", 0, "IDENTITY & TRACEABILITY"),
        _field("identity", 1, "productName", show_label=False, font_size=9, layout="stacked"),
        _field("identity", 2, "gtin", label_text="Model/SKU"),
        _field("identity", 3, "batchNumber"),
        _field("identity", 4, "manufacturerName", font_weight="normal"),
        _heading("dpp", 0, "DIGITAL PRODUCT PASSPORT"),
        create_element("qr-code", "dpp", 1),
        _heading("compliance", 0, "COMPLIANCE"),
        create_element("compliance-badge", "compliance", 1, badge_id="oeko_tex", symbol="OT", show_label=True),
        create_element("compliance-badge", "compliance", 2, badge_id="gots", symbol="GOTS"),
        create_element("compliance-badge", "compliance", 3, badge_id="reach", symbol="REACH"),
        _heading("sustainability", 0, "SUSTAINABILITY & DISPOSAL"),
        create_element("material-code", "sustainability", 1),
    ]
    return LabelTemplate(
        id="builtin-textiles",
        name="Textiles Standard",
        description="OEKO-TEX, GOTS, REACH badges with care label support.",
        category="textiles",
        design=design,
        is_default=True,
        created_at="2026-01-01T00:00:00Z",
        updated_at="2026-01-01T00:00:00Z",
    )


def _general_template() -> LabelTemplate:
    design = create_blank_design()
    design.elements = [
        _field("identity", 0, "productName", show_label=False, font_size=9, layout="stacked"),
        _field("identity", 1, "gtin", label_text="GTIN"),
        _field("identity", 2, "batchNumber"),
        _field("identity", 3, "manufacturerName", font_weight="normal"),
        create_element("qr-code", "dpp", 0),
        create_element("material-code", "sustainability", 0),
    ]
    return LabelTemplate(
        id="builtin-general",
        name="General Minimal",
        description="Minimal label with identity, QR code, and basic compliance.",
        category="general",
        design=design,
        is_default=True,
        created_at="2026-01-01T00:00:00Z",
        updated_at="2026-01-01T00:00:00Z",
    )


DEFAULT_TEMPLATES: List[LabelTemplate] = [
    _electronics_template(),
    _textiles_template(),
    _general_template(),
]


def get_builtin_templates() -> List[LabelTemplate]:
    return list(DEFAULT_TEMPLATES)


def get_default_design_for_group(group: str) -> LabelDesign:
    """Return a private copy of the built-in design for a product group, or a blank one."""
    for template in DEFAULT_TEMPLATES:
        if template.category == group:
            return template.design.clone()
    return create_blank_design()
