from __future__ import annotations

"""Label element variants.

Elements form a closed tagged union: every variant is a frozen dataclass that
shares ``id``, ``section_id`` and ``sort_order`` and adds its own payload. The
``type`` discriminator is a class attribute and :data:`ELEMENT_CLASSES` maps
each discriminator to its class, so dispatch is a dictionary lookup rather
than an ``isinstance`` chain.

The payload defaults double as the defaults for freshly inserted elements.
"""

from dataclasses import dataclass, fields
from typing import Any, ClassVar, Dict, Literal, Optional, Tuple, Type, Union

from label_editor.core.utils import to_camel_case, to_snake_case

__all__ = [
    "ElementType",
    "SectionId",
    "DesignFormatError",
    "TextElement",
    "FieldValueElement",
    "QRCodeElement",
    "PictogramElement",
    "ComplianceBadgeElement",
    "ImageElement",
    "DividerElement",
    "SpacerElement",
    "MaterialCodeElement",
    "BarcodeElement",
    "IconTextElement",
    "PackageCounterElement",
    "LabelElement",
    "ELEMENT_CLASSES",
    "ELEMENT_TYPES",
    "element_to_dict",
    "element_from_dict",
]

ElementType = Literal[
    "text",
    "field-value",
    "qr-code",
    "pictogram",
    "compliance-badge",
    "image",
    "divider",
    "spacer",
    "material-code",
    "barcode",
    "icon-text",
    "package-counter",
]

SectionId = Literal["identity", "dpp", "compliance", "sustainability", "custom", "footer"]

Alignment = Literal["left", "center", "right"]
FontWeight = Literal["normal", "bold"]
FontFamily = Literal["Helvetica", "Courier", "Times-Roman"]

_TEXT_COLOR = "#1a1a1a"
_MUTED_COLOR = "#6b7280"
_BORDER_COLOR = "#9ca3af"


class DesignFormatError(ValueError):
    """Raised when a serialized design or element cannot be decoded."""


@dataclass(frozen=True)
class _ElementBase:
    id: str
    section_id: str
    sort_order: int

    type: ClassVar[str] = ""


@dataclass(frozen=True)
class TextElement(_ElementBase):
    type: ClassVar[str] = "text"

    content: str = "Text"
    font_size: float = 7
    font_weight: FontWeight = "normal"
    color: str = _TEXT_COLOR
    alignment: Alignment = "left"
    italic: bool = False
    uppercase: bool = False


@dataclass(frozen=True)
class FieldValueElement(_ElementBase):
    """Value auto-populated from product data, optionally with a caption."""

    type: ClassVar[str] = "field-value"

    field_key: str = "productName"
    show_label: bool = True
    label_text: Optional[str] = None
    font_size: float = 7
    font_weight: FontWeight = "bold"
    color: str = _TEXT_COLOR
    label_color: str = _MUTED_COLOR
    alignment: Alignment = "left"
    layout: Literal["inline", "stacked"] = "inline"
    line_height: Optional[float] = None
    italic: Optional[bool] = None
    uppercase: Optional[bool] = None
    margin_bottom: Optional[float] = None
    font_family: Optional[FontFamily] = None


@dataclass(frozen=True)
class QRCodeElement(_ElementBase):
    type: ClassVar[str] = "qr-code"

    size: float = 52
    show_label: bool = True
    label_text: str = "Digital Product Passport"
    show_url: bool = True
    alignment: Alignment = "left"


@dataclass(frozen=True)
class PictogramElement(_ElementBase):
    type: ClassVar[str] = "pictogram"

    pictogram_id: str = "ce-mark"
    source: Literal["builtin", "database"] = "builtin"
    size: float = 24
    color: str = _TEXT_COLOR
    show_label: bool = False
    label_text: Optional[str] = None
    alignment: Alignment = "left"


@dataclass(frozen=True)
class ComplianceBadgeElement(_ElementBase):
    type: ClassVar[str] = "compliance-badge"

    badge_id: str = "ce"
    symbol: str = "CE"
    style: Literal["outlined", "filled", "minimal"] = "outlined"
    size: float = 7
    color: str = _TEXT_COLOR
    background_color: str = "transparent"
    show_label: bool = False
    alignment: Alignment = "left"


@dataclass(frozen=True)
class ImageElement(_ElementBase):
    type: ClassVar[str] = "image"

    src: str = ""
    alt: str = ""
    width: float = 50  # percentage of the container
    alignment: Alignment = "center"
    border_radius: float = 0


@dataclass(frozen=True)
class DividerElement(_ElementBase):
    type: ClassVar[str] = "divider"

    color: str = "#d1d5db"
    thickness: float = 0.5
    style: Literal["solid", "dashed", "dotted"] = "solid"
    margin_top: float = 4
    margin_bottom: float = 4


@dataclass(frozen=True)
class SpacerElement(_ElementBase):
    type: ClassVar[str] = "spacer"

    height: float = 8


@dataclass(frozen=True)
class MaterialCodeElement(_ElementBase):
    type: ClassVar[str] = "material-code"

    codes: Tuple[str, ...] = ()
    auto_populate: bool = True
    font_size: float = 5.5
    color: str = _TEXT_COLOR
    border_color: str = _BORDER_COLOR
    alignment: Alignment = "left"


@dataclass(frozen=True)
class BarcodeElement(_ElementBase):
    type: ClassVar[str] = "barcode"

    format: Literal["ean13", "code128", "code39"] = "ean13"
    value: str = ""
    auto_populate: bool = True
    height: float = 30
    show_text: bool = True
    alignment: Alignment = "center"


@dataclass(frozen=True)
class IconTextElement(_ElementBase):
    type: ClassVar[str] = "icon-text"

    icon: str = "Info"
    text: str = "Label text"
    font_size: float = 6
    color: str = "#374151"
    icon_size: float = 8
    alignment: Alignment = "left"


@dataclass(frozen=True)
class PackageCounterElement(_ElementBase):
    """Per-parcel counter such as "1 of 6", expanded at export time."""

    type: ClassVar[str] = "package-counter"

    format: Literal["x-of-y", "x-slash-y", "package-x-of-y", "box-x-of-y", "parcel-x-of-y"] = "x-of-y"
    font_size: float = 11
    font_weight: FontWeight = "bold"
    color: str = _TEXT_COLOR
    background_color: str = "#f3f4f6"
    border_color: str = _BORDER_COLOR
    border_width: float = 1
    border_radius: float = 4
    padding: float = 6
    alignment: Alignment = "center"
    show_border: bool = True
    show_background: bool = True
    uppercase: bool = False
    font_family: Optional[FontFamily] = None


LabelElement = Union[
    TextElement,
    FieldValueElement,
    QRCodeElement,
    PictogramElement,
    ComplianceBadgeElement,
    ImageElement,
    DividerElement,
    SpacerElement,
    MaterialCodeElement,
    BarcodeElement,
    IconTextElement,
    PackageCounterElement,
]

ELEMENT_CLASSES: Dict[str, Type[Any]] = {
    cls.type: cls
    for cls in (
        TextElement,
        FieldValueElement,
        QRCodeElement,
        PictogramElement,
        ComplianceBadgeElement,
        ImageElement,
        DividerElement,
        SpacerElement,
        MaterialCodeElement,
        BarcodeElement,
        IconTextElement,
        PackageCounterElement,
    )
}

ELEMENT_TYPES: Tuple[str, ...] = tuple(ELEMENT_CLASSES)


# ---------------------------------------------------------------------------
# Serialization (camelCase storage shape)
# ---------------------------------------------------------------------------

def element_to_dict(element: LabelElement) -> Dict[str, Any]:
    """Return the JSON-compatible storage form of *element*.

    Optional payload fields left at ``None`` are omitted, matching the stored
    templates where those keys are simply absent.
    """
    data: Dict[str, Any] = {"type": element.type}
    for f in fields(element):
        value = getattr(element, f.name)
        if value is None:
            continue
        if isinstance(value, tuple):
            value = list(value)
        data[to_camel_case(f.name)] = value
    return data


def element_from_dict(data: Dict[str, Any]) -> LabelElement:
    """Decode a stored element.

    Unknown keys are ignored so that newer stored designs still load; an
    unknown ``type`` or missing identity fields raise :class:`DesignFormatError`.
    """
    if not isinstance(data, dict):
        raise DesignFormatError(f"Element must be a mapping, got {type(data).__name__}")
    element_type = data.get("type")
    cls = ELEMENT_CLASSES.get(element_type)  # type: ignore[arg-type]
    if cls is None:
        raise DesignFormatError(f"Unknown element type {element_type!r}")

    known = {f.name for f in fields(cls)}
    kwargs: Dict[str, Any] = {}
    for key, value in data.items():
        name = to_snake_case(key)
        if name not in known:
            continue
        if isinstance(value, list):
            value = tuple(value)
        kwargs[name] = value

    missing = [name for name in ("id", "section_id", "sort_order") if name not in kwargs]
    if missing:
        raise DesignFormatError(f"Element of type {element_type!r} is missing {', '.join(missing)}")
    return cls(**kwargs)
