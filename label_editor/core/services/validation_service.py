from __future__ import annotations

"""Consistency and content checks for label designs.

Two kinds of checks live here:

- :func:`check_invariants` reports structural violations that the editing
  service must never produce (duplicate ids, sibling ``sort_order``
  collisions, dangling section references, section ``sort_order``
  collisions).
- :func:`validate_label_design` reports content findings shown to the user
  in the "check" panel (missing QR code, text below the legal minimum size).
"""

from collections import Counter
from dataclasses import dataclass
from typing import List, Literal, Optional

from label_editor.config import ConfigManager
from label_editor.core.models import LabelDesign

__all__ = ["DesignValidationResult", "check_invariants", "validate_label_design"]

Severity = Literal["error", "warning"]


@dataclass(frozen=True)
class DesignValidationResult:
    field: str
    message: str
    severity: Severity
    i18n_key: str


def check_invariants(design: LabelDesign) -> List[str]:
    """Return human-readable invariant violations; empty when consistent."""
    problems: List[str] = []

    for element_id, count in Counter(e.id for e in design.elements).items():
        if count > 1:
            problems.append(f"duplicate element id '{element_id}' ({count}x)")

    section_ids = {s.id for s in design.sections}
    for element in design.elements:
        if element.section_id not in section_ids:
            problems.append(f"element '{element.id}' references unknown section '{element.section_id}'")

    orders = Counter((e.section_id, e.sort_order) for e in design.elements)
    for (section_id, sort_order), count in sorted(orders.items()):
        if count > 1:
            problems.append(f"section '{section_id}' has {count} elements with sort_order {sort_order}")

    for sort_order, count in sorted(Counter(s.sort_order for s in design.sections).items()):
        if count > 1:
            problems.append(f"{count} sections share sort_order {sort_order}")

    return problems


def validate_label_design(design: LabelDesign, min_font_size: Optional[float] = None) -> List[DesignValidationResult]:
    """Check a design for missing mandatory content and illegible text.

    Parameters
    ----------
    design
        The design to inspect.
    min_font_size
        Minimum text size in points. Defaults to the configured
        ``validation.min_font_size_pt``.
    """
    if min_font_size is None:
        min_font_size = ConfigManager().get_min_font_size()

    results: List[DesignValidationResult] = []

    if not any(e.type == "qr-code" for e in design.elements):
        results.append(DesignValidationResult(
            "qrCode",
            "QR code element is required for the DPP link.",
            "error",
            "ml.validation.qrElementRequired",
        ))

    if not _has_field(design, "productName"):
        results.append(DesignValidationResult(
            "productName",
            "Product name field is recommended on the label.",
            "warning",
            "ml.validation.productNameRecommended",
        ))

    # Reported once for the first offending element
    for element in design.elements:
        font_size = getattr(element, "font_size", None)
        if isinstance(font_size, (int, float)) and font_size < min_font_size:
            results.append(DesignValidationResult(
                f"element.{element.id}",
                f"Font size below {min_font_size}pt (1.2mm). EU regulation requires minimum 1.2mm text height.",
                "error",
                "ml.validation.fontSizeTooSmall",
            ))
            break

    if not _has_field(design, "manufacturerName", "manufacturerAddress"):
        results.append(DesignValidationResult(
            "manufacturer",
            "Manufacturer information is recommended on the label.",
            "warning",
            "ml.validation.manufacturerRecommended",
        ))

    return results


def _has_field(design: LabelDesign, *field_keys: str) -> bool:
    return any(e.type == "field-value" and e.field_key in field_keys for e in design.elements)
