from __future__ import annotations

"""Simple reusable helper functions.

These helpers are side-effect-free and contain no GUI or disk I/O; they can be
used across all layers of the editor.
"""

import re
import uuid

__all__ = [
    "generate_element_id",
    "clamp",
    "to_camel_case",
    "to_snake_case",
]

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")


def generate_element_id() -> str:
    """Generate a globally unique ID for a label element."""
    return f"el_{uuid.uuid4().hex}"


def clamp(value: int, lower: int, upper: int) -> int:
    """Clamp *value* into ``[lower, upper]``.

    When the range is empty (``upper < lower``) *lower* wins, which keeps
    index arithmetic on empty collections at 0.
    """
    return max(lower, min(value, upper))


def to_camel_case(name: str) -> str:
    """Convert a snake_case attribute name to the camelCase storage key.

    >>> to_camel_case("sort_order")
    'sortOrder'
    """
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def to_snake_case(name: str) -> str:
    """Convert a camelCase storage key to a snake_case attribute name.

    >>> to_snake_case("sectionId")
    'section_id'
    """
    return _CAMEL_BOUNDARY.sub(r"_\1", name).lower()
