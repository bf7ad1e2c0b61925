from __future__ import annotations

"""Output contract of the page-break collaborator.

The page-break calculator walks visible sections top to bottom and slices a
long section across physical pages. The editor only consumes its output:
each page lists :class:`SectionSlice` objects whose ``element_range`` is a
half-open range into the section's full ordering (see
:meth:`LabelDesign.section_elements`).

A slice is a rendering concern. Edits and drag/drop always resolve indices
against the full section, never against a slice.
"""

from dataclasses import dataclass, field
from typing import List, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from . import LabelDesign, LabelElement

__all__ = ["SectionSlice", "PageContent"]


@dataclass(frozen=True)
class SectionSlice:
    section_id: str
    element_range: Tuple[int, int]
    is_partial: bool = False

    @property
    def start(self) -> int:
        return self.element_range[0]

    @property
    def end(self) -> int:
        return self.element_range[1]

    def visible_elements(self, design: "LabelDesign") -> List["LabelElement"]:
        """Return the elements this slice renders, in display order."""
        return design.section_elements(self.section_id)[self.start:self.end]

    def to_full_index(self, local_index: int) -> int:
        """Map a position within this slice to the full-section index."""
        return self.start + local_index


@dataclass
class PageContent:
    page_index: int
    sections: List[SectionSlice] = field(default_factory=list)
    used_height: float = 0
