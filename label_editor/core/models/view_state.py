from __future__ import annotations

"""Selection and view state of an editing session.

This state is never part of the label design and never enters undo history.
"""

from dataclasses import dataclass
from typing import Literal, Optional

__all__ = ["EditorViewState", "PanelTab", "EditorView", "PANEL_TABS"]

PanelTab = Literal["preview", "settings", "design", "pictograms", "check"]
EditorView = Literal["gallery", "editor"]

PANEL_TABS = ("preview", "settings", "design", "pictograms", "check")


@dataclass
class EditorViewState:
    selected_element_id: Optional[str] = None
    hovered_element_id: Optional[str] = None
    zoom: int = 100
    right_panel_tab: PanelTab = "settings"
    view: EditorView = "gallery"

    def clear_selection(self) -> None:
        self.selected_element_id = None
        self.hovered_element_id = None
