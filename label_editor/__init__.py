"""Top-level package for the label document editing engine.

This package hosts the GUI-agnostic implementation of the label editor:
the document model, the editing service, undo/redo history and drag/drop
reconciliation. Front-ends should only depend on the public API exposed
here rather than importing internal modules directly.
"""

from .core.models import LabelDesign, LabelSection  # re-export for convenience
from .core.services.label_editing_service import LabelEditingService, OperationResult
from .ui.controllers.label_editor_controller import LabelEditorController

__all__: list[str] = [
    "LabelDesign",
    "LabelSection",
    "LabelEditingService",
    "OperationResult",
    "LabelEditorController",
]
