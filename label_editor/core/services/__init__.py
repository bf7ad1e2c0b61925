from __future__ import annotations

"""High-level editing services (mutation engine, history, autosave, validation).

Services are UI-agnostic and instantiated directly by the editor controller.
"""

from .label_editing_service import LabelEditingService, OperationResult  # noqa: F401
from .undo_service import UndoService  # noqa: F401
from .autosave_service import AutosaveService  # noqa: F401
from .validation_service import check_invariants, validate_label_design  # noqa: F401

__all__: list[str] = [
    "LabelEditingService",
    "OperationResult",
    "UndoService",
    "AutosaveService",
    "check_invariants",
    "validate_label_design",
]
