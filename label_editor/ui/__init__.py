"""Label editor UI layer.

Toolkit-free controllers and canvas coordinators that a front-end binds to
its widgets and input events.
"""

# Ensure subpackages are imported so relative imports have resolvable parents
from . import canvas as _canvas  # noqa: F401
from . import controllers as _controllers  # noqa: F401

# Controllers
from .controllers.label_editor_controller import LabelEditorController  # noqa: F401

# Canvas
from .canvas.drag_drop_coordinator import DragDropCoordinator  # noqa: F401

__all__: list[str] = [
    "LabelEditorController",
    "DragDropCoordinator",
]
