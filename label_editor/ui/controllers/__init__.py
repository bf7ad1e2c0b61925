"""UI controllers package for the label editor.

Controllers mediate between front-end widgets and the editing services.
"""

from .label_editor_controller import LabelEditorController  # noqa: F401

__all__: list[str] = ["LabelEditorController"]
