"""Interactive placement: state machine, history, gestures and sessions."""

from printplace.editor.history import HistoryManager
from printplace.editor.state import TransformStateMachine
from printplace.editor.interaction import InteractionSurface, KeyPress, Box
from printplace.editor.session import PlacementSession
from printplace.editor.snapshot import CanvasSnapshot

__all__ = [
    "Box",
    "CanvasSnapshot",
    "HistoryManager",
    "InteractionSurface",
    "KeyPress",
    "PlacementSession",
    "TransformStateMachine",
]
