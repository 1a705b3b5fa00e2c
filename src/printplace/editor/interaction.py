"""Translate user gestures and toolbar actions into transform updates."""

import logging
from dataclasses import dataclass

from printplace.api.models import ArtworkImage, ArtworkTransform, Flip
from printplace.editor import geometry
from printplace.editor.state import TransformStateMachine
from printplace.types import NudgeDirection

logger = logging.getLogger(__name__)

NUDGE_VECTORS: dict[str, tuple[int, int]] = {
    "left": (-1, 0),
    "right": (1, 0),
    "up": (0, -1),
    "down": (0, 1),
}

ARROW_KEYS: dict[str, NudgeDirection] = {
    "ArrowLeft": "left",
    "ArrowRight": "right",
    "ArrowUp": "up",
    "ArrowDown": "down",
}


@dataclass(frozen=True)
class Box:
    """On-canvas bounding box of the artwork as reported by a resize handle."""

    x: float
    y: float
    width: float
    height: float
    rotation: float = 0.0


@dataclass(frozen=True)
class KeyPress:
    """A keyboard event. ``ctrl`` or ``meta`` counts as the platform modifier."""

    key: str
    ctrl: bool = False
    meta: bool = False
    shift: bool = False

    @property
    def modifier(self) -> bool:
        return self.ctrl or self.meta


@dataclass
class _Gesture:
    kind: str  # "drag" or "transform"
    start: ArtworkTransform
    preview: ArtworkTransform
    box: Box | None = None


class InteractionSurface:
    """
    Gesture and toolbar front-end for a TransformStateMachine.

    Continuous gestures (drag, handle resize/rotate) only update a preview;
    the state machine and history see one committed transform per gesture.
    """

    def __init__(self, machine: TransformStateMachine) -> None:
        self.machine = machine
        self.selected = False
        self._gesture: _Gesture | None = None
        machine.add_image_listener(self._on_image_change)

    def _on_image_change(self, artwork: ArtworkImage) -> None:
        # A gesture started on another image would commit a transform sized for it
        if self._gesture is not None:
            logger.debug(f"Cancelling {self._gesture.kind} gesture after {artwork.view} image swap")
            self._gesture = None

    @property
    def settings(self):
        return self.machine.settings

    @property
    def live_transform(self) -> ArtworkTransform | None:
        """Get the transform to render: the gesture preview if one is in progress."""
        if self._gesture is not None:
            return self._gesture.preview
        return self.machine.transform

    def _ready(self) -> bool:
        return self.machine.image is not None and self.machine.transform is not None

    def select(self) -> None:
        self.selected = True

    def deselect(self) -> None:
        self.selected = False

    # ========================================================================
    # Toolbar actions
    # ========================================================================

    def center(self) -> ArtworkTransform | None:
        """Center the artwork in the print area at its current scale, clearing rotation."""
        if not self._ready():
            return None
        transform = self.machine.transform
        x, y = geometry.centered_position(self.machine.image.size, transform.scale, self.machine.context.print_area)
        return self._commit(transform.with_changes(x=x, y=y, rotation=0.0))

    def fit(self) -> ArtworkTransform | None:
        """Scale the artwork to fill the print area (with a small margin), centered and unrotated."""
        if not self._ready():
            return None
        return self._commit(
            geometry.fit_transform(self.machine.image.size, self.machine.context.print_area, self.settings.fit_fill)
        )

    def reset(self) -> ArtworkTransform | None:
        """Restore the default placement, clear flips and deselect."""
        if not self._ready():
            return None
        self.machine.set_flip(Flip())
        self.deselect()
        return self._commit(self.machine.default_for(self.machine.image))

    def rotate(self, angle: float | None = None) -> ArtworkTransform | None:
        """
        Rotate by a step (default: +rotate_step degrees).

        Args:
            angle: Degrees to add; negative rotates counter-clockwise.
        """
        if not self._ready():
            return None
        angle = self.settings.rotate_step if angle is None else angle
        transform = self.machine.transform
        return self._commit(transform.with_changes(rotation=geometry.normalize_rotation(transform.rotation + angle)))

    def flip_horizontal(self) -> Flip:
        self.machine.set_flip(self.machine.flip.toggled_x())
        return self.machine.flip

    def flip_vertical(self) -> Flip:
        self.machine.set_flip(self.machine.flip.toggled_y())
        return self.machine.flip

    def nudge(self, direction: NudgeDirection, large: bool = False) -> ArtworkTransform | None:
        """
        Move the artwork by the small (or large) nudge step.

        Raises:
            ValueError: If direction is not left, right, up or down.
        """
        if direction not in NUDGE_VECTORS:
            raise ValueError(f"Invalid nudge direction: {direction}")
        if not self._ready():
            return None
        step = self.settings.nudge_large if large else self.settings.nudge_small
        dx, dy = NUDGE_VECTORS[direction]
        transform = self.machine.transform
        return self._commit(transform.with_changes(x=transform.x + dx * step, y=transform.y + dy * step))

    def undo(self) -> ArtworkTransform | None:
        return self.machine.undo()

    def redo(self) -> ArtworkTransform | None:
        return self.machine.redo()

    # ========================================================================
    # Drag to move
    # ========================================================================

    def begin_drag(self) -> bool:
        if not self._ready() or self._gesture is not None:
            return False
        transform = self.machine.transform
        self._gesture = _Gesture(kind="drag", start=transform, preview=transform)
        return True

    def drag_to(self, x: float, y: float) -> ArtworkTransform | None:
        """Update the drag preview without touching history."""
        if self._gesture is None or self._gesture.kind != "drag":
            return None
        self._gesture.preview = self._gesture.start.with_changes(x=x, y=y)
        return self._gesture.preview

    def end_drag(self, x: float | None = None, y: float | None = None) -> ArtworkTransform | None:
        """Commit the drag at its final position."""
        if self._gesture is None or self._gesture.kind != "drag":
            return None
        if x is not None and y is not None:
            self.drag_to(x, y)
        final = self._gesture.preview
        self._gesture = None
        return self._commit(final)

    # ========================================================================
    # Handle resize / rotate
    # ========================================================================

    def current_box(self) -> Box | None:
        """Get the on-canvas box of the live transform."""
        transform = self.live_transform
        if self.machine.image is None or transform is None:
            return None
        width, height = geometry.rendered_size(self.machine.image.size, transform, self.machine.flip)
        return Box(x=transform.x, y=transform.y, width=width, height=height, rotation=transform.rotation)

    def begin_transform(self) -> bool:
        if not self._ready() or self._gesture is not None:
            return False
        transform = self.machine.transform
        self._gesture = _Gesture(kind="transform", start=transform, preview=transform, box=self.current_box())
        return True

    def resize_to(self, box: Box) -> Box | None:
        """
        Propose a new box from a resize/rotate handle.

        Boxes narrower or shorter than min_box_size are rejected and the
        previous box is kept.

        Returns:
            The accepted box (the previous one when rejected).
        """
        gesture = self._gesture
        if gesture is None or gesture.kind != "transform":
            return None

        minimum = self.settings.min_box_size
        if abs(box.width) < minimum or abs(box.height) < minimum:
            logger.debug(f"Rejecting resize below {minimum}px: {box.width:.1f}x{box.height:.1f}")
            return gesture.box

        # Aspect ratio is locked, so width alone determines the uniform scale
        scale = abs(box.width) / self.machine.image.width
        gesture.box = box
        gesture.preview = ArtworkTransform(
            x=box.x, y=box.y, scale=scale, rotation=geometry.normalize_rotation(box.rotation)
        )
        return box

    def rotate_to(self, angle: float) -> Box | None:
        """Update the rotation of the in-progress handle gesture."""
        gesture = self._gesture
        if gesture is None or gesture.kind != "transform" or gesture.box is None:
            return None
        box = gesture.box
        return self.resize_to(Box(x=box.x, y=box.y, width=box.width, height=box.height, rotation=angle))

    def end_transform(self) -> ArtworkTransform | None:
        """Commit the handle gesture."""
        if self._gesture is None or self._gesture.kind != "transform":
            return None
        final = self._gesture.preview
        self._gesture = None
        return self._commit(final)

    def cancel_gesture(self) -> None:
        self._gesture = None

    # ========================================================================
    # Keyboard
    # ========================================================================

    def handle_key(self, event: KeyPress) -> bool:
        """
        Apply a keyboard shortcut.

        Modifier+Z undoes and modifier+Shift+Z redoes; these take priority
        over nudging. Arrow keys nudge the selected artwork (Shift for the
        large step).

        Returns:
            True if the key was handled.
        """
        if not self._ready():
            return False

        if event.modifier and event.key.lower() == "z":
            if event.shift:
                self.redo()
            else:
                self.undo()
            return True

        if not self.selected:
            return False

        direction = ARROW_KEYS.get(event.key)
        if direction is None:
            return False
        self.nudge(direction, large=event.shift)
        return True

    def _commit(self, transform: ArtworkTransform) -> ArtworkTransform | None:
        if self.machine.set_transform(transform, commit=True):
            return transform
        return None
