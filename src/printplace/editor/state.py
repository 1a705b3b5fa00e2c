"""
Transform state machine for one editing context.

Owns the active placement, the flip state and the per-view transform cache.
The view axis is an explicit tagged union:

    Loading(view)              artwork pipeline running, external writes refused
    Idle(view)                 normal editing
    Transitioning(src, dst)    swapping the displayed image, external writes refused

so that a listener reacting to an image swap can never overwrite the cache
of the view being left.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Union

from printplace.api.models import ArtworkImage, ArtworkTransform, Flip
from printplace.config import PlacementSettings
from printplace.editor import geometry
from printplace.editor.context import EditingContext
from printplace.editor.history import HistoryManager
from printplace.types import ArtworkView, EditPhase
from printplace.utils.dimensions import PhysicalSize

logger = logging.getLogger(__name__)

TransformListener = Callable[[ArtworkTransform], None]
ImageListener = Callable[[ArtworkImage], None]


@dataclass(frozen=True)
class Loading:
    view: ArtworkView


@dataclass(frozen=True)
class Idle:
    view: ArtworkView


@dataclass(frozen=True)
class Transitioning:
    source: ArtworkView
    target: ArtworkView


ViewState = Union[Loading, Idle, Transitioning]


class TransformStateMachine:
    """Placement state for the artwork on one print location."""

    def __init__(self, context: EditingContext) -> None:
        """
        Initialize an empty state machine.

        Args:
            context: Editing context owning the transform cache and history.
        """
        self.context = context
        self.image: ArtworkImage | None = None
        self.transform: ArtworkTransform | None = None
        self.flip = Flip()
        self.view_state: ViewState = Idle("original")
        self._edited = False
        self._transform_listeners: list[TransformListener] = []
        self._image_listeners: list[ImageListener] = []

    # ========================================================================
    # Queries
    # ========================================================================

    @property
    def settings(self) -> PlacementSettings:
        return self.context.settings

    @property
    def view(self) -> ArtworkView:
        """Get the view currently displayed (the target while transitioning)."""
        state = self.view_state
        if isinstance(state, Transitioning):
            return state.target
        return state.view

    @property
    def history(self) -> HistoryManager:
        """Get the undo history of the displayed view."""
        return self.context.history_for(self.view)

    @property
    def phase(self) -> EditPhase:
        if self.image is None or self.transform is None:
            return "empty"
        return "edited" if self._edited else "loaded"

    @property
    def accepts_writes(self) -> bool:
        """Check whether external transform writes are currently allowed."""
        return isinstance(self.view_state, Idle) and self.image is not None

    def current_dimensions(self) -> PhysicalSize | None:
        """
        Get the printed size of the artwork in inches.

        Returns:
            PhysicalSize, or None when no artwork is placed.
        """
        if self.image is None or self.transform is None:
            return None
        return geometry.physical_size(self.image.size, self.transform, self.context.location, self.flip)

    def is_oversize(self) -> bool:
        """Check whether the design exceeds the location's maximum print size (warning only)."""
        if self.image is None or self.transform is None:
            return False
        return geometry.is_oversize(self.image.size, self.transform, self.context.location, self.flip)

    def position_descriptor(self) -> str | None:
        if self.transform is None:
            return None
        return geometry.position_descriptor(
            self.transform, self.context.location, self.settings.center_tolerance
        )

    def default_for(self, artwork: ArtworkImage, rotation: float = 0.0) -> ArtworkTransform:
        """Compute the centered default placement for an image on this location."""
        return geometry.default_transform(
            artwork.size, self.context.print_area, self.settings.initial_fill, rotation
        )

    # ========================================================================
    # Listeners
    # ========================================================================

    def add_transform_listener(self, callback: TransformListener) -> None:
        """Register a callback fired on every committed transform change."""
        self._transform_listeners.append(callback)

    def add_image_listener(self, callback: ImageListener) -> None:
        """Register a callback fired when the displayed image is swapped."""
        self._image_listeners.append(callback)

    def _notify_transform(self) -> None:
        if self.transform is None:
            return
        for callback in self._transform_listeners:
            callback(self.transform)

    def _notify_image(self) -> None:
        if self.image is None:
            return
        for callback in self._image_listeners:
            callback(self.image)

    # ========================================================================
    # Lifecycle
    # ========================================================================

    def begin_load(self, view: ArtworkView = "original") -> None:
        """Enter the loading state for a new artwork identity."""
        self.image = None
        self.transform = None
        self.flip = Flip()
        self._edited = False
        self.view_state = Loading(view)

    def clear(self) -> None:
        """Return to the empty state (artwork removed or failed to decode)."""
        self.image = None
        self.transform = None
        self.flip = Flip()
        self._edited = False
        self.view_state = Idle("original")

    def initialize(
        self,
        artwork: ArtworkImage,
        existing: ArtworkTransform | None = None,
        original_size: tuple[int, int] | None = None,
    ) -> ArtworkTransform:
        """
        Place a freshly prepared artwork and finish loading.

        A cached transform for the current view wins. Otherwise an existing
        (persisted) transform is used, re-centred once if the artwork was
        cropped after that transform was made. Otherwise the default
        centered placement is computed.

        Args:
            artwork: Final (possibly cropped) artwork image.
            existing: Transform computed against the uncropped image, if any.
            original_size: Uncropped (width, height), used to re-centre existing.

        Returns:
            The active transform.
        """
        view = self.view
        self.image = artwork

        cached = self.context.transform_cache.get(view)
        if cached is not None:
            transform = cached
        elif existing is not None:
            if artwork.cropped and original_size and original_size != artwork.size:
                transform = geometry.recenter_for_new_crop(
                    existing, original_size, artwork.size,
                    self.context.print_area, self.settings.initial_fill,
                )
                logger.info(f"Re-centred existing placement for cropped {view} artwork")
            else:
                transform = existing
        else:
            transform = self.default_for(artwork)

        self.transform = transform
        self.context.transform_cache[view] = transform
        self.history.record(transform)
        self.view_state = Idle(view)

        self._notify_image()
        self._notify_transform()
        return transform

    # ========================================================================
    # Mutations
    # ========================================================================

    def set_transform(self, transform: ArtworkTransform, commit: bool = True) -> bool:
        """
        Replace the active transform.

        Args:
            transform: New placement.
            commit: Record the change in history (one user action).

        Returns:
            True if applied, False if refused (loading, transitioning or empty).
        """
        if not self.accepts_writes:
            logger.debug(f"Ignoring transform write while {self.view_state}")
            return False

        self.transform = transform
        self.context.transform_cache[self.view] = transform
        if commit:
            self.history.record(transform)
        self._edited = True
        self._notify_transform()
        return True

    def set_flip(self, flip: Flip) -> None:
        """Replace the flip state (not part of the transform or history)."""
        self.flip = flip
        self._notify_transform()

    def recenter_for_new_crop(
        self,
        old_transform: ArtworkTransform,
        old_size: tuple[int, int],
        new_size: tuple[int, int],
    ) -> ArtworkTransform:
        """
        Keep the visual center of a placement made against the uncropped image.

        Args:
            old_transform: Transform valid for the uncropped image.
            old_size: Uncropped (width, height).
            new_size: Cropped (width, height).

        Returns:
            The recentred transform (applied if writes are allowed).
        """
        transform = geometry.recenter_for_new_crop(
            old_transform, old_size, new_size, self.context.print_area, self.settings.initial_fill
        )
        self.set_transform(transform)
        return transform

    def _apply_history(self, transform: ArtworkTransform | None) -> ArtworkTransform | None:
        if transform is None or not self.accepts_writes:
            return None
        self.transform = transform
        self.context.transform_cache[self.view] = transform
        self._edited = True
        self._notify_transform()
        return transform

    def undo(self) -> ArtworkTransform | None:
        """Restore the previous committed transform (no-op at the oldest entry)."""
        if not self.accepts_writes:
            return None
        return self._apply_history(self.history.undo())

    def redo(self) -> ArtworkTransform | None:
        """Restore the next committed transform (no-op at the newest entry)."""
        if not self.accepts_writes:
            return None
        return self._apply_history(self.history.redo())

    def toggle_view(self, target: ArtworkView, artwork: ArtworkImage) -> ArtworkTransform | None:
        """
        Switch the displayed image between the original and vectorized views.

        The transform last used in the target view is restored verbatim; if
        there is none, a centered default is computed against the target
        image keeping the prior rotation.

        Args:
            target: View to display.
            artwork: Image for the target view (already cropped if applicable).

        Returns:
            The active transform after the switch, or None if refused.
        """
        if not isinstance(self.view_state, Idle) or self.transform is None:
            logger.debug(f"Ignoring view toggle while {self.view_state}")
            return None

        source = self.view_state.view
        if source == target and artwork is self.image:
            return self.transform

        prior = self.transform
        self.view_state = Transitioning(source, target)
        try:
            self.context.transform_cache[source] = prior
            self.image = artwork
            # Listeners may try to write here; set_transform refuses while transitioning
            self._notify_image()

            cached = self.context.transform_cache.get(target)
            transform = cached if cached is not None else self.default_for(artwork, prior.rotation)
            self.transform = transform
            self.context.transform_cache[target] = transform

            # First visit seeds the target view's history; the switch itself is not an edit
            history = self.context.history_for(target)
            if len(history) == 0:
                history.record(transform)
        finally:
            self.view_state = Idle(target)

        logger.info(f"Switched {self.context.location} artwork from {source} to {target} view")
        self._notify_transform()
        return self.transform
