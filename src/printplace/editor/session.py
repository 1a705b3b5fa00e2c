"""
Multi-location placement session.

Runs the artwork pipeline (decode → detect bounds → render → crop) and the
vectorization round-trip on the event loop. Every dispatch captures the
artwork identity token of its context; results that come back after the
artwork changed are dropped.
"""

import asyncio
import itertools
import logging
from collections.abc import Awaitable, Callable

import requests
from PIL import UnidentifiedImageError

from printplace.api.models import ArtworkSource, ArtworkTransform, VectorizationResult
from printplace.api.vectorizer import fetch_url_bytes
from printplace.config import PlacementSettings
from printplace.editor.context import EditingContext
from printplace.editor.interaction import InteractionSurface
from printplace.editor.state import TransformStateMachine
from printplace.imaging.cropper import prepare_artwork
from printplace.imaging.image import decode_artwork
from printplace.types import ArtworkView, PrintLocation

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], Awaitable[bytes]]
Vectorizer = Callable[[str], Awaitable[VectorizationResult]]
ErrorListener = Callable[[PrintLocation, Exception], None]

DECODE_ERRORS = (OSError, ValueError, UnidentifiedImageError, requests.RequestException)


class PlacementSession:
    """
    One logical editing session across print locations.

    Each location has its own EditingContext (images, bounds, transform
    cache and undo history), TransformStateMachine and InteractionSurface.
    Switching location keeps every context intact.
    """

    def __init__(
        self,
        settings: PlacementSettings | None = None,
        fetch: Fetcher | None = None,
        vectorize: Vectorizer | None = None,
        location: PrintLocation = "front",
    ) -> None:
        """
        Initialize placement session.

        Args:
            settings: Placement policy. Defaults to PlacementSettings().
            fetch: Coroutine downloading a URL to bytes (default: plain requests).
            vectorize: Coroutine calling the vectorization service, or None if unavailable.
            location: Initially active print location.
        """
        self.settings = settings or PlacementSettings()
        self._fetch = fetch or fetch_url_bytes
        self._vectorize = vectorize
        self.active_location: PrintLocation = location
        self.contexts: dict[str, EditingContext] = {}
        self.machines: dict[str, TransformStateMachine] = {}
        self.surfaces: dict[str, InteractionSurface] = {}
        self._tokens = itertools.count(1)
        self._error_listeners: list[ErrorListener] = []

    # ========================================================================
    # Contexts
    # ========================================================================

    def context(self, location: PrintLocation | None = None) -> EditingContext:
        location = location or self.active_location
        if location not in self.contexts:
            self.contexts[location] = EditingContext(location=location, settings=self.settings)
        return self.contexts[location]

    def machine(self, location: PrintLocation | None = None) -> TransformStateMachine:
        location = location or self.active_location
        if location not in self.machines:
            self.machines[location] = TransformStateMachine(self.context(location))
        return self.machines[location]

    def surface(self, location: PrintLocation | None = None) -> InteractionSurface:
        location = location or self.active_location
        if location not in self.surfaces:
            self.surfaces[location] = InteractionSurface(self.machine(location))
        return self.surfaces[location]

    def select_location(self, location: PrintLocation) -> TransformStateMachine:
        """Make a print location active without touching any context or history."""
        self.active_location = location
        return self.machine(location)

    def add_error_listener(self, callback: ErrorListener) -> None:
        """Register a callback receiving (location, exception) on decode failures."""
        self._error_listeners.append(callback)

    def _report_error(self, location: PrintLocation, error: Exception) -> None:
        for callback in self._error_listeners:
            callback(location, error)

    # ========================================================================
    # Artwork lifecycle
    # ========================================================================

    def _new_identity(self, location: PrintLocation, source: ArtworkSource | None) -> int:
        token = next(self._tokens)
        self.context(location).reset(token, source)
        return token

    def remove_artwork(self, location: PrintLocation | None = None) -> None:
        """Remove the artwork from a location; in-flight results for it become stale."""
        location = location or self.active_location
        self._new_identity(location, None)
        self.machine(location).clear()
        self.surface(location).cancel_gesture()
        logger.info(f"Removed artwork from {location}")

    async def _decode(self, data: bytes, name: str | None, view: ArtworkView):
        # Yield to the loop so decode completion arrives like a load event
        await asyncio.sleep(0)
        return decode_artwork(data, name, view)

    async def load_artwork(
        self, source: ArtworkSource, location: PrintLocation | None = None
    ) -> ArtworkTransform | None:
        """
        Load an artwork into a location and compute its placement.

        The crop pipeline completes before any placement is computed. A
        persisted record already vectorized is switched to the vectorized
        view afterwards.

        Args:
            source: Upload or persisted record.
            location: Target location (default: active location).

        Returns:
            The active transform, or None if the load failed or was superseded.
        """
        location = location or self.active_location
        context = self.context(location)
        machine = self.machine(location)

        token = self._new_identity(location, source)
        machine.begin_load("original")
        self.surface(location).cancel_gesture()

        try:
            data = source.data if not source.needs_fetch else await self._fetch(source.url)
            if not context.is_current(token):
                logger.debug(f"Dropping stale download for {location} (token {token})")
                return None
            artwork = await self._decode(data, source.url or source.file_name, "original")
        except DECODE_ERRORS as e:
            if not context.is_current(token):
                return None
            logger.warning(f"Failed to decode artwork '{source.file_name}' for {location}: {e}")
            context.reset(token, None)
            machine.clear()
            self._report_error(location, e)
            return None

        if not context.is_current(token):
            logger.debug(f"Dropping stale decode for {location} (token {token})")
            return None

        markup = data if source.is_vector else None
        prepared = prepare_artwork(artwork, markup, self.settings)

        context.original_image = prepared.artwork
        context.original_size = prepared.original_size
        context.content_bounds = prepared.bounds
        transform = machine.initialize(prepared.artwork, source.transform, prepared.original_size)

        if source.vectorization_status == "completed" and source.vectorized_url and not source.is_vector:
            await self._load_vectorized(location, token, source.vectorized_url)

        return machine.transform if context.is_current(token) else transform

    async def request_vectorization(self, location: PrintLocation | None = None) -> VectorizationResult | None:
        """
        Ask the vectorization service for a vectorized version and switch to it on completion.

        Vector uploads and artworks without an ID are never sent. Failures
        leave the original view active.

        Returns:
            The service result, or None if not requested or superseded.
        """
        location = location or self.active_location
        context = self.context(location)
        source = context.source

        if self._vectorize is None or source is None or source.is_vector or not source.artwork_id:
            return None
        if not context.has_artwork:
            return None

        token = context.token
        context.vectorization_status = "processing"

        try:
            result = await self._vectorize(source.artwork_id)
        except requests.RequestException as e:
            result = VectorizationResult(status="failed", error=str(e))

        if not context.is_current(token):
            logger.debug(f"Dropping stale vectorization result for {location} (token {token})")
            return None

        context.vectorization_status = result.status
        if result.completed:
            await self._load_vectorized(location, token, result.vectorized_url)
        elif result.status == "failed":
            logger.warning(f"Vectorization failed for {location}; keeping original view ({result.error})")

        return result

    async def _load_vectorized(self, location: PrintLocation, token: int, url: str) -> bool:
        context = self.context(location)
        machine = self.machine(location)

        try:
            data = await self._fetch(url)
            if not context.is_current(token):
                return False
            artwork = await self._decode(data, url, "vectorized")
        except DECODE_ERRORS as e:
            logger.warning(f"Failed to load vectorized artwork for {location}: {e}")
            return False

        if not context.is_current(token):
            logger.debug(f"Dropping stale vectorized artwork for {location} (token {token})")
            return False

        prepared = prepare_artwork(artwork, data, self.settings)
        context.vectorized_image = prepared.artwork
        context.vectorized_bounds = prepared.bounds
        context.vectorization_status = "completed"

        return machine.toggle_view("vectorized", prepared.artwork) is not None

    def toggle_view(self, view: ArtworkView, location: PrintLocation | None = None) -> ArtworkTransform | None:
        """
        Switch a location between its original and vectorized views.

        Returns:
            Active transform after the switch, or None if that view's image is unavailable.
        """
        location = location or self.active_location
        artwork = self.context(location).image_for(view)
        if artwork is None:
            return None
        return self.machine(location).toggle_view(view, artwork)
