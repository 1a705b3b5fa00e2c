"""Crop artwork to its detected content bounds."""

import logging
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError

from printplace.api.models import ArtworkImage
from printplace.config import PlacementSettings
from printplace.imaging.bounds import ContentBounds, detect_content_bounds, is_significant_crop
from printplace.imaging.vector import (
    get_viewbox_dimensions,
    needs_full_resolution,
    render_full_resolution,
)

logger = logging.getLogger(__name__)


@dataclass
class PreparedArtwork:
    """Result of the detect → render → crop pipeline."""

    artwork: ArtworkImage
    bounds: ContentBounds | None
    original_size: tuple[int, int]

    @property
    def cropped(self) -> bool:
        return self.artwork.cropped


def crop_to_bounds(
    artwork: ArtworkImage,
    bounds: ContentBounds,
    vector_markup: str | bytes | None = None,
    settings: PlacementSettings | None = None,
) -> ArtworkImage:
    """
    Produce a new image limited to bounds.

    If vector_markup is given and its viewBox is much larger than the decoded
    bitmap, the document is re-rendered at full resolution first and bounds
    are rescaled to that render.

    Args:
        artwork: Decoded artwork.
        bounds: Bounds in artwork pixel coordinates.
        vector_markup: Optional SVG source of the artwork.
        settings: Render cap and proxy ratio. Defaults to PlacementSettings().

    Returns:
        New ArtworkImage whose size is exactly the (possibly rescaled) bounds.
    """
    settings = settings or PlacementSettings()
    source: Image.Image = artwork.image

    if vector_markup is not None:
        viewbox = get_viewbox_dimensions(vector_markup)
        if needs_full_resolution(viewbox, artwork.size, settings.vector_proxy_ratio):
            source = render_full_resolution(vector_markup, settings.vector_render_cap)
            bounds = bounds.scaled(
                source.width / artwork.width,
                source.height / artwork.height,
                source.size,
            )

    cropped = source.crop(bounds.to_box())
    return ArtworkImage(image=cropped, view=artwork.view, cropped=True)


def prepare_artwork(
    artwork: ArtworkImage,
    vector_markup: str | bytes | None = None,
    settings: PlacementSettings | None = None,
) -> PreparedArtwork:
    """
    Detect content bounds and crop when the crop is significant.

    Every failure inside detection or cropping is absorbed: the unmodified
    artwork is returned so placement is never blocked.

    Args:
        artwork: Decoded artwork.
        vector_markup: Optional SVG source of the artwork.
        settings: Detection and crop policy. Defaults to PlacementSettings().

    Returns:
        PreparedArtwork holding the final image and the bounds (if any).
    """
    settings = settings or PlacementSettings()
    original_size = artwork.size

    try:
        bounds = detect_content_bounds(artwork.image, settings)
    except (OSError, ValueError, MemoryError) as e:
        logger.warning(f"Content bounds detection failed, using full image: {e}")
        return PreparedArtwork(artwork=artwork, bounds=None, original_size=original_size)

    if bounds is None:
        logger.info("No visible content found, using full image")
        return PreparedArtwork(artwork=artwork, bounds=None, original_size=original_size)

    if not is_significant_crop(bounds, original_size, settings.significant_crop_ratio):
        logger.debug(f"Skipping insignificant crop {bounds} of {original_size}")
        return PreparedArtwork(artwork=artwork, bounds=bounds, original_size=original_size)

    try:
        cropped = crop_to_bounds(artwork, bounds, vector_markup, settings)
    except (OSError, ValueError, UnidentifiedImageError) as e:
        logger.warning(f"Cropping failed, using full image: {e}")
        return PreparedArtwork(artwork=artwork, bounds=bounds, original_size=original_size)
    except Exception as e:
        # svglib/reportlab raise assorted errors on malformed markup
        logger.warning(f"Full-resolution render failed, using full image: {e}")
        return PreparedArtwork(artwork=artwork, bounds=bounds, original_size=original_size)

    logger.info(
        f"Cropped {artwork.view} artwork from {original_size[0]}x{original_size[1]} "
        f"to {cropped.width}x{cropped.height}"
    )
    return PreparedArtwork(artwork=cropped, bounds=bounds, original_size=original_size)
