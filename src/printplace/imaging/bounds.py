"""Content bounds detection on raw pixel buffers."""

import logging
import math
from dataclasses import dataclass

import numpy as np
from PIL import Image

from printplace.config import PlacementSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContentBounds:
    """Tight rectangle of visible content in source-image pixels (padding included)."""

    x: int
    y: int
    width: int
    height: int

    @property
    def area(self) -> int:
        return self.width * self.height

    def to_box(self) -> tuple[int, int, int, int]:
        """Get the (left, top, right, bottom) box used by PIL's crop()."""
        return (self.x, self.y, self.x + self.width, self.y + self.height)

    def scaled(self, scale_x: float, scale_y: float, limit: tuple[int, int]) -> "ContentBounds":
        """
        Rescale to another resolution of the same image.

        Mins are floored and maxes ceiled so content is never clipped; the
        result is clamped to the target image size.

        Args:
            scale_x: Horizontal scale factor.
            scale_y: Vertical scale factor.
            limit: (width, height) of the target image.

        Returns:
            New ContentBounds in the target resolution.
        """
        left = max(0, math.floor(self.x * scale_x))
        top = max(0, math.floor(self.y * scale_y))
        right = min(limit[0], math.ceil((self.x + self.width) * scale_x))
        bottom = min(limit[1], math.ceil((self.y + self.height) * scale_y))
        return ContentBounds(x=left, y=top, width=right - left, height=bottom - top)


def detect_content_bounds(
    image: Image.Image, settings: PlacementSettings | None = None
) -> ContentBounds | None:
    """
    Find the bounding box of non-background pixels.

    The image is downscaled to a working canvas (longest side capped at
    settings.working_max_dimension) and composited over white. A pixel is
    background when it is near-fully transparent or near-white in all three
    channels.

    Args:
        image: Decoded PIL Image (any mode).
        settings: Detection thresholds. Defaults to PlacementSettings().

    Returns:
        ContentBounds in source pixels, or None if the image has no content.
    """
    settings = settings or PlacementSettings()
    src_width, src_height = image.size
    if src_width == 0 or src_height == 0:
        return None

    # Downscale to a bounded working canvas
    scale = min(1.0, settings.working_max_dimension / max(src_width, src_height))
    work_width = max(1, round(src_width * scale))
    work_height = max(1, round(src_height * scale))

    working = image.convert("RGBA")
    if (work_width, work_height) != working.size:
        working = working.resize((work_width, work_height), Image.Resampling.BILINEAR)

    # Transparent regions read as white once composited
    background = Image.new("RGBA", working.size, (255, 255, 255, 255))
    composited = Image.alpha_composite(background, working)

    alpha = np.asarray(working)[:, :, 3]
    rgb = np.asarray(composited)[:, :, :3]

    is_background = (alpha < settings.alpha_threshold) | np.all(rgb > settings.white_threshold, axis=2)
    content = ~is_background

    rows = np.flatnonzero(content.any(axis=1))
    if rows.size == 0:
        return None
    cols = np.flatnonzero(content.any(axis=0))

    min_x, max_x = int(cols[0]), int(cols[-1])
    min_y, max_y = int(rows[0]), int(rows[-1])

    # Symmetric padding, clamped to the working canvas
    pad_x = round(work_width * settings.padding_ratio)
    pad_y = round(work_height * settings.padding_ratio)
    min_x = max(0, min_x - pad_x)
    min_y = max(0, min_y - pad_y)
    max_x = min(work_width - 1, max_x + pad_x)
    max_y = min(work_height - 1, max_y + pad_y)

    working_bounds = ContentBounds(
        x=min_x,
        y=min_y,
        width=max_x - min_x + 1,
        height=max_y - min_y + 1,
    )
    bounds = working_bounds.scaled(src_width / work_width, src_height / work_height, (src_width, src_height))

    logger.debug(f"Content bounds for {src_width}x{src_height} image: {bounds}")
    return bounds


def is_significant_crop(
    bounds: ContentBounds, image_size: tuple[int, int], threshold: float = 0.9
) -> bool:
    """
    Check whether cropping to bounds meaningfully shrinks the image.

    Args:
        bounds: Detected content bounds.
        image_size: (width, height) of the uncropped image.
        threshold: Maximum cropped/original area ratio that still counts as significant.

    Returns:
        True if the cropped area is below threshold × the original area.
    """
    width, height = image_size
    return bounds.area < threshold * width * height
