"""Garment backdrop resolution for the editor canvas."""

import logging
from io import BytesIO

import requests
from PIL import Image, UnidentifiedImageError

from printplace.api.models import Garment, is_svg
from printplace.imaging.vector import render_svg
from printplace.types import PrintLocation
from printplace.utils.dimensions import BACK_LOCATIONS

logger = logging.getLogger(__name__)

SHIRT_FRONT_SVG = "/shirt-front.svg"
SHIRT_BACK_SVG = "/shirt-back.svg"


def backdrop_url(location: PrintLocation, garment: Garment | None = None, color: str | None = None) -> str:
    """
    Pick the backdrop image for a print location and garment color.

    Back locations prefer the color's back image and fall back to the front
    image; without garment imagery the bundled shirt outline is used.

    Args:
        location: Print location.
        garment: Optional garment catalog entry.
        color: Optional garment color name.

    Returns:
        Image URL or path.
    """
    is_back = location in BACK_LOCATIONS

    if garment is not None and color:
        if is_back and garment.color_back_images.get(color):
            return garment.color_back_images[color]
        if garment.color_images.get(color):
            return garment.color_images[color]

    return SHIRT_BACK_SVG if is_back else SHIRT_FRONT_SVG


def load_backdrop(url: str, base_url: str | None = None, timeout: float = 10.0) -> Image.Image | None:
    """
    Load a backdrop image for display.

    Backdrops are decorative, so failures are logged and None is returned.

    Args:
        url: Absolute URL, site-relative path (resolved against base_url) or local file path.
        base_url: Site root used for relative paths like "/shirt-front.svg".
        timeout: HTTP timeout in seconds.

    Returns:
        RGBA PIL Image, or None if it could not be loaded.
    """
    if url.startswith("/") and base_url:
        url = base_url.rstrip("/") + url

    try:
        if url.startswith(("http://", "https://")):
            response = requests.get(url, timeout=timeout)
            response.raise_for_status()
            data = response.content
        else:
            with open(url, "rb") as f:
                data = f.read()

        if is_svg(url, data):
            return render_svg(data)
        return Image.open(BytesIO(data)).convert("RGBA")
    except (requests.RequestException, OSError, UnidentifiedImageError, ValueError) as e:
        logger.warning(f"Failed to load backdrop '{url}': {e}")
        return None
