"""Image decoding and encoding utilities using Pillow."""

import base64
from io import BytesIO

from PIL import Image

from printplace.api.models import ArtworkImage, is_svg
from printplace.imaging.vector import render_svg
from printplace.types import ArtworkView


def load_image_from_bytes(image_data: bytes) -> Image.Image:
    """
    Load image from raw bytes.

    Args:
        image_data: Raw image bytes (PNG, JPEG, etc.).

    Returns:
        Fully loaded PIL Image object.

    Raises:
        PIL.UnidentifiedImageError: If the bytes are not a supported image.
    """
    img = Image.open(BytesIO(image_data))
    img.load()
    return img


def decode_artwork(
    image_data: bytes, file_name: str | None = None, view: ArtworkView = "original"
) -> ArtworkImage:
    """
    Decode raster or SVG bytes into an ArtworkImage.

    SVG documents are rasterized at their declared width/height, which may be
    a low-resolution proxy of the viewBox (see imaging.vector).

    Args:
        image_data: Raw file bytes.
        file_name: Optional file name or URL used to detect SVG sources.
        view: Provenance tag for the decoded image.

    Returns:
        ArtworkImage in RGBA mode.
    """
    if is_svg(file_name, image_data):
        img = render_svg(image_data)
    else:
        img = load_image_from_bytes(image_data)

    # Normalize to RGBA (handles palette, grayscale, RGB, etc.)
    if img.mode != "RGBA":
        img = img.convert("RGBA")

    return ArtworkImage(image=img, view=view)


def save_image_to_bytes(img: Image.Image, format: str = "PNG") -> bytes:
    """
    Save PIL Image to bytes.

    Args:
        img: PIL Image object.
        format: Image format (PNG, JPEG, etc.).

    Returns:
        Image as bytes.
    """
    buffer = BytesIO()
    img.save(buffer, format=format)
    return buffer.getvalue()


def image_to_data_url(img: Image.Image) -> str:
    """
    Encode a PIL Image as a PNG data URL.

    Args:
        img: PIL Image object.

    Returns:
        String of the form "data:image/png;base64,...".
    """
    encoded = base64.b64encode(save_image_to_bytes(img, format="PNG")).decode("ascii")
    return f"data:image/png;base64,{encoded}"
