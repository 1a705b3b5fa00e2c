"""Composite the editor canvas (backdrop, guides, artwork) with Pillow."""

import math

from PIL import Image, ImageDraw, ImageOps

from printplace.api.models import ArtworkTransform, Flip
from printplace.utils.dimensions import (
    CANVAS_HEIGHT,
    CANVAS_WIDTH,
    SHIRT_HEIGHT,
    SHIRT_PADDING,
    SHIRT_WIDTH,
    PrintArea,
)

BACKDROP_OPACITY = 0.7
GUIDE_COLOR = (59, 130, 246, 255)  # #3b82f6
GUIDE_DASH = 5


def transform_artwork(
    image: Image.Image, transform: ArtworkTransform, flip: Flip = Flip()
) -> tuple[Image.Image, tuple[int, int]]:
    """
    Apply scale, flip and rotation to an artwork bitmap.

    Flips mirror the image in place; rotation is clockwise about the
    placement origin (transform.x, transform.y).

    Args:
        image: Artwork bitmap at native size.
        transform: Placement transform.
        flip: Flip factors.

    Returns:
        Tuple of (transformed RGBA image, (x, y) paste position on the canvas).
    """
    width = max(1, round(image.width * transform.scale))
    height = max(1, round(image.height * transform.scale))
    placed = image.convert("RGBA").resize((width, height), Image.Resampling.LANCZOS)

    if flip.x < 0:
        placed = ImageOps.mirror(placed)
    if flip.y < 0:
        placed = ImageOps.flip(placed)

    rotation = transform.rotation % 360
    if rotation == 0:
        return placed, (round(transform.x), round(transform.y))

    # Offset of the rotated bounding box relative to the origin
    theta = math.radians(rotation)
    cos_t, sin_t = math.cos(theta), math.sin(theta)
    corners = [(0, 0), (width, 0), (0, height), (width, height)]
    rotated_x = [cx * cos_t - cy * sin_t for cx, cy in corners]
    rotated_y = [cx * sin_t + cy * cos_t for cx, cy in corners]

    # PIL rotates counter-clockwise; canvas rotation is clockwise (y axis points down)
    placed = placed.rotate(-rotation, resample=Image.Resampling.BICUBIC, expand=True)
    return placed, (round(transform.x + min(rotated_x)), round(transform.y + min(rotated_y)))


def draw_print_area_guides(canvas: Image.Image, area: PrintArea) -> None:
    """Draw a dashed print-area outline onto the canvas in place."""
    draw = ImageDraw.Draw(canvas)
    left, top = area.x, area.y
    right, bottom = area.x + area.width, area.y + area.height

    x = left
    while x < right:
        end = min(x + GUIDE_DASH, right)
        draw.line([(x, top), (end, top)], fill=GUIDE_COLOR, width=2)
        draw.line([(x, bottom), (end, bottom)], fill=GUIDE_COLOR, width=2)
        x += GUIDE_DASH * 2

    y = top
    while y < bottom:
        end = min(y + GUIDE_DASH, bottom)
        draw.line([(left, y), (left, end)], fill=GUIDE_COLOR, width=2)
        draw.line([(right, y), (right, end)], fill=GUIDE_COLOR, width=2)
        y += GUIDE_DASH * 2


def render_canvas(
    area: PrintArea,
    backdrop: Image.Image | None = None,
    artwork: Image.Image | None = None,
    transform: ArtworkTransform | None = None,
    flip: Flip = Flip(),
    show_guides: bool = True,
) -> Image.Image:
    """
    Render the editor canvas.

    Args:
        area: Print area of the active location.
        backdrop: Optional garment backdrop image.
        artwork: Optional artwork bitmap at native size.
        transform: Artwork placement (required to draw artwork).
        flip: Artwork flip factors.
        show_guides: Whether to draw the non-printable print-area guides.

    Returns:
        RGBA canvas of CANVAS_WIDTH × CANVAS_HEIGHT pixels.
    """
    canvas = Image.new("RGBA", (CANVAS_WIDTH, CANVAS_HEIGHT), (255, 255, 255, 255))

    if backdrop is not None:
        shirt = backdrop.convert("RGBA").resize((SHIRT_WIDTH, SHIRT_HEIGHT), Image.Resampling.LANCZOS)
        alpha = shirt.getchannel("A").point(lambda a: round(a * BACKDROP_OPACITY))
        shirt.putalpha(alpha)
        canvas.alpha_composite(shirt, (SHIRT_PADDING, SHIRT_PADDING))

    if show_guides:
        draw_print_area_guides(canvas, area)

    if artwork is not None and transform is not None:
        placed, position = transform_artwork(artwork, transform, flip)
        layer = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
        layer.paste(placed, position, placed)
        canvas = Image.alpha_composite(canvas, layer)

    return canvas
