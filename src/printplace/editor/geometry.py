"""Placement geometry: default placement, fitting, recentering and physical size."""

from printplace.api.models import ArtworkTransform, Flip
from printplace.types import ImageSize, PrintLocation
from printplace.utils.dimensions import (
    PhysicalSize,
    PrintArea,
    exceeds_max,
    get_print_area,
    pixels_to_inches,
)


def _check_size(image_size: ImageSize) -> None:
    width, height = image_size
    if width <= 0 or height <= 0:
        raise ValueError(f"Image size must be positive, got {width}x{height}")


def normalize_rotation(degrees: float) -> float:
    """
    Wrap an angle into [0, 360).

    Args:
        degrees: Angle in degrees (may be negative or beyond a full turn).

    Returns:
        Equivalent angle in [0, 360).
    """
    rotation = degrees % 360.0
    # Tiny negative inputs round up to exactly 360.0
    if rotation >= 360.0:
        rotation = 0.0
    return rotation


def fit_scale(image_size: ImageSize, area: PrintArea, fill: float, allow_upscale: bool = True) -> float:
    """
    Calculate the uniform scale that fits an image inside a print area.

    Args:
        image_size: (width, height) of the artwork in pixels.
        area: Target print area.
        fill: Fraction of the print area to occupy.
        allow_upscale: If False, never scale above native size before applying fill.

    Returns:
        Positive scale factor.

    Raises:
        ValueError: If the image size is not positive.
    """
    _check_size(image_size)
    width, height = image_size
    scale = min(area.width / width, area.height / height)
    if not allow_upscale:
        scale = min(scale, 1.0)
    return scale * fill


def centered_position(image_size: ImageSize, scale: float, area: PrintArea) -> tuple[float, float]:
    """
    Calculate the top-left position that centers a scaled image in a print area.

    Returns:
        Tuple of (x, y) in canvas pixels.
    """
    width, height = image_size
    x = area.x + (area.width - width * scale) / 2
    y = area.y + (area.height - height * scale) / 2
    return (x, y)


def default_transform(
    image_size: ImageSize, area: PrintArea, fill: float = 0.8, rotation: float = 0.0
) -> ArtworkTransform:
    """
    Compute the initial centered placement for an artwork.

    The artwork is never upscaled beyond its native size before the fill factor.

    Args:
        image_size: (width, height) of the artwork in pixels.
        area: Print area of the location.
        fill: Fraction of the print area to occupy (default: 0.8).
        rotation: Rotation to keep, in degrees.

    Returns:
        Centered ArtworkTransform.
    """
    scale = fit_scale(image_size, area, fill, allow_upscale=False)
    x, y = centered_position(image_size, scale, area)
    return ArtworkTransform(x=x, y=y, scale=scale, rotation=normalize_rotation(rotation))


def fit_transform(image_size: ImageSize, area: PrintArea, fill: float = 0.95) -> ArtworkTransform:
    """
    Compute a placement that fills the print area (upscaling allowed), unrotated.

    Args:
        image_size: (width, height) of the artwork in pixels.
        area: Print area of the location.
        fill: Fraction of the print area to occupy (default: 0.95).

    Returns:
        Centered ArtworkTransform with rotation 0.
    """
    scale = fit_scale(image_size, area, fill, allow_upscale=True)
    x, y = centered_position(image_size, scale, area)
    return ArtworkTransform(x=x, y=y, scale=scale, rotation=0.0)


def recenter_for_new_crop(
    old_transform: ArtworkTransform,
    old_size: ImageSize,
    new_size: ImageSize,
    area: PrintArea,
    fill: float = 0.8,
) -> ArtworkTransform:
    """
    Re-derive a placement after an artwork is cropped, keeping its visual center.

    Args:
        old_transform: Transform that was valid for the uncropped image.
        old_size: (width, height) of the uncropped image.
        new_size: (width, height) of the cropped image.
        area: Print area of the location.
        fill: Fraction of the print area the cropped artwork should occupy.

    Returns:
        ArtworkTransform for the cropped image with the same visual center and rotation.
    """
    _check_size(old_size)
    center_x = old_transform.x + old_size[0] * old_transform.scale / 2
    center_y = old_transform.y + old_size[1] * old_transform.scale / 2

    scale = fit_scale(new_size, area, fill, allow_upscale=False)
    return ArtworkTransform(
        x=center_x - new_size[0] * scale / 2,
        y=center_y - new_size[1] * scale / 2,
        scale=scale,
        rotation=old_transform.rotation,
    )


def rendered_size(image_size: ImageSize, transform: ArtworkTransform, flip: Flip = Flip()) -> tuple[float, float]:
    """Get the on-canvas (width, height) of an artwork in pixels, ignoring rotation."""
    width, height = image_size
    return (
        width * transform.scale * abs(flip.x),
        height * transform.scale * abs(flip.y),
    )


def physical_size(
    image_size: ImageSize,
    transform: ArtworkTransform,
    location: PrintLocation,
    flip: Flip = Flip(),
) -> PhysicalSize:
    """
    Calculate the printed size of a placed artwork in inches.

    Args:
        image_size: (width, height) of the artwork in pixels.
        transform: Current placement.
        location: Print location whose pixel density applies.
        flip: Current flip factors.

    Returns:
        PhysicalSize in inches.
    """
    width_px, height_px = rendered_size(image_size, transform, flip)
    return pixels_to_inches(width_px, height_px, location)


def is_oversize(
    image_size: ImageSize,
    transform: ArtworkTransform,
    location: PrintLocation,
    flip: Flip = Flip(),
) -> bool:
    """Check whether a placed artwork exceeds the location's maximum print size."""
    return exceeds_max(physical_size(image_size, transform, location, flip), location)


def position_descriptor(transform: ArtworkTransform, location: PrintLocation, tolerance: float = 10) -> str:
    """
    Describe where a placement sits relative to the print-area center.

    Args:
        transform: Current placement.
        location: Print location.
        tolerance: Pixel distance still counted as centered.

    Returns:
        "Centered", "Top", "Bottom", "Left", "Right" or a combination such as "Top-Left".
    """
    center_x, center_y = get_print_area(location).center

    if abs(transform.x - center_x) < tolerance and abs(transform.y - center_y) < tolerance:
        return "Centered"

    position = ""
    if transform.y < center_y - tolerance:
        position = "Top"
    elif transform.y > center_y + tolerance:
        position = "Bottom"

    if transform.x < center_x - tolerance:
        position = f"{position}-Left" if position else "Left"
    elif transform.x > center_x + tolerance:
        position = f"{position}-Right" if position else "Right"

    return position or "Centered"
