"""Print locations, print areas and physical unit conversion."""

from dataclasses import dataclass as _dataclass
from typing import get_args

from printplace.types import PrintLocation


@_dataclass(frozen=True)
class PrintArea:
    """Print-area rectangle in canvas pixels."""

    x: float
    y: float
    width: float
    height: float

    @property
    def center(self) -> tuple[float, float]:
        """Get the (x, y) center of the print area."""
        return (self.x + self.width / 2, self.y + self.height / 2)


@_dataclass(frozen=True)
class MaxPrintDimensions:
    """Maximum printable size in inches."""

    width: float   # inches
    height: float  # inches


@_dataclass(frozen=True)
class PixelsPerInch:
    """Per-axis canvas pixel density of a print area."""

    x: float
    y: float


@_dataclass(frozen=True)
class PhysicalSize:
    """Physical footprint of a placed design in inches."""

    width: float   # inches
    height: float  # inches

    def format(self) -> str:
        """
        Format as a human readable size.

        Returns:
            String such as '11.0" × 17.0"'.
        """
        return f'{self.width:.1f}" × {self.height:.1f}"'


# Editor canvas (sized to show a 22" × 30" shirt proportionally)
CANVAS_WIDTH = 500
CANVAS_HEIGHT = 550

# Shirt backdrop positioning (centered with padding)
SHIRT_PADDING = 28
SHIRT_WIDTH = CANVAS_WIDTH - (SHIRT_PADDING * 2)
SHIRT_HEIGHT = CANVAS_HEIGHT - (SHIRT_PADDING * 2)

PRINT_LOCATIONS: tuple[str, ...] = get_args(PrintLocation)

# Registry of print areas (canvas pixels, scaled to the shirt body)
PRINT_AREAS: dict[str, PrintArea] = {
    "front": PrintArea(x=167.5, y=135, width=165, height=255),
    "back": PrintArea(x=167.5, y=130, width=165, height=255),
    "left_chest": PrintArea(x=290, y=165, width=60, height=60),
    "right_chest": PrintArea(x=150, y=165, width=60, height=60),
    "full_back": PrintArea(x=152.5, y=125, width=195, height=285),
}

# Maximum print dimensions (inches)
MAX_PRINT_DIMENSIONS: dict[str, MaxPrintDimensions] = {
    "front": MaxPrintDimensions(11, 17),
    "back": MaxPrintDimensions(11, 17),
    "left_chest": MaxPrintDimensions(4, 4),
    "right_chest": MaxPrintDimensions(4, 4),
    "full_back": MaxPrintDimensions(13, 19),
}

LOCATION_LABELS: dict[str, str] = {
    "front": "Front",
    "back": "Back",
    "left_chest": "Left Chest",
    "right_chest": "Right Chest",
    "full_back": "Full Back",
}

BACK_LOCATIONS = frozenset({"back", "full_back"})


def parse_location(name: str) -> PrintLocation:
    """
    Normalize a print location name.

    Accepts "left-chest", "Left Chest" and "left_chest" spellings.

    Args:
        name: Location name.

    Returns:
        Canonical PrintLocation.

    Raises:
        ValueError: If the name is not a known print location.
    """
    normalized = name.strip().lower().replace("-", "_").replace(" ", "_")
    if normalized not in PRINT_AREAS:
        raise ValueError(
            f"Unknown print location: {name}. "
            f"Expected one of: {', '.join(PRINT_LOCATIONS)}"
        )
    return normalized  # type: ignore[return-value]


def get_print_area(location: PrintLocation) -> PrintArea:
    """Get the print-area rectangle for a location."""
    return PRINT_AREAS[location]


def get_max_dimensions(location: PrintLocation) -> MaxPrintDimensions:
    """Get the maximum printable size for a location."""
    return MAX_PRINT_DIMENSIONS[location]


def get_location_label(location: PrintLocation) -> str:
    """Get the display label for a location."""
    return LOCATION_LABELS[location]


def pixels_per_inch(location: PrintLocation) -> PixelsPerInch:
    """
    Calculate canvas pixels per inch for a print location.

    Args:
        location: Print location.

    Returns:
        PixelsPerInch with independent x and y densities.
    """
    area = PRINT_AREAS[location]
    max_dims = MAX_PRINT_DIMENSIONS[location]
    return PixelsPerInch(
        x=area.width / max_dims.width,
        y=area.height / max_dims.height,
    )


def pixels_to_inches(width_px: float, height_px: float, location: PrintLocation) -> PhysicalSize:
    """
    Convert a canvas pixel footprint to inches for a location.

    Args:
        width_px: Rendered width in canvas pixels.
        height_px: Rendered height in canvas pixels.
        location: Print location whose density applies.

    Returns:
        PhysicalSize in inches.
    """
    ppi = pixels_per_inch(location)
    return PhysicalSize(width=width_px / ppi.x, height=height_px / ppi.y)


def exceeds_max(size: PhysicalSize, location: PrintLocation) -> bool:
    """Check whether a physical size exceeds the location's maximum in either axis."""
    max_dims = MAX_PRINT_DIMENSIONS[location]
    return size.width > max_dims.width or size.height > max_dims.height
