"""Utility modules."""

from printplace.utils.dimensions import (
    CANVAS_HEIGHT,
    CANVAS_WIDTH,
    MAX_PRINT_DIMENSIONS,
    PRINT_AREAS,
    MaxPrintDimensions,
    PhysicalSize,
    PixelsPerInch,
    PrintArea,
    get_max_dimensions,
    get_print_area,
    parse_location,
    pixels_per_inch,
)

__all__ = [
    "CANVAS_HEIGHT",
    "CANVAS_WIDTH",
    "MAX_PRINT_DIMENSIONS",
    "PRINT_AREAS",
    "MaxPrintDimensions",
    "PhysicalSize",
    "PixelsPerInch",
    "PrintArea",
    "get_max_dimensions",
    "get_print_area",
    "parse_location",
    "pixels_per_inch",
]
