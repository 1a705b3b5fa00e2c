"""Type aliases used across the printplace package."""

from typing import Literal, Tuple, Union

# Print locations on the garment
PrintLocation = Literal["front", "back", "left_chest", "right_chest", "full_back"]

# Parallel representations of one logical artwork
ArtworkView = Literal["original", "vectorized"]

# Vectorization lifecycle reported by the storefront
VectorizationStatus = Literal["not_needed", "pending", "processing", "completed", "failed"]

# Editing phase of a placement context
EditPhase = Literal["empty", "loaded", "edited"]

# Nudge directions for keyboard placement
NudgeDirection = Literal["left", "right", "up", "down"]

# Measurements
Pixel = float  # canvas pixels (may be fractional)
Inch = float
Dimension = Union[Pixel, Inch]

# Image size as (width, height) in pixels
ImageSize = Tuple[int, int]
