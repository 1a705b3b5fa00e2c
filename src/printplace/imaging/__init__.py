"""Pixel analysis and image processing modules."""

from printplace.imaging.bounds import ContentBounds, detect_content_bounds, is_significant_crop
from printplace.imaging.cropper import PreparedArtwork, crop_to_bounds, prepare_artwork

__all__ = [
    "ContentBounds",
    "PreparedArtwork",
    "crop_to_bounds",
    "detect_content_bounds",
    "is_significant_crop",
    "prepare_artwork",
]
