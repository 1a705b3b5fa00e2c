"""Data models, storefront collaborators and the high-level API."""

from printplace.api.models import (
    ArtworkImage,
    ArtworkRecord,
    ArtworkSource,
    ArtworkTransform,
    Flip,
    Garment,
    HistoryEntry,
    VectorizationResult,
)
from printplace.api.vectorizer import VectorizerClient
from printplace.api.builder import create_session, place_artwork, render_preview

__all__ = [
    "ArtworkImage",
    "ArtworkRecord",
    "ArtworkSource",
    "ArtworkTransform",
    "Flip",
    "Garment",
    "HistoryEntry",
    "VectorizationResult",
    "VectorizerClient",
    "create_session",
    "place_artwork",
    "render_preview",
]
