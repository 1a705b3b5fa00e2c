"""Artwork placement and transform engine for custom-printed garments."""

__version__ = "0.1.0"

# High-level Python API
from printplace.api import (
    ArtworkRecord,
    ArtworkSource,
    ArtworkTransform,
    VectorizerClient,
    create_session,
    place_artwork,
    render_preview,
)
from printplace.config import PlacementSettings, load_config
from printplace.editor import HistoryManager, InteractionSurface, PlacementSession, TransformStateMachine
from printplace.imaging import ContentBounds, detect_content_bounds, prepare_artwork

__all__ = [
    "ArtworkRecord",
    "ArtworkSource",
    "ArtworkTransform",
    "ContentBounds",
    "HistoryManager",
    "InteractionSurface",
    "PlacementSession",
    "PlacementSettings",
    "TransformStateMachine",
    "VectorizerClient",
    "create_session",
    "detect_content_bounds",
    "load_config",
    "place_artwork",
    "prepare_artwork",
    "render_preview",
]
