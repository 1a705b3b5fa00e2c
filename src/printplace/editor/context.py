"""Per-(artwork, print location) editing context."""

from dataclasses import dataclass, field
from typing import get_args

from printplace.api.models import ArtworkImage, ArtworkSource, ArtworkTransform
from printplace.config import PlacementSettings
from printplace.editor.history import HistoryManager
from printplace.imaging.bounds import ContentBounds
from printplace.types import ArtworkView, PrintLocation, VectorizationStatus
from printplace.utils.dimensions import PrintArea, get_print_area


@dataclass
class EditingContext:
    """
    Everything owned by one artwork slot on one print location.

    The token identifies the current artwork; async results carrying an
    older token are stale and must be dropped.
    """

    location: PrintLocation
    settings: PlacementSettings = field(default_factory=PlacementSettings)
    token: int = 0
    source: ArtworkSource | None = None
    original_image: ArtworkImage | None = None
    original_size: tuple[int, int] | None = None  # before cropping
    vectorized_image: ArtworkImage | None = None
    content_bounds: ContentBounds | None = None
    vectorized_bounds: ContentBounds | None = None
    vectorization_status: VectorizationStatus = "not_needed"
    transform_cache: dict[ArtworkView, ArtworkTransform] = field(default_factory=dict)
    histories: dict[ArtworkView, HistoryManager] = field(init=False)

    def __post_init__(self) -> None:
        # One history per view; a transform is only valid for the image it was made against
        self.histories = {
            view: HistoryManager(max_history=self.settings.history_limit)
            for view in get_args(ArtworkView)
        }

    @property
    def print_area(self) -> PrintArea:
        return get_print_area(self.location)

    @property
    def has_artwork(self) -> bool:
        return self.original_image is not None

    def image_for(self, view: ArtworkView) -> ArtworkImage | None:
        """Get the image displayed for a view, if it has been produced."""
        return self.original_image if view == "original" else self.vectorized_image

    def history_for(self, view: ArtworkView) -> HistoryManager:
        """Get the undo history of a view."""
        return self.histories[view]

    def is_current(self, token: int) -> bool:
        """Check whether a token captured at dispatch time still identifies this artwork."""
        return token == self.token

    def reset(self, token: int, source: ArtworkSource | None = None) -> None:
        """
        Start a new artwork identity, discarding images, bounds, cached transforms and histories.

        Args:
            token: Newly assigned identity token.
            source: The artwork now occupying the slot (None when removed).
        """
        self.token = token
        self.source = source
        self.original_image = None
        self.original_size = None
        self.vectorized_image = None
        self.content_bounds = None
        self.vectorized_bounds = None
        self.vectorization_status = source.vectorization_status if source else "not_needed"
        self.transform_cache.clear()
        for history in self.histories.values():
            history.clear()
