"""Canvas snapshot for order previews."""

import logging

from PIL import Image

from printplace.api.models import ArtworkImage
from printplace.editor.state import TransformStateMachine
from printplace.imaging.compose import render_canvas
from printplace.imaging.image import image_to_data_url

logger = logging.getLogger(__name__)


class CanvasSnapshot:
    """
    Captures the rendered editor canvas as a PNG data URL.

    Capture becomes available only once the backdrop and the current artwork
    have each been rendered for at least one frame after loading, so a
    stale or blank canvas is never returned.
    """

    def __init__(self, machine: TransformStateMachine) -> None:
        self.machine = machine
        self.backdrop: Image.Image | None = None
        self.show_guides = True
        self._backdrop_frames = 0
        self._artwork_frames = 0
        self._rendered_artwork: ArtworkImage | None = None
        machine.add_image_listener(self._on_image_change)

    def _on_image_change(self, artwork: ArtworkImage) -> None:
        self._rendered_artwork = artwork
        self._artwork_frames = 0

    def set_backdrop(self, backdrop: Image.Image | None) -> None:
        """Replace the backdrop (e.g. garment color change); restarts its frame count."""
        self.backdrop = backdrop
        self._backdrop_frames = 0

    def render_frame(self) -> Image.Image:
        """
        Render one frame of the canvas and advance the readiness counters.

        Returns:
            The rendered RGBA canvas.
        """
        machine = self.machine
        if machine.image is not self._rendered_artwork:
            self._on_image_change(machine.image)

        frame = render_canvas(
            machine.context.print_area,
            backdrop=self.backdrop,
            artwork=machine.image.image if machine.image is not None else None,
            transform=machine.transform,
            flip=machine.flip,
            show_guides=self.show_guides,
        )

        if self.backdrop is not None:
            self._backdrop_frames += 1
        if machine.image is not None and machine.transform is not None:
            self._artwork_frames += 1
        return frame

    @property
    def ready(self) -> bool:
        """Check whether both backdrop and artwork have rendered at least one frame."""
        return (
            self.backdrop is not None
            and self.machine.image is self._rendered_artwork
            and self._backdrop_frames >= 1
            and self._artwork_frames >= 1
        )

    def capture(self) -> str | None:
        """
        Capture the canvas without the non-printable guides.

        Returns:
            PNG data URL, or None if the canvas is not ready yet.
        """
        if not self.ready:
            return None

        # Guides are hidden for this render only; the interactive frame keeps them
        machine = self.machine
        frame = render_canvas(
            machine.context.print_area,
            backdrop=self.backdrop,
            artwork=machine.image.image,
            transform=machine.transform,
            flip=machine.flip,
            show_guides=False,
        )

        return image_to_data_url(frame)
