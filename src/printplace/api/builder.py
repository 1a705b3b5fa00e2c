"""High-level API for programmatic placement."""

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path

from PIL import Image

from printplace.api.models import ArtworkSource, ArtworkTransform
from printplace.api.vectorizer import VectorizerClient
from printplace.config import Config, PlacementSettings
from printplace.editor.session import PlacementSession
from printplace.editor.snapshot import CanvasSnapshot
from printplace.imaging.bounds import ContentBounds
from printplace.types import PrintLocation
from printplace.utils.dimensions import MaxPrintDimensions, PhysicalSize, get_max_dimensions

logger = logging.getLogger(__name__)


@dataclass
class PlacementReport:
    """Summary of a placed artwork."""

    location: PrintLocation
    image_size: tuple[int, int]
    original_size: tuple[int, int]
    bounds: ContentBounds | None
    transform: ArtworkTransform
    size: PhysicalSize
    max_size: MaxPrintDimensions
    oversize: bool
    position: str


def create_session(config: Config | None = None, location: PrintLocation = "front") -> PlacementSession:
    """
    Create a placement session wired to the configured vectorizer.

    Args:
        config: Configuration (from load_config()). If None, defaults are used
            and vectorization is unavailable.
        location: Initially active print location.

    Returns:
        PlacementSession ready for load_artwork().

    Example:
        ```python
        from printplace import ArtworkSource, create_session, load_config

        session = create_session(load_config())
        source = ArtworkSource.from_upload(data, "logo.png", artwork_id="abc123")
        transform = asyncio.run(session.load_artwork(source))
        ```
    """
    config = config or Config()

    if config.vectorizer is None:
        return PlacementSession(settings=config.placement, location=location)

    client = VectorizerClient(config.vectorizer)
    return PlacementSession(
        settings=config.placement,
        fetch=client.fetch_bytes_async,
        vectorize=client.vectorize_async,
        location=location,
    )


def load_source_file(path: Path) -> ArtworkSource:
    """
    Read a local artwork file as an upload source.

    Raises:
        FileNotFoundError: If the file doesn't exist.
    """
    if not path.exists():
        raise FileNotFoundError(f"Artwork file not found: {path}")
    return ArtworkSource.from_upload(path.read_bytes(), path.name)


def place_artwork(
    path: Path,
    location: PrintLocation = "front",
    settings: PlacementSettings | None = None,
    scale: float | None = None,
) -> tuple[PlacementSession, PlacementReport]:
    """
    Load a local artwork file and compute its default placement.

    Args:
        path: Artwork file (PNG, JPEG, SVG, ...).
        location: Print location.
        settings: Placement policy overrides.
        scale: Optional scale to apply after the default placement (kept centered).

    Returns:
        Tuple of (session, report).

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the file cannot be decoded.
    """
    source = load_source_file(path)
    session = PlacementSession(settings=settings, location=location)

    errors: list[Exception] = []
    session.add_error_listener(lambda _location, error: errors.append(error))

    transform = asyncio.run(session.load_artwork(source, location))
    if transform is None:
        reason = errors[0] if errors else "unknown error"
        raise ValueError(f"Could not load artwork '{path.name}': {reason}")

    machine = session.machine(location)
    if scale is not None:
        artwork = machine.image
        center_x = transform.x + artwork.width * transform.scale / 2
        center_y = transform.y + artwork.height * transform.scale / 2
        machine.set_transform(
            transform.with_changes(
                x=center_x - artwork.width * scale / 2,
                y=center_y - artwork.height * scale / 2,
                scale=scale,
            )
        )

    context = session.context(location)
    report = PlacementReport(
        location=location,
        image_size=machine.image.size,
        original_size=context.original_size,
        bounds=context.content_bounds,
        transform=machine.transform,
        size=machine.current_dimensions(),
        max_size=get_max_dimensions(location),
        oversize=machine.is_oversize(),
        position=machine.position_descriptor() or "",
    )
    logger.info(f"Placed '{path.name}' on {location}: {report.size.format()}")
    return session, report


def render_preview(
    session: PlacementSession,
    output_path: Path,
    backdrop: Image.Image | None = None,
    location: PrintLocation | None = None,
) -> Path:
    """
    Render the placement canvas of a location to a PNG file.

    Args:
        session: Session holding a placed artwork.
        output_path: Destination PNG path.
        backdrop: Optional garment backdrop.
        location: Location to render (default: active location).

    Returns:
        The output path.
    """
    snapshot = CanvasSnapshot(session.machine(location))
    snapshot.set_backdrop(backdrop)
    frame = snapshot.render_frame()
    frame.convert("RGB").save(output_path, format="PNG")
    logger.info(f"Preview saved to: {output_path}")
    return output_path
