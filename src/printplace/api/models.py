"""Data models for artwork, transforms, and collaborator payloads."""

import math
import time
from dataclasses import dataclass, field, replace
from typing import Any

from PIL import Image

from printplace.types import ArtworkView, ImageSize, VectorizationStatus


@dataclass(frozen=True)
class ArtworkTransform:
    """
    Placement of an artwork inside the editor canvas.

    x/y is the top-left of the unscaled image origin in canvas pixels, scale is a
    uniform multiplier on the image's native pixel size and rotation is in degrees.
    """

    x: float
    y: float
    scale: float
    rotation: float = 0.0

    def __post_init__(self) -> None:
        if not math.isfinite(self.scale) or self.scale <= 0:
            raise ValueError(f"Transform scale must be positive, got {self.scale}")

    def with_changes(self, **changes: float) -> "ArtworkTransform":
        """
        Return a copy with the given fields replaced.

        Args:
            **changes: Field values to replace (x, y, scale, rotation).

        Returns:
            New ArtworkTransform.
        """
        return replace(self, **changes)

    def to_dict(self) -> dict[str, float]:
        """Serialize to the persisted {x, y, scale, rotation} shape (flip excluded)."""
        return {"x": self.x, "y": self.y, "scale": self.scale, "rotation": self.rotation}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ArtworkTransform":
        """
        Build a transform from its persisted shape.

        Raises:
            ValueError: If a field is missing or the scale is not positive.
        """
        try:
            return cls(
                x=float(data["x"]),
                y=float(data["y"]),
                scale=float(data["scale"]),
                rotation=float(data.get("rotation", 0.0)),
            )
        except KeyError as e:
            raise ValueError(f"Transform is missing field {e}") from e


@dataclass(frozen=True)
class Flip:
    """Independent horizontal/vertical flip as signed unit factors."""

    x: int = 1
    y: int = 1

    def __post_init__(self) -> None:
        if self.x not in (1, -1) or self.y not in (1, -1):
            raise ValueError(f"Flip factors must be 1 or -1, got ({self.x}, {self.y})")

    def toggled_x(self) -> "Flip":
        return Flip(x=-self.x, y=self.y)

    def toggled_y(self) -> "Flip":
        return Flip(x=self.x, y=-self.y)


@dataclass
class ArtworkImage:
    """A decoded bitmap tagged with its provenance and crop state."""

    image: Image.Image
    view: ArtworkView = "original"
    cropped: bool = False

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def size(self) -> ImageSize:
        """Get (width, height) in pixels."""
        return (self.image.width, self.image.height)


@dataclass(frozen=True)
class HistoryEntry:
    """One committed transform in the undo history."""

    transform: ArtworkTransform
    timestamp: float = field(default_factory=time.time)


@dataclass(frozen=True)
class VectorizationResult:
    """Result reported by the vectorization service."""

    status: VectorizationStatus
    vectorized_url: str | None = None
    error: str | None = None

    @property
    def completed(self) -> bool:
        """Check whether a usable vectorized file is available."""
        return self.status == "completed" and bool(self.vectorized_url)


@dataclass
class ArtworkRecord:
    """Persisted artwork file record for one print location."""

    id: str
    file_url: str
    file_name: str
    file_size: int  # bytes
    is_vector: bool = False
    vectorization_status: VectorizationStatus = "not_needed"
    vectorized_file_url: str | None = None
    transform: ArtworkTransform | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ArtworkRecord":
        """
        Build a record from the storefront's JSON shape.

        Args:
            data: Dictionary with file_url, file_name, etc.

        Returns:
            ArtworkRecord.
        """
        transform = data.get("transform")
        return cls(
            id=str(data["id"]),
            file_url=data["file_url"],
            file_name=data.get("file_name", ""),
            file_size=int(data.get("file_size", 0)),
            is_vector=bool(data.get("is_vector", False)),
            vectorization_status=data.get("vectorization_status", "not_needed"),
            vectorized_file_url=data.get("vectorized_file_url"),
            transform=ArtworkTransform.from_dict(transform) if transform else None,
        )

    def format_file_size(self) -> str:
        """Format file size in megabytes (e.g. "1.25 MB")."""
        return f"{self.file_size / 1024 / 1024:.2f} MB"


@dataclass
class ArtworkSource:
    """
    An artwork entering the editor.

    Either a fresh in-memory upload (data is set) or a persisted record
    (url is set and bytes must be fetched).
    """

    file_name: str
    data: bytes | None = None
    url: str | None = None
    artwork_id: str | None = None
    is_vector: bool = False
    vectorization_status: VectorizationStatus = "not_needed"
    vectorized_url: str | None = None
    transform: ArtworkTransform | None = None

    @classmethod
    def from_upload(cls, data: bytes, file_name: str, artwork_id: str | None = None) -> "ArtworkSource":
        """Create a source from uploaded file bytes."""
        return cls(
            file_name=file_name,
            data=data,
            artwork_id=artwork_id,
            is_vector=is_svg(file_name, data),
        )

    @classmethod
    def from_record(cls, record: ArtworkRecord) -> "ArtworkSource":
        """Create a source from a persisted artwork record."""
        return cls(
            file_name=record.file_name,
            url=record.file_url,
            artwork_id=record.id,
            is_vector=record.is_vector or is_svg(record.file_url),
            vectorization_status=record.vectorization_status,
            vectorized_url=record.vectorized_file_url,
            transform=record.transform,
        )

    @property
    def needs_fetch(self) -> bool:
        """Check whether bytes must be downloaded before decoding."""
        return self.data is None


@dataclass
class Garment:
    """Garment catalog entry with per-color backdrop images."""

    id: str
    name: str
    available_colors: list[str] = field(default_factory=list)
    color_images: dict[str, str] = field(default_factory=dict)
    color_back_images: dict[str, str] = field(default_factory=dict)


def is_svg(name_or_url: str | None, data: bytes | None = None) -> bool:
    """
    Check whether a file name, URL or payload is an SVG document.

    Args:
        name_or_url: File name or URL (query strings are ignored).
        data: Optional raw bytes to sniff.

    Returns:
        True if the source is vector markup.
    """
    if name_or_url:
        path = name_or_url.split("?", 1)[0].split("#", 1)[0].lower()
        if path.endswith(".svg") or path.startswith("data:image/svg+xml"):
            return True
    if data:
        head = data[:512].lstrip().lower()
        return head.startswith(b"<svg") or (head.startswith(b"<?xml") and b"<svg" in data[:2048].lower())
    return False
