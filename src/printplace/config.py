"""Configuration loading and validation."""

import tomllib
from pathlib import Path

from pydantic import BaseModel, Field


class VectorizerConfig(BaseModel):
    """Storefront vectorization endpoint configuration."""

    url: str
    api_key: str | None = None
    timeout: float = 120.0


class PlacementSettings(BaseModel):
    """
    Tunable policy constants for placement, detection and history.

    All parameters have sensible defaults. Override only what you need using
    Pydantic's model_copy():

        base = PlacementSettings()
        roomy = base.model_copy(update={"padding_ratio": 0.05})
    """

    # ========================================================================
    # Placement
    # ========================================================================
    initial_fill: float = Field(0.8, gt=0, le=1)
    """Fraction of the print area a freshly placed artwork fills."""

    fit_fill: float = Field(0.95, gt=0, le=1)
    """Fraction of the print area used by fit-to-print-area (leaves a small margin)."""

    min_box_size: float = 20
    """Minimum on-canvas width and height in pixels accepted by handle resizes."""

    nudge_small: float = 1
    """Keyboard nudge step in canvas pixels."""

    nudge_large: float = 10
    """Keyboard nudge step in canvas pixels while the modifier is held."""

    rotate_step: float = 90
    """Toolbar rotation step in degrees."""

    center_tolerance: float = 10
    """Pixel tolerance used when describing a position as centered."""

    # ========================================================================
    # History
    # ========================================================================
    history_limit: int = Field(20, ge=1)
    """Maximum number of retained history entries (oldest are dropped)."""

    # ========================================================================
    # Content bounds detection
    # ========================================================================
    working_max_dimension: int = Field(500, ge=1)
    """Longest side of the downscaled working canvas used for the pixel scan."""

    alpha_threshold: int = 10
    """Pixels with alpha below this are treated as transparent background."""

    white_threshold: int = 240
    """Pixels with all RGB channels above this are treated as white background."""

    padding_ratio: float = Field(0.02, ge=0)
    """Padding added on each side, as a fraction of the working canvas dimension."""

    significant_crop_ratio: float = Field(0.9, gt=0, le=1)
    """A crop is applied only when its area is below this fraction of the original."""

    # ========================================================================
    # Vector rendering
    # ========================================================================
    vector_render_cap: int = Field(2000, ge=1)
    """Maximum dimension in pixels for full-resolution vector renders."""

    vector_proxy_ratio: float = 2.0
    """Re-render when the viewBox exceeds the decoded bitmap by more than this factor."""


class Config(BaseModel):
    """Root configuration."""

    vectorizer: VectorizerConfig | None = None
    placement: PlacementSettings = Field(default_factory=PlacementSettings)


def load_config(config_path: Path | None = None) -> Config:
    """
    Load configuration from TOML file.

    Args:
        config_path: Path to config file. If None, looks for config.toml in current directory.

    Returns:
        Validated Config object.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config is invalid.
    """
    if config_path is None:
        config_path = Path.cwd() / "config.toml"

    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}\n"
            "Copy config.toml.example to config.toml and adjust it."
        )

    with open(config_path, "rb") as f:
        try:
            config_dict = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML in {config_path}: {e}") from e

    return Config(**config_dict)
