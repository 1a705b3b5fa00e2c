"""Full-resolution rendering of SVG artwork using svglib and ReportLab."""

import logging
import re
from io import BytesIO

import numpy as np
from PIL import Image
from reportlab.graphics import renderPM
from reportlab.graphics.utils import RenderPMError
from svglib.svglib import svg2rlg

logger = logging.getLogger(__name__)

_NUMBER = r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?"
VIEWBOX_PATTERN = re.compile(
    rf"\bviewBox\s*=\s*[\"']\s*({_NUMBER})[\s,]+({_NUMBER})[\s,]+({_NUMBER})[\s,]+({_NUMBER})\s*[\"']"
)
SVG_TAG_PATTERN = re.compile(r"<svg\b[^>]*>", re.IGNORECASE | re.DOTALL)
SIZE_ATTR_PATTERN = re.compile(r"\s(?:width|height)\s*=\s*(?:\"[^\"]*\"|'[^']*')")

# rl_renderPM extension; reportlab 4 defaults to rlPyCairo which needs system cairo
RENDER_BACKEND = "_renderPM"


def _as_text(markup: str | bytes) -> str:
    if isinstance(markup, bytes):
        return markup.decode("utf-8", errors="replace")
    return markup


def get_viewbox_dimensions(markup: str | bytes) -> tuple[float, float] | None:
    """
    Read the declared viewBox width and height of an SVG document.

    Args:
        markup: SVG document text or bytes.

    Returns:
        (width, height) of the root viewBox, or None if absent or degenerate.
    """
    text = _as_text(markup)
    svg_tag = SVG_TAG_PATTERN.search(text)
    if not svg_tag:
        return None

    match = VIEWBOX_PATTERN.search(svg_tag.group(0))
    if not match:
        return None

    width, height = float(match.group(3)), float(match.group(4))
    if width <= 0 or height <= 0:
        return None
    return (width, height)


def needs_full_resolution(
    viewbox: tuple[float, float] | None,
    decoded_size: tuple[int, int],
    proxy_ratio: float = 2.0,
) -> bool:
    """
    Check whether a decoded bitmap is a low-fidelity proxy of its vector source.

    Args:
        viewbox: Declared viewBox (width, height), or None.
        decoded_size: Size of the bitmap currently decoded from the document.
        proxy_ratio: How many times larger the viewBox must be in either axis.

    Returns:
        True if the document should be re-rendered before cropping.
    """
    if viewbox is None:
        return False
    vb_width, vb_height = viewbox
    width, height = decoded_size
    return vb_width > proxy_ratio * width or vb_height > proxy_ratio * height


def full_resolution_scale(viewbox: tuple[float, float], max_dimension: int = 2000) -> float:
    """Scale applied to the viewBox so the render's longest side stays within max_dimension."""
    return min(1.0, max_dimension / max(viewbox))


def inject_dimensions(markup: str | bytes, width: int, height: int) -> str:
    """
    Set explicit width/height attributes on the root <svg> element.

    Existing width/height attributes on the root element are replaced; the
    viewBox is kept so the content scales to the new size.

    Args:
        markup: SVG document text or bytes.
        width: Target width in pixels.
        height: Target height in pixels.

    Returns:
        Modified SVG markup.

    Raises:
        ValueError: If the document has no <svg> element.
    """
    text = _as_text(markup)
    svg_tag = SVG_TAG_PATTERN.search(text)
    if not svg_tag:
        raise ValueError("Markup has no <svg> element")

    tag = SIZE_ATTR_PATTERN.sub("", svg_tag.group(0))
    closing = "/>" if tag.endswith("/>") else ">"
    tag = tag[: -len(closing)].rstrip()
    tag = f'{tag} width="{width}" height="{height}"{closing}'

    return text[: svg_tag.start()] + tag + text[svg_tag.end():]


def _draw(drawing, bg: int) -> np.ndarray:
    image = renderPM.drawToPIL(drawing, dpi=72, bg=bg, backend=RENDER_BACKEND)
    return np.asarray(image.convert("RGB"), dtype=np.float32)


def _matte(on_white: np.ndarray, on_black: np.ndarray) -> Image.Image:
    """
    Recover an RGBA image from the same drawing rendered on white and on black.

    A pixel with coverage a renders as a*c + (1-a)*bg, so the white/black
    difference is (1-a)*255 and the black render is the premultiplied color.
    """
    alpha = np.clip(255.0 - (on_white - on_black).mean(axis=2), 0.0, 255.0)
    coverage = alpha[..., np.newaxis]
    rgb = np.divide(on_black * 255.0, coverage, out=np.zeros_like(on_black), where=coverage > 0)
    rgba = np.dstack([np.clip(rgb, 0.0, 255.0), alpha])
    return Image.fromarray(np.rint(rgba).astype(np.uint8))


def render_svg(markup: str | bytes, size: tuple[int, int] | None = None) -> Image.Image:
    """
    Rasterize an SVG document onto a transparent background.

    The renderer only paints onto an opaque background, so the drawing is
    rendered twice (white and black backgrounds) and alpha is recovered
    from the difference.

    Args:
        markup: SVG document text or bytes.
        size: Optional (width, height) to render at. If None, the document's
            own width/height (or viewBox) is used.

    Returns:
        RGBA PIL Image; uncovered pixels have alpha 0.

    Raises:
        ValueError: If the document cannot be parsed or rendered.
    """
    text = _as_text(markup)
    if size is not None:
        text = inject_dimensions(text, *size)

    drawing = svg2rlg(BytesIO(text.encode("utf-8")))
    if drawing is None:
        raise ValueError("Could not parse SVG markup")

    # 72 DPI keeps one drawing unit per output pixel
    try:
        on_white = _draw(drawing, 0xFFFFFF)
        on_black = _draw(drawing, 0x000000)
    except RenderPMError as e:
        raise ValueError(f"Could not render SVG: {e}") from e

    return _matte(on_white, on_black)


def render_full_resolution(markup: str | bytes, max_dimension: int = 2000) -> Image.Image:
    """
    Re-render a vector document at (up to) its native viewBox resolution.

    Args:
        markup: SVG document text or bytes.
        max_dimension: Cap for the longest side of the render in pixels.

    Returns:
        RGBA PIL Image.

    Raises:
        ValueError: If the document has no usable viewBox or cannot be parsed.
    """
    viewbox = get_viewbox_dimensions(markup)
    if viewbox is None:
        raise ValueError("SVG has no viewBox; cannot determine native resolution")

    scale = full_resolution_scale(viewbox, max_dimension)
    width = max(1, round(viewbox[0] * scale))
    height = max(1, round(viewbox[1] * scale))

    logger.info(f"Rendering vector artwork at full resolution: {width}x{height} (scale {scale:.3f})")
    return render_svg(markup, (width, height))
