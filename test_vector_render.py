#!/usr/bin/env python3
"""Test full-resolution SVG rendering and vector-aware cropping."""

import pytest
from reportlab.graphics import renderPM
from reportlab.graphics.utils import RenderPMError

from printplace.api.models import ArtworkImage, is_svg
from printplace.imaging.bounds import ContentBounds
from printplace.imaging.cropper import crop_to_bounds
from printplace.imaging.image import decode_artwork
from printplace.imaging.vector import (
    RENDER_BACKEND,
    full_resolution_scale,
    get_viewbox_dimensions,
    inject_dimensions,
    needs_full_resolution,
    render_full_resolution,
    render_svg,
)

# Declared size is a 10× proxy of the viewBox
PROXY_SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="50" height="40" viewBox="0 0 500 400">'
    '<rect x="200" y="150" width="100" height="100" fill="#000000"/>'
    "</svg>"
)


def test_viewbox_parsing():
    assert get_viewbox_dimensions(PROXY_SVG) == (500.0, 400.0)
    assert get_viewbox_dimensions(b'<svg viewBox="0,0,12.5,1e2"/>') == (12.5, 100.0)
    assert get_viewbox_dimensions('<svg width="10" height="10"/>') is None
    assert get_viewbox_dimensions('<svg viewBox="0 0 0 10"/>') is None
    assert get_viewbox_dimensions("not markup") is None


def test_viewbox_only_read_from_root_element():
    markup = '<svg width="10" height="10"><svg viewBox="0 0 800 800"/></svg>'
    assert get_viewbox_dimensions(markup) is None


def test_needs_full_resolution():
    assert needs_full_resolution((500, 400), (50, 40))
    assert needs_full_resolution((500, 40), (200, 40))
    assert not needs_full_resolution((100, 80), (50, 40))
    assert not needs_full_resolution(None, (50, 40))


def test_full_resolution_scale_is_capped():
    assert full_resolution_scale((500, 400)) == 1.0
    assert full_resolution_scale((4000, 1000)) == pytest.approx(0.5)
    assert full_resolution_scale((4000, 1000), max_dimension=1000) == pytest.approx(0.25)


def test_inject_dimensions_replaces_root_size():
    result = inject_dimensions(PROXY_SVG, 500, 400)
    root = result[: result.index(">") + 1]
    assert 'width="500"' in root
    assert 'height="400"' in root
    assert 'width="50"' not in root
    assert 'viewBox="0 0 500 400"' in root
    # Child element attributes are untouched
    assert 'width="100"' in result


def test_inject_dimensions_self_closing():
    result = inject_dimensions('<svg viewBox="0 0 10 10"/>', 20, 30)
    assert result == '<svg viewBox="0 0 10 10" width="20" height="30"/>'


def test_inject_dimensions_requires_svg():
    with pytest.raises(ValueError):
        inject_dimensions("<html></html>", 10, 10)


def test_is_svg_detection():
    assert is_svg("logo.SVG")
    assert is_svg("https://cdn.example.com/a/logo.svg?v=3")
    assert is_svg(None, b'<?xml version="1.0"?>\n<svg xmlns="http://www.w3.org/2000/svg"/>')
    assert not is_svg("photo.png", b"\x89PNG\r\n")


def test_render_svg_uses_declared_size():
    img = render_svg(PROXY_SVG)
    assert img.mode == "RGBA"
    assert img.size == (50, 40)


def test_render_full_resolution_uses_viewbox():
    img = render_full_resolution(PROXY_SVG)
    assert img.size == (500, 400)
    # Center of the rect is opaque black, the margin is transparent
    assert img.getpixel((250, 200)) == (0, 0, 0, 255)
    assert img.getpixel((5, 5))[3] == 0


def test_render_svg_keeps_colors_over_transparency():
    markup = (
        '<svg xmlns="http://www.w3.org/2000/svg" width="40" height="40">'
        '<rect x="10" y="10" width="20" height="20" fill="#ffffff"/>'
        '<rect x="0" y="0" width="10" height="10" fill="#cc3300"/>'
        "</svg>"
    )
    img = render_svg(markup)

    # White fill stays distinguishable from the uncovered background
    assert img.getpixel((20, 20)) == (255, 255, 255, 255)
    assert img.getpixel((35, 35))[3] == 0
    red, green, blue, alpha = img.getpixel((5, 5))
    assert alpha == 255
    assert (red, green, blue) == (0xCC, 0x33, 0x00)


def test_render_svg_uses_renderpm_backend(monkeypatch):
    backends = []
    real_draw = renderPM.drawToPIL

    def recording_draw(drawing, **kwargs):
        backends.append(kwargs.get("backend"))
        return real_draw(drawing, **kwargs)

    monkeypatch.setattr(renderPM, "drawToPIL", recording_draw)
    render_svg(PROXY_SVG)

    assert backends == [RENDER_BACKEND, RENDER_BACKEND]


def test_render_svg_failure_raises_value_error(monkeypatch):
    def failing_draw(*args, **kwargs):
        raise RenderPMError("no backend")

    monkeypatch.setattr(renderPM, "drawToPIL", failing_draw)
    with pytest.raises(ValueError, match="Could not render SVG"):
        render_svg(PROXY_SVG)


def test_render_svg_rejects_unparseable_markup():
    with pytest.raises(ValueError):
        render_svg("<svg")


def test_render_full_resolution_respects_cap():
    img = render_full_resolution(PROXY_SVG, max_dimension=250)
    assert img.size == (250, 200)


def test_decode_svg_artwork():
    artwork = decode_artwork(PROXY_SVG.encode(), "logo.svg")
    assert artwork.size == (50, 40)
    assert artwork.image.mode == "RGBA"


def test_crop_from_full_resolution_render():
    proxy = ArtworkImage(render_svg(PROXY_SVG))
    bounds = ContentBounds(x=18, y=13, width=14, height=14)

    cropped = crop_to_bounds(proxy, bounds, vector_markup=PROXY_SVG)

    # Bounds are rescaled ×10 to the viewBox-resolution render
    assert cropped.size == (140, 140)
    assert cropped.cropped


def test_crop_without_proxy_uses_decoded_bitmap():
    markup = '<svg xmlns="http://www.w3.org/2000/svg" width="50" height="40" viewBox="0 0 60 48"/>'
    proxy = ArtworkImage(render_svg(PROXY_SVG))
    cropped = crop_to_bounds(proxy, ContentBounds(0, 0, 10, 10), vector_markup=markup)
    assert cropped.size == (10, 10)
