#!/usr/bin/env python3
"""
Simple Example: Place a Logo on the Front

This is the simplest way to place an artwork file and render a preview.
"""

from pathlib import Path

from printplace import place_artwork, render_preview

# Place a local file (replace with your artwork) with the default centered placement
session, report = place_artwork(Path("logo.png"), location="front")

print(f"Design size: {report.size.format()} (max {report.max_size.width}\" × {report.max_size.height}\")")
print(f"Position: {report.position}")
if report.oversize:
    print("Warning: design exceeds the maximum print size")

# Render the editor canvas to PNG
render_preview(session, Path("preview.png"))

print("✓ Preview saved to: preview.png")
