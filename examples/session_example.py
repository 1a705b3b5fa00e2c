#!/usr/bin/env python3
"""
Session Example: Edit, Vectorize and Undo

Drives a placement session the way the editor does: load an artwork,
apply toolbar actions, ask the storefront for a vectorized version and
step back through the history.
"""

import asyncio
from pathlib import Path

from printplace import ArtworkSource, create_session, load_config

# Load config (for the vectorization endpoint)
config = load_config()
session = create_session(config, location="left_chest")


async def main() -> None:
    source = ArtworkSource.from_upload(
        Path("logo.png").read_bytes(),  # Replace with your artwork
        "logo.png",
        artwork_id="0c5e2b1a",  # Storefront artwork file ID
    )
    await session.load_artwork(source)

    surface = session.surface()
    surface.fit()
    surface.rotate()
    surface.nudge("up", large=True)

    result = await session.request_vectorization()
    if result is not None and result.completed:
        print(f"Switched to vectorized view: {result.vectorized_url}")


asyncio.run(main())

machine = session.machine()
print(f"Transform: {machine.transform.to_dict()}")
print(f"Design size: {machine.current_dimensions().format()}")

# Step back through the edits made in the active view
while machine.undo() is not None:
    print(f"  Undo → {machine.transform.to_dict()}")
