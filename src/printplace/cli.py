"""CLI interface for the artwork placement engine."""

import logging
from pathlib import Path

import click
from PIL import UnidentifiedImageError

from printplace.api.builder import load_source_file, place_artwork, render_preview
from printplace.api.catalog import load_backdrop
from printplace.config import Config, load_config
from printplace.imaging.bounds import detect_content_bounds, is_significant_crop
from printplace.imaging.cropper import prepare_artwork
from printplace.imaging.image import decode_artwork
from printplace.utils.dimensions import PRINT_LOCATIONS, get_location_label, parse_location


def _load_settings(config: Path | None):
    if config is None:
        return Config().placement
    return load_config(config).placement


config_option = click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to config.toml file. Built-in defaults are used if not specified.",
)

location_option = click.option(
    "-l",
    "--location",
    type=click.Choice(list(PRINT_LOCATIONS), case_sensitive=False),
    default="front",
    show_default=True,
    help="Print location on the garment.",
)


@click.group()
@click.version_option()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool) -> None:
    """Place, crop and measure artwork on garment print areas."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("image", type=click.Path(path_type=Path))
@config_option
def bounds(image: Path, config: Path | None) -> None:
    """Detect the visible content bounds of IMAGE."""
    try:
        settings = _load_settings(config)
        source = load_source_file(image)
        artwork = decode_artwork(source.data, source.file_name)

        detected = detect_content_bounds(artwork.image, settings)
        if detected is None:
            click.echo(f"{image.name}: no visible content ({artwork.width}x{artwork.height})")
            return

        significant = is_significant_crop(detected, artwork.size, settings.significant_crop_ratio)
        click.echo(f"{image.name}: {artwork.width}x{artwork.height}")
        click.echo(f"  Bounds: x={detected.x} y={detected.y} width={detected.width} height={detected.height}")
        click.echo(f"  Crop: {'yes' if significant else 'no (not significantly smaller)'}")

    except (FileNotFoundError, ValueError, OSError, UnidentifiedImageError) as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)


@main.command()
@click.argument("image", type=click.Path(path_type=Path))
@click.option(
    "-o",
    "--output",
    type=click.Path(path_type=Path),
    help="Output PNG path. Defaults to '<name>-cropped.png'.",
)
@config_option
def crop(image: Path, output: Path | None, config: Path | None) -> None:
    """Crop IMAGE to its content bounds."""
    try:
        settings = _load_settings(config)
        source = load_source_file(image)
        artwork = decode_artwork(source.data, source.file_name)

        markup = source.data if source.is_vector else None
        prepared = prepare_artwork(artwork, markup, settings)

        if not prepared.cropped:
            click.echo(f"{image.name}: nothing to crop")
            return

        output = output or image.with_name(f"{image.stem}-cropped.png")
        prepared.artwork.image.save(output, format="PNG")
        click.echo(
            f"✓ Cropped {prepared.original_size[0]}x{prepared.original_size[1]} "
            f"to {prepared.artwork.width}x{prepared.artwork.height}: {output}"
        )

    except (FileNotFoundError, ValueError, OSError, UnidentifiedImageError) as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)


@main.command()
@click.argument("image", type=click.Path(path_type=Path))
@location_option
@click.option("--scale", type=float, help="Scale to apply instead of the default placement.")
@config_option
def place(image: Path, location: str, scale: float | None, config: Path | None) -> None:
    """Compute the default placement of IMAGE and report its printed size."""
    try:
        settings = _load_settings(config)
        loc = parse_location(location)
        _, report = place_artwork(image, loc, settings, scale=scale)

        t = report.transform
        click.echo(f"{image.name} on {get_location_label(loc)}")
        click.echo(f"  Image: {report.image_size[0]}x{report.image_size[1]} px")
        click.echo(f"  Transform: x={t.x:.1f} y={t.y:.1f} scale={t.scale:.4f} rotation={t.rotation:.0f}")
        click.echo(f"  Design Size: {report.size.format()}")
        click.echo(f'  Max: {report.max_size.width}" × {report.max_size.height}"')
        click.echo(f"  Position: {report.position}")
        if report.oversize:
            click.echo("  Warning: design exceeds the maximum print size", err=True)

    except (FileNotFoundError, ValueError, OSError) as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)


@main.command()
@click.argument("image", type=click.Path(path_type=Path))
@location_option
@click.option(
    "-o",
    "--output",
    type=click.Path(path_type=Path),
    required=True,
    help="Output PNG path.",
)
@click.option("--backdrop", type=str, help="Backdrop image path or URL.")
@config_option
def preview(image: Path, location: str, output: Path, backdrop: str | None, config: Path | None) -> None:
    """Render a canvas preview of IMAGE placed on a garment."""
    try:
        settings = _load_settings(config)
        loc = parse_location(location)
        session, report = place_artwork(image, loc, settings)

        backdrop_image = load_backdrop(backdrop) if backdrop else None
        render_preview(session, output, backdrop_image, loc)

        click.echo(f"✓ Preview saved to: {output} ({report.size.format()})")

    except (FileNotFoundError, ValueError, OSError) as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
