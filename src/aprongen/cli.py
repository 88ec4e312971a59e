"""
Command-line interface for aprongen.

Commands:
- init: Write a default design configuration
- summary: Print a design summary with imperial conversions
- render: Render a design and export SVG / PNG / PDF / bundle

Usage:
    aprongen init apron.yaml
    aprongen summary apron.yaml
    aprongen render apron.yaml --pattern flowers.svg --png apron.png --bundle apron.zip
"""

import asyncio
import logging
import warnings
from pathlib import Path

import click

from .assets import UnsupportedUploadError, UploadedFile
from .design import DesignConfig, logo_fit_advice
from .export import DEFAULT_RASTER_SCALE, DEFAULT_SVG_NAME, ExportError, design_summary
from .pipeline import DesignSession


@click.group()
@click.version_option(version="0.1.0")
def cli():
    """aprongen - parametric apron technical drawings."""
    pass


@cli.command()
@click.argument("output", type=click.Path(path_type=Path), default="apron.yaml")
@click.option("--force", is_flag=True, help="Overwrite an existing file.")
def init(output: Path, force: bool):
    """
    Write a default design configuration to OUTPUT (default: apron.yaml).

    Example:
        aprongen init my-apron.yaml
    """
    if output.exists() and not force:
        click.echo(f"{output} already exists. Use --force to overwrite.", err=True)
        raise SystemExit(1)

    DesignConfig().to_yaml(output)
    click.echo(f"Configuration saved to: {output}")


@cli.command()
@click.argument("config_file", type=click.Path(exists=True, path_type=Path))
def summary(config_file: Path):
    """Print a summary of the design in CONFIG_FILE."""
    config = _load_config(config_file)
    click.echo(design_summary(config))

    advice = logo_fit_advice(config)
    if advice:
        click.echo("\nWarnings:")
        for message in advice:
            click.echo(f"  - {message}")


@cli.command()
@click.argument("config_file", type=click.Path(exists=True, path_type=Path))
@click.option("--pattern", type=click.Path(exists=True, path_type=Path),
              help="Pattern artwork (SVG, PDF, PNG or JPEG); switches the fill to a pattern.")
@click.option("--logo", type=click.Path(exists=True, path_type=Path),
              help="Logo artwork (SVG, PDF, PNG or JPEG); enables the logo.")
@click.option("--svg", "svg_path", type=click.Path(path_type=Path), help="SVG output path.")
@click.option("--png", "png_path", type=click.Path(path_type=Path), help="PNG output path.")
@click.option("--scale", type=float, default=DEFAULT_RASTER_SCALE, show_default=True,
              help="PNG upscale factor.")
@click.option("--pdf", "pdf_path", type=click.Path(path_type=Path), help="PDF output path.")
@click.option("--bundle", "bundle_path", type=click.Path(path_type=Path),
              help="Zip bundle output path.")
@click.option("--verbose", "-v", is_flag=True, help="Show progress logging.")
def render(
    config_file: Path,
    pattern: Path | None,
    logo: Path | None,
    svg_path: Path | None,
    png_path: Path | None,
    scale: float,
    pdf_path: Path | None,
    bundle_path: Path | None,
    verbose: bool,
):
    """
    Render the design in CONFIG_FILE and export it.

    With no output options the drawing is written to apron-design.svg.
    Each export runs on its own; a failed export does not stop the others.

    Example:
        aprongen render apron.yaml --logo brand.png --png apron.png --scale 3
    """
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    session = DesignSession(_load_config(config_file))
    try:
        if pattern is not None:
            session.attach_pattern(UploadedFile.from_path(pattern))
        if logo is not None:
            session.attach_logo(UploadedFile.from_path(logo))
    except UnsupportedUploadError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1) from None

    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        asyncio.run(session.render())
    for warning in caught:
        click.echo(f"Warning: {warning.message}", err=True)

    if not any((svg_path, png_path, pdf_path, bundle_path)):
        svg_path = Path(DEFAULT_SVG_NAME)

    exports = []
    if svg_path:
        exports.append(("SVG", lambda: session.export_svg(svg_path)))
    if png_path:
        exports.append(("PNG", lambda: session.export_png(png_path, scale=scale)))
    if pdf_path:
        exports.append(("PDF", lambda: session.export_pdf(pdf_path)))
    if bundle_path:
        exports.append(("bundle", lambda: session.export_bundle(bundle_path)))

    failed = False
    for label, run_export in exports:
        try:
            written = run_export()
        except (ExportError, ValueError) as e:
            click.echo(f"{label} export failed: {e}", err=True)
            failed = True
        else:
            click.echo(f"Exported {label}: {written}")

    if failed:
        raise SystemExit(1)


def _load_config(config_file: Path) -> DesignConfig:
    try:
        return DesignConfig.from_yaml(config_file)
    except Exception as e:
        click.echo(f"Error loading config: {e}", err=True)
        raise SystemExit(1) from None


if __name__ == "__main__":
    cli()
