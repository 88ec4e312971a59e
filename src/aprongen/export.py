"""
Export pipeline.

Independent, one-shot exports of a serialized drawing:
- ``export_svg``: the document verbatim
- ``export_png``: rasterized through a ``Rasterizer`` at an upscale factor,
  flattened onto opaque white
- ``export_bundle``: zip archive with the document, a JSON parameter manifest,
  a plain-text specification sheet, and the original pattern artwork
- ``export_pdf``: vector PDF through svglib + reportlab

Each export fails on its own with an ``ExportError`` subclass; nothing is
shared between calls.
"""

from __future__ import annotations

import io
import json
import logging
import os
import tempfile
import zipfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Protocol, assert_never

from PIL import Image, UnidentifiedImageError

from .assets import Asset
from .design import (
    INCH_PER_CM,
    UPPER_HEIGHT_RATIO,
    DesignConfig,
    DoublePockets,
    MultiplePockets,
    NoPockets,
    PatternFill,
    RepeatMode,
    SinglePocket,
    SolidFill,
)

# Make PDF export optional using svglib + reportlab (pure Python, no Cairo needed)
try:
    from svglib.svglib import svg2rlg
    from reportlab.graphics import renderPDF
    SVGLIB_AVAILABLE = True
except ImportError:
    SVGLIB_AVAILABLE = False

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

DEFAULT_SVG_NAME = "apron-design.svg"
DEFAULT_PNG_NAME = "apron-design.png"
DEFAULT_BUNDLE_NAME = "apron-design-package.zip"
DEFAULT_PDF_NAME = "apron-design.pdf"

DEFAULT_RASTER_SCALE = 2.0

BUNDLE_SVG = "design.svg"
BUNDLE_MANIFEST = "design-parameters.json"
BUNDLE_README = "README.txt"
BUNDLE_PATTERN_DIR = "pattern-files"

MANIFEST_VERSION = "2.0"
MANIFEST_SPECIFICATION = "Professional Apron Design Standard"
GENERATOR_VERSION = "2.0 (Professional Standard)"


# =============================================================================
# ERRORS
# =============================================================================

class ExportError(RuntimeError):
    """An export operation failed; other exports are unaffected."""


class RenderSurfaceError(ExportError):
    """The rasterizing backend is unavailable."""


class DocumentDecodeError(ExportError):
    """The rasterizing backend could not decode the document."""


class RasterEncodingError(ExportError):
    """The raster encoder produced no usable data."""


# =============================================================================
# RASTERIZER
# =============================================================================

class Rasterizer(Protocol):
    """Capability that renders an SVG document to image bytes."""

    def render_document(self, svg: str, scale: float) -> bytes:
        ...


class CairoRasterizer:
    """Renders SVG with CairoSVG (needs the system cairo library)."""

    def render_document(self, svg: str, scale: float) -> bytes:
        try:
            import cairosvg
        except (ImportError, OSError) as exc:
            # OSError: the package is installed but libcairo is missing
            raise RenderSurfaceError(f"Rasterizing backend unavailable: {exc}") from exc

        try:
            return cairosvg.svg2png(bytestring=svg.encode("utf-8"), scale=scale) or b""
        except Exception as exc:
            raise DocumentDecodeError(f"Could not render SVG document: {exc}") from exc


def flatten_on_white(image_bytes: bytes) -> bytes:
    """Composite image bytes over an opaque white background; returns PNG."""
    try:
        with Image.open(io.BytesIO(image_bytes)) as image:
            rgba = image.convert("RGBA")
    except (UnidentifiedImageError, OSError) as exc:
        raise RasterEncodingError(f"Rasterizer returned unreadable image data: {exc}") from exc

    background = Image.new("RGBA", rgba.size, (255, 255, 255, 255))
    flattened = Image.alpha_composite(background, rgba).convert("RGB")
    buffer = io.BytesIO()
    flattened.save(buffer, format="PNG")
    return buffer.getvalue()


# =============================================================================
# EXPORTS
# =============================================================================

def export_svg(svg: str, path: str | Path = DEFAULT_SVG_NAME) -> Path:
    """Write the serialized document verbatim."""
    path = Path(path)
    path.write_text(svg, encoding="utf-8")
    logger.info("Exported SVG: %s", path)
    return path


def export_png(
    svg: str,
    path: str | Path = DEFAULT_PNG_NAME,
    scale: float = DEFAULT_RASTER_SCALE,
    rasterizer: Rasterizer | None = None,
) -> Path:
    """
    Rasterize the document and write a PNG.

    Output size is the document size times ``scale``, on opaque white.

    Raises:
        ValueError: If ``scale`` is not positive
        RenderSurfaceError: If the rasterizing backend is unavailable
        DocumentDecodeError: If the document cannot be rendered
        RasterEncodingError: If rendering returned no usable data
    """
    if scale <= 0:
        raise ValueError(f"Raster scale must be positive, got {scale}")

    rasterizer = rasterizer or CairoRasterizer()
    rendered = rasterizer.render_document(svg, scale)
    if not rendered:
        raise RasterEncodingError("Rasterizer returned no data")

    png = flatten_on_white(rendered)
    path = Path(path)
    path.write_bytes(png)
    logger.info("Exported PNG: %s (scale %.2g)", path, scale)
    return path


def export_pdf(svg: str, path: str | Path = DEFAULT_PDF_NAME) -> Path:
    """Export the document as PDF using svglib + reportlab."""
    if not SVGLIB_AVAILABLE:
        raise ExportError(
            "PDF export requires svglib and reportlab. "
            "Install with: pip install svglib reportlab"
        )

    path = Path(path)
    # svglib reads from a file path
    with tempfile.NamedTemporaryFile(mode="w", suffix=".svg", encoding="utf-8", delete=False) as tmp:
        tmp.write(svg)
        tmp_path = tmp.name

    try:
        drawing = svg2rlg(tmp_path)
        if drawing is None:
            raise ExportError("Failed to parse SVG content")
        renderPDF.drawToFile(drawing, str(path))
    except ExportError:
        raise
    except Exception as exc:
        raise ExportError(f"Could not convert SVG to PDF: {exc}") from exc
    finally:
        os.unlink(tmp_path)

    logger.info("Exported PDF: %s", path)
    return path


# =============================================================================
# BUNDLE
# =============================================================================

def build_manifest(
    config: DesignConfig,
    exported_at: datetime,
    pattern_asset: Asset | None = None,
    logo_asset: Asset | None = None,
) -> dict[str, Any]:
    """Parameter manifest: full configuration plus export metadata."""
    manifest = config.to_dict()
    manifest["exportDate"] = exported_at.isoformat()
    manifest["version"] = MANIFEST_VERSION
    manifest["specification"] = MANIFEST_SPECIFICATION
    if pattern_asset is not None and isinstance(config.fill, PatternFill):
        manifest["patternFile"] = {"name": pattern_asset.name, "type": pattern_asset.kind.value}
    if logo_asset is not None and config.logo.enabled:
        manifest["logoFile"] = {"name": logo_asset.name, "type": logo_asset.kind.value}
    return manifest


def _inch(cm: float) -> str:
    return f"{cm * INCH_PER_CM:.1f}"


def _fill_description(config: DesignConfig, pattern_asset: Asset | None) -> list[str]:
    fill = config.fill
    if isinstance(fill, SolidFill):
        return [
            "- Fill type: solid",
            f"- Color name: {fill.name}",
            f"- Preview color: {fill.hex_color}",
        ]
    lines = [
        "- Fill type: pattern",
        f"- Pattern name: {fill.name}",
        f"- Repeat mode: {fill.repeat_mode.value}",
    ]
    if fill.repeat_mode is RepeatMode.CUSTOM:
        lines.append(
            f"- Custom size: {fill.custom_size:g}%, position "
            f"{fill.custom_position_x:g}% / {fill.custom_position_y:g}%"
        )
    if pattern_asset is not None:
        lines.append(f"- Pattern file: {pattern_asset.name} ({pattern_asset.kind.value})")
    return lines


def _pocket_description(config: DesignConfig) -> list[str]:
    pockets = config.pockets
    match pockets:
        case NoPockets():
            return ["- Layout: none"]
        case SinglePocket():
            return [
                "- Layout: single",
                f"- Size: {pockets.width:g} x {pockets.height:g}CM",
                f"- Vertical position: {pockets.position_y:g}% of lower section",
            ]
        case DoublePockets():
            return [
                "- Layout: double",
                f"- Left: {pockets.left.width:g} x {pockets.left.height:g}CM",
                f"- Right: {pockets.right.width:g} x {pockets.right.height:g}CM",
                f"- Spacing: {pockets.spacing:g}CM",
                f"- Vertical position: {pockets.position_y:g}% of lower section",
            ]
        case MultiplePockets():
            return [
                f"- Layout: multiple ({pockets.count} pockets)",
                f"- Total size: {pockets.total_width:g} x {pockets.height:g}CM",
                f"- Each pocket: {pockets.pocket_width:.1f}CM wide",
                f"- Vertical position: {pockets.position_y:g}% of lower section",
            ]
        case _:
            assert_never(pockets)


def build_spec_sheet(
    config: DesignConfig,
    exported_at: datetime,
    pattern_asset: Asset | None = None,
) -> str:
    """Human-readable specification sheet (README.txt of the bundle)."""
    logo = config.logo
    if logo.enabled:
        logo_lines = [
            f"- Logo: {logo.name}",
            f"- Size: {logo.width:g} x {logo.height:.1f}CM",
            f"- Offset from top-left: {logo.offset_x:g}CM / {logo.offset_y:g}CM",
            f"- Opacity: {logo.opacity:g}%",
        ]
    else:
        logo_lines = ["- No logo"]

    files = [
        f"- {BUNDLE_SVG}: editable vector drawing",
        f"- {BUNDLE_MANIFEST}: design parameters",
        f"- {BUNDLE_README}: this file",
    ]
    if pattern_asset is not None and isinstance(config.fill, PatternFill):
        files.append(f"- {BUNDLE_PATTERN_DIR}/{pattern_asset.name}: original pattern artwork")

    ratio = round(UPPER_HEIGHT_RATIO * 100)
    sections = [
        "APRON DESIGN SPECIFICATION",
        "==========================",
        "",
        "Basic dimensions:",
        f"- Top width: {config.top_width:g}CM ({_inch(config.top_width)}INCH)",
        f"- Bottom width: {config.bottom_width:g}CM ({_inch(config.bottom_width)}INCH)",
        f"- Total height: {config.total_height:g}CM ({_inch(config.total_height)}INCH)",
        "",
        "Derived dimensions:",
        f"- Upper section height: {config.upper_height:g}CM (total height x {ratio}%)",
        f"- Lower section height: {config.lower_height:g}CM (total height - upper height)",
        "",
        "Straps:",
        f"- Style: {config.strap_style.value}",
        f"- Neck strap: {config.neck_strap:g}CM ({_inch(config.neck_strap)}INCH)",
        f"- Waist strap: {config.waist_strap:g}CM ({_inch(config.waist_strap)}INCH)",
        f"- Strap color: {config.strap_color.name} ({config.strap_color.hex_color})",
        "",
        "Pockets:",
        *_pocket_description(config),
        f"- Pocket color: {config.pocket_color.name} ({config.pocket_color.hex_color})",
        "",
        "Logo placement:",
        *logo_lines,
        "",
        "Color specification:",
        *_fill_description(config, pattern_asset),
        "",
        "Design conventions:",
        "- Shape: trapezoid upper section + rectangular lower section",
        "- Dimension units: CM/INCH",
        "- Precision: 1 decimal place",
        "",
        "Files:",
        *files,
        "",
        f"Exported: {exported_at.strftime('%Y-%m-%d %H:%M:%S %Z').strip()}",
        f"Generator version: {GENERATOR_VERSION}",
        "",
    ]
    return "\n".join(sections)


def export_bundle(
    svg: str,
    config: DesignConfig,
    path: str | Path = DEFAULT_BUNDLE_NAME,
    pattern_asset: Asset | None = None,
    logo_asset: Asset | None = None,
    exported_at: datetime | None = None,
) -> Path:
    """
    Package the drawing into a zip archive.

    Contents: ``design.svg``, ``design-parameters.json``, ``README.txt``, and
    ``pattern-files/<original name>`` when the fill is a pattern with artwork.

    Raises:
        ExportError: If the archive cannot be written
    """
    exported_at = exported_at or datetime.now(timezone.utc)
    manifest = build_manifest(config, exported_at, pattern_asset, logo_asset)
    readme = build_spec_sheet(config, exported_at, pattern_asset)

    path = Path(path)
    try:
        with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            archive.writestr(BUNDLE_SVG, svg)
            archive.writestr(BUNDLE_MANIFEST, json.dumps(manifest, indent=2, ensure_ascii=False))
            archive.writestr(BUNDLE_README, readme)
            if pattern_asset is not None and isinstance(config.fill, PatternFill):
                archive.writestr(f"{BUNDLE_PATTERN_DIR}/{Path(pattern_asset.name).name}", pattern_asset.raw)
    except OSError as exc:
        raise ExportError(f"Could not write bundle {path}: {exc}") from exc

    logger.info("Exported bundle: %s", path)
    return path


# =============================================================================
# SUMMARY
# =============================================================================

def design_summary(config: DesignConfig) -> str:
    """Short plain-text summary with imperial conversions."""
    fill = config.fill
    if isinstance(fill, SolidFill):
        fill_info = f"Solid: {fill.name} ({fill.hex_color})"
    else:
        fill_info = f"Pattern: {fill.name} ({fill.repeat_mode.value})"

    return "\n".join([
        "Apron design summary:",
        "Dimensions:",
        f"- Top x bottom x height: {config.top_width:g}x{config.bottom_width:g}x{config.total_height:g}CM",
        f"- Imperial: {_inch(config.top_width)}x{_inch(config.bottom_width)}x{_inch(config.total_height)}INCH",
        f"- Upper section: {config.upper_height:g}CM ({_inch(config.upper_height)}INCH)",
        f"- Lower section: {config.lower_height:g}CM ({_inch(config.lower_height)}INCH)",
        "Straps:",
        f"- Style: {config.strap_style.value}",
        f"- Neck: {config.neck_strap:g}CM ({_inch(config.neck_strap)}INCH)",
        f"- Waist: {config.waist_strap:g}CM ({_inch(config.waist_strap)}INCH)",
        "Pockets:",
        f"- Mode: {config.pocket_mode.value}",
        "Color:",
        f"- {fill_info}",
    ])
