"""
Uploaded artwork ingestion.

Turns an uploaded file (SVG markup, PNG/JPEG image, or a PDF page) into an
``Asset``: drawable content plus its intrinsic size and aspect ratio.

Decoding problems never propagate out of ``normalize``. A drawing with a
placeholder is preferable to no drawing, so:
- corrupt SVG markup yields an asset with no drawable content
- an undecodable raster or a PDF that fails to render yields a synthesized
  placeholder bitmap stating the file name and size
"""

from __future__ import annotations

import asyncio
import base64
import io
import logging
import mimetypes
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Protocol

from PIL import Image, ImageDraw, ImageFont

logger = logging.getLogger(__name__)


# =============================================================================
# UPLOAD TYPES
# =============================================================================

class AssetKind(str, Enum):
    """MIME category of an upload."""
    VECTOR = "vector"
    RASTER = "raster"
    DOCUMENT = "document"


ACCEPTED_UPLOAD_TYPES: dict[str, AssetKind] = {
    "image/svg+xml": AssetKind.VECTOR,
    "application/pdf": AssetKind.DOCUMENT,
    "image/png": AssetKind.RASTER,
    "image/jpeg": AssetKind.RASTER,
    "image/jpg": AssetKind.RASTER,
}

# First page of a PDF is rendered at this zoom factor
DOCUMENT_RENDER_SCALE = 1.5

PLACEHOLDER_SIZE = (600, 400)
PLACEHOLDER_MAX_NAME = 35
PLACEHOLDER_ICON_LABELS = {
    AssetKind.VECTOR: "SVG",
    AssetKind.RASTER: "IMG",
    AssetKind.DOCUMENT: "PDF",
}
PLACEHOLDER_TITLES = {
    AssetKind.VECTOR: "VECTOR DESIGN FILE",
    AssetKind.RASTER: "IMAGE DESIGN FILE",
    AssetKind.DOCUMENT: "PDF DESIGN FILE",
}


class UnsupportedUploadError(ValueError):
    """Raised when an upload is not SVG, PDF, PNG, or JPEG."""


@dataclass(frozen=True)
class UploadedFile:
    """
    A user upload, either held in memory or referenced on disk.

    Attributes:
        name: Original file name (used in the bundle and for display)
        mime_type: Declared MIME type; guessed from ``name`` when empty
        data: In-memory content
        path: On-disk location, read lazily by an ``AssetReader``
    """
    name: str
    mime_type: str = ""
    data: bytes | None = field(default=None, repr=False)
    path: Path | None = None

    @classmethod
    def from_path(cls, path: str | Path, mime_type: str = "") -> UploadedFile:
        path = Path(path)
        return cls(name=path.name, mime_type=mime_type, path=path)

    @property
    def stem(self) -> str:
        return Path(self.name).stem

    @property
    def content_type(self) -> str:
        """Declared MIME type, falling back to a guess from the file name."""
        if self.mime_type:
            return self.mime_type.lower()
        guessed, _ = mimetypes.guess_type(self.name)
        return (guessed or "").lower()

    @property
    def size(self) -> int:
        if self.data is not None:
            return len(self.data)
        if self.path is not None and self.path.exists():
            return self.path.stat().st_size
        return 0


def classify_upload(upload: UploadedFile) -> AssetKind:
    """
    Check an upload against the accepted MIME types.

    Raises:
        UnsupportedUploadError: For anything other than SVG, PDF, PNG, or JPEG
    """
    kind = ACCEPTED_UPLOAD_TYPES.get(upload.content_type)
    if kind is None:
        raise UnsupportedUploadError(
            f"Unsupported upload type {upload.content_type or 'unknown'!r} for "
            f"{upload.name!r}. Please upload an SVG, PDF, PNG or JPEG file."
        )
    return kind


# =============================================================================
# READING
# =============================================================================

class AssetReader(Protocol):
    """Capability that produces the raw bytes of an upload."""

    async def read(self, upload: UploadedFile) -> bytes:
        ...


class FileAssetReader:
    """Reads in-memory uploads directly and on-disk uploads from their path."""

    async def read(self, upload: UploadedFile) -> bytes:
        if upload.data is not None:
            return upload.data
        if upload.path is None:
            raise ValueError(f"Upload {upload.name!r} has neither data nor a path")
        return await asyncio.to_thread(upload.path.read_bytes)


# =============================================================================
# ASSET
# =============================================================================

@dataclass(frozen=True)
class Asset:
    """
    Normalized upload, ready to be drawn.

    Vector assets carry their markup in ``text``; raster and document assets
    carry PNG/JPEG bytes in ``data``. ``raw`` is always the original upload
    content, kept for the export bundle.

    Attributes:
        name: Original file name
        kind: Category of the original upload
        mime_type: MIME type of the drawable payload
        raw: Original bytes as uploaded
        width: Intrinsic width (viewBox units or pixels)
        height: Intrinsic height
        text: SVG markup (vector assets only)
        data: Bitmap bytes (raster and document assets)
        view_box: (min_x, min_y, width, height) of a vector asset
        is_placeholder: True when ``data`` is a synthesized placeholder
    """
    name: str
    kind: AssetKind
    mime_type: str
    raw: bytes = field(repr=False)
    width: float = 1.0
    height: float = 1.0
    text: str | None = field(default=None, repr=False)
    data: bytes | None = field(default=None, repr=False)
    view_box: tuple[float, float, float, float] | None = None
    is_placeholder: bool = False

    @property
    def aspect_ratio(self) -> float:
        """Width / height, 1.0 when the size is degenerate."""
        if self.width <= 0 or self.height <= 0:
            return 1.0
        return self.width / self.height

    @property
    def is_vector(self) -> bool:
        return self.kind is AssetKind.VECTOR

    @property
    def data_uri(self) -> str:
        """Bitmap payload as a ``data:`` URI for SVG ``<image>`` embedding."""
        if self.data is None:
            return ""
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"


# =============================================================================
# VECTOR MARKUP
# =============================================================================

_LENGTH_RE = re.compile(r"^\s*([0-9]*\.?[0-9]+(?:[eE][-+]?[0-9]+)?)\s*(px|pt|mm|cm|in)?\s*$")


def _parse_length(value: str | None) -> float | None:
    """Parse an SVG length such as ``"120"`` or ``"12.5mm"``; % is rejected."""
    if not value:
        return None
    match = _LENGTH_RE.match(value)
    if not match:
        return None
    number = float(match.group(1))
    return number if number > 0 else None


def parse_view_box(value: str | None) -> tuple[float, float, float, float] | None:
    """Parse a ``viewBox`` attribute; None unless it has a positive size."""
    if not value:
        return None
    parts = re.split(r"[\s,]+", value.strip())
    if len(parts) != 4:
        return None
    try:
        min_x, min_y, width, height = (float(p) for p in parts)
    except ValueError:
        return None
    if width <= 0 or height <= 0:
        return None
    return (min_x, min_y, width, height)


def svg_intrinsic_box(root: ET.Element) -> tuple[float, float, float, float]:
    """
    Intrinsic (min_x, min_y, width, height) of a parsed SVG root.

    Uses the viewBox, then the width/height attributes, then a unit square.
    """
    view_box = parse_view_box(root.get("viewBox"))
    if view_box is not None:
        return view_box

    width = _parse_length(root.get("width"))
    height = _parse_length(root.get("height"))
    if width is not None and height is not None:
        return (0.0, 0.0, width, height)

    return (0.0, 0.0, 1.0, 1.0)


def _normalize_vector(upload: UploadedFile, raw: bytes) -> Asset:
    text = raw.decode("utf-8", errors="replace")
    try:
        root = ET.fromstring(text)
    except ET.ParseError as exc:
        logger.warning("Could not parse SVG %s: %s", upload.name, exc)
        return Asset(
            name=upload.name,
            kind=AssetKind.VECTOR,
            mime_type="image/svg+xml",
            raw=raw,
            text="",
        )

    min_x, min_y, width, height = svg_intrinsic_box(root)
    return Asset(
        name=upload.name,
        kind=AssetKind.VECTOR,
        mime_type="image/svg+xml",
        raw=raw,
        width=width,
        height=height,
        text=text,
        view_box=(min_x, min_y, width, height),
    )


# =============================================================================
# RASTER AND DOCUMENT
# =============================================================================

def _png_bytes(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def _centered_text(draw: ImageDraw.ImageDraw, center: tuple[int, int], text: str,
                   font: ImageFont.ImageFont | ImageFont.FreeTypeFont, fill: str) -> None:
    left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
    x = center[0] - (right - left) / 2
    y = center[1] - (bottom - top) / 2
    draw.text((x, y), text, fill=fill, font=font)


def format_file_size(size: int) -> str:
    """Size in megabytes with two decimals, e.g. ``"1.25MB"``."""
    return f"{size / 1024 / 1024:.2f}MB"


def create_placeholder_bitmap(file_name: str, file_size: int, kind: AssetKind = AssetKind.DOCUMENT) -> bytes:
    """
    Synthesize an informational PNG for an upload that could not be rendered.

    The bitmap shows a file icon labelled with the upload type, the file name
    (truncated), and the file size, so a failed upload is visibly identified
    in the drawing.
    """
    width, height = PLACEHOLDER_SIZE
    image = Image.new("RGB", PLACEHOLDER_SIZE, "#f8f9fa")
    draw = ImageDraw.Draw(image)
    font = ImageFont.load_default()

    # Dashed frame
    dash, gap, inset = 10, 5, 15
    for x in range(inset, width - inset, dash + gap):
        x_end = min(x + dash, width - inset)
        draw.line([(x, inset), (x_end, inset)], fill="#6c757d", width=3)
        draw.line([(x, height - inset), (x_end, height - inset)], fill="#6c757d", width=3)
    for y in range(inset, height - inset, dash + gap):
        y_end = min(y + dash, height - inset)
        draw.line([(inset, y), (inset, y_end)], fill="#6c757d", width=3)
        draw.line([(width - inset, y), (width - inset, y_end)], fill="#6c757d", width=3)

    # Document icon with shadow
    draw.rectangle([255, 85, 355, 215], fill="#c8c8c8")
    draw.rectangle([250, 80, 350, 210], fill="#dc3545")
    _centered_text(draw, (300, 145), PLACEHOLDER_ICON_LABELS[kind], font, "#ffffff")
    draw.line([(260, 170), (340, 170)], fill="#ffffff", width=2)

    _centered_text(draw, (300, 250), PLACEHOLDER_TITLES[kind], font, "#212529")

    # File info box
    display_name = file_name
    if len(display_name) > PLACEHOLDER_MAX_NAME:
        display_name = display_name[:PLACEHOLDER_MAX_NAME - 3] + "..."
    draw.rectangle([100, 280, 500, 360], fill="#ffffff", outline="#dee2e6")
    draw.text((120, 295), f"File: {display_name}", fill="#007bff", font=font)
    draw.text((120, 330), f"Size: {format_file_size(file_size)}", fill="#28a745", font=font)

    _centered_text(draw, (300, 380), "File loaded, usable as print pattern", font, "#6c757d")
    return _png_bytes(image)


def _placeholder_asset(upload: UploadedFile, kind: AssetKind, raw: bytes) -> Asset:
    width, height = PLACEHOLDER_SIZE
    return Asset(
        name=upload.name,
        kind=kind,
        mime_type="image/png",
        raw=raw,
        width=width,
        height=height,
        data=create_placeholder_bitmap(upload.name, len(raw), kind),
        is_placeholder=True,
    )


def _normalize_raster(upload: UploadedFile, raw: bytes) -> Asset:
    try:
        with Image.open(io.BytesIO(raw)) as image:
            image.load()
            width, height = image.size
            mime_type = Image.MIME.get(image.format or "", upload.content_type)
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        logger.warning("Could not decode image %s: %s", upload.name, exc)
        return _placeholder_asset(upload, AssetKind.RASTER, raw)

    return Asset(
        name=upload.name,
        kind=AssetKind.RASTER,
        mime_type=mime_type,
        raw=raw,
        width=float(width),
        height=float(height),
        data=raw,
    )


def render_first_page(raw: bytes, scale: float = DOCUMENT_RENDER_SCALE) -> tuple[bytes, int, int]:
    """Render page one of a PDF to PNG bytes; returns (png, width, height)."""
    import pymupdf

    with pymupdf.open(stream=raw, filetype="pdf") as doc:
        if doc.page_count < 1:
            raise ValueError("Document has no pages")
        page = doc.load_page(0)
        pixmap = page.get_pixmap(matrix=pymupdf.Matrix(scale, scale), alpha=False)
        return pixmap.tobytes("png"), pixmap.width, pixmap.height


def _normalize_document(upload: UploadedFile, raw: bytes) -> Asset:
    try:
        png, width, height = render_first_page(raw)
    except Exception as exc:  # any render failure falls back to the placeholder
        logger.warning("Could not render %s, using placeholder: %s", upload.name, exc)
        return _placeholder_asset(upload, AssetKind.DOCUMENT, raw)

    return Asset(
        name=upload.name,
        kind=AssetKind.DOCUMENT,
        mime_type="image/png",
        raw=raw,
        width=float(width),
        height=float(height),
        data=png,
    )


# =============================================================================
# NORMALIZATION
# =============================================================================

async def normalize(upload: UploadedFile, reader: AssetReader | None = None) -> Asset:
    """
    Decode an upload into a drawable ``Asset``.

    The upload type must already have been accepted by ``classify_upload``;
    it is checked again here so a bad type never reaches a decoder.

    Args:
        upload: The uploaded file
        reader: Source of the upload's bytes (defaults to ``FileAssetReader``)

    Returns:
        The normalized asset. Decode failures produce a placeholder asset
        rather than an exception.
    """
    kind = classify_upload(upload)
    reader = reader or FileAssetReader()
    raw = await reader.read(upload)

    # Decoders are blocking; run them off the event loop
    if kind is AssetKind.VECTOR:
        decoder = _normalize_vector
    elif kind is AssetKind.RASTER:
        decoder = _normalize_raster
    else:
        decoder = _normalize_document
    asset = await asyncio.to_thread(decoder, upload, raw)

    logger.debug(
        "Normalized %s as %s (%.1f x %.1f, placeholder=%s)",
        upload.name, asset.kind.value, asset.width, asset.height, asset.is_placeholder,
    )
    return asset
