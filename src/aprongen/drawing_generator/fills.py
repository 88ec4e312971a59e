"""
Fill resolution for the apron body.

Turns a fill specification plus the normalized pattern asset (if any) into a
fill reference the geometry engine can paint with:
- ``SolidFill`` -> ``SolidFillRef`` (flat colour)
- ``PatternFill`` without usable artwork -> ``None``; the engine writes a
  textual placeholder instead
- ``PatternFill`` with artwork -> ``PatternTile``, an SVG ``<pattern>`` whose
  tile size and content placement depend on the repeat mode

Repeat modes (sizes in px, area = the body's fillable bounding box):

    tile     100 x 100 tile, content fitted into 30% of it, opacity 0.7
    stretch  tile = area, content scaled non-uniformly to cover it, opacity 0.8
    center   tile = area, content fitted to 30% of the smaller area side and
             centred, opacity 0.8
    custom   tile = area, content fitted to custom_size% of the smaller side,
             positioned by custom_position_x/y% within the free range
             (0 = flush left/top, 100 = flush right/bottom), opacity 0.8
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Union, assert_never

import numpy as np

from ..assets import Asset
from ..design import FillSpec, PatternFill, RepeatMode, SolidFill
from .primitives import fmt
from .view_area import ViewArea

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

PATTERN_ID = "apron-pattern"

TILE_SIZE = 100.0
TILE_CONTENT_RATIO = 0.3
TILE_CONTENT_OFFSET = 6.0
CENTER_CONTENT_RATIO = 0.3

TILE_OPACITY = 0.7
AREA_OPACITY = 0.8

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"


# =============================================================================
# FILL REFERENCES
# =============================================================================

@dataclass(frozen=True)
class SolidFillRef:
    """Opaque flat colour."""
    color: str

    def paint(self) -> str:
        return self.color


@dataclass(frozen=True)
class TilePlacement:
    """
    Tile size and content box inside the tile.

    Attributes:
        tile_width, tile_height: Pattern tile size
        x, y: Content box top-left, relative to the tile
        width, height: Content box size
        opacity: Content opacity
        stretch: True when the content must fill the box non-uniformly
    """
    tile_width: float
    tile_height: float
    x: float
    y: float
    width: float
    height: float
    opacity: float
    stretch: bool = False


@dataclass(frozen=True)
class PatternTile:
    """
    A repeating-tile definition placed in the document's ``<defs>``.

    The tile grid starts at the fillable area's top-left corner, so area-sized
    tiles line up exactly with the body.
    """
    pattern_id: str
    area: ViewArea
    placement: TilePlacement
    content: str

    def paint(self) -> str:
        return f"url(#{self.pattern_id})"

    def to_svg(self) -> str:
        p = self.placement
        return (
            f'<pattern id="{self.pattern_id}" x="{fmt(self.area.x)}" y="{fmt(self.area.y)}" '
            f'width="{fmt(p.tile_width)}" height="{fmt(p.tile_height)}" '
            f'patternUnits="userSpaceOnUse">'
            f'<g opacity="{fmt(p.opacity)}">{self.content}</g>'
            f'</pattern>'
        )


FillRef = Union[SolidFillRef, PatternTile, None]


# =============================================================================
# PLACEMENT
# =============================================================================

def _fit_scale(content_width: float, content_height: float, target: float) -> float:
    """Uniform scale that makes the content's longer side equal ``target``."""
    longest = max(content_width, content_height)
    if longest <= 0:
        return 0.0
    return max(target, 0.0) / longest


def _position(free_range: float, percent: float) -> float:
    """Map a 0-100 position into [0, free_range], clamped to the area."""
    return min(max(free_range * percent / 100.0, 0.0), max(free_range, 0.0))


def place_tile_content(
    fill: PatternFill,
    area_width: float,
    area_height: float,
    content_width: float,
    content_height: float,
) -> TilePlacement:
    """
    Compute the tile and content box for a pattern fill.

    ``custom_*`` fields of ``fill`` are only read in custom mode.

    Args:
        fill: Pattern specification
        area_width, area_height: Fillable area size in px
        content_width, content_height: Intrinsic size of the artwork

    Returns:
        TilePlacement for the repeat mode
    """
    mode = fill.repeat_mode
    match mode:
        case RepeatMode.TILE:
            scale = _fit_scale(content_width, content_height, TILE_SIZE * TILE_CONTENT_RATIO)
            return TilePlacement(
                TILE_SIZE, TILE_SIZE,
                TILE_CONTENT_OFFSET, TILE_CONTENT_OFFSET,
                content_width * scale, content_height * scale,
                TILE_OPACITY,
            )
        case RepeatMode.STRETCH:
            return TilePlacement(
                area_width, area_height, 0.0, 0.0, area_width, area_height,
                AREA_OPACITY, stretch=True,
            )
        case RepeatMode.CENTER:
            target = min(area_width, area_height) * CENTER_CONTENT_RATIO
            scale = _fit_scale(content_width, content_height, target)
            width, height = content_width * scale, content_height * scale
            return TilePlacement(
                area_width, area_height,
                (area_width - width) / 2, (area_height - height) / 2,
                width, height, AREA_OPACITY,
            )
        case RepeatMode.CUSTOM:
            target = min(area_width, area_height) * fill.custom_size / 100.0
            scale = _fit_scale(content_width, content_height, target)
            width, height = content_width * scale, content_height * scale
            return TilePlacement(
                area_width, area_height,
                _position(area_width - width, fill.custom_position_x),
                _position(area_height - height, fill.custom_position_y),
                width, height, AREA_OPACITY,
            )
        case _:
            assert_never(mode)


# =============================================================================
# CONTENT EMBEDDING
# =============================================================================

def strip_svg_namespaces(svg_content: str) -> str:
    """Remove namespace prefixes from serialized SVG content."""
    cleaned = re.sub(r'<ns\d+:', '<', svg_content)
    cleaned = re.sub(r'</ns\d+:', '</', cleaned)
    cleaned = re.sub(r'\s*xmlns:ns\d+="[^"]*"', '', cleaned)
    return cleaned


def _local_name(name: str) -> tuple[str | None, str]:
    if name.startswith("{"):
        namespace, local = name[1:].split("}", 1)
        return namespace, local
    return None, name


def vector_markup(asset: Asset | None) -> str | None:
    """
    Clone the child nodes of a vector asset as inline SVG markup.

    Namespaces are flattened so the markup can be dropped into the drawing
    document: SVG elements keep their local names, ``xlink:href`` becomes
    ``href``, and elements from foreign namespaces (editor metadata) are
    skipped. Returns None when the asset has no drawable children.
    """
    if asset is None or not asset.text:
        return None
    try:
        root = ET.fromstring(asset.text)
    except ET.ParseError as exc:
        logger.warning("Could not parse vector content of %s: %s", asset.name, exc)
        return None

    parts = []
    for child in root:
        if not isinstance(child.tag, str):
            continue  # comments and processing instructions
        namespace, _ = _local_name(child.tag)
        if namespace not in (None, SVG_NS):
            continue
        for element in child.iter():
            if not isinstance(element.tag, str):
                continue
            element.tag = _local_name(element.tag)[1]
            for key in [k for k in element.attrib if k.startswith("{")]:
                value = element.attrib.pop(key)
                attr_ns, local = _local_name(key)
                if attr_ns == XLINK_NS or attr_ns == SVG_NS:
                    element.set(local, value)
        child.tail = None
        parts.append(strip_svg_namespaces(ET.tostring(child, encoding="unicode")))

    return "".join(parts) or None


def content_transform(
    view_box: tuple[float, float, float, float],
    x: float,
    y: float,
    width: float,
    height: float,
) -> str:
    """
    SVG ``matrix()`` mapping a viewBox onto the box (x, y, width, height).

    Composed as translate(x, y) . scale(sx, sy) . translate(-min_x, -min_y).
    """
    min_x, min_y, vb_width, vb_height = view_box
    sx = width / vb_width if vb_width > 0 else 0.0
    sy = height / vb_height if vb_height > 0 else 0.0

    translate_box = np.array([[1, 0, x], [0, 1, y], [0, 0, 1]], dtype=float)
    scale = np.diag([sx, sy, 1.0])
    translate_origin = np.array([[1, 0, -min_x], [0, 1, -min_y], [0, 0, 1]], dtype=float)
    m = translate_box @ scale @ translate_origin

    a, c, e = m[0]
    b, d, f = m[1]
    return "matrix({})".format(" ".join(f"{v:.6g}" for v in (a, b, c, d, e, f)))


def tile_content(asset: Asset, placement: TilePlacement) -> str | None:
    """Markup for the artwork inside one tile, or None if nothing is drawable."""
    if asset.is_vector:
        markup = vector_markup(asset)
        if markup is None:
            return None
        view_box = asset.view_box or (0.0, 0.0, asset.width, asset.height)
        transform = content_transform(
            view_box, placement.x, placement.y, placement.width, placement.height
        )
        return f'<g transform="{transform}">{markup}</g>'

    if not asset.data:
        return None
    aspect = "none" if placement.stretch else "xMidYMid meet"
    href = asset.data_uri
    return (
        f'<image x="{fmt(placement.x)}" y="{fmt(placement.y)}" '
        f'width="{fmt(placement.width)}" height="{fmt(placement.height)}" '
        f'href="{href}" xlink:href="{href}" preserveAspectRatio="{aspect}"/>'
    )


# =============================================================================
# RESOLUTION
# =============================================================================

async def resolve_fill(fill: FillSpec, asset: Asset | None, area: ViewArea) -> FillRef:
    """
    Resolve a fill specification against the fillable area.

    Args:
        fill: Solid or pattern specification
        asset: Normalized pattern artwork, if one was uploaded
        area: The body's fillable bounding box in px

    Returns:
        SolidFillRef, PatternTile, or None when a pattern has no drawable
        artwork (the caller renders a textual placeholder).
    """
    match fill:
        case SolidFill():
            return SolidFillRef(fill.hex_color)
        case PatternFill():
            if asset is None:
                return None
            placement = place_tile_content(fill, area.width, area.height, asset.width, asset.height)
            content = tile_content(asset, placement)
            if content is None:
                logger.info("Pattern %s has no drawable content, using placeholder text", asset.name)
                return None
            return PatternTile(PATTERN_ID, area, placement, content)
        case _:
            assert_never(fill)
