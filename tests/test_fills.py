#!/usr/bin/env python3
"""
Tests for body fill resolution.

Tests cover:
- Tile content placement for all four repeat modes
- Custom position mapping (0 = flush start, 100 = flush end)
- Vector markup cloning and namespace flattening
- viewBox to content box transforms
- resolve_fill for solid, missing, empty, and drawable patterns
"""

import asyncio

import pytest

from aprongen.assets import Asset, AssetKind
from aprongen.design import PatternFill, RepeatMode, SolidFill
from aprongen.drawing_generator.fills import (
    AREA_OPACITY,
    PATTERN_ID,
    TILE_OPACITY,
    PatternTile,
    SolidFillRef,
    content_transform,
    place_tile_content,
    resolve_fill,
    tile_content,
    vector_markup,
)
from aprongen.drawing_generator.view_area import ViewArea


AREA = ViewArea(120, 280, 400, 300)


def vector_asset(markup: str, width: float = 10, height: float = 10) -> Asset:
    return Asset(
        name="art.svg",
        kind=AssetKind.VECTOR,
        mime_type="image/svg+xml",
        raw=markup.encode("utf-8"),
        width=width,
        height=height,
        text=markup,
        view_box=(0, 0, width, height),
    )


def raster_asset(width: float = 40, height: float = 20) -> Asset:
    return Asset(
        name="art.png",
        kind=AssetKind.RASTER,
        mime_type="image/png",
        raw=b"png",
        width=width,
        height=height,
        data=b"png",
    )


# =============================================================================
# PLACEMENT
# =============================================================================


class TestPlacement:
    """Test tile size and content box per repeat mode."""

    def test_tile_mode(self):
        """Tiles are 100 px with content fitted into 30 px at (6, 6)."""
        fill = PatternFill(repeat_mode=RepeatMode.TILE)
        p = place_tile_content(fill, 400, 300, 200, 100)
        assert (p.tile_width, p.tile_height) == (100, 100)
        assert (p.x, p.y) == (6, 6)
        assert p.width == pytest.approx(30)
        assert p.height == pytest.approx(15)
        assert p.opacity == TILE_OPACITY
        assert not p.stretch

    def test_stretch_mode(self):
        """Stretch covers the whole area, ignoring the aspect ratio."""
        fill = PatternFill(repeat_mode=RepeatMode.STRETCH)
        p = place_tile_content(fill, 400, 300, 10, 50)
        assert (p.tile_width, p.tile_height) == (400, 300)
        assert (p.x, p.y, p.width, p.height) == (0, 0, 400, 300)
        assert p.stretch
        assert p.opacity == AREA_OPACITY

    def test_center_mode(self):
        """Center fits content to 30% of the smaller side and centres it."""
        fill = PatternFill(repeat_mode=RepeatMode.CENTER)
        p = place_tile_content(fill, 400, 300, 100, 50)
        assert p.width == pytest.approx(90)
        assert p.height == pytest.approx(45)
        assert p.x == pytest.approx(155)
        assert p.y == pytest.approx(127.5)

    @pytest.mark.parametrize(
        "position, expected_x, expected_y",
        [
            (0, 0, 0),
            (50, 125, 75),
            (100, 250, 150),
        ],
    )
    def test_custom_position(self, position: float, expected_x: float, expected_y: float):
        """0 is flush left/top, 100 is flush right/bottom."""
        fill = PatternFill(
            repeat_mode=RepeatMode.CUSTOM,
            custom_size=50,
            custom_position_x=position,
            custom_position_y=position,
        )
        p = place_tile_content(fill, 400, 300, 100, 100)
        assert p.width == pytest.approx(150)
        assert p.x == pytest.approx(expected_x)
        assert p.y == pytest.approx(expected_y)

    def test_custom_content_larger_than_area_stays_at_origin(self):
        """Content wider than the area is never pushed to a negative offset."""
        fill = PatternFill(repeat_mode=RepeatMode.CUSTOM, custom_size=100, custom_position_x=100)
        p = place_tile_content(fill, 400, 300, 400, 100)
        assert p.width == pytest.approx(300)
        assert p.x == pytest.approx(100)

    def test_degenerate_content(self):
        """Zero-size content gets a zero-size box instead of an error."""
        p = place_tile_content(PatternFill(repeat_mode=RepeatMode.CENTER), 400, 300, 0, 0)
        assert (p.width, p.height) == (0, 0)


# =============================================================================
# CONTENT
# =============================================================================


class TestVectorMarkup:
    """Test cloning of vector artwork into the drawing."""

    def test_children_flattened(self):
        """Child elements lose their SVG namespace prefix."""
        markup = (
            '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 10 10">'
            '<rect width="5" height="5" fill="red"/><circle r="2"/></svg>'
        )
        cloned = vector_markup(vector_asset(markup))
        assert cloned.startswith("<rect")
        assert "<circle" in cloned
        assert "ns0" not in cloned
        assert "xmlns" not in cloned

    def test_xlink_href_flattened(self):
        """xlink:href becomes a plain href."""
        markup = (
            '<svg xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink">'
            '<use xlink:href="#shape"/></svg>'
        )
        cloned = vector_markup(vector_asset(markup))
        assert 'href="#shape"' in cloned
        assert "xlink" not in cloned

    def test_foreign_elements_skipped(self):
        """Editor metadata in other namespaces is dropped."""
        markup = (
            '<svg xmlns="http://www.w3.org/2000/svg" '
            'xmlns:sodipodi="http://sodipodi.sourceforge.net/DTD/sodipodi-0.dtd">'
            '<sodipodi:namedview id="view"/><path d="M 0 0 L 1 1"/></svg>'
        )
        cloned = vector_markup(vector_asset(markup))
        assert "namedview" not in cloned
        assert cloned.startswith("<path")

    @pytest.mark.parametrize(
        "markup",
        ["", '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 10 10"/>', "<svg><g>"],
    )
    def test_nothing_drawable(self, markup: str):
        """Empty, childless, or unparseable markup gives None."""
        assert vector_markup(vector_asset(markup)) is None

    def test_content_transform_scales_and_translates(self):
        """A 10x10 viewBox mapped onto a 20x20 box at (5, 5)."""
        assert content_transform((0, 0, 10, 10), 5, 5, 20, 20) == "matrix(2 0 0 2 5 5)"

    def test_content_transform_view_box_origin(self):
        """A shifted viewBox origin is translated away."""
        assert content_transform((10, 20, 10, 10), 0, 0, 10, 10) == "matrix(1 0 0 1 -10 -20)"

    def test_raster_tile_content(self):
        """Rasters are embedded as images; stretch disables aspect preservation."""
        stretch = place_tile_content(PatternFill(repeat_mode=RepeatMode.STRETCH), 400, 300, 40, 20)
        markup = tile_content(raster_asset(), stretch)
        assert markup.startswith("<image")
        assert 'preserveAspectRatio="none"' in markup
        assert "data:image/png;base64," in markup

        tile = place_tile_content(PatternFill(), 400, 300, 40, 20)
        assert 'preserveAspectRatio="xMidYMid meet"' in tile_content(raster_asset(), tile)


# =============================================================================
# RESOLUTION
# =============================================================================


class TestResolveFill:
    """Test fill resolution against the fillable area."""

    def test_solid(self):
        """Solid fills resolve to their colour."""
        ref = asyncio.run(resolve_fill(SolidFill(hex_color="#123456"), None, AREA))
        assert ref == SolidFillRef("#123456")
        assert ref.paint() == "#123456"

    def test_pattern_without_asset(self):
        """A pattern with no upload resolves to None."""
        assert asyncio.run(resolve_fill(PatternFill(), None, AREA)) is None

    def test_pattern_with_empty_vector(self):
        """Vector artwork with nothing to draw resolves to None."""
        asset = vector_asset('<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 10 10"/>')
        assert asyncio.run(resolve_fill(PatternFill(), asset, AREA)) is None

    def test_pattern_with_vector(self):
        """Drawable artwork produces a user-space pattern anchored at the area."""
        asset = vector_asset('<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 10 10"><rect/></svg>')
        ref = asyncio.run(resolve_fill(PatternFill(repeat_mode=RepeatMode.TILE), asset, AREA))
        assert isinstance(ref, PatternTile)
        assert ref.paint() == f"url(#{PATTERN_ID})"

        svg = ref.to_svg()
        assert f'id="{PATTERN_ID}"' in svg
        assert 'patternUnits="userSpaceOnUse"' in svg
        assert 'x="120" y="280"' in svg
        assert 'width="100" height="100"' in svg
        assert "matrix(3 0 0 3 6 6)" in svg

    def test_pattern_with_raster(self):
        """Raster artwork is embedded in an area-sized tile."""
        fill = PatternFill(repeat_mode=RepeatMode.CENTER)
        ref = asyncio.run(resolve_fill(fill, raster_asset(), AREA))
        assert isinstance(ref, PatternTile)
        assert (ref.placement.tile_width, ref.placement.tile_height) == (400, 300)
        assert "<image" in ref.content
