"""
Layout engine for apron drawings.

This module provides the geometry entry point:
- ApronFrame: pixel geometry of the body derived from one DesignConfig
- body_outline_path: the closed silhouette path
- layout: every drawable primitive for the body, straps, pockets, logo, and
  dimensions, as an immutable tuple

Coordinates come from one origin (the body's top-left reference point,
moved down only when a tall neck strap needs the room) plus the uniform
``SCALE`` in px per cm. Geometry never raises for numeric input, however out
of range; sizes that would go negative are clamped where they are drawn.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from ..assets import Asset
from ..design import DesignConfig, PatternFill
from .constants import (
    CANVAS_MARGIN_X_CM,
    CANVAS_MARGIN_Y_CM,
    DIMENSION_FONT_SIZE,
    DIMENSION_TEXT_OFFSET,
    FONT_FAMILY,
    HEADER_HEIGHT,
    MUTED_TEXT_COLOR,
    ORIGIN_X_CM,
    ORIGIN_Y_CM,
    OUTLINE_COLOR,
    OUTLINE_WIDTH,
    PATTERN_BASE_COLOR,
    SCALE,
    SHOULDER_CURVE_HEIGHT_RATIO,
    SHOULDER_CURVE_RATIO,
    STRAP_LABEL_FONT_SIZE,
    STRAP_LABEL_GAP,
    TOP_WIDTH_GAP,
)
from .dimensions import DEFAULT_DIMENSIONS, DimensionKind, DimensionStyle, dimension_primitives
from .fills import FillRef
from .logo import logo_primitives
from .pockets import pocket_primitives
from .primitives import DrawingPrimitive, Layer, PathPrimitive, Style, TextPrimitive, fmt
from .straps import neck_strap_top, strap_primitives
from .view_area import ViewArea


@dataclass(frozen=True)
class ApronFrame:
    """
    Pixel geometry of the apron body.

    The top edge is centred over the wider of the two edges; the bounding box
    starts at (origin_x, origin_y) and is ``max_width`` wide.

    Attributes:
        config: Design the frame was computed from
        origin_x, origin_y: Top-left reference point (px)
        top_start_x: Left end of the top edge
        bottom_start_x: Left end of the hem
        top_width, bottom_width: Edge widths (px)
        upper_height, lower_height: Section heights (px)
        max_width: Bounding box width (px)
    """
    config: DesignConfig
    origin_x: float
    origin_y: float
    top_start_x: float
    bottom_start_x: float
    top_width: float
    bottom_width: float
    upper_height: float
    lower_height: float
    max_width: float

    @classmethod
    def from_config(cls, config: DesignConfig) -> ApronFrame:
        ox = ORIGIN_X_CM * SCALE
        oy = ORIGIN_Y_CM * SCALE
        max_width = config.max_width * SCALE
        top_width = config.top_width * SCALE
        bottom_width = config.bottom_width * SCALE
        frame = cls(
            config=config,
            origin_x=ox,
            origin_y=oy,
            top_start_x=ox + (max_width - top_width) / 2,
            bottom_start_x=ox + (max_width - bottom_width) / 2,
            top_width=top_width,
            bottom_width=bottom_width,
            upper_height=config.upper_height * SCALE,
            lower_height=config.lower_height * SCALE,
            max_width=max_width,
        )

        # Tall neck straps push the body down so the top width dimension
        # and its label stay below the header
        overflow = HEADER_HEIGHT - (frame.top_dimension_y - DIMENSION_TEXT_OFFSET - DIMENSION_FONT_SIZE)
        if overflow > 0:
            frame = replace(frame, origin_y=oy + overflow)
        return frame

    # -------------------------------------------------------------------------
    # Anchor points
    # -------------------------------------------------------------------------

    @property
    def waist_y(self) -> float:
        """Y of the line between the upper and lower sections."""
        return self.origin_y + self.upper_height

    @property
    def hem_y(self) -> float:
        return self.origin_y + self.upper_height + self.lower_height

    @property
    def right_x(self) -> float:
        """Right edge of the bounding box."""
        return self.origin_x + self.max_width

    @property
    def center_x(self) -> float:
        return self.origin_x + self.max_width / 2

    @property
    def top_left(self) -> tuple[float, float]:
        return (self.top_start_x, self.origin_y)

    @property
    def top_right(self) -> tuple[float, float]:
        return (self.top_start_x + self.top_width, self.origin_y)

    @property
    def waist_left(self) -> tuple[float, float]:
        return (self.bottom_start_x, self.waist_y)

    @property
    def waist_right(self) -> tuple[float, float]:
        return (self.bottom_start_x + self.bottom_width, self.waist_y)

    @property
    def bottom_left(self) -> tuple[float, float]:
        return (self.bottom_start_x, self.hem_y)

    @property
    def bottom_right(self) -> tuple[float, float]:
        return (self.bottom_start_x + self.bottom_width, self.hem_y)

    @property
    def fill_area(self) -> ViewArea:
        """Bounding box of the body, used as the pattern area."""
        return ViewArea(self.origin_x, self.origin_y, self.max_width, self.hem_y - self.origin_y)

    @property
    def top_dimension_y(self) -> float:
        """Y of the top width dimension line, above the neck strap and its label."""
        return neck_strap_top(self) - STRAP_LABEL_GAP - STRAP_LABEL_FONT_SIZE - TOP_WIDTH_GAP

    # -------------------------------------------------------------------------
    # Canvas
    # -------------------------------------------------------------------------

    @property
    def canvas_width(self) -> float:
        return max((self.config.max_width + CANVAS_MARGIN_X_CM) * SCALE, 1.0)

    @property
    def canvas_height(self) -> float:
        bottom_margin = (CANVAS_MARGIN_Y_CM - ORIGIN_Y_CM) * SCALE
        return max(self.origin_y + self.config.total_height * SCALE + bottom_margin, 1.0)


def body_outline_path(frame: ApronFrame) -> str:
    """
    Closed silhouette path of the body.

    Straight top edge, a quadratic shoulder curve on each side into the waist
    line, straight sides down the lower section, straight hem.
    """
    delta = frame.bottom_width - frame.top_width
    control_y = frame.origin_y + frame.upper_height * SHOULDER_CURVE_HEIGHT_RATIO
    tl_x, top_y = frame.top_left
    tr_x, _ = frame.top_right
    wl_x, waist_y = frame.waist_left
    wr_x, _ = frame.waist_right
    hem_y = frame.hem_y

    return (
        f"M {fmt(tl_x)} {fmt(top_y)} "
        f"L {fmt(tr_x)} {fmt(top_y)} "
        f"Q {fmt(tr_x + delta * SHOULDER_CURVE_RATIO)} {fmt(control_y)} {fmt(wr_x)} {fmt(waist_y)} "
        f"L {fmt(wr_x)} {fmt(hem_y)} "
        f"L {fmt(wl_x)} {fmt(hem_y)} "
        f"L {fmt(wl_x)} {fmt(waist_y)} "
        f"Q {fmt(tl_x - delta * SHOULDER_CURVE_RATIO)} {fmt(control_y)} {fmt(tl_x)} {fmt(top_y)} "
        f"Z"
    )


def _body_primitives(frame: ApronFrame, fill_ref: FillRef) -> list[DrawingPrimitive]:
    fill = frame.config.fill
    paint = fill_ref.paint() if fill_ref is not None else PATTERN_BASE_COLOR

    primitives: list[DrawingPrimitive] = [
        PathPrimitive(
            body_outline_path(frame),
            layer=Layer.BODY,
            role="apron-body",
            style=Style(fill=paint, stroke=OUTLINE_COLOR, stroke_width=OUTLINE_WIDTH),
        )
    ]

    if fill_ref is None and isinstance(fill, PatternFill):
        area = frame.fill_area
        primitives.append(TextPrimitive(
            area.center_x, area.center_y,
            f"pattern: {fill.name}, mode: {fill.repeat_mode.value}",
            font_size=12,
            font_family=FONT_FAMILY,
            layer=Layer.BODY,
            role="pattern-placeholder",
            style=Style(fill=MUTED_TEXT_COLOR),
        ))
    return primitives


def layout(
    config: DesignConfig,
    fill_ref: FillRef,
    logo_asset: Asset | None = None,
    dimensions: tuple[DimensionKind, ...] = DEFAULT_DIMENSIONS,
    dimension_style: DimensionStyle | None = None,
) -> tuple[DrawingPrimitive, ...]:
    """
    Compute every geometry primitive for a design.

    Pure function: the same inputs always give the same primitives.

    Args:
        config: Design to draw
        fill_ref: Resolved body fill (None for a pattern without artwork)
        logo_asset: Normalized logo artwork, if uploaded
        dimensions: Dimensions to annotate
        dimension_style: Dimension styling override

    Returns:
        Primitives for body, straps, pockets, logo, and dimensions
    """
    frame = ApronFrame.from_config(config)
    primitives: list[DrawingPrimitive] = []
    primitives += _body_primitives(frame, fill_ref)
    primitives += strap_primitives(frame)
    primitives += pocket_primitives(frame)
    primitives += logo_primitives(frame, logo_asset)
    primitives += dimension_primitives(frame, dimensions, dimension_style)
    return tuple(primitives)
