"""
Dimension System for Apron Drawings

Linear dimensions for the body's five principal measurements:
- Top width (above the top edge)
- Bottom width (below the hem)
- Total height (left of the body)
- Upper and lower section heights (right of the body, stacked outward)

Each dimension is a line parallel to the measured edge, offset outward by a
fixed gap, with filled arrowheads at both ends and a bilingual label
("45CM/17.7INCH"). Horizontal labels sit above their line; vertical labels are
rotated -90 degrees and sit beside it.

Components:
- DimensionKind: Which measurement a dimension annotates
- DimensionStyle: Line, arrow, and text styling
- horizontal_dimension / vertical_dimension: Primitive builders
- dimension_primitives: All enabled dimensions for one apron frame
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from ..design import INCH_PER_CM
from .constants import (
    ANNOTATION_COLOR,
    ARROW_SIZE,
    BOTTOM_WIDTH_OFFSET_CM,
    DIMENSION_FONT_SIZE,
    DIMENSION_LINE_WIDTH,
    DIMENSION_TEXT_OFFSET,
    FONT_FAMILY,
    LOWER_HEIGHT_OFFSET_CM,
    SCALE,
    TEXT_COLOR,
    TOTAL_HEIGHT_OFFSET_CM,
    UPPER_HEIGHT_OFFSET_CM,
)
from .primitives import (
    DrawingPrimitive,
    Layer,
    LinePrimitive,
    PolygonPrimitive,
    Style,
    TextPrimitive,
)

if TYPE_CHECKING:
    from .layout_engine import ApronFrame


# =============================================================================
# DATA CLASSES
# =============================================================================

class DimensionKind(str, Enum):
    """Measurements that can be annotated on the drawing."""
    TOP_WIDTH = "top_width"
    BOTTOM_WIDTH = "bottom_width"
    TOTAL_HEIGHT = "total_height"
    UPPER_HEIGHT = "upper_height"
    LOWER_HEIGHT = "lower_height"


DEFAULT_DIMENSIONS: tuple[DimensionKind, ...] = tuple(DimensionKind)


@dataclass
class DimensionStyle:
    """
    Dimension styling configuration.

    Arrowheads are isosceles triangles ``arrow_length`` long and
    ``arrow_width`` wide at the base, tip on the dimension line end.
    """
    # Line styling
    line_stroke_width: float = DIMENSION_LINE_WIDTH
    line_color: str = ANNOTATION_COLOR

    # Arrow styling
    arrow_length: float = ARROW_SIZE
    arrow_width: float = ARROW_SIZE

    # Text styling
    font_family: str = FONT_FAMILY
    font_size: float = DIMENSION_FONT_SIZE
    text_color: str = TEXT_COLOR
    text_offset: float = DIMENSION_TEXT_OFFSET


def format_dimension(value_cm: float) -> str:
    """
    Format a length for a dimension label.

    Example:
        >>> format_dimension(45)
        '45CM/17.7INCH'
    """
    return f"{round(value_cm, 2):g}CM/{value_cm * INCH_PER_CM:.1f}INCH"


# =============================================================================
# PRIMITIVE BUILDERS
# =============================================================================

_DIRECTIONS = {
    "left": (-1.0, 0.0),
    "right": (1.0, 0.0),
    "up": (0.0, -1.0),
    "down": (0.0, 1.0),
}


def arrowhead(
    x: float,
    y: float,
    direction: str,
    style: DimensionStyle,
    role: str = "dimension-arrow",
    layer: Layer = Layer.DIMENSIONS,
) -> PolygonPrimitive:
    """
    Filled arrowhead with its tip at (x, y).

    Args:
        x, y: Arrow tip position
        direction: "left", "right", "up", or "down"
        style: DimensionStyle configuration
    """
    dx, dy = _DIRECTIONS[direction]
    al = style.arrow_length
    aw = style.arrow_width / 2

    # Perpendicular direction
    px, py = -dy, dx
    base_x = x - dx * al
    base_y = y - dy * al

    return PolygonPrimitive(
        points=(
            (x, y),
            (base_x + px * aw, base_y + py * aw),
            (base_x - px * aw, base_y - py * aw),
        ),
        layer=layer,
        role=role,
        style=Style(fill=style.line_color),
    )


def horizontal_dimension(
    x1: float,
    x2: float,
    y: float,
    label: str,
    style: DimensionStyle | None = None,
    role: str = "dimension",
) -> list[DrawingPrimitive]:
    """Dimension line from x1 to x2 at height y, label centred above it."""
    style = style or DimensionStyle()
    line_style = Style(stroke=style.line_color, stroke_width=style.line_stroke_width)
    return [
        LinePrimitive(x1, y, x2, y, layer=Layer.DIMENSIONS, role=role, style=line_style),
        arrowhead(x1, y, "left", style),
        arrowhead(x2, y, "right", style),
        TextPrimitive(
            (x1 + x2) / 2, y - style.text_offset, label,
            font_size=style.font_size,
            font_family=style.font_family,
            layer=Layer.DIMENSIONS,
            role=f"{role}-label",
            style=Style(fill=style.text_color),
        ),
    ]


def vertical_dimension(
    x: float,
    y1: float,
    y2: float,
    label: str,
    side: str = "left",
    style: DimensionStyle | None = None,
    role: str = "dimension",
) -> list[DrawingPrimitive]:
    """
    Dimension line from y1 to y2 at x, label rotated -90 degrees.

    ``side`` picks which side of the line the label sits on. Rotated glyphs
    extend toward -x from their anchor, so a right-side label is anchored one
    font height further out.
    """
    style = style or DimensionStyle()
    if side == "left":
        text_x = x - style.text_offset
    else:
        text_x = x + style.text_offset + style.font_size

    line_style = Style(stroke=style.line_color, stroke_width=style.line_stroke_width)
    return [
        LinePrimitive(x, y1, x, y2, layer=Layer.DIMENSIONS, role=role, style=line_style),
        arrowhead(x, y1, "up", style),
        arrowhead(x, y2, "down", style),
        TextPrimitive(
            text_x, (y1 + y2) / 2, label,
            font_size=style.font_size,
            font_family=style.font_family,
            rotate=-90,
            layer=Layer.DIMENSIONS,
            role=f"{role}-label",
            style=Style(fill=style.text_color),
        ),
    ]


# =============================================================================
# BODY DIMENSIONS
# =============================================================================

def dimension_primitives(
    frame: ApronFrame,
    kinds: tuple[DimensionKind, ...] = DEFAULT_DIMENSIONS,
    style: DimensionStyle | None = None,
) -> list[DrawingPrimitive]:
    """
    Build the requested body dimensions for ``frame``.

    Args:
        frame: Pixel geometry of the apron body
        kinds: Dimensions to draw, in any order
        style: DimensionStyle configuration

    Returns:
        Dimension primitives, in the order of ``kinds``
    """
    style = style or DimensionStyle()
    config = frame.config
    primitives: list[DrawingPrimitive] = []

    for kind in kinds:
        match kind:
            case DimensionKind.TOP_WIDTH:
                primitives += horizontal_dimension(
                    frame.top_left[0], frame.top_right[0],
                    frame.top_dimension_y,
                    format_dimension(config.top_width), style,
                )
            case DimensionKind.BOTTOM_WIDTH:
                primitives += horizontal_dimension(
                    frame.bottom_left[0], frame.bottom_right[0],
                    frame.hem_y + BOTTOM_WIDTH_OFFSET_CM * SCALE,
                    format_dimension(config.bottom_width), style,
                )
            case DimensionKind.TOTAL_HEIGHT:
                primitives += vertical_dimension(
                    frame.origin_x - TOTAL_HEIGHT_OFFSET_CM * SCALE,
                    frame.origin_y, frame.hem_y,
                    format_dimension(config.total_height), "left", style,
                )
            case DimensionKind.UPPER_HEIGHT:
                primitives += vertical_dimension(
                    frame.right_x + UPPER_HEIGHT_OFFSET_CM * SCALE,
                    frame.origin_y, frame.waist_y,
                    format_dimension(config.upper_height), "right", style,
                )
            case DimensionKind.LOWER_HEIGHT:
                primitives += vertical_dimension(
                    frame.right_x + LOWER_HEIGHT_OFFSET_CM * SCALE,
                    frame.waist_y, frame.hem_y,
                    format_dimension(config.lower_height), "right", style,
                )

    return primitives
