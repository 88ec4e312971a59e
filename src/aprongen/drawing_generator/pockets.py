"""
Pocket geometry.

Pockets sit on the lower section, centred on the body. Their top edge is
``position_y`` percent of the way down the lower section. All pocket shapes
use the pocket colour at partial opacity so the body fill shows through, and
a dashed stitch outline.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, assert_never

from ..design import DoublePockets, MultiplePockets, NoPockets, SinglePocket
from .constants import (
    OUTLINE_COLOR,
    POCKET_DIVIDER_WIDTH,
    POCKET_FILL_OPACITY,
    POCKET_STITCH_DASH,
    POCKET_STROKE_WIDTH,
    SCALE,
)
from .primitives import DrawingPrimitive, Layer, LinePrimitive, RectPrimitive, Style

if TYPE_CHECKING:
    from .layout_engine import ApronFrame


def _pocket_top(frame: ApronFrame, position_y: float) -> float:
    return frame.waist_y + frame.lower_height * position_y / 100.0


def _rect(x: float, y: float, width: float, height: float, style: Style) -> RectPrimitive:
    return RectPrimitive(x, y, width, height, layer=Layer.POCKETS, role="pocket", style=style)


def pocket_primitives(frame: ApronFrame) -> list[DrawingPrimitive]:
    """Rectangles (and dividers) for the configured pocket layout."""
    config = frame.config
    pockets = config.pockets
    style = Style(
        fill=config.pocket_color.hex_color,
        fill_opacity=POCKET_FILL_OPACITY,
        stroke=OUTLINE_COLOR,
        stroke_width=POCKET_STROKE_WIDTH,
        dasharray=POCKET_STITCH_DASH,
    )
    cx = frame.center_x

    match pockets:
        case NoPockets():
            return []

        case SinglePocket():
            width = pockets.width * SCALE
            height = pockets.height * SCALE
            return [_rect(cx - width / 2, _pocket_top(frame, pockets.position_y), width, height, style)]

        case DoublePockets():
            left_w, left_h = pockets.left.width * SCALE, pockets.left.height * SCALE
            right_w, right_h = pockets.right.width * SCALE, pockets.right.height * SCALE
            spacing = max(pockets.spacing, 0.0) * SCALE
            top = _pocket_top(frame, pockets.position_y)

            # The pair is centred as one unit
            start_x = cx - (left_w + spacing + right_w) / 2
            return [
                _rect(start_x, top, left_w, left_h, style),
                _rect(start_x + left_w + spacing, top, right_w, right_h, style),
            ]

        case MultiplePockets():
            total = pockets.total_width * SCALE
            height = pockets.height * SCALE
            pocket_w = total / pockets.count
            start_x = cx - total / 2
            top = _pocket_top(frame, pockets.position_y)

            primitives: list[DrawingPrimitive] = [
                _rect(start_x + i * pocket_w, top, pocket_w, height, style)
                for i in range(pockets.count)
            ]
            divider = Style(stroke=OUTLINE_COLOR, stroke_width=POCKET_DIVIDER_WIDTH)
            for i in range(1, pockets.count):
                x = start_x + i * pocket_w
                primitives.append(LinePrimitive(
                    x, top, x, top + height,
                    layer=Layer.POCKETS, role="pocket-divider", style=divider,
                ))
            return primitives

        case _:
            assert_never(pockets)
