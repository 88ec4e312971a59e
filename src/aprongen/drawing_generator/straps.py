"""
Strap geometry.

Five neck strap constructions share the body's top-left and top-right
anchor points:

    classic     vertical stubs joined by a half-circle arc
    halter      two lines converging above the body centre, closed by a ring
    cross       two straps rising then crossing over to the opposite side;
                the waist is tied through eyelets instead of separate straps
    adjustable  two lines meeting a slider drawn above the body
    tie         two lines ending in end caps with a short flourish

Every style except cross also gets a left and right waist strap running
outward from the waist line corners. Waist straps are drawn at a preview
length (they would otherwise run off the canvas) and labelled with their
real length.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, assert_never

from ..design import StrapStyle
from .constants import (
    BACKGROUND_COLOR,
    CLASSIC_STUB_RATIO,
    CROSS_TIP_DROP_RATIO,
    CROSS_TIP_OFFSET_RATIO,
    CROSS_WAIST_DROP_RATIO,
    EYELET_INSET_CM,
    EYELET_RADIUS_CM,
    FONT_FAMILY,
    HALTER_RING_RADIUS_CM,
    SCALE,
    SLIDER_HEIGHT_CM,
    SLIDER_WIDTH_CM,
    STRAP_ARC_HEIGHT_CM,
    STRAP_LABEL_FONT_SIZE,
    STRAP_LABEL_GAP,
    STRAP_WIDTH,
    TEXT_COLOR,
    THREADED_STRAP_DASH,
    THREADED_STRAP_OPACITY,
    TIE_CAP_RADIUS_CM,
    TIE_FLOURISH_CM,
    TIE_SPREAD_CM,
    WAIST_STRAP_MAX_PREVIEW_CM,
    WAIST_STRAP_PREVIEW_RATIO,
)
from .dimensions import format_dimension
from .primitives import (
    CirclePrimitive,
    DrawingPrimitive,
    Layer,
    LinePrimitive,
    PathPrimitive,
    RectPrimitive,
    Style,
    TextPrimitive,
    fmt,
)
from .view_area import ViewArea

if TYPE_CHECKING:
    from .layout_engine import ApronFrame


def _strap_style(color: str) -> Style:
    return Style(stroke=color, stroke_width=STRAP_WIDTH, linecap="round")


def _line(x1, y1, x2, y2, color: str, role: str = "strap") -> LinePrimitive:
    return LinePrimitive(x1, y1, x2, y2, layer=Layer.STRAPS, role=role, style=_strap_style(color))


def _label(x: float, y: float, text: str, role: str, anchor: str = "middle") -> TextPrimitive:
    return TextPrimitive(
        x, y, text,
        font_size=STRAP_LABEL_FONT_SIZE,
        font_family=FONT_FAMILY,
        anchor=anchor,
        layer=Layer.STRAPS,
        role=role,
        style=Style(fill=TEXT_COLOR),
    )


# =============================================================================
# NECK STRAPS
# =============================================================================
# Each builder returns (primitives, top_y) where top_y is the highest point of
# the strap, used to place the length label.

def _classic(frame: ApronFrame, color: str) -> tuple[list[DrawingPrimitive], float]:
    (lx, y), (rx, _) = frame.top_left, frame.top_right
    stub = STRAP_ARC_HEIGHT_CM * SCALE * CLASSIC_STUB_RATIO
    radius = max(frame.top_width / 2, 0.0)
    d = (
        f"M {fmt(lx)} {fmt(y)} L {fmt(lx)} {fmt(y - stub)} "
        f"A {fmt(radius)} {fmt(radius)} 0 0 1 {fmt(rx)} {fmt(y - stub)} "
        f"L {fmt(rx)} {fmt(y)}"
    )
    path = PathPrimitive(d, layer=Layer.STRAPS, role="strap", style=_strap_style(color))
    return [path], y - stub - radius


def _halter(frame: ApronFrame, color: str) -> tuple[list[DrawingPrimitive], float]:
    (lx, y), (rx, _) = frame.top_left, frame.top_right
    apex_x = frame.center_x
    apex_y = y - STRAP_ARC_HEIGHT_CM * SCALE
    ring_r = HALTER_RING_RADIUS_CM * SCALE
    primitives: list[DrawingPrimitive] = [
        _line(lx, y, apex_x, apex_y, color),
        _line(rx, y, apex_x, apex_y, color),
        CirclePrimitive(
            apex_x, apex_y, ring_r,
            layer=Layer.STRAPS,
            role="strap-ring",
            style=Style(fill=BACKGROUND_COLOR, stroke=color, stroke_width=STRAP_WIDTH / 2),
        ),
    ]
    return primitives, apex_y - ring_r


def _cross(frame: ApronFrame, color: str) -> tuple[list[DrawingPrimitive], float]:
    (lx, y), (rx, _) = frame.top_left, frame.top_right
    rise_y = y - STRAP_ARC_HEIGHT_CM * SCALE
    tip_y = y - STRAP_ARC_HEIGHT_CM * SCALE * CROSS_TIP_DROP_RATIO
    tip_offset = frame.top_width * CROSS_TIP_OFFSET_RATIO
    cx = frame.center_x

    primitives: list[DrawingPrimitive] = []
    # Left strap lands right of centre, right strap lands left of centre
    for anchor_x, tip_x in ((lx, cx + tip_offset), (rx, cx - tip_offset)):
        d = (
            f"M {fmt(anchor_x)} {fmt(y)} L {fmt(anchor_x)} {fmt(rise_y)} "
            f"L {fmt(tip_x)} {fmt(tip_y)}"
        )
        primitives.append(PathPrimitive(d, layer=Layer.STRAPS, role="strap", style=_strap_style(color)))
    return primitives, rise_y


def _adjustable(frame: ApronFrame, color: str) -> tuple[list[DrawingPrimitive], float]:
    (lx, y), (rx, _) = frame.top_left, frame.top_right
    slider = ViewArea.centered_at(
        frame.center_x, y - STRAP_ARC_HEIGHT_CM * SCALE,
        SLIDER_WIDTH_CM * SCALE, SLIDER_HEIGHT_CM * SCALE,
    )
    primitives: list[DrawingPrimitive] = [
        _line(lx, y, slider.left, slider.center_y, color),
        _line(rx, y, slider.right, slider.center_y, color),
        RectPrimitive(
            slider.x, slider.y, slider.width, slider.height,
            layer=Layer.STRAPS,
            role="strap-slider",
            style=Style(fill=BACKGROUND_COLOR, stroke=color, stroke_width=2),
        ),
    ]
    return primitives, slider.top


def _tie(frame: ApronFrame, color: str) -> tuple[list[DrawingPrimitive], float]:
    (lx, y), (rx, _) = frame.top_left, frame.top_right
    tip_y = y - STRAP_ARC_HEIGHT_CM * SCALE
    spread = TIE_SPREAD_CM * SCALE
    flourish = TIE_FLOURISH_CM * SCALE
    cap_r = TIE_CAP_RADIUS_CM * SCALE
    cx = frame.center_x

    primitives: list[DrawingPrimitive] = []
    for anchor_x, tip_x, outward in ((lx, cx - spread, -1), (rx, cx + spread, 1)):
        primitives.append(_line(anchor_x, y, tip_x, tip_y, color))
        primitives.append(CirclePrimitive(
            tip_x, tip_y, cap_r,
            layer=Layer.STRAPS,
            role="strap-end-cap",
            style=Style(fill=color),
        ))
        primitives.append(LinePrimitive(
            tip_x, tip_y, tip_x + outward * flourish, tip_y - flourish,
            layer=Layer.STRAPS,
            role="strap-flourish",
            style=Style(stroke=color, stroke_width=STRAP_WIDTH / 2, linecap="round"),
        ))
    return primitives, tip_y - flourish


# =============================================================================
# WAIST STRAPS
# =============================================================================

def waist_preview_length(waist_strap_cm: float) -> float:
    """Drawn length (px) of a waist strap of ``waist_strap_cm``."""
    preview_cm = min(waist_strap_cm * WAIST_STRAP_PREVIEW_RATIO, WAIST_STRAP_MAX_PREVIEW_CM)
    return max(preview_cm, 0.0) * SCALE


def _waist_straps(frame: ApronFrame, color: str) -> list[DrawingPrimitive]:
    length = waist_preview_length(frame.config.waist_strap)
    label = format_dimension(frame.config.waist_strap)
    primitives: list[DrawingPrimitive] = []
    for (x, y), direction in ((frame.waist_left, -1), (frame.waist_right, 1)):
        end_x = x + direction * length
        primitives.append(_line(x, y, end_x, y, color, role="waist-strap"))
        primitives.append(_label((x + end_x) / 2, y - STRAP_LABEL_GAP, label, "waist-strap-label"))
    return primitives


def _cross_waist_ties(frame: ApronFrame, color: str) -> list[DrawingPrimitive]:
    """
    Eyelets inside the waist line corners with straps threaded through them.

    The portion between eyelet and body edge runs through the fabric and is
    drawn dashed and lighter; the free end runs outward and down.
    """
    length = waist_preview_length(frame.config.waist_strap)
    label = format_dimension(frame.config.waist_strap)
    inset = EYELET_INSET_CM * SCALE
    threaded = Style(
        stroke=color, stroke_width=STRAP_WIDTH, linecap="round",
        opacity=THREADED_STRAP_OPACITY, dasharray=THREADED_STRAP_DASH,
    )

    primitives: list[DrawingPrimitive] = []
    for (edge_x, y), direction in ((frame.waist_left, -1), (frame.waist_right, 1)):
        eyelet_x = edge_x - direction * inset
        end_x = edge_x + direction * length
        end_y = y + length * CROSS_WAIST_DROP_RATIO
        primitives.append(LinePrimitive(
            eyelet_x, y, edge_x, y, layer=Layer.STRAPS, role="threaded-strap", style=threaded,
        ))
        primitives.append(_line(edge_x, y, end_x, end_y, color, role="waist-strap"))
        primitives.append(CirclePrimitive(
            eyelet_x, y, EYELET_RADIUS_CM * SCALE,
            layer=Layer.STRAPS,
            role="eyelet",
            style=Style(fill=BACKGROUND_COLOR, stroke=color, stroke_width=2),
        ))
        primitives.append(_label(end_x, end_y + STRAP_LABEL_GAP + STRAP_LABEL_FONT_SIZE, label, "waist-strap-label"))
    return primitives


# =============================================================================
# DISPATCH
# =============================================================================

def _neck_strap(frame: ApronFrame, color: str) -> tuple[list[DrawingPrimitive], float]:
    style = frame.config.strap_style
    match style:
        case StrapStyle.CLASSIC:
            neck, top_y = _classic(frame, color)
        case StrapStyle.HALTER:
            neck, top_y = _halter(frame, color)
        case StrapStyle.CROSS:
            neck, top_y = _cross(frame, color)
        case StrapStyle.ADJUSTABLE:
            neck, top_y = _adjustable(frame, color)
        case StrapStyle.TIE:
            neck, top_y = _tie(frame, color)
        case _:
            assert_never(style)
    return neck, top_y


def neck_strap_top(frame: ApronFrame) -> float:
    """Highest y reached by the neck strap of ``frame``, its label excluded."""
    return _neck_strap(frame, frame.config.strap_color.hex_color)[1]


def strap_primitives(frame: ApronFrame) -> list[DrawingPrimitive]:
    """Neck strap, waist straps (or cross-style eyelet ties), and length labels."""
    config = frame.config
    color = config.strap_color.hex_color
    neck, top_y = _neck_strap(frame, color)

    primitives = list(neck)
    primitives.append(_label(
        frame.center_x, top_y - STRAP_LABEL_GAP,
        f"NECK STRAP: {format_dimension(config.neck_strap)}",
        "neck-strap-label",
    ))

    if config.strap_style is StrapStyle.CROSS:
        primitives += _cross_waist_ties(frame, color)
    else:
        primitives += _waist_straps(frame, color)
    return primitives
