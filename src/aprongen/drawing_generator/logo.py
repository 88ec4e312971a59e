"""
Logo placement.

The logo box is ``width`` cm wide and ``width / aspect_ratio`` cm tall,
offset from the body's top-left reference point. Uploaded artwork replaces
the configured aspect ratio with its own. Without artwork a dashed
placeholder box with the logo name is drawn.

Two annotations are always drawn for an enabled logo: the box width below
it and the vertical offset beside it, each with small arrowheads.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..assets import Asset
from .constants import (
    ANNOTATION_COLOR,
    FONT_FAMILY,
    LOGO_ANNOTATION_GAP_CM,
    LOGO_FONT_SIZE,
    MUTED_TEXT_COLOR,
    SCALE,
    SMALL_ARROW_SIZE,
    TEXT_COLOR,
)
from .dimensions import DimensionStyle, arrowhead
from .fills import content_transform, vector_markup
from .primitives import (
    DrawingPrimitive,
    GroupPrimitive,
    ImagePrimitive,
    Layer,
    LinePrimitive,
    RectPrimitive,
    Style,
    TextPrimitive,
)
from .view_area import ViewArea

if TYPE_CHECKING:
    from .layout_engine import ApronFrame


ANNOTATION_STYLE = DimensionStyle(
    arrow_length=SMALL_ARROW_SIZE,
    arrow_width=SMALL_ARROW_SIZE,
    font_size=LOGO_FONT_SIZE,
    text_offset=4,
)


def logo_box(frame: ApronFrame, asset: Asset | None = None) -> ViewArea:
    """Logo bounding box in px."""
    logo = frame.config.logo
    if asset is not None:
        logo = logo.with_aspect_ratio(asset.aspect_ratio)
    return ViewArea(
        frame.origin_x + logo.offset_x * SCALE,
        frame.origin_y + logo.offset_y * SCALE,
        logo.width * SCALE,
        logo.height * SCALE,
    )


def _artwork(box: ViewArea, asset: Asset | None, name: str, opacity: float) -> list[DrawingPrimitive]:
    style = Style(fill=None, opacity=opacity)
    if asset is not None and asset.is_vector:
        markup = vector_markup(asset)
        if markup is not None:
            view_box = asset.view_box or (0.0, 0.0, asset.width, asset.height)
            return [GroupPrimitive(
                markup,
                transform=content_transform(view_box, box.x, box.y, box.width, box.height),
                layer=Layer.LOGO,
                role="logo",
                style=style,
            )]
    elif asset is not None and asset.data:
        return [ImagePrimitive(
            box.x, box.y, box.width, box.height, asset.data_uri,
            layer=Layer.LOGO,
            role="logo",
            style=style,
        )]

    return [
        RectPrimitive(
            box.x, box.y, box.width, box.height,
            layer=Layer.LOGO,
            role="logo-placeholder",
            style=Style(stroke=ANNOTATION_COLOR, stroke_width=1, dasharray="4,2"),
        ),
        TextPrimitive(
            box.center_x, box.center_y + LOGO_FONT_SIZE / 3, name,
            font_size=LOGO_FONT_SIZE,
            font_family=FONT_FAMILY,
            layer=Layer.LOGO,
            role="logo-name",
            style=Style(fill=MUTED_TEXT_COLOR),
        ),
    ]


def _annotations(frame: ApronFrame, box: ViewArea) -> list[DrawingPrimitive]:
    logo = frame.config.logo
    gap = LOGO_ANNOTATION_GAP_CM * SCALE
    line_style = Style(stroke=ANNOTATION_STYLE.line_color, stroke_width=ANNOTATION_STYLE.line_stroke_width)
    text_style = Style(fill=TEXT_COLOR)

    # Width, below the box
    y = box.bottom + gap
    width_annotation: list[DrawingPrimitive] = [
        LinePrimitive(box.left, y, box.right, y, layer=Layer.LOGO, role="logo-annotation", style=line_style),
        arrowhead(box.left, y, "left", ANNOTATION_STYLE, role="logo-annotation-arrow", layer=Layer.LOGO),
        arrowhead(box.right, y, "right", ANNOTATION_STYLE, role="logo-annotation-arrow", layer=Layer.LOGO),
        TextPrimitive(
            box.center_x, y + ANNOTATION_STYLE.text_offset + LOGO_FONT_SIZE, f"{logo.width:g}CM",
            font_size=LOGO_FONT_SIZE, font_family=FONT_FAMILY,
            layer=Layer.LOGO, role="logo-annotation-label", style=text_style,
        ),
    ]

    # Vertical offset from the top reference, left of the box
    x = box.left - gap
    offset_annotation: list[DrawingPrimitive] = [
        LinePrimitive(x, frame.origin_y, x, box.top, layer=Layer.LOGO, role="logo-annotation", style=line_style),
        arrowhead(x, frame.origin_y, "up", ANNOTATION_STYLE, role="logo-annotation-arrow", layer=Layer.LOGO),
        arrowhead(x, box.top, "down", ANNOTATION_STYLE, role="logo-annotation-arrow", layer=Layer.LOGO),
        TextPrimitive(
            x - ANNOTATION_STYLE.text_offset, (frame.origin_y + box.top) / 2, f"{logo.offset_y:g}CM",
            font_size=LOGO_FONT_SIZE, font_family=FONT_FAMILY, anchor="end",
            layer=Layer.LOGO, role="logo-annotation-label", style=text_style,
        ),
    ]
    return width_annotation + offset_annotation


def logo_primitives(frame: ApronFrame, asset: Asset | None = None) -> list[DrawingPrimitive]:
    """Logo artwork (or placeholder) plus its two annotations; empty when disabled."""
    logo = frame.config.logo
    if not logo.enabled:
        return []
    box = logo_box(frame, asset)
    return _artwork(box, asset, logo.name, logo.opacity / 100.0) + _annotations(frame, box)
