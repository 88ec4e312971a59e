"""
Title block and colour/pattern legend for apron drawings.
"""

from dataclasses import dataclass

from ..design import DesignConfig, PatternFill, SolidFill
from .constants import (
    FONT_FAMILY,
    LEGEND_FONT_SIZE,
    LEGEND_LINE_SPACING,
    LEGEND_SWATCH_SIZE,
    LEGEND_WIDTH,
    LEGEND_Y,
    MUTED_TEXT_COLOR,
    OUTLINE_COLOR,
    SUBTITLE_FONT_SIZE,
    SUBTITLE_Y,
    TEXT_COLOR,
    TITLE_FONT_SIZE,
    TITLE_TEXT,
    TITLE_Y,
)
from .primitives import DrawingPrimitive, Layer, RectPrimitive, Style, TextPrimitive


def parameter_summary(config: DesignConfig) -> str:
    """Short dimension summary, e.g. ``"45×60×70CM"``."""
    return f"{config.top_width:g}×{config.bottom_width:g}×{config.total_height:g}CM"


@dataclass
class TitleBlock:
    """
    Title and legend for one drawing.

    The title and parameter summary are centred at the top of the canvas; the
    legend is left-aligned in a column ``LEGEND_WIDTH`` px wide at the right.
    """
    config: DesignConfig
    canvas_width: float
    title: str = TITLE_TEXT

    def title_primitives(self) -> list[DrawingPrimitive]:
        center_x = self.canvas_width / 2
        return [
            TextPrimitive(
                center_x, TITLE_Y, self.title,
                font_size=TITLE_FONT_SIZE,
                font_family=FONT_FAMILY,
                weight="bold",
                layer=Layer.TITLE,
                role="title",
                style=Style(fill=TEXT_COLOR),
            ),
            TextPrimitive(
                center_x, SUBTITLE_Y, parameter_summary(self.config),
                font_size=SUBTITLE_FONT_SIZE,
                font_family=FONT_FAMILY,
                layer=Layer.TITLE,
                role="subtitle",
                style=Style(fill=MUTED_TEXT_COLOR),
            ),
        ]

    def _legend_text(self, x: float, y: float, text: str, role: str,
                     size: float = LEGEND_FONT_SIZE, color: str = TEXT_COLOR) -> TextPrimitive:
        return TextPrimitive(
            x, y, text,
            font_size=size,
            font_family=FONT_FAMILY,
            anchor="start",
            layer=Layer.LEGEND,
            role=role,
            style=Style(fill=color),
        )

    def legend_primitives(self) -> list[DrawingPrimitive]:
        """Body fill entry, then strap and pocket colours."""
        config = self.config
        x = self.canvas_width - LEGEND_WIDTH
        y = LEGEND_Y
        swatch_w, swatch_h = LEGEND_SWATCH_SIZE
        primitives: list[DrawingPrimitive] = []

        fill = config.fill
        if isinstance(fill, SolidFill):
            primitives.append(RectPrimitive(
                x, y - swatch_h + 5, swatch_w, swatch_h,
                layer=Layer.LEGEND,
                role="legend-swatch",
                style=Style(fill=fill.hex_color, stroke=OUTLINE_COLOR, stroke_width=1),
            ))
            primitives.append(self._legend_text(
                x + swatch_w + 10, y, f"COLOR: {fill.name} ({fill.hex_color})", "legend",
            ))
            y += LEGEND_LINE_SPACING
        elif isinstance(fill, PatternFill):
            primitives.append(self._legend_text(x, y, f"PATTERN: {fill.name}", "legend"))
            y += LEGEND_LINE_SPACING
            primitives.append(self._legend_text(
                x, y, f"REPEAT: {fill.repeat_mode.value}", "legend", size=10, color=MUTED_TEXT_COLOR,
            ))
            y += LEGEND_LINE_SPACING

        primitives.append(self._legend_text(
            x, y, f"STRAP: {config.strap_color.name} ({config.strap_color.hex_color})", "legend",
            size=10, color=MUTED_TEXT_COLOR,
        ))
        if config.pockets.count:
            y += LEGEND_LINE_SPACING
            primitives.append(self._legend_text(
                x, y, f"POCKET: {config.pocket_color.name} ({config.pocket_color.hex_color})", "legend",
                size=10, color=MUTED_TEXT_COLOR,
            ))
        return primitives
