"""
Drawing primitives.

The geometry engine produces an immutable tuple of these records; the
document assembler serializes them. Primitives are never mutated - a redraw
builds a new tuple.

Each primitive carries:
- ``layer``: z-order bucket used by the assembler
- ``role``: semantic tag written as the SVG ``class`` (e.g. ``apron-body``,
  ``pocket``, ``dimension-label``), which keeps exported files queryable
- ``style``: presentation attributes
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from xml.sax.saxutils import escape, quoteattr


class Layer(IntEnum):
    """Z-order of primitive groups, bottom to top."""
    BODY = 1
    STRAPS = 2
    POCKETS = 3
    LOGO = 4
    DIMENSIONS = 5
    LEGEND = 6
    TITLE = 7


def fmt(value: float) -> str:
    """Format a coordinate for SVG output (2 decimals, no trailing zeros)."""
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


@dataclass(frozen=True)
class Style:
    """Presentation attributes shared by all primitives."""
    fill: str | None = "none"
    stroke: str | None = None
    stroke_width: float | None = None
    opacity: float | None = None
    fill_opacity: float | None = None
    dasharray: str | None = None
    linecap: str | None = None

    def to_attrs(self) -> str:
        attrs = [f'fill="{self.fill}"'] if self.fill is not None else []
        if self.stroke is not None:
            attrs.append(f'stroke="{self.stroke}"')
        if self.stroke_width is not None:
            attrs.append(f'stroke-width="{fmt(self.stroke_width)}"')
        if self.opacity is not None:
            attrs.append(f'opacity="{fmt(self.opacity)}"')
        if self.fill_opacity is not None:
            attrs.append(f'fill-opacity="{fmt(self.fill_opacity)}"')
        if self.dasharray is not None:
            attrs.append(f'stroke-dasharray="{self.dasharray}"')
        if self.linecap is not None:
            attrs.append(f'stroke-linecap="{self.linecap}"')
        return " ".join(attrs)


@dataclass(frozen=True, kw_only=True)
class DrawingPrimitive:
    """Base record; concrete primitives add geometry and ``to_svg``."""
    layer: Layer
    role: str = ""
    style: Style = Style()

    def _common_attrs(self) -> str:
        parts = []
        if self.role:
            parts.append(f'class="{self.role}"')
        parts.append(self.style.to_attrs())
        return " ".join(parts)

    def to_svg(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class PathPrimitive(DrawingPrimitive):
    d: str

    def to_svg(self) -> str:
        return f'<path d="{self.d}" {self._common_attrs()}/>'


@dataclass(frozen=True)
class RectPrimitive(DrawingPrimitive):
    x: float
    y: float
    width: float
    height: float

    def to_svg(self) -> str:
        return (f'<rect x="{fmt(self.x)}" y="{fmt(self.y)}" '
                f'width="{fmt(max(self.width, 0.0))}" height="{fmt(max(self.height, 0.0))}" '
                f'{self._common_attrs()}/>')


@dataclass(frozen=True)
class LinePrimitive(DrawingPrimitive):
    x1: float
    y1: float
    x2: float
    y2: float

    @property
    def length(self) -> float:
        return ((self.x2 - self.x1) ** 2 + (self.y2 - self.y1) ** 2) ** 0.5

    def to_svg(self) -> str:
        return (f'<line x1="{fmt(self.x1)}" y1="{fmt(self.y1)}" '
                f'x2="{fmt(self.x2)}" y2="{fmt(self.y2)}" {self._common_attrs()}/>')


@dataclass(frozen=True)
class PolygonPrimitive(DrawingPrimitive):
    points: tuple[tuple[float, float], ...]

    def to_svg(self) -> str:
        points = " ".join(f"{fmt(x)},{fmt(y)}" for x, y in self.points)
        return f'<polygon points="{points}" {self._common_attrs()}/>'


@dataclass(frozen=True)
class CirclePrimitive(DrawingPrimitive):
    cx: float
    cy: float
    r: float

    def to_svg(self) -> str:
        return (f'<circle cx="{fmt(self.cx)}" cy="{fmt(self.cy)}" r="{fmt(self.r)}" '
                f'{self._common_attrs()}/>')


@dataclass(frozen=True)
class TextPrimitive(DrawingPrimitive):
    """
    A single line of text.

    ``rotate`` turns the text about its own anchor point, e.g. -90 for
    labels that read bottom-to-top beside vertical dimension lines.
    """
    x: float
    y: float
    text: str
    font_size: float = 12
    anchor: str = "middle"
    weight: str = "normal"
    font_family: str = "Arial, sans-serif"
    rotate: float | None = None

    def to_svg(self) -> str:
        transform = ""
        if self.rotate is not None:
            transform = f' transform="rotate({fmt(self.rotate)}, {fmt(self.x)}, {fmt(self.y)})"'
        weight = f' font-weight="{self.weight}"' if self.weight != "normal" else ""
        return (f'<text x="{fmt(self.x)}" y="{fmt(self.y)}" text-anchor="{self.anchor}" '
                f'font-family={quoteattr(self.font_family)} font-size="{fmt(self.font_size)}"{weight} '
                f'{self._common_attrs()}{transform}>{escape(self.text)}</text>')


@dataclass(frozen=True)
class ImagePrimitive(DrawingPrimitive):
    """An embedded bitmap, normally a ``data:`` URI."""
    x: float
    y: float
    width: float
    height: float
    href: str
    preserve_aspect_ratio: str = "xMidYMid meet"

    def to_svg(self) -> str:
        return (f'<image x="{fmt(self.x)}" y="{fmt(self.y)}" '
                f'width="{fmt(self.width)}" height="{fmt(self.height)}" '
                f'href="{self.href}" xlink:href="{self.href}" '
                f'preserveAspectRatio="{self.preserve_aspect_ratio}" {self._common_attrs()}/>')


@dataclass(frozen=True)
class GroupPrimitive(DrawingPrimitive):
    """Pre-serialized markup (cloned vector artwork) under one transform."""
    content: str
    transform: str = ""

    def to_svg(self) -> str:
        transform = f' transform="{self.transform}"' if self.transform else ""
        return f'<g{transform} {self._common_attrs()}>{self.content}</g>'
