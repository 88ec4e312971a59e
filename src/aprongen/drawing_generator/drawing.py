"""
Main apron drawing generator.

Composes the geometry primitives, legend, and title into one SVG document in
a fixed z-order: background, body, straps, pockets, logo, dimensions,
legend, title.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import groupby

from ..assets import Asset
from ..design import DesignConfig
from .constants import BACKGROUND_COLOR
from .dimensions import DEFAULT_DIMENSIONS, DimensionKind
from .fills import FillRef, PatternTile
from .layout_engine import ApronFrame, layout
from .primitives import DrawingPrimitive, Layer, fmt
from .title_block import TitleBlock


@dataclass
class ApronDrawing:
    """
    Apron technical drawing.

    Attributes:
        config: Design to draw
        fill_ref: Resolved body fill; a ``PatternTile`` is written to ``<defs>``
        logo_asset: Normalized logo artwork, if uploaded
        dimensions: Dimensions to annotate
        title: Main title text
    """
    config: DesignConfig
    fill_ref: FillRef = None
    logo_asset: Asset | None = None
    dimensions: tuple[DimensionKind, ...] = DEFAULT_DIMENSIONS
    title: str | None = None

    # Internal state - initialized in __post_init__
    _svg_content: str = field(default="", repr=False)
    _frame: ApronFrame = field(init=False, repr=False)
    _title_block: TitleBlock = field(init=False, repr=False)
    _primitives: tuple[DrawingPrimitive, ...] = field(init=False, repr=False)

    def __post_init__(self):
        self._frame = ApronFrame.from_config(self.config)
        self._title_block = TitleBlock(self.config, self._frame.canvas_width)
        if self.title is not None:
            self._title_block.title = self.title

        geometry = layout(self.config, self.fill_ref, self.logo_asset, self.dimensions)
        self._primitives = (
            geometry
            + tuple(self._title_block.legend_primitives())
            + tuple(self._title_block.title_primitives())
        )

    @property
    def frame(self) -> ApronFrame:
        return self._frame

    @property
    def primitives(self) -> tuple[DrawingPrimitive, ...]:
        """Every primitive in the drawing, unordered by layer."""
        return self._primitives

    @property
    def width(self) -> float:
        return self._frame.canvas_width

    @property
    def height(self) -> float:
        return self._frame.canvas_height

    def _create_defs(self) -> str:
        if isinstance(self.fill_ref, PatternTile):
            return f"  <defs>{self.fill_ref.to_svg()}</defs>"
        return "  <defs/>"

    def _create_layers(self) -> list[str]:
        # sorted() is stable, so primitives keep their order within a layer
        ordered = sorted(self._primitives, key=lambda p: p.layer)
        groups = []
        for layer, members in groupby(ordered, key=lambda p: p.layer):
            body = "\n".join(f"    {p.to_svg()}" for p in members)
            groups.append(f'  <g class="layer-{Layer(layer).name.lower()}">\n{body}\n  </g>')
        return groups

    def generate(self) -> str:
        """Generate the complete apron drawing as SVG."""
        width, height = fmt(self.width), fmt(self.height)
        svg_header = (
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            f'<svg xmlns="http://www.w3.org/2000/svg" '
            f'xmlns:xlink="http://www.w3.org/1999/xlink" '
            f'width="{width}" height="{height}" viewBox="0 0 {width} {height}">'
        )

        svg_content = [
            self._create_defs(),
            f'  <rect class="background" x="0" y="0" width="{width}" height="{height}" '
            f'fill="{BACKGROUND_COLOR}"/>',
        ]
        svg_content.extend(self._create_layers())

        self._svg_content = svg_header + "\n" + "\n".join(svg_content) + "\n</svg>\n"
        return self._svg_content

    @property
    def svg(self) -> str:
        """Serialized document, generated on first access."""
        if not self._svg_content:
            self.generate()
        return self._svg_content
