"""
Drawing Generator Module

Generates parametric apron technical drawings as SVG.

Features:
- Body silhouette with solid or pattern fill (tile, stretch, center, custom)
- Five neck strap styles with waist straps or eyelet ties
- Single, double, and multiple pocket layouts
- Logo placement with annotations
- Bilingual CM/INCH dimensions
- Title and colour legend

Usage:
    from aprongen.drawing_generator import ApronDrawing
    from aprongen.design import DesignConfig

    drawing = ApronDrawing(config=DesignConfig())
    svg = drawing.generate()
"""

from .constants import SCALE
from .dimensions import (
    DEFAULT_DIMENSIONS,
    DimensionKind,
    DimensionStyle,
    format_dimension,
)
from .drawing import ApronDrawing
from .fills import (
    PATTERN_ID,
    FillRef,
    PatternTile,
    SolidFillRef,
    TilePlacement,
    place_tile_content,
    resolve_fill,
)
from .layout_engine import ApronFrame, body_outline_path, layout
from .primitives import (
    CirclePrimitive,
    DrawingPrimitive,
    GroupPrimitive,
    ImagePrimitive,
    Layer,
    LinePrimitive,
    PathPrimitive,
    PolygonPrimitive,
    RectPrimitive,
    Style,
    TextPrimitive,
)
from .title_block import TitleBlock
from .view_area import ViewArea

__all__ = [
    # Main classes
    'ApronDrawing',
    'ApronFrame',
    'TitleBlock',
    'ViewArea',
    # Fills
    'FillRef',
    'SolidFillRef',
    'PatternTile',
    'TilePlacement',
    'PATTERN_ID',
    # Primitives
    'DrawingPrimitive',
    'Layer',
    'Style',
    'PathPrimitive',
    'RectPrimitive',
    'LinePrimitive',
    'PolygonPrimitive',
    'CirclePrimitive',
    'TextPrimitive',
    'ImagePrimitive',
    'GroupPrimitive',
    # Dimensions
    'DimensionKind',
    'DimensionStyle',
    'DEFAULT_DIMENSIONS',
    # Functions
    'layout',
    'body_outline_path',
    'resolve_fill',
    'place_tile_content',
    'format_dimension',
    # Constants
    'SCALE',
]
