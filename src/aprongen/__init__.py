"""
aprongen - parametric apron technical drawings.

Turns an apron design (dimensions, fill, straps, pockets, logo) into an SVG
technical drawing with CM/INCH dimensions, and exports it as SVG, PNG, PDF,
or a zip bundle with a parameter manifest and specification sheet.

Usage:
    import asyncio
    from aprongen import DesignConfig, DesignSession

    session = DesignSession(DesignConfig(top_width=50, strap_style="halter"))
    asyncio.run(session.render())
    session.export_svg("apron-design.svg")
"""

from .assets import Asset, AssetKind, UnsupportedUploadError, UploadedFile, normalize
from .design import (
    DesignConfig,
    LogoConfig,
    PatternFill,
    PocketMode,
    RepeatMode,
    SolidFill,
    StrapStyle,
)
from .export import ExportError, export_bundle, export_png, export_svg
from .pipeline import DesignSession, RenderResult, render_design

__version__ = "0.1.0"

__all__ = [
    'DesignConfig',
    'SolidFill',
    'PatternFill',
    'RepeatMode',
    'StrapStyle',
    'PocketMode',
    'LogoConfig',
    'UploadedFile',
    'Asset',
    'AssetKind',
    'UnsupportedUploadError',
    'normalize',
    'DesignSession',
    'RenderResult',
    'render_design',
    'ExportError',
    'export_svg',
    'export_png',
    'export_bundle',
]
