"""
Render pipeline and design session.

Control flow for one render pass:

    configuration -> normalize uploads (async) -> resolve fill -> layout
                  -> assemble document -> (on demand) export

``render_design`` runs one pass for a fixed configuration. ``DesignSession``
holds the current configuration and uploads, validates uploads before they
touch the configuration, and discards results of superseded renders.
"""

from __future__ import annotations

import asyncio
import logging
import warnings
from dataclasses import dataclass, replace
from datetime import datetime
from pathlib import Path
from typing import Any

from .assets import Asset, AssetReader, FileAssetReader, UploadedFile, classify_upload, normalize
from .design import DesignConfig, PatternFill, PocketMode, RepeatMode, logo_fit_advice
from .drawing_generator import ApronDrawing, ApronFrame, DrawingPrimitive, resolve_fill
from .export import (
    DEFAULT_BUNDLE_NAME,
    DEFAULT_PDF_NAME,
    DEFAULT_PNG_NAME,
    DEFAULT_RASTER_SCALE,
    DEFAULT_SVG_NAME,
    Rasterizer,
    export_bundle,
    export_pdf,
    export_png,
    export_svg,
)

logger = logging.getLogger(__name__)


# =============================================================================
# RENDER RESULT
# =============================================================================

@dataclass(frozen=True)
class RenderResult:
    """
    Output of one render pass.

    Attributes:
        svg: Serialized drawing
        primitives: Every primitive in the drawing
        config: Configuration actually drawn (logo aspect ratio from the artwork)
        pattern_asset: Normalized pattern upload, if any
        logo_asset: Normalized logo upload, if any
        generation: Session generation that produced the result (0 outside a session)
    """
    svg: str
    primitives: tuple[DrawingPrimitive, ...]
    config: DesignConfig
    pattern_asset: Asset | None = None
    logo_asset: Asset | None = None
    generation: int = 0


async def _normalize_optional(upload: UploadedFile | None, reader: AssetReader) -> Asset | None:
    if upload is None:
        return None
    return await normalize(upload, reader)


async def render_design(
    config: DesignConfig,
    pattern_file: UploadedFile | None = None,
    logo_file: UploadedFile | None = None,
    reader: AssetReader | None = None,
) -> RenderResult:
    """
    Run one full render pass.

    Uploads are only decoded when they are used: the pattern for a pattern
    fill, the logo when the logo is enabled. Both decode concurrently.

    Args:
        config: Design to render
        pattern_file: Pattern artwork upload
        logo_file: Logo artwork upload
        reader: Source of upload bytes (defaults to ``FileAssetReader``)

    Returns:
        RenderResult with the serialized drawing
    """
    reader = reader or FileAssetReader()
    pattern_upload = pattern_file if isinstance(config.fill, PatternFill) else None
    logo_upload = logo_file if config.logo.enabled else None

    pattern_asset, logo_asset = await asyncio.gather(
        _normalize_optional(pattern_upload, reader),
        _normalize_optional(logo_upload, reader),
    )

    if logo_asset is not None:
        config = config.replace(logo=config.logo.with_aspect_ratio(logo_asset.aspect_ratio))

    area = ApronFrame.from_config(config).fill_area
    fill_ref = await resolve_fill(config.fill, pattern_asset, area)

    drawing = ApronDrawing(config=config, fill_ref=fill_ref, logo_asset=logo_asset)
    svg = drawing.generate()
    return RenderResult(
        svg=svg,
        primitives=drawing.primitives,
        config=config,
        pattern_asset=pattern_asset,
        logo_asset=logo_asset,
    )


# =============================================================================
# DESIGN SESSION
# =============================================================================

class DesignSession:
    """
    Current design plus uploads, rendered on demand.

    Each ``render()`` takes a snapshot of the configuration and uploads and
    bumps a generation counter before awaiting any decode. A render that
    completes after a newer one has started is discarded, so the last
    requested render always wins regardless of decode timing.

    Example:
        session = DesignSession()
        session.update(top_width=50, strap_style="cross")
        session.attach_pattern(UploadedFile.from_path("flowers.svg"))
        result = asyncio.run(session.render())
        session.export_bundle("apron.zip")
    """

    def __init__(self, config: DesignConfig | None = None, reader: AssetReader | None = None):
        self.config = config or DesignConfig()
        self.reader = reader or FileAssetReader()
        self.pattern_file: UploadedFile | None = None
        self.logo_file: UploadedFile | None = None
        self._generation = 0
        self._last_result: RenderResult | None = None

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    def update(self, **changes: Any) -> DesignConfig:
        """Apply field changes; enum names and nested dicts are coerced."""
        self.config = self.config.replace(**changes)
        return self.config

    def set_pocket_mode(self, mode: PocketMode | str) -> DesignConfig:
        """Switch pocket layout, seeding the new mode's defaults."""
        self.config = self.config.with_pocket_mode(mode)
        return self.config

    def attach_pattern(self, upload: UploadedFile, repeat_mode: RepeatMode | str | None = None) -> DesignConfig:
        """
        Use an upload as the body's print pattern.

        The pattern is named after the file stem. The upload type is checked
        first; a rejected upload leaves the session unchanged.

        Raises:
            UnsupportedUploadError: For anything other than SVG, PDF, PNG, or JPEG
        """
        classify_upload(upload)
        fill = self.config.fill if isinstance(self.config.fill, PatternFill) else PatternFill()
        fill = replace(fill, name=upload.stem)
        if repeat_mode is not None:
            fill = replace(fill, repeat_mode=RepeatMode(repeat_mode))
        self.pattern_file = upload
        self.config = self.config.replace(fill=fill)
        return self.config

    def attach_logo(self, upload: UploadedFile) -> DesignConfig:
        """
        Use an upload as the logo and enable it.

        Raises:
            UnsupportedUploadError: For anything other than SVG, PDF, PNG, or JPEG
        """
        classify_upload(upload)
        self.logo_file = upload
        self.config = self.config.replace(logo=replace(self.config.logo, enabled=True, name=upload.stem))
        return self.config

    def detach_pattern(self) -> None:
        self.pattern_file = None

    def detach_logo(self) -> None:
        self.logo_file = None

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def last_result(self) -> RenderResult | None:
        return self._last_result

    async def render(self) -> RenderResult | None:
        """
        Render the current design.

        Returns:
            The result, or None if a newer render started while this one was
            decoding uploads
        """
        self._generation += 1
        generation = self._generation
        config, pattern_file, logo_file = self.config, self.pattern_file, self.logo_file

        for advice in logo_fit_advice(config):
            warnings.warn(advice, stacklevel=2)

        result = await render_design(config, pattern_file, logo_file, self.reader)

        if generation != self._generation:
            logger.debug("Discarding stale render %d (current %d)", generation, self._generation)
            return None

        self._last_result = replace(result, generation=generation)
        return self._last_result

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------

    def _require_result(self) -> RenderResult:
        if self._last_result is None:
            raise RuntimeError("Design has not been rendered yet. Call render() first.")
        return self._last_result

    def export_svg(self, path: str | Path = DEFAULT_SVG_NAME) -> Path:
        return export_svg(self._require_result().svg, path)

    def export_png(
        self,
        path: str | Path = DEFAULT_PNG_NAME,
        scale: float = DEFAULT_RASTER_SCALE,
        rasterizer: Rasterizer | None = None,
    ) -> Path:
        return export_png(self._require_result().svg, path, scale, rasterizer)

    def export_pdf(self, path: str | Path = DEFAULT_PDF_NAME) -> Path:
        return export_pdf(self._require_result().svg, path)

    def export_bundle(self, path: str | Path = DEFAULT_BUNDLE_NAME, exported_at: datetime | None = None) -> Path:
        result = self._require_result()
        return export_bundle(
            result.svg,
            result.config,
            path,
            pattern_asset=result.pattern_asset,
            logo_asset=result.logo_asset,
            exported_at=exported_at,
        )
