#!/usr/bin/env python3
"""
Tests for the render pipeline and design session.

Tests cover:
- One-shot rendering with and without uploads
- Uploads only decoded when used
- Rejected uploads leave the session unchanged
- Stale renders are discarded (last requested render wins)
- Exports require a completed render
"""

import asyncio
import io
import warnings
import zipfile

import pytest
from PIL import Image

from aprongen.assets import UnsupportedUploadError, UploadedFile
from aprongen.design import (
    DesignConfig,
    LogoConfig,
    NoPockets,
    PatternFill,
    RepeatMode,
    SolidFill,
    StrapStyle,
)
from aprongen.pipeline import DesignSession, render_design


def png_upload(name: str, width: int, height: int) -> UploadedFile:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), "navy").save(buffer, format="PNG")
    return UploadedFile(name=name, mime_type="image/png", data=buffer.getvalue())


SVG_PATTERN = UploadedFile(
    name="flowers.svg",
    mime_type="image/svg+xml",
    data=b'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 20 20"><circle cx="10" cy="10" r="8"/></svg>',
)


class CountingReader:
    """Reads in-memory uploads and counts the reads."""

    def __init__(self):
        self.names = []

    async def read(self, upload: UploadedFile) -> bytes:
        self.names.append(upload.name)
        return upload.data


class GatedReader(CountingReader):
    """Holds reads of one named upload until the gate opens."""

    def __init__(self, slow_name: str):
        super().__init__()
        self.slow_name = slow_name
        self.gate = asyncio.Event()

    async def read(self, upload: UploadedFile) -> bytes:
        if upload.name == self.slow_name:
            await self.gate.wait()
        return await super().read(upload)


# =============================================================================
# RENDER PASS
# =============================================================================


class TestRenderDesign:
    """Test a single render pass."""

    def test_default_design(self):
        """The default design renders without uploads."""
        result = asyncio.run(render_design(DesignConfig()))
        assert result.svg.startswith("<?xml")
        assert result.pattern_asset is None
        assert [p.role for p in result.primitives].count("apron-body") == 1

    def test_pattern_fill(self):
        """A pattern upload with a pattern fill produces a pattern definition."""
        config = DesignConfig(fill=PatternFill(name="flowers", repeat_mode=RepeatMode.CENTER))
        result = asyncio.run(render_design(config, pattern_file=SVG_PATTERN))
        assert result.pattern_asset is not None
        assert 'id="apron-pattern"' in result.svg
        assert 'fill="url(#apron-pattern)"' in result.svg

    def test_pattern_without_upload(self):
        """A pattern fill with no upload renders a placeholder label."""
        config = DesignConfig(fill=PatternFill(name="flowers"))
        result = asyncio.run(render_design(config))
        assert "pattern: flowers, mode: tile" in result.svg

    def test_unused_uploads_not_decoded(self):
        """A pattern upload is ignored for solid fills, a logo when disabled."""
        reader = CountingReader()
        asyncio.run(render_design(
            DesignConfig(fill=SolidFill()),
            pattern_file=SVG_PATTERN,
            logo_file=png_upload("brand.png", 20, 10),
            reader=reader,
        ))
        assert reader.names == []

    def test_logo_aspect_ratio_from_artwork(self):
        """The logo takes the uploaded artwork's aspect ratio."""
        config = DesignConfig(logo=LogoConfig(enabled=True, aspect_ratio=1.0))
        result = asyncio.run(render_design(config, logo_file=png_upload("brand.png", 200, 100)))
        assert result.config.logo.aspect_ratio == 2.0
        assert result.logo_asset.name == "brand.png"
        assert 'class="logo"' in result.svg

    def test_corrupt_pdf_pattern_completes(self):
        """A corrupt PDF pattern renders with the placeholder bitmap."""
        config = DesignConfig(fill=PatternFill(name="broken", repeat_mode=RepeatMode.STRETCH))
        upload = UploadedFile(name="broken.pdf", mime_type="application/pdf", data=b"%PDF-1.4 truncated")
        result = asyncio.run(render_design(config, pattern_file=upload))
        assert result.pattern_asset.is_placeholder
        assert result.pattern_asset.data
        assert 'id="apron-pattern"' in result.svg
        assert "data:image/png;base64," in result.svg


# =============================================================================
# SESSION
# =============================================================================


class TestDesignSession:
    """Test the interactive design session."""

    def test_update_coerces_values(self):
        """Field updates accept enum names and nested dicts."""
        session = DesignSession()
        config = session.update(strap_style="tie", pockets={"mode": "none"})
        assert config.strap_style is StrapStyle.TIE
        assert isinstance(config.pockets, NoPockets)
        assert session.config is config

    def test_update_coerces_dimensions(self):
        """Numeric strings are accepted and junk falls back to the default."""
        session = DesignSession()
        session.update(top_width="50", total_height="tall", neck_strap=None, fill="red")
        assert session.config.top_width == 50.0
        assert session.config.total_height == 70.0
        assert session.config.neck_strap == 50.0
        assert isinstance(session.config.fill, SolidFill)

        result = asyncio.run(session.render())
        assert "50CM/19.7INCH" in result.svg

    def test_set_pocket_mode(self):
        """Switching pocket mode resets the sub-record."""
        session = DesignSession()
        session.set_pocket_mode("multiple")
        assert session.config.pockets.count == 3

    def test_rejected_upload_leaves_session_unchanged(self):
        """An unsupported upload is refused before touching the design."""
        reader = CountingReader()
        session = DesignSession(reader=reader)
        before = session.config

        with pytest.raises(UnsupportedUploadError):
            session.attach_pattern(UploadedFile(name="notes.txt", data=b"hello"))
        with pytest.raises(UnsupportedUploadError):
            session.attach_logo(UploadedFile(name="notes.txt", data=b"hello"))

        assert session.config is before
        assert session.pattern_file is None
        assert session.logo_file is None
        asyncio.run(session.render())
        assert reader.names == []

    def test_attach_pattern(self):
        """A pattern upload switches the fill and names it after the file."""
        session = DesignSession()
        session.attach_pattern(SVG_PATTERN, repeat_mode="stretch")
        fill = session.config.fill
        assert isinstance(fill, PatternFill)
        assert fill.name == "flowers"
        assert fill.repeat_mode is RepeatMode.STRETCH

        result = asyncio.run(session.render())
        assert result.generation == 1
        assert 'fill="url(#apron-pattern)"' in result.svg

    def test_attach_logo(self):
        """A logo upload enables the logo."""
        session = DesignSession()
        session.attach_logo(png_upload("brand.png", 20, 10))
        assert session.config.logo.enabled
        assert session.config.logo.name == "brand"

    def test_detach_pattern(self):
        """Detaching keeps the pattern fill but renders the placeholder."""
        session = DesignSession()
        session.attach_pattern(SVG_PATTERN)
        session.detach_pattern()
        result = asyncio.run(session.render())
        assert "pattern: flowers, mode: tile" in result.svg

    def test_stale_render_discarded(self):
        """A render overtaken by a newer one returns None."""
        reader = GatedReader("slow.png")
        session = DesignSession(reader=reader)

        async def scenario():
            session.attach_logo(png_upload("slow.png", 100, 100))
            first = asyncio.create_task(session.render())
            await asyncio.sleep(0)

            session.attach_logo(png_upload("fast.png", 200, 100))
            second = await session.render()

            reader.gate.set()
            stale = await first
            return stale, second

        stale, second = asyncio.run(scenario())
        assert stale is None
        assert second.generation == 2
        assert second.logo_asset.name == "fast.png"
        assert session.last_result is second
        assert session.last_result.config.logo.aspect_ratio == 2.0

    def test_logo_advice_warns(self):
        """A logo outside the body triggers a warning, not an error."""
        session = DesignSession(DesignConfig(logo=LogoConfig(enabled=True, offset_x=58)))
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            result = asyncio.run(session.render())
        assert result is not None
        assert any("right edge" in str(w.message) for w in caught)

    def test_export_requires_render(self, tmp_path):
        """Exporting before the first render is an error."""
        session = DesignSession()
        with pytest.raises(RuntimeError, match="not been rendered"):
            session.export_svg(tmp_path / "apron.svg")
        with pytest.raises(RuntimeError):
            session.export_bundle(tmp_path / "apron.zip")

    def test_export_after_render(self, tmp_path):
        """Exports use the last completed render."""
        session = DesignSession()
        session.attach_pattern(SVG_PATTERN)
        result = asyncio.run(session.render())

        svg_path = session.export_svg(tmp_path / "apron.svg")
        assert svg_path.read_text(encoding="utf-8") == result.svg

        bundle = session.export_bundle(tmp_path / "apron.zip")
        with zipfile.ZipFile(bundle) as archive:
            assert "pattern-files/flowers.svg" in archive.namelist()
