#!/usr/bin/env python3
"""
Tests for the aprongen command-line interface.

Tests cover:
- init writes a loadable default configuration
- summary prints dimensions and logo warnings
- render exports the drawing and reports failures
"""

import zipfile

from click.testing import CliRunner

from aprongen.cli import cli
from aprongen.design import DesignConfig, LogoConfig


SVG_PATTERN = b'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 20 20"><rect width="10" height="10"/></svg>'


class TestInit:
    """Test the init command."""

    def test_writes_default_config(self, tmp_path):
        """init writes a YAML file that loads as the default design."""
        output = tmp_path / "apron.yaml"
        result = CliRunner().invoke(cli, ["init", str(output)])
        assert result.exit_code == 0
        assert DesignConfig.from_yaml(output) == DesignConfig()

    def test_refuses_to_overwrite(self, tmp_path):
        """An existing file is kept unless --force is given."""
        output = tmp_path / "apron.yaml"
        output.write_text("top_width: 50\n", encoding="utf-8")

        result = CliRunner().invoke(cli, ["init", str(output)])
        assert result.exit_code == 1
        assert output.read_text(encoding="utf-8") == "top_width: 50\n"

        result = CliRunner().invoke(cli, ["init", str(output), "--force"])
        assert result.exit_code == 0
        assert DesignConfig.from_yaml(output).top_width == 45


class TestSummary:
    """Test the summary command."""

    def test_prints_dimensions(self, tmp_path):
        """The summary lists metric and imperial dimensions."""
        config_file = tmp_path / "apron.yaml"
        DesignConfig().to_yaml(config_file)
        result = CliRunner().invoke(cli, ["summary", str(config_file)])
        assert result.exit_code == 0
        assert "Apron design summary" in result.output
        assert "45x60x70CM" in result.output

    def test_prints_logo_warnings(self, tmp_path):
        """A logo outside the body is reported."""
        config_file = tmp_path / "apron.yaml"
        DesignConfig(logo=LogoConfig(enabled=True, offset_x=58)).to_yaml(config_file)
        result = CliRunner().invoke(cli, ["summary", str(config_file)])
        assert result.exit_code == 0
        assert "Warnings:" in result.output


class TestRender:
    """Test the render command."""

    def test_svg_export(self, tmp_path):
        """render writes the SVG to the requested path."""
        config_file = tmp_path / "apron.yaml"
        DesignConfig(strap_style="cross").to_yaml(config_file)
        svg_path = tmp_path / "out.svg"

        result = CliRunner().invoke(cli, ["render", str(config_file), "--svg", str(svg_path)])
        assert result.exit_code == 0, result.output
        assert 'class="apron-body"' in svg_path.read_text(encoding="utf-8")
        assert "Exported SVG" in result.output

    def test_pattern_bundle(self, tmp_path):
        """A pattern file is applied and packaged in the bundle."""
        config_file = tmp_path / "apron.yaml"
        DesignConfig().to_yaml(config_file)
        pattern = tmp_path / "leaves.svg"
        pattern.write_bytes(SVG_PATTERN)
        bundle = tmp_path / "apron.zip"

        result = CliRunner().invoke(
            cli, ["render", str(config_file), "--pattern", str(pattern), "--bundle", str(bundle)],
        )
        assert result.exit_code == 0, result.output
        with zipfile.ZipFile(bundle) as archive:
            assert "pattern-files/leaves.svg" in archive.namelist()

    def test_unsupported_upload(self, tmp_path):
        """An unsupported upload stops the command with an error."""
        config_file = tmp_path / "apron.yaml"
        DesignConfig().to_yaml(config_file)
        notes = tmp_path / "notes.txt"
        notes.write_text("hello", encoding="utf-8")

        result = CliRunner().invoke(cli, ["render", str(config_file), "--logo", str(notes)])
        assert result.exit_code == 1
        assert "Unsupported upload type" in result.output

    def test_invalid_scale_reported(self, tmp_path):
        """A failed export is reported and sets the exit code."""
        config_file = tmp_path / "apron.yaml"
        DesignConfig().to_yaml(config_file)
        svg_path = tmp_path / "out.svg"

        result = CliRunner().invoke(
            cli,
            ["render", str(config_file), "--svg", str(svg_path),
             "--png", str(tmp_path / "out.png"), "--scale", "0"],
        )
        assert result.exit_code == 1
        assert "PNG export failed" in result.output
        assert svg_path.exists()
