#!/usr/bin/env python3
"""
Tests for the apron design configuration.

Tests cover:
- Derived section heights (33% upper, remainder lower)
- Pocket mode switching always reseeds defaults
- Coercion of untrusted mappings (enums, numbers, clamps)
- YAML round trip
- Logo fit advice
"""

import math

import pytest

from aprongen.design import (
    DesignConfig,
    DoublePockets,
    LogoConfig,
    MultiplePockets,
    NoPockets,
    PatternFill,
    PocketMode,
    RepeatMode,
    SinglePocket,
    SolidFill,
    StrapStyle,
    derive_section_heights,
    logo_fit_advice,
)


# =============================================================================
# DERIVED HEIGHTS
# =============================================================================


class TestSectionHeights:
    """Test the upper/lower split of the total height."""

    def test_default_split(self):
        """70 cm splits into 23.1 / 46.9."""
        assert derive_section_heights(70) == (23.1, 46.9)

    @pytest.mark.parametrize("total", [30, 55.5, 70, 81.3, 100])
    def test_sections_add_up(self, total: float):
        """Upper + lower always equals the total height."""
        upper, lower = derive_section_heights(total)
        assert upper + lower == pytest.approx(total, abs=0.05)

    def test_config_properties_follow_total(self):
        """Changing total_height recomputes both sections."""
        config = DesignConfig().replace(total_height=100)
        assert config.upper_height == 33.0
        assert config.lower_height == 67.0

    def test_max_width(self):
        """max_width is the wider of the two edges."""
        assert DesignConfig(top_width=70, bottom_width=50).max_width == 70
        assert DesignConfig().max_width == 60


# =============================================================================
# POCKET MODES
# =============================================================================


class TestPocketModes:
    """Test switching between pocket layouts."""

    @pytest.mark.parametrize(
        "mode, expected",
        [
            ("none", NoPockets),
            ("single", SinglePocket),
            ("double", DoublePockets),
            ("multiple", MultiplePockets),
        ],
    )
    def test_mode_selects_record(self, mode: str, expected: type):
        """Each mode produces its own sub-record."""
        config = DesignConfig().with_pocket_mode(mode)
        assert isinstance(config.pockets, expected)
        assert config.pocket_mode is PocketMode(mode)

    def test_switching_back_restores_defaults(self):
        """Earlier edits are discarded when a mode is re-entered."""
        config = DesignConfig(pockets=SinglePocket(width=25, height=20, position_y=10))
        config = config.with_pocket_mode("double").with_pocket_mode("single")
        assert config.pockets == SinglePocket(width=15.0, height=12.0, position_y=60.0)

    @pytest.mark.parametrize("count, expected", [(1, 2), (4, 4), (9, 6)])
    def test_multiple_count_clamped(self, count: int, expected: int):
        """Pocket count stays within 2..6."""
        assert MultiplePockets(count=count).count == expected

    def test_pocket_counts(self):
        """count reflects the number of pockets drawn."""
        assert NoPockets().count == 0
        assert SinglePocket().count == 1
        assert DoublePockets().count == 2


# =============================================================================
# COERCION
# =============================================================================


class TestFromDict:
    """Test coercion of untrusted input."""

    def test_empty_mapping_gives_defaults(self):
        """An empty mapping (or None) yields the default design."""
        assert DesignConfig.from_dict({}) == DesignConfig()
        assert DesignConfig.from_dict(None) == DesignConfig()

    def test_non_numeric_falls_back(self):
        """Non-numeric and non-finite values fall back to the field default."""
        config = DesignConfig.from_dict({
            "top_width": "wide",
            "bottom_width": math.nan,
            "total_height": "80",
            "neck_strap": None,
        })
        assert config.top_width == 45.0
        assert config.bottom_width == 60.0
        assert config.total_height == 80.0
        assert config.neck_strap == 50.0

    def test_unknown_enum_falls_back(self):
        """Unknown strap styles and pocket modes fall back to defaults."""
        config = DesignConfig.from_dict({"strap_style": "suspenders", "pockets": {"mode": "many"}})
        assert config.strap_style is StrapStyle.CLASSIC
        assert isinstance(config.pockets, SinglePocket)

    def test_pattern_fill_clamps(self):
        """Custom size and positions are clamped to their percentage ranges."""
        config = DesignConfig.from_dict({
            "fill": {
                "type": "pattern",
                "name": "Dots",
                "repeat_mode": "custom",
                "custom_size": 500,
                "custom_position_x": -20,
                "custom_position_y": 140,
            }
        })
        fill = config.fill
        assert isinstance(fill, PatternFill)
        assert fill.name == "Dots"
        assert fill.repeat_mode is RepeatMode.CUSTOM
        assert fill.custom_size == 100
        assert fill.custom_position_x == 0
        assert fill.custom_position_y == 100

    def test_invalid_hex_color_rejected(self):
        """Colours must be hex codes."""
        config = DesignConfig.from_dict({"fill": {"type": "solid", "name": "Blue", "hex_color": "blue"}})
        assert config.fill == SolidFill(name="Blue", hex_color="#FF6B6B")

    def test_derived_heights_ignored(self):
        """Section heights in the input are recomputed, never trusted."""
        config = DesignConfig.from_dict({"total_height": 70, "upper_height": 50, "lower_height": 5})
        assert config.upper_height == 23.1
        assert config.lower_height == 46.9

    def test_constructor_accepts_plain_values(self):
        """Enum names and nested dicts are converted on construction."""
        config = DesignConfig(
            strap_style="halter",
            pockets={"mode": "multiple", "count": 4},
            logo={"enabled": True, "width": 10},
        )
        assert config.strap_style is StrapStyle.HALTER
        assert isinstance(config.pockets, MultiplePockets)
        assert config.pockets.count == 4
        assert config.logo.enabled
        assert config.logo.width == 10

    def test_constructor_coerces_dimensions(self):
        """Dimensions passed as strings or junk are coerced like mapping input."""
        config = DesignConfig(top_width="50", bottom_width="wide", total_height=math.inf, waist_strap=True)
        assert config.top_width == 50.0
        assert config.bottom_width == 60.0
        assert config.total_height == 70.0
        assert config.waist_strap == 80.0
        assert config.max_width == 60.0

    @pytest.mark.parametrize("key", ["fill", "pockets", "strap_color", "pocket_color", "logo"])
    @pytest.mark.parametrize("value", ["red", 3, ["a", "b"]])
    def test_scalar_in_place_of_record(self, key: str, value):
        """A scalar or list where a nested record belongs gives that record's default."""
        assert DesignConfig.from_dict({key: value}) == DesignConfig()
        assert DesignConfig(**{key: value}) == DesignConfig()

    def test_scalar_pocket_sizes(self):
        """Double pocket sizes that are not mappings keep their defaults."""
        config = DesignConfig.from_dict({"pockets": {"mode": "double", "left": 5, "right": "big"}})
        assert config.pockets == DoublePockets()

    def test_non_mapping_document(self):
        """A top-level value that is not a mapping yields the default design."""
        assert DesignConfig.from_dict(["top_width", 50]) == DesignConfig()


# =============================================================================
# YAML
# =============================================================================


class TestYamlRoundTrip:
    """Test YAML persistence."""

    def test_round_trip(self, tmp_path):
        """A saved design loads back unchanged."""
        config = DesignConfig(
            top_width=50,
            fill=PatternFill(name="Stripes", repeat_mode=RepeatMode.CENTER),
            strap_style=StrapStyle.CROSS,
            pockets=DoublePockets(spacing=8),
            logo=LogoConfig(enabled=True, name="ACME", width=10, offset_y=5),
        )
        path = tmp_path / "apron.yaml"
        config.to_yaml(path)

        assert DesignConfig.from_yaml(path) == config

    def test_derived_heights_not_saved(self, tmp_path):
        """Only the total height is persisted."""
        path = tmp_path / "apron.yaml"
        DesignConfig().to_yaml(path)
        text = path.read_text(encoding="utf-8")
        assert "total_height" in text
        assert "upper_height" not in text

    def test_empty_file_gives_defaults(self, tmp_path):
        """An empty YAML file loads as the default design."""
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert DesignConfig.from_yaml(path) == DesignConfig()


# =============================================================================
# LOGO
# =============================================================================


class TestLogoFitAdvice:
    """Test advisory messages for logos outside the body."""

    def test_disabled_logo_has_no_advice(self):
        """A disabled logo is never checked."""
        config = DesignConfig(logo=LogoConfig(enabled=False, offset_x=500))
        assert logo_fit_advice(config) == []

    def test_logo_inside_body(self):
        """The default logo position fits."""
        assert logo_fit_advice(DesignConfig(logo=LogoConfig(enabled=True))) == []

    def test_logo_past_right_edge(self):
        """offset_x + width beyond the bottom width is reported."""
        config = DesignConfig(logo=LogoConfig(enabled=True, width=20, offset_x=50))
        advice = logo_fit_advice(config)
        assert len(advice) == 1
        assert "right edge" in advice[0]

    def test_logo_past_hem(self):
        """offset_y + height beyond the total height is reported."""
        config = DesignConfig(logo=LogoConfig(enabled=True, width=10, aspect_ratio=0.5, offset_y=60))
        advice = logo_fit_advice(config)
        assert len(advice) == 1
        assert "hem" in advice[0]

    def test_height_follows_aspect_ratio(self):
        """Logo height is width / aspect_ratio."""
        assert LogoConfig(width=8, aspect_ratio=2).height == 4
        assert LogoConfig(width=8, aspect_ratio=0).height == 8

    def test_centered(self):
        """centered() puts the logo in the middle of the bottom width."""
        assert LogoConfig(width=10).centered(60).offset_x == 25
