"""
Apron design configuration.

Dataclasses describing one apron design: body dimensions, fill, straps,
pockets, and logo placement. A configuration can be:
- Built directly from the dataclass constructors
- Loaded from a YAML file (``DesignConfig.from_yaml``)
- Coerced from an untrusted mapping (``DesignConfig.from_dict``), where missing
  or non-numeric fields fall back to the per-field defaults below

All records are frozen. Every change produces a new ``DesignConfig``; the two
section heights are derived from ``total_height`` and can never be set on
their own.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, ClassVar, Union

import yaml


# =============================================================================
# CONSTANTS
# =============================================================================

UPPER_HEIGHT_RATIO = 0.33   # upper (bib) section share of the total height
INCH_PER_CM = 0.393701

MIN_POCKET_COUNT = 2
MAX_POCKET_COUNT = 6

_HEX_COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}){1,2}$")


class StrapStyle(str, Enum):
    """Neck strap construction."""
    CLASSIC = "classic"
    HALTER = "halter"
    CROSS = "cross"
    ADJUSTABLE = "adjustable"
    TIE = "tie"


class RepeatMode(str, Enum):
    """How uploaded pattern artwork is laid over the body."""
    TILE = "tile"
    STRETCH = "stretch"
    CENTER = "center"
    CUSTOM = "custom"


class PocketMode(str, Enum):
    """Pocket layout."""
    NONE = "none"
    SINGLE = "single"
    DOUBLE = "double"
    MULTIPLE = "multiple"


# =============================================================================
# VALUE COERCION
# =============================================================================

def _number(value: Any, default: float) -> float:
    """Return ``value`` as a finite float, or ``default`` when it is not one."""
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def _clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def _mapping(value: Any) -> Mapping[str, Any]:
    """Nested record input; anything but a mapping counts as empty."""
    return value if isinstance(value, Mapping) else {}


def _enum(enum_cls: type[Enum], value: Any, default: Enum) -> Any:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        return default


def _text(value: Any, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value
    return default


def _hex_color(value: Any, default: str) -> str:
    if isinstance(value, str) and _HEX_COLOR_RE.match(value):
        return value
    return default


def derive_section_heights(total_height: float) -> tuple[float, float]:
    """
    Split a total height into (upper, lower) section heights.

    The upper section is 33% of the total rounded to one decimal; the lower
    section takes the remainder, so the two always add back to the total.

    Example:
        >>> derive_section_heights(70)
        (23.1, 46.9)
    """
    upper = round(total_height * UPPER_HEIGHT_RATIO, 1)
    lower = round(total_height - upper, 1)
    return upper, lower


# =============================================================================
# FILL SPECIFICATION
# =============================================================================

@dataclass(frozen=True)
class SolidFill:
    """A flat colour with a display name (e.g. a Pantone reference)."""
    name: str = "Coral Red"
    hex_color: str = "#FF6B6B"

    kind: ClassVar[str] = "solid"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind, "name": self.name, "hex_color": self.hex_color}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], default: SolidFill | None = None) -> SolidFill:
        base = default or cls()
        return cls(
            name=_text(data.get("name"), base.name),
            hex_color=_hex_color(data.get("hex_color"), base.hex_color),
        )


@dataclass(frozen=True)
class PatternFill:
    """
    Printed pattern built from uploaded artwork.

    Attributes:
        name: Pattern name (defaults to the upload's file stem)
        repeat_mode: Tiling strategy, see ``RepeatMode``
        custom_size: Artwork size as % of the smaller area side (custom mode only)
        custom_position_x: Horizontal position, 0 = flush left, 100 = flush right
        custom_position_y: Vertical position, 0 = flush top, 100 = flush bottom
    """
    name: str = "Custom Pattern"
    repeat_mode: RepeatMode = RepeatMode.TILE
    custom_size: float = 30.0
    custom_position_x: float = 50.0
    custom_position_y: float = 50.0

    kind: ClassVar[str] = "pattern"

    def __post_init__(self):
        object.__setattr__(self, "repeat_mode", _enum(RepeatMode, self.repeat_mode, RepeatMode.TILE))

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.kind,
            "name": self.name,
            "repeat_mode": self.repeat_mode.value,
            "custom_size": self.custom_size,
            "custom_position_x": self.custom_position_x,
            "custom_position_y": self.custom_position_y,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PatternFill:
        base = cls()
        return cls(
            name=_text(data.get("name"), base.name),
            repeat_mode=_enum(RepeatMode, data.get("repeat_mode"), base.repeat_mode),
            custom_size=_clamp(_number(data.get("custom_size"), base.custom_size), 1, 100),
            custom_position_x=_clamp(_number(data.get("custom_position_x"), base.custom_position_x), 0, 100),
            custom_position_y=_clamp(_number(data.get("custom_position_y"), base.custom_position_y), 0, 100),
        )


FillSpec = Union[SolidFill, PatternFill]


def fill_from_dict(data: Mapping[str, Any]) -> FillSpec:
    """Build a fill from a mapping tagged with ``type: solid | pattern``."""
    if data.get("type") == PatternFill.kind:
        return PatternFill.from_dict(data)
    return SolidFill.from_dict(data)


# =============================================================================
# POCKETS
# =============================================================================

@dataclass(frozen=True)
class PocketSize:
    width: float
    height: float


@dataclass(frozen=True)
class NoPockets:
    """Plain front, no pockets."""
    mode: ClassVar[PocketMode] = PocketMode.NONE

    @property
    def count(self) -> int:
        return 0

    def to_dict(self) -> dict[str, Any]:
        return {"mode": self.mode.value}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> NoPockets:
        return cls()


@dataclass(frozen=True)
class SinglePocket:
    """One pocket centred horizontally on the lower section."""
    width: float = 15.0
    height: float = 12.0
    position_y: float = 60.0  # % of the lower section height

    mode: ClassVar[PocketMode] = PocketMode.SINGLE

    @property
    def count(self) -> int:
        return 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "mode": self.mode.value,
            "width": self.width,
            "height": self.height,
            "position_y": self.position_y,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SinglePocket:
        base = cls()
        return cls(
            width=_number(data.get("width"), base.width),
            height=_number(data.get("height"), base.height),
            position_y=_number(data.get("position_y"), base.position_y),
        )


@dataclass(frozen=True)
class DoublePockets:
    """Two pockets side by side, centred as a pair."""
    left: PocketSize = field(default_factory=lambda: PocketSize(12.0, 10.0))
    right: PocketSize = field(default_factory=lambda: PocketSize(12.0, 10.0))
    spacing: float = 5.0
    position_y: float = 60.0

    mode: ClassVar[PocketMode] = PocketMode.DOUBLE

    def __post_init__(self):
        # Handle pocket sizes as dicts from YAML
        for side in ("left", "right"):
            value = getattr(self, side)
            if isinstance(value, Mapping):
                object.__setattr__(self, side, _pocket_size(value, PocketSize(12.0, 10.0)))

    @property
    def count(self) -> int:
        return 2

    def to_dict(self) -> dict[str, Any]:
        return {
            "mode": self.mode.value,
            "left": {"width": self.left.width, "height": self.left.height},
            "right": {"width": self.right.width, "height": self.right.height},
            "spacing": self.spacing,
            "position_y": self.position_y,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DoublePockets:
        base = cls()
        return cls(
            left=_pocket_size(_mapping(data.get("left")), base.left),
            right=_pocket_size(_mapping(data.get("right")), base.right),
            spacing=_number(data.get("spacing"), base.spacing),
            position_y=_number(data.get("position_y"), base.position_y),
        )


@dataclass(frozen=True)
class MultiplePockets:
    """A strip of ``count`` equal pockets sharing one total width."""
    total_width: float = 30.0
    height: float = 8.0
    count: int = 3
    position_y: float = 60.0

    mode: ClassVar[PocketMode] = PocketMode.MULTIPLE

    def __post_init__(self):
        object.__setattr__(self, "count", int(_clamp(int(self.count), MIN_POCKET_COUNT, MAX_POCKET_COUNT)))

    @property
    def pocket_width(self) -> float:
        return self.total_width / self.count

    def to_dict(self) -> dict[str, Any]:
        return {
            "mode": self.mode.value,
            "total_width": self.total_width,
            "height": self.height,
            "count": self.count,
            "position_y": self.position_y,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> MultiplePockets:
        base = cls()
        return cls(
            total_width=_number(data.get("total_width"), base.total_width),
            height=_number(data.get("height"), base.height),
            count=int(_number(data.get("count"), base.count)),
            position_y=_number(data.get("position_y"), base.position_y),
        )


PocketConfig = Union[NoPockets, SinglePocket, DoublePockets, MultiplePockets]

POCKET_TYPES: dict[PocketMode, type] = {
    PocketMode.NONE: NoPockets,
    PocketMode.SINGLE: SinglePocket,
    PocketMode.DOUBLE: DoublePockets,
    PocketMode.MULTIPLE: MultiplePockets,
}


def _pocket_size(data: Mapping[str, Any], default: PocketSize) -> PocketSize:
    return PocketSize(
        width=_number(data.get("width"), default.width),
        height=_number(data.get("height"), default.height),
    )


def default_pockets(mode: PocketMode | str) -> PocketConfig:
    """Fresh sub-record with the defaults for ``mode``."""
    return POCKET_TYPES[PocketMode(mode)]()


def pockets_from_dict(data: Mapping[str, Any]) -> PocketConfig:
    """Build a pocket record from a mapping tagged with ``mode``."""
    mode = _enum(PocketMode, data.get("mode"), PocketMode.SINGLE)
    return POCKET_TYPES[mode].from_dict(data)


# =============================================================================
# LOGO
# =============================================================================

@dataclass(frozen=True)
class LogoConfig:
    """
    Logo placement on the body.

    Offsets are measured in cm from the body's top-left reference point (the
    top-left corner of the body's bounding box). ``aspect_ratio`` is width /
    height and is replaced by the uploaded artwork's intrinsic ratio at render
    time.
    """
    enabled: bool = False
    name: str = "LOGO"
    width: float = 8.0
    aspect_ratio: float = 1.0
    offset_x: float = 15.0
    offset_y: float = 12.0
    opacity: float = 100.0

    @property
    def height(self) -> float:
        if self.aspect_ratio <= 0:
            return self.width
        return self.width / self.aspect_ratio

    def with_aspect_ratio(self, aspect_ratio: float) -> LogoConfig:
        return replace(self, aspect_ratio=aspect_ratio)

    def centered(self, bottom_width: float) -> LogoConfig:
        """Return a copy centred horizontally on a body of ``bottom_width``."""
        offset = max(0.0, (bottom_width - self.width) / 2)
        return replace(self, offset_x=round(offset, 1))

    def to_dict(self) -> dict[str, Any]:
        return {
            "enabled": self.enabled,
            "name": self.name,
            "width": self.width,
            "aspect_ratio": self.aspect_ratio,
            "offset_x": self.offset_x,
            "offset_y": self.offset_y,
            "opacity": self.opacity,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> LogoConfig:
        base = cls()
        aspect = _number(data.get("aspect_ratio"), base.aspect_ratio)
        return cls(
            enabled=bool(data.get("enabled", base.enabled)),
            name=_text(data.get("name"), base.name),
            width=_number(data.get("width"), base.width),
            aspect_ratio=aspect if aspect > 0 else base.aspect_ratio,
            offset_x=_number(data.get("offset_x"), base.offset_x),
            offset_y=_number(data.get("offset_y"), base.offset_y),
            opacity=_clamp(_number(data.get("opacity"), base.opacity), 0, 100),
        )


# =============================================================================
# DESIGN CONFIGURATION
# =============================================================================

DEFAULT_STRAP_COLOR = SolidFill(name="Brown", hex_color="#8B4513")
DEFAULT_POCKET_COLOR = SolidFill(name="Light Gray", hex_color="#D3D3D3")

# Numeric fields of DesignConfig coerced on construction
_DIMENSION_FIELDS = ("top_width", "bottom_width", "total_height", "neck_strap", "waist_strap")


@dataclass(frozen=True)
class DesignConfig:
    """
    Complete, immutable apron design used for one render pass.

    Attributes:
        top_width: Width of the top (bib) edge in cm
        bottom_width: Width of the bottom hem in cm
        total_height: Overall height in cm
        fill: Body fill, either ``SolidFill`` or ``PatternFill``
        strap_style: Neck strap construction
        neck_strap: Neck strap length in cm
        waist_strap: Waist strap length in cm
        strap_color: Strap colour
        pockets: Pocket layout record, one of the ``PocketConfig`` variants
        pocket_color: Pocket fabric colour
        logo: Logo placement
    """
    top_width: float = 45.0
    bottom_width: float = 60.0
    total_height: float = 70.0
    fill: FillSpec = field(default_factory=SolidFill)
    strap_style: StrapStyle = StrapStyle.CLASSIC
    neck_strap: float = 50.0
    waist_strap: float = 80.0
    strap_color: SolidFill = DEFAULT_STRAP_COLOR
    pockets: PocketConfig = field(default_factory=SinglePocket)
    pocket_color: SolidFill = DEFAULT_POCKET_COLOR
    logo: LogoConfig = field(default_factory=LogoConfig)

    def __post_init__(self):
        # Convert plain values and dicts (from YAML or session updates) to
        # records; unusable values fall back to the field default
        for name in _DIMENSION_FIELDS:
            default = self.__dataclass_fields__[name].default
            object.__setattr__(self, name, _number(getattr(self, name), default))
        object.__setattr__(self, "strap_style", _enum(StrapStyle, self.strap_style, StrapStyle.CLASSIC))
        if not isinstance(self.fill, (SolidFill, PatternFill)):
            object.__setattr__(self, "fill", fill_from_dict(_mapping(self.fill)))
        if not isinstance(self.pockets, tuple(POCKET_TYPES.values())):
            object.__setattr__(self, "pockets", pockets_from_dict(_mapping(self.pockets)))
        if not isinstance(self.strap_color, SolidFill):
            object.__setattr__(self, "strap_color", SolidFill.from_dict(_mapping(self.strap_color), DEFAULT_STRAP_COLOR))
        if not isinstance(self.pocket_color, SolidFill):
            object.__setattr__(self, "pocket_color", SolidFill.from_dict(_mapping(self.pocket_color), DEFAULT_POCKET_COLOR))
        if not isinstance(self.logo, LogoConfig):
            object.__setattr__(self, "logo", LogoConfig.from_dict(_mapping(self.logo)))

    # -------------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------------

    @property
    def upper_height(self) -> float:
        """Height of the upper (bib) section in cm."""
        return derive_section_heights(self.total_height)[0]

    @property
    def lower_height(self) -> float:
        """Height of the lower (skirt) section in cm."""
        return derive_section_heights(self.total_height)[1]

    @property
    def pocket_mode(self) -> PocketMode:
        return self.pockets.mode

    @property
    def max_width(self) -> float:
        return max(self.top_width, self.bottom_width)

    # -------------------------------------------------------------------------
    # Updates
    # -------------------------------------------------------------------------

    def replace(self, **changes: Any) -> DesignConfig:
        """Return a new configuration with ``changes`` applied."""
        return replace(self, **changes)

    def with_pocket_mode(self, mode: PocketMode | str) -> DesignConfig:
        """
        Switch pocket layout.

        The previous sub-record is always discarded and the new mode starts
        from its defaults, even when switching back to an earlier mode.
        """
        return replace(self, pockets=default_pockets(mode))

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Plain dict (JSON/YAML safe), derived heights included."""
        return {
            "top_width": self.top_width,
            "bottom_width": self.bottom_width,
            "total_height": self.total_height,
            "upper_height": self.upper_height,
            "lower_height": self.lower_height,
            "fill": self.fill.to_dict(),
            "strap_style": self.strap_style.value,
            "neck_strap": self.neck_strap,
            "waist_strap": self.waist_strap,
            "strap_color": self.strap_color.to_dict(),
            "pockets": self.pockets.to_dict(),
            "pocket_color": self.pocket_color.to_dict(),
            "logo": self.logo.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> DesignConfig:
        """
        Build a configuration from untrusted input.

        Missing, non-numeric, or non-finite values fall back to the field's
        default. Derived heights in the input are ignored and recomputed.
        """
        data = _mapping(data)
        base = cls()
        return cls(
            top_width=_number(data.get("top_width"), base.top_width),
            bottom_width=_number(data.get("bottom_width"), base.bottom_width),
            total_height=_number(data.get("total_height"), base.total_height),
            fill=fill_from_dict(_mapping(data.get("fill"))),
            strap_style=_enum(StrapStyle, data.get("strap_style"), base.strap_style),
            neck_strap=_number(data.get("neck_strap"), base.neck_strap),
            waist_strap=_number(data.get("waist_strap"), base.waist_strap),
            strap_color=SolidFill.from_dict(_mapping(data.get("strap_color")), DEFAULT_STRAP_COLOR),
            pockets=pockets_from_dict(_mapping(data.get("pockets")) or {"mode": base.pocket_mode.value}),
            pocket_color=SolidFill.from_dict(_mapping(data.get("pocket_color")), DEFAULT_POCKET_COLOR),
            logo=LogoConfig.from_dict(_mapping(data.get("logo"))),
        )

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> DesignConfig:
        """Load a design from a YAML file."""
        with open(yaml_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data if isinstance(data, Mapping) else {})

    def to_yaml(self, yaml_path: str | Path) -> None:
        """Save the design to a YAML file."""
        data = self.to_dict()
        # Derived values are recomputed on load
        data.pop("upper_height")
        data.pop("lower_height")
        with open(yaml_path, "w", encoding="utf-8") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)


def logo_fit_advice(config: DesignConfig) -> list[str]:
    """
    Advisory messages for a logo that leaves the body's bounding box.

    Nothing is clipped; the messages are for display only.
    """
    logo = config.logo
    if not logo.enabled:
        return []

    advice = []
    if logo.offset_x + logo.width > config.bottom_width:
        advice.append(
            f"Logo extends past the right edge: offset {logo.offset_x:g} + width "
            f"{logo.width:g} > bottom width {config.bottom_width:g} cm"
        )
    if logo.offset_y + logo.height > config.total_height:
        advice.append(
            f"Logo extends past the hem: offset {logo.offset_y:g} + height "
            f"{logo.height:.1f} > total height {config.total_height:g} cm"
        )
    return advice
