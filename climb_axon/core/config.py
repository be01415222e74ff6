# ==============================================================================
# Climb Axon - Axonometric Climb Profile Renderer
# Copyright (c) 2025 Michael Yoder / Desert Springs Civil Engineering PLLC
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
#
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
# You should have received a copy of the GNU General Public License along with this program. If not, see <https://www.gnu.org/licenses/>.
#
# Primary Author: Michael Yoder
# Company: Desert Springs Civil Engineering PLLC
# ==============================================================================

"""
Climb Axon - Render Configuration (Core)
========================================

Explicit, frozen configuration structs for canvas, camera, ribbon, platform,
grid, styles, slope colours and units.

Validation happens here, at the boundary: ``Config.from_dict`` clamps
out-of-range numbers (logging a warning) and raises ``ConfigError`` for
structurally invalid input. Everything downstream trusts the config.

Config JSON accepts the camelCase keys of the web app (``depthFrac``,
``heightPx``, ``slopeColors`` ...) as well as snake_case field names. Missing
keys fall back to ``DEFAULT_CONFIG``.
"""

import json
import math
from dataclasses import asdict, dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from .constants import MAX_ELEV_LINE_TARGET
from .logging_config import get_logger
from .projection import CameraParams
from .slope_colors import DEFAULT_SLOPE_COLORS, SlopeColor, check_bucket_order

logger = get_logger(__name__)


class ConfigError(ValueError):
    """Raised when configuration data cannot be turned into a Config."""


class RoofAnchor(Enum):
    """Where the ribbon's depth band sits relative to the Z=0 face plane."""
    FRONT = "front"     # z_near at 0, band extends towards +Z
    CENTER = "center"   # band straddles 0
    BACK = "back"       # band ends at 0

    @classmethod
    def parse(cls, value) -> "RoofAnchor":
        """Any unrecognized value means CENTER."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            logger.warning("Unknown roof anchor %r, using center", value)
            return cls.CENTER


class Units(Enum):
    """Unit system for labels and grid steps (geometry is always km)."""
    METRIC = "metric"       # km / m
    IMPERIAL = "imperial"   # mi / ft

    @classmethod
    def parse(cls, value) -> "Units":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            logger.warning("Unknown unit system %r, using metric", value)
            return cls.METRIC


@dataclass(frozen=True)
class Margin:
    top: float = 90.0
    right: float = 170.0
    bottom: float = 90.0
    left: float = 60.0


@dataclass(frozen=True)
class CanvasConfig:
    width: float = 1180.0
    height: float = 720.0
    margin: Margin = field(default_factory=Margin)

    @property
    def inner_width(self) -> float:
        return self.width - self.margin.left - self.margin.right

    @property
    def inner_height(self) -> float:
        return self.height - self.margin.top - self.margin.bottom


@dataclass(frozen=True)
class RoofConfig:
    """
    Ribbon depth band.

    Attributes:
        depth_fraction: Band thickness as a fraction of total distance
        depth_override_km: Fixed thickness in km (wins over the fraction)
        anchor: Band placement relative to Z=0
        z_offset_km: Extra shift of the band along Z
    """
    depth_fraction: float = 0.1
    depth_override_km: Optional[float] = None
    anchor: RoofAnchor = RoofAnchor.BACK
    z_offset_km: float = 0.0


@dataclass(frozen=True)
class PlatformConfig:
    """Shelf under the terrain, fixed in screen pixels."""
    height_px: float = 30.0
    fill: str = "var(--platform)"
    wall_fill: str = "var(--platform-wall)"


@dataclass(frozen=True)
class GridConfig:
    """
    Attributes:
        dist_step: Distance grid step in display units (km or mi)
        elev_line_target_count: Target number of elevation grid intervals
    """
    dist_step: float = 1.0
    elev_line_target_count: int = 8


@dataclass(frozen=True)
class RoadStyle:
    stroke_width: float = 2.4
    dash: str = "10 10"


@dataclass(frozen=True)
class FaceStyle:
    stroke: str = "#9aa1aa"
    stroke_width: float = 1.25


@dataclass(frozen=True)
class Config:
    """Complete render configuration. Hashable, so it can key caches."""
    canvas: CanvasConfig = field(default_factory=CanvasConfig)
    camera: CameraParams = field(default_factory=CameraParams)
    roof: RoofConfig = field(default_factory=RoofConfig)
    platform: PlatformConfig = field(default_factory=PlatformConfig)
    grid: GridConfig = field(default_factory=GridConfig)
    road: RoadStyle = field(default_factory=RoadStyle)
    face: FaceStyle = field(default_factory=FaceStyle)
    title_font_size: float = 26.0
    label_font_size: float = 13.0
    slope_colors: Tuple[SlopeColor, ...] = DEFAULT_SLOPE_COLORS
    units: Units = Units.METRIC

    def __post_init__(self):
        if not isinstance(self.slope_colors, tuple):
            object.__setattr__(self, "slope_colors", tuple(self.slope_colors))

    def with_camera(self, **overrides) -> "Config":
        """Copy with some camera fields replaced, e.g. ``with_camera(yaw_deg=45)``."""
        return replace(self, camera=replace(self.camera, **overrides))

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Config":
        """
        Build a Config from a (possibly partial) mapping.

        Args:
            data: Config mapping, camelCase or snake_case keys

        Returns:
            Validated Config

        Raises:
            ConfigError: If a value has the wrong type or slope buckets are unsorted
        """
        data = data or {}
        if not isinstance(data, dict):
            raise ConfigError(f"Config must be a mapping, got {type(data).__name__}")

        try:
            return cls(
                canvas=_canvas_from_dict(_section(data, "canvas")),
                camera=_camera_from_dict(_section(data, "camera", "axon")),
                roof=_roof_from_dict(_section(data, "roof")),
                platform=_platform_from_dict(_section(data, "platform")),
                grid=_grid_from_dict(_section(data, "grid")),
                road=_road_from_dict(_section(data, "road")),
                face=_face_from_dict(_section(data, "face")),
                title_font_size=_positive(
                    _get(data, DEFAULT_FONT_SIZES[0], "titleFontSize", "title_font_size"),
                    DEFAULT_FONT_SIZES[0], "titleFontSize"),
                label_font_size=_positive(
                    _get(data, DEFAULT_FONT_SIZES[1], "labelFontSize", "label_font_size"),
                    DEFAULT_FONT_SIZES[1], "labelFontSize"),
                slope_colors=_slope_colors_from_list(
                    _get(data, None, "slopeColors", "slope_colors")),
                units=Units.parse(data.get("units", Units.METRIC)),
            )
        except (TypeError, ValueError, KeyError) as e:
            if isinstance(e, ConfigError):
                raise
            raise ConfigError(f"Invalid config value: {e}")

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the camelCase JSON layout accepted by ``from_dict``."""
        return {
            "canvas": {
                "width": self.canvas.width,
                "height": self.canvas.height,
                "margin": asdict(self.canvas.margin),
            },
            "camera": {
                "yawDeg": self.camera.yaw_deg,
                "pitchDeg": self.camera.pitch_deg,
                "rollDeg": self.camera.roll_deg,
                "xScale": self.camera.x_scale,
                "verticalExaggeration": self.camera.vertical_exaggeration,
            },
            "roof": {
                "depthFrac": self.roof.depth_fraction,
                "depthOverrideKm": self.roof.depth_override_km,
                "anchor": self.roof.anchor.value,
                "zOffsetKm": self.roof.z_offset_km,
            },
            "platform": {
                "heightPx": self.platform.height_px,
                "fill": self.platform.fill,
                "wallFill": self.platform.wall_fill,
            },
            "grid": {
                "distStep": self.grid.dist_step,
                "elevLines": self.grid.elev_line_target_count,
            },
            "road": {"strokeWidth": self.road.stroke_width, "dash": self.road.dash},
            "face": {"stroke": self.face.stroke, "strokeWidth": self.face.stroke_width},
            "titleFontSize": self.title_font_size,
            "labelFontSize": self.label_font_size,
            "slopeColors": [b.to_dict() for b in self.slope_colors],
            "units": self.units.value,
        }


DEFAULT_FONT_SIZES = (26.0, 13.0)

DEFAULT_CONFIG = Config()


# ============================================================================
# SECTION PARSERS
# ============================================================================

def _section(data: Dict, *names: str) -> Dict:
    for name in names:
        if name in data and data[name] is not None:
            value = data[name]
            if not isinstance(value, dict):
                raise ConfigError(f"Config section '{name}' must be a mapping")
            return value
    return {}


def _get(data: Dict, default, *keys: str):
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _finite(value, default: float, name: str) -> float:
    number = float(value)
    if not math.isfinite(number):
        logger.warning("Config %s=%r is not finite, using %s", name, value, default)
        return default
    return number


def _positive(value, default: float, name: str) -> float:
    number = _finite(value, default, name)
    if number <= 0:
        logger.warning("Config %s=%r must be positive, using %s", name, value, default)
        return default
    return number


def _non_negative(value, default: float, name: str) -> float:
    number = _finite(value, default, name)
    if number < 0:
        logger.warning("Config %s=%r must not be negative, clamped to 0", name, value)
        return 0.0
    return number


def _canvas_from_dict(data: Dict) -> CanvasConfig:
    d = CanvasConfig()
    m = _section(data, "margin")
    margin = Margin(
        top=_non_negative(_get(m, d.margin.top, "top"), d.margin.top, "margin.top"),
        right=_non_negative(_get(m, d.margin.right, "right"), d.margin.right, "margin.right"),
        bottom=_non_negative(_get(m, d.margin.bottom, "bottom"), d.margin.bottom, "margin.bottom"),
        left=_non_negative(_get(m, d.margin.left, "left"), d.margin.left, "margin.left"),
    )
    canvas = CanvasConfig(
        width=_positive(_get(data, d.width, "width"), d.width, "canvas.width"),
        height=_positive(_get(data, d.height, "height"), d.height, "canvas.height"),
        margin=margin,
    )
    if canvas.inner_width <= 0 or canvas.inner_height <= 0:
        logger.warning(
            "Canvas margins leave no drawing area (%.0f x %.0f), using default margins",
            canvas.inner_width, canvas.inner_height,
        )
        canvas = replace(canvas, margin=Margin())
        if canvas.inner_width <= 0 or canvas.inner_height <= 0:
            canvas = replace(canvas, margin=Margin(0.0, 0.0, 0.0, 0.0))
    return canvas


def _camera_from_dict(data: Dict) -> CameraParams:
    d = CameraParams()
    return CameraParams(
        yaw_deg=_finite(_get(data, d.yaw_deg, "yawDeg", "yaw_deg"), d.yaw_deg, "yawDeg"),
        pitch_deg=_finite(_get(data, d.pitch_deg, "pitchDeg", "pitch_deg"), d.pitch_deg, "pitchDeg"),
        roll_deg=_finite(_get(data, d.roll_deg, "rollDeg", "roll_deg"), d.roll_deg, "rollDeg"),
        x_scale=_positive(_get(data, d.x_scale, "xScale", "x_scale"), d.x_scale, "xScale"),
        vertical_exaggeration=_positive(
            _get(data, d.vertical_exaggeration, "verticalExaggeration", "vertical_exaggeration"),
            d.vertical_exaggeration, "verticalExaggeration"),
    )


def _roof_from_dict(data: Dict) -> RoofConfig:
    d = RoofConfig()
    override = _get(data, None, "depthOverrideKm", "depth_override_km")
    if override is not None:
        override = _non_negative(override, 0.0, "depthOverrideKm")
    return RoofConfig(
        depth_fraction=_non_negative(
            _get(data, d.depth_fraction, "depthFrac", "depthFraction", "depth_fraction"),
            d.depth_fraction, "depthFrac"),
        depth_override_km=override,
        anchor=RoofAnchor.parse(_get(data, d.anchor, "anchor")),
        z_offset_km=_finite(_get(data, d.z_offset_km, "zOffsetKm", "z_offset_km"),
                            d.z_offset_km, "zOffsetKm"),
    )


def _platform_from_dict(data: Dict) -> PlatformConfig:
    d = PlatformConfig()
    return PlatformConfig(
        height_px=_non_negative(_get(data, d.height_px, "heightPx", "height_px"),
                                d.height_px, "heightPx"),
        fill=str(_get(data, d.fill, "fill")),
        wall_fill=str(_get(data, d.wall_fill, "wallFill", "wall_fill")),
    )


def _grid_from_dict(data: Dict) -> GridConfig:
    d = GridConfig()
    target = int(_positive(
        _get(data, d.elev_line_target_count, "elevLines", "elevLineTargetCount",
             "elev_line_target_count"),
        d.elev_line_target_count, "elevLines"))
    if target > MAX_ELEV_LINE_TARGET:
        logger.warning("Config elevLines=%d is too dense, clamped to %d",
                       target, MAX_ELEV_LINE_TARGET)
        target = MAX_ELEV_LINE_TARGET
    return GridConfig(
        dist_step=_positive(_get(data, d.dist_step, "distStep", "distStepKm", "dist_step"),
                            d.dist_step, "distStep"),
        elev_line_target_count=max(1, target),
    )


def _road_from_dict(data: Dict) -> RoadStyle:
    d = RoadStyle()
    return RoadStyle(
        stroke_width=_non_negative(_get(data, d.stroke_width, "strokeWidth", "stroke_width"),
                                   d.stroke_width, "road.strokeWidth"),
        dash=str(_get(data, d.dash, "dash")),
    )


def _face_from_dict(data: Dict) -> FaceStyle:
    d = FaceStyle()
    return FaceStyle(
        stroke=str(_get(data, d.stroke, "stroke")),
        stroke_width=_non_negative(_get(data, d.stroke_width, "strokeWidth", "stroke_width"),
                                   d.stroke_width, "face.strokeWidth"),
    )


def _slope_colors_from_list(raw) -> Tuple[SlopeColor, ...]:
    if raw is None:
        return DEFAULT_SLOPE_COLORS
    if not isinstance(raw, list):
        raise ConfigError("slopeColors must be a list of {upTo, color}")

    buckets = tuple(SlopeColor.from_dict(item) for item in raw)
    for problem in check_bucket_order(buckets):
        if problem.startswith("warning:"):
            logger.warning(problem[len("warning:"):].strip())
        else:
            raise ConfigError(problem)
    return buckets


# ============================================================================
# FILE IO
# ============================================================================

def load_config(path: Union[str, Path]) -> Config:
    """
    Load a Config from a JSON file.

    Raises:
        ConfigError: If the file is missing, unreadable or invalid
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Failed to load config from {path}: {e}")

    config = Config.from_dict(data)
    logger.info("Loaded config from %s", path)
    return config


def save_config(config: Config, path: Union[str, Path]) -> Path:
    """Write a Config as JSON and return its path."""
    path = Path(path)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config.to_dict(), f, indent=2)
    return path


__all__ = [
    "ConfigError",
    "RoofAnchor",
    "Units",
    "Margin",
    "CanvasConfig",
    "CameraParams",
    "RoofConfig",
    "PlatformConfig",
    "GridConfig",
    "RoadStyle",
    "FaceStyle",
    "Config",
    "DEFAULT_CONFIG",
    "load_config",
    "save_config",
]
