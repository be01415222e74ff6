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
Climb Axon - Profile Render Model (Core)
========================================

Derives the complete screen-space geometry of a climb from a profile and a
config. Pure Python, no drawing backend - just data and geometry.

Pipeline:
    segments -> accumulate -> world points (X km, Y km above minimum)
             -> world box W x H x [z_near, z_far]
             -> fit_and_center (with the shelf's pixels reserved)
             -> shelf vector + centering shift
             -> every polygon, polyline, grid line and tick the renderer needs

The model is rebuilt from scratch for every (profile, config) pair.
``derive_model`` memoizes that pure function on the (hashable) inputs.

Screen conventions:
    - Shelf vector ``shelf`` points from the platform base to its top and is
      exactly ``platform.height_px`` long.
    - Terrain face, ribbon, grid and elevation axis are "lifted" by ``shelf``.
    - Distance axis and platform base sit on the unlifted Y=0 line.
"""

import math
from dataclasses import dataclass, replace
from functools import lru_cache
from typing import Dict, Tuple

from .accumulator import AccumulatedProfile, accumulate, avg_grade, sanitize_grade, sanitize_length
from .climb_data import ClimbProfile, Segment
from .config import Config, Margin, RoofAnchor, RoofConfig, Units
from .constants import (
    MAX_DISTANCE_TICKS,
    MAX_ELEV_LINE_TARGET,
    METERS_PER_KM,
    MIN_ELEVATION_SPAN_M,
    MIN_RIBBON_DEPTH_KM,
    MIN_WORLD_WIDTH_KM,
    TICK_EPSILON,
)
from .label_formatting import (
    display_to_km,
    display_to_meters,
    format_distance_tick,
    format_elevation_tick,
    format_grade,
    km_to_display,
    meters_to_display,
)
from .logging_config import get_logger
from .projection import FittedProjector, ScreenPoint, fit_and_center, midpoint, unit_vector
from .ticks import nice_step, tick_values

logger = get_logger(__name__)

_ZERO_MARGIN = Margin(0.0, 0.0, 0.0, 0.0)

Polyline = Tuple[ScreenPoint, ...]
LineSegment = Tuple[ScreenPoint, ScreenPoint]


@dataclass(frozen=True)
class WorldPoint:
    """
    A profile point in world space.

    Attributes:
        x: Distance along the climb (km)
        y: Elevation above the profile minimum (km), always >= 0
    """
    x: float
    y: float


@dataclass(frozen=True)
class Tick:
    """An axis tick: screen anchor on the axis, display value and label text."""
    position: ScreenPoint
    value: float
    label: str


@dataclass(frozen=True)
class RibbonTile:
    """One ribbon quad per non-empty segment, corners near-a, near-b, far-b, far-a."""
    index: int
    grade: float
    corners: Tuple[ScreenPoint, ScreenPoint, ScreenPoint, ScreenPoint]


@dataclass(frozen=True)
class GradeLabel:
    """Per-segment grade text anchored at the middle of the shelf band."""
    index: int
    grade: float
    position: ScreenPoint
    text: str


@dataclass(frozen=True)
class RenderModel:
    """
    Everything the renderer needs, in screen pixels.

    Attributes are grouped as: canvas and units, world extents, projection,
    derived geometry, axes, statistics.
    """
    # Canvas and units
    canvas_width: float
    canvas_height: float
    units: Units

    # World extents
    width_km: float
    height_km: float
    elevation_span_m: float
    min_elevation_m: float
    max_elevation_m: float
    z_near: float
    z_far: float
    world_points: Tuple[WorldPoint, ...]
    segments: Tuple[Segment, ...]

    # Projection
    projector: FittedProjector
    shelf: ScreenPoint

    # Derived geometry
    face_polygon: Polyline
    top_points: Polyline
    platform_polygon: Polyline
    start_wall_polygon: Polyline
    ribbon_near: Polyline
    ribbon_far: Polyline
    ribbon_mid: Polyline
    ribbon_tiles: Tuple[RibbonTile, ...]
    distance_grid_lines: Tuple[LineSegment, ...]
    elevation_grid_lines: Tuple[LineSegment, ...]

    # Axes
    distance_axis: LineSegment
    distance_tangent: ScreenPoint
    distance_normal: ScreenPoint
    distance_ticks: Tuple[Tick, ...]
    grade_labels: Tuple[GradeLabel, ...]
    elevation_axis: LineSegment
    elevation_normal: ScreenPoint
    elevation_ticks: Tuple[Tick, ...]
    distance_step_km: float
    elevation_step_km: float
    elevation_step_display: float
    elevation_label_base: float

    # Statistics
    name: str
    total_km: float
    total_gain_m: int
    avg_grade: float

    def project(self, x: float, y: float, z: float) -> ScreenPoint:
        """Composed projector (fit, scale and shelf centering)."""
        return self.projector(x, y, z)

    def get_statistics(self) -> Dict:
        """Summary of the derived model, for logging and debugging."""
        return {
            "name": self.name,
            "num_segments": len(self.segments),
            "num_tiles": len(self.ribbon_tiles),
            "total_km": self.total_km,
            "total_gain_m": self.total_gain_m,
            "avg_grade": self.avg_grade,
            "world_box_km": (self.width_km, self.height_km, self.z_near, self.z_far),
            "scale_px_per_unit": self.projector.scale,
            "shelf": self.shelf,
            "distance_ticks": len(self.distance_ticks),
            "elevation_ticks": len(self.elevation_ticks),
        }


# ============================================================================
# WORLD GEOMETRY
# ============================================================================

def world_points_from(accumulated: AccumulatedProfile) -> Tuple[Tuple[WorldPoint, ...], float, float]:
    """
    Convert accumulated points to world points relative to the minimum.

    Returns:
        (world points, minimum elevation m, maximum elevation m)
    """
    elevations = accumulated.elevations_m
    elev_min = min(elevations)
    elev_max = max(elevations)
    points = tuple(
        WorldPoint(p.cumulative_distance_km, (p.cumulative_elevation_m - elev_min) / METERS_PER_KM)
        for p in accumulated.points
    )
    return points, elev_min, elev_max


def ribbon_z_bounds(roof: RoofConfig, width_km: float) -> Tuple[float, float]:
    """
    Depth band of the ribbon.

    Thickness ``D = max(0.01, depth_override_km or W * depth_fraction)``;
    ``front`` starts at the offset, ``back`` ends at it, ``center`` straddles it.

    Returns:
        (z_near, z_far) with z_far = z_near + D
    """
    if roof.depth_override_km is not None:
        depth = roof.depth_override_km
    else:
        depth = width_km * roof.depth_fraction
    depth = max(MIN_RIBBON_DEPTH_KM, depth)

    if roof.anchor == RoofAnchor.FRONT:
        z_near = 0.0 + roof.z_offset_km
    elif roof.anchor == RoofAnchor.BACK:
        z_near = -depth + roof.z_offset_km
    else:
        z_near = -depth / 2.0 + roof.z_offset_km

    return z_near, z_near + depth


def shelf_vector(projector: FittedProjector, height_px: float) -> ScreenPoint:
    """
    Screen vector of the shelf: world up (0,0,0)->(0,1,0), normalized, scaled
    to ``height_px``. Falls back to straight up the screen when world Y
    collapses to a point under the camera.
    """
    direction = unit_vector(projector(0.0, 0.0, 0.0), projector(0.0, 1.0, 0.0))
    if direction == (0.0, 0.0):
        direction = (0.0, -1.0)
    return direction[0] * height_px, direction[1] * height_px


def _fit_margin(config: Config):
    """
    Canvas margin grown to reserve room for the shelf.

    The full shelf height is reserved vertically, split evenly top and bottom
    so the inner rectangle keeps its centre. The shelf's horizontal lean under
    roll is reserved the same way.
    """
    canvas = config.canvas
    height_px = config.platform.height_px

    probe = fit_and_center(1.0, 1.0, 0.0, 0.0, 2.0, 2.0, _ZERO_MARGIN, config.camera)
    dx, _ = shelf_vector(probe, 1.0)

    reserve_v = min(height_px, max(0.0, canvas.inner_height - 1.0))
    reserve_h = min(abs(dx) * height_px, max(0.0, canvas.inner_width - 1.0))

    return replace(
        canvas.margin,
        top=canvas.margin.top + reserve_v / 2.0,
        bottom=canvas.margin.bottom + reserve_v / 2.0,
        left=canvas.margin.left + reserve_h / 2.0,
        right=canvas.margin.right + reserve_h / 2.0,
    )


# ============================================================================
# MODEL DERIVATION
# ============================================================================

def build_render_model(profile: ClimbProfile, config: Config) -> RenderModel:
    """
    Derive the render model for a profile (uncached).

    Args:
        profile: Climb to draw
        config: Validated render configuration

    Returns:
        RenderModel with every element in screen pixels
    """
    segments = tuple(
        Segment(sanitize_length(s.length_km), sanitize_grade(s.grade_percent))
        for s in profile.segments
    )
    accumulated = accumulate(segments)
    world_pts, elev_min, elev_max = world_points_from(accumulated)
    units = config.units

    # World box
    width = max(MIN_WORLD_WIDTH_KM, accumulated.total_km)
    span_m = max(MIN_ELEVATION_SPAN_M, elev_max - elev_min)
    height = span_m / METERS_PER_KM
    z_near, z_far = ribbon_z_bounds(config.roof, width)

    # Projection: fit with the shelf reserved, then shift by half the shelf.
    # The box always spans the face plane z = 0 as well as the ribbon band.
    base_projector = fit_and_center(
        width, height, min(z_near, z_far, 0.0), max(z_near, z_far, 0.0),
        config.canvas.width, config.canvas.height, _fit_margin(config), config.camera,
    )
    shelf = shelf_vector(base_projector, config.platform.height_px)
    P = base_projector.with_shift(-shelf[0] / 2.0, -shelf[1] / 2.0)

    def lifted(x: float, y: float, z: float) -> ScreenPoint:
        px, py = P(x, y, z)
        return px + shelf[0], py + shelf[1]

    # Terrain face (z = 0 plane, on top of the shelf)
    top_points = tuple(lifted(p.x, p.y, 0.0) for p in world_pts)
    face_polygon = (lifted(0.0, 0.0, 0.0),) + top_points + (lifted(width, 0.0, 0.0),)

    # Platform slab and start wall
    base_l, base_r = P(0.0, 0.0, 0.0), P(width, 0.0, 0.0)
    platform_polygon = (base_l, lifted(0.0, 0.0, 0.0), lifted(width, 0.0, 0.0), base_r)
    start_wall_polygon = (
        P(0.0, 0.0, z_near),
        P(0.0, 0.0, z_far),
        lifted(0.0, 0.0, z_far),
        lifted(0.0, 0.0, z_near),
    )

    # Ribbon
    ribbon_near = tuple(lifted(p.x, p.y, z_near) for p in world_pts)
    ribbon_far = tuple(lifted(p.x, p.y, z_far) for p in world_pts)
    ribbon_mid = tuple(midpoint(a, b) for a, b in zip(ribbon_near, ribbon_far))
    ribbon_tiles = tuple(
        RibbonTile(
            index=i,
            grade=segment.grade_percent,
            corners=(ribbon_near[i], ribbon_near[i + 1], ribbon_far[i + 1], ribbon_far[i]),
        )
        for i, segment in enumerate(segments)
        if segment.length_km > 0.0
    )

    # Distance grid and ticks (grid step is in display units)
    width_display = km_to_display(width, units)
    dist_step_display = config.grid.dist_step
    min_dist_step = width_display / MAX_DISTANCE_TICKS
    if dist_step_display < min_dist_step:
        logger.warning("Distance step %g is too dense for a %g wide climb, using %g",
                       dist_step_display, width_display, min_dist_step)
        dist_step_display = min_dist_step
    dist_step_km = display_to_km(dist_step_display, units)
    dist_values = tick_values(width_display, dist_step_display)
    dist_positions_km = [min(width, display_to_km(v, units)) for v in dist_values]

    grid_xs = list(dist_positions_km)
    if width - grid_xs[-1] > TICK_EPSILON:
        grid_xs.append(width)
    distance_grid_lines = tuple((lifted(x, 0.0, 0.0), lifted(x, height, 0.0)) for x in grid_xs)

    distance_axis = (base_l, base_r)
    tangent = unit_vector(base_l, base_r)
    normal = (-tangent[1], tangent[0])
    distance_ticks = tuple(
        Tick(position=P(x, 0.0, 0.0), value=v, label=format_distance_tick(v))
        for x, v in zip(dist_positions_km, dist_values)
    )

    # Per-segment grade labels, centred in the shelf band
    grade_labels = []
    for i, segment in enumerate(segments):
        if segment.length_km <= 0.0:
            continue
        x0 = world_pts[i].x
        x1 = world_pts[i + 1].x
        mid = midpoint(P(x0, 0.0, 0.0), P(x1, 0.0, 0.0))
        grade_labels.append(GradeLabel(
            index=i,
            grade=segment.grade_percent,
            position=(mid[0] + shelf[0] / 2.0, mid[1] + shelf[1] / 2.0),
            text=format_grade(segment.grade_percent),
        ))

    # Elevation grid and ticks (step chosen in display units)
    span_display = meters_to_display(span_m, units)
    elev_step_display = nice_step(
        span_display, min(config.grid.elev_line_target_count, MAX_ELEV_LINE_TARGET))
    elev_step_km = display_to_meters(elev_step_display, units) / METERS_PER_KM

    start_m = profile.start_elevation_m
    if start_m is not None and math.isfinite(start_m):
        label_base = meters_to_display(start_m + elev_min, units)
    else:
        label_base = 0.0

    elevation_grid_lines = tuple(
        (lifted(0.0, display_to_meters(v, units) / METERS_PER_KM, 0.0),
         lifted(width, display_to_meters(v, units) / METERS_PER_KM, 0.0))
        for v in tick_values(span_display + elev_step_display, elev_step_display)
    )

    elevation_axis = (P(width, 0.0, 0.0), lifted(width, height, 0.0))
    elev_tangent = unit_vector(*elevation_axis)
    elevation_normal = (-elev_tangent[1], elev_tangent[0])
    elevation_ticks = tuple(
        Tick(
            position=lifted(width, display_to_meters(v, units) / METERS_PER_KM, 0.0),
            value=label_base + v,
            label=format_elevation_tick(label_base + v, units),
        )
        for v in tick_values(span_display, elev_step_display)
    )

    model = RenderModel(
        canvas_width=config.canvas.width,
        canvas_height=config.canvas.height,
        units=units,
        width_km=width,
        height_km=height,
        elevation_span_m=span_m,
        min_elevation_m=elev_min,
        max_elevation_m=elev_max,
        z_near=z_near,
        z_far=z_far,
        world_points=world_pts,
        segments=segments,
        projector=P,
        shelf=shelf,
        face_polygon=face_polygon,
        top_points=top_points,
        platform_polygon=platform_polygon,
        start_wall_polygon=start_wall_polygon,
        ribbon_near=ribbon_near,
        ribbon_far=ribbon_far,
        ribbon_mid=ribbon_mid,
        ribbon_tiles=ribbon_tiles,
        distance_grid_lines=distance_grid_lines,
        elevation_grid_lines=elevation_grid_lines,
        distance_axis=distance_axis,
        distance_tangent=tangent,
        distance_normal=normal,
        distance_ticks=distance_ticks,
        grade_labels=tuple(grade_labels),
        elevation_axis=elevation_axis,
        elevation_normal=elevation_normal,
        elevation_ticks=elevation_ticks,
        distance_step_km=dist_step_km,
        elevation_step_km=elev_step_km,
        elevation_step_display=elev_step_display,
        elevation_label_base=label_base,
        name=profile.name or "Climb",
        total_km=accumulated.total_km,
        total_gain_m=accumulated.total_gain_m,
        avg_grade=avg_grade(segments),
    )

    logger.debug("Derived render model: %s", model.get_statistics())
    return model


@lru_cache(maxsize=32)
def derive_model(profile: ClimbProfile, config: Config) -> RenderModel:
    """
    Memoized ``build_render_model``.

    Profiles and configs are frozen dataclasses, so equal inputs share one
    model. The returned model is immutable.
    """
    return build_render_model(profile, config)


__all__ = [
    "WorldPoint",
    "Tick",
    "RibbonTile",
    "GradeLabel",
    "RenderModel",
    "world_points_from",
    "ribbon_z_bounds",
    "shelf_vector",
    "build_render_model",
    "derive_model",
]
