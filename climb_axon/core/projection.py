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
Climb Axon - Axonometric Projector (Core)
=========================================

Orthographic oblique projection of world space (km, km, km) onto the screen,
plus the fit-and-center step that scales and translates a world box into the
inner canvas rectangle.

Projection order is fixed and not commutative:
    1. Scale      X * x_scale, Y * vertical_exaggeration, Z
    2. Yaw        rotate about the vertical axis (mixes X and Z)
    3. Pitch      rotate about the horizontal axis (mixes Y and Z)
    4. Roll       rotate about the depth axis (mixes X and Y)

The raw projection keeps world orientation (positive Y is up). The fitted
projector flips Y so that positive world Y moves up the screen, i.e. screen Y
decreases.
"""

import math
from dataclasses import dataclass
from typing import Callable, Tuple

import numpy as np

from .constants import MIN_SCREEN_EXTENT
from .logging_config import get_logger

logger = get_logger(__name__)

ScreenPoint = Tuple[float, float]


@dataclass(frozen=True)
class CameraParams:
    """
    Oblique camera.

    Attributes:
        yaw_deg: Rotation about the vertical axis
        pitch_deg: Rotation about the horizontal screen axis
        roll_deg: Rotation about the viewing axis
        x_scale: Stretch of the distance axis
        vertical_exaggeration: Stretch of world Y (terrain relief only)
    """
    yaw_deg: float = 30.0
    pitch_deg: float = 30.0
    roll_deg: float = 0.0
    x_scale: float = 1.0
    vertical_exaggeration: float = 9.0


def _rotation_terms(camera: CameraParams):
    yaw = math.radians(camera.yaw_deg)
    pitch = math.radians(camera.pitch_deg)
    roll = math.radians(camera.roll_deg)
    return (math.cos(yaw), math.sin(yaw),
            math.cos(pitch), math.sin(pitch),
            math.cos(roll), math.sin(roll))


def axon_project(x: float, y: float, z: float, camera: CameraParams) -> ScreenPoint:
    """
    Project one world point (raw, unfitted).

    Args:
        x: Distance along the climb (km)
        y: Relative elevation (km)
        z: Depth (km)
        camera: Camera parameters

    Returns:
        (x, y) in raw projected units, Y up
    """
    cy, sy, cp, sp, cr, sr = _rotation_terms(camera)

    xs = x * camera.x_scale
    ys = y * camera.vertical_exaggeration
    zs = z

    # Ry(yaw)
    x1 = cy * xs + sy * zs
    y1 = ys
    z1 = -sy * xs + cy * zs

    # Rx(pitch)
    x2 = x1
    y2 = cp * y1 - sp * z1

    # Rz(roll)
    xp = cr * x2 - sr * y2
    yp = sr * x2 + cr * y2

    return xp, yp


def project_many(points: np.ndarray, camera: CameraParams) -> np.ndarray:
    """
    Vectorized ``axon_project``.

    Args:
        points: Array of shape (N, 3) with world (X, Y, Z)
        camera: Camera parameters

    Returns:
        Array of shape (N, 2) with raw projected (x, y)
    """
    pts = np.asarray(points, dtype=float).reshape(-1, 3)
    cy, sy, cp, sp, cr, sr = _rotation_terms(camera)

    xs = pts[:, 0] * camera.x_scale
    ys = pts[:, 1] * camera.vertical_exaggeration
    zs = pts[:, 2]

    x1 = cy * xs + sy * zs
    z1 = -sy * xs + cy * zs
    y2 = cp * ys - sp * z1

    return np.column_stack((cr * x1 - sr * y2, sr * x1 + cr * y2))


def box_corners(width: float, height: float, z_min: float, z_max: float) -> np.ndarray:
    """The 8 corners of the axis-aligned box [0,W] x [0,H] x [z_min,z_max]."""
    return np.array([
        [0.0, 0.0, z_min],
        [width, 0.0, z_min],
        [0.0, height, z_min],
        [width, height, z_min],
        [0.0, 0.0, z_max],
        [width, 0.0, z_max],
        [0.0, height, z_max],
        [width, height, z_max],
    ])


@dataclass(frozen=True)
class FittedProjector:
    """
    World -> screen pixels after fit-and-center.

    ``screen = (offset_x + raw.x * scale, offset_y - raw.y * scale) + shift``

    Instances are callable: ``projector(X, Y, Z) -> (x, y)``.
    """
    camera: CameraParams
    scale: float
    offset_x: float
    offset_y: float
    shift_x: float = 0.0
    shift_y: float = 0.0

    def __call__(self, x: float, y: float, z: float) -> ScreenPoint:
        return self.project(x, y, z)

    def project(self, x: float, y: float, z: float) -> ScreenPoint:
        px, py = axon_project(x, y, z, self.camera)
        return (self.offset_x + px * self.scale + self.shift_x,
                self.offset_y - py * self.scale + self.shift_y)

    def project_array(self, points: np.ndarray) -> np.ndarray:
        """Vectorized ``project`` over an (N, 3) array."""
        raw = project_many(points, self.camera)
        out = np.empty_like(raw)
        out[:, 0] = self.offset_x + raw[:, 0] * self.scale + self.shift_x
        out[:, 1] = self.offset_y - raw[:, 1] * self.scale + self.shift_y
        return out

    def with_shift(self, dx: float, dy: float) -> "FittedProjector":
        """Copy of this projector with an extra screen-space translation."""
        return FittedProjector(
            camera=self.camera,
            scale=self.scale,
            offset_x=self.offset_x,
            offset_y=self.offset_y,
            shift_x=self.shift_x + dx,
            shift_y=self.shift_y + dy,
        )


def fit_and_center(
    width: float,
    height: float,
    z_min: float,
    z_max: float,
    canvas_width: float,
    canvas_height: float,
    margin,
    camera: CameraParams,
) -> FittedProjector:
    """
    Fit a world box into the inner canvas rectangle and center it.

    Args:
        width, height: World box extents W (km) and H (km)
        z_min, z_max: Depth range of the box (km)
        canvas_width, canvas_height: Canvas size (px)
        margin: Object with ``top``, ``right``, ``bottom``, ``left`` (px)
        camera: Camera parameters

    Returns:
        FittedProjector whose 8 projected box corners lie inside the inner
        rectangle, with the box's screen bounding rectangle centred on it
    """
    projected = project_many(box_corners(width, height, z_min, z_max), camera)
    min_x, min_y = projected.min(axis=0)
    max_x, max_y = projected.max(axis=0)

    inner_w = canvas_width - margin.left - margin.right
    inner_h = canvas_height - margin.top - margin.bottom
    bound_w = max(MIN_SCREEN_EXTENT, float(max_x - min_x))
    bound_h = max(MIN_SCREEN_EXTENT, float(max_y - min_y))
    scale = min(inner_w / bound_w, inner_h / bound_h)

    # Bounding-rectangle centre (raw) onto inner-rectangle centre (screen)
    xc = float(min_x + max_x) / 2.0
    yc = float(min_y + max_y) / 2.0
    cx = margin.left + inner_w / 2.0
    cy = margin.top + inner_h / 2.0

    logger.debug(
        "Fit box %.3f x %.3f km (z %.3f..%.3f) into %.0f x %.0f px: scale %.2f",
        width, height, z_min, z_max, inner_w, inner_h, scale,
    )

    return FittedProjector(
        camera=camera,
        scale=scale,
        offset_x=cx - xc * scale,
        offset_y=cy + yc * scale,
    )


def unit_vector(a: ScreenPoint, b: ScreenPoint) -> ScreenPoint:
    """Unit vector from a to b; the zero vector if the points coincide."""
    dx = b[0] - a[0]
    dy = b[1] - a[1]
    length = math.hypot(dx, dy)
    if length == 0:
        return 0.0, 0.0
    return dx / length, dy / length


def midpoint(a: ScreenPoint, b: ScreenPoint) -> ScreenPoint:
    return (a[0] + b[0]) / 2.0, (a[1] + b[1]) / 2.0


Projector = Callable[[float, float, float], ScreenPoint]


__all__ = [
    "CameraParams",
    "ScreenPoint",
    "Projector",
    "axon_project",
    "project_many",
    "box_corners",
    "FittedProjector",
    "fit_and_center",
    "unit_vector",
    "midpoint",
]
