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
Segment Accumulator
===================

Turns (length, grade) segments into cumulative distance/elevation points and
summary statistics.

Input is sanitized rather than validated: negative or NaN lengths count as 0,
non-finite grades count as 0. The functions here never raise for numeric
input.
"""

import math
from dataclasses import dataclass
from typing import Iterable, List, Tuple

from .climb_data import Segment
from .constants import METERS_PER_KM, RISE_M_PER_KM_PERCENT


@dataclass(frozen=True)
class AccumulatedPoint:
    """Cumulative position at a segment boundary."""
    cumulative_distance_km: float
    cumulative_elevation_m: float

    def __repr__(self):
        return (f"AccumulatedPoint({self.cumulative_distance_km:.3f}km, "
                f"{self.cumulative_elevation_m:.1f}m)")


@dataclass(frozen=True)
class AccumulatedProfile:
    """
    Result of accumulating a segment list.

    Attributes:
        points: One point per segment boundary, starting at (0, 0)
        total_km: Sum of sanitized segment lengths
        total_gain_m: Rounded sum of positive rises only
    """
    points: Tuple[AccumulatedPoint, ...]
    total_km: float
    total_gain_m: int

    @property
    def elevations_m(self) -> List[float]:
        return [p.cumulative_elevation_m for p in self.points]

    @property
    def distances_km(self) -> List[float]:
        return [p.cumulative_distance_km for p in self.points]


def sanitize_length(value) -> float:
    """Clamp a segment length to a finite, non-negative km value."""
    try:
        length = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(length) or length < 0.0:
        return 0.0
    return length


def sanitize_grade(value) -> float:
    """Replace a non-finite grade with 0."""
    try:
        grade = float(value)
    except (TypeError, ValueError):
        return 0.0
    return grade if math.isfinite(grade) else 0.0


def segment_rise_m(segment: Segment) -> float:
    """
    Elevation change of one segment in metres.

    1 km at g% rises 1000 * g / 100 = g * 10 metres.
    """
    return (sanitize_length(segment.length_km)
            * sanitize_grade(segment.grade_percent)
            * RISE_M_PER_KM_PERCENT)


def accumulate(segments: Iterable[Segment]) -> AccumulatedProfile:
    """
    Accumulate segments into boundary points.

    Args:
        segments: Ordered segments along the climb

    Returns:
        AccumulatedProfile with len(segments) + 1 points

    Example:
        >>> acc = accumulate([Segment(1, 10), Segment(1, -5)])
        >>> acc.elevations_m
        [0.0, 100.0, 50.0]
        >>> acc.total_gain_m
        100
    """
    points = [AccumulatedPoint(0.0, 0.0)]
    distance = 0.0
    elevation = 0.0
    gain = 0.0

    for segment in segments:
        distance += sanitize_length(segment.length_km)
        rise = segment_rise_m(segment)
        elevation += rise
        if rise > 0:
            gain += rise
        points.append(AccumulatedPoint(distance, elevation))

    return AccumulatedProfile(
        points=tuple(points),
        total_km=distance,
        total_gain_m=int(round(gain)),
    )


def avg_grade(segments: Iterable[Segment]) -> float:
    """
    Distance-weighted average grade in percent.

    A climb with zero total distance is treated as 1 km long so the result is
    0 rather than a division error.
    """
    total_km = 0.0
    total_rise_m = 0.0
    for segment in segments:
        total_km += sanitize_length(segment.length_km)
        total_rise_m += segment_rise_m(segment)

    if total_km <= 0.0:
        total_km = 1.0

    return total_rise_m / (total_km * METERS_PER_KM) * 100.0


__all__ = [
    "AccumulatedPoint",
    "AccumulatedProfile",
    "sanitize_length",
    "sanitize_grade",
    "segment_rise_m",
    "accumulate",
    "avg_grade",
]
