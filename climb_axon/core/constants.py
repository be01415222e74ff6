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
Geometry and Unit Constants
===========================

Unit conversion factors and the small epsilons used to keep degenerate
profiles drawable.

Units:
    World space is kilometres on all three axes.
    Metric display: km (distance), m (elevation)
    Imperial display: mi (distance), ft (elevation)
"""

# Unit conversion
KM_PER_MILE = 1.609344
FEET_PER_METER = 3.28084
METERS_PER_KM = 1000.0

# Rise in metres of 1 km at 1% grade
RISE_M_PER_KM_PERCENT = 10.0

# Degenerate geometry guards
MIN_WORLD_WIDTH_KM = 1e-3       # Zero-length climbs
MIN_ELEVATION_SPAN_M = 10.0     # Flat climbs still get a visible face
MIN_RIBBON_DEPTH_KM = 0.01      # Ribbon thickness floor
MIN_SCREEN_EXTENT = 1e-6        # Projected bounding box floor (fit)

# Tick candidates for nice steps (x 10^k)
NICE_STEP_MULTIPLIERS = (1.0, 2.0, 2.5, 5.0, 10.0)

# Float tolerance for "label falls on a tick" comparisons
TICK_EPSILON = 1e-6

# Grid density limits
MAX_ELEV_LINE_TARGET = 100
MAX_DISTANCE_TICKS = 500

__all__ = [
    "KM_PER_MILE",
    "FEET_PER_METER",
    "METERS_PER_KM",
    "RISE_M_PER_KM_PERCENT",
    "MIN_WORLD_WIDTH_KM",
    "MIN_ELEVATION_SPAN_M",
    "MIN_RIBBON_DEPTH_KM",
    "MIN_SCREEN_EXTENT",
    "NICE_STEP_MULTIPLIERS",
    "TICK_EPSILON",
    "MAX_ELEV_LINE_TARGET",
    "MAX_DISTANCE_TICKS",
]
