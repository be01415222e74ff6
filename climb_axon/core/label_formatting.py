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
Label Formatting Utilities

Converts between world units (km, m) and display units, and formats the text
of axis ticks, grade labels and the summary line.

Display units:
- Metric: distance in km, elevation in m
  Examples: 12.5 km, 1402 m
- Imperial: distance in mi, elevation in ft
  Examples: 7.8 mi, 4600 ft

Geometry always stays in km; only labels and user-facing grid steps use the
display units.
"""

import math

from .config import Units
from .constants import FEET_PER_METER, KM_PER_MILE
from .ticks import to_fixed_n


def distance_unit(units: Units) -> str:
    return "mi" if units == Units.IMPERIAL else "km"


def elevation_unit(units: Units) -> str:
    return "ft" if units == Units.IMPERIAL else "m"


def km_to_display(km: float, units: Units) -> float:
    """World km to display distance (km or mi)."""
    return km / KM_PER_MILE if units == Units.IMPERIAL else km


def display_to_km(value: float, units: Units) -> float:
    """Display distance (km or mi) to world km."""
    return value * KM_PER_MILE if units == Units.IMPERIAL else value


def meters_to_display(meters: float, units: Units) -> float:
    """Metres to display elevation (m or ft)."""
    return meters * FEET_PER_METER if units == Units.IMPERIAL else meters


def display_to_meters(value: float, units: Units) -> float:
    """Display elevation (m or ft) to metres."""
    return value / FEET_PER_METER if units == Units.IMPERIAL else value


def format_distance_tick(value: float) -> str:
    """
    Format a distance tick value in display units.

    Whole numbers print without decimals, anything else with one.

    Examples:
        >>> format_distance_tick(3.0)
        '3'
        >>> format_distance_tick(2.5)
        '2.5'
        >>> format_distance_tick(1.25)
        '1.2'
    """
    if abs(value - round(value)) < 1e-9:
        return str(int(round(value)))
    return f"{to_fixed_n(value, 1):.1f}"


def format_elevation_tick(value: float, units: Units) -> str:
    """
    Format an elevation tick in display units, truncated to an integer.

    Examples:
        >>> format_elevation_tick(250.0, Units.METRIC)
        '250 m'
        >>> format_elevation_tick(820.2, Units.IMPERIAL)
        '820 ft'
    """
    if not math.isfinite(value):
        return f"- {elevation_unit(units)}"
    return f"{int(value)} {elevation_unit(units)}"


def format_grade(grade: float) -> str:
    """
    Format a grade with one decimal.

    Examples:
        >>> format_grade(7.36)
        '7.4%'
        >>> format_grade(-3.0)
        '-3.0%'
    """
    return f"{to_fixed_n(grade, 1):.1f}%"


def format_summary(total_km: float, total_gain_m: int, avg_grade: float, units: Units) -> str:
    """
    Subtitle line: distance, gain and average grade.

    Examples:
        >>> format_summary(17.7, 1261, 7.12, Units.METRIC)
        '17.7 km • 1261 m gain • 7.1% avg'
    """
    distance = to_fixed_n(km_to_display(total_km, units), 1)
    gain = int(round(meters_to_display(total_gain_m, units)))
    return (f"{distance:g} {distance_unit(units)} • "
            f"{gain} {elevation_unit(units)} gain • "
            f"{to_fixed_n(avg_grade, 1):g}% avg")


def distance_axis_title(units: Units) -> str:
    return f"Distance ({distance_unit(units)})"


__all__ = [
    "distance_unit",
    "elevation_unit",
    "km_to_display",
    "display_to_km",
    "meters_to_display",
    "display_to_meters",
    "format_distance_tick",
    "format_elevation_tick",
    "format_grade",
    "format_summary",
    "distance_axis_title",
]
