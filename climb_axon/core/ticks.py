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
Grid Step Sizing
================

Picks "nice" round tick intervals (1, 2, 2.5, 5, 10 x 10^k) for axis grids
and lays out tick values along a range.

The step sizer is unit agnostic: callers pass a range in display units
(km, mi, m or ft) and convert the chosen step back to world km themselves.
"""

import math
from typing import List

from .constants import NICE_STEP_MULTIPLIERS, TICK_EPSILON


def nice_step(value_range: float, max_ticks: int) -> float:
    """
    Choose the round step closest to ``value_range / max_ticks``.

    Args:
        value_range: Extent of the axis in display units
        max_ticks: Target number of intervals (values below 1 count as 1)

    Returns:
        Step from {1, 2, 2.5, 5, 10} x 10^k. A non-positive or non-finite
        range returns 1.0.

    Examples:
        >>> nice_step(97, 8)
        10.0
        >>> nice_step(1000, 4)
        250.0
    """
    try:
        ticks = max(1, int(max_ticks))
    except (TypeError, ValueError):
        ticks = 1

    if not math.isfinite(value_range) or value_range <= 0:
        return 1.0

    rough = value_range / ticks
    pow10 = 10.0 ** math.floor(math.log10(rough))

    best = NICE_STEP_MULTIPLIERS[0] * pow10
    for multiplier in NICE_STEP_MULTIPLIERS[1:]:
        candidate = multiplier * pow10
        if abs(candidate - rough) < abs(best - rough):
            best = candidate
    return best


def tick_values(limit: float, step: float) -> List[float]:
    """
    Multiples of ``step`` from 0 up to ``limit`` (inclusive, with tolerance).

    Values are computed as ``i * step`` rather than by repeated addition so
    long axes do not drift.
    """
    if step <= 0 or not math.isfinite(step) or limit < 0:
        return [0.0]
    count = int(math.floor(limit / step + TICK_EPSILON))
    return [i * step for i in range(count + 1)]


def to_fixed_n(value: float, digits: int) -> float:
    """Round to ``digits`` decimals, passing non-finite values through."""
    if not math.isfinite(value):
        return value
    return round(value, digits)


__all__ = [
    "nice_step",
    "tick_values",
    "to_fixed_n",
]
