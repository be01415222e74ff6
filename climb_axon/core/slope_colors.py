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
Slope Color Buckets
===================

Maps a grade to a display colour using an ordered list of ``(up_to, color)``
buckets. The first bucket whose ``up_to`` is >= the grade wins; a grade above
every bucket falls through to the last bucket.

Buckets must be sorted by ascending ``up_to``. Ordering is checked once, when
configuration is loaded (see ``check_bucket_order``), never per lookup.
"""

import math
from dataclasses import dataclass
from typing import Dict, List, Sequence

from .ticks import to_fixed_n

# Used only when no buckets are configured at all
FALLBACK_COLOR = "#808080"


@dataclass(frozen=True)
class SlopeColor:
    """
    One colour bucket.

    Attributes:
        up_to: Inclusive upper grade bound (%), ``math.inf`` for the catch-all
        color: Any SVG colour string
    """
    up_to: float
    color: str

    @classmethod
    def from_dict(cls, data: Dict) -> "SlopeColor":
        up_to = data.get("upTo", data.get("up_to"))
        if up_to is None or (isinstance(up_to, str) and up_to.lower() in ("inf", "infinity")):
            up_to = math.inf
        return cls(up_to=float(up_to), color=str(data["color"]))

    def to_dict(self) -> Dict:
        # JSON has no Infinity literal, so the catch-all is written as null
        return {
            "upTo": None if math.isinf(self.up_to) else self.up_to,
            "color": self.color,
        }


DEFAULT_SLOPE_COLORS = (
    SlopeColor(4.0, "#39A7FF"),
    SlopeColor(6.0, "#1261A0"),
    SlopeColor(8.0, "#121212"),
    SlopeColor(10.0, "#D0282F"),
    SlopeColor(math.inf, "#7E0000"),
)


def color_for_grade(grade: float, buckets: Sequence[SlopeColor]) -> str:
    """
    Colour for a grade.

    Args:
        grade: Grade in percent
        buckets: Buckets sorted by ascending ``up_to``

    Returns:
        Colour of the first bucket with ``up_to >= grade``, else the last
        bucket's colour

    Example:
        >>> buckets = [SlopeColor(4, "A"), SlopeColor(8, "B"), SlopeColor(math.inf, "C")]
        >>> color_for_grade(4, buckets), color_for_grade(4.01, buckets)
        ('A', 'B')
    """
    if not buckets:
        return FALLBACK_COLOR
    for bucket in buckets:
        if grade <= bucket.up_to:
            return bucket.color
    return buckets[-1].color


def check_bucket_order(buckets: Sequence[SlopeColor]) -> List[str]:
    """
    Check bucket configuration.

    Returns:
        List of problems (empty if valid). Unsorted buckets are reported
        first; a missing unbounded terminal bucket is reported as a warning
        message prefixed with ``"warning:"``.
    """
    problems = []
    bounds = [b.up_to for b in buckets]
    for i in range(len(bounds) - 1):
        if bounds[i] > bounds[i + 1]:
            problems.append(
                f"Slope buckets must be sorted by ascending upTo "
                f"({bounds[i]} comes before {bounds[i + 1]})"
            )
    if buckets and not math.isinf(buckets[-1].up_to):
        problems.append(
            f"warning: last slope bucket is bounded at {buckets[-1].up_to}%; "
            f"steeper grades reuse its colour"
        )
    return problems


def bucket_labels(buckets: Sequence[SlopeColor]) -> List[str]:
    """
    Legend text for each bucket.

    Examples:
        first bucket ``≤ 4%``, inner buckets ``4–6%``, unbounded last ``> 10%``
    """
    labels = []
    previous = None
    for bucket in buckets:
        if math.isinf(bucket.up_to):
            labels.append(f"> {_fmt_grade(previous)}%" if previous is not None else "all")
        elif previous is None:
            labels.append(f"≤ {_fmt_grade(bucket.up_to)}%")
        else:
            labels.append(f"{_fmt_grade(previous)}–{_fmt_grade(bucket.up_to)}%")
        previous = bucket.up_to
    return labels


def _fmt_grade(value: float) -> str:
    value = to_fixed_n(value, 1)
    return str(int(value)) if value == int(value) else str(value)


__all__ = [
    "SlopeColor",
    "DEFAULT_SLOPE_COLORS",
    "FALLBACK_COLOR",
    "color_for_grade",
    "check_bucket_order",
    "bucket_labels",
]
