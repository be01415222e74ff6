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
Climb Axon - Drawing Tree (Core)
================================

Backend-agnostic vector drawing primitives produced by the profile renderer.
Writers (see ``svg_writer``) translate the tree into a concrete format.

All coordinates are screen pixels with the origin top-left and Y down.
Colours are SVG colour strings and may reference theme variables such as
``var(--grid)``.
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence, Union

from .projection import ScreenPoint


@dataclass
class Style:
    """Presentation attributes shared by all shapes. ``None`` means unset."""
    fill: Optional[str] = "none"
    stroke: Optional[str] = None
    stroke_width: Optional[float] = None
    stroke_dasharray: Optional[str] = None
    stroke_linecap: Optional[str] = None
    stroke_linejoin: Optional[str] = None
    opacity: Optional[float] = None


@dataclass
class Path:
    """SVG-style path data (``M``, ``L``, ``Z`` commands, absolute pixels)."""
    d: str
    style: Style = field(default_factory=Style)
    role: str = ""

    @classmethod
    def through(cls, points: Sequence[ScreenPoint], closed: bool = False, **kwargs) -> "Path":
        """Path visiting ``points`` in order."""
        parts = [f"{'M' if i == 0 else 'L'} {x:.2f} {y:.2f}" for i, (x, y) in enumerate(points)]
        if closed and parts:
            parts.append("Z")
        return cls(d=" ".join(parts), **kwargs)


@dataclass
class Polygon:
    """Closed polygon."""
    points: Sequence[ScreenPoint]
    style: Style = field(default_factory=Style)
    role: str = ""


@dataclass
class Polyline:
    """Open polyline."""
    points: Sequence[ScreenPoint]
    style: Style = field(default_factory=Style)
    role: str = ""


@dataclass
class Line:
    start: ScreenPoint
    end: ScreenPoint
    style: Style = field(default_factory=Style)
    role: str = ""


@dataclass
class Text:
    """
    Text label.

    Attributes:
        anchor: ``start``, ``middle`` or ``end``
        baseline: Optional dominant baseline (``middle``, ``hanging``)
    """
    text: str
    position: ScreenPoint
    font_size: float
    anchor: str = "start"
    baseline: Optional[str] = None
    font_weight: Optional[int] = None
    fill: str = "currentColor"
    role: str = ""


Shape = Union[Path, Polygon, Polyline, Line, Text, "Group"]


@dataclass
class Group:
    """
    Ordered container. ``clip`` restricts the children to a polygon.
    Children paint in list order.
    """
    children: List[Shape] = field(default_factory=list)
    clip: Optional[Sequence[ScreenPoint]] = None
    role: str = ""

    def add(self, shape: Shape) -> Shape:
        self.children.append(shape)
        return shape


@dataclass
class Drawing:
    """Root of a rendered profile."""
    width: float
    height: float
    children: List[Shape] = field(default_factory=list)
    title: str = ""

    def add(self, shape: Shape) -> Shape:
        self.children.append(shape)
        return shape

    def walk(self) -> Iterator[Shape]:
        """Depth-first iteration over every shape, groups included."""
        stack = list(reversed(self.children))
        while stack:
            shape = stack.pop()
            yield shape
            if isinstance(shape, Group):
                stack.extend(reversed(shape.children))

    def find(self, role: str) -> List[Shape]:
        """All shapes with the given role, in paint order."""
        return [s for s in self.walk() if s.role == role]


__all__ = [
    "Style",
    "Path",
    "Polygon",
    "Polyline",
    "Line",
    "Text",
    "Group",
    "Drawing",
    "Shape",
]
