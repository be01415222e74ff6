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
Tests for Drawing Tree
======================
"""

import pytest

from climb_axon.core.drawing import Drawing, Group, Line, Path, Polygon


class TestPath:

    @pytest.mark.unit
    def test_through(self):
        """Test path data through a list of points."""
        path = Path.through([(0, 0), (10, 5.5)])
        assert path.d == "M 0.00 0.00 L 10.00 5.50"

    @pytest.mark.unit
    def test_closed(self):
        """Test closed paths end with Z."""
        assert Path.through([(0, 0), (1, 0), (1, 1)], closed=True).d.endswith(" Z")


class TestDrawing:

    @pytest.mark.unit
    def test_walk_is_paint_order(self):
        """Test walking the tree visits shapes in paint order."""
        drawing = Drawing(100, 100)
        drawing.add(Polygon(((0, 0), (1, 0), (1, 1)), role="a"))
        group = drawing.add(Group(role="b"))
        group.add(Line((0, 0), (1, 1), role="c"))
        drawing.add(Line((0, 0), (2, 2), role="d"))

        assert [s.role for s in drawing.walk()] == ["a", "b", "c", "d"]
        assert drawing.find("c")[0].end == (1, 1)
