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
Tests for Label Formatting Utilities
====================================
"""

import pytest

from climb_axon.core.config import Units
from climb_axon.core.label_formatting import (
    display_to_km,
    display_to_meters,
    distance_axis_title,
    format_distance_tick,
    format_elevation_tick,
    format_grade,
    format_summary,
    km_to_display,
    meters_to_display,
)


class TestUnitConversion:

    @pytest.mark.unit
    def test_metric_is_identity(self):
        """Test metric conversion is a no-op."""
        assert km_to_display(12.5, Units.METRIC) == 12.5
        assert meters_to_display(820.0, Units.METRIC) == 820.0

    @pytest.mark.unit
    def test_imperial(self):
        """Test kilometre and metre conversion to miles and feet."""
        assert km_to_display(1.609344, Units.IMPERIAL) == pytest.approx(1.0)
        assert meters_to_display(100.0, Units.IMPERIAL) == pytest.approx(328.084)

    @pytest.mark.unit
    def test_inverse(self):
        """Test display to world conversion inverts the forward one."""
        for units in Units:
            assert display_to_km(km_to_display(7.3, units), units) == pytest.approx(7.3)
            assert display_to_meters(meters_to_display(640.0, units), units) == pytest.approx(640.0)


class TestTickLabels:
    """Tests for tick label formatting."""

    @pytest.mark.unit
    @pytest.mark.parametrize("value,expected", [
        (0.0, "0"),
        (3.0, "3"),
        (2.5, "2.5"),
        (16.0000000001, "16"),
    ])
    def test_distance(self, value, expected):
        """Test distance tick labels."""
        assert format_distance_tick(value) == expected

    @pytest.mark.unit
    def test_elevation_metric(self):
        """Test metric elevation tick labels."""
        assert format_elevation_tick(250.0, Units.METRIC) == "250 m"

    @pytest.mark.unit
    def test_elevation_imperial_truncates(self):
        """Test imperial elevation labels are truncated."""
        assert format_elevation_tick(820.9, Units.IMPERIAL) == "820 ft"

    @pytest.mark.unit
    def test_grade(self):
        """Test grade labels."""
        assert format_grade(7.36) == "7.4%"
        assert format_grade(-3.0) == "-3.0%"


class TestSummary:

    @pytest.mark.unit
    def test_metric(self):
        """Test the metric summary line."""
        assert format_summary(17.7, 1261, 7.12, Units.METRIC) == "17.7 km • 1261 m gain • 7.1% avg"

    @pytest.mark.unit
    def test_imperial(self):
        """Test the imperial summary line."""
        text = format_summary(16.09344, 1000, 6.0, Units.IMPERIAL)
        assert text == "10 mi • 3281 ft gain • 6% avg"

    @pytest.mark.unit
    def test_axis_title(self):
        """Test the distance axis title per unit system."""
        assert distance_axis_title(Units.METRIC) == "Distance (km)"
        assert distance_axis_title(Units.IMPERIAL) == "Distance (mi)"
