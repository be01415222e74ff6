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
Tests for Theme, SVG Writer and Export
======================================
"""

from unittest.mock import patch

import pytest

from climb_axon.core.drawing import Drawing, Group, Line, Polygon, Style, Text
from climb_axon.core.export import ExportError, export_drawing, export_png, export_svg, standalone_svg
from climb_axon.core.profile_renderer import render_profile
from climb_axon.core.svg_writer import drawing_to_svg, render_svg_text
from climb_axon.core.theme import THEME_FALLBACKS, resolve_theme_vars, theme_style


@pytest.fixture
def small_drawing():
    drawing = Drawing(200, 100, title="Small")
    drawing.add(Polygon(((10, 10), (50, 10), (50, 40)), Style(fill="var(--face-yellow)")))
    group = Group(clip=((0, 0), (100, 0), (100, 100)))
    group.add(Line((0, 0), (100, 100), Style(stroke="var(--grid)", stroke_dasharray="4 8")))
    drawing.add(group)
    drawing.add(Text("Hello", (20, 80), 13, anchor="middle"))
    return drawing


class TestTheme:
    """Tests for theme variable handling."""

    @pytest.mark.unit
    def test_resolve_known_variable(self):
        """Test known theme variables are replaced."""
        assert resolve_theme_vars('fill="var(--grid)"') == 'fill="rgba(0,0,0,.18)"'

    @pytest.mark.unit
    def test_override(self):
        """Test theme overrides win over fallbacks."""
        assert resolve_theme_vars("var(--face-yellow)", {"face-yellow": "#ff0"}) == "#ff0"

    @pytest.mark.unit
    def test_unknown_with_fallback(self):
        """Test inline fallbacks are used for unknown variables."""
        assert resolve_theme_vars("var(--nope, #123456)") == "#123456"

    @pytest.mark.unit
    def test_unknown_left_alone(self):
        """Test unknown variables without fallback are kept."""
        assert resolve_theme_vars("var(--nope)") == "var(--nope)"

    @pytest.mark.unit
    def test_theme_style_declares_every_variable(self):
        """Test the root style declares every theme variable."""
        style = theme_style()
        for name, value in THEME_FALLBACKS.items():
            assert f"{name}:{value}" in style


class TestSvgWriter:

    @pytest.mark.unit
    def test_document(self, small_drawing):
        """Test the SVG document root."""
        text = render_svg_text(small_drawing)
        assert text.lstrip().startswith("<?xml") or text.lstrip().startswith("<svg")
        assert "<svg" in text
        assert "Hello" in text
        assert "clipPath" in text
        assert "var(--face-yellow)" in text
        assert "--face-yellow:#f7e84a" in text

    @pytest.mark.unit
    def test_without_inline_theme(self, small_drawing):
        """Test SVG output without the inline theme."""
        assert "--face-yellow:#f7e84a" not in render_svg_text(small_drawing, inline_theme=False)

    @pytest.mark.unit
    def test_dimensions(self, small_drawing):
        """Test SVG width and height follow the drawing."""
        svg = drawing_to_svg(small_drawing)
        assert svg.width == 200
        assert svg.height == 100

    @pytest.mark.unit
    def test_unknown_shape_rejected(self):
        """Test unknown shapes raise TypeError."""
        drawing = Drawing(10, 10)
        drawing.add("not a shape")
        with pytest.raises(TypeError):
            drawing_to_svg(drawing)

    @pytest.mark.unit
    def test_full_profile_serializes(self, sample_profile, default_config):
        """Test a full rendered profile serializes."""
        text = render_svg_text(render_profile(sample_profile, default_config))
        assert "Grand Colombier" in text
        assert text.count("#D0282F") >= 1


class TestExport:
    """Tests for file export."""

    @pytest.mark.integration
    def test_svg_resolves_theme(self, small_drawing, tmp_path):
        """Test exported SVG files carry concrete colours."""
        path = export_svg(small_drawing, tmp_path / "out.svg")
        text = path.read_text(encoding="utf-8")
        assert "var(--" not in text
        assert "#f7e84a" in text

    @pytest.mark.unit
    def test_standalone_svg_has_no_variables(self, sample_profile, default_config):
        """Test standalone SVG text has no var() references."""
        assert "var(--" not in standalone_svg(render_profile(sample_profile, default_config))

    @pytest.mark.integration
    def test_png_uses_cairosvg_with_scale(self, small_drawing, tmp_path):
        """Test PNG export goes through cairosvg at the given scale."""
        with patch("climb_axon.core.export.cairosvg.svg2png") as svg2png:
            path = export_png(small_drawing, tmp_path / "out.png", scale=3)

        assert path == tmp_path / "out.png"
        kwargs = svg2png.call_args.kwargs
        assert kwargs["scale"] == 3
        assert kwargs["write_to"] == str(tmp_path / "out.png")
        assert b"var(--" not in kwargs["bytestring"]

    @pytest.mark.unit
    def test_png_rejects_bad_scale(self, small_drawing, tmp_path):
        """Test PNG export rejects a non-positive scale."""
        with pytest.raises(ExportError):
            export_png(small_drawing, tmp_path / "out.png", scale=0)

    @pytest.mark.integration
    def test_dispatch_appends_suffix(self, small_drawing, tmp_path):
        """Test a missing suffix defaults to .svg."""
        path = export_drawing(small_drawing, tmp_path / "profile")
        assert path.name == "profile.svg"
        assert path.exists()

    @pytest.mark.integration
    def test_dispatch_png_by_suffix(self, small_drawing, tmp_path):
        """Test a .png suffix selects PNG export."""
        with patch("climb_axon.core.export.cairosvg.svg2png") as svg2png:
            path = export_drawing(small_drawing, tmp_path / "profile.png", scale=1.5)
        assert path.name == "profile.png"
        assert svg2png.call_args.kwargs["scale"] == 1.5

    @pytest.mark.integration
    def test_explicit_format_overrides_suffix(self, small_drawing, tmp_path):
        """Test an explicit format wins over the suffix."""
        path = export_drawing(small_drawing, tmp_path / "profile.svg", fmt="svg")
        assert path.name == "profile.svg"

    @pytest.mark.unit
    def test_unknown_format(self, small_drawing, tmp_path):
        """Test unknown formats raise ExportError."""
        with pytest.raises(ExportError):
            export_drawing(small_drawing, tmp_path / "profile", fmt="gif")
