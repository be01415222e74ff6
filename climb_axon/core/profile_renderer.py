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
Climb Axon - Profile Renderer (Core)
====================================

Turns a RenderModel into a backend-agnostic Drawing tree.

This follows the core architecture pattern:
- No file formats and no I/O (see ``svg_writer`` and ``export``)
- No geometry decisions: every coordinate comes from the RenderModel
- Only vector offsets along axis normals and string assembly happen here

Paint order (back to front):
    platform slab, start wall, terrain face, grid (clipped to the face),
    ribbon tiles, centerline, axes with ticks and grade labels, legend,
    title and summary
"""

from typing import List, Optional

from .climb_data import ClimbProfile
from .config import DEFAULT_CONFIG, Config
from .drawing import Drawing, Group, Line, Path, Polygon, Style, Text
from .label_formatting import distance_axis_title, format_summary
from .logging_config import get_logger
from .profile_model import RenderModel, derive_model
from .projection import ScreenPoint, midpoint
from .slope_colors import bucket_labels, color_for_grade

logger = get_logger(__name__)


# ============================================================================
# COLOR SCHEME
# ============================================================================

COLORS = {
    'face': 'var(--face-yellow)',
    'grid': 'var(--grid)',
    'road_stroke': 'var(--road-stroke)',
    'centerline': 'var(--centerline)',
    'axes': '#1f2937',
    'text': '#111827',
    'text_muted': '#4b5563',
}

# Label offsets along the axis normals (px)
DIST_TICK_LEN = 8.0
DIST_LABEL_OFFSET = 18.0
DIST_TITLE_OFFSET = 32.0
ELEV_TICK_LEN = 6.0
ELEV_LABEL_OFFSET = 14.0

TITLE_BASELINE_Y = 34.0
SUMMARY_BASELINE_Y = 60.0
LEGEND_GAP = 20.0
LEGEND_SWATCH = 14.0


def _offset(point: ScreenPoint, direction: ScreenPoint, distance: float) -> ScreenPoint:
    return point[0] + direction[0] * distance, point[1] + direction[1] * distance


# ============================================================================
# PROFILE RENDERER
# ============================================================================

class ProfileRenderer:
    """
    Vector renderer for the axonometric climb profile.

    Responsibilities:
        - Paint every element of the RenderModel in back-to-front order
        - Colour ribbon tiles by slope bucket
        - Place tick, grade and legend labels

    Stateless apart from the config; one instance can render many models.
    """

    def __init__(self, config: Optional[Config] = None):
        self.config = config or DEFAULT_CONFIG

    def draw_platform(self, model: RenderModel) -> List:
        """Platform slab under the face and the wall closing the start."""
        platform = self.config.platform
        return [
            Polygon(model.platform_polygon, Style(fill=platform.fill), role="platform"),
            Polygon(model.start_wall_polygon, Style(fill=platform.wall_fill), role="start-wall"),
        ]

    def draw_face(self, model: RenderModel) -> Polygon:
        face = self.config.face
        return Polygon(
            model.face_polygon,
            Style(fill=COLORS['face'], stroke=face.stroke, stroke_width=face.stroke_width,
                  stroke_linejoin="round"),
            role="face",
        )

    def draw_grid(self, model: RenderModel) -> Group:
        """Distance and elevation grid lines, clipped to the terrain face."""
        group = Group(clip=model.face_polygon, role="grid")
        for start, end in model.distance_grid_lines:
            group.add(Line(start, end,
                           Style(stroke=COLORS['grid'], stroke_width=1, stroke_dasharray="4 8"),
                           role="grid-distance"))
        for start, end in model.elevation_grid_lines:
            group.add(Line(start, end,
                           Style(stroke=COLORS['grid'], stroke_width=1, stroke_dasharray="8 8"),
                           role="grid-elevation"))
        return group

    def draw_ribbon(self, model: RenderModel) -> Group:
        """One coloured quad per segment plus the dashed centerline."""
        group = Group(role="ribbon")
        for tile in model.ribbon_tiles:
            group.add(Polygon(
                tile.corners,
                Style(fill=color_for_grade(tile.grade, self.config.slope_colors),
                      stroke=COLORS['road_stroke'], stroke_width=0.9, stroke_linejoin="round"),
                role="ribbon-tile",
            ))

        road = self.config.road
        group.add(Path.through(
            model.ribbon_mid,
            style=Style(stroke=COLORS['centerline'], stroke_width=road.stroke_width,
                        stroke_dasharray=road.dash, stroke_linecap="round"),
            role="centerline",
        ))
        return group

    def draw_axes(self, model: RenderModel) -> Group:
        """Distance axis along the platform base, elevation axis at the far end."""
        group = Group(role="axes")
        font = self.config.label_font_size
        axis_style = Style(stroke=COLORS['axes'], stroke_width=1.2)
        tick_style = Style(stroke=COLORS['axes'], stroke_width=1)

        # Distance axis
        normal = model.distance_normal
        group.add(Line(*model.distance_axis, axis_style, role="distance-axis"))
        for tick in model.distance_ticks:
            group.add(Line(tick.position, _offset(tick.position, normal, DIST_TICK_LEN),
                           tick_style, role="distance-tick"))
            group.add(Text(tick.label, _offset(tick.position, normal, DIST_LABEL_OFFSET), font,
                           anchor="middle", baseline="middle", fill=COLORS['text'],
                           role="distance-label"))
        group.add(Text(
            distance_axis_title(model.units),
            _offset(midpoint(*model.distance_axis), normal, DIST_TITLE_OFFSET),
            font, anchor="middle", baseline="middle", fill=COLORS['text_muted'],
            role="distance-title",
        ))

        # Grade labels in the shelf band
        for label in model.grade_labels:
            group.add(Text(label.text, label.position, font * 0.85, anchor="middle",
                           baseline="middle", fill=COLORS['text'], role="grade-label"))

        # Elevation axis
        normal = model.elevation_normal
        group.add(Line(*model.elevation_axis, axis_style, role="elevation-axis"))
        for tick in model.elevation_ticks:
            group.add(Line(tick.position, _offset(tick.position, normal, ELEV_TICK_LEN),
                           tick_style, role="elevation-tick"))
            group.add(Text(tick.label, _offset(tick.position, normal, ELEV_LABEL_OFFSET), font,
                           anchor="start", baseline="middle", fill=COLORS['text'],
                           role="elevation-label"))
        return group

    def draw_legend(self, model: RenderModel) -> Group:
        """Slope buckets stacked in the right margin."""
        config = self.config
        group = Group(role="legend")
        x = model.canvas_width - config.canvas.margin.right + LEGEND_GAP
        y = config.canvas.margin.top
        row = max(LEGEND_SWATCH, config.label_font_size) + 8

        for i, (bucket, text) in enumerate(zip(config.slope_colors,
                                               bucket_labels(config.slope_colors))):
            top = y + i * row
            group.add(Polygon(
                ((x, top), (x + LEGEND_SWATCH, top),
                 (x + LEGEND_SWATCH, top + LEGEND_SWATCH), (x, top + LEGEND_SWATCH)),
                Style(fill=bucket.color, stroke=COLORS['road_stroke'], stroke_width=0.5),
                role="legend-swatch",
            ))
            group.add(Text(text, (x + LEGEND_SWATCH + 8, top + LEGEND_SWATCH / 2),
                           config.label_font_size, baseline="middle", fill=COLORS['text'],
                           role="legend-label"))
        return group

    def draw_title(self, model: RenderModel) -> List[Text]:
        center_x = model.canvas_width / 2.0
        return [
            Text(model.name, (center_x, TITLE_BASELINE_Y), self.config.title_font_size,
                 anchor="middle", font_weight=800, fill=COLORS['text'], role="title"),
            Text(format_summary(model.total_km, model.total_gain_m, model.avg_grade, model.units),
                 (center_x, SUMMARY_BASELINE_Y), self.config.label_font_size, anchor="middle",
                 fill=COLORS['text_muted'], role="summary"),
        ]

    def render(self, model: RenderModel) -> Drawing:
        """
        Paint a full profile.

        Args:
            model: Derived render model (should come from the same config)

        Returns:
            Drawing sized to the canvas
        """
        drawing = Drawing(model.canvas_width, model.canvas_height, title=model.name)
        for shape in self.draw_platform(model):
            drawing.add(shape)
        drawing.add(self.draw_face(model))
        drawing.add(self.draw_grid(model))
        drawing.add(self.draw_ribbon(model))
        drawing.add(self.draw_axes(model))
        drawing.add(self.draw_legend(model))
        for shape in self.draw_title(model):
            drawing.add(shape)

        logger.debug("Rendered %s: %d tiles, %d distance ticks, %d elevation ticks",
                     model.name, len(model.ribbon_tiles), len(model.distance_ticks),
                     len(model.elevation_ticks))
        return drawing


def render_profile(profile: ClimbProfile, config: Optional[Config] = None) -> Drawing:
    """Derive (memoized) and render a profile in one call."""
    config = config or DEFAULT_CONFIG
    return ProfileRenderer(config).render(derive_model(profile, config))


__all__ = [
    "COLORS",
    "ProfileRenderer",
    "render_profile",
]
