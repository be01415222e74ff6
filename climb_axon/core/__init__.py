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
Climb Axon Core Module

Pure Python data structures and algorithms for the axonometric climb profile.
This module contains:
- Climb data model, configuration and logging setup
- Segment accumulation, step sizing, slope colouring
- Axonometric projection and render model derivation
- The format-agnostic renderer and its drawing tree

Architecture:
    Layer 1: Geometry (this package's pure modules) - no I/O, never raises
             for numeric input
    Layer 2: Output - svg_writer (drawsvg), export (cairosvg)
    Layer 3: Sources and CLI - segment_source (requests), climb_axon.cli

Output and source modules pull in their third-party libraries and are
imported explicitly:

    from climb_axon.core.export import export_drawing
    from climb_axon.core.segment_source import StravaSegmentSource
"""

# Import logging configuration first (no dependencies)
from .logging_config import get_logger, setup_logging

from .climb_data import SAMPLE_CLIMB, ClimbProfile, Segment, load_profile, parse_data_param
from .config import (
    DEFAULT_CONFIG,
    CameraParams,
    Config,
    ConfigError,
    RoofAnchor,
    Units,
    load_config,
)
from .accumulator import accumulate, avg_grade
from .ticks import nice_step
from .slope_colors import DEFAULT_SLOPE_COLORS, SlopeColor, color_for_grade
from .projection import axon_project, fit_and_center
from .profile_model import RenderModel, build_render_model, derive_model
from .drawing import Drawing
from .profile_renderer import ProfileRenderer, render_profile

__all__ = [
    "get_logger",
    "setup_logging",
    "SAMPLE_CLIMB",
    "ClimbProfile",
    "Segment",
    "load_profile",
    "parse_data_param",
    "DEFAULT_CONFIG",
    "CameraParams",
    "Config",
    "ConfigError",
    "RoofAnchor",
    "Units",
    "load_config",
    "accumulate",
    "avg_grade",
    "nice_step",
    "DEFAULT_SLOPE_COLORS",
    "SlopeColor",
    "color_for_grade",
    "axon_project",
    "fit_and_center",
    "RenderModel",
    "build_render_model",
    "derive_model",
    "Drawing",
    "ProfileRenderer",
    "render_profile",
]
