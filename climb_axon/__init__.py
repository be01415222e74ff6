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
Climb Axon
Version 0.1.0

Axonometric cycling climb profiles: a climb described as (length, grade)
segments becomes a 2.5D picture of a yellow terrain face standing on a grey
platform, with a slope-coloured road ribbon along its crest.

    from climb_axon import SAMPLE_CLIMB, render_profile
    from climb_axon.core.export import export_drawing

    export_drawing(render_profile(SAMPLE_CLIMB), "colombier.svg")
"""

__version__ = "0.1.0"

from .core import (
    DEFAULT_CONFIG,
    SAMPLE_CLIMB,
    ClimbProfile,
    Config,
    Segment,
    derive_model,
    render_profile,
)

__all__ = [
    "__version__",
    "DEFAULT_CONFIG",
    "SAMPLE_CLIMB",
    "ClimbProfile",
    "Config",
    "Segment",
    "derive_model",
    "render_profile",
]
