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
Drawing Export
==============

Writes a rendered profile to disk as SVG (vector, theme variables resolved)
or PNG (rasterized with cairosvg at a pixel-density multiplier).

Usage:
    from climb_axon.core.export import export_drawing

    export_drawing(drawing, "colombier")              # colombier.svg
    export_drawing(drawing, "colombier.png", scale=3)
"""

from pathlib import Path
from typing import Mapping, Optional, Union

import cairosvg

from .drawing import Drawing
from .logging_config import get_logger
from .svg_writer import render_svg_text
from .theme import resolve_theme_vars

logger = get_logger(__name__)

SUPPORTED_FORMATS = ("svg", "png")
DEFAULT_PNG_SCALE = 2.0


class ExportError(ValueError):
    """Unknown export format or invalid export option."""


def standalone_svg(drawing: Drawing, theme: Optional[Mapping[str, str]] = None) -> str:
    """SVG text with every theme variable replaced by its concrete colour."""
    return resolve_theme_vars(render_svg_text(drawing, inline_theme=True, theme=theme), theme)


def export_svg(drawing: Drawing, path: Union[str, Path],
               theme: Optional[Mapping[str, str]] = None) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(standalone_svg(drawing, theme), encoding="utf-8")
    logger.info("Exported SVG: %s", path)
    return path


def export_png(drawing: Drawing, path: Union[str, Path], scale: float = DEFAULT_PNG_SCALE,
               theme: Optional[Mapping[str, str]] = None) -> Path:
    """
    Rasterize a drawing to PNG.

    Args:
        drawing: Rendered profile
        path: Output file
        scale: Pixel density multiplier (2 gives a 2360 x 1440 image for the
            default canvas)
        theme: Theme variable overrides

    Raises:
        ExportError: If scale is not positive
    """
    if not scale or scale <= 0:
        raise ExportError(f"PNG scale must be positive, got {scale}")

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    svg_text = standalone_svg(drawing, theme)
    cairosvg.svg2png(bytestring=svg_text.encode("utf-8"), write_to=str(path), scale=scale)
    logger.info("Exported PNG (x%s): %s", scale, path)
    return path


def export_drawing(drawing: Drawing, filename: Union[str, Path], fmt: Optional[str] = None,
                   scale: float = DEFAULT_PNG_SCALE,
                   theme: Optional[Mapping[str, str]] = None) -> Path:
    """
    Export by format, inferring it from the file suffix when not given.

    A filename without the matching suffix gets ``.svg`` or ``.png`` appended.

    Raises:
        ExportError: If the format is not svg or png
    """
    path = Path(filename)
    suffix = path.suffix.lower().lstrip(".")
    fmt = (fmt or (suffix if suffix in SUPPORTED_FORMATS else "svg")).lower()

    if fmt not in SUPPORTED_FORMATS:
        raise ExportError(f"Unsupported export format '{fmt}' (expected svg or png)")

    if suffix != fmt:
        path = path.with_name(f"{path.name}.{fmt}")

    if fmt == "png":
        return export_png(drawing, path, scale=scale, theme=theme)
    return export_svg(drawing, path, theme=theme)


__all__ = [
    "ExportError",
    "SUPPORTED_FORMATS",
    "standalone_svg",
    "export_svg",
    "export_png",
    "export_drawing",
]
