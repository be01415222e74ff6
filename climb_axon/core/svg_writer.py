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
SVG Writer
==========

Translates a Drawing tree into a ``drawsvg`` drawing.

Theme colours stay as ``var(--name)`` references; with ``inline_theme`` the
root element also declares every variable so the file renders standalone in
browsers. Rasterizers need the references resolved (see ``export``).
"""

from typing import Dict, Mapping, Optional

import drawsvg as draw

from .drawing import Drawing, Group, Line, Path, Polygon, Polyline, Style, Text
from .logging_config import get_logger
from .theme import theme_style

logger = get_logger(__name__)


def _style_kwargs(style: Style) -> Dict:
    attrs = {
        'fill': style.fill,
        'stroke': style.stroke,
        'stroke_width': style.stroke_width,
        'stroke_dasharray': style.stroke_dasharray,
        'stroke_linecap': style.stroke_linecap,
        'stroke_linejoin': style.stroke_linejoin,
        'opacity': style.opacity,
    }
    return {k: v for k, v in attrs.items() if v is not None}


def _flatten(points):
    flat = []
    for x, y in points:
        flat.extend((round(x, 2), round(y, 2)))
    return flat


def _convert(shape):
    """One drawing primitive to its drawsvg element (None for empty shapes)."""
    if isinstance(shape, Group):
        kwargs = {}
        if shape.clip:
            clip = draw.ClipPath()
            clip.append(draw.Lines(*_flatten(shape.clip), close=True))
            kwargs['clip_path'] = clip
        group = draw.Group(**kwargs)
        for child in shape.children:
            element = _convert(child)
            if element is not None:
                group.append(element)
        return group

    if isinstance(shape, Path):
        return draw.Path(d=shape.d, **_style_kwargs(shape.style))

    if isinstance(shape, (Polygon, Polyline)):
        if len(shape.points) < 2:
            return None
        return draw.Lines(*_flatten(shape.points), close=isinstance(shape, Polygon),
                          **_style_kwargs(shape.style))

    if isinstance(shape, Line):
        (x1, y1), (x2, y2) = shape.start, shape.end
        return draw.Line(round(x1, 2), round(y1, 2), round(x2, 2), round(y2, 2),
                         **_style_kwargs(shape.style))

    if isinstance(shape, Text):
        kwargs = {'text_anchor': shape.anchor, 'fill': shape.fill}
        if shape.baseline:
            kwargs['dominant_baseline'] = shape.baseline
        if shape.font_weight:
            kwargs['font_weight'] = shape.font_weight
        x, y = shape.position
        return draw.Text(shape.text, shape.font_size, round(x, 2), round(y, 2),
                         font_family="Inter, system-ui, sans-serif", **kwargs)

    raise TypeError(f"Unsupported drawing element: {type(shape).__name__}")


def drawing_to_svg(drawing: Drawing, theme: Optional[Mapping[str, str]] = None,
                   inline_theme: bool = True) -> draw.Drawing:
    """
    Build a drawsvg drawing.

    Args:
        drawing: Rendered profile
        theme: Theme variable overrides
        inline_theme: Declare the theme variables on the root element

    Returns:
        drawsvg.Drawing in pixel coordinates, origin top-left
    """
    root_args = {}
    if inline_theme:
        root_args['style'] = theme_style(theme)

    svg = draw.Drawing(drawing.width, drawing.height, **root_args)
    for shape in drawing.children:
        element = _convert(shape)
        if element is not None:
            svg.append(element)
    return svg


def render_svg_text(drawing: Drawing, inline_theme: bool = True,
                    theme: Optional[Mapping[str, str]] = None) -> str:
    """SVG document text for a drawing."""
    text = drawing_to_svg(drawing, theme=theme, inline_theme=inline_theme).as_svg()
    logger.debug("Serialized %s to %d bytes of SVG", drawing.title or "drawing", len(text))
    return text


__all__ = [
    "drawing_to_svg",
    "render_svg_text",
]
