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
Theme Colour Variables
======================

Drawings reference a handful of colours as CSS custom properties
(``var(--grid)`` etc.) so a host page can restyle them. Standalone files and
rasterizers do not understand custom properties, so exports substitute the
concrete values first.
"""

import re
from typing import Dict, Mapping, Optional

from .logging_config import get_logger

logger = get_logger(__name__)

THEME_FALLBACKS: Dict[str, str] = {
    "--face-yellow": "#f7e84a",
    "--grid": "rgba(0,0,0,.18)",
    "--road-stroke": "#2c2c2c",
    "--centerline": "#ffffff",
    "--platform": "#d1d5db",
    "--platform-wall": "#c0c6cf",
}

# var(--name) or var(--name, fallback)
_VAR_PATTERN = re.compile(r"var\(\s*(--[A-Za-z0-9_-]+)\s*(?:,\s*([^()]*(?:\([^()]*\))?[^()]*))?\)")


def merged_theme(overrides: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Fallback theme with ``overrides`` applied. Keys may omit the leading ``--``."""
    theme = dict(THEME_FALLBACKS)
    for key, value in (overrides or {}).items():
        name = key if key.startswith("--") else f"--{key}"
        theme[name] = str(value)
    return theme


def theme_style(overrides: Optional[Mapping[str, str]] = None) -> str:
    """
    CSS declarations defining every theme variable, for a root ``style``.

    Example:
        >>> theme_style({"grid": "#000"}).split(";")[1]
        '--grid:#000'
    """
    return ";".join(f"{name}:{value}" for name, value in merged_theme(overrides).items())


def resolve_theme_vars(text: str, overrides: Optional[Mapping[str, str]] = None) -> str:
    """
    Replace every ``var(--name)`` in ``text`` with its concrete colour.

    Unknown variables use their inline fallback when one is given, otherwise
    they are left untouched and logged.
    """
    theme = merged_theme(overrides)

    def _substitute(match):
        name, fallback = match.group(1), match.group(2)
        if name in theme:
            return theme[name]
        if fallback is not None:
            return fallback.strip()
        logger.warning("Unknown theme variable %s left unresolved", name)
        return match.group(0)

    return _VAR_PATTERN.sub(_substitute, text)


__all__ = [
    "THEME_FALLBACKS",
    "merged_theme",
    "theme_style",
    "resolve_theme_vars",
]
