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
Climb Axon - Climb Data Model (Core)
====================================

Pure Python data structures for a climb described as (length, grade)
segments. No rendering dependencies - just data and serialization.

Profile JSON shape:
    {
        "name": "Grand Colombier",
        "startElevM": 250,
        "segments": [{"km": 1.0, "grade": 5.8}, ...]
    }
"""

import base64
import binascii
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Tuple, Union
from urllib.parse import unquote

from .logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Segment:
    """
    One constant-grade piece of a climb.

    Attributes:
        length_km: Horizontal length (km), expected >= 0
        grade_percent: Average grade (%), negative for descents
    """
    length_km: float
    grade_percent: float

    def __repr__(self):
        return f"Segment({self.length_km:.3f}km, {self.grade_percent:.1f}%)"

    @classmethod
    def from_dict(cls, data: Dict) -> "Segment":
        """Build a segment from a ``{"km", "grade"}`` mapping."""
        length = data.get("km", data.get("length_km", 0.0))
        grade = data.get("grade", data.get("grade_percent", 0.0))
        return cls(length_km=float(length), grade_percent=float(grade))

    def to_dict(self) -> Dict:
        return {"km": self.length_km, "grade": self.grade_percent}


@dataclass(frozen=True)
class ClimbProfile:
    """
    A named climb: ordered segments plus an optional absolute start elevation.

    ``start_elevation_m`` only offsets absolute elevation labels; geometry is
    driven by relative elevation alone.

    Segments are stored as a tuple so profiles are hashable and can key the
    render model cache.
    """
    name: str
    segments: Tuple[Segment, ...] = ()
    start_elevation_m: Optional[float] = None

    def __post_init__(self):
        if not isinstance(self.segments, tuple):
            object.__setattr__(self, "segments", tuple(self.segments))

    def __repr__(self):
        return f"ClimbProfile({self.name!r}, {len(self.segments)} segments)"

    @classmethod
    def from_dict(cls, data: Dict) -> "ClimbProfile":
        """
        Build a profile from its JSON mapping.

        Args:
            data: Mapping with ``name``, ``segments`` and optional start elevation

        Returns:
            ClimbProfile

        Raises:
            ValueError: If the mapping is not a profile
        """
        if not isinstance(data, dict):
            raise ValueError(f"Profile must be a JSON object, got {type(data).__name__}")

        raw_segments = data.get("segments") or []
        if not isinstance(raw_segments, list):
            raise ValueError("Profile 'segments' must be a list")

        try:
            segments = tuple(Segment.from_dict(s) for s in raw_segments)
        except (AttributeError, TypeError, ValueError) as e:
            raise ValueError(f"Invalid segment in profile: {e}")

        start = None
        for key in ("startElevM", "startElevationM", "start_elevation_m"):
            if data.get(key) is not None:
                start = float(data[key])
                break

        return cls(
            name=str(data.get("name") or "Climb"),
            segments=segments,
            start_elevation_m=start,
        )

    def to_dict(self) -> Dict:
        data = {
            "name": self.name,
            "segments": [s.to_dict() for s in self.segments],
        }
        if self.start_elevation_m is not None:
            data["startElevM"] = self.start_elevation_m
        return data


# ============================================================================
# SAMPLE DATA
# ============================================================================

SAMPLE_CLIMB = ClimbProfile(
    name="Grand Colombier",
    start_elevation_m=0.0,
    segments=(
        Segment(1.0, 5.8),
        Segment(1.0, 7.4),
        Segment(1.0, 9.1),
        Segment(1.0, 9.3),
        Segment(1.0, 5.9),
        Segment(1.0, 11.9),
        Segment(1.0, 10.4),
        Segment(1.0, 5.0),
        Segment(1.0, 4.1),
        Segment(1.0, 8.6),
        Segment(1.0, 7.9),
        Segment(1.0, 9.3),
        Segment(1.0, 5.1),
        Segment(1.0, 3.8),
        Segment(1.0, 4.4),
        Segment(1.0, 7.3),
        Segment(0.7, 6.2),
    ),
)


# ============================================================================
# PARSING / IO
# ============================================================================

def parse_data_param(raw: Optional[str]) -> Optional[ClimbProfile]:
    """
    Parse a ``?data=`` style parameter into a profile.

    Accepts URL-encoded JSON first, then base64-encoded JSON.

    Args:
        raw: Raw parameter value

    Returns:
        ClimbProfile, or None if nothing could be parsed
    """
    if not raw:
        return None

    try:
        return ClimbProfile.from_dict(json.loads(unquote(raw)))
    except ValueError:
        pass

    try:
        decoded = base64.b64decode(raw, validate=False).decode("utf-8")
        return ClimbProfile.from_dict(json.loads(decoded))
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        logger.debug("Could not parse data parameter: %s", e)
        return None


def load_profile(path: Union[str, Path]) -> ClimbProfile:
    """
    Load a profile from a JSON file.

    Raises:
        ValueError: If the file is not a valid profile
        OSError: If the file cannot be read
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid profile JSON in {path}: {e}")

    profile = ClimbProfile.from_dict(data)
    logger.info("Loaded profile %r from %s", profile.name, path)
    return profile


def save_profile(profile: ClimbProfile, path: Union[str, Path]) -> Path:
    """Write a profile to a JSON file and return its path."""
    path = Path(path)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(profile.to_dict(), f, indent=2)
    return path


__all__ = [
    "Segment",
    "ClimbProfile",
    "SAMPLE_CLIMB",
    "parse_data_param",
    "load_profile",
    "save_profile",
]
