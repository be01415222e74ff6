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
Remote Segment Source
=====================

Fetches a Strava segment and turns its distance/altitude streams into a
climb profile of fixed-length bins.

Usage:
    source = StravaSegmentSource(access_token="...")
    payload = source.fetch("229781", bin_km=0.5)
    profile = payload.to_profile()

Without an access token the source refreshes one using the
STRAVA_CLIENT_ID / STRAVA_CLIENT_SECRET / STRAVA_REFRESH_TOKEN environment
variables.

The stream helpers (``normalize_streams``, ``to_points``, ``bin_by_distance``,
``total_gain``) are pure and usable on their own.
"""

import math
import os
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

import requests

from .climb_data import ClimbProfile, Segment
from .logging_config import get_logger

logger = get_logger(__name__)

STRAVA_API_URL = "https://www.strava.com/api/v3"
STRAVA_TOKEN_URL = "https://www.strava.com/oauth/token"
STREAM_KEYS = "distance,altitude,latlng"

DEFAULT_BIN_KM = 1.0
BIN_KM_RANGE = (0.05, 5.0)
DEFAULT_LAT_STEP = 10
LAT_STEP_RANGE = (1, 100)

# Streams starting further in than this get an explicit 0 km point
START_SNAP_KM = 0.005

META_FIELDS = (
    "id",
    "name",
    "distance",
    "average_grade",
    "maximum_grade",
    "elevation_high",
    "elevation_low",
    "climb_category",
    "city",
    "state",
    "country",
    "starred",
    "athlete_pr_effort",
)

_SEGMENT_ID = re.compile(r"^\d+$")


# ============================================================================
# ERRORS
# ============================================================================

class SegmentErrorKind(Enum):
    INVALID_ID = "invalid_id"
    AUTH = "auth"
    UPSTREAM = "upstream"
    MISSING_STREAMS = "missing_streams"
    UNEXPECTED = "unexpected"


class SegmentSourceError(Exception):
    """
    Failure fetching or converting a segment.

    Attributes:
        kind: What went wrong
        status: HTTP-style status code for the failure
        message: Human readable summary
        details: Upstream error body, when there is one
    """

    def __init__(self, kind: SegmentErrorKind, status: int, message: str, details: Any = None):
        super().__init__(message)
        self.kind = kind
        self.status = status
        self.message = message
        self.details = details

    def __repr__(self):
        return f"SegmentSourceError({self.kind.value}, {self.status}, {self.message!r})"

    def to_dict(self) -> Dict:
        data = {"error": self.message, "kind": self.kind.value, "status": self.status}
        if self.details is not None:
            data["details"] = self.details
        return data


# ============================================================================
# DATA
# ============================================================================

@dataclass(frozen=True)
class StreamPoint:
    """One stream sample: distance (km) and altitude (m)."""
    d_km: float
    elev_m: float

    def to_dict(self) -> Dict:
        return {"d_km": self.d_km, "elev_m": self.elev_m}


@dataclass
class SegmentPayload:
    """Binned profile, raw points and metadata of one segment."""
    id: Any
    name: str
    segments: List[Segment]
    total_km: float
    total_gain_m: int
    points: List[StreamPoint] = field(default_factory=list)
    latlng: Optional[List[Tuple[float, float]]] = None
    meta: Dict[str, Any] = field(default_factory=dict)

    def to_profile(self) -> ClimbProfile:
        """Climb profile of the binned segments, starting at the first sample's altitude."""
        start = self.points[0].elev_m if self.points else None
        return ClimbProfile(
            name=self.name or f"Segment {self.id}",
            segments=tuple(self.segments),
            start_elevation_m=start,
        )

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "name": self.name,
            "profile": {
                "segments": [s.to_dict() for s in self.segments],
                "total_km": self.total_km,
                "total_gain_m": self.total_gain_m,
            },
            "streams": {
                "points": [p.to_dict() for p in self.points],
                "latlng": [list(ll) for ll in self.latlng] if self.latlng is not None else None,
                "sample_count": len(self.points),
            },
            "meta": self.meta,
        }


# ============================================================================
# STREAM HELPERS
# ============================================================================

def _finite(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def clamp_bin_km(value) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError):
        return DEFAULT_BIN_KM
    if not math.isfinite(value):
        return DEFAULT_BIN_KM
    return max(BIN_KM_RANGE[0], min(BIN_KM_RANGE[1], value))


def clamp_lat_step(value) -> int:
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int) or isinstance(value, bool):
        return DEFAULT_LAT_STEP
    return max(LAT_STEP_RANGE[0], min(LAT_STEP_RANGE[1], value))


def normalize_streams(raw) -> Dict[str, Optional[List]]:
    """
    Stream data keyed by type.

    Accepts the ``key_by_type=true`` object (``{"distance": {"data": [...]}}``)
    as well as the default array of ``{"type", "data"}`` streams.

    Returns:
        {"distance": data or None, "altitude": data or None, "latlng": data or None}
    """
    out = {"distance": None, "altitude": None, "latlng": None}

    if isinstance(raw, dict):
        for key in out:
            stream = raw.get(key)
            if isinstance(stream, dict):
                out[key] = stream.get("data")
        return out

    if isinstance(raw, list):
        for stream in raw:
            if isinstance(stream, dict) and stream.get("type") in out:
                out[stream["type"]] = stream.get("data")
    return out


def to_points(distance_m: Sequence, altitude_m: Sequence) -> List[StreamPoint]:
    """
    Pair distance (m) and altitude (m) samples into points.

    Non-finite samples are dropped. If the first kept sample lies more than
    5 m into the segment a 0 km point with the same altitude is prepended.
    """
    points = [
        StreamPoint(d / 1000.0, e)
        for d, e in zip(distance_m, altitude_m)
        if _finite(d) and _finite(e)
    ]
    if points and points[0].d_km > START_SNAP_KM:
        points.insert(0, StreamPoint(0.0, points[0].elev_m))
    return points


def total_gain(points: Sequence[StreamPoint]) -> int:
    """Rounded sum of positive altitude steps (m)."""
    gain = 0.0
    for a, b in zip(points, points[1:]):
        if b.elev_m > a.elev_m:
            gain += b.elev_m - a.elev_m
    return int(round(gain))


def _elevation_at(points: Sequence[StreamPoint], target_km: float) -> float:
    for a, b in zip(points, points[1:]):
        if a.d_km <= target_km <= b.d_km and b.d_km > a.d_km:
            t = (target_km - a.d_km) / (b.d_km - a.d_km)
            return a.elev_m + t * (b.elev_m - a.elev_m)
    return points[-1].elev_m


def bin_by_distance(points: Sequence[StreamPoint], bin_km: float) -> List[Segment]:
    """
    Resample points into segments of ``bin_km`` (the last one may be shorter).

    Bin edges are split exactly, with the altitude at an edge linearly
    interpolated between the bracketing samples. Lengths are rounded to 3
    decimals and grades to 2.

    Example:
        >>> pts = [StreamPoint(0, 100), StreamPoint(1.5, 190)]
        >>> bin_by_distance(pts, 1.0)
        [Segment(1.000km, 6.0%), Segment(0.500km, 6.0%)]
    """
    if not points:
        return []
    if not bin_km or bin_km <= 0:
        raise ValueError(f"bin_km must be positive, got {bin_km}")

    result = []
    prev_d, prev_e = points[0].d_km, points[0].elev_m
    next_edge = prev_d + bin_km
    acc_dist = 0.0
    acc_rise = 0.0

    def push_bin():
        nonlocal acc_dist, acc_rise
        if acc_dist <= 0:
            return
        grade = acc_rise / (acc_dist * 1000.0) * 100.0
        result.append(Segment(round(acc_dist, 3), round(grade, 2)))
        acc_dist = 0.0
        acc_rise = 0.0

    for point in points[1:]:
        # Split at every bin edge this step crosses
        while point.d_km >= next_edge:
            edge_e = _elevation_at(points, next_edge)
            acc_dist += next_edge - prev_d
            acc_rise += edge_e - prev_e
            push_bin()
            prev_d, prev_e = next_edge, edge_e
            next_edge += bin_km

        if point.d_km - prev_d > 0:
            acc_dist += point.d_km - prev_d
            acc_rise += point.elev_m - prev_e
            prev_d, prev_e = point.d_km, point.elev_m

    push_bin()
    return result


# ============================================================================
# STRAVA CLIENT
# ============================================================================

class StravaSegmentSource:
    """
    Strava segment client.

    Args:
        access_token: Bearer token; refreshed from client credentials if omitted
        client_id, client_secret, refresh_token: OAuth refresh credentials,
            defaulting to the STRAVA_* environment variables
        timeout: Per-request timeout (s)
        session: requests session (a fresh one by default)
    """

    def __init__(
        self,
        access_token: Optional[str] = None,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        refresh_token: Optional[str] = None,
        timeout: float = 10,
        session: Optional[requests.Session] = None,
    ):
        self.access_token = access_token
        self.client_id = client_id or os.environ.get("STRAVA_CLIENT_ID")
        self.client_secret = client_secret or os.environ.get("STRAVA_CLIENT_SECRET")
        self.refresh_token = refresh_token or os.environ.get("STRAVA_REFRESH_TOKEN")
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch(self, segment_id, bin_km: float = DEFAULT_BIN_KM,
              lat_step: int = DEFAULT_LAT_STEP) -> SegmentPayload:
        """
        Fetch a segment and bin its streams.

        Args:
            segment_id: Numeric Strava segment id (int or digit string)
            bin_km: Bin length, clamped to [0.05, 5]
            lat_step: Keep every Nth latlng sample, clamped to [1, 100]

        Returns:
            SegmentPayload

        Raises:
            SegmentSourceError: On a bad id, auth failure, upstream error or
                missing streams
        """
        segment_id = str(segment_id).strip()
        if not _SEGMENT_ID.match(segment_id):
            raise SegmentSourceError(SegmentErrorKind.INVALID_ID, 400,
                                     "Invalid or missing segment id")

        bin_km = clamp_bin_km(bin_km)
        lat_step = clamp_lat_step(lat_step)
        logger.info("Fetching Strava segment %s (bins %.2f km)", segment_id, bin_km)

        try:
            token = self.access_token or self._refresh_access_token()
            segment = self._get_json(f"/segments/{segment_id}", token,
                                     "Failed to fetch segment")
            raw_streams = self._get_json(
                f"/segments/{segment_id}/streams", token, "Failed to fetch segment streams",
                params={"keys": STREAM_KEYS, "key_by_type": "true"},
            )
        except requests.RequestException as e:
            raise SegmentSourceError(SegmentErrorKind.UNEXPECTED, 500,
                                     "Unexpected error", str(e)) from e

        streams = normalize_streams(raw_streams)
        distance = streams["distance"]
        altitude = streams["altitude"]
        if not distance or not altitude:
            raise SegmentSourceError(SegmentErrorKind.MISSING_STREAMS, 502,
                                     "Missing distance/altitude streams for segment")

        points = to_points(distance, altitude)
        last_distance = distance[-1] if _finite(distance[-1]) else 0.0

        latlng = None
        if isinstance(streams["latlng"], list):
            latlng = [tuple(ll) for i, ll in enumerate(streams["latlng"]) if i % lat_step == 0]

        segment = segment if isinstance(segment, dict) else {}
        payload = SegmentPayload(
            id=segment.get("id", int(segment_id)),
            name=segment.get("name") or f"Segment {segment_id}",
            segments=bin_by_distance(points, bin_km),
            total_km=last_distance / 1000.0,
            total_gain_m=total_gain(points),
            points=points,
            latlng=latlng,
            meta={k: segment[k] for k in META_FIELDS if k in segment},
        )
        logger.info("Segment %s: %d samples, %d bins, %.2f km, %d m gain",
                    payload.name, len(points), len(payload.segments),
                    payload.total_km, payload.total_gain_m)
        return payload

    def _refresh_access_token(self) -> str:
        if not (self.client_id and self.client_secret and self.refresh_token):
            raise SegmentSourceError(
                SegmentErrorKind.AUTH, 500,
                "Missing STRAVA_CLIENT_ID / STRAVA_CLIENT_SECRET / STRAVA_REFRESH_TOKEN",
            )

        logger.debug("Refreshing Strava access token")
        response = self.session.post(
            STRAVA_TOKEN_URL,
            json={
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "refresh_token": self.refresh_token,
                "grant_type": "refresh_token",
            },
            timeout=self.timeout,
        )
        if not response.ok:
            raise SegmentSourceError(SegmentErrorKind.AUTH, response.status_code,
                                     "Failed to refresh Strava token", _safe_json(response))

        token = _safe_json(response).get("access_token")
        if not token:
            raise SegmentSourceError(SegmentErrorKind.AUTH, 401,
                                     "Token refresh returned no access token")
        self.access_token = token
        return token

    def _get_json(self, path: str, token: str, error: str, params: Optional[Dict] = None):
        response = self.session.get(
            f"{STRAVA_API_URL}{path}",
            headers={"Authorization": f"Bearer {token}"},
            params=params,
            timeout=self.timeout,
        )
        if not response.ok:
            logger.warning("Strava %s returned HTTP %s", path, response.status_code)
            raise SegmentSourceError(SegmentErrorKind.UPSTREAM, response.status_code,
                                     error, _safe_json(response))
        return response.json()


def _safe_json(response) -> Dict:
    """Response body as JSON, or its status when the body is not JSON."""
    try:
        data = response.json()
    except ValueError:
        return {"status": response.status_code, "statusText": response.reason}
    return data if isinstance(data, dict) else {"body": data}


__all__ = [
    "SegmentErrorKind",
    "SegmentSourceError",
    "StreamPoint",
    "SegmentPayload",
    "StravaSegmentSource",
    "normalize_streams",
    "to_points",
    "total_gain",
    "bin_by_distance",
    "clamp_bin_km",
    "clamp_lat_step",
]
