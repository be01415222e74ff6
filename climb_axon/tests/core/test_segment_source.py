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
Tests for Remote Segment Source
===============================

HTTP is mocked throughout; nothing here talks to Strava.
"""

from unittest.mock import MagicMock

import pytest
import requests

from climb_axon.core.climb_data import Segment
from climb_axon.core.segment_source import (
    STRAVA_TOKEN_URL,
    SegmentErrorKind,
    SegmentSourceError,
    StravaSegmentSource,
    StreamPoint,
    bin_by_distance,
    clamp_bin_km,
    clamp_lat_step,
    normalize_streams,
    to_points,
    total_gain,
)

SEGMENT_META = {
    "id": 229781,
    "name": "Hawk Hill",
    "distance": 2684.0,
    "average_grade": 5.7,
    "maximum_grade": 9.1,
    "city": "San Francisco",
    "resource_state": 3,
}

STREAMS_BY_TYPE = {
    "distance": {"data": [0.0, 500.0, 1000.0, 1500.0]},
    "altitude": {"data": [10.0, 40.0, 70.0, 85.0]},
    "latlng": {"data": [[37.1, -122.1], [37.2, -122.2], [37.3, -122.3], [37.4, -122.4]]},
}


class TestStreamHelpers:
    """Tests for the pure stream helpers."""

    @pytest.mark.unit
    def test_normalize_object_shape(self):
        """Test streams keyed by type."""
        streams = normalize_streams(STREAMS_BY_TYPE)
        assert streams["distance"] == [0.0, 500.0, 1000.0, 1500.0]
        assert len(streams["latlng"]) == 4

    @pytest.mark.unit
    def test_normalize_array_shape(self):
        """Test streams as an array of typed entries."""
        raw = [
            {"type": "distance", "data": [0, 10]},
            {"type": "altitude", "data": [5, 6]},
            {"type": "heartrate", "data": [100, 101]},
            None,
        ]
        streams = normalize_streams(raw)
        assert streams == {"distance": [0, 10], "altitude": [5, 6], "latlng": None}

    @pytest.mark.unit
    def test_normalize_garbage(self):
        """Test unexpected stream payloads normalize to empty."""
        assert normalize_streams("nope") == {"distance": None, "altitude": None, "latlng": None}

    @pytest.mark.unit
    def test_to_points_drops_non_finite(self):
        """Test non-finite samples are dropped."""
        points = to_points([0, 100, float("nan"), 300], [10, 11, 12, None])
        assert points == [StreamPoint(0.0, 10), StreamPoint(0.1, 11)]

    @pytest.mark.unit
    def test_to_points_prepends_start(self):
        """Test a late first sample gets a 0 km point."""
        points = to_points([20.0, 100.0], [50.0, 55.0])
        assert points[0] == StreamPoint(0.0, 50.0)
        assert len(points) == 3

    @pytest.mark.unit
    def test_to_points_near_zero_start_kept(self):
        """Test a near-zero first sample is kept as is."""
        points = to_points([4.0, 100.0], [50.0, 55.0])
        assert points[0].d_km == pytest.approx(0.004)
        assert len(points) == 2

    @pytest.mark.unit
    def test_total_gain_positive_only(self):
        """Test gain counts positive deltas only."""
        points = [StreamPoint(0, 100), StreamPoint(1, 130.4), StreamPoint(2, 120), StreamPoint(3, 140)]
        assert total_gain(points) == 50

    @pytest.mark.unit
    def test_bin_by_distance_splits_at_edges(self):
        """Test bins are split at exact edges."""
        points = [StreamPoint(0.0, 100.0), StreamPoint(1.5, 190.0)]
        assert bin_by_distance(points, 1.0) == [Segment(1.0, 6.0), Segment(0.5, 6.0)]

    @pytest.mark.unit
    def test_bin_by_distance_mixed_grades(self):
        """Test per-bin grades on mixed terrain."""
        points = [StreamPoint(0.0, 0.0), StreamPoint(0.5, 50.0), StreamPoint(1.0, 50.0),
                  StreamPoint(2.0, 0.0)]
        bins = bin_by_distance(points, 1.0)
        assert bins == [Segment(1.0, 5.0), Segment(1.0, -5.0)]

    @pytest.mark.unit
    def test_bin_by_distance_rounding(self):
        """Test bin length and grade rounding."""
        points = [StreamPoint(0.0, 0.0), StreamPoint(0.3333, 10.0)]
        assert bin_by_distance(points, 1.0) == [Segment(0.333, 3.0)]

    @pytest.mark.unit
    def test_bin_by_distance_empty(self):
        """Test binning no points."""
        assert bin_by_distance([], 1.0) == []

    @pytest.mark.unit
    @pytest.mark.parametrize("value,expected", [(0.01, 0.05), (9, 5.0), ("x", 1.0), (0.5, 0.5)])
    def test_clamp_bin_km(self, value, expected):
        """Test bin length clamping."""
        assert clamp_bin_km(value) == expected

    @pytest.mark.unit
    @pytest.mark.parametrize("value,expected", [(0, 1), (500, 100), (2.5, 10), (8, 8)])
    def test_clamp_lat_step(self, value, expected):
        """Test latlng step clamping."""
        assert clamp_lat_step(value) == expected


@pytest.mark.network
class TestStravaSegmentSource:
    """Tests for StravaSegmentSource with a mocked session."""

    def _source(self, responses, **kwargs):
        session = MagicMock()
        session.get.side_effect = responses
        return StravaSegmentSource(session=session, **kwargs), session

    @pytest.mark.unit
    def test_fetch(self, mock_response):
        """Test a full segment fetch."""
        source, session = self._source(
            [mock_response(SEGMENT_META), mock_response(STREAMS_BY_TYPE)],
            access_token="tok",
        )
        payload = source.fetch("229781", bin_km=1.0, lat_step=2)

        assert payload.name == "Hawk Hill"
        assert payload.total_km == pytest.approx(1.5)
        assert payload.total_gain_m == 75
        assert payload.segments == [Segment(1.0, 6.0), Segment(0.5, 3.0)]
        assert payload.latlng == [(37.1, -122.1), (37.3, -122.3)]
        assert "resource_state" not in payload.meta
        assert payload.meta["city"] == "San Francisco"

        first_call = session.get.call_args_list[0]
        assert first_call.args[0].endswith("/segments/229781")
        assert first_call.kwargs["headers"] == {"Authorization": "Bearer tok"}
        streams_call = session.get.call_args_list[1]
        assert streams_call.kwargs["params"]["keys"] == "distance,altitude,latlng"

    @pytest.mark.unit
    def test_payload_to_profile(self, mock_response):
        """Test converting a payload into a profile."""
        source, _ = self._source(
            [mock_response(SEGMENT_META), mock_response(STREAMS_BY_TYPE)], access_token="tok")
        profile = source.fetch(229781).to_profile()

        assert profile.name == "Hawk Hill"
        assert profile.start_elevation_m == 10.0
        assert len(profile.segments) == 2

    @pytest.mark.unit
    def test_payload_to_dict(self, mock_response):
        """Test payload serialization."""
        source, _ = self._source(
            [mock_response(SEGMENT_META), mock_response(STREAMS_BY_TYPE)], access_token="tok")
        data = source.fetch(229781).to_dict()

        assert data["profile"]["segments"][0] == {"km": 1.0, "grade": 6.0}
        assert data["streams"]["sample_count"] == 4

    @pytest.mark.unit
    @pytest.mark.parametrize("segment_id", ["", "abc", "12a", "-5", None])
    def test_invalid_id(self, segment_id):
        """Test non-numeric segment ids are rejected."""
        source, session = self._source([], access_token="tok")
        with pytest.raises(SegmentSourceError) as exc:
            source.fetch(segment_id)

        assert exc.value.kind == SegmentErrorKind.INVALID_ID
        assert exc.value.status == 400
        session.get.assert_not_called()

    @pytest.mark.unit
    def test_upstream_error_keeps_status(self, mock_response):
        """Test upstream errors keep the HTTP status."""
        source, _ = self._source([mock_response({"message": "Record Not Found"}, status=404)],
                                 access_token="tok")
        with pytest.raises(SegmentSourceError) as exc:
            source.fetch("1")

        assert exc.value.kind == SegmentErrorKind.UPSTREAM
        assert exc.value.status == 404
        assert exc.value.details == {"message": "Record Not Found"}

    @pytest.mark.unit
    def test_upstream_error_non_json_body(self, mock_response):
        """Test upstream errors with a non-JSON body."""
        source, _ = self._source([mock_response(ValueError("no json"), status=503)],
                                 access_token="tok")
        with pytest.raises(SegmentSourceError) as exc:
            source.fetch("1")
        assert exc.value.details["status"] == 503

    @pytest.mark.unit
    def test_missing_streams(self, mock_response):
        """Test missing distance or altitude streams."""
        source, _ = self._source(
            [mock_response(SEGMENT_META), mock_response({"latlng": {"data": []}})],
            access_token="tok")
        with pytest.raises(SegmentSourceError) as exc:
            source.fetch("1")

        assert exc.value.kind == SegmentErrorKind.MISSING_STREAMS
        assert exc.value.status == 502

    @pytest.mark.unit
    def test_connection_error_is_unexpected(self):
        """Test connection failures become UNEXPECTED errors."""
        source, _ = self._source(requests.ConnectionError("down"), access_token="tok")
        with pytest.raises(SegmentSourceError) as exc:
            source.fetch("1")

        assert exc.value.kind == SegmentErrorKind.UNEXPECTED
        assert exc.value.status == 500

    @pytest.mark.unit
    def test_missing_credentials(self, monkeypatch):
        """Test missing credentials raise an AUTH error."""
        for name in ("STRAVA_CLIENT_ID", "STRAVA_CLIENT_SECRET", "STRAVA_REFRESH_TOKEN"):
            monkeypatch.delenv(name, raising=False)
        source, session = self._source([])

        with pytest.raises(SegmentSourceError) as exc:
            source.fetch("1")

        assert exc.value.kind == SegmentErrorKind.AUTH
        session.get.assert_not_called()

    @pytest.mark.unit
    def test_refreshes_token_from_env(self, monkeypatch, mock_response):
        """Test the token is refreshed from environment credentials."""
        monkeypatch.setenv("STRAVA_CLIENT_ID", "id")
        monkeypatch.setenv("STRAVA_CLIENT_SECRET", "secret")
        monkeypatch.setenv("STRAVA_REFRESH_TOKEN", "refresh")
        source, session = self._source([mock_response(SEGMENT_META), mock_response(STREAMS_BY_TYPE)])
        session.post.return_value = mock_response({"access_token": "fresh"})

        source.fetch("229781")

        post = session.post.call_args
        assert post.args[0] == STRAVA_TOKEN_URL
        assert post.kwargs["json"]["grant_type"] == "refresh_token"
        assert post.kwargs["json"]["refresh_token"] == "refresh"
        assert session.get.call_args.kwargs["headers"]["Authorization"] == "Bearer fresh"

    @pytest.mark.unit
    def test_refresh_failure(self, mock_response):
        """Test a rejected token refresh."""
        source, session = self._source([], client_id="id", client_secret="s", refresh_token="r")
        session.post.return_value = mock_response({"message": "Bad Request"}, status=400)

        with pytest.raises(SegmentSourceError) as exc:
            source.fetch("1")

        assert exc.value.kind == SegmentErrorKind.AUTH
        assert exc.value.status == 400


class TestSegmentSourceError:

    @pytest.mark.unit
    def test_to_dict(self):
        """Test error serialization."""
        error = SegmentSourceError(SegmentErrorKind.UPSTREAM, 404, "Failed", {"x": 1})
        assert error.to_dict() == {"error": "Failed", "kind": "upstream", "status": 404,
                                   "details": {"x": 1}}
        assert str(error) == "Failed"
