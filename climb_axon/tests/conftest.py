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
Pytest Configuration and Fixtures
==================================

Shared fixtures for the Climb Axon test suite.
"""

import math
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Add repository root to path for imports
REPO_ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(REPO_ROOT))

from climb_axon.core.climb_data import SAMPLE_CLIMB, ClimbProfile, Segment  # noqa: E402
from climb_axon.core.config import DEFAULT_CONFIG  # noqa: E402
from climb_axon.core.slope_colors import SlopeColor  # noqa: E402


# =============================================================================
# Markers
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, no external deps)")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "network: Would talk to a remote API (always mocked here)")


# =============================================================================
# Profile Fixtures
# =============================================================================

@pytest.fixture
def sample_profile() -> ClimbProfile:
    """The built-in 16.7 km sample climb."""
    return SAMPLE_CLIMB


@pytest.fixture
def single_segment_profile() -> ClimbProfile:
    """One kilometre at 10%."""
    return ClimbProfile(name="Wall", segments=(Segment(1.0, 10.0),))


@pytest.fixture
def up_down_profile() -> ClimbProfile:
    """1 km at 10% then 1 km at -5%: elevations 0, 100, 50."""
    return ClimbProfile(name="Up Down", segments=(Segment(1.0, 10.0), Segment(1.0, -5.0)))


@pytest.fixture
def default_config():
    return DEFAULT_CONFIG


@pytest.fixture
def abc_buckets():
    """Three buckets: <= 4% A, <= 8% B, anything steeper C."""
    return [SlopeColor(4.0, "A"), SlopeColor(8.0, "B"), SlopeColor(math.inf, "C")]


# =============================================================================
# Mock Fixtures
# =============================================================================

@pytest.fixture
def mock_response():
    """Factory for mock ``requests`` responses.

    Returns:
        Callable ``(json_data, status=200) -> MagicMock``
    """
    def _make(json_data=None, status: int = 200):
        response = MagicMock()
        response.status_code = status
        response.ok = 200 <= status < 400
        response.reason = "OK" if response.ok else "Error"
        if isinstance(json_data, Exception):
            response.json.side_effect = json_data
        else:
            response.json.return_value = json_data
        return response

    return _make
