#!/usr/bin/env python3
"""
Pytest Configuration and Shared Fixtures

Provides common fixtures and markers for testing the orrery simulation core.
"""

import math
import sys
from pathlib import Path

import pytest

# Add parent directory for imports
sys.path.insert(0, str(Path(__file__).parent.parent))


DEMO_SEED = "demo-seed-001"


# =============================================================================
# PYTEST MARKERS
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )
    config.addinivalue_line(
        "markers", "threaded: mark test as starting a background worker thread"
    )


# =============================================================================
# WORLD FIXTURES
# =============================================================================

@pytest.fixture
def demo_world():
    """World generated from the demo seed."""
    from orrery import generate_world

    return generate_world(DEMO_SEED)


@pytest.fixture
def demo_engine():
    """Engine wrapping the demo world at time zero."""
    from orrery import create_engine

    return create_engine(DEMO_SEED)


@pytest.fixture
def circular_elements():
    """Circular, inclined orbit at 1 AU around the star."""
    from orrery import OrbitalElements, AU

    return OrbitalElements(
        parent_id="star-0",
        semi_major_axis=AU,
        eccentricity=0.0,
        inclination=math.radians(7.0),
        lon_ascending_node=math.radians(40.0),
        arg_periapsis=math.radians(110.0),
        mean_anomaly_at_epoch=0.3,
    )


@pytest.fixture
def two_body_world(circular_elements):
    """Sun-like star with one planet on the circular orbit."""
    from orrery import World, Body, BodyKind, SOLAR_MASS_KG, SOLAR_RADIUS_M
    from orrery import EARTH_MASS_KG, EARTH_RADIUS_M

    world = World(seed="two-body", time_scale=1.0)
    world.add_body(Body(
        id="star-0", name="Star", kind=BodyKind.STAR,
        mass=SOLAR_MASS_KG, radius=SOLAR_RADIUS_M,
    ))
    world.add_body(Body(
        id="planet-0", name="Planet 1", kind=BodyKind.PLANET,
        mass=EARTH_MASS_KG, radius=EARTH_RADIUS_M, orbit=circular_elements,
    ))
    return world


class FakeClock:
    """Manually advanced wall clock."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


@pytest.fixture
def fake_clock():
    """Injectable clock for deterministic worker tests."""
    return FakeClock()
