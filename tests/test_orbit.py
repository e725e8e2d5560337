#!/usr/bin/env python3
"""
Orbit Propagation Tests

Kepler solver accuracy, frame rotation and closure of propagated orbits.
"""

import math

import numpy as np
import pytest

from orrery import (
    OrbitalElements,
    Body,
    BodyKind,
    solve_kepler,
    true_anomaly_from_eccentric,
    perifocal_to_inertial_matrix,
    propagate,
    gravitational_parameter,
    AU,
    G,
    SOLAR_MASS_KG,
    EARTH_MASS_KG,
    EARTH_RADIUS_M,
)


def make_planet(orbit):
    return Body(
        id="planet-0", name="Planet 1", kind=BodyKind.PLANET,
        mass=EARTH_MASS_KG, radius=EARTH_RADIUS_M, orbit=orbit,
    )


class TestKeplerSolver:
    """Tests for solving E - e sin E = M."""

    @pytest.mark.parametrize("e", [0.0, 0.1, 0.3, 0.5, 0.79, 0.8, 0.9, 0.95, 0.99])
    def test_residual_over_full_range(self, e):
        """Residual below 1e-9 across mean anomalies."""
        for k in range(720):
            M = 2 * math.pi * k / 720
            E = solve_kepler(M, e)
            assert abs(E - e * math.sin(E) - M) < 1e-9, (e, M)

    @pytest.mark.parametrize("M", [1e-12, 1e-8, 1e-5, 1e-3, 2 * math.pi - 1e-6])
    def test_high_eccentricity_near_periapsis(self, M):
        """Hard case: e near 1 with mean anomaly near 0 or 2π."""
        e = 0.99
        E = solve_kepler(M, e)
        assert abs(E - e * math.sin(E) - M) < 1e-9

    def test_circular_orbit_identity(self):
        """For e = 0, E equals M."""
        for M in [0.0, 0.5, 3.0, 6.0]:
            assert solve_kepler(M, 0.0) == pytest.approx(M, abs=1e-15)

    def test_mean_anomaly_wrapped(self):
        """Mean anomaly outside [0, 2π) is wrapped first."""
        e = 0.3
        assert solve_kepler(1.0 + 4 * math.pi, e) == pytest.approx(solve_kepler(1.0, e), abs=1e-9)
        assert solve_kepler(-1.0, e) == pytest.approx(solve_kepler(2 * math.pi - 1.0, e), abs=1e-9)

    def test_true_anomaly_circular(self):
        """For e = 0, true anomaly matches eccentric anomaly."""
        for E in [0.1, 1.0, 2.5]:
            assert true_anomaly_from_eccentric(E, 0.0) == pytest.approx(E)

    def test_true_anomaly_at_apsides(self):
        """Periapsis and apoapsis are fixed points."""
        assert true_anomaly_from_eccentric(0.0, 0.5) == pytest.approx(0.0)
        assert abs(true_anomaly_from_eccentric(math.pi, 0.5)) == pytest.approx(math.pi)


class TestRotation:
    """Tests for the perifocal to inertial rotation."""

    def test_identity_for_zero_angles(self):
        """No rotation when all angles are zero."""
        assert np.allclose(perifocal_to_inertial_matrix(0.0, 0.0, 0.0), np.eye(3))

    def test_orthonormal(self):
        """Rotation matrices are orthonormal with determinant 1."""
        R = perifocal_to_inertial_matrix(1.1, 0.4, 2.7)
        assert np.allclose(R @ R.T, np.eye(3))
        assert np.linalg.det(R) == pytest.approx(1.0)

    def test_inclination_tilts_out_of_plane(self):
        """A 90° inclination with Ω = ω = 0 maps Q onto +z."""
        R = perifocal_to_inertial_matrix(0.0, math.pi / 2, 0.0)
        assert np.allclose(R @ np.array([0.0, 1.0, 0.0]), [0.0, 0.0, 1.0])


class TestOrbitalElements:
    """Tests for element validation and derived values."""

    def test_rejects_non_positive_semi_major_axis(self):
        with pytest.raises(ValueError):
            OrbitalElements("star-0", 0.0, 0.1, 0.0, 0.0, 0.0, 0.0)

    @pytest.mark.parametrize("e", [-0.1, 1.0, 1.5])
    def test_rejects_non_elliptical(self, e):
        """Parabolic and hyperbolic orbits are not supported."""
        with pytest.raises(ValueError):
            OrbitalElements("star-0", AU, e, 0.0, 0.0, 0.0, 0.0)

    def test_period_of_earth_like_orbit(self):
        """1 AU around one solar mass takes about a year."""
        orbit = OrbitalElements("star-0", AU, 0.0167, 0.0, 0.0, 0.0, 0.0)
        period = orbit.period(gravitational_parameter(SOLAR_MASS_KG))
        assert period / 86400 == pytest.approx(365.25, rel=1e-3)

    def test_wire_round_trip(self, circular_elements):
        """Wire keys are camelCase and parse back to equal elements."""
        data = circular_elements.to_dict()
        assert set(data) == {
            "parentId", "semiMajorAxis", "eccentricity", "inclination",
            "lonAscendingNode", "argPeriapsis", "meanAnomalyAtEpoch",
        }
        assert OrbitalElements.from_dict(data) == circular_elements

    def test_immutable(self, circular_elements):
        with pytest.raises(AttributeError):
            circular_elements.eccentricity = 0.5


class TestPropagate:
    """Tests for propagating a body on its orbit."""

    def test_star_stays_at_origin(self):
        """Bodies without an orbit are pinned to the origin."""
        star = Body(id="star-0", name="Star", kind=BodyKind.STAR, mass=SOLAR_MASS_KG, radius=7e8)
        position, period = propagate(star, np.zeros(3), SOLAR_MASS_KG, 1e7)
        assert np.array_equal(position, np.zeros(3))
        assert period is None

    def test_writes_result_into_body(self, circular_elements):
        """Position and period are stored on the body."""
        planet = make_planet(circular_elements)
        position, period = propagate(planet, np.zeros(3), SOLAR_MASS_KG, 1000.0)
        assert np.array_equal(planet.position, position)
        assert planet.period_seconds == period

    def test_period_formula(self, circular_elements):
        """Period is 2π / sqrt(μ / a³)."""
        planet = make_planet(circular_elements)
        _, period = propagate(planet, np.zeros(3), SOLAR_MASS_KG, 0.0)
        expected = 2 * math.pi * math.sqrt(AU ** 3 / (G * SOLAR_MASS_KG))
        assert period == pytest.approx(expected, rel=1e-12)

    def test_circular_orbit_constant_radius(self, circular_elements):
        """e = 0 keeps the distance equal to the semi-major axis."""
        planet = make_planet(circular_elements)
        _, period = propagate(planet, np.zeros(3), SOLAR_MASS_KG, 0.0)
        for k in range(50):
            position, _ = propagate(planet, np.zeros(3), SOLAR_MASS_KG, period * k / 37.0)
            assert np.linalg.norm(position) == pytest.approx(AU, rel=1e-12)

    @pytest.mark.parametrize("e", [0.0, 0.15, 0.6, 0.9, 0.99])
    def test_orbit_closure(self, e):
        """After one period the body is back where it started."""
        orbit = OrbitalElements("star-0", 2 * AU, e, 0.3, 1.2, 4.0, 2.2)
        planet = make_planet(orbit)
        start, period = propagate(planet, np.zeros(3), SOLAR_MASS_KG, 0.0)
        end, _ = propagate(planet, np.zeros(3), SOLAR_MASS_KG, period)
        assert np.linalg.norm(end - start) < 1e-6 * orbit.semi_major_axis

    def test_periapsis_and_apoapsis_distances(self):
        """r = a(1 - e) at M = 0 and a(1 + e) half a period later."""
        orbit = OrbitalElements("star-0", AU, 0.5, 0.0, 0.0, 0.0, 0.0)
        planet = make_planet(orbit)
        position, period = propagate(planet, np.zeros(3), SOLAR_MASS_KG, 0.0)
        assert np.linalg.norm(position) == pytest.approx(0.5 * AU, rel=1e-12)
        position, _ = propagate(planet, np.zeros(3), SOLAR_MASS_KG, period / 2)
        assert np.linalg.norm(position) == pytest.approx(1.5 * AU, rel=1e-9)

    def test_offset_by_parent_position(self, circular_elements):
        """Result is the parent position plus the orbital offset."""
        planet = make_planet(circular_elements)
        at_origin, _ = propagate(planet, np.zeros(3), SOLAR_MASS_KG, 5000.0)
        parent = np.array([1e11, -2e10, 3e9])
        shifted, _ = propagate(planet, parent, SOLAR_MASS_KG, 5000.0)
        assert np.allclose(shifted - parent, at_origin)

    def test_zero_inclination_stays_in_plane(self):
        """Uninclined orbits have z = 0."""
        orbit = OrbitalElements("star-0", AU, 0.2, 0.0, 0.7, 1.9, 0.4)
        planet = make_planet(orbit)
        for t in [0.0, 1e6, 1e7]:
            position, _ = propagate(planet, np.zeros(3), SOLAR_MASS_KG, t)
            assert position[2] == pytest.approx(0.0, abs=1e-3)

    def test_does_not_alias_parent_position(self, circular_elements):
        """Returned position is a new array."""
        planet = make_planet(circular_elements)
        parent = np.zeros(3)
        position, _ = propagate(planet, parent, SOLAR_MASS_KG, 0.0)
        position[0] += 1.0
        assert parent[0] == 0.0
