#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Keplerian Orbit Propagation

Defines orbital elements for bodies in a generated star system and the
analytic two-body propagation used to place them in space.
All distances in meters, masses in kilograms, angles in radians, time in seconds.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from .bodies import Body

# Gravitational constant in m³/(kg·s²)
G = 6.67430e-11

# Astronomical unit in meters
AU = 149_597_870_700.0

# Reference bodies
SOLAR_MASS_KG = 1.98847e30
SOLAR_RADIUS_M = 6.9634e8
EARTH_MASS_KG = 5.972e24
EARTH_RADIUS_M = 6.371e6
MOON_MASS_KG = 7.342e22
MOON_RADIUS_M = 1.737e6

TWO_PI = 2 * math.pi

# Newton-Raphson settings for Kepler's equation
KEPLER_TOLERANCE = 1e-12
KEPLER_MAX_ITERATIONS = 50


def gravitational_parameter(mass: float) -> float:
    """Standard gravitational parameter μ = G * M (m³/s²)."""
    return G * mass


def solve_kepler(mean_anomaly: float, eccentricity: float) -> float:
    """
    Calculate eccentric anomaly from mean anomaly using Newton-Raphson iteration.

    Solves Kepler's equation: M = E - e * sin(E)

    Starting from E0 = π for high eccentricities keeps the iteration
    monotone; near e = 1 and small M it can still need well over a dozen
    steps, so the loop runs until the step size drops below
    KEPLER_TOLERANCE (at most KEPLER_MAX_ITERATIONS times).

    Parameters
    ----------
    mean_anomaly : float
        Mean anomaly (radians), any value
    eccentricity : float
        Orbital eccentricity, 0 <= e < 1

    Returns
    -------
    float
        Eccentric anomaly (radians)
    """
    e = eccentricity
    M = mean_anomaly % TWO_PI

    # Initial guess
    E = M if e < 0.8 else math.pi

    for _ in range(KEPLER_MAX_ITERATIONS):
        f = E - e * math.sin(E) - M
        f_prime = 1 - e * math.cos(E)
        E_new = E - f / f_prime

        if abs(E_new - E) < KEPLER_TOLERANCE:
            return E_new
        E = E_new

    return E  # Return best estimate if not converged


def true_anomaly_from_eccentric(eccentric_anomaly: float, eccentricity: float) -> float:
    """
    Calculate true anomaly from eccentric anomaly.

    Parameters
    ----------
    eccentric_anomaly : float
        Eccentric anomaly (radians)
    eccentricity : float
        Orbital eccentricity

    Returns
    -------
    float
        True anomaly (radians)
    """
    e = eccentricity
    E = eccentric_anomaly
    return math.atan2(math.sqrt(1 - e * e) * math.sin(E), math.cos(E) - e)


def perifocal_to_inertial_matrix(
    lon_ascending_node: float,
    inclination: float,
    arg_periapsis: float,
) -> np.ndarray:
    """
    Get rotation matrix from perifocal (PQW) to parent-centered inertial coordinates.

    3-1-3 Euler rotation through Ω, i and ω.

    Returns
    -------
    np.ndarray
        3x3 rotation matrix
    """
    cos_O = math.cos(lon_ascending_node)
    sin_O = math.sin(lon_ascending_node)
    cos_i = math.cos(inclination)
    sin_i = math.sin(inclination)
    cos_w = math.cos(arg_periapsis)
    sin_w = math.sin(arg_periapsis)

    return np.array([
        [cos_O * cos_w - sin_O * sin_w * cos_i,
         -cos_O * sin_w - sin_O * cos_w * cos_i,
         sin_O * sin_i],
        [sin_O * cos_w + cos_O * sin_w * cos_i,
         -sin_O * sin_w + cos_O * cos_w * cos_i,
         -cos_O * sin_i],
        [sin_w * sin_i,
         cos_w * sin_i,
         cos_i]
    ])


@dataclass(frozen=True)
class OrbitalElements:
    """
    Keplerian orbital elements of a body around its parent.

    Elements are fixed once generated; the body's position at any time
    follows from them, the parent's mass and the elapsed time.

    Attributes
    ----------
    parent_id : str
        Id of the body this orbit is defined around
    semi_major_axis : float
        Half the longest diameter of the ellipse (m), > 0
    eccentricity : float
        Shape of ellipse (0 = circular, 0 < e < 1 = elliptical)
    inclination : float
        Orbital plane tilt from the reference plane (radians)
    lon_ascending_node : float
        Angle from reference direction to ascending node (radians), Ω
    arg_periapsis : float
        Angle from ascending node to periapsis in the orbital plane (radians), ω
    mean_anomaly_at_epoch : float
        Mean anomaly at simulation time zero (radians), M0
    """

    parent_id: str
    semi_major_axis: float
    eccentricity: float
    inclination: float
    lon_ascending_node: float
    arg_periapsis: float
    mean_anomaly_at_epoch: float

    def __post_init__(self):
        if not self.parent_id:
            raise ValueError("Orbit must reference a parent body")
        if not self.semi_major_axis > 0:
            raise ValueError("Semi-major axis must be positive")
        if not 0 <= self.eccentricity < 1:
            raise ValueError("Eccentricity must be in [0, 1) for elliptical orbits")

    def mean_motion(self, mu: float) -> float:
        """Mean angular velocity n = sqrt(μ / a³) (radians/second)."""
        a = self.semi_major_axis
        return math.sqrt(mu / (a * a * a))

    def period(self, mu: float) -> float:
        """Time for one complete orbit (seconds)."""
        return TWO_PI / self.mean_motion(mu)

    def mean_anomaly_at_time(self, mu: float, t: float) -> float:
        """Mean anomaly at simulation time t, wrapped into [0, 2π)."""
        return (self.mean_anomaly_at_epoch + self.mean_motion(mu) * t) % TWO_PI

    def radius_at_eccentric(self, eccentric_anomaly: float) -> float:
        """Distance from the parent (m) at a given eccentric anomaly."""
        return self.semi_major_axis * (1 - self.eccentricity * math.cos(eccentric_anomaly))

    def perifocal_to_inertial_matrix(self) -> np.ndarray:
        """Rotation matrix for this orbit's orientation angles."""
        return perifocal_to_inertial_matrix(
            self.lon_ascending_node, self.inclination, self.arg_periapsis
        )

    def position_at_time(self, mu: float, t: float) -> np.ndarray:
        """
        Calculate the parent-relative position at simulation time t.

        Parameters
        ----------
        mu : float
            Gravitational parameter of the parent (m³/s²)
        t : float
            Simulation time (seconds)

        Returns
        -------
        np.ndarray
            Offset [x, y, z] from the parent in the inertial frame (m)
        """
        e = self.eccentricity
        M = self.mean_anomaly_at_time(mu, t)
        E = solve_kepler(M, e)
        nu = true_anomaly_from_eccentric(E, e)
        r = self.radius_at_eccentric(E)

        r_perifocal = np.array([r * math.cos(nu), r * math.sin(nu), 0.0])
        return self.perifocal_to_inertial_matrix() @ r_perifocal

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase wire representation."""
        return {
            "parentId": self.parent_id,
            "semiMajorAxis": self.semi_major_axis,
            "eccentricity": self.eccentricity,
            "inclination": self.inclination,
            "lonAscendingNode": self.lon_ascending_node,
            "argPeriapsis": self.arg_periapsis,
            "meanAnomalyAtEpoch": self.mean_anomaly_at_epoch,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OrbitalElements":
        """Create from the camelCase wire representation."""
        return cls(
            parent_id=data["parentId"],
            semi_major_axis=float(data["semiMajorAxis"]),
            eccentricity=float(data["eccentricity"]),
            inclination=float(data.get("inclination", 0.0)),
            lon_ascending_node=float(data.get("lonAscendingNode", 0.0)),
            arg_periapsis=float(data.get("argPeriapsis", 0.0)),
            mean_anomaly_at_epoch=float(data.get("meanAnomalyAtEpoch", 0.0)),
        )

    def __repr__(self) -> str:
        return (
            f"OrbitalElements(\n"
            f"  parent={self.parent_id},\n"
            f"  a={self.semi_major_axis / AU:.4f} AU,\n"
            f"  e={self.eccentricity:.6f},\n"
            f"  i={math.degrees(self.inclination):.2f}°,\n"
            f"  Ω={math.degrees(self.lon_ascending_node):.2f}°,\n"
            f"  ω={math.degrees(self.arg_periapsis):.2f}°,\n"
            f"  M0={math.degrees(self.mean_anomaly_at_epoch):.2f}°\n"
            f")"
        )


def propagate(
    body: "Body",
    parent_position: np.ndarray,
    parent_mass: float,
    elapsed_seconds: float,
) -> Tuple[np.ndarray, Optional[float]]:
    """
    Place a body on its orbit at a given simulation time.

    The result is written into the body and also returned. Bodies without
    an orbit (the root star) stay at the origin and have no period.

    Parameters
    ----------
    body : Body
        Body to propagate
    parent_position : np.ndarray
        Parent's current position in the root frame (m)
    parent_mass : float
        Parent's mass (kg)
    elapsed_seconds : float
        Simulation time since epoch (seconds)

    Returns
    -------
    tuple
        (position, period_seconds) with position in the root frame (m)
    """
    orbit = body.orbit
    if orbit is None:
        body.position = np.zeros(3)
        body.period_seconds = None
        return body.position, None

    mu = gravitational_parameter(parent_mass)
    position = np.asarray(parent_position, dtype=float) + orbit.position_at_time(mu, elapsed_seconds)
    period = orbit.period(mu)

    body.position = position
    body.period_seconds = period
    return position, period
