#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Star System Generation Module

Builds a hierarchical star system (star -> planets -> moons) from a string
seed. Generation is fully deterministic: the same seed and configuration
always produce the same bodies and orbital elements.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

from .orbit import (
    OrbitalElements,
    AU,
    SOLAR_MASS_KG,
    SOLAR_RADIUS_M,
    EARTH_MASS_KG,
    EARTH_RADIUS_M,
    MOON_MASS_KG,
    MOON_RADIUS_M,
    TWO_PI,
)
from .bodies import Body, BodyKind, World
from .rng import RNG


logger = logging.getLogger(__name__)

Range = Tuple[float, float]


@dataclass
class SystemConfig:
    """
    Ranges used when generating a star system.

    Attributes
    ----------
    star_mass : tuple
        Star mass range (solar masses).
    star_radius : tuple
        Star radius range (solar radii).
    planet_count : tuple
        Inclusive range of planet counts.
    initial_semi_major_axis : tuple
        Starting value of the semi-major-axis accumulator (AU).
    spacing_factor : tuple
        Multiplicative growth of the accumulator before each planet.
    planet_eccentricity : tuple
        Planet eccentricity range.
    planet_inclination_deg : tuple
        Planet inclination range (degrees).
    planet_mass : tuple
        Planet mass range (Earth masses).
    planet_radius : tuple
        Planet radius range (Earth radii).
    max_moons : int
        Upper cap on moons per planet.
    moon_mass : tuple
        Moon mass range (lunar masses).
    moon_radius : tuple
        Moon radius range (lunar radii).
    moon_distance : tuple
        Moon semi-major axis range (parent radii).
    moon_eccentricity : tuple
        Moon eccentricity range.
    moon_inclination_deg : tuple
        Moon inclination range (degrees).
    initial_time_scale : float
        Time scale of the new world (simulated seconds per real second).
    """

    star_mass: Range = (0.7, 1.3)
    star_radius: Range = (0.8, 1.4)
    planet_count: Tuple[int, int] = (3, 9)
    initial_semi_major_axis: Range = (0.25, 0.6)
    spacing_factor: Range = (1.25, 1.75)
    planet_eccentricity: Range = (0.0, 0.15)
    planet_inclination_deg: Range = (0.0, 10.0)
    planet_mass: Range = (0.2, 5.0)
    planet_radius: Range = (0.6, 2.2)
    max_moons: int = 4
    moon_mass: Range = (0.01, 0.2)
    moon_radius: Range = (0.2, 0.7)
    moon_distance: Range = (5.0, 40.0)
    moon_eccentricity: Range = (0.0, 0.08)
    moon_inclination_deg: Range = (0.0, 18.0)
    initial_time_scale: float = 86400.0


def max_moon_count(planet_mass: float, cap: int = 4) -> int:
    """More massive planets may host more moons, up to cap."""
    return min(cap, math.floor(planet_mass / EARTH_MASS_KG) + 1)


def _random_orientation(rng: RNG) -> Tuple[float, float, float]:
    """Ω, ω and M0, each in [0, 2π)."""
    lon_ascending_node = rng.range(0, TWO_PI)
    arg_periapsis = rng.range(0, TWO_PI)
    mean_anomaly_at_epoch = rng.range(0, TWO_PI)
    return lon_ascending_node, arg_periapsis, mean_anomaly_at_epoch


def create_star(rng: RNG, config: SystemConfig) -> Body:
    """
    Create the root star at the origin.

    Parameters
    ----------
    rng : RNG
        Random source
    config : SystemConfig
        Generation ranges

    Returns
    -------
    Body
        Star without an orbit
    """
    mass = rng.range(*config.star_mass) * SOLAR_MASS_KG
    radius = rng.range(*config.star_radius) * SOLAR_RADIUS_M
    return Body(id="star-0", name="Star", kind=BodyKind.STAR, mass=mass, radius=radius)


def create_planet(
    rng: RNG,
    config: SystemConfig,
    index: int,
    star: Body,
    semi_major_axis: float,
) -> Body:
    """
    Create a planet on a given orbit size around the star.

    Parameters
    ----------
    rng : RNG
        Random source
    config : SystemConfig
        Generation ranges
    index : int
        Zero-based planet index (outward order)
    star : Body
        Parent star
    semi_major_axis : float
        Semi-major axis (m)

    Returns
    -------
    Body
        The planet
    """
    eccentricity = rng.range(*config.planet_eccentricity)
    inclination = math.radians(rng.range(*config.planet_inclination_deg))
    mass = rng.range(*config.planet_mass) * EARTH_MASS_KG
    radius = rng.range(*config.planet_radius) * EARTH_RADIUS_M
    lon_ascending_node, arg_periapsis, mean_anomaly = _random_orientation(rng)

    orbit = OrbitalElements(
        parent_id=star.id,
        semi_major_axis=semi_major_axis,
        eccentricity=eccentricity,
        inclination=inclination,
        lon_ascending_node=lon_ascending_node,
        arg_periapsis=arg_periapsis,
        mean_anomaly_at_epoch=mean_anomaly,
    )
    return Body(
        id=f"planet-{index}",
        name=f"Planet {index + 1}",
        kind=BodyKind.PLANET,
        mass=mass,
        radius=radius,
        orbit=orbit,
    )


def create_moon(rng: RNG, config: SystemConfig, index: int, planet: Body, planet_index: int) -> Body:
    """Create a moon whose orbit size is measured in parent radii."""
    mass = rng.range(*config.moon_mass) * MOON_MASS_KG
    radius = rng.range(*config.moon_radius) * MOON_RADIUS_M
    semi_major_axis = rng.range(*config.moon_distance) * planet.radius
    eccentricity = rng.range(*config.moon_eccentricity)
    inclination = math.radians(rng.range(*config.moon_inclination_deg))
    lon_ascending_node, arg_periapsis, mean_anomaly = _random_orientation(rng)

    orbit = OrbitalElements(
        parent_id=planet.id,
        semi_major_axis=semi_major_axis,
        eccentricity=eccentricity,
        inclination=inclination,
        lon_ascending_node=lon_ascending_node,
        arg_periapsis=arg_periapsis,
        mean_anomaly_at_epoch=mean_anomaly,
    )
    return Body(
        id=f"{planet.id}-moon-{index}",
        name=f"Moon {index + 1} of P{planet_index + 1}",
        kind=BodyKind.MOON,
        mass=mass,
        radius=radius,
        orbit=orbit,
    )


def generate_world(seed: str, config: Optional[SystemConfig] = None) -> World:
    """
    Generate a star system from a seed.

    Planets are placed outward with a running semi-major axis that grows by
    a random factor before each planet, so orbits never cross in order.
    Each planet is immediately followed by its moons in the body order,
    which makes the order parent-before-child.

    Parameters
    ----------
    seed : str
        Seed string (the empty string is valid)
    config : SystemConfig, optional
        Generation ranges; defaults reproduce the standard system

    Returns
    -------
    World
        New world at time zero, unpaused
    """
    config = config or SystemConfig()
    rng = RNG(seed)

    world = World(seed=seed, time_scale=config.initial_time_scale)

    star = create_star(rng, config)
    world.add_body(star)

    num_planets = rng.int(*config.planet_count)
    a = rng.range(*config.initial_semi_major_axis) * AU
    num_moons = 0

    for p in range(num_planets):
        a *= rng.range(*config.spacing_factor)

        planet = create_planet(rng, config, p, star, a)
        world.add_body(planet)

        moon_count = rng.int(0, max_moon_count(planet.mass, config.max_moons))
        for m in range(moon_count):
            world.add_body(create_moon(rng, config, m, planet, p))
        num_moons += moon_count

    world.validate_hierarchy()
    logger.debug(
        f"Generated system seed={seed!r}: {num_planets} planets, {num_moons} moons"
    )
    return world
