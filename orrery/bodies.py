#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Star System Bodies

Data model for a generated star system: the bodies (star, planets, moons),
3-D vectors and the mutable world state advanced by the engine.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

import numpy as np

from .orbit import OrbitalElements, AU


class BodyKind(Enum):
    """Kinds of bodies in a star system."""

    STAR = "star"
    PLANET = "planet"
    MOON = "moon"


@dataclass(frozen=True)
class Vec3:
    """
    Immutable 3-D coordinate.

    Attributes
    ----------
    x, y, z : float
        Components in meters
    """

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def from_array(cls, values) -> "Vec3":
        """Copy a length-3 array-like into a Vec3."""
        return cls(float(values[0]), float(values[1]), float(values[2]))

    def as_array(self) -> np.ndarray:
        """New numpy array [x, y, z]."""
        return np.array([self.x, self.y, self.z])

    def lerp(self, other: "Vec3", t: float) -> "Vec3":
        """Linear interpolation towards other (t = 0 gives self, t = 1 gives other)."""
        return Vec3(
            self.x + (other.x - self.x) * t,
            self.y + (other.y - self.y) * t,
            self.z + (other.z - self.z) * t,
        )

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "z": self.z}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Vec3":
        return cls(float(data["x"]), float(data["y"]), float(data["z"]))


@dataclass
class Body:
    """
    A star, planet or moon.

    Only the root star has no orbit. Position and period are runtime values
    written by the orbit propagator on every tick.

    Attributes
    ----------
    id : str
        Stable unique identifier
    name : str
        Display name
    kind : BodyKind
        Star, planet or moon
    mass : float
        Mass in kg (> 0)
    radius : float
        Radius in m (> 0)
    orbit : OrbitalElements, optional
        Orbit around the parent body; None only for the star
    position : np.ndarray
        Last computed position [x, y, z] in the star frame (m)
    period_seconds : float, optional
        Orbital period from the last propagation (s)
    """

    id: str
    name: str
    kind: BodyKind
    mass: float
    radius: float
    orbit: Optional[OrbitalElements] = None
    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    period_seconds: Optional[float] = None

    def __post_init__(self):
        if not self.mass > 0:
            raise ValueError(f"Body {self.id} mass must be positive")
        if not self.radius > 0:
            raise ValueError(f"Body {self.id} radius must be positive")
        if self.kind == BodyKind.STAR and self.orbit is not None:
            raise ValueError(f"Star {self.id} cannot have an orbit")
        if self.kind != BodyKind.STAR and self.orbit is None:
            raise ValueError(f"{self.kind.value.capitalize()} {self.id} requires an orbit")
        self.position = np.asarray(self.position, dtype=float).copy()

    @property
    def parent_id(self) -> Optional[str]:
        """Id of the body this one orbits, None for the star."""
        return self.orbit.parent_id if self.orbit is not None else None

    def distance_to(self, other: "Body") -> float:
        """Distance to another body (m)."""
        return float(np.linalg.norm(self.position - other.position))

    def __repr__(self) -> str:
        p = self.position / AU
        return (
            f"Body({self.id}, kind={self.kind.value}, "
            f"pos=({p[0]:.3f}, {p[1]:.3f}, {p[2]:.3f}) AU)"
        )


@dataclass
class World:
    """
    Mutable simulation state.

    Attributes
    ----------
    seed : str
        Seed the system was generated from
    time_seconds : float
        Simulated time since epoch (s)
    paused : bool
        Whether ticks advance time
    time_scale : float
        Simulated seconds per real second (>= 0)
    bodies : dict
        Bodies by id
    body_order : list
        Parent-before-child traversal order of body ids
    """

    seed: str
    time_seconds: float = 0.0
    paused: bool = False
    time_scale: float = 86400.0
    bodies: Dict[str, Body] = field(default_factory=dict)
    body_order: List[str] = field(default_factory=list)

    def add_body(self, body: Body) -> None:
        """Append a body to the world, after its parent in traversal order."""
        if body.id in self.bodies:
            raise ValueError(f"Duplicate body id: {body.id}")
        self.bodies[body.id] = body
        self.body_order.append(body.id)

    def ordered_bodies(self) -> List[Body]:
        """Bodies in parent-before-child order."""
        return [self.bodies[body_id] for body_id in self.body_order]

    @property
    def root(self) -> Body:
        """The star at the root of the hierarchy."""
        return self.bodies[self.body_order[0]]

    def validate_hierarchy(self) -> None:
        """
        Check the body tree invariants.

        Raises
        ------
        ValueError
            If there is not exactly one root star first in order, a parent
            is not defined strictly earlier, or order and bodies disagree.
        """
        if not self.body_order:
            raise ValueError("World has no bodies")
        if len(set(self.body_order)) != len(self.body_order):
            raise ValueError("Body order contains duplicates")
        if set(self.body_order) != set(self.bodies):
            raise ValueError("Body order does not match body collection")

        roots = [b for b in self.bodies.values() if b.orbit is None]
        if len(roots) != 1 or roots[0].kind != BodyKind.STAR:
            raise ValueError("World must have exactly one root star")
        if self.body_order[0] != roots[0].id:
            raise ValueError("Root star must come first in body order")

        seen = set()
        for body_id in self.body_order:
            parent_id = self.bodies[body_id].parent_id
            if parent_id is not None and parent_id not in seen:
                raise ValueError(
                    f"Parent {parent_id} of {body_id} is not defined before it"
                )
            seen.add(body_id)

    def __repr__(self) -> str:
        return (
            f"World(seed={self.seed!r}, bodies={len(self.bodies)}, "
            f"time={self.time_seconds / 86400:.2f} d, paused={self.paused}, "
            f"time_scale={self.time_scale})"
        )
