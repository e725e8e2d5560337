#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
World Snapshots

Immutable point-in-time copies of the world, their wire representation,
and the presentation-side interpolation between the two latest snapshots.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Tuple

from .bodies import Body, BodyKind, Vec3, World
from .orbit import OrbitalElements


@dataclass(frozen=True)
class BodySnapshot:
    """
    Value copy of one body.

    Attributes
    ----------
    id : str
        Body id
    name : str
        Display name
    kind : BodyKind
        Star, planet or moon
    mass : float
        Mass (kg)
    radius : float
        Radius (m)
    position : Vec3
        Position in the star frame (m)
    period_seconds : float, optional
        Orbital period (s), None for the star
    orbit : OrbitalElements, optional
        Orbital elements, None for the star
    """

    id: str
    name: str
    kind: BodyKind
    mass: float
    radius: float
    position: Vec3
    period_seconds: Optional[float] = None
    orbit: Optional[OrbitalElements] = None

    @classmethod
    def from_body(cls, body: Body) -> "BodySnapshot":
        return cls(
            id=body.id,
            name=body.name,
            kind=body.kind,
            mass=float(body.mass),
            radius=float(body.radius),
            position=Vec3.from_array(body.position),
            period_seconds=None if body.period_seconds is None else float(body.period_seconds),
            orbit=body.orbit,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation; periodSeconds and orbit are omitted when absent."""
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "kind": self.kind.value,
            "mass": self.mass,
            "radius": self.radius,
            "position": self.position.to_dict(),
        }
        if self.period_seconds is not None:
            data["periodSeconds"] = self.period_seconds
        if self.orbit is not None:
            data["orbit"] = self.orbit.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BodySnapshot":
        period = data.get("periodSeconds")
        orbit = data.get("orbit")
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            kind=BodyKind(data["kind"]),
            mass=float(data["mass"]),
            radius=float(data["radius"]),
            position=Vec3.from_dict(data["position"]),
            period_seconds=None if period is None else float(period),
            orbit=None if orbit is None else OrbitalElements.from_dict(orbit),
        )


@dataclass(frozen=True)
class Snapshot:
    """
    Immutable projection of the world at one instant.

    Holds only immutable values, so it can cross a thread boundary and be
    kept indefinitely without being affected by later ticks.

    Attributes
    ----------
    seed : str
        Seed the world was generated from
    time_seconds : float
        Simulated time of the snapshot (s)
    paused : bool
        Pause flag at snapshot time
    time_scale : float
        Time scale at snapshot time
    bodies : tuple
        BodySnapshot values in parent-before-child order
    """

    seed: str
    time_seconds: float
    paused: bool
    time_scale: float
    bodies: Tuple[BodySnapshot, ...] = ()

    @classmethod
    def from_world(cls, world: World) -> "Snapshot":
        return cls(
            seed=world.seed,
            time_seconds=float(world.time_seconds),
            paused=bool(world.paused),
            time_scale=float(world.time_scale),
            bodies=tuple(BodySnapshot.from_body(b) for b in world.ordered_bodies()),
        )

    def get_body(self, body_id: str) -> Optional[BodySnapshot]:
        """Get body by id."""
        for body in self.bodies:
            if body.id == body_id:
                return body
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire shape sent to the presentation layer."""
        return {
            "seed": self.seed,
            "timeSeconds": self.time_seconds,
            "paused": self.paused,
            "timeScale": self.time_scale,
            "bodies": [b.to_dict() for b in self.bodies],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Snapshot":
        """Create from the wire shape."""
        return cls(
            seed=data["seed"],
            time_seconds=float(data["timeSeconds"]),
            paused=bool(data["paused"]),
            time_scale=float(data["timeScale"]),
            bodies=tuple(BodySnapshot.from_dict(b) for b in data.get("bodies", [])),
        )


def interpolate_snapshots(a: Snapshot, b: Snapshot, t: float) -> Snapshot:
    """
    Blend two snapshots for rendering between simulation updates.

    Positions and time are interpolated linearly; everything else comes
    from the newer snapshot b. Bodies missing from a are taken from b as is.

    Parameters
    ----------
    a : Snapshot
        Older snapshot
    b : Snapshot
        Newer snapshot
    t : float
        Blend factor, clamped to [0, 1]

    Returns
    -------
    Snapshot
        Interpolated snapshot
    """
    t = max(0.0, min(1.0, t))
    previous = {body.id: body for body in a.bodies}

    bodies = []
    for body in b.bodies:
        old = previous.get(body.id)
        if old is None:
            bodies.append(body)
            continue
        bodies.append(replace(
            body,
            position=old.position.lerp(body.position, t),
            orbit=body.orbit or old.orbit,
        ))

    return Snapshot(
        seed=b.seed,
        time_seconds=a.time_seconds + (b.time_seconds - a.time_seconds) * t,
        paused=b.paused,
        time_scale=b.time_scale,
        bodies=tuple(bodies),
    )


class SnapshotBuffer:
    """
    Keeps the two most recently received snapshots for smooth rendering.

    Snapshots are keyed by their wall-clock receipt time; sampling at a
    render time blends between them.

    Examples
    --------
    >>> buffer = SnapshotBuffer()
    >>> buffer.push(older, received_at=10.0)
    >>> buffer.push(newer, received_at=10.2)
    >>> frame = buffer.sample(now=10.3)
    """

    def __init__(self):
        self._previous: Optional[Tuple[float, Snapshot]] = None
        self._latest: Optional[Tuple[float, Snapshot]] = None

    def push(self, snapshot: Snapshot, received_at: float) -> None:
        """Record a newly received snapshot."""
        self._previous = self._latest
        self._latest = (received_at, snapshot)

    @property
    def latest(self) -> Optional[Snapshot]:
        return self._latest[1] if self._latest is not None else None

    def __len__(self) -> int:
        return sum(1 for entry in (self._previous, self._latest) if entry is not None)

    def sample(self, now: float) -> Optional[Snapshot]:
        """
        Snapshot to render at wall-clock time now.

        Returns None before any snapshot arrived and the only snapshot when
        just one is buffered.
        """
        if self._latest is None:
            return None
        if self._previous is None:
            return self._latest[1]

        t_prev, prev = self._previous
        t_last, last = self._latest
        span = t_last - t_prev
        if span <= 0:
            return last
        return interpolate_snapshots(prev, last, (now - t_prev) / span)

    def clear(self) -> None:
        self._previous = None
        self._latest = None
