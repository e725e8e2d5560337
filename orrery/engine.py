#!/usr/bin/env python3
"""
Simulation Engine Module

Owns the mutable world state and advances it in time. Each tick scales the
real elapsed time, advances the simulation clock and places every body on
its orbit in parent-before-child order. Snapshots are value copies safe to
hand to another thread.

The engine has no internal locking: tick and snapshot must be called from
the same thread (see orrery.worker).
"""

import logging
import math
from typing import Any, Dict, List, Optional

from .bodies import Body, BodyKind, World
from .generator import SystemConfig, generate_world
from .orbit import propagate
from .snapshot import Snapshot


logger = logging.getLogger(__name__)


class SimEngine:
    """
    Advances a generated star system through simulated time.

    Parameters
    ----------
    world : World
        World to own and mutate; typically from generate_world()

    Attributes
    ----------
    world : World
        Current world state
    tick_count : int
        Number of ticks that advanced time
    """

    def __init__(self, world: World):
        world.validate_hierarchy()
        self.world = world
        self.tick_count = 0
        self._propagate_all()

    def set_paused(self, paused: bool) -> None:
        """Pause or resume the simulation clock."""
        self.world.paused = bool(paused)

    def set_time_scale(self, time_scale: float) -> None:
        """
        Set simulated seconds per real second.

        Negative and non-finite values clamp to 0, which freezes the clock.
        """
        value = float(time_scale)
        if not math.isfinite(value) or value < 0:
            value = 0.0
        self.world.time_scale = value

    def tick(self, real_elapsed_seconds: float) -> float:
        """
        Advance the simulation by a span of real time.

        Parameters
        ----------
        real_elapsed_seconds : float
            Wall-clock seconds since the previous tick

        Returns
        -------
        float
            Simulated seconds added to the clock (0 when paused)
        """
        if self.world.paused:
            return 0.0

        scaled_dt = max(0.0, real_elapsed_seconds) * self.world.time_scale
        self.world.time_seconds += scaled_dt
        self.tick_count += 1
        self._propagate_all()
        return scaled_dt

    def advance_to(self, time_seconds: float) -> None:
        """
        Jump the clock to an absolute simulated time.

        Ignores the pause flag and time scale. Times earlier than the
        current clock are ignored, so time never runs backwards.
        """
        if time_seconds < self.world.time_seconds:
            logger.debug(
                f"Ignoring advance_to({time_seconds}) behind clock {self.world.time_seconds}"
            )
            return
        self.world.time_seconds = float(time_seconds)
        self._propagate_all()

    def _propagate_all(self) -> None:
        """Place every body at the current time, parents before children."""
        world = self.world
        t = world.time_seconds
        for body_id in world.body_order:
            body = world.bodies[body_id]
            if body.orbit is None:
                continue
            parent = world.bodies[body.orbit.parent_id]
            propagate(body, parent.position, parent.mass, t)

    def snapshot(self) -> Snapshot:
        """Deep value copy of the current world."""
        return Snapshot.from_world(self.world)

    def run(self, duration: float, timestep: float) -> List[Snapshot]:
        """
        Advance in fixed simulated steps, ignoring pause and time scale.

        Parameters
        ----------
        duration : float
            Total simulated time (seconds)
        timestep : float
            Simulated step (seconds), > 0

        Returns
        -------
        list
            Snapshot after each step
        """
        if timestep <= 0:
            raise ValueError("Timestep must be positive")

        snapshots = []
        start = self.world.time_seconds
        steps = math.ceil(duration / timestep)
        for step in range(1, steps + 1):
            self.advance_to(start + min(step * timestep, duration))
            snapshots.append(self.snapshot())
        return snapshots

    def get_body(self, body_id: str) -> Optional[Body]:
        """Get body by id."""
        return self.world.bodies.get(body_id)

    @property
    def num_bodies(self) -> int:
        """Number of bodies."""
        return len(self.world.bodies)

    @property
    def simulation_time(self) -> float:
        """Current simulation time (seconds)."""
        return self.world.time_seconds

    def get_summary(self) -> Dict[str, Any]:
        """Get simulation summary."""
        bodies = self.world.ordered_bodies()
        return {
            "seed": self.world.seed,
            "num_bodies": len(bodies),
            "num_planets": sum(1 for b in bodies if b.kind == BodyKind.PLANET),
            "num_moons": sum(1 for b in bodies if b.kind == BodyKind.MOON),
            "simulation_time": self.world.time_seconds,
            "tick_count": self.tick_count,
            "paused": self.world.paused,
            "time_scale": self.world.time_scale,
        }

    def __repr__(self) -> str:
        summary = self.get_summary()
        return (
            f"SimEngine(\n"
            f"  seed={summary['seed']!r},\n"
            f"  planets={summary['num_planets']},\n"
            f"  moons={summary['num_moons']},\n"
            f"  time={summary['simulation_time']:.2f}s "
            f"({summary['simulation_time'] / 86400:.2f} d),\n"
            f"  paused={summary['paused']},\n"
            f"  time_scale={summary['time_scale']}\n"
            f")"
        )


def create_engine(seed: str, config: Optional[SystemConfig] = None) -> SimEngine:
    """
    Generate a world from a seed and wrap it in an engine.

    Parameters
    ----------
    seed : str
        Seed string
    config : SystemConfig, optional
        Generation ranges

    Returns
    -------
    SimEngine
        Engine at time zero with positions computed
    """
    engine = SimEngine(generate_world(seed, config))
    logger.info(f"Engine created for seed={seed!r} with {engine.num_bodies} bodies")
    return engine
