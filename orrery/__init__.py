#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Orrery - Deterministic Star System Simulation

Procedurally generates a star system (star, planets, moons) from a string
seed and advances it through simulated time with analytic Keplerian
propagation. Snapshots of body positions are handed to a presentation
layer through a message-passing worker.

Example usage:

    # Engine only (no worker thread)
    from orrery import create_engine

    engine = create_engine("demo-seed-001")
    engine.set_time_scale(86400)   # one simulated day per real second
    engine.tick(0.016)
    snapshot = engine.snapshot()

    # Background worker
    from orrery import SimulationWorker, InitMessage

    with SimulationWorker() as worker:
        worker.send(InitMessage(seed="demo-seed-001"))
        message = worker.receive(timeout=1.0)
"""

from .rng import RNG, hash_seed

from .orbit import (
    OrbitalElements,
    gravitational_parameter,
    solve_kepler,
    true_anomaly_from_eccentric,
    perifocal_to_inertial_matrix,
    propagate,
    G,
    AU,
    SOLAR_MASS_KG,
    SOLAR_RADIUS_M,
    EARTH_MASS_KG,
    EARTH_RADIUS_M,
    MOON_MASS_KG,
    MOON_RADIUS_M,
)

from .bodies import (
    Body,
    BodyKind,
    Vec3,
    World,
)

from .generator import (
    SystemConfig,
    generate_world,
    max_moon_count,
)

from .snapshot import (
    BodySnapshot,
    Snapshot,
    SnapshotBuffer,
    interpolate_snapshots,
)

from .engine import (
    SimEngine,
    create_engine,
)

from .messages import (
    MessageError,
    MessageType,
    InitMessage,
    SetPausedMessage,
    SetTimeScaleMessage,
    RequestSnapshotMessage,
    ReadyMessage,
    LogMessage,
    SnapshotMessage,
    message_from_dict,
)

from .worker import (
    SimulationWorker,
    WorkerConfig,
)


__all__ = [
    # Random source
    "RNG",
    "hash_seed",

    # Orbit
    "OrbitalElements",
    "gravitational_parameter",
    "solve_kepler",
    "true_anomaly_from_eccentric",
    "perifocal_to_inertial_matrix",
    "propagate",
    "G",
    "AU",
    "SOLAR_MASS_KG",
    "SOLAR_RADIUS_M",
    "EARTH_MASS_KG",
    "EARTH_RADIUS_M",
    "MOON_MASS_KG",
    "MOON_RADIUS_M",

    # Bodies
    "Body",
    "BodyKind",
    "Vec3",
    "World",

    # Generation
    "SystemConfig",
    "generate_world",
    "max_moon_count",

    # Snapshots
    "BodySnapshot",
    "Snapshot",
    "SnapshotBuffer",
    "interpolate_snapshots",

    # Engine
    "SimEngine",
    "create_engine",

    # Messages
    "MessageError",
    "MessageType",
    "InitMessage",
    "SetPausedMessage",
    "SetTimeScaleMessage",
    "RequestSnapshotMessage",
    "ReadyMessage",
    "LogMessage",
    "SnapshotMessage",
    "message_from_dict",

    # Worker
    "SimulationWorker",
    "WorkerConfig",
]

__version__ = "1.0.0"
