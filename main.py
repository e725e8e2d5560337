#!/usr/bin/env python3
"""
Orrery - Star System Simulator

Command-line host for the orrery simulation core. Generates a star system
from a seed and either steps it headless or drives it through the
background worker, printing snapshots as they arrive.

Usage:
    python main.py                                  # Worker mode, default seed
    python main.py --seed my-system                 # Another star system
    python main.py --headless --duration 31557600   # One simulated year, headless
    python main.py --json                           # Print last snapshot as JSON
    python main.py --help                           # Show all options
"""

import argparse
import json
import logging
import sys
import time


def print_snapshot(snapshot, limit=None):
    """Print one line per body of a snapshot."""
    print(
        f"time: {snapshot.time_seconds:.1f} s (~{snapshot.time_seconds / 86400:.2f} days)  "
        f"paused={snapshot.paused}  timeScale={snapshot.time_scale:g}"
    )
    bodies = snapshot.bodies if limit is None else snapshot.bodies[:limit]
    for b in bodies:
        p = b.position
        period = f"{b.period_seconds / 86400:.2f} d" if b.period_seconds else "-"
        print(
            f"  - {b.kind.value:<6} {b.name:<16} period={period:<10} "
            f"pos=({p.x / 1e9:.2f}, {p.y / 1e9:.2f}, {p.z / 1e9:.2f}) Gm"
        )
    if limit is not None and len(snapshot.bodies) > limit:
        print(f"  ... and {len(snapshot.bodies) - limit} more bodies")


def main():
    parser = argparse.ArgumentParser(
        description="Deterministic Star System Simulator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                                    # Worker mode for 2 real seconds
  %(prog)s --seed alpha --time-scale 604800   # One simulated week per second
  %(prog)s --headless --timestep 3600         # Hourly headless steps
  %(prog)s --paused --run-seconds 1           # Start paused
        """,
    )

    # -------------------------------------------------------------------------
    # System generation
    # -------------------------------------------------------------------------
    parser.add_argument(
        "--seed",
        type=str,
        default="demo-seed-001",
        help="Seed string for system generation (default: demo-seed-001)",
    )

    # -------------------------------------------------------------------------
    # Simulation control
    # -------------------------------------------------------------------------
    parser.add_argument(
        "--time-scale",
        type=float,
        default=None,
        help="Time scale: sim seconds per real second (default: 86400, worker mode only)",
    )
    parser.add_argument(
        "--paused",
        action="store_true",
        help="Start with simulation paused (worker mode only)",
    )

    # -------------------------------------------------------------------------
    # Worker mode
    # -------------------------------------------------------------------------
    parser.add_argument(
        "--run-seconds",
        type=float,
        default=2.0,
        help="Wall-clock seconds to run the worker (default: 2)",
    )
    parser.add_argument(
        "--tick-interval",
        type=float,
        default=0.016,
        help="Wall-clock seconds between ticks (default: 0.016)",
    )
    parser.add_argument(
        "--snapshot-interval",
        type=float,
        default=0.2,
        help="Wall-clock seconds between snapshot pushes (default: 0.2)",
    )

    # -------------------------------------------------------------------------
    # Headless mode
    # -------------------------------------------------------------------------
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Step the engine directly without the worker thread",
    )
    parser.add_argument(
        "--duration",
        type=float,
        default=365.25 * 86400,
        help="Simulated seconds for headless mode (default: one year)",
    )
    parser.add_argument(
        "--timestep",
        type=float,
        default=86400.0,
        help="Simulated timestep in seconds for headless mode (default: 86400)",
    )

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the final snapshot as JSON",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Logging level (default: WARNING)",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    # -------------------------------------------------------------------------
    # Import simulation components
    # -------------------------------------------------------------------------
    from orrery import (
        create_engine,
        SimulationWorker,
        WorkerConfig,
        SnapshotBuffer,
        InitMessage,
        SetPausedMessage,
        SetTimeScaleMessage,
        RequestSnapshotMessage,
        ReadyMessage,
        LogMessage,
        SnapshotMessage,
    )

    print("=" * 60)
    print("Orrery - Star System Simulator")
    print("=" * 60)
    print(f"\nSeed: {args.seed!r}")

    # -------------------------------------------------------------------------
    # Headless run
    # -------------------------------------------------------------------------
    if args.headless:
        if args.time_scale is not None or args.paused:
            parser.error("--time-scale and --paused apply to worker mode only")

        engine = create_engine(args.seed)
        summary = engine.get_summary()
        print(f"Planets: {summary['num_planets']}, Moons: {summary['num_moons']}")
        print(f"\n{'=' * 60}")
        print(f"Running headless simulation for {args.duration / 86400:.1f} days...")
        print(f"Timestep: {args.timestep:.1f} seconds")
        print(f"{'=' * 60}\n")

        snapshots = engine.run(args.duration, args.timestep)
        report_every = max(1, len(snapshots) // 4)
        for index, snapshot in enumerate(snapshots, start=1):
            if index % report_every == 0:
                print_snapshot(snapshot, limit=5)
                print()

        final = engine.snapshot()
        if args.json:
            print(json.dumps(final.to_dict(), indent=2))
        print(engine)
        return 0

    # -------------------------------------------------------------------------
    # Worker run
    # -------------------------------------------------------------------------
    config = WorkerConfig(
        tick_interval=args.tick_interval,
        snapshot_interval=args.snapshot_interval,
    )
    buffer = SnapshotBuffer()

    with SimulationWorker(config) as worker:
        worker.send(InitMessage(seed=args.seed))
        if args.time_scale is not None:
            worker.send(SetTimeScaleMessage(time_scale=args.time_scale))
        if args.paused:
            worker.send(SetPausedMessage(paused=True))

        deadline = time.monotonic() + args.run_seconds
        while time.monotonic() < deadline:
            message = worker.receive(timeout=0.05)
            if message is None:
                continue
            if isinstance(message, ReadyMessage):
                print("[worker] READY")
            elif isinstance(message, LogMessage):
                print(f"[worker] {message.message}")
            elif isinstance(message, SnapshotMessage):
                buffer.push(message.snapshot, received_at=time.monotonic())
                print_snapshot(message.snapshot, limit=3)

        worker.send(RequestSnapshotMessage())
        final = None
        while final is None:
            message = worker.receive(timeout=1.0)
            if message is None:
                break
            if isinstance(message, SnapshotMessage):
                final = message.snapshot

    frame = buffer.sample(time.monotonic())
    if frame is not None:
        print(f"\nInterpolated frame at t={frame.time_seconds:.1f} s")

    if final is not None:
        print("\nFinal snapshot:")
        print_snapshot(final)
        if args.json:
            print(json.dumps(final.to_dict(), indent=2))

    return 0


if __name__ == "__main__":
    sys.exit(main())
