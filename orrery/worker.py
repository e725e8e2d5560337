#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Simulation Worker Module

Runs the simulation engine on a background thread, decoupled from the
presentation layer by two message queues:

- inbox: control messages from the presentation layer (INIT, SET_PAUSED,
  SET_TIMESCALE, REQUEST_SNAPSHOT)
- outbox: messages pushed by the engine (READY, LOG, SNAPSHOT)

The engine is created, ticked and snapshotted only on the worker thread,
so ticks and snapshots never interleave. Only immutable message values
cross the boundary.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Union
import logging
import queue
import threading
import time

from .engine import SimEngine
from .generator import SystemConfig, generate_world
from .messages import (
    FROM_ENGINE_TYPES,
    FromEngineMessage,
    InitMessage,
    LogMessage,
    MessageError,
    ReadyMessage,
    RequestSnapshotMessage,
    SetPausedMessage,
    SetTimeScaleMessage,
    SnapshotMessage,
    ToEngineMessage,
    message_from_dict,
)


logger = logging.getLogger(__name__)


@dataclass
class WorkerConfig:
    """
    Configuration for the simulation worker.

    Attributes
    ----------
    tick_interval : float
        Wall-clock seconds between ticks
    snapshot_interval : float
        Wall-clock seconds between periodic SNAPSHOT pushes
    system : SystemConfig
        Generation ranges used on INIT
    """
    tick_interval: float = 0.016
    snapshot_interval: float = 0.2
    system: SystemConfig = field(default_factory=SystemConfig)


class SimulationWorker:
    """
    Background execution context for the simulation engine.

    Parameters
    ----------
    config : WorkerConfig, optional
        Tick and snapshot cadence
    clock : callable
        Monotonic wall clock in seconds (injectable for testing)

    Examples
    --------
    >>> worker = SimulationWorker()
    >>> worker.start()
    >>> worker.send(InitMessage(seed="demo-seed-001"))
    >>> ready = worker.receive(timeout=1.0)
    >>> worker.stop()
    """

    def __init__(
        self,
        config: Optional[WorkerConfig] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config or WorkerConfig()
        self._clock = clock

        # Message queues
        self._inbox: queue.Queue = queue.Queue()
        self._outbox: queue.Queue = queue.Queue()

        # Engine state, owned by the worker thread
        self._engine: Optional[SimEngine] = None
        self._last_tick: Optional[float] = None
        self._last_snapshot: Optional[float] = None

        # Threading
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._running = False

        # Statistics
        self._messages_received = 0
        self._messages_sent = 0
        self._snapshots_sent = 0

    @property
    def running(self) -> bool:
        """Check if the background thread is running."""
        return self._running and self._thread is not None and self._thread.is_alive()

    @property
    def initialized(self) -> bool:
        """Check if an INIT message has created the engine."""
        return self._engine is not None

    @property
    def engine(self) -> SimEngine:
        """
        The owned engine.

        Only safe to use from the worker thread or while the worker is stopped.

        Raises
        ------
        RuntimeError
            If no INIT message has been handled yet
        """
        if self._engine is None:
            raise RuntimeError("Worker not initialized. Send an INIT message first.")
        return self._engine

    # -------------------------------------------------------------------------
    # Presentation side
    # -------------------------------------------------------------------------

    def send(self, message: Union[ToEngineMessage, Dict[str, Any]]) -> None:
        """
        Queue a control message for the engine (thread-safe).

        Dictionaries are parsed on the worker thread; malformed ones are
        answered with a LOG message.
        """
        self._inbox.put(message)

    def receive(self, timeout: Optional[float] = None) -> Optional[FromEngineMessage]:
        """
        Wait for the next message from the engine.

        Returns None if nothing arrives within timeout seconds.
        """
        try:
            return self._outbox.get(timeout=timeout)
        except queue.Empty:
            return None

    def drain(self) -> List[FromEngineMessage]:
        """All messages currently waiting in the outbox."""
        messages = []
        while True:
            try:
                messages.append(self._outbox.get_nowait())
            except queue.Empty:
                return messages

    # -------------------------------------------------------------------------
    # Worker side
    # -------------------------------------------------------------------------

    def _post(self, message: FromEngineMessage) -> None:
        self._outbox.put(message)
        self._messages_sent += 1
        if isinstance(message, SnapshotMessage):
            self._snapshots_sent += 1

    def _log(self, text: str) -> None:
        """Post a LOG message and mirror it to the module logger."""
        logger.debug(text)
        self._post(LogMessage(message=text))

    def handle_message(self, message: ToEngineMessage, now: Optional[float] = None) -> None:
        """
        Apply one control message.

        Parameters
        ----------
        message : ToEngineMessage
            INIT, SET_PAUSED, SET_TIMESCALE or REQUEST_SNAPSHOT
        now : float, optional
            Wall-clock time of handling (defaults to the worker clock)

        Raises
        ------
        MessageError
            If the message is not an engine-bound message
        """
        self._messages_received += 1
        if now is None:
            now = self._clock()

        if isinstance(message, InitMessage):
            self._engine = SimEngine(generate_world(message.seed, self.config.system))
            self._last_tick = now
            self._last_snapshot = now
            self._post(ReadyMessage())
            self._log(f'Initialized with seed="{message.seed}"')
            logger.info(
                f"Worker initialized seed={message.seed!r} "
                f"({self._engine.num_bodies} bodies)"
            )
            return

        if isinstance(message, FROM_ENGINE_TYPES):
            raise MessageError(f"{message.type.value} is not an engine-bound message")

        if not isinstance(message, (SetPausedMessage, SetTimeScaleMessage, RequestSnapshotMessage)):
            raise MessageError(f"Unknown message: {message!r}")

        if self._engine is None:
            self._log(f"Ignoring {message.type.value} before INIT")
            return

        if isinstance(message, SetPausedMessage):
            self._engine.set_paused(message.paused)
            self._log(f"Paused={self._engine.world.paused}")
        elif isinstance(message, SetTimeScaleMessage):
            self._engine.set_time_scale(message.time_scale)
            self._log(f"TimeScale={self._engine.world.time_scale}")
        elif isinstance(message, RequestSnapshotMessage):
            self._post(SnapshotMessage(snapshot=self._engine.snapshot()))

    def _process_inbox(self, now: float) -> None:
        """Handle every queued control message."""
        while True:
            try:
                item = self._inbox.get_nowait()
            except queue.Empty:
                return

            try:
                message = message_from_dict(item) if isinstance(item, dict) else item
                self.handle_message(message, now)
            except MessageError as e:
                logger.warning(f"Rejected message: {e}")
                self._post(LogMessage(message=f"Rejected message: {e}"))

    def step(self, now: Optional[float] = None) -> None:
        """
        Run one loop iteration: handle messages, tick, maybe push a snapshot.

        Parameters
        ----------
        now : float, optional
            Wall-clock time of this iteration (defaults to the worker clock)
        """
        if now is None:
            now = self._clock()

        self._process_inbox(now)

        if self._engine is None:
            return

        real_dt = now - self._last_tick
        self._last_tick = now
        self._engine.tick(real_dt)

        if now - self._last_snapshot >= self.config.snapshot_interval:
            self._post(SnapshotMessage(snapshot=self._engine.snapshot()))
            self._last_snapshot = now

    def _run_loop(self) -> None:
        """Background loop driven by the tick interval."""
        while self._running:
            try:
                self.step()
            except Exception as e:
                logger.error(f"Worker loop error: {e}")
                self._post(LogMessage(message=f"Worker stopped after error: {e}"))
                self._running = False
                raise
            if self._stop_event.wait(self.config.tick_interval):
                break

    def start(self) -> None:
        """Start the background thread."""
        if self._thread is not None and self._thread.is_alive():
            return

        self._stop_event.clear()
        self._running = True
        self._thread = threading.Thread(
            target=self._run_loop,
            name="SimulationWorker",
            daemon=True
        )
        self._thread.start()
        logger.info("Simulation worker started")

    def stop(self, timeout: float = 2.0) -> None:
        """Stop the background thread and wait for it to exit."""
        self._running = False
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            if self._thread.is_alive():
                logger.warning("Worker thread did not stop cleanly")
            self._thread = None
        logger.info("Simulation worker stopped")

    def get_statistics(self) -> Dict[str, int]:
        """Get message statistics."""
        return {
            "messages_received": self._messages_received,
            "messages_sent": self._messages_sent,
            "snapshots_sent": self._snapshots_sent,
        }

    def __enter__(self) -> "SimulationWorker":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
