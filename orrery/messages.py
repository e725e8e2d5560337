#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Worker Message Protocol

Messages exchanged between the presentation layer and the simulation
worker. Each message kind is a frozen dataclass tagged with a MessageType;
the set of kinds is closed.

Presentation -> engine: INIT, SET_PAUSED, SET_TIMESCALE, REQUEST_SNAPSHOT
Engine -> presentation: READY, LOG, SNAPSHOT
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, Union

from .snapshot import Snapshot


class MessageError(ValueError):
    """Malformed, unknown or misdirected message."""
    pass


class MessageType(Enum):
    """Message kinds on the worker boundary."""

    INIT = "INIT"
    SET_PAUSED = "SET_PAUSED"
    SET_TIMESCALE = "SET_TIMESCALE"
    REQUEST_SNAPSHOT = "REQUEST_SNAPSHOT"
    READY = "READY"
    LOG = "LOG"
    SNAPSHOT = "SNAPSHOT"


@dataclass(frozen=True)
class InitMessage:
    """Generate the world from a seed and start ticking."""

    type: ClassVar[MessageType] = MessageType.INIT
    seed: str

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type.value, "seed": self.seed}


@dataclass(frozen=True)
class SetPausedMessage:
    type: ClassVar[MessageType] = MessageType.SET_PAUSED
    paused: bool

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type.value, "paused": self.paused}


@dataclass(frozen=True)
class SetTimeScaleMessage:
    """Set simulated seconds per real second; negative values clamp to 0."""

    type: ClassVar[MessageType] = MessageType.SET_TIMESCALE
    time_scale: float

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type.value, "timeScale": self.time_scale}


@dataclass(frozen=True)
class RequestSnapshotMessage:
    type: ClassVar[MessageType] = MessageType.REQUEST_SNAPSHOT

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type.value}


@dataclass(frozen=True)
class ReadyMessage:
    """Emitted once after a successful INIT."""

    type: ClassVar[MessageType] = MessageType.READY

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type.value}


@dataclass(frozen=True)
class LogMessage:
    """Human-readable diagnostic."""

    type: ClassVar[MessageType] = MessageType.LOG
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type.value, "message": self.message}


@dataclass(frozen=True)
class SnapshotMessage:
    type: ClassVar[MessageType] = MessageType.SNAPSHOT
    snapshot: Snapshot

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type.value, "snapshot": self.snapshot.to_dict()}


ToEngineMessage = Union[InitMessage, SetPausedMessage, SetTimeScaleMessage, RequestSnapshotMessage]
FromEngineMessage = Union[ReadyMessage, LogMessage, SnapshotMessage]
Message = Union[ToEngineMessage, FromEngineMessage]

TO_ENGINE_TYPES = (InitMessage, SetPausedMessage, SetTimeScaleMessage, RequestSnapshotMessage)
FROM_ENGINE_TYPES = (ReadyMessage, LogMessage, SnapshotMessage)


def message_from_dict(data: Dict[str, Any]) -> Message:
    """
    Parse a message from its dictionary form.

    Parameters
    ----------
    data : Dict
        Message with a "type" key and the payload of that kind

    Returns
    -------
    Message
        The typed message

    Raises
    ------
    MessageError
        If the type is unknown or a payload field is missing
    """
    if not isinstance(data, dict):
        raise MessageError(f"Message must be a dict, got {type(data).__name__}")

    try:
        message_type = MessageType(data.get("type"))
    except ValueError:
        raise MessageError(f"Unknown message type: {data.get('type')!r}")

    try:
        if message_type == MessageType.INIT:
            seed = data["seed"]
            if not isinstance(seed, str):
                raise TypeError(f"seed must be a string, got {type(seed).__name__}")
            return InitMessage(seed=seed)
        elif message_type == MessageType.SET_PAUSED:
            paused = data["paused"]
            if not isinstance(paused, bool):
                raise TypeError(f"paused must be a bool, got {type(paused).__name__}")
            return SetPausedMessage(paused=paused)
        elif message_type == MessageType.SET_TIMESCALE:
            return SetTimeScaleMessage(time_scale=float(data["timeScale"]))
        elif message_type == MessageType.REQUEST_SNAPSHOT:
            return RequestSnapshotMessage()
        elif message_type == MessageType.READY:
            return ReadyMessage()
        elif message_type == MessageType.LOG:
            return LogMessage(message=str(data["message"]))
        elif message_type == MessageType.SNAPSHOT:
            return SnapshotMessage(snapshot=Snapshot.from_dict(data["snapshot"]))
    except (KeyError, TypeError, ValueError) as e:
        raise MessageError(f"Invalid {message_type.value} message: {e!r}")

    raise MessageError(f"Unhandled message type: {message_type.value}")
