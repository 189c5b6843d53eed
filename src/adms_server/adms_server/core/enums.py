from __future__ import annotations

from enum import Enum


class DeviceStatus(str, Enum):
    """Liveness flag stored on the device row."""

    ONLINE = "online"
    OFFLINE = "offline"


class CommandStatus(str, Enum):
    """Lifecycle of a queued device command: pending -> sent -> completed."""

    PENDING = "pending"
    SENT = "sent"
    COMPLETED = "completed"


class PunchState(int, Enum):
    CHECK_IN = 0
    CHECK_OUT = 1
    BREAK = 2
    OVERTIME = 3


class VerifyMode(int, Enum):
    """Known verification modes; terminals may report other vendor codes."""

    PASSWORD = 0
    FINGERPRINT = 1
    FACE = 15


class LineFormat(str, Enum):
    """Classification of one line of an attendance log payload."""

    HEADER = "header"
    OPLOG = "oplog"
    STANDARD = "standard"
    MALFORMED = "malformed"
