from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Command


class CommandRepository(Protocol):
    def create(self, *, device_sn: str, command: str) -> int:
        raise NotImplementedError

    def claim_next(self, *, device_sn: str, inflight_timeout_seconds: int) -> Optional[Command]:
        """Atomically flip the device's oldest pending command to sent.

        Returns None when nothing is pending, when another caller won the
        race, or when a command sent less than ``inflight_timeout_seconds``
        ago is still awaiting completion. A timeout of 0 means any sent
        command blocks. Timestamps come from the store's clock.
        """

        raise NotImplementedError

    def complete_sent(self, *, device_sn: str) -> int:
        raise NotImplementedError

    def list_for_device(self, *, device_sn: str, limit: int) -> Sequence[Command]:
        raise NotImplementedError
