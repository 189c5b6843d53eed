from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_COMMAND_INFLIGHT_TIMEOUT, DEFAULT_COMMAND_LIST_LIMIT, SYNC_ATTLOG_COMMAND
from .model import Command
from .repository import CommandRepository

logger = logging.getLogger(__name__)


class CommandQueue:
    """Per-device FIFO of outbound commands.

    Terminals only poll, so commands wait here until the next heartbeat and
    are handed out one at a time: while a device has a command in flight
    (sent less than ``inflight_timeout_seconds`` ago and not completed) it is
    given nothing else. A timeout of 0 keeps a sent command in flight until it
    is completed. Sent and completed times come from the store clock.
    """

    def __init__(self, commands: CommandRepository, *, inflight_timeout_seconds: int = DEFAULT_COMMAND_INFLIGHT_TIMEOUT):
        if inflight_timeout_seconds < 0:
            raise ValueError("inflight_timeout_seconds must be >= 0")
        self._commands = commands
        self._inflight_timeout = int(inflight_timeout_seconds)

    def enqueue(self, device_sn: str, command_text: str) -> int:
        sn = require_non_empty(device_sn, "device_sn")
        text = require_non_empty(command_text, "command")
        command_id = self._commands.create(device_sn=sn, command=text)
        logger.info("Queued command #%s for %s: %s", command_id, sn, text)
        return command_id

    def enqueue_sync(self, device_sn: str) -> int:
        return self.enqueue(device_sn, SYNC_ATTLOG_COMMAND)

    def claim_next(self, device_sn: str) -> Optional[Command]:
        cmd = self._commands.claim_next(device_sn=device_sn, inflight_timeout_seconds=self._inflight_timeout)
        if cmd is not None:
            logger.info("Sending command #%s to %s: %s", cmd.command_id, device_sn, cmd.command)
        return cmd

    def complete_outstanding(self, device_sn: str) -> int:
        count = self._commands.complete_sent(device_sn=device_sn)
        if count:
            logger.info("Completed %d command(s) for %s", count, device_sn)
        return count

    def list_commands(self, device_sn: str, limit: int = DEFAULT_COMMAND_LIST_LIMIT) -> Sequence[Command]:
        sn = require_non_empty(device_sn, "device_sn")
        return self._commands.list_for_device(device_sn=sn, limit=limit)
