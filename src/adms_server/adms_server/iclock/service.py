"""Device-facing orchestration of the ADMS push/poll protocol.

Each method handles one inbound terminal request and returns the literal
text to send back. Store failures are logged and turned into the error token;
the terminal retries the whole request later, which is safe because every
write underneath is idempotent.
"""
from __future__ import annotations

import logging
from typing import Optional

from ..attendance.parser import parse_attendance_log
from ..attendance.service import AttendanceService
from ..commands.service import CommandQueue
from ..core.constants import ACK_TOKEN, ERROR_TOKEN, UNKNOWN_DEVICE_SN
from ..core.exceptions import StoreError
from ..devices.service import DeviceRegistry

logger = logging.getLogger(__name__)


class IClockService:
    def __init__(self, registry: DeviceRegistry, commands: CommandQueue, attendance: AttendanceService):
        self._registry = registry
        self._commands = commands
        self._attendance = attendance

    @staticmethod
    def _clean_sn(device_sn: Optional[str]) -> Optional[str]:
        sn = (device_sn or "").strip()
        return sn or None

    def register(self, device_sn: Optional[str]) -> str:
        sn = self._clean_sn(device_sn)
        if sn is None:
            logger.info("Handshake without SN; ignoring")
            return ACK_TOKEN
        try:
            self._registry.register_or_touch(sn)
        except StoreError:
            logger.exception("Device registration failed for %s", sn)
            return ERROR_TOKEN
        return ACK_TOKEN

    def heartbeat(self, device_sn: Optional[str]) -> str:
        sn = self._clean_sn(device_sn)
        if sn is None:
            logger.info("Heartbeat without SN; ignoring")
            return ACK_TOKEN

        logger.debug("Heartbeat from device %s", sn)
        try:
            self._registry.mark_online(sn)
            cmd = self._commands.claim_next(sn)
        except StoreError:
            logger.exception("Heartbeat failed for %s", sn)
            return ERROR_TOKEN

        if cmd is None:
            return ACK_TOKEN
        return cmd.command

    def ingest(self, device_sn: Optional[str], payload: str) -> str:
        sn = self._clean_sn(device_sn) or UNKNOWN_DEVICE_SN
        if self._append(sn, payload):
            return ACK_TOKEN
        return ERROR_TOKEN

    def ingest_query_response(self, device_sn: Optional[str], payload: str) -> str:
        """Store a DATA QUERY answer, then close the command that asked for it."""

        sn = self._clean_sn(device_sn)
        if not self._append(sn or UNKNOWN_DEVICE_SN, payload):
            return ERROR_TOKEN
        if sn is None:
            return ACK_TOKEN

        try:
            self._commands.complete_outstanding(sn)
        except StoreError:
            logger.exception("Could not complete outstanding commands for %s", sn)
            return ERROR_TOKEN
        return ACK_TOKEN

    def _append(self, device_sn: str, payload: str) -> bool:
        events = parse_attendance_log(payload, device_sn)
        try:
            result = self._attendance.append(events)
        except StoreError:
            logger.exception("Attendance ingestion failed for %s", device_sn)
            return False
        logger.info("Processed %d punch line(s) from %s (%d new)", len(events), device_sn, result.inserted)
        return True
