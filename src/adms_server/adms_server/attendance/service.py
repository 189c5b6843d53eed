from __future__ import annotations

import logging
from dataclasses import replace
from typing import Sequence

from ..core.constants import MAX_ATTENDANCE_LIMIT
from ..core.exceptions import ValidationError
from .model import AppendResult, AttendanceFilter, AttendanceRecord, PunchEvent
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Idempotent attendance store keyed by (device_sn, emp_id, punch_time)."""

    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def append(self, events: Sequence[PunchEvent]) -> AppendResult:
        """Store every event once; duplicates are no-ops, bad events are skipped.

        Only a store outage propagates (StoreUnavailableError); per-event
        problems are counted in the result.
        """

        valid: list[PunchEvent] = []
        rejected = 0
        for event in events:
            if not event.emp_id or not event.emp_id.strip():
                rejected += 1
                logger.warning("Rejecting punch without employee code from %s at %s", event.device_sn, event.punch_time)
                continue
            valid.append(event)

        stored = self._attendance.insert_events(valid) if valid else AppendResult()
        result = AppendResult(
            inserted=stored.inserted,
            duplicates=stored.duplicates,
            rejected=stored.rejected + rejected,
        )
        if result.total:
            logger.info(
                "Attendance batch: %d inserted, %d duplicate, %d rejected",
                result.inserted,
                result.duplicates,
                result.rejected,
            )
        return result

    def list_attendance(self, filters: AttendanceFilter) -> Sequence[AttendanceRecord]:
        if filters.limit <= 0:
            raise ValidationError("limit must be positive")
        if filters.start_date and filters.end_date and filters.end_date < filters.start_date:
            raise ValidationError("end_date must not be before start_date")
        if filters.limit > MAX_ATTENDANCE_LIMIT:
            filters = replace(filters, limit=MAX_ATTENDANCE_LIMIT)
        return self._attendance.list_records(filters)
