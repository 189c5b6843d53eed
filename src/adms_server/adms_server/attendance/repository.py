from __future__ import annotations

from typing import Protocol, Sequence

from .model import AppendResult, AttendanceFilter, AttendanceRecord, PunchEvent


class AttendanceRepository(Protocol):
    def insert_events(self, events: Sequence[PunchEvent]) -> AppendResult:
        """Insert each event independently, ignoring natural-key duplicates.

        Row-level rejections are counted, not raised; a store outage raises
        StoreUnavailableError.
        """

        raise NotImplementedError

    def list_records(self, filters: AttendanceFilter) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
