from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.constants import DEFAULT_ATTENDANCE_LIMIT


@dataclass(frozen=True)
class PunchEvent:
    """One normalized punch parsed from a terminal payload (not yet stored)."""

    device_sn: str
    emp_id: str
    punch_time: datetime
    punch_state: int
    verify_mode: int
    work_code: str = ""

    @property
    def natural_key(self) -> tuple[str, str, datetime]:
        return (self.device_sn, self.emp_id, self.punch_time)


@dataclass(frozen=True)
class AttendanceRecord:
    """Stored punch, joined with the employee's name/department when known."""

    attendance_id: int
    device_sn: str
    emp_id: str
    punch_time: datetime
    punch_state: int
    verify_mode: int
    work_code: str
    created_at: Optional[datetime] = None
    name: Optional[str] = None
    department: Optional[str] = None


@dataclass(frozen=True)
class AppendResult:
    inserted: int = 0
    duplicates: int = 0
    rejected: int = 0

    @property
    def total(self) -> int:
        return self.inserted + self.duplicates + self.rejected


@dataclass(frozen=True)
class AttendanceFilter:
    emp_id: Optional[str] = None
    device_sn: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    limit: int = DEFAULT_ATTENDANCE_LIMIT
