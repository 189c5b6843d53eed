from __future__ import annotations

from datetime import date, datetime

import pytest

from src.adms_server.adms_server.attendance.model import AttendanceFilter, PunchEvent
from src.adms_server.adms_server.attendance.service import AttendanceService
from src.adms_server.adms_server.core.constants import MAX_ATTENDANCE_LIMIT
from src.adms_server.adms_server.core.exceptions import StoreUnavailableError, ValidationError


def _event(emp_id: str, hour: int, device_sn: str = "D1") -> PunchEvent:
    return PunchEvent(
        device_sn=device_sn,
        emp_id=emp_id,
        punch_time=datetime(2024, 1, 1, hour, 0, 0),
        punch_state=0,
        verify_mode=1,
    )


def test_resubmitting_a_batch_stores_each_punch_once(attendance_repo):
    svc = AttendanceService(attendance_repo)
    batch = [_event("E001", 9), _event("E002", 9), _event("E001", 17)]

    first = svc.append(batch)
    for _ in range(3):
        again = svc.append(batch)
        assert again.inserted == 0
        assert again.duplicates == 3

    assert first.inserted == 3
    assert len(attendance_repo.rows) == 3


def test_same_punch_on_another_device_is_a_distinct_record(attendance_repo):
    svc = AttendanceService(attendance_repo)
    svc.append([_event("E001", 9, "D1"), _event("E001", 9, "D2")])

    assert len(attendance_repo.rows) == 2


def test_missing_employee_code_is_rejected_without_aborting_batch(attendance_repo):
    svc = AttendanceService(attendance_repo)
    result = svc.append([_event("", 8), _event("E001", 9), _event("  ", 10), _event("E002", 11)])

    assert result.inserted == 2
    assert result.rejected == 2
    assert {k[1] for k in attendance_repo.rows} == {"E001", "E002"}


def test_row_level_store_rejections_are_counted(attendance_repo):
    attendance_repo._reject.add("BAD")
    svc = AttendanceService(attendance_repo)

    result = svc.append([_event("BAD", 8), _event("E001", 9)])

    assert result.inserted == 1
    assert result.rejected == 1


def test_store_outage_propagates(unavailable_store):
    svc = AttendanceService(unavailable_store)
    with pytest.raises(StoreUnavailableError):
        svc.append([_event("E001", 9)])


def test_empty_batch_does_not_touch_the_store(unavailable_store):
    result = AttendanceService(unavailable_store).append([])
    assert result.total == 0


def test_list_attendance_filters_and_orders(attendance_repo):
    svc = AttendanceService(attendance_repo)
    svc.append([_event("E001", 9), _event("E001", 17), _event("E002", 10)])

    rows = svc.list_attendance(AttendanceFilter(emp_id="E001", start_date=date(2024, 1, 1), end_date=date(2024, 1, 1)))

    assert [r.punch_time.hour for r in rows] == [17, 9]


def test_list_attendance_caps_limit(attendance_repo):
    AttendanceService(attendance_repo).list_attendance(AttendanceFilter(limit=MAX_ATTENDANCE_LIMIT * 5))
    assert attendance_repo.last_filters.limit == MAX_ATTENDANCE_LIMIT


def test_list_attendance_rejects_inverted_range(attendance_repo):
    with pytest.raises(ValidationError):
        AttendanceService(attendance_repo).list_attendance(
            AttendanceFilter(start_date=date(2024, 2, 1), end_date=date(2024, 1, 1))
        )
