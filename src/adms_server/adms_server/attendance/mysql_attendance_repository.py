from __future__ import annotations

import logging
from datetime import datetime, time
from typing import Sequence

from mysql.connector import errors as mysql_errors

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import AppendResult, AttendanceFilter, AttendanceRecord, PunchEvent
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

# Errors caused by one row's data; the rest of the batch still goes in.
_ROW_LEVEL_ERRORS = (mysql_errors.DataError, mysql_errors.IntegrityError)


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def insert_events(self, events: Sequence[PunchEvent]) -> AppendResult:
        inserted = duplicates = rejected = 0
        if not events:
            return AppendResult()

        with db_cursor(self._conn_factory) as (_, cur):
            for event in events:
                try:
                    cur.execute(
                        """
                        INSERT INTO attendance(device_sn, emp_id, punch_time, punch_state, verify_mode, work_code)
                        VALUES(%s,%s,%s,%s,%s,%s)
                        ON DUPLICATE KEY UPDATE id=id
                        """,
                        (
                            event.device_sn,
                            event.emp_id,
                            event.punch_time,
                            int(event.punch_state),
                            int(event.verify_mode),
                            event.work_code or "",
                        ),
                    )
                except _ROW_LEVEL_ERRORS as exc:
                    rejected += 1
                    logger.warning("Store rejected punch %s: %s", event.natural_key, exc)
                    continue

                # ON DUPLICATE KEY UPDATE reports 1 for a new row, 0 for an unchanged existing row.
                if cur.rowcount == 1:
                    inserted += 1
                else:
                    duplicates += 1

        return AppendResult(inserted=inserted, duplicates=duplicates, rejected=rejected)

    def list_records(self, filters: AttendanceFilter) -> Sequence[AttendanceRecord]:
        clauses = ["1=1"]
        params: list[object] = []

        if filters.emp_id:
            clauses.append("a.emp_id=%s")
            params.append(filters.emp_id)
        if filters.device_sn:
            clauses.append("a.device_sn=%s")
            params.append(filters.device_sn)
        if filters.start_date is not None:
            clauses.append("a.punch_time >= %s")
            params.append(datetime.combine(filters.start_date, time.min))
        if filters.end_date is not None:
            clauses.append("a.punch_time <= %s")
            params.append(datetime.combine(filters.end_date, time.max))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT a.id, a.device_sn, a.emp_id, a.punch_time, a.punch_state,
                       a.verify_mode, a.work_code, a.created_at,
                       e.name, e.department
                FROM attendance a
                LEFT JOIN employees e ON e.emp_id = a.emp_id
                WHERE {where}
                ORDER BY a.punch_time DESC
                LIMIT %s
                """,
                tuple(params + [int(filters.limit)]),
            )
            rows = fetchall(cur)
            return [
                AttendanceRecord(
                    attendance_id=int(r["id"]),
                    device_sn=r["device_sn"],
                    emp_id=r["emp_id"],
                    punch_time=r["punch_time"],
                    punch_state=int(r["punch_state"]),
                    verify_mode=int(r["verify_mode"]),
                    work_code=r.get("work_code") or "",
                    created_at=r.get("created_at"),
                    name=r.get("name"),
                    department=r.get("department"),
                )
                for r in rows
            ]
