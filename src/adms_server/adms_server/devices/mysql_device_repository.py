from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import DeviceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Device
from .repository import DeviceRepository


class MySQLDeviceRepository(DeviceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert_online(self, *, device_sn: str, seen_at: datetime, device_name: Optional[str] = None) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO devices(device_sn, device_name, status, last_activity)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE status=%s, last_activity=%s
                """,
                (
                    device_sn,
                    device_name,
                    DeviceStatus.ONLINE.value,
                    seen_at,
                    DeviceStatus.ONLINE.value,
                    seen_at,
                ),
            )

    def list_all(self) -> Sequence[Device]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, device_sn, device_name, last_activity, status
                FROM devices
                ORDER BY last_activity DESC
                """
            )
            rows = fetchall(cur)
            return [
                Device(
                    device_id=int(r["id"]),
                    device_sn=r["device_sn"],
                    device_name=r.get("device_name"),
                    last_activity=r.get("last_activity"),
                    status=DeviceStatus(r["status"]),
                )
                for r in rows
            ]

    def mark_offline_before(self, *, cutoff: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE devices
                SET status=%s
                WHERE status=%s AND last_activity < %s
                """,
                (DeviceStatus.OFFLINE.value, DeviceStatus.ONLINE.value, cutoff),
            )
            return int(cur.rowcount)
