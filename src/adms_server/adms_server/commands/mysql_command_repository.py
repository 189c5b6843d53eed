from __future__ import annotations

from datetime import timedelta
from typing import Any, Dict, Optional, Sequence

from ..core.enums import CommandStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Command
from .repository import CommandRepository


def _to_command(r: Dict[str, Any]) -> Command:
    return Command(
        command_id=int(r["id"]),
        device_sn=r["device_sn"],
        command=r["command"],
        status=CommandStatus(r["status"]),
        created_at=r["created_at"],
        sent_at=r.get("sent_at"),
        completed_at=r.get("completed_at"),
    )


class MySQLCommandRepository(CommandRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, device_sn: str, command: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO device_commands(device_sn, command, status)
                VALUES(%s,%s,%s)
                """,
                (device_sn, command, CommandStatus.PENDING.value),
            )
            return int(cur.lastrowid)

    def claim_next(self, *, device_sn: str, inflight_timeout_seconds: int) -> Optional[Command]:
        with db_cursor(self._conn_factory) as (_, cur):
            # Locking read: a concurrent claim for the same device waits here and
            # then sees this transaction's committed result.
            cur.execute(
                """
                SELECT id, device_sn, command, status, created_at, sent_at, completed_at,
                       NOW(6) AS db_now
                FROM device_commands
                WHERE device_sn=%s AND status IN (%s,%s)
                ORDER BY created_at ASC, id ASC
                FOR UPDATE
                """,
                (device_sn, CommandStatus.PENDING.value, CommandStatus.SENT.value),
            )
            rows = fetchall(cur)
            if not rows:
                return None

            now = rows[0]["db_now"]
            inflight_since = now - timedelta(seconds=inflight_timeout_seconds) if inflight_timeout_seconds else None
            active = [_to_command(r) for r in rows]

            for cmd in active:
                if cmd.status != CommandStatus.SENT:
                    continue
                if inflight_since is None:
                    return None
                if cmd.sent_at is not None and cmd.sent_at >= inflight_since:
                    return None

            pending = next((c for c in active if c.status == CommandStatus.PENDING), None)
            if pending is None:
                return None

            cur.execute(
                """
                UPDATE device_commands
                SET status=%s, sent_at=%s
                WHERE id=%s AND status=%s
                """,
                (CommandStatus.SENT.value, now, pending.command_id, CommandStatus.PENDING.value),
            )
            if cur.rowcount != 1:
                return None

            return Command(
                command_id=pending.command_id,
                device_sn=pending.device_sn,
                command=pending.command,
                status=CommandStatus.SENT,
                created_at=pending.created_at,
                sent_at=now,
            )

    def complete_sent(self, *, device_sn: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE device_commands
                SET status=%s, completed_at=NOW(6)
                WHERE device_sn=%s AND status=%s
                """,
                (CommandStatus.COMPLETED.value, device_sn, CommandStatus.SENT.value),
            )
            return int(cur.rowcount)

    def list_for_device(self, *, device_sn: str, limit: int) -> Sequence[Command]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, device_sn, command, status, created_at, sent_at, completed_at
                FROM device_commands
                WHERE device_sn=%s
                ORDER BY created_at DESC, id DESC
                LIMIT %s
                """,
                (device_sn, int(limit)),
            )
            return [_to_command(r) for r in fetchall(cur)]
