from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .commands.mysql_command_repository import MySQLCommandRepository
from .commands.repository import CommandRepository
from .commands.service import CommandQueue
from .core.constants import DEFAULT_COMMAND_INFLIGHT_TIMEOUT
from .database.connection import DBConfig, DatabaseConnection
from .devices.mysql_device_repository import MySQLDeviceRepository
from .devices.repository import DeviceRepository
from .devices.service import DeviceRegistry
from .iclock.service import IClockService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    devices_repo: DeviceRepository
    attendance_repo: AttendanceRepository
    commands_repo: CommandRepository

    device_registry: DeviceRegistry
    command_queue: CommandQueue
    attendance_service: AttendanceService
    iclock_service: IClockService

    def close(self) -> None:
        if self.conn is not None:
            self.conn.close()


def wire_container(
    *,
    devices_repo: DeviceRepository,
    attendance_repo: AttendanceRepository,
    commands_repo: CommandRepository,
    conn: Optional[DatabaseConnection] = None,
    inflight_timeout_seconds: int = DEFAULT_COMMAND_INFLIGHT_TIMEOUT,
) -> Container:
    device_registry = DeviceRegistry(devices_repo)
    command_queue = CommandQueue(commands_repo, inflight_timeout_seconds=inflight_timeout_seconds)
    attendance_service = AttendanceService(attendance_repo)
    iclock_service = IClockService(device_registry, command_queue, attendance_service)

    return Container(
        conn=conn,
        devices_repo=devices_repo,
        attendance_repo=attendance_repo,
        commands_repo=commands_repo,
        device_registry=device_registry,
        command_queue=command_queue,
        attendance_service=attendance_service,
        iclock_service=iclock_service,
    )


def build_container(*, db_config: dict, inflight_timeout_seconds: int = DEFAULT_COMMAND_INFLIGHT_TIMEOUT) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
        pool_size=int(db_config.get("pool_size", 10)),
        connect_timeout=int(db_config.get("connect_timeout", 5)),
        lock_wait_timeout=int(db_config.get("lock_wait_timeout", 5)),
    )
    conn = DatabaseConnection(config)

    return wire_container(
        devices_repo=MySQLDeviceRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        commands_repo=MySQLCommandRepository(conn),
        conn=conn,
        inflight_timeout_seconds=inflight_timeout_seconds,
    )
