from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime, timedelta

import pytest

from src.adms_server.adms_server.attendance.model import AppendResult, AttendanceFilter, AttendanceRecord
from src.adms_server.adms_server.commands.model import Command
from src.adms_server.adms_server.container import wire_container
from src.adms_server.adms_server.core.enums import CommandStatus, DeviceStatus
from src.adms_server.adms_server.core.exceptions import StoreUnavailableError
from src.adms_server.adms_server.devices.model import Device


class InMemoryDevices:
    def __init__(self):
        self._lock = threading.Lock()
        self._id = 0
        self.rows: dict[str, Device] = {}

    def upsert_online(self, *, device_sn, seen_at, device_name=None):
        with self._lock:
            existing = self.rows.get(device_sn)
            if existing is None:
                self._id += 1
                self.rows[device_sn] = Device(
                    device_id=self._id,
                    device_sn=device_sn,
                    device_name=device_name,
                    last_activity=seen_at,
                    status=DeviceStatus.ONLINE,
                )
            else:
                self.rows[device_sn] = replace(existing, last_activity=seen_at, status=DeviceStatus.ONLINE)

    def list_all(self):
        return sorted(self.rows.values(), key=lambda d: d.last_activity, reverse=True)

    def mark_offline_before(self, *, cutoff):
        count = 0
        with self._lock:
            for sn, device in list(self.rows.items()):
                if device.status == DeviceStatus.ONLINE and device.last_activity < cutoff:
                    self.rows[sn] = replace(device, status=DeviceStatus.OFFLINE)
                    count += 1
        return count


class InMemoryAttendance:
    """Unique on (device_sn, emp_id, punch_time), like the attendance table."""

    def __init__(self, reject_emp_ids: tuple[str, ...] = ()):
        self._lock = threading.Lock()
        self._id = 0
        self._reject = set(reject_emp_ids)
        self.rows: dict[tuple, AttendanceRecord] = {}

    def insert_events(self, events):
        inserted = duplicates = rejected = 0
        with self._lock:
            for e in events:
                if e.emp_id in self._reject:
                    rejected += 1
                    continue
                if e.natural_key in self.rows:
                    duplicates += 1
                    continue
                self._id += 1
                self.rows[e.natural_key] = AttendanceRecord(
                    attendance_id=self._id,
                    device_sn=e.device_sn,
                    emp_id=e.emp_id,
                    punch_time=e.punch_time,
                    punch_state=e.punch_state,
                    verify_mode=e.verify_mode,
                    work_code=e.work_code,
                )
                inserted += 1
        return AppendResult(inserted=inserted, duplicates=duplicates, rejected=rejected)

    def list_records(self, filters: AttendanceFilter):
        self.last_filters = filters
        items = list(self.rows.values())
        if filters.emp_id:
            items = [r for r in items if r.emp_id == filters.emp_id]
        if filters.device_sn:
            items = [r for r in items if r.device_sn == filters.device_sn]
        if filters.start_date:
            items = [r for r in items if r.punch_time.date() >= filters.start_date]
        if filters.end_date:
            items = [r for r in items if r.punch_time.date() <= filters.end_date]
        items.sort(key=lambda r: r.punch_time, reverse=True)
        return items[: filters.limit]


class InMemoryCommands:
    """The lock stands in for the store transaction around a claim; ``clock`` for the store clock."""

    def __init__(self, clock):
        self._clock = clock
        self._lock = threading.Lock()
        self._id = 0
        self._created_tick = datetime(2024, 1, 1, 8, 0, 0)
        self.rows: dict[int, Command] = {}

    def create(self, *, device_sn, command):
        with self._lock:
            self._id += 1
            self._created_tick += timedelta(seconds=1)
            self.rows[self._id] = Command(
                command_id=self._id,
                device_sn=device_sn,
                command=command,
                status=CommandStatus.PENDING,
                created_at=self._created_tick,
            )
            return self._id

    def claim_next(self, *, device_sn, inflight_timeout_seconds):
        with self._lock:
            now = self._clock()
            inflight_since = now - timedelta(seconds=inflight_timeout_seconds) if inflight_timeout_seconds else None
            active = sorted(
                (c for c in self.rows.values() if c.device_sn == device_sn and c.status != CommandStatus.COMPLETED),
                key=lambda c: (c.created_at, c.command_id),
            )
            for c in active:
                if c.status == CommandStatus.SENT:
                    if inflight_since is None or (c.sent_at is not None and c.sent_at >= inflight_since):
                        return None
            pending = next((c for c in active if c.status == CommandStatus.PENDING), None)
            if pending is None:
                return None
            claimed = replace(pending, status=CommandStatus.SENT, sent_at=now)
            self.rows[pending.command_id] = claimed
            return claimed

    def complete_sent(self, *, device_sn):
        count = 0
        now = self._clock()
        with self._lock:
            for cid, c in list(self.rows.items()):
                if c.device_sn == device_sn and c.status == CommandStatus.SENT:
                    self.rows[cid] = replace(c, status=CommandStatus.COMPLETED, completed_at=now)
                    count += 1
        return count

    def list_for_device(self, *, device_sn, limit):
        items = [c for c in self.rows.values() if c.device_sn == device_sn]
        items.sort(key=lambda c: (c.created_at, c.command_id), reverse=True)
        return items[:limit]

    def status_of(self, command_id: int) -> CommandStatus:
        return self.rows[command_id].status


class UnavailableStore:
    """Any repository call fails as if the database went away."""

    def __getattr__(self, name):
        def _fail(*args, **kwargs):
            raise StoreUnavailableError("connection lost")

        return _fail


class FakeClock:
    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock(monkeypatch):
    fake = FakeClock(datetime(2024, 1, 1, 9, 0, 0))
    monkeypatch.setattr("src.adms_server.adms_server.devices.service.now_local", fake)
    return fake


@pytest.fixture
def devices_repo():
    return InMemoryDevices()


@pytest.fixture
def attendance_repo():
    return InMemoryAttendance()


@pytest.fixture
def commands_repo(clock):
    return InMemoryCommands(clock)


@pytest.fixture
def container(devices_repo, attendance_repo, commands_repo, clock):
    return wire_container(
        devices_repo=devices_repo,
        attendance_repo=attendance_repo,
        commands_repo=commands_repo,
        inflight_timeout_seconds=600,
    )


@pytest.fixture
def app(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    from src.adms_server.adms_server.main import create_app

    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def container_factory(clock):
    """Build a container where some repositories are swapped (e.g. for UnavailableStore)."""

    def _make(*, devices=None, attendance=None, commands=None, inflight_timeout_seconds: int = 600):
        return wire_container(
            devices_repo=devices if devices is not None else InMemoryDevices(),
            attendance_repo=attendance if attendance is not None else InMemoryAttendance(),
            commands_repo=commands if commands is not None else InMemoryCommands(clock),
            inflight_timeout_seconds=inflight_timeout_seconds,
        )

    return _make


@pytest.fixture
def unavailable_store():
    return UnavailableStore()
