from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from .model import Device
from .repository import DeviceRepository

logger = logging.getLogger(__name__)


class DeviceRegistry:
    """Terminal identity and advisory online/offline status.

    Every successful contact upserts the device row; nothing here ever
    deletes a device or decides on its own that it went offline.
    """

    def __init__(self, devices: DeviceRepository):
        self._devices = devices

    def register_or_touch(self, device_sn: str) -> None:
        sn = require_non_empty(device_sn, "device_sn")
        self._devices.upsert_online(device_sn=sn, seen_at=now_local(), device_name=sn)
        logger.info("Device registered: %s", sn)

    def mark_online(self, device_sn: str) -> None:
        sn = require_non_empty(device_sn, "device_sn")
        self._devices.upsert_online(device_sn=sn, seen_at=now_local())

    def list_devices(self) -> Sequence[Device]:
        return self._devices.list_all()

    def mark_offline_before(self, cutoff: datetime) -> int:
        count = self._devices.mark_offline_before(cutoff=cutoff)
        if count:
            logger.info("Marked %d device(s) offline (no contact since %s)", count, cutoff)
        return count

    def sweep_offline(self, *, offline_after_seconds: int, now: Optional[datetime] = None) -> int:
        now = now or now_local()
        return self.mark_offline_before(now - timedelta(seconds=int(offline_after_seconds)))
