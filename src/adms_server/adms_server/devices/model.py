from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import DeviceStatus


@dataclass(frozen=True)
class Device:
    """A biometric terminal identified by its vendor serial number."""

    device_id: int
    device_sn: str
    device_name: Optional[str]
    last_activity: Optional[datetime]
    status: DeviceStatus
