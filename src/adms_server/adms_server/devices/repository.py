from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Device


class DeviceRepository(Protocol):
    def upsert_online(self, *, device_sn: str, seen_at: datetime, device_name: Optional[str] = None) -> None:
        """Create the device if missing, then mark it online at ``seen_at``.

        ``device_name`` is only used for a new row; existing names are kept.
        """

        raise NotImplementedError

    def list_all(self) -> Sequence[Device]:
        raise NotImplementedError

    def mark_offline_before(self, *, cutoff: datetime) -> int:
        raise NotImplementedError
