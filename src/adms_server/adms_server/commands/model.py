from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import CommandStatus


@dataclass(frozen=True)
class Command:
    """Opaque instruction queued for a terminal, handed out on its next poll."""

    command_id: int
    device_sn: str
    command: str
    status: CommandStatus
    created_at: datetime
    sent_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
