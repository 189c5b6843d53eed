"""Parser for the attendance log payloads pushed by ADMS terminals.

A payload is newline-delimited; every line is tab-delimited in one of two
layouts:

* standard ATTLOG: ``emp_id, timestamp, punch_state, verify_mode[, work_code]``
* OPLOG: ``OPLOG, emp_id, <device field>, timestamp, punch_state[, verify_mode[, work_code]]``

Lines starting with ``ATTLOG`` are format headers. Anything else that does
not fit is skipped; parsing never raises.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..common.datetime_utils import parse_punch_time
from ..core.constants import ATTLOG_HEADER_MARKER, OPLOG_MARKER
from ..core.enums import LineFormat
from .model import PunchEvent

logger = logging.getLogger(__name__)

STANDARD_MIN_FIELDS = 4
OPLOG_MIN_FIELDS = 5


@dataclass(frozen=True)
class _FieldLayout:
    emp_id: int
    timestamp: int
    punch_state: int
    verify_mode: int
    work_code: int


_LAYOUTS = {
    LineFormat.STANDARD: _FieldLayout(emp_id=0, timestamp=1, punch_state=2, verify_mode=3, work_code=4),
    LineFormat.OPLOG: _FieldLayout(emp_id=1, timestamp=3, punch_state=4, verify_mode=5, work_code=6),
}


def classify_line(line: str) -> LineFormat:
    if line.startswith(ATTLOG_HEADER_MARKER):
        return LineFormat.HEADER

    field_count = len(line.split("\t"))
    if line.startswith(OPLOG_MARKER):
        return LineFormat.OPLOG if field_count >= OPLOG_MIN_FIELDS else LineFormat.MALFORMED
    if field_count >= STANDARD_MIN_FIELDS:
        return LineFormat.STANDARD
    return LineFormat.MALFORMED


def _field(parts: Sequence[str], index: int, default: str = "") -> str:
    if index < len(parts):
        return parts[index].strip()
    return default


def _to_int(value: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _extract(parts: Sequence[str], layout: _FieldLayout, device_sn: str) -> Optional[PunchEvent]:
    punch_time = parse_punch_time(_field(parts, layout.timestamp))
    if punch_time is None:
        return None
    return PunchEvent(
        device_sn=device_sn,
        emp_id=_field(parts, layout.emp_id),
        punch_time=punch_time,
        punch_state=_to_int(_field(parts, layout.punch_state)),
        verify_mode=_to_int(_field(parts, layout.verify_mode, "0")),
        work_code=_field(parts, layout.work_code),
    )


def parse_attendance_log(payload: str, device_sn: str) -> List[PunchEvent]:
    events: List[PunchEvent] = []

    for lineno, raw in enumerate((payload or "").splitlines(), start=1):
        line = raw.rstrip("\r")
        if not line.strip():
            continue

        fmt = classify_line(line)
        if fmt is LineFormat.HEADER:
            logger.debug("Skipping header line %d from %s", lineno, device_sn)
            continue
        if fmt is LineFormat.MALFORMED:
            logger.warning("Skipping malformed line %d from %s: %r", lineno, device_sn, line)
            continue

        event = _extract(line.split("\t"), _LAYOUTS[fmt], device_sn)
        if event is None:
            logger.warning("Skipping line %d from %s: unreadable timestamp in %r", lineno, device_sn, line)
            continue
        events.append(event)

    return events
