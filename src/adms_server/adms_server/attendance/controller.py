from __future__ import annotations

import logging
from typing import Optional

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.validators import require_positive_int
from ..container import Container
from ..core.constants import DEFAULT_ATTENDANCE_LIMIT
from ..core.enums import PunchState, VerifyMode
from ..core.exceptions import StoreError, ValidationError
from .model import AttendanceFilter, AttendanceRecord

logger = logging.getLogger(__name__)


def _label(enum_cls, value: int) -> Optional[str]:
    # Vendor-specific codes have no label.
    try:
        return enum_cls(value).name.lower()
    except ValueError:
        return None


def record_to_dict(rec: AttendanceRecord) -> dict:
    return {
        "id": rec.attendance_id,
        "device_sn": rec.device_sn,
        "emp_id": rec.emp_id,
        "punch_time": rec.punch_time.isoformat(sep=" "),
        "punch_state": rec.punch_state,
        "punch_state_label": _label(PunchState, rec.punch_state),
        "verify_mode": rec.verify_mode,
        "verify_mode_label": _label(VerifyMode, rec.verify_mode),
        "work_code": rec.work_code,
        "created_at": rec.created_at.isoformat(sep=" ") if rec.created_at else None,
        "name": rec.name,
        "department": rec.department,
    }


def _filters_from_args() -> AttendanceFilter:
    def _date(name: str):
        value = (request.args.get(name) or "").strip()
        if not value:
            return None
        try:
            return parse_iso_date(value)
        except ValueError:
            raise ValidationError(f"{name} must be YYYY-MM-DD")

    def _text(name: str) -> Optional[str]:
        return (request.args.get(name) or "").strip() or None

    return AttendanceFilter(
        emp_id=_text("emp_id"),
        device_sn=_text("device_sn"),
        start_date=_date("start_date"),
        end_date=_date("end_date"),
        limit=require_positive_int(request.args.get("limit", DEFAULT_ATTENDANCE_LIMIT), "limit"),
    )


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance", methods=["GET"], endpoint="api_list_attendance")
    def api_list_attendance():
        try:
            records = container.attendance_service.list_attendance(_filters_from_args())
        except ValidationError as e:
            return jsonify({"error": str(e)}), 400
        except StoreError:
            logger.exception("Error fetching attendance")
            return jsonify({"error": "Failed to fetch attendance records"}), 500
        return jsonify([record_to_dict(r) for r in records])
