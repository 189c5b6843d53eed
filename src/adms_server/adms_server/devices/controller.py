from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from flask import Flask, jsonify, request

from ..commands.model import Command
from ..container import Container
from ..core.exceptions import StoreError, ValidationError
from .model import Device

logger = logging.getLogger(__name__)


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat(sep=" ") if value else None


def device_to_dict(device: Device) -> dict:
    return {
        "id": device.device_id,
        "device_sn": device.device_sn,
        "device_name": device.device_name,
        "last_activity": _iso(device.last_activity),
        "status": device.status.value,
    }


def command_to_dict(cmd: Command) -> dict:
    return {
        "id": cmd.command_id,
        "device_sn": cmd.device_sn,
        "command": cmd.command,
        "status": cmd.status.value,
        "created_at": _iso(cmd.created_at),
        "sent_at": _iso(cmd.sent_at),
        "completed_at": _iso(cmd.completed_at),
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/devices", methods=["GET"], endpoint="api_list_devices")
    def api_list_devices():
        try:
            devices = container.device_registry.list_devices()
        except StoreError:
            logger.exception("Error fetching devices")
            return jsonify({"error": "Failed to fetch devices"}), 500
        return jsonify([device_to_dict(d) for d in devices])

    @app.route("/api/devices/<sn>/sync", methods=["POST"], endpoint="api_sync_device")
    def api_sync_device(sn: str):
        """Queue a full ATTLOG back-fill; the terminal answers via /iclock/querydata."""

        try:
            command_id = container.command_queue.enqueue_sync(sn)
        except ValidationError as e:
            return jsonify({"error": str(e)}), 400
        except StoreError:
            logger.exception("Error queueing sync command for %s", sn)
            return jsonify({"error": "Failed to queue sync command"}), 500
        return jsonify(
            {
                "success": True,
                "id": command_id,
                "message": f"Sync command queued for device {sn}. It will be sent on next heartbeat.",
            }
        )

    @app.route("/api/devices/<sn>/commands", methods=["POST"], endpoint="api_enqueue_command")
    def api_enqueue_command(sn: str):
        data = request.get_json(silent=True) or {}
        try:
            command_id = container.command_queue.enqueue(sn, str(data.get("command") or ""))
        except ValidationError as e:
            return jsonify({"error": str(e)}), 400
        except StoreError:
            logger.exception("Error queueing command for %s", sn)
            return jsonify({"error": "Failed to queue command"}), 500
        return jsonify({"success": True, "id": command_id}), 201

    @app.route("/api/devices/<sn>/commands", methods=["GET"], endpoint="api_list_commands")
    def api_list_commands(sn: str):
        try:
            commands = container.command_queue.list_commands(sn)
        except ValidationError as e:
            return jsonify({"error": str(e)}), 400
        except StoreError:
            logger.exception("Error fetching commands for %s", sn)
            return jsonify({"error": "Failed to fetch commands"}), 500
        return jsonify([command_to_dict(c) for c in commands])
