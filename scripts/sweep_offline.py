"""Flip devices that stopped polling to offline.

Meant to run from cron (or any scheduler) next to the server; the server
itself never marks a device offline.
"""
from __future__ import annotations

import sys
from pathlib import Path

import importlib

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.adms_server.adms_server.container import build_container
from src.adms_server.adms_server.core.constants import DEFAULT_OFFLINE_AFTER_SECONDS


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=dict(settings.DB_CONFIG))
    try:
        count = container.device_registry.sweep_offline(
            offline_after_seconds=int(getattr(settings, "OFFLINE_AFTER_SECONDS", DEFAULT_OFFLINE_AFTER_SECONDS)),
        )
    finally:
        container.close()
    print(f"OK: {count} device(s) marked offline")


if __name__ == "__main__":
    main()
