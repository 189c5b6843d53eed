"""Example: drive the service layer directly (without Flask).

Queues an attendance back-fill for one terminal and prints its command queue.
"""

import importlib
import sys

from config import get_settings_module

from src.adms_server.adms_server.container import build_container


def main():
    device_sn = sys.argv[1] if len(sys.argv) > 1 else "DEMO0001"
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)
    try:
        container.command_queue.enqueue_sync(device_sn)
        for cmd in container.command_queue.list_commands(device_sn, limit=5):
            print(cmd.command_id, cmd.status.value, cmd.command)
    finally:
        container.close()


if __name__ == "__main__":
    main()
