"""Create the ADMS tables in the configured database.

The server does the same on startup when AUTO_INIT_DB is set.
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

from src.adms_server.adms_server.database.bootstrap import init_schema


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    tables = init_schema(dict(settings.DB_CONFIG))
    print(f"OK: schema ready ({', '.join(sorted(tables))})")


if __name__ == "__main__":
    main()
