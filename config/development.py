import os

from .config import COMMAND_INFLIGHT_TIMEOUT, OFFLINE_AFTER_SECONDS, db_config_from_env

DB_CONFIG = db_config_from_env(default_password="123456", default_pool_size="5")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
