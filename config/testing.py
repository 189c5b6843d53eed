import os

from .config import COMMAND_INFLIGHT_TIMEOUT, OFFLINE_AFTER_SECONDS, db_config_from_env

DB_CONFIG = db_config_from_env(default_password="12345", default_pool_size="0")

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
