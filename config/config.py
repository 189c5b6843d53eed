import os


def _int_env(name: str, default: str) -> int:
    return int(os.getenv(name, default))


def db_config_from_env(*, default_password: str = "", default_pool_size: str = "10") -> dict:
    return {
        "host": os.getenv("DB_HOST", "localhost"),
        "port": _int_env("DB_PORT", "3306"),
        "user": os.getenv("DB_USER", "root"),
        "password": os.getenv("DB_PASSWORD", default_password),
        "database": os.getenv("DB_NAME", "adms_db"),
        "pool_size": _int_env("DB_POOL_SIZE", default_pool_size),
        "connect_timeout": _int_env("DB_CONNECT_TIMEOUT", "5"),
        "lock_wait_timeout": _int_env("DB_LOCK_WAIT_TIMEOUT", "5"),
    }


# Seconds a sent command blocks the device's queue before the next one may go out (0 = until completed).
COMMAND_INFLIGHT_TIMEOUT = _int_env("COMMAND_INFLIGHT_TIMEOUT", "600")

# Used by scripts/sweep_offline.py.
OFFLINE_AFTER_SECONDS = _int_env("OFFLINE_AFTER_SECONDS", "300")
