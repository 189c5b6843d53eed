from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Optional

import mysql.connector
from mysql.connector import errors as mysql_errors
from mysql.connector import pooling
from mysql.connector.constants import ClientFlag

logger = logging.getLogger(__name__)

# Delay between attempts while waiting for a pooled connection to be released.
POOL_RETRY_INTERVAL = 0.05


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    pool_size: int = 10
    connect_timeout: int = 5
    lock_wait_timeout: int = 5


class DatabaseConnection:
    """Store handle shared by every repository.

    Opened once at process start and closed at shutdown. With ``pool_size=0``
    a short-lived connection is created per operation instead of pooling.
    Every connection carries a bounded connect and lock-wait timeout. When the
    pool is exhausted a caller waits up to ``connect_timeout`` seconds for a
    connection to be released before giving up.
    """

    def __init__(self, config: DBConfig):
        self._config = config
        self._pool: Optional[pooling.MySQLConnectionPool] = None

    def _connect_kwargs(self) -> dict:
        return {
            "host": self._config.host,
            "port": int(self._config.port),
            "user": self._config.user,
            "password": self._config.password,
            "database": self._config.database,
            "connection_timeout": int(self._config.connect_timeout),
            # Affected-row counts must tell a new row apart from a duplicate-key no-op.
            "client_flags": [-ClientFlag.FOUND_ROWS],
        }

    def open(self) -> None:
        if self._pool is not None or int(self._config.pool_size) <= 0:
            return
        self._pool = pooling.MySQLConnectionPool(
            pool_name="adms_server",
            pool_size=int(self._config.pool_size),
            pool_reset_session=True,
            **self._connect_kwargs(),
        )
        logger.info(
            "Opened store pool %s@%s:%s/%s (size=%s)",
            self._config.user,
            self._config.host,
            self._config.port,
            self._config.database,
            self._config.pool_size,
        )

    def _checkout(self):
        deadline = time.monotonic() + max(0, int(self._config.connect_timeout))
        while True:
            try:
                return self._pool.get_connection()
            except mysql_errors.PoolError:
                if time.monotonic() >= deadline:
                    logger.warning("Store pool exhausted for %ss", self._config.connect_timeout)
                    raise
            time.sleep(POOL_RETRY_INTERVAL)

    def connect(self):
        if int(self._config.pool_size) > 0:
            if self._pool is None:
                self.open()
            conn = self._checkout()
        else:
            conn = mysql.connector.connect(**self._connect_kwargs())

        try:
            cur = conn.cursor()
            try:
                cur.execute("SET SESSION innodb_lock_wait_timeout=%s", (int(self._config.lock_wait_timeout),))
            finally:
                cur.close()
        except mysql.connector.Error:
            # Hand a pooled connection back; callers never see it.
            _close_quietly(conn)
            raise
        return conn

    def close(self) -> None:
        if self._pool is None:
            return
        pool, self._pool = self._pool, None
        try:
            removed = pool._remove_connections()
        except mysql.connector.Error:
            logger.warning("Closing store pool %s failed", pool.pool_name, exc_info=True)
            return
        logger.info("Closed store pool %s (%s idle connection(s))", pool.pool_name, removed)


def _close_quietly(conn) -> None:
    try:
        conn.close()
    except mysql.connector.Error:
        logger.warning("Closing a failed connection raised", exc_info=True)
