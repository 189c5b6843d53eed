from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import mysql.connector
from mysql.connector import errors as mysql_errors

from ..core.exceptions import StoreError, StoreUnavailableError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

# Lock wait timeout, query execution interrupted.
_TIMEOUT_ERRNOS = {1205, 3024}


def translate_store_error(exc: mysql.connector.Error) -> StoreError:
    """Map a driver error onto the domain's store error taxonomy."""

    if isinstance(exc, (mysql_errors.InterfaceError, mysql_errors.OperationalError, mysql_errors.PoolError)):
        return StoreUnavailableError(str(exc))
    if getattr(exc, "errno", None) in _TIMEOUT_ERRNOS:
        return StoreUnavailableError(str(exc))
    return StoreError(str(exc))


def _rollback_quietly(conn) -> None:
    try:
        conn.rollback()
    except mysql.connector.Error:
        logger.warning("Rollback failed; connection is likely gone", exc_info=True)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as exc:
        raise translate_store_error(exc) from exc

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as exc:
        _rollback_quietly(conn)
        raise translate_store_error(exc) from exc
    except Exception:
        _rollback_quietly(conn)
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])
