from __future__ import annotations

from typing import Optional

import mysql.connector

from ..core.exceptions import ConcurrentWriteError, StorageUnavailableError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .backend import StorageBackend


class MySQLStorage(StorageBackend):
    """Key-value backend on a single `kv_store` table.

    The revision column makes compare_and_set a real CAS across processes:
    the UPDATE only matches when the stored revision is the one we read.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_item(self, key: str) -> tuple[Optional[str], int]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute("SELECT v, revision FROM kv_store WHERE k=%s", (key,))
                r = fetchone(cur)
        except mysql.connector.Error as e:
            raise StorageUnavailableError(f"Cannot read {key}: {e}") from e
        if not r:
            return None, 0
        return str(r["v"]), int(r["revision"])

    def compare_and_set(self, key: str, value: str, expected_revision: int) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                if expected_revision == 0:
                    cur.execute(
                        "INSERT IGNORE INTO kv_store(k, v, revision) VALUES(%s,%s,1)",
                        (key, value),
                    )
                else:
                    cur.execute(
                        "UPDATE kv_store SET v=%s, revision=revision+1 WHERE k=%s AND revision=%s",
                        (value, key, int(expected_revision)),
                    )
                matched = cur.rowcount == 1
        except mysql.connector.Error as e:
            raise StorageUnavailableError(f"Cannot write {key}: {e}") from e
        if not matched:
            raise ConcurrentWriteError(f"{key} changed since it was read (expected revision {expected_revision})")
        return expected_revision + 1

    def remove_item(self, key: str) -> None:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute("DELETE FROM kv_store WHERE k=%s", (key,))
        except mysql.connector.Error as e:
            raise StorageUnavailableError(f"Cannot remove {key}: {e}") from e
