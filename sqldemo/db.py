from __future__ import annotations

# sqldemo/db.py
import logging
import sqlite3
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import psycopg2
from psycopg2 import extras as psycopg2_extras

from .config import ConfigError, ConnectionConfig, get_connection_config
from .query import RawQuery

logger = logging.getLogger(__name__)


class ConnectionClosedError(RuntimeError):
    pass


@dataclass
class QueryResult:
    rows: List[Dict[str, Any]] = field(default_factory=list)
    row_count: int = 0
    command: str = ""

    def first(self) -> Optional[Dict[str, Any]]:
        return self.rows[0] if self.rows else None


def _open_sqlite(cfg: ConnectionConfig) -> sqlite3.Connection:
    conn = sqlite3.connect(
        cfg.database,
        detect_types=sqlite3.PARSE_DECLTYPES | sqlite3.PARSE_COLNAMES,
        check_same_thread=False,
        isolation_level=None,
    )
    conn.execute("PRAGMA foreign_keys = ON;")
    conn.row_factory = sqlite3.Row
    return conn


def _open_pg(cfg: ConnectionConfig):
    conn = psycopg2.connect(
        host=cfg.host,
        port=cfg.port,
        dbname=cfg.database,
        user=cfg.user,
        password=cfg.password,
        cursor_factory=psycopg2_extras.RealDictCursor,
    )
    conn.autocommit = True
    return conn


class Database:
    """
    Connection handle for one database endpoint.

    The session opens on first use and stays open until ``destroy()``.
    Driver errors (connectivity, auth, SQL) propagate unchanged.
    """

    def __init__(self, cfg: ConnectionConfig):
        if not (cfg.is_sqlite or cfg.is_postgres):
            raise ConfigError(f"unsupported client '{cfg.client}'")
        self.cfg = cfg
        self._conn = None
        self._closed = False
        if cfg.debug:
            # debug: true in the profile logs every statement
            logger.setLevel(logging.DEBUG)

    @property
    def client(self) -> str:
        return self.cfg.client

    @property
    def is_open(self) -> bool:
        return self._conn is not None and not self._closed

    def connect(self):
        if self._closed:
            raise ConnectionClosedError("database handle has been destroyed")
        if self._conn is None:
            self._conn = _open_sqlite(self.cfg) if self.cfg.is_sqlite else _open_pg(self.cfg)
        return self._conn

    def raw(self, sql: str, bindings: Optional[Sequence[Any]] = None) -> QueryResult:
        query = RawQuery.of(sql, bindings)
        conn = self.connect()
        native_sql, params = query.to_native(self.cfg.client)

        start = time.perf_counter()
        cur = conn.cursor()
        try:
            cur.execute(native_sql, params)
            # description is set for SELECT and for DML with RETURNING
            if cur.description is not None:
                rows = [dict(r) for r in cur.fetchall()]
                row_count = len(rows)
            else:
                rows = []
                row_count = cur.rowcount
        finally:
            cur.close()
        elapsed_ms = int((time.perf_counter() - start) * 1000)

        if self.cfg.debug or logger.isEnabledFor(logging.DEBUG):
            logger.debug("%s -> %d row(s) in %d ms", query, row_count, elapsed_ms)
        return QueryResult(rows=rows, row_count=row_count, command=query.command)

    def exec_script(self, script: str) -> None:
        conn = self.connect()
        if self.cfg.is_sqlite:
            conn.executescript(script)
            return
        cur = conn.cursor()
        try:
            cur.execute(script)
        finally:
            cur.close()

    def destroy(self) -> None:
        """Release the session. Safe to call more than once."""
        conn, self._conn = self._conn, None
        self._closed = True
        if conn is not None:
            conn.close()
            logger.debug("closed %s connection to %s", self.cfg.client, self.cfg.database)

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.destroy()


def open_database(env: str | None = None, config_path: str | None = None) -> Database:
    return Database(get_connection_config(env, config_path))
