from __future__ import annotations
import logging
import typing as t

import mysql.connector

from dbimport.errors import DBConnectionError, StatementExecutionError

log = logging.getLogger(__name__)


class Session:
    """
    The one server connection an import runs on.

    Statements run on autocommit, one at a time, each on a buffered cursor
    so that result sets never block the next statement.  Driver errors are
    translated: a rejected statement becomes :class:`StatementExecutionError`,
    a lost or failed connection :class:`DBConnectionError`.
    """

    def __init__(self, dsn: dict[str, t.Any]) -> None:
        self.dsn: dict[str, t.Any] = dict(dsn)
        self._conn = None

    @property
    def connected(self) -> bool:
        return self._conn is not None

    def connect(self) -> "Session":
        if self._conn is not None:
            return self
        try:
            self._conn = mysql.connector.connect(**self.dsn, autocommit=True)
        except mysql.connector.Error as err:
            raise DBConnectionError(
                f"Could not connect to {self.dsn.get('host')}:{self.dsn.get('port', 3306)}: {err}"
            ) from err
        log.info("Connected to %s:%s", self.dsn.get("host"), self.dsn.get("port", 3306))
        return self

    def execute(self, statement: str) -> None:
        conn = self._require()
        try:
            with conn.cursor(buffered=True) as cur:
                cur.execute(statement)
        except mysql.connector.Error as err:
            if not conn.is_connected():
                raise DBConnectionError(f"Connection lost: {err}") from err
            raise StatementExecutionError(statement, err) from err

    def change_database(self, name: str) -> None:
        conn = self._require()
        quoted = name.replace("`", "``")
        try:
            with conn.cursor() as cur:
                cur.execute(f"USE `{quoted}`")
        except mysql.connector.Error as err:
            raise DBConnectionError(f"Could not switch to database {name!r}: {err}") from err
        self.dsn["database"] = name

    def close(self, graceful: bool = True) -> None:
        if self._conn is None:
            return
        conn, self._conn = self._conn, None
        if not graceful:
            # drop the socket without the QUIT handshake
            conn.shutdown()
            return
        try:
            conn.close()
        except mysql.connector.Error as err:
            raise DBConnectionError(f"Error while disconnecting: {err}") from err

    def _require(self):
        if self._conn is None:
            raise DBConnectionError("Not connected")
        return self._conn

