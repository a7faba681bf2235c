"""
Batch importer: discovers ``.sql`` files and replays them one after another
over a single connection.
"""
from __future__ import annotations

import logging
import pathlib
import typing as t

from dbimport import __version__
from dbimport.config import Environment
from dbimport.constants import DEFAULT_CHUNK_SIZE, DEFAULT_ENCODING
from dbimport.discovery import PathArg, find_sql_files
from dbimport.driver import Session
from dbimport.errors import DumpImportError
from dbimport.pipeline import ImportResult, import_file
from dbimport.stream import check_encoding

log = logging.getLogger(__name__)


class BatchResult:
    """Outcome of one :meth:`Importer.import_all` run."""

    def __init__(self) -> None:
        self.results: list[ImportResult] = []
        self.skipped: list[pathlib.Path] = []
        self.error: DumpImportError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def imported(self) -> list[pathlib.Path]:
        return [r.path for r in self.results if r.ok]


class Importer:
    """
    Import dump files into a MySQL / MariaDB server.

    *settings* is either an :class:`Environment` or a plain dict of
    ``mysql.connector.connect`` keyword arguments.  The connection is opened
    lazily by :meth:`import_` and closed again once a batch succeeds.
    """

    version = __version__

    def __init__(
        self,
        settings: Environment | dict[str, t.Any],
        *,
        session_factory: t.Callable[[dict[str, t.Any]], Session] = Session,
    ) -> None:
        if isinstance(settings, Environment):
            self._dsn = settings.dsn()
            self._encoding = settings.encoding
            self._chunk_size = settings.chunk_size
        else:
            self._dsn = dict(settings)
            self._encoding = DEFAULT_ENCODING
            self._chunk_size = DEFAULT_CHUNK_SIZE
        self._session_factory = session_factory
        self._session: Session | None = None
        self._imported: list[pathlib.Path] = []

    # --------------------------------------------------------------------- #
    # Settings
    # --------------------------------------------------------------------- #
    @property
    def encoding(self) -> str:
        return self._encoding

    def set_encoding(self, encoding: str) -> None:
        """Set the encoding used to read dump files.  Raises
        :class:`UnsupportedEncodingError` for anything outside the supported set."""
        self._encoding = check_encoding(encoding)

    def use(self, database: str) -> None:
        """Select *database*, now if connected, otherwise on connect."""
        if self._session is None:
            self._dsn["database"] = database
            return
        self._session.change_database(database)
        self._dsn["database"] = database

    def get_imported(self) -> list[pathlib.Path]:
        """Files imported successfully so far, in import order."""
        return list(self._imported)

    # --------------------------------------------------------------------- #
    # Import
    # --------------------------------------------------------------------- #
    def import_(self, *paths: PathArg) -> BatchResult:
        """
        Import every ``.sql`` file found under *paths*.

        Raises the batch's first error.  On success the connection is closed
        gracefully; after a failure it is left open for the caller.
        """
        files = find_sql_files(*paths)
        self._connect()
        batch = self.import_all(files)
        if batch.error is not None:
            raise batch.error
        self.disconnect()
        return batch

    def import_all(self, files: t.Sequence[pathlib.Path | str]) -> BatchResult:
        """
        Import *files* strictly in order, one at a time.

        After the first failed file the remaining ones are skipped rather
        than attempted; the batch still returns normally with that error.
        """
        session = self._connect()
        batch = BatchResult()

        for f in files:
            path = pathlib.Path(f)
            if batch.error is not None:
                batch.skipped.append(path)
                continue
            try:
                result = import_file(
                    path, session, encoding=self._encoding, chunk_size=self._chunk_size
                )
            except DumpImportError as exc:
                result = ImportResult(path)
                result.error = exc
            batch.results.append(result)
            if result.ok:
                self._imported.append(path)
            else:
                batch.error = result.error

        if batch.skipped:
            log.warning("Skipped %d file(s) after an error", len(batch.skipped))
        return batch

    # --------------------------------------------------------------------- #
    # Connection
    # --------------------------------------------------------------------- #
    def disconnect(self, graceful: bool = True) -> None:
        """Close the connection; ``graceful=False`` drops it without QUIT."""
        if self._session is None:
            return
        session, self._session = self._session, None
        session.close(graceful)

    def _connect(self) -> Session:
        if self._session is None:
            self._session = self._session_factory(self._dsn).connect()
        return self._session
