"""
Exception hierarchy for dump imports.

Every error the importer surfaces derives from :class:`DumpImportError`, so
callers (and the CLI) can catch one type.  The statement splitter itself
never raises: malformed input only shows up later as a
:class:`StatementExecutionError`.
"""
from __future__ import annotations

from dbimport.utils import preview


class DumpImportError(RuntimeError):
    """Base class for every user‑visible import failure."""


class FileAccessError(DumpImportError):
    """A path is missing, unreadable, or cannot be listed."""

    def __init__(self, path, message: str | None = None) -> None:
        self.path = str(path)
        super().__init__(message or f"Cannot access {self.path}")


class StreamError(DumpImportError):
    """Reading a dump failed part way through the file."""

    def __init__(self, path, message: str | None = None) -> None:
        self.path = str(path)
        super().__init__(message or f"Read error in {self.path}")


class StatementExecutionError(DumpImportError):
    """The server rejected a statement."""

    def __init__(self, statement: str, cause: BaseException | None = None, path=None) -> None:
        self.statement = statement
        self.cause = cause
        self.path = str(path) if path is not None else None
        super().__init__(self._describe())

    def _describe(self) -> str:
        where = f" in {self.path}" if self.path else ""
        return f"Statement failed{where}: {self.cause} -- {preview(self.statement, 80)!r}"

    def for_file(self, path) -> "StatementExecutionError":
        """Return a copy that names *path* as the source file."""
        err = StatementExecutionError(self.statement, self.cause, path)
        err.__cause__ = self.__cause__
        return err


class DBConnectionError(DumpImportError):
    """Connecting, disconnecting or switching database failed."""


class UnsupportedEncodingError(DumpImportError, ValueError):
    """The requested text encoding is not one the reader understands."""

    def __init__(self, encoding: str) -> None:
        self.encoding = encoding
        super().__init__(f"Unsupported encoding: {encoding}")
