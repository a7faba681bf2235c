"""
Replays one dump file against a connection.

The file is read in chunks, each chunk goes through a :class:`ChunkFeeder`
into a fresh :class:`StatementSplitter`, and every statement the splitter
emits is executed before the next one is sent.  A rejected statement does
not stop the file: later statements are still sent and the *first* error is
reported once the whole file has been drained.  Statements that already
succeeded stay applied.
"""
from __future__ import annotations

import logging
import pathlib
import typing as t

from dbimport.constants import DEFAULT_CHUNK_SIZE, DEFAULT_ENCODING
from dbimport.errors import (
    DumpImportError,
    FileAccessError,
    StatementExecutionError,
    StreamError,
)
from dbimport.parser import ChunkFeeder, StatementSplitter
from dbimport.stream import open_stream
from dbimport.utils import is_blank, preview

log = logging.getLogger(__name__)


class Executor(t.Protocol):
    def execute(self, statement: str) -> None: ...


class ImportResult:
    """Outcome of importing a single file."""

    def __init__(self, path: pathlib.Path) -> None:
        self.path: pathlib.Path = path
        self.error: DumpImportError | None = None
        self.executed: int = 0
        self.failed: int = 0
        self.skipped: int = 0
        self.completed: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None

    def __repr__(self) -> str:
        status = "ok" if self.ok else f"failed: {self.error}"
        return f"<ImportResult {self.path.name} {status} executed={self.executed} failed={self.failed}>"


def import_file(
    path: pathlib.Path | str,
    executor: Executor,
    *,
    encoding: str = DEFAULT_ENCODING,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> ImportResult:
    """
    Import *path* through *executor* and return its :class:`ImportResult`.

    Open and read failures end the file at once and are returned as the
    result's error.  Connection failures are not per‑file problems and
    propagate to the caller.
    """
    path = pathlib.Path(path)
    result = ImportResult(path)
    splitter = StatementSplitter()
    feeder = ChunkFeeder(splitter)

    def _execute(statement: str) -> None:
        if is_blank(statement):
            result.skipped += 1
            return
        log.debug("%s: %s", path.name, preview(statement))
        try:
            executor.execute(statement)
        except StatementExecutionError as exc:
            result.failed += 1
            if result.error is None:
                result.error = exc.for_file(path)
                log.warning("%s", result.error)
            return
        result.executed += 1

    def _finished() -> None:
        tail = splitter.residual
        if not is_blank(tail):
            log.warning(
                "%s: dropped %d characters after the last %r delimiter",
                path.name, len(tail.strip()), splitter.delimiter,
            )
        result.completed = True

    splitter.on_statement(_execute)
    log.info("Importing %s", path)

    try:
        for chunk in open_stream(path, encoding, chunk_size):
            feeder.enqueue(chunk)
    except (FileAccessError, StreamError) as exc:
        log.warning("%s", exc)
        # an earlier rejected statement stays the reported error
        if result.error is None:
            result.error = exc
        return result

    feeder.on_drained(_finished)
    if result.ok:
        log.info("Imported %s (%d statements)", path, result.executed)
    return result
