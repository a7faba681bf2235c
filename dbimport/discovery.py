"""
Resolve user supplied paths to the ordered list of ``.sql`` files to import.
"""
from __future__ import annotations

import os
import pathlib
import stat
import typing as t

from dbimport.constants import SQL_SUFFIX
from dbimport.errors import FileAccessError

PathArg = t.Union[str, os.PathLike, t.Iterable["PathArg"]]


def _flatten(paths: t.Iterable[PathArg]) -> list[pathlib.Path]:
    flat: list[pathlib.Path] = []
    for p in paths:
        if isinstance(p, (str, os.PathLike)):
            flat.append(pathlib.Path(p))
        else:
            flat.extend(_flatten(p))
    return flat


def find_sql_files(*paths: PathArg) -> list[pathlib.Path]:
    """
    Return absolute paths of every ``*.sql`` file (case‑insensitive) under
    *paths*, depth first, in argument order and then sorted name order.

    Directories are walked with an explicit stack.  Entries that are
    neither regular files nor directories (symlinks, sockets, fifos) are
    skipped.  A path that cannot be stat'ed or listed raises
    :class:`FileAccessError` and nothing is returned.
    """
    stack = list(reversed(_flatten(paths)))
    found: list[pathlib.Path] = []

    while stack:
        path = stack.pop()
        try:
            mode = path.lstat().st_mode
        except OSError as exc:
            raise FileAccessError(path, f"Cannot access {path}: {exc.strerror or exc}") from exc

        if stat.S_ISREG(mode):
            if path.name.lower().endswith(SQL_SUFFIX):
                found.append(pathlib.Path(os.path.abspath(path)))
        elif stat.S_ISDIR(mode):
            try:
                children = sorted(os.listdir(path))
            except OSError as exc:
                raise FileAccessError(path, f"Cannot list {path}: {exc.strerror or exc}") from exc
            stack.extend(path / name for name in reversed(children))

    return found
