"""
Chunked character reader for dump files.

``utf8``, ``ucs2``/``utf16le``, ``latin1`` and ``ascii`` decode the file's
bytes as text, dropping a leading byte order mark.  ``base64`` and ``hex`` render the raw bytes in that notation
instead; chunk boundaries are kept on whole input blocks so the rendered
text is the same whatever the read size.
"""
from __future__ import annotations

import base64
import codecs
import pathlib
import typing as t

from dbimport.constants import DEFAULT_CHUNK_SIZE, SUPPORTED_ENCODINGS
from dbimport.errors import FileAccessError, StreamError, UnsupportedEncodingError

_TEXT_CODECS = {
    "utf8": "utf-8-sig",
    "ucs2": "utf-16-le",
    "utf16le": "utf-16-le",
    "latin1": "latin-1",
    "ascii": "ascii",
}


class _BinaryRenderer:
    """Incremental bytes → text renderer working on fixed‑size blocks."""

    def __init__(self, render: t.Callable[[bytes], str], block: int) -> None:
        self._render = render
        self._block = block
        self._pending = b""

    def decode(self, data: bytes, final: bool = False) -> str:
        data = self._pending + data
        cut = len(data) if final else len(data) - len(data) % self._block
        self._pending = data[cut:]
        return self._render(data[:cut])


def check_encoding(encoding: str) -> str:
    if encoding not in SUPPORTED_ENCODINGS:
        raise UnsupportedEncodingError(encoding)
    return encoding


def _decoder(encoding: str):
    check_encoding(encoding)
    if encoding == "base64":
        return _BinaryRenderer(lambda b: base64.b64encode(b).decode("ascii"), 3)
    if encoding == "hex":
        return _BinaryRenderer(lambda b: b.hex(), 1)
    return codecs.getincrementaldecoder(_TEXT_CODECS[encoding])(errors="replace")


# utf-16-le keeps a leading byte order mark; utf-8-sig already drops it
_BOM_STRIPPED = ("ucs2", "utf16le")


def open_stream(
    path: pathlib.Path | str,
    encoding: str = "utf8",
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> t.Iterator[str]:
    """
    Open *path* and return an iterator over its decoded chunks.

    The file is opened immediately, so a missing or unreadable file raises
    :class:`FileAccessError` here.  Failures while iterating raise
    :class:`StreamError`.
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    decoder = _decoder(encoding)
    path = pathlib.Path(path)
    try:
        fh = path.open("rb")
    except OSError as exc:
        raise FileAccessError(path, f"Cannot open {path}: {exc.strerror or exc}") from exc
    return _read_chunks(fh, path, decoder, chunk_size, encoding in _BOM_STRIPPED)


def _read_chunks(
    fh, path: pathlib.Path, decoder, chunk_size: int, strip_bom: bool
) -> t.Iterator[str]:
    with fh:
        while True:
            try:
                data = fh.read(chunk_size)
            except OSError as exc:
                raise StreamError(path, f"Read failed in {path}: {exc.strerror or exc}") from exc
            text = decoder.decode(data, final=not data)
            if strip_bom and text:
                if text.startswith("\ufeff"):
                    text = text[1:]
                strip_bom = False
            if text:
                yield text
            if not data:
                return
