"""
Values shared by the parser, the stream reader and the importer.
"""
from __future__ import annotations

DEFAULT_DELIMITER = ";"
DELIMITER_KEYWORD = "delimiter"

SQL_SUFFIX = ".sql"

DEFAULT_ENCODING = "utf8"
SUPPORTED_ENCODINGS = (
    "utf8",
    "ucs2",
    "utf16le",
    "latin1",
    "ascii",
    "base64",
    "hex",
)

# characters handed to the splitter per read
DEFAULT_CHUNK_SIZE = 64 * 1024
