"""
dbimport – replay SQL dump files against a MySQL / MariaDB server.
"""
__version__ = "4.1.11"

from dbimport.errors import (  # noqa: E402
    DBConnectionError,
    DumpImportError,
    FileAccessError,
    StatementExecutionError,
    StreamError,
    UnsupportedEncodingError,
)
from dbimport.importer import BatchResult, Importer  # noqa: E402
from dbimport.parser import ChunkFeeder, StatementSplitter, split_statements  # noqa: E402
from dbimport.pipeline import ImportResult, import_file  # noqa: E402

__all__ = [
    "BatchResult",
    "ChunkFeeder",
    "DBConnectionError",
    "DumpImportError",
    "FileAccessError",
    "ImportResult",
    "Importer",
    "StatementExecutionError",
    "StatementSplitter",
    "StreamError",
    "UnsupportedEncodingError",
    "__version__",
    "import_file",
    "split_statements",
]
