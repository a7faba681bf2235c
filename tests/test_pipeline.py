"""
Unit tests for dbimport.pipeline (single file import).
"""
import logging

import pytest

from dbimport import pipeline
from dbimport.errors import (
    DBConnectionError,
    FileAccessError,
    StatementExecutionError,
    StreamError,
)
from dbimport.pipeline import import_file

DUMP = (
    "-- MySQL dump\n"
    "/*!40101 SET NAMES utf8 */;\n"
    ";\n"
    "CREATE TABLE t (v TEXT);\n"
    "INSERT INTO t VALUES ('a;b'),('it\\'s');\n"
    "DELIMITER //\n"
    "CREATE TRIGGER tr BEFORE INSERT ON t FOR EACH ROW BEGIN SET NEW.v = 'x'; END//\n"
    "DELIMITER ;\n"
    "-- the end\n"
)

EXECUTED = [
    "-- MySQL dump\n/*!40101 SET NAMES utf8 */",
    "CREATE TABLE t (v TEXT)",
    "INSERT INTO t VALUES ('a;b'),('it\\'s')",
    "CREATE TRIGGER tr BEFORE INSERT ON t FOR EACH ROW BEGIN SET NEW.v = 'x'; END",
]


def test_executes_statements_in_source_order(write_sql, fake_session) -> None:
    result = import_file(write_sql("dump.sql", DUMP), fake_session)
    assert result.ok
    assert result.completed
    assert fake_session.executed == EXECUTED
    assert result.executed == 4
    assert result.skipped == 1


@pytest.mark.parametrize("chunk_size", [1, 2, 5, 13])
def test_chunk_size_does_not_change_statements(write_sql, fake_session, chunk_size) -> None:
    import_file(write_sql("dump.sql", DUMP), fake_session, chunk_size=chunk_size)
    assert fake_session.executed == EXECUTED


def test_failed_statement_does_not_stop_the_file(write_sql, fake_session) -> None:
    fake_session.fail_on = {"SELECT 2", "SELECT 3"}
    path = write_sql("dump.sql", "SELECT 1;\nSELECT 2;\nSELECT 3;\nSELECT 4;\n")
    result = import_file(path, fake_session)

    assert fake_session.executed == ["SELECT 1", "SELECT 2", "SELECT 3", "SELECT 4"]
    assert not result.ok
    assert isinstance(result.error, StatementExecutionError)
    assert result.error.statement == "SELECT 2"
    assert result.error.path == str(path)
    assert result.executed == 2
    assert result.failed == 2
    assert result.completed


def test_missing_file(tmp_path, fake_session) -> None:
    result = import_file(tmp_path / "missing.sql", fake_session)
    assert isinstance(result.error, FileAccessError)
    assert fake_session.executed == []
    assert not result.completed


def test_unterminated_tail_is_dropped_with_warning(write_sql, fake_session, caplog) -> None:
    caplog.set_level(logging.WARNING, logger="dbimport.pipeline")
    result = import_file(write_sql("dump.sql", "SELECT 1;\nSELECT 2"), fake_session)
    assert result.ok
    assert fake_session.executed == ["SELECT 1"]
    assert "dropped 8 characters" in caplog.text


def test_trailing_comment_is_silently_dropped(write_sql, fake_session, caplog) -> None:
    caplog.set_level(logging.WARNING, logger="dbimport.pipeline")
    import_file(write_sql("dump.sql", "SELECT 1;\n-- done\n"), fake_session)
    assert fake_session.executed == ["SELECT 1"]
    assert "dropped" not in caplog.text


def test_latin1_file(write_sql, fake_session) -> None:
    path = write_sql("dump.sql", "INSERT INTO t VALUES ('café');", encoding="latin-1")
    import_file(path, fake_session, encoding="latin1")
    assert fake_session.executed == ["INSERT INTO t VALUES ('café')"]


def test_connection_loss_propagates(write_sql) -> None:
    class DeadSession:
        def execute(self, statement):
            raise DBConnectionError("Connection lost")

    with pytest.raises(DBConnectionError):
        import_file(write_sql("dump.sql", "SELECT 1;"), DeadSession())


@pytest.mark.parametrize("codec, encoding", [("utf-8", "utf8"), ("utf-16-le", "utf16le")])
def test_byte_order_mark_is_not_sent(write_sql, fake_session, codec, encoding) -> None:
    path = write_sql("bom.sql", "\ufeffSELECT 1;\nSELECT 2;\n", encoding=codec)
    result = import_file(path, fake_session, encoding=encoding)
    assert result.ok
    assert fake_session.executed == ["SELECT 1", "SELECT 2"]


def test_delimiter_directive_after_byte_order_mark(write_sql, fake_session, caplog) -> None:
    caplog.set_level(logging.WARNING, logger="dbimport.pipeline")
    path = write_sql("bom.sql", "\ufeffDELIMITER //\nSELECT 1//\nDELIMITER ;\nSELECT 2;\n")
    result = import_file(path, fake_session)
    assert result.ok
    assert fake_session.executed == ["SELECT 1", "SELECT 2"]
    assert "dropped" not in caplog.text


def test_read_failure_keeps_earlier_statement_error(tmp_path, fake_session, monkeypatch) -> None:
    def broken_stream(path, encoding, chunk_size):
        yield "SELECT 1;\n"
        raise StreamError(path)

    monkeypatch.setattr(pipeline, "open_stream", broken_stream)
    fake_session.fail_on = {"SELECT 1"}

    result = import_file(tmp_path / "dump.sql", fake_session)
    assert isinstance(result.error, StatementExecutionError)
    assert result.error.statement == "SELECT 1"
    assert result.failed == 1
    assert not result.completed
