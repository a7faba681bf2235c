import pytest

from dbimport.errors import StatementExecutionError


class FakeSession:
    """Stands in for :class:`dbimport.driver.Session`, recording every call."""

    def __init__(self, dsn=None, fail_on=()):
        self.dsn = dict(dsn or {})
        self.fail_on = fail_on
        self.executed = []
        self.databases = []
        self.connected = False
        self.closed = None

    def connect(self):
        self.connected = True
        return self

    def execute(self, statement):
        self.executed.append(statement)
        if statement in self.fail_on:
            raise StatementExecutionError(statement, RuntimeError("rejected by server"))

    def change_database(self, name):
        self.databases.append(name)

    def close(self, graceful=True):
        self.connected = False
        self.closed = "graceful" if graceful else "forced"


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def session_factory():
    """Factory for ``Importer(session_factory=...)``; sessions land in ``.created``."""
    created = []
    fail_on = set()

    def factory(dsn):
        s = FakeSession(dsn, fail_on=fail_on)
        created.append(s)
        return s

    factory.created = created
    factory.fail_on = fail_on
    return factory


@pytest.fixture
def write_sql(tmp_path):
    """Write a dump file below ``tmp_path`` and return its path."""

    def _write(name, text, encoding="utf-8"):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(text.encode(encoding))
        return path

    return _write
