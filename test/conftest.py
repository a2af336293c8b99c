import pytest
from pydburl import connect, connectors


@pytest.fixture
def sqlite_url(tmp_path):
    return f"sqlite:{tmp_path / 'test.sqlite3'}"


@pytest.fixture
def con(request, sqlite_url):
    conn = connect(sqlite_url)

    def fin():
        conn.close()

    request.addfinalizer(fin)
    return conn


class RecordingConnector:
    def __init__(self):
        self.calls = []

    def __call__(self, dsn, **kwargs):
        self.calls.append((dsn, kwargs))
        return self


@pytest.fixture
def recorder(monkeypatch):
    rec = RecordingConnector()
    for driver in ("postgres", "mssql", "oleodbc"):
        monkeypatch.setitem(connectors._connectors, driver, rec)
    return rec
