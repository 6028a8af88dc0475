import pytest
from fastapi.testclient import TestClient

from auth import security
from core import db
from main import app


class FakeDatabase:
    """
    Stands in for core.db.Database: records every statement and returns
    whatever the test scripted.
    """

    def __init__(self):
        self.calls = []
        self.rows = []
        self.row = None
        self.affected = 1
        self.error = None

    def _record(self, sql, args):
        self.calls.append((" ".join(sql.split()), args))
        if self.error is not None:
            raise self.error

    async def fetch_all(self, sql, *args):
        self._record(sql, args)
        return [dict(r) for r in self.rows]

    async def fetch_one(self, sql, *args):
        self._record(sql, args)
        return dict(self.row) if self.row is not None else None

    async def execute(self, sql, *args):
        self._record(sql, args)
        return self.affected

    @property
    def last_call(self):
        return self.calls[-1]


def bearer(user_id=7, user_name="alice", email="alice@example.com", role="user"):
    token = security.build_access_token(user_id=user_id, user_name=user_name, email=email, role=role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture
def client(fake_db, tmp_path, monkeypatch):
    monkeypatch.setenv("UPLOAD_DIR", str(tmp_path / "uploads"))
    app.dependency_overrides[db.get_database] = lambda: fake_db
    # The catch-all handler must answer instead of the exception reaching the test.
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


@pytest.fixture
def user_headers():
    return bearer()


@pytest.fixture
def admin_headers():
    return bearer(user_id=1, user_name="root", email="root@example.com", role="admin")


@pytest.fixture
def anyio_backend():
    return "asyncio"
