import pytest
from fastapi.testclient import TestClient

from api import create_app
from store import ContactMessageStore, UserStore


@pytest.fixture
def db_file(tmp_path, request, monkeypatch):
    # Unique database file per test; the env var covers code that builds its own stores.
    path = str(tmp_path / f"test_{request.node.name}.db")
    monkeypatch.setenv("LIBRARY_DB_FILE", path)
    return path


@pytest.fixture
def users(db_file):
    return UserStore(db_file)


@pytest.fixture
def contacts(db_file):
    return ContactMessageStore(db_file)


@pytest.fixture
def client(db_file, tmp_path):
    app = create_app(db_file=db_file, static_dir=str(tmp_path / "no-static"))
    with TestClient(app) as test_client:
        yield test_client
