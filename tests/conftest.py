from __future__ import annotations

import os
import tempfile
from typing import Generator, Any

# Point the app at a throwaway SQLite file before any familybudget import reads settings
_fd, _TEST_DB_PATH = tempfile.mkstemp(prefix="familybudget_test_", suffix=".sqlite3")
os.close(_fd)
os.environ["FB_DATABASE_URL"] = f"sqlite:///{_TEST_DB_PATH}"
os.environ["FB_BCRYPT_ROUNDS"] = "4"
os.environ["FB_JWT_SECRET"] = "test-secret"

import pytest
from sqlalchemy.orm import sessionmaker

from familybudget.core.database import Base, engine as app_engine, get_db
from familybudget.main import app
from familybudget import models  # noqa: F401 - register tables


@pytest.fixture(scope="session")
def engine() -> Generator[Any, Any, Any]:
    Base.metadata.create_all(app_engine)
    yield app_engine
    app_engine.dispose()
    for suffix in ("", "-wal", "-shm"):
        try:
            os.remove(_TEST_DB_PATH + suffix)
        except OSError:
            pass


@pytest.fixture(scope="function")
def db_session(engine) -> Generator[Any, Any, Any]:
    TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        # wipe every table so each test starts empty
        with engine.begin() as conn:
            if engine.dialect.name == "sqlite":
                conn.exec_driver_sql("PRAGMA foreign_keys=OFF")
            for tbl in reversed(Base.metadata.sorted_tables):
                conn.execute(tbl.delete())
            if engine.dialect.name == "sqlite":
                conn.exec_driver_sql("PRAGMA foreign_keys=ON")


@pytest.fixture(autouse=True)
def override_dependency(db_session):
    # FastAPI DI override
    def _get_db_override():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = _get_db_override
    yield
    app.dependency_overrides.clear()


@pytest.fixture()
def client(db_session):
    from fastapi.testclient import TestClient
    with TestClient(app) as c:
        yield c


def register_family(
    client,
    *,
    email: str,
    account_name: str,
    full_name: str = "Test User",
    password: str = "secret123",
    join: bool = False,
) -> dict:
    r = client.post(
        "/api/auth/register",
        json={
            "email": email,
            "password": password,
            "confirm_password": password,
            "full_name": full_name,
            "account_name": account_name,
            "is_joining_family": join,
        },
    )
    assert r.status_code == 201, r.text
    body = r.json()
    body["headers"] = {"Authorization": f"Bearer {body['token']}"}
    return body


@pytest.fixture()
def family(client) -> dict:
    return register_family(client, email="anna@example.com", account_name="Smith Family", full_name="Anna Smith")


@pytest.fixture()
def auth_headers(family) -> dict[str, str]:
    return family["headers"]


@pytest.fixture()
def other_family(client) -> dict:
    return register_family(client, email="bob@example.com", account_name="Jones Family", full_name="Bob Jones")


@pytest.fixture()
def categories(client, auth_headers) -> dict[str, dict]:
    rows = client.get("/api/categories", headers=auth_headers).json()
    return {row["name"]: row for row in rows}


def add_txn(client, headers, category_id: str, amount: float, on: str, description: str = "") -> dict:
    r = client.post(
        "/api/transactions",
        headers=headers,
        json={
            "amount": amount,
            "category_id": category_id,
            "description": description,
            "transaction_date": on,
        },
    )
    assert r.status_code == 201, r.text
    return r.json()
