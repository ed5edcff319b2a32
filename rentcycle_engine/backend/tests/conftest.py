# backend/tests/conftest.py
from __future__ import annotations

import os
import tempfile

# Must run before anything imports rentcycle.config
_DB_DIR = tempfile.mkdtemp(prefix="rentcycle-tests-")
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(_DB_DIR, "test.db")

import pytest  # noqa: E402

from rentcycle.db import Base, SessionLocal, engine, init_db  # noqa: E402

init_db()


@pytest.fixture(autouse=True)
def _clean_tables():
    yield
    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture
def db():
    s = SessionLocal()
    try:
        yield s
    finally:
        s.close()
