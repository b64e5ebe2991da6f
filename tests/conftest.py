from __future__ import annotations

import os
import tempfile
from pathlib import Path

import pytest


_DB_DIR = tempfile.mkdtemp(prefix="catalog-admin-tests-")

os.environ.setdefault("CATALOG_DB_URL", f"sqlite:///{Path(_DB_DIR) / 'test.sqlite3'}")
os.environ.setdefault("CATALOG_QUEUE_MODE", "inline")
os.environ.pop("REDIS_URL", None)


@pytest.fixture()
def client():
    from fastapi.testclient import TestClient

    from catalog_admin.db import engine
    from catalog_admin.main import app
    from catalog_admin.models import Base

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    with TestClient(app) as c:
        yield c
