"""Shared fixtures: in-memory SQL store, fake Firestore client, API client."""

import os

# Configuration is read at import time, so set it before importing moodiary.
os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["MOODIARY_TIMEZONE"] = "Asia/Ho_Chi_Minh"
os.environ["ENTRY_STORE"] = "sql"
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["FERNET_SECRET"] = "YWFhYWFhYWFhYWFhYWFhYWFhYWFhYWFhYWFhYWFhYWE="
os.environ["RATE_LIMIT"] = "1000/minute"

from datetime import datetime

import pytest
import pytz
from google.api_core import exceptions as google_exceptions
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from moodiary.models import database
from moodiary.models import *  # noqa: F401,F403 registers all models
from moodiary.services.entry_repository import SqlEntryRepository
from moodiary.utils.errors import CacheWriteFailed, RepositoryUnavailable

# 2024-01-05 10:00 in Ho Chi Minh City (UTC+7)
NOW = datetime(2024, 1, 5, 3, 0, tzinfo=pytz.utc)


@pytest.fixture()
def now():
    return NOW


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    database.Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def repo(engine):
    return SqlEntryRepository(sessionmaker(autocommit=False, autoflush=False, bind=engine))


# ---- failure injection ----


class FlakyRepository:
    """Wraps a repository and fails the named methods."""

    def __init__(self, inner, failing=()):
        self.inner = inner
        self.failing = set(failing)
        self.calls = []

    def __getattr__(self, name):
        method = getattr(self.inner, name)

        def wrapper(*args, **kwargs):
            self.calls.append(name)
            if name in self.failing:
                if name == "write_streak_cache":
                    raise CacheWriteFailed("write refused")
                raise RepositoryUnavailable(f"{name} unreachable")
            return method(*args, **kwargs)

        return wrapper


@pytest.fixture()
def flaky(repo):
    def build(*failing):
        return FlakyRepository(repo, failing)
    return build


# ---- fake Firestore ----


class FakeSnapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return dict(self._data) if self._data is not None else None


class FakeDocument:
    def __init__(self, client, path):
        self.client = client
        self.path = path
        self.id = path.rsplit("/", 1)[-1]

    def collection(self, name):
        return FakeCollection(self.client, f"{self.path}/{name}")

    def get(self):
        self.client.check()
        return FakeSnapshot(self.id, self.client.docs.get(self.path))

    def set(self, data, merge=False):
        self.client.check()
        if merge and self.path in self.client.docs:
            self.client.docs[self.path] = {**self.client.docs[self.path], **data}
        else:
            self.client.docs[self.path] = dict(data)

    def delete(self):
        self.client.check()
        self.client.docs.pop(self.path, None)


OPS = {
    ">=": lambda a, b: a >= b,
    "<=": lambda a, b: a <= b,
    "==": lambda a, b: a == b,
}


class FakeQuery:
    def __init__(self, collection, filters=(), order=None):
        self.collection = collection
        self.filters = list(filters)
        self.order = order

    def where(self, filter):
        return FakeQuery(self.collection, self.filters + [filter], self.order)

    def order_by(self, field):
        return FakeQuery(self.collection, self.filters, field)

    def _matches(self, data):
        return all(OPS[f.op_string](data.get(f.field_path), f.value) for f in self.filters)

    def stream(self):
        snaps = [s for s in self.collection.stream() if self._matches(s.to_dict())]
        if self.order:
            snaps.sort(key=lambda s: s.to_dict()[self.order])
        return iter(snaps)


class FakeCollection:
    def __init__(self, client, path):
        self.client = client
        self.path = path

    def document(self, doc_id):
        return FakeDocument(self.client, f"{self.path}/{doc_id}")

    def where(self, filter):
        return FakeQuery(self).where(filter=filter)

    def _child_ids(self):
        prefix = self.path + "/"
        return sorted({p[len(prefix):].split("/", 1)[0] for p in self.client.docs if p.startswith(prefix)})

    def stream(self):
        self.client.check()
        prefix = self.path + "/"
        return iter([
            FakeSnapshot(doc_id, self.client.docs[prefix + doc_id])
            for doc_id in self._child_ids()
            if prefix + doc_id in self.client.docs
        ])

    def list_documents(self):
        self.client.check()
        return [self.document(doc_id) for doc_id in self._child_ids()]


class FakeFirestoreClient:
    def __init__(self):
        self.docs = {}
        self.fail = False

    def check(self):
        if self.fail:
            raise google_exceptions.ServiceUnavailable("firestore down")

    def collection(self, name):
        return FakeCollection(self, name)


@pytest.fixture()
def firestore_client():
    return FakeFirestoreClient()


# ---- API ----


@pytest.fixture()
def api(repo):
    from fastapi.testclient import TestClient

    from moodiary.auth import get_repo
    from moodiary.main import app

    app.dependency_overrides[get_repo] = lambda: repo
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def auth_headers():
    from moodiary.utils.jwt_utils import create_access_token

    def build(account_id="alice"):
        return {"Authorization": f"Bearer {create_access_token({'sub': account_id})}"}
    return build
