import os

import pytest

os.environ.setdefault("GRADEBOOK_STORAGE", "memory")

from gradebook.database import MemoryBackend, RecordStore  # noqa: E402
from gradebook.directory import StudentDirectory  # noqa: E402
from gradebook.service import Gradebook  # noqa: E402


@pytest.fixture
def backend():
    return MemoryBackend()


@pytest.fixture
def store(backend):
    return RecordStore(backend)


@pytest.fixture
def directory(store):
    return StudentDirectory(store)


@pytest.fixture
def book(store):
    return Gradebook(store)


@pytest.fixture
def client(book):
    from fastapi.testclient import TestClient
    from gradebook.main import app, get_book

    app.dependency_overrides[get_book] = lambda: book
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
