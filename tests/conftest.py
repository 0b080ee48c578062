"""
Shared pytest fixtures for string analyzer tests.

Apps are built with an explicit store so no test touches a real database file.
"""

import pytest
from fastapi.testclient import TestClient

from string_analyzer.crud import InMemoryStringStore, SQLStringStore
from string_analyzer.main import create_app


@pytest.fixture
def memory_store():
    return InMemoryStringStore()


@pytest.fixture
def sql_store():
    store = SQLStringStore.from_url("sqlite://")
    store.init()
    return store


@pytest.fixture
def client(memory_store):
    return TestClient(create_app(memory_store))


@pytest.fixture
def sql_client(sql_store):
    return TestClient(create_app(sql_store))
