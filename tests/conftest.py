# tests/conftest.py
from __future__ import annotations

from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from product_api.core.settings import Settings
from product_api.database import build_engine, build_session_factory, init_db
from product_api.main import create_app
from product_api.repositories import InMemoryProductRepository, SqlProductRepository

SERVICE_NAME = "product-api-test"


@pytest.fixture()
def settings() -> Settings:
    return Settings(SERVICE_NAME=SERVICE_NAME, REPOSITORY_BACKEND="memory", CORS_ORIGINS="")


@pytest.fixture()
def repo() -> InMemoryProductRepository:
    return InMemoryProductRepository()


@pytest.fixture()
def client(repo: InMemoryProductRepository, settings: Settings) -> Iterator[TestClient]:
    """In-process client over a fresh in-memory repository."""
    with TestClient(create_app(repository=repo, settings=settings)) as c:
        yield c


@pytest.fixture()
def sql_repo() -> SqlProductRepository:
    """SQL repository on a private in-memory SQLite database."""
    engine = build_engine("sqlite://", echo=False)
    init_db(engine)
    return SqlProductRepository(build_session_factory(engine))


@pytest.fixture()
def sql_client(sql_repo: SqlProductRepository, settings: Settings) -> Iterator[TestClient]:
    with TestClient(create_app(repository=sql_repo, settings=settings)) as c:
        yield c
