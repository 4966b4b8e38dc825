from __future__ import annotations

from collections.abc import Iterator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from dvfactor.core.config import get_settings
from dvfactor.core.security import get_security_provider
from dvfactor.models import Base


@pytest.fixture()
def session() -> Iterator[Session]:
    """Provide an in-memory database session for each test."""

    engine = create_engine("sqlite:///:memory:", future=True)
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine, future=True)
    with SessionLocal() as session:
        yield session
    engine.dispose()


@pytest.fixture()
def session_factory(tmp_path) -> Iterator[sessionmaker]:
    """Sessions on one file database, for tests that need two connections."""

    engine = create_engine(f"sqlite:///{tmp_path / 'dvfactor.db'}", future=True)
    Base.metadata.create_all(engine)
    yield sessionmaker(bind=engine, expire_on_commit=False, future=True)
    engine.dispose()


@pytest.fixture(autouse=True)
def _reset_cached_settings() -> Iterator[None]:
    get_settings.cache_clear()
    get_security_provider.cache_clear()
    yield
    get_settings.cache_clear()
    get_security_provider.cache_clear()
