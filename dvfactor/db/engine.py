"""Database engine factories."""
from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url

from dvfactor.core.config import get_settings
from dvfactor.core.log import get_logger

LOGGER = get_logger(__name__)


def get_sqlalchemy_url() -> str:
    """Return the configured SQLAlchemy URL."""

    settings = get_settings()
    return settings.database.sqlalchemy_url


def _timeout_connect_args(url: str, timeout: int) -> dict[str, object]:
    """Driver specific arguments bounding how long a connection may block."""

    backend = make_url(url).get_backend_name()
    if backend == "mysql":
        return {"connect_timeout": timeout, "read_timeout": timeout, "write_timeout": timeout}
    if backend == "postgresql":
        return {"connect_timeout": timeout}
    if backend == "sqlite":
        return {"timeout": timeout}
    return {}


def create_sync_engine(url: str | None = None, **kwargs) -> Engine:
    """Create a synchronous SQLAlchemy engine using configured defaults."""

    settings = get_settings()
    resolved_url = url or settings.database.sqlalchemy_url

    options = dict(kwargs)
    options.setdefault("echo", settings.sqlalchemy_echo)
    options.setdefault("connect_args", _timeout_connect_args(resolved_url, settings.database.connect_timeout))
    if make_url(resolved_url).get_backend_name() != "sqlite":
        options.setdefault("pool_pre_ping", True)
        options.setdefault("pool_timeout", settings.database.connect_timeout)

    LOGGER.debug(
        "Creating SQLAlchemy engine",
        extra={"url": make_url(resolved_url).render_as_string(hide_password=True), "options": options},
    )
    return create_engine(resolved_url, future=True, **options)
