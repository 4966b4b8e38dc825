"""Base declarative class for SQLAlchemy models."""
from __future__ import annotations

from sqlalchemy import BigInteger, Integer, Numeric
from sqlalchemy.orm import DeclarativeBase

_ID_TYPE = BigInteger().with_variant(Integer, "sqlite")
_MONEY_TYPE = Numeric(10, 2, asdecimal=True)


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""

    pass
