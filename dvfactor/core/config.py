"""Configuration system for the DV-Factor service."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from functools import lru_cache
import os
from pathlib import Path
from typing import Tuple

from dotenv import load_dotenv

# Load .env file from project root
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


@dataclass(slots=True)
class DatabaseSettings:
    """Connection details for the relational store."""

    driver: str
    host: str
    port: int
    user: str
    password: str
    name: str
    connect_timeout: int = 10
    url_override: str | None = None

    @property
    def sqlalchemy_url(self) -> str:
        """Build a SQLAlchemy compatible URL."""

        if self.url_override:
            return self.url_override
        if self.password:
            credentials = f"{self.user}:{self.password}"
        else:
            credentials = self.user
        return f"{self.driver}://{credentials}@{self.host}:{self.port}/{self.name}"


@dataclass(slots=True)
class AuthSettings:
    """Bearer token validation settings for the external identity provider."""

    secret_key: str
    algorithm: str
    admin_role: str = "admin"
    enabled: bool = True


@dataclass(slots=True)
class GameSettings:
    """Payout rules shared by every edition."""

    rank_shares: tuple[Decimal, ...]
    bonus_share: Decimal
    currency_symbol: str = "€"


@dataclass(slots=True)
class Settings:
    """Top-level application configuration container."""

    database: DatabaseSettings
    auth: AuthSettings
    game: GameSettings
    sqlalchemy_echo: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        """Load configuration values from environment variables."""

        def _get_env(name: str, default: str) -> str:
            return os.getenv(name, default)

        def _parse_percentage(raw: str, name: str) -> Decimal:
            try:
                value = Decimal(raw.strip())
            except InvalidOperation as exc:
                raise ValueError(f"{name} must be a decimal percentage, got {raw!r}.") from exc
            if value < 0 or value > 100:
                raise ValueError(f"{name} must lie between 0 and 100, got {value}.")
            return value

        def _parse_rank_shares(value: str) -> Tuple[Decimal, ...]:
            shares = tuple(
                _parse_percentage(item, "PAYOUT_RANK_SHARES")
                for item in value.split(",")
                if item.strip()
            )
            if not shares:
                raise ValueError("At least one rank share must be configured.")
            if sum(shares) > 100:
                raise ValueError("Rank shares must not add up to more than 100.")
            return shares

        db = DatabaseSettings(
            driver=_get_env("DB_DRIVER", "mysql+pymysql"),
            host=_get_env("DB_HOST", "127.0.0.1"),
            port=int(_get_env("DB_PORT", "3306")),
            user=_get_env("DB_USER", "dvfactor"),
            password=_get_env("DB_PASSWORD", "dvfactor"),
            name=_get_env("DB_NAME", "dvfactor"),
            connect_timeout=int(_get_env("DB_CONNECT_TIMEOUT", "10")),
            url_override=_get_env("DATABASE_URL", "") or None,
        )
        echo_flag = _get_env("SQLALCHEMY_ECHO", "0")
        auth = AuthSettings(
            secret_key=_get_env("JWT_SECRET_KEY", "change-me"),
            algorithm=_get_env("JWT_ALGORITHM", "HS256"),
            admin_role=_get_env("ADMIN_ROLE", "admin"),
            enabled=_get_env("AUTH_ENABLED", "1") not in {"0", "false", "False"},
        )
        game = GameSettings(
            rank_shares=_parse_rank_shares(_get_env("PAYOUT_RANK_SHARES", "70,25,5")),
            bonus_share=_parse_percentage(_get_env("PAYOUT_BONUS_SHARE", "60"), "PAYOUT_BONUS_SHARE"),
            currency_symbol=_get_env("CURRENCY_SYMBOL", "€"),
        )
        return cls(
            database=db,
            auth=auth,
            game=game,
            sqlalchemy_echo=echo_flag not in {"0", "false", "False"},
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached ``Settings`` instance."""

    settings = Settings.from_env()

    # Import locally to avoid circular dependencies during module import time.
    from .log import get_logger

    logger = get_logger(__name__)
    logger.debug(
        "Settings initialised",
        extra={
            "sqlalchemy_echo": settings.sqlalchemy_echo,
            "database": {
                "driver": settings.database.driver,
                "host": settings.database.host,
                "port": settings.database.port,
                "name": settings.database.name,
                "user": settings.database.user,
            },
            "auth": {
                "algorithm": settings.auth.algorithm,
                "admin_role": settings.auth.admin_role,
                "enabled": settings.auth.enabled,
            },
            "game": {
                "rank_shares": [str(share) for share in settings.game.rank_shares],
                "bonus_share": str(settings.game.bonus_share),
            },
        },
    )
    return settings
