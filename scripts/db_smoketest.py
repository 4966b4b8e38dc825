"""Simple database connectivity check."""
from __future__ import annotations

import sys
from pathlib import Path

from sqlalchemy import text

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from dvfactor.core.config import get_settings  # noqa: E402  (import after sys.path manipulation)
from dvfactor.core.log import get_logger  # noqa: E402
from dvfactor.db.engine import create_sync_engine  # noqa: E402

LOGGER = get_logger("dvfactor.scripts.smoketest")


def main() -> None:
    settings = get_settings()
    engine = create_sync_engine()
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
        editions = conn.execute(text("SELECT COUNT(*) FROM game_editions")).scalar()
        payout_rows = conn.execute(text("SELECT COUNT(*) FROM payout_table")).scalar()
    LOGGER.info(
        "Connected via %s to %s:%s/%s (%s editions, %s payout table rows)",
        settings.database.driver,
        settings.database.host,
        settings.database.port,
        settings.database.name,
        editions,
        payout_rows,
    )


if __name__ == "__main__":
    main()
