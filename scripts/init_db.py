#!/usr/bin/env python3
"""Create the DV-Factor tables if they do not exist yet."""
from __future__ import annotations

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from dvfactor.core.log import get_logger  # noqa: E402
from dvfactor.db.engine import create_sync_engine  # noqa: E402
from dvfactor.models import Base  # noqa: E402

LOGGER = get_logger("dvfactor.scripts.init_db")


def main() -> None:
    engine = create_sync_engine()
    Base.metadata.create_all(engine)
    LOGGER.info("Created tables: %s", ", ".join(sorted(Base.metadata.tables)))


if __name__ == "__main__":
    main()
