from __future__ import annotations

import logging

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session

from dvfactor.core.log import log_context, timeit
from dvfactor.core.log.context import ContextFilter


class _ListHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__()
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


@pytest.fixture()
def captured() -> tuple[logging.Logger, _ListHandler]:
    logger = logging.getLogger("tests.timing")
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    handler = _ListHandler()
    handler.addFilter(ContextFilter())
    logger.addHandler(handler)
    yield logger, handler
    logger.removeHandler(handler)


def test_scopes_nest_and_restore() -> None:
    with log_context.scope(edition_id=3):
        with log_context.scope(user_id="alice", participant_id=None):
            assert log_context.as_dict() == {"edition_id": 3, "user_id": "alice"}
        assert log_context.as_dict() == {"edition_id": 3}
    assert log_context.as_dict() == {}


def test_records_carry_bound_identifiers(captured) -> None:
    logger, handler = captured

    with log_context.scope(edition_id=7):
        logger.info("inside")
    logger.info("outside")

    assert handler.records[0].context == "[edition_id=7] "
    assert handler.records[1].context == ""


def test_timeit_reports_items(captured) -> None:
    logger, handler = captured

    with timeit("Settlement", logger=logger, level=logging.INFO, unit="bets") as timer:
        timer.set_total(12)

    message = handler.records[-1].getMessage()
    assert message.startswith("Settlement took ")
    assert "12 bets" in message


def test_timeit_logs_failures(captured) -> None:
    logger, handler = captured

    with pytest.raises(RuntimeError):
        with timeit("Settlement", logger=logger):
            raise RuntimeError("boom")

    assert handler.records[-1].levelno == logging.ERROR
    assert "failed after" in handler.records[-1].getMessage()


def test_timeit_counts_statements_of_its_own_session(captured, tmp_path) -> None:
    logger, handler = captured
    engine = create_engine(f"sqlite:///{tmp_path / 'timing.db'}", future=True)

    with Session(engine) as mine, Session(engine) as other:
        with timeit("Report", logger=logger, level=logging.INFO, session=mine):
            mine.execute(text("SELECT 1"))
            mine.execute(text("SELECT 2"))
            other.execute(text("SELECT 3"))
    engine.dispose()

    assert "2 SQL statements" in handler.records[-1].getMessage()
