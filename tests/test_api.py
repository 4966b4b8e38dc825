"""End-to-end flow through the HTTP API on an in-memory database."""
from __future__ import annotations

from collections.abc import Iterator
from decimal import Decimal
from unittest.mock import create_autospec

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from dvfactor.core.security import AuthenticatedUser, get_authenticated_user
from dvfactor.main import create_app
from dvfactor.models import Base, PayoutTableEntry, Profile
from dvfactor.web.dependencies import get_db_session

ADMIN = AuthenticatedUser(user_id="admin-1", role="admin")
ALICE = AuthenticatedUser(user_id="alice", role="authenticated")
BOB = AuthenticatedUser(user_id="bob", role="authenticated")


class _Api:
    def __init__(self, client: TestClient, factory: sessionmaker) -> None:
        self.client = client
        self.factory = factory
        self.user = ADMIN

    def as_user(self, user: AuthenticatedUser) -> TestClient:
        self.user = user
        return self.client


@pytest.fixture()
def api() -> Iterator[_Api]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(engine)
    factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False, future=True)

    app = create_app()
    holder: dict[str, _Api] = {}

    def _session() -> Iterator[Session]:
        session = factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db_session] = _session
    app.dependency_overrides[get_authenticated_user] = lambda: holder["api"].user

    with TestClient(app) as client:
        holder["api"] = _Api(client, factory)
        yield holder["api"]
    engine.dispose()


def _seed_payout_table(factory: sessionmaker) -> None:
    with factory() as session:
        session.add_all(
            PayoutTableEntry(month=month, bettors_count=count, percentage=Decimal(percentage))
            for month in range(1, 13)
            for count, percentage in ((1, "50"), (2, "40"), (3, "20"))
        )
        session.commit()


def _open_edition(api: _Api) -> int:
    response = api.as_user(ADMIN).post(
        "/admin/editions",
        json={
            "year": 2026,
            "entry_fee": "3.00",
            "jackpot": "50.00",
            "start_date": "2026-01-01",
            "end_date": "2026-12-31",
        },
    )
    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "open"
    assert body["total_pool"] == "50.00"
    return body["id"]


def _add_employees(api: _Api, count: int = 5) -> list[int]:
    ids = []
    for index in range(count):
        response = api.as_user(ADMIN).post(
            "/admin/employees",
            json={"first_name": f"Name{index}", "last_name": f"Surname{index}"},
        )
        assert response.status_code == 201
        ids.append(response.json()["id"])
    return ids


def _enroll_and_pay(api: _Api, user: AuthenticatedUser, edition_id: int) -> dict:
    participant = api.as_user(user).post(f"/dashboard/editions/{edition_id}/participation").json()
    response = api.as_user(ADMIN).post(f"/admin/participants/{participant['id']}/confirm-payment")
    assert response.status_code == 200
    return response.json()


def test_full_edition_flow(api: _Api) -> None:
    _seed_payout_table(api.factory)
    edition_id = _open_edition(api)
    employees = _add_employees(api)

    assert api.as_user(ALICE).get("/dashboard/edition").json()["id"] == edition_id

    participant = api.as_user(ALICE).post(f"/dashboard/editions/{edition_id}/participation").json()
    assert participant["payment_status"] is False
    assert participant["payment_amount"] == "3.00"

    early = api.as_user(ALICE).put(
        f"/dashboard/editions/{edition_id}/bet",
        json={"employee_ids": employees[:3]},
    )
    assert early.status_code == 402
    assert early.json()["error"] == "PaymentRequiredError"

    paid = api.as_user(ADMIN).post(f"/admin/participants/{participant['id']}/confirm-payment").json()
    assert paid["total_pool"] == "53.00"
    assert paid["participant"]["payment_status"] is True
    assert _enroll_and_pay(api, BOB, edition_id)["total_pool"] == "56.00"

    alice_bet = api.as_user(ALICE).put(
        f"/dashboard/editions/{edition_id}/bet",
        json={"employee_ids": employees[:3]},
    )
    assert alice_bet.status_code == 200
    assert alice_bet.json()["employee_1"]["id"] == employees[0]
    bob_bet = api.as_user(BOB).put(
        f"/dashboard/editions/{edition_id}/bet",
        json={"employee_ids": [employees[0], employees[3], employees[4]], "chiringuito_employee_id": employees[0]},
    )
    assert bob_bet.status_code == 200
    assert bob_bet.json()["chiringuito"]["id"] == employees[0]

    hidden = api.as_user(ALICE).get(f"/dashboard/editions/{edition_id}/bets").json()
    assert [bet["user_id"] for bet in hidden] == ["alice"]

    revealed = api.as_user(ADMIN).post(f"/admin/editions/{edition_id}/reveal-bets").json()
    assert revealed == {"edition_id": edition_id, "revealed": 2}
    visible = api.as_user(ALICE).get(f"/dashboard/editions/{edition_id}/bets").json()
    assert sorted(bet["user_id"] for bet in visible) == ["alice", "bob"]

    resigned = api.as_user(ADMIN).post(
        f"/admin/employees/{employees[0]}/resignation",
        json={"resignation_date": "2026-03-15"},
    )
    assert resigned.json()["resignation_month"] == 3

    closed = api.as_user(ADMIN).post(f"/admin/editions/{edition_id}/status", json={"status": "closed"})
    assert closed.json()["status"] == "closed"

    report = api.as_user(ALICE).get(f"/editions/{edition_id}/payouts").json()
    assert report["total_pool"] == "56.00"
    assert report["events"][0]["attributable"] == "15.68"
    assert report["events"][0]["percentage"] == "40.00"
    assert report["totals"] == {"alice": "6.28", "bob": "9.40"}
    assert report["distributed"] == "15.68"
    assert report["unallocated"] == "40.32"


def test_bets_after_closing_are_rejected(api: _Api) -> None:
    edition_id = _open_edition(api)
    employees = _add_employees(api, 3)
    _enroll_and_pay(api, ALICE, edition_id)
    api.as_user(ADMIN).post(f"/admin/editions/{edition_id}/status", json={"status": "closed"})

    response = api.as_user(ALICE).put(
        f"/dashboard/editions/{edition_id}/bet",
        json={"employee_ids": employees},
    )

    assert response.status_code == 409
    assert response.json()["context"] == {"edition_id": str(edition_id), "status": "closed"}


def test_invalid_selection_is_unprocessable(api: _Api) -> None:
    edition_id = _open_edition(api)
    employees = _add_employees(api, 3)
    _enroll_and_pay(api, ALICE, edition_id)

    duplicate = api.as_user(ALICE).put(
        f"/dashboard/editions/{edition_id}/bet",
        json={"employee_ids": [employees[0], employees[0], employees[1]]},
    )
    too_few = api.as_user(ALICE).put(
        f"/dashboard/editions/{edition_id}/bet",
        json={"employee_ids": employees[:2]},
    )

    assert duplicate.status_code == 422
    assert duplicate.json()["error"] == "BetValidationError"
    assert too_few.status_code == 422


def test_admin_routes_require_admin_role(api: _Api) -> None:
    response = api.as_user(ALICE).get("/admin/editions")

    assert response.status_code == 403


def test_invalid_transition_conflicts(api: _Api) -> None:
    edition_id = _open_edition(api)

    response = api.as_user(ADMIN).post(f"/admin/editions/{edition_id}/status", json={"status": "finished"})

    assert response.status_code == 409
    assert response.json()["error"] == "InvalidTransitionError"


def test_pool_recalculation_endpoint(api: _Api) -> None:
    edition_id = _open_edition(api)
    _enroll_and_pay(api, ALICE, edition_id)

    response = api.as_user(ADMIN).post(f"/admin/editions/{edition_id}/recalculate-pool")

    assert response.json() == {"edition_id": edition_id, "total_pool": "53.00"}


def test_missing_payout_table_is_a_server_error(api: _Api) -> None:
    assert api.as_user(ALICE).get("/payout-table").status_code == 500

    _seed_payout_table(api.factory)
    rows = api.as_user(ALICE).get("/payout-table").json()

    assert len(rows) == 36
    assert rows[0] == {"month": 1, "bettors_count": 1, "percentage": "50.00"}


def _add_profile(factory: sessionmaker, user_id: str, *, is_admin: bool) -> None:
    with factory() as session:
        session.add(Profile(id=user_id, is_admin=is_admin))
        session.commit()


def test_admin_flag_on_profile_grants_admin_routes(api: _Api) -> None:
    _add_profile(api.factory, "alice", is_admin=True)

    response = api.as_user(ALICE).get("/admin/editions")

    assert response.status_code == 200
    assert response.json() == []


def test_profile_without_admin_flag_overrides_the_token_claim(api: _Api) -> None:
    _add_profile(api.factory, ADMIN.user_id, is_admin=False)

    response = api.as_user(ADMIN).get("/admin/editions")

    assert response.status_code == 403


def test_profile_can_be_read_and_renamed(api: _Api) -> None:
    created = api.as_user(ALICE).get("/dashboard/profile")
    assert created.status_code == 200
    assert created.json()["nickname"] is None
    assert created.json()["is_admin"] is False

    renamed = api.as_user(ALICE).patch("/dashboard/profile", json={"nickname": "alice_1", "full_name": "Alice"})
    assert renamed.status_code == 200
    assert renamed.json()["nickname"] == "alice_1"
    assert renamed.json()["full_name"] == "Alice"

    invalid = api.as_user(BOB).patch("/dashboard/profile", json={"nickname": "b!"})
    assert invalid.status_code == 422
    assert invalid.json()["error"] == "ProfileValidationError"

    taken = api.as_user(BOB).patch("/dashboard/profile", json={"nickname": "alice_1"})
    assert taken.status_code == 409
    assert taken.json()["error"] == "DuplicateRecordError"


def test_admin_lists_registered_users(api: _Api) -> None:
    api.as_user(ALICE).get("/dashboard/profile")
    api.as_user(BOB).patch("/dashboard/profile", json={"nickname": "bobby"})

    users = api.as_user(ADMIN).get("/admin/users")

    assert users.status_code == 200
    assert {user["id"]: user["nickname"] for user in users.json()} == {"alice": None, "bob": "bobby"}
    assert api.as_user(ALICE).get("/admin/users").status_code == 403


def test_unreachable_store_is_a_retryable_503() -> None:
    session = create_autospec(Session, instance=True)
    failure = OperationalError("SELECT", {}, Exception("server has gone away"))
    session.execute.side_effect = failure
    session.get.side_effect = failure
    app = create_app()
    app.dependency_overrides[get_db_session] = lambda: session
    app.dependency_overrides[get_authenticated_user] = lambda: ALICE

    with TestClient(app) as client:
        response = client.get("/dashboard/edition")

    assert response.status_code == 503
    assert response.json()["retryable"] is True
    assert response.json()["error"] == "DataStoreUnavailableError"
    assert response.headers["Retry-After"] == "5"


def test_dashboard_requires_a_bearer_token(monkeypatch) -> None:
    monkeypatch.setenv("AUTH_ENABLED", "1")
    app = create_app()
    app.dependency_overrides[get_db_session] = lambda: create_autospec(Session, instance=True)

    with TestClient(app) as client:
        assert client.get("/dashboard/edition").status_code == 401
        assert client.get("/dashboard/employees").status_code == 401
