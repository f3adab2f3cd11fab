from sqlalchemy import inspect

from helpdesk import database as app_db
from helpdesk.config import get_settings, settings
from helpdesk.models import ServiceModel, UserModel
from helpdesk.seed import DEMO_ACCOUNTS, DEMO_PASSWORD, DEMO_SERVICES


def test_init_db_creates_tables(tmp_path):
    test_engine = app_db.make_engine(f"sqlite:///{(tmp_path / 'init.db').as_posix()}")

    # Replace engine temporarily
    original_engine = app_db.engine
    app_db.engine = test_engine
    try:
        app_db.init_db()

        tables = inspect(test_engine).get_table_names()
        for name in ("users", "technician_availability", "services", "tickets", "ticket_services"):
            assert name in tables
    finally:
        app_db.engine = original_engine
        test_engine.dispose()


def test_seed_endpoint_is_hidden_by_default(client):
    r = client.post("/system/seed")
    assert r.status_code == 404
    assert r.json()["error"]["code"] == "not_found"


def test_seed_endpoint_creates_expected_data_and_is_idempotent(client, db_session):
    client.app.dependency_overrides[get_settings] = lambda: settings.model_copy(update={"allow_seed": True})
    try:
        r1 = client.post("/system/seed")
        assert r1.status_code == 200
        payload1 = r1.json()
        assert payload1["message"] == "Seed completed"
        assert payload1["data"] == {"users": len(DEMO_ACCOUNTS), "services": len(DEMO_SERVICES)}

        assert db_session.query(UserModel).filter_by(role="tech").count() == 2
        assert db_session.query(ServiceModel).filter_by(title="VPN").count() == 1

        # Seeded technicians get the default availability and can log in
        r = client.post("/users/login", json={"email": "tech1@helpdesk.example.com", "password": DEMO_PASSWORD})
        assert r.status_code == 200

        r2 = client.post("/system/seed")
        assert r2.status_code == 200
        assert r2.json()["data"] == {"users": 0, "services": 0}

        assert db_session.query(UserModel).count() == len(DEMO_ACCOUNTS)
        assert db_session.query(ServiceModel).count() == len(DEMO_SERVICES)
    finally:
        client.app.dependency_overrides.pop(get_settings, None)


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}
