from conftest import PASSWORD
from cesi import create_app
from cesi.config import TestConfig
from cesi.extensions import db
from cesi.models import AuditLog


def test_login_returns_token_and_sets_cookies(client, school_setup):
    r = client.post("/auth/login", json={"email": "admin@cesi.mx", "password": PASSWORD})
    assert r.status_code == 200
    body = r.get_json()
    assert body["access_token"]
    assert body["user"]["role"] == "admin"
    cookies = " ".join(r.headers.getlist("Set-Cookie"))
    assert "access_token_cookie=" in cookies
    assert "refresh_token_cookie=" in cookies


def test_login_accepts_form_payload(client, school_setup):
    r = client.post("/auth/login", data={"email": "tutor@cesi.mx", "password": PASSWORD})
    assert r.status_code == 200
    assert r.get_json()["user"]["role"] == "tutor"


def test_login_rejects_bad_credentials(client, school_setup):
    r = client.post("/auth/login", json={"email": "admin@cesi.mx", "password": "Otra1234!"})
    assert r.status_code == 401
    assert r.get_json()["error"] == "Credenciales inválidas"


def test_login_requires_both_fields(client):
    r = client.post("/auth/login", json={"email": "admin@cesi.mx"})
    assert r.status_code == 400


def test_login_rejects_non_text_credentials(client, school_setup):
    r = client.post("/auth/login", json={"email": 123, "password": PASSWORD})
    assert r.status_code == 400

    r = client.post("/auth/login", json={"email": "admin@cesi.mx", "password": 12345678})
    assert r.status_code == 400


def test_me_and_logout_revokes_token(client, school_setup, login):
    headers = login("tutor@cesi.mx")

    r = client.get("/auth/me", headers=headers)
    assert r.status_code == 200
    assert r.get_json()["email"] == "tutor@cesi.mx"

    r = client.post("/auth/logout", headers=headers)
    assert r.status_code == 200

    r = client.get("/auth/me", headers=headers)
    assert r.status_code == 401


def test_protected_route_requires_token(client):
    r = client.get("/salones/")
    assert r.status_code == 401


def test_role_required_answers_403(client, school_setup, login):
    headers = login("tutor@cesi.mx")
    r = client.get("/escuelas/", headers=headers)
    assert r.status_code == 403


def test_login_events_are_audited(app, client, school_setup):
    client.post("/auth/login", json={"email": "admin@cesi.mx", "password": PASSWORD})
    client.post("/auth/login", json={"email": "admin@cesi.mx", "password": "Mala1234!"})

    with open(app.config["AUDIT_LOG_FILE"], encoding="utf-8") as fh:
        content = fh.read()
    assert "LOGIN_SUCCESS" in content
    assert "LOGIN_FAILED" in content


def test_cookie_authenticates_admin_views(client, school_setup):
    client.post("/auth/login", json={"email": "admin@cesi.mx", "password": PASSWORD})
    r = client.get("/admin/tutores/")
    assert r.status_code == 200
    assert "Ana López" in r.get_data(as_text=True)


def test_rate_limit_breach_is_recorded(tmp_path):
    class LimitedConfig(TestConfig):
        RATELIMIT_ENABLED = True
        UPLOAD_FOLDER = str(tmp_path / "uploads")
        AUDIT_LOG_FILE = str(tmp_path / "audit.log")

    app = create_app(LimitedConfig)
    client = app.test_client()

    statuses = [
        client.post("/auth/login", json={"email": "nadie@cesi.mx", "password": "Mala1234!"}).status_code
        for _ in range(6)
    ]
    assert statuses[:5] == [401] * 5
    assert statuses[5] == 429

    with app.app_context():
        log = AuditLog.query.one()
        assert log.action == "RATE_LIMIT_EXCEEDED: POST /auth/login"
        db.drop_all()
