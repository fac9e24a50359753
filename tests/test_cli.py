from conftest import PASSWORD
from cesi.models import User, Administrator, School, Tutor, Guardian, Student, RoleEnum


def test_create_admin_command(app):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["create-admin", "--name", "Directora General",
                                 "--email", "directora@cesi.mx", "--password", PASSWORD])
    assert result.exit_code == 0, result.output
    assert "directora@cesi.mx" in result.output

    with app.app_context():
        user = User.query.filter_by(email="directora@cesi.mx").one()
        assert user.role == RoleEnum.admin
        assert Administrator.query.filter_by(email="directora@cesi.mx").count() == 1


def test_create_admin_rejects_weak_password(app):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["create-admin", "--name", "Directora General",
                                 "--email", "directora@cesi.mx", "--password", "debil"])
    assert result.exit_code != 0
    assert "password" in result.output

    with app.app_context():
        assert User.query.count() == 0


def test_seed_is_idempotent(app):
    runner = app.test_cli_runner()
    first = runner.invoke(args=["seed"])
    assert first.exit_code == 0, first.output
    assert "schools: 2" in first.output

    second = runner.invoke(args=["seed"])
    assert "schools: 0" in second.output

    with app.app_context():
        assert School.query.count() == 2
        assert Student.query.count() == 4
        for tutor in Tutor.query.all():
            assert Guardian.query.filter_by(email=tutor.email, active=True).count() == 1
            assert User.query.filter_by(email=tutor.email, role=RoleEnum.tutor).count() == 1


def test_seeded_admin_can_log_in(app, client, monkeypatch):
    monkeypatch.setenv("ADMIN_PASSWORD", PASSWORD)
    app.test_cli_runner().invoke(args=["seed"])

    r = client.post("/auth/login", json={"email": "admin@cesi.mx", "password": PASSWORD})
    assert r.status_code == 200
    r = client.get("/escuelas/", headers={"Authorization": f"Bearer {r.get_json()['access_token']}"})
    assert len(r.get_json()["escuelas"]) == 2
