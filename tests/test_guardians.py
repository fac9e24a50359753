from conftest import PASSWORD
from cesi.extensions import db
from cesi.models import Guardian, User, RoleEnum


def _guardian_payload(**overrides):
    data = {
        "name": "Pedro Ruiz",
        "email": "pedro@cesi.mx",
        "password": PASSWORD,
        "phone": "5559876543",
    }
    data.update(overrides)
    return data


def test_admin_creates_inactive_guardian_for_tutor(app, client, school_setup, admin_headers):
    payload = _guardian_payload(tutor_id=school_setup["tutor_id"])
    r = client.post("/responsables/", json=payload, headers=admin_headers)
    assert r.status_code == 201
    body = r.get_json()["responsable"]
    assert body["active"] is False
    assert body["tutor_id"] == school_setup["tutor_id"]

    with app.app_context():
        user = User.query.filter_by(email="pedro@cesi.mx").one()
        assert user.role == RoleEnum.guardian


def test_tutor_creates_guardian_for_itself(client, school_setup, login):
    headers = login("tutor@cesi.mx")
    r = client.post("/responsables/", json=_guardian_payload(active=True), headers=headers)
    assert r.status_code == 201
    body = r.get_json()["responsable"]
    assert body["tutor_id"] == school_setup["tutor_id"]
    assert body["active"] is True


def test_create_guardian_validates_fields(client, school_setup, admin_headers):
    payload = _guardian_payload(tutor_id=school_setup["tutor_id"], name="Pedro 2", phone="55-12")
    r = client.post("/responsables/", json=payload, headers=admin_headers)
    assert r.status_code == 422
    errors = r.get_json()["errors"]
    assert "name" in errors
    assert "phone" in errors


def test_non_text_email_and_password_are_field_errors(client, school_setup, login):
    headers = login("tutor@cesi.mx")
    r = client.post("/responsables/", json=_guardian_payload(email=123, password=12345678), headers=headers)
    assert r.status_code == 422
    errors = r.get_json()["errors"]
    assert errors["email"] == ["El campo correo electrónico debe ser una cadena de texto."]
    assert errors["password"] == ["El campo contraseña debe ser una cadena de texto."]


def test_non_text_school_color_is_a_field_error(client, school_setup, admin_headers):
    r = client.put(f"/escuelas/{school_setup['school_id']}", json={"color1": 112233}, headers=admin_headers)
    assert r.status_code == 422
    assert "color1" in r.get_json()["errors"]


def test_self_registration_starts_inactive(app, client, school_setup):
    payload = _guardian_payload(tutor_id=school_setup["tutor_id"])
    r = client.post("/registro/", json=payload)
    assert r.status_code == 201
    assert r.get_json()["responsable"]["active"] is False

    r = client.post("/registro/", json=_guardian_payload(tutor_id=9999, email="otro@cesi.mx"))
    assert r.status_code == 404


def test_activation_removes_guardian_from_inactive_listing(client, seed, school_setup, admin_headers):
    guardian_id = seed.guardian(school_setup["tutor_id"], active=False)

    r = client.get("/dashboard/responsables-inactivos", headers=admin_headers)
    assert r.status_code == 200
    assert [g["id"] for g in r.get_json()["responsables"]] == [guardian_id]

    r = client.post(f"/responsables/{guardian_id}/activar", headers=admin_headers)
    assert r.status_code == 200
    assert r.get_json()["responsable"]["active"] is True

    r = client.get("/dashboard/responsables-inactivos", headers=admin_headers)
    assert r.get_json() == {"responsables": [], "total": 0}


def test_admin_view_activation(app, client, seed, school_setup, admin_headers):
    guardian_id = seed.guardian(school_setup["tutor_id"], active=False)

    r = client.get("/admin/responsables/", headers=admin_headers)
    assert r.status_code == 200
    assert "Pedro Ruiz" in r.get_data(as_text=True)

    r = client.post(f"/admin/responsables/{guardian_id}/activar", headers=admin_headers)
    assert r.status_code == 302
    with app.app_context():
        assert db.session.get(Guardian, guardian_id).active is True


def test_update_guardian_keeps_password_when_blank(app, client, seed, school_setup, admin_headers):
    guardian_id = seed.guardian(school_setup["tutor_id"])
    with app.app_context():
        before = User.query.filter_by(email="responsable@cesi.mx").one().password_hash

    payload = _guardian_payload(email="responsable@cesi.mx", password="", name="Pedro Ruiz Soto")
    r = client.put(f"/responsables/{guardian_id}", json=payload, headers=admin_headers)
    assert r.status_code == 200
    assert r.get_json()["responsable"]["name"] == "Pedro Ruiz Soto"

    with app.app_context():
        user = User.query.filter_by(email="responsable@cesi.mx").one()
        assert user.password_hash == before
        assert user.name == "Pedro Ruiz Soto"


def test_delete_guardian_removes_credential(app, client, seed, school_setup, admin_headers):
    guardian_id = seed.guardian(school_setup["tutor_id"])

    r = client.delete(f"/responsables/{guardian_id}", headers=admin_headers)
    assert r.status_code == 200
    with app.app_context():
        assert User.query.filter_by(email="responsable@cesi.mx").count() == 0

    r = client.delete(f"/responsables/{guardian_id}", headers=admin_headers)
    assert r.status_code == 404


def test_tutor_mirror_cannot_be_changed_as_guardian(app, client, school_setup, admin_headers):
    with app.app_context():
        mirror_id = Guardian.query.filter_by(email="tutor@cesi.mx").one().id

    r = client.delete(f"/responsables/{mirror_id}", headers=admin_headers)
    assert r.status_code == 422

    r = client.put(f"/responsables/{mirror_id}", json=_guardian_payload(email="tutor@cesi.mx"),
                   headers=admin_headers)
    assert r.status_code == 422

    with app.app_context():
        assert Guardian.query.filter_by(email="tutor@cesi.mx").count() == 1
        assert User.query.filter_by(email="tutor@cesi.mx").count() == 1


def test_tutor_only_reaches_own_guardians(client, seed, school_setup, login):
    other_tutor_id, _ = seed.tutor(school_setup["school_id"], email="otro@cesi.mx", name="Mario Gómez")
    foreign_id = seed.guardian(other_tutor_id)

    headers = login("tutor@cesi.mx")
    assert client.get(f"/responsables/{foreign_id}", headers=headers).status_code == 404
    assert client.post(f"/responsables/{foreign_id}/activar", headers=headers).status_code == 404


def test_school_colors_for_guardian(client, seed, school_setup, admin_headers):
    guardian_id = seed.guardian(school_setup["tutor_id"])
    r = client.get(f"/responsables/{guardian_id}/school-colors", headers=admin_headers)
    assert r.status_code == 200
    body = r.get_json()
    assert body["escuela"] == "Escuela Norte"
    assert body["colores"]["color1"] == "#112233"
