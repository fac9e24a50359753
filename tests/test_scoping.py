import pytest

from cesi.models import User
from utils.access_control import scope_to_administrator, allowed_school_ids


@pytest.fixture()
def foreign(seed, school_setup):
    """A second administrator with its own school, teacher, classroom, tutor and student."""
    seed.admin(email="otra.admin@cesi.mx", name="Otra Admin")
    school_id = seed.school(admin_email="otra.admin@cesi.mx", name="Escuela Sur")
    teacher_id = seed.teacher(school_id, email="maestro.sur@cesi.mx", name="Jorge Ramírez")
    classroom_id = seed.classroom(school_id, teacher_id=teacher_id, name="2° B")
    tutor_id, tutor_user_id = seed.tutor(school_id, email="tutor.sur@cesi.mx", name="Carlos Pérez")
    student_id = seed.student(tutor_id, classroom_id, name="Mateo Pérez")
    return {
        "school_id": school_id,
        "teacher_id": teacher_id,
        "classroom_id": classroom_id,
        "tutor_id": tutor_id,
        "tutor_user_id": tutor_user_id,
        "student_id": student_id,
    }


def test_scope_to_administrator_returns_owned_schools(app, school_setup, foreign):
    with app.app_context():
        admin = User.query.filter_by(email="admin@cesi.mx").one()
        other = User.query.filter_by(email="otra.admin@cesi.mx").one()
        tutor = User.query.filter_by(email="tutor.sur@cesi.mx").one()

        assert scope_to_administrator(admin) == {school_setup["school_id"]}
        assert scope_to_administrator(other) == {foreign["school_id"]}
        assert scope_to_administrator(tutor) == set()
        assert allowed_school_ids(tutor) == {foreign["school_id"]}
        assert scope_to_administrator(None) == set()


def test_lists_exclude_other_administrators_rows(client, school_setup, foreign, admin_headers):
    schools = client.get("/escuelas/", headers=admin_headers).get_json()["escuelas"]
    assert [s["id"] for s in schools] == [school_setup["school_id"]]

    classrooms = client.get("/salones/", headers=admin_headers).get_json()["salones"]
    assert [c["id"] for c in classrooms] == [school_setup["classroom_id"]]

    teachers = client.get("/maestros/", headers=admin_headers).get_json()["maestros"]
    assert [t["id"] for t in teachers] == [school_setup["teacher_id"]]

    r = client.get(f"/salones/?school_id={foreign['school_id']}", headers=admin_headers)
    assert r.get_json()["salones"] == []


@pytest.mark.parametrize("path", [
    "/escuelas/{school_id}",
    "/salones/{classroom_id}",
    "/maestros/{teacher_id}",
    "/recogida/tutor/{tutor_id}",
    "/recogida/alumnos/{tutor_id}",
    "/pase/alumno/{student_id}",
    "/notificaciones/alumno/{student_id}",
    "/tutores/{tutor_user_id}",
])
def test_show_outside_scope_answers_404(client, foreign, admin_headers, path):
    r = client.get(path.format(**foreign), headers=admin_headers)
    assert r.status_code == 404


def test_pickups_by_status_outside_scope_is_empty(client, foreign, admin_headers):
    r = client.get(f"/recogida/estatus?status=pending&tutor_id={foreign['tutor_id']}", headers=admin_headers)
    assert r.status_code == 200
    assert r.get_json() == []


def test_cannot_attach_rows_to_foreign_school(client, school_setup, foreign, admin_headers):
    r = client.post("/salones/", json={"name": "3° C", "school_id": foreign["school_id"]}, headers=admin_headers)
    assert r.status_code == 422
    assert "school_id" in r.get_json()["errors"]

    r = client.post("/maestros/", json={
        "name": "Luis Torres", "email": "luis@cesi.mx", "password": "Secreta1!",
        "phone": "5551112222", "school_id": foreign["school_id"],
    }, headers=admin_headers)
    assert r.status_code == 422


def test_tutor_sees_only_itself(client, seed, school_setup, login):
    _, other_user_id = seed.tutor(school_setup["school_id"], email="vecino@cesi.mx", name="Mario Gómez")
    headers = login("tutor@cesi.mx")

    assert client.get(f"/tutores/{school_setup['tutor_user_id']}", headers=headers).status_code == 200
    assert client.get(f"/tutores/{other_user_id}", headers=headers).status_code == 404


def test_guardian_scope_follows_its_tutor(client, seed, school_setup, login):
    seed.guardian(school_setup["tutor_id"])
    headers = login("responsable@cesi.mx")

    r = client.get(f"/tutores/{school_setup['tutor_user_id']}/alumnos", headers=headers)
    assert r.status_code == 200
    assert [s["id"] for s in r.get_json()] == [school_setup["student_id"]]


def test_stored_files_of_other_schools_read_as_missing(app, client, foreign, admin_headers, login):
    foreign_headers = login("otra.admin@cesi.mx")
    r = client.get(f"/recogida/reporte/{foreign['tutor_id']}", headers=foreign_headers)
    assert r.status_code == 200

    r = client.get(f"/recogida/reportes/{foreign['tutor_id']}", headers=foreign_headers)
    path = r.get_json()[0]["report_pdf"]

    r = client.get(f"/uploads/{path}", headers=foreign_headers)
    assert r.status_code == 200
    assert r.data.startswith(b"%PDF")

    r = client.get(f"/uploads/{path}", headers=admin_headers)
    assert r.status_code == 404
    assert r.get_json()["error"] == "Archivo no encontrado"
