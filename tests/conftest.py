import io
import pytest
from PIL import Image

from cesi import create_app
from cesi.config import TestConfig
from cesi.commands import create_administrator
from cesi.extensions import db
from cesi.models import (
    User, Administrator, RoleEnum, School, SchoolBranding, Classroom, Teacher, Tutor, Guardian,
    Student,
)

PASSWORD = "Secreta1!"


def png_bytes(size=(32, 32), color=(30, 90, 160)):
    buf = io.BytesIO()
    Image.new("RGB", size, color=color).save(buf, format="PNG")
    return buf.getvalue()


def padded_png(total_size):
    """A valid PNG followed by filler bytes, exactly ``total_size`` bytes long."""
    data = png_bytes()
    return data + b"\0" * (total_size - len(data))


def photo(data=None, filename="foto.png"):
    return (io.BytesIO(data if data is not None else png_bytes()), filename)


class Seeder:
    """Inserts rows directly and hands back plain ids."""

    def __init__(self, app):
        self.app = app

    def admin(self, email="admin@cesi.mx", name="Admin Principal"):
        with self.app.app_context():
            return create_administrator(name, email, PASSWORD).id

    def school(self, admin_email="admin@cesi.mx", name="Escuela Norte", branding=True):
        with self.app.app_context():
            admin = Administrator.query.filter_by(email=admin_email).one()
            school = School(name=name, address="Calle Uno 10", administrator=admin)
            db.session.add(school)
            if branding:
                db.session.add(SchoolBranding(school=school, color1="#112233", color2="#445566", color3="#778899"))
            db.session.commit()
            return school.id

    def teacher(self, school_id, email="maestra@cesi.mx", name="Laura Méndez"):
        with self.app.app_context():
            teacher = Teacher(name=name, email=email, phone="5550001111", school_id=school_id)
            user = User(name=name, email=email, role=RoleEnum.teacher)
            user.set_password(PASSWORD)
            db.session.add_all([teacher, user])
            db.session.commit()
            return teacher.id

    def tutor(self, school_id, email="tutor@cesi.mx", name="Ana López"):
        """Returns ``(tutor_id, credential_id)``; the mirrored guardian is created too."""
        with self.app.app_context():
            tutor = Tutor(name=name, email=email, phone="5551234567", school_id=school_id)
            mirror = Guardian(name=name, email=email, phone="5551234567", active=True, tutor=tutor)
            user = User(name=name, email=email, role=RoleEnum.tutor)
            user.set_password(PASSWORD)
            db.session.add_all([tutor, mirror, user])
            db.session.commit()
            return tutor.id, user.id

    def guardian(self, tutor_id, email="responsable@cesi.mx", name="Pedro Ruiz", active=True):
        with self.app.app_context():
            guardian = Guardian(name=name, email=email, phone="5559876543", active=active, tutor_id=tutor_id)
            user = User(name=name, email=email, role=RoleEnum.guardian)
            user.set_password(PASSWORD)
            db.session.add_all([guardian, user])
            db.session.commit()
            return guardian.id

    def classroom(self, school_id, teacher_id=None, name="1° A"):
        with self.app.app_context():
            classroom = Classroom(name=name, grade="1°", school_id=school_id, teacher_id=teacher_id)
            db.session.add(classroom)
            db.session.commit()
            return classroom.id

    def student(self, tutor_id, classroom_id, name="Sofía López"):
        with self.app.app_context():
            student = Student(name=name, tutor_id=tutor_id, classroom_id=classroom_id)
            db.session.add(student)
            db.session.commit()
            return student.id


@pytest.fixture()
def app(tmp_path):
    class Config(TestConfig):
        UPLOAD_FOLDER = str(tmp_path / "uploads")
        AUDIT_LOG_FILE = str(tmp_path / "logs" / "audit.log")

    app = create_app(Config)
    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def seed(app):
    return Seeder(app)


@pytest.fixture()
def login(client):
    def _login(email, password=PASSWORD):
        r = client.post("/auth/login", json={"email": email, "password": password})
        assert r.status_code == 200, r.data
        return {"Authorization": f"Bearer {r.get_json()['access_token']}"}
    return _login


@pytest.fixture()
def school_setup(seed):
    """One administrator with a school, a teacher, a classroom, a tutor and a student."""
    seed.admin()
    school_id = seed.school()
    teacher_id = seed.teacher(school_id)
    classroom_id = seed.classroom(school_id, teacher_id=teacher_id)
    tutor_id, tutor_user_id = seed.tutor(school_id)
    student_id = seed.student(tutor_id, classroom_id)
    return {
        "school_id": school_id,
        "teacher_id": teacher_id,
        "classroom_id": classroom_id,
        "tutor_id": tutor_id,
        "tutor_user_id": tutor_user_id,
        "student_id": student_id,
    }


@pytest.fixture()
def admin_headers(school_setup, login):
    return login("admin@cesi.mx")
