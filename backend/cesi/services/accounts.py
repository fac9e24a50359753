"""
Tutor, teacher and guardian accounts.

Every profile row (tutor, teacher, guardian) is mirrored by a ``User``
credential sharing its email; a tutor is additionally mirrored by an active
guardian row so the tutor can perform pickups. Each operation here writes
the profile and its mirrors in one transaction, and removes files it stored
when that transaction fails.
"""
from cesi.models import User, Tutor, Teacher, Guardian, School, RoleEnum
from cesi.services.storage import (
    stored_uploads, delete_file, TUTORS_FOLDER, TEACHERS_FOLDER, GUARDIANS_FOLDER,
)
from utils.db import atomic
from utils.validation import FormValidator, ValidationError

INVALID_SCHOOL = "La escuela seleccionada no es válida."


def _school(validator, school_ids):
    school = validator.exists("school_id", School, "escuela", INVALID_SCHOOL)
    if school is not None and school.id not in school_ids:
        validator.error("school_id", INVALID_SCHOOL)
        return None
    return school


def _credential(email):
    return User.query.filter_by(email=email).first()


def mirrored_guardian(tutor):
    """The guardian row created alongside ``tutor``."""
    return Guardian.query.filter_by(tutor_id=tutor.id, email=tutor.email).first()


def is_tutor_mirror(guardian):
    return guardian.tutor is not None and guardian.email == guardian.tutor.email


# Tutors

def _tutor_form(data, files, school_ids, tutor=None):
    user = _credential(tutor.email) if tutor else None
    mirror = mirrored_guardian(tutor) if tutor else None

    v = FormValidator(data, files)
    form = {
        "email": v.email("email", unique_in=(Tutor, User, Guardian), ignore=(tutor, user, mirror)),
        "password": v.password("password", required=tutor is None),
        "name": v.person_name("name"),
        "phone": v.phone("phone"),
        "photo": v.image("photo", required=tutor is None),
        "school": _school(v, school_ids),
    }
    v.validate()
    return form, user, mirror


def _mirror_guardian(tutor):
    return Guardian(
        name=tutor.name,
        email=tutor.email,
        phone=tutor.phone,
        photo=tutor.photo,
        active=True,
        tutor=tutor,
    )


def create_tutor(data, files, school_ids):
    form, _, _ = _tutor_form(data, files, school_ids)

    with stored_uploads() as uploads, atomic() as session:
        tutor = Tutor(
            name=form["name"],
            email=form["email"],
            phone=form["phone"],
            photo=uploads.store(form["photo"], TUTORS_FOLDER),
            school=form["school"],
        )
        user = User(name=form["name"], email=form["email"], role=RoleEnum.tutor)
        user.set_password(form["password"])
        session.add_all([tutor, user, _mirror_guardian(tutor)])

    return tutor


def update_tutor(tutor, data, files, school_ids):
    form, user, mirror = _tutor_form(data, files, school_ids, tutor=tutor)
    if user is None and not form["password"]:
        raise ValidationError({"password": ["La contraseña es obligatoria para restablecer el acceso del tutor."]})

    old_photo = tutor.photo
    with stored_uploads() as uploads, atomic() as session:
        if form["photo"]:
            tutor.photo = uploads.store(form["photo"], TUTORS_FOLDER)
        tutor.name = form["name"]
        tutor.email = form["email"]
        tutor.phone = form["phone"]
        tutor.school = form["school"]

        if user is None:
            user = User(role=RoleEnum.tutor)
            session.add(user)
        user.name = form["name"]
        user.email = form["email"]
        if form["password"]:
            user.set_password(form["password"])

        if mirror is None:
            mirror = _mirror_guardian(tutor)
            session.add(mirror)
        mirror.name = tutor.name
        mirror.email = tutor.email
        mirror.phone = tutor.phone
        mirror.photo = tutor.photo
        mirror.active = True

    if form["photo"] and old_photo != tutor.photo:
        delete_file(old_photo)
    return tutor


def update_tutor_photo(tutor, files):
    v = FormValidator({}, files)
    photo = v.image("photo")
    v.validate()

    old_photo = tutor.photo
    with stored_uploads() as uploads, atomic():
        tutor.photo = uploads.store(photo, TUTORS_FOLDER)
        mirror = mirrored_guardian(tutor)
        if mirror is not None:
            mirror.photo = tutor.photo

    delete_file(old_photo)
    return tutor


def delete_tutor(tutor):
    """Removes the tutor, every guardian of the tutor with their credentials,
    and afterwards the stored photos and reports."""
    files = {tutor.photo}
    emails = {tutor.email}
    for guardian in tutor.guardians:
        emails.add(guardian.email)
        files.add(guardian.photo)
    files.update(report.report_pdf for report in tutor.reports)

    with atomic() as session:
        for user in User.query.filter(User.email.in_(emails)).all():
            session.delete(user)
        session.delete(tutor)

    for path in files:
        delete_file(path)


# Teachers

def _teacher_form(data, files, school_ids, teacher=None):
    user = _credential(teacher.email) if teacher else None

    v = FormValidator(data, files)
    form = {
        "name": v.string("name", "nombre del maestro"),
        "email": v.email("email", unique_in=(Teacher, User), ignore=(teacher, user)),
        "password": v.password("password", required=teacher is None),
        "phone": v.string("phone", "teléfono", max_length=15),
        "photo": v.image("photo", required=False),
        "school": _school(v, school_ids),
    }
    v.validate()
    return form, user


def create_teacher(data, files, school_ids):
    form, _ = _teacher_form(data, files, school_ids)

    with stored_uploads() as uploads, atomic() as session:
        teacher = Teacher(
            name=form["name"],
            email=form["email"],
            phone=form["phone"],
            school=form["school"],
        )
        if form["photo"]:
            teacher.photo = uploads.store(form["photo"], TEACHERS_FOLDER)
        user = User(name=form["name"], email=form["email"], role=RoleEnum.teacher)
        user.set_password(form["password"])
        session.add_all([teacher, user])

    return teacher


def update_teacher(teacher, data, files, school_ids):
    form, user = _teacher_form(data, files, school_ids, teacher=teacher)
    if user is None and not form["password"]:
        raise ValidationError({"password": ["La contraseña es obligatoria para restablecer el acceso del maestro."]})

    old_photo = teacher.photo
    with stored_uploads() as uploads, atomic() as session:
        teacher.name = form["name"]
        teacher.email = form["email"]
        teacher.phone = form["phone"]
        teacher.school = form["school"]
        if form["photo"]:
            teacher.photo = uploads.store(form["photo"], TEACHERS_FOLDER)

        if user is None:
            user = User(role=RoleEnum.teacher)
            session.add(user)
        user.name = form["name"]
        user.email = form["email"]
        if form["password"]:
            user.set_password(form["password"])

    if form["photo"] and old_photo:
        delete_file(old_photo)
    return teacher


def delete_teacher(teacher):
    photo = teacher.photo
    with atomic() as session:
        user = _credential(teacher.email)
        if user is not None:
            session.delete(user)
        session.delete(teacher)
    delete_file(photo)


# Guardians

def _guardian_form(data, files, guardian=None):
    user = _credential(guardian.email) if guardian else None

    v = FormValidator(data, files)
    form = {
        "name": v.person_name("name"),
        "email": v.email("email", unique_in=(Guardian, Tutor, Teacher, User), ignore=(guardian, user)),
        "password": v.password("password", required=guardian is None),
        "phone": v.phone("phone"),
        "photo": v.image("photo", required=False),
    }
    v.validate()
    return form, user


def create_guardian(tutor, data, files, active=False):
    form, _ = _guardian_form(data, files)

    with stored_uploads() as uploads, atomic() as session:
        guardian = Guardian(
            name=form["name"],
            email=form["email"],
            phone=form["phone"],
            active=active,
            tutor=tutor,
        )
        if form["photo"]:
            guardian.photo = uploads.store(form["photo"], GUARDIANS_FOLDER)
        user = User(name=form["name"], email=form["email"], role=RoleEnum.guardian)
        user.set_password(form["password"])
        session.add_all([guardian, user])

    return guardian


def _reject_mirror(guardian):
    if is_tutor_mirror(guardian):
        raise ValidationError(
            {"email": ["Los datos del tutor se administran desde el registro del tutor."]}
        )


def update_guardian(guardian, data, files):
    _reject_mirror(guardian)
    form, user = _guardian_form(data, files, guardian=guardian)
    if user is None and not form["password"]:
        raise ValidationError({"password": ["La contraseña es obligatoria para restablecer el acceso del responsable."]})

    v = FormValidator(data)
    active = v.boolean("active", default=guardian.active)
    v.validate()

    old_photo = guardian.photo
    with stored_uploads() as uploads, atomic() as session:
        guardian.name = form["name"]
        guardian.email = form["email"]
        guardian.phone = form["phone"]
        guardian.active = active
        if form["photo"]:
            guardian.photo = uploads.store(form["photo"], GUARDIANS_FOLDER)

        if user is None:
            user = User(role=RoleEnum.guardian)
            session.add(user)
        user.name = form["name"]
        user.email = form["email"]
        if form["password"]:
            user.set_password(form["password"])

    if form["photo"] and old_photo:
        delete_file(old_photo)
    return guardian


def activate_guardian(guardian):
    with atomic():
        guardian.active = True
    return guardian


def delete_guardian(guardian):
    _reject_mirror(guardian)
    photo = guardian.photo
    with atomic() as session:
        user = _credential(guardian.email)
        if user is not None and user.role == RoleEnum.guardian:
            session.delete(user)
        session.delete(guardian)
    delete_file(photo)
