from cesi.extensions import db
from cesi.models import (
    Administrator, School, SchoolBranding, Teacher, Tutor, Guardian, RoleEnum, Classroom, Student,
    Pickup, TrackingEvent, ClassSession, AttendancePass, Notification, Report,
)


def scope_to_administrator(user):
    """
    Returns the set of school ids owned by the administrator behind ``user``.
    - The credential is matched to an Administrator record by email.
    - A credential with no Administrator record administers nothing.
    """
    if not user:
        return set()

    admin = Administrator.query.filter_by(email=user.email).first()
    if not admin:
        return set()

    return {
        school_id for (school_id,) in
        School.query.with_entities(School.id).filter_by(administrator_id=admin.id).all()
    }


def allowed_school_ids(user):
    """
    Returns the set of school ids ``user`` may read.
    - Administrators: every school they own.
    - Teachers and tutors: the school they are assigned to.
    - Guardians: the school of the tutor who authorised them.
    """
    if not user:
        return set()

    if user.role == RoleEnum.admin:
        return scope_to_administrator(user)

    if user.role == RoleEnum.teacher:
        teacher = Teacher.query.filter_by(email=user.email).first()
        return {teacher.school_id} if teacher else set()

    if user.role == RoleEnum.tutor:
        tutor = Tutor.query.filter_by(email=user.email).first()
        return {tutor.school_id} if tutor else set()

    if user.role == RoleEnum.guardian:
        guardian = Guardian.query.filter_by(email=user.email).first()
        return {guardian.tutor.school_id} if guardian else set()

    return set()


def can_access_school(user, school_id):
    return school_id is not None and school_id in allowed_school_ids(user)


def school_of(obj):
    """School id an entity is scoped by."""
    if obj is None:
        return None
    if isinstance(obj, School):
        return obj.id
    if isinstance(obj, (Teacher, Tutor, Classroom, SchoolBranding)):
        return obj.school_id
    if isinstance(obj, (Guardian, Report)):
        return obj.tutor.school_id if obj.tutor else None
    if isinstance(obj, Student):
        return obj.school_id
    if isinstance(obj, (Pickup, AttendancePass, Notification)):
        return obj.student.school_id if obj.student else None
    if isinstance(obj, TrackingEvent):
        return school_of(obj.pickup)
    if isinstance(obj, ClassSession):
        return obj.classroom.school_id if obj.classroom else None
    raise TypeError(f"No school scope for {type(obj).__name__}")


def scoped_get(model, obj_id, user):
    """Loads a row by id; rows outside the caller's schools read as missing."""
    obj = db.session.get(model, obj_id)
    if obj is None or not can_access_school(user, school_of(obj)):
        return None
    return obj


STORED_FILE_COLUMNS = (
    (Tutor, Tutor.photo),
    (Teacher, Teacher.photo),
    (Guardian, Guardian.photo),
    (SchoolBranding, SchoolBranding.logo),
    (Report, Report.report_pdf),
)


def owner_of_file(relative_path):
    """Row that references a stored upload, or None when nothing does."""
    for model, column in STORED_FILE_COLUMNS:
        obj = model.query.filter(column == relative_path).first()
        if obj is not None:
            return obj
    return None


def scoped_file_owner(relative_path, user):
    """Owner of a stored file when it falls inside the caller's schools."""
    obj = owner_of_file(relative_path)
    if obj is None or not can_access_school(user, school_of(obj)):
        return None
    return obj
