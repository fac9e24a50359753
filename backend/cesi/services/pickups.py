"""
Pickup requests and their tracking log.

Status writes are unconditional: any of pending, complete and cancelled can
follow any other, and tracking events are accepted whatever the status.
"""
from sqlalchemy import select
from cesi.models import Pickup, PickupStatus, TrackingEvent, Student, Classroom
from utils.db import atomic
from utils.validation import FormValidator, ValidationError


def create_pickup(student, guardian, observation=None):
    if not guardian.active or guardian.tutor_id != student.tutor_id:
        raise ValidationError({
            "guardian_id": ["El responsable no está autorizado para recoger a este alumno."]
        })

    with atomic() as session:
        pickup = Pickup(
            status=PickupStatus.pending,
            observation=observation,
            tutor_id=student.tutor_id,
            guardian=guardian,
            student=student,
        )
        session.add(pickup)
    return pickup


def check_single_scope(tutor_id=None, guardian_id=None, teacher_id=None):
    given = [i for i in (tutor_id, guardian_id, teacher_id) if i is not None]
    if len(given) != 1:
        raise ValidationError({"scope": ["Indica solo uno de tutor_id, guardian_id o teacher_id."]})


def list_pickups_by_status(status, tutor_id=None, guardian_id=None, teacher_id=None):
    """Pickups with ``status`` for exactly one requester scope, newest first."""
    check_single_scope(tutor_id, guardian_id, teacher_id)
    query = Pickup.query.filter(Pickup.status == status)

    if tutor_id is not None:
        query = query.filter(Pickup.tutor_id == tutor_id)
    elif guardian_id is not None:
        query = query.filter(Pickup.guardian_id == guardian_id)
    else:
        query = (
            query.join(Student, Pickup.student_id == Student.id)
            .join(Classroom, Student.classroom_id == Classroom.id)
            .filter(Classroom.teacher_id == teacher_id)
        )
    return query.order_by(Pickup.created_at.desc(), Pickup.id.desc()).all()


def students_without_pickup(tutor):
    pending = select(Pickup.student_id).where(
        Pickup.tutor_id == tutor.id,
        Pickup.status == PickupStatus.pending,
    )
    return Student.query.filter(
        Student.tutor_id == tutor.id,
        Student.id.notin_(pending),
    ).order_by(Student.name).all()


def advance_status(pickup, data):
    v = FormValidator(data)
    status = v.choice("status", "estatus", PickupStatus)
    observation = v.string("observation", "observación", required=False, max_length=2000)
    v.validate()

    with atomic():
        pickup.status = status
        if observation is not None:
            pickup.observation = observation
    return pickup


def _tracking_form(data, partial=False):
    v = FormValidator(data)
    form = {
        "latitude": v.number("latitude", "latitud", required=not partial),
        "longitude": v.number("longitude", "longitud", required=not partial),
        "location": v.string("location", "ubicación", required=False),
    }
    if form["latitude"] is not None and not -90 <= form["latitude"] <= 90:
        v.error("latitude", "La latitud debe estar entre -90 y 90.")
    if form["longitude"] is not None and not -180 <= form["longitude"] <= 180:
        v.error("longitude", "La longitud debe estar entre -180 y 180.")
    v.validate()
    return form


def record_tracking_event(pickup, data):
    form = _tracking_form(data)
    with atomic() as session:
        event = TrackingEvent(pickup=pickup, **form)
        session.add(event)
    return event


def update_tracking_event(event, data):
    form = _tracking_form(data, partial=True)
    with atomic():
        for key, value in form.items():
            if value is not None:
                setattr(event, key, value)
    return event


def delete_tracking_event(event):
    with atomic() as session:
        session.delete(event)
