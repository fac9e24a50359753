from cesi.models import Notification
from utils.db import atomic
from utils.validation import FormValidator


def create_notification(teacher, student, data):
    """One row addressed to the student's tutor. Delivery is the row itself."""
    v = FormValidator(data)
    message = v.string("message", "mensaje", max_length=2000)
    v.validate()

    with atomic() as session:
        notification = Notification(
            tutor_id=student.tutor_id,
            teacher=teacher,
            student=student,
            message=message,
        )
        session.add(notification)
    return notification


def list_for_tutor(tutor_id):
    return (
        Notification.query.filter_by(tutor_id=tutor_id)
        .order_by(Notification.created_at, Notification.id)
        .all()
    )


def list_for_student(student_id):
    return (
        Notification.query.filter_by(student_id=student_id)
        .order_by(Notification.created_at, Notification.id)
        .all()
    )


def update_notification(notification, data):
    v = FormValidator(data)
    message = v.string("message", "mensaje", required=False, max_length=2000)
    read = v.boolean("read")
    v.validate()

    with atomic():
        if message is not None:
            notification.message = message
        if read is not None:
            notification.read = read
    return notification
