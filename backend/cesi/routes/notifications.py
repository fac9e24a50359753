from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required
from cesi.extensions import db
from cesi.models import Notification, Student, Teacher, Tutor, RoleEnum
from cesi.services import notifications as notification_service
from utils.access_control import scoped_get
from utils.db import atomic
from utils.decorators import current_user, role_required
from utils.request_data import request_data
from utils.serialization import to_dict

notifications_bp = Blueprint('notifications', __name__)

STUDENT_NOT_FOUND = {"error": "Alumno no encontrado"}
NOTIFICATION_NOT_FOUND = {"error": "Notificación no encontrada"}


def _notification(student, notification_id):
    notification = db.session.get(Notification, notification_id)
    if notification is None or notification.student_id != student.id:
        return None
    return notification


@notifications_bp.route('/alumno/<int:student_id>', methods=['GET'])
@jwt_required()
def student_notifications(student_id):
    student = scoped_get(Student, student_id, current_user())
    if not student:
        return jsonify(STUDENT_NOT_FOUND), 404

    notifications = notification_service.list_for_student(student.id)
    return jsonify([to_dict(n) for n in notifications]), 200


@notifications_bp.route('/alumno/<int:teacher_id>/<int:student_id>', methods=['POST'])
@jwt_required()
@role_required("admin", "teacher")
def create_notification(teacher_id, student_id):
    user = current_user()
    teacher = scoped_get(Teacher, teacher_id, user)
    if not teacher or (user.role == RoleEnum.teacher and teacher.email != user.email):
        return jsonify({"error": "Maestro no encontrado"}), 404
    student = scoped_get(Student, student_id, user)
    if not student:
        return jsonify(STUDENT_NOT_FOUND), 404

    notification = notification_service.create_notification(teacher, student, request_data())
    return jsonify({"message": "Notificación creada exitosamente", "notificacion": to_dict(notification)}), 201


@notifications_bp.route('/tutor/<int:tutor_id>', methods=['GET'])
@jwt_required()
def tutor_notifications(tutor_id):
    user = current_user()
    tutor = scoped_get(Tutor, tutor_id, user)
    if not tutor or (user.role == RoleEnum.tutor and tutor.email != user.email):
        return jsonify({"error": "Tutor no encontrado"}), 404

    notifications = notification_service.list_for_tutor(tutor.id)
    return jsonify([to_dict(n) for n in notifications]), 200


@notifications_bp.route('/alumno/<int:student_id>/notificacion/<int:notification_id>', methods=['PUT'])
@jwt_required()
def update_notification(student_id, notification_id):
    student = scoped_get(Student, student_id, current_user())
    if not student:
        return jsonify(STUDENT_NOT_FOUND), 404
    notification = _notification(student, notification_id)
    if not notification:
        return jsonify(NOTIFICATION_NOT_FOUND), 404

    notification_service.update_notification(notification, request_data())
    return jsonify({"message": "Notificación actualizada exitosamente", "notificacion": to_dict(notification)}), 200


@notifications_bp.route('/alumno/<int:student_id>/notificacion/<int:notification_id>', methods=['DELETE'])
@jwt_required()
@role_required("admin", "teacher", "tutor")
def delete_notification(student_id, notification_id):
    student = scoped_get(Student, student_id, current_user())
    if not student:
        return jsonify(STUDENT_NOT_FOUND), 404
    notification = _notification(student, notification_id)
    if not notification:
        return jsonify(NOTIFICATION_NOT_FOUND), 404

    with atomic() as session:
        session.delete(notification)
    return jsonify({"message": "Notificación eliminada exitosamente"}), 200
