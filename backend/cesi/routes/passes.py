from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required
from cesi.extensions import db
from cesi.models import AttendancePass, ClassSession, Student
from utils.access_control import scoped_get
from utils.db import atomic
from utils.decorators import current_user, role_required
from utils.request_data import request_data
from utils.serialization import to_dict
from utils.validation import FormValidator

passes_bp = Blueprint('passes', __name__)

STUDENT_NOT_FOUND = {"error": "Alumno no encontrado"}
PASS_NOT_FOUND = {"error": "Pase no encontrado"}


def _pass(student, pass_id):
    attendance = db.session.get(AttendancePass, pass_id)
    if attendance is None or attendance.student_id != student.id:
        return None
    return attendance


def _pass_form(student, data, attendance=None):
    partial = attendance is not None
    v = FormValidator(data)
    form = {
        "date": v.date("date", "fecha", required=not partial),
        "session_id": v.integer("session_id", "sesión", required=False),
        "present": v.boolean("present", default=None if partial else True),
        "note": v.string("note", "nota", required=False),
    }
    if form["session_id"] is not None:
        session = db.session.get(ClassSession, form["session_id"])
        if session is None or session.classroom_id != student.classroom_id:
            v.error("session_id", "La sesión seleccionada no corresponde al salón del alumno.")
    v.validate()
    return form


@passes_bp.route('/alumno/<int:student_id>', methods=['GET'])
@jwt_required()
def list_passes(student_id):
    student = scoped_get(Student, student_id, current_user())
    if not student:
        return jsonify(STUDENT_NOT_FOUND), 404

    passes = (
        AttendancePass.query.filter_by(student_id=student.id)
        .order_by(AttendancePass.date.desc(), AttendancePass.id.desc())
        .all()
    )
    return jsonify([to_dict(p) for p in passes]), 200


@passes_bp.route('/alumno/<int:student_id>', methods=['POST'])
@jwt_required()
@role_required("admin", "teacher")
def create_pass(student_id):
    student = scoped_get(Student, student_id, current_user())
    if not student:
        return jsonify(STUDENT_NOT_FOUND), 404

    form = _pass_form(student, request_data())
    with atomic() as session:
        attendance = AttendancePass(student=student, **form)
        session.add(attendance)
    return jsonify({"message": "Pase creado exitosamente", "pase": to_dict(attendance)}), 201


@passes_bp.route('/alumno/<int:student_id>/<int:pass_id>', methods=['GET'])
@jwt_required()
def show_pass(student_id, pass_id):
    student = scoped_get(Student, student_id, current_user())
    if not student:
        return jsonify(STUDENT_NOT_FOUND), 404
    attendance = _pass(student, pass_id)
    if not attendance:
        return jsonify(PASS_NOT_FOUND), 404
    return jsonify(to_dict(attendance)), 200


@passes_bp.route('/alumno/<int:student_id>/<int:pass_id>', methods=['PUT'])
@jwt_required()
@role_required("admin", "teacher")
def update_pass(student_id, pass_id):
    student = scoped_get(Student, student_id, current_user())
    if not student:
        return jsonify(STUDENT_NOT_FOUND), 404
    attendance = _pass(student, pass_id)
    if not attendance:
        return jsonify(PASS_NOT_FOUND), 404

    form = _pass_form(student, request_data(), attendance=attendance)
    with atomic():
        for key, value in form.items():
            if value is not None:
                setattr(attendance, key, value)
    return jsonify({"message": "Pase actualizado exitosamente", "pase": to_dict(attendance)}), 200


@passes_bp.route('/alumno/<int:student_id>/<int:pass_id>', methods=['DELETE'])
@jwt_required()
@role_required("admin", "teacher")
def delete_pass(student_id, pass_id):
    student = scoped_get(Student, student_id, current_user())
    if not student:
        return jsonify(STUDENT_NOT_FOUND), 404
    attendance = _pass(student, pass_id)
    if not attendance:
        return jsonify(PASS_NOT_FOUND), 404

    with atomic() as session:
        session.delete(attendance)
    return jsonify({"message": "Pase eliminado exitosamente"}), 200
