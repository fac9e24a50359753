from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required
from cesi.extensions import db
from cesi.models import User, Tutor, Guardian, Student, RoleEnum
from cesi.services import accounts
from utils.access_control import can_access_school
from utils.audit import log_event
from utils.decorators import current_user, role_required

tutors_bp = Blueprint('tutors', __name__)

NOT_FOUND = {"error": "Tutor no encontrado"}


def _tutor(user, credential_id):
    """
    Resolves a tutor from the id of its login credential.
    - The credential must exist and be matched by a tutor with the same email.
    - The tutor's school must be visible to the caller.
    - Tutors may only address themselves; guardians only the tutor who authorised them.
    """
    credential = db.session.get(User, credential_id)
    if credential is None:
        return None
    tutor = Tutor.query.filter_by(email=credential.email).first()
    if tutor is None or not can_access_school(user, tutor.school_id):
        return None

    if user.role == RoleEnum.tutor and user.email != tutor.email:
        return None
    if user.role == RoleEnum.guardian:
        guardian = Guardian.query.filter_by(email=user.email).first()
        if guardian is None or guardian.tutor_id != tutor.id:
            return None
    return tutor


@tutors_bp.route('/<int:credential_id>', methods=['GET'])
@jwt_required()
def show_tutor(credential_id):
    tutor = _tutor(current_user(), credential_id)
    if not tutor:
        return jsonify(NOT_FOUND), 404
    return jsonify(tutor.to_dict()), 200


@tutors_bp.route('/<int:credential_id>/alumnos', methods=['GET'])
@jwt_required()
def tutor_students(credential_id):
    tutor = _tutor(current_user(), credential_id)
    if not tutor:
        return jsonify(NOT_FOUND), 404
    students = Student.query.filter_by(tutor_id=tutor.id).order_by(Student.name).all()
    return jsonify([s.to_dict() for s in students]), 200


@tutors_bp.route('/<int:credential_id>/alumnos/<int:student_id>', methods=['GET'])
@jwt_required()
def tutor_student(credential_id, student_id):
    tutor = _tutor(current_user(), credential_id)
    if not tutor:
        return jsonify(NOT_FOUND), 404

    student = Student.query.filter_by(id=student_id, tutor_id=tutor.id).first()
    if not student:
        return jsonify({"error": "Alumno no encontrado o no autorizado"}), 404
    return jsonify(student.to_dict(include_related=True)), 200


@tutors_bp.route('/<int:credential_id>/escuela/colores', methods=['GET'])
@jwt_required()
def tutor_school_colors(credential_id):
    tutor = _tutor(current_user(), credential_id)
    if not tutor:
        return jsonify(NOT_FOUND), 404

    branding = tutor.school.branding if tutor.school else None
    if not branding:
        return jsonify({"error": "Colores de la escuela no encontrados"}), 404
    return jsonify(branding.to_dict()), 200


@tutors_bp.route('/<int:credential_id>/responsables', methods=['GET'])
@jwt_required()
def tutor_guardians(credential_id):
    tutor = _tutor(current_user(), credential_id)
    if not tutor:
        return jsonify(NOT_FOUND), 404
    guardians = Guardian.query.filter_by(tutor_id=tutor.id).order_by(Guardian.name).all()
    return jsonify([g.to_dict() for g in guardians]), 200


@tutors_bp.route('/<int:credential_id>/responsables/<int:guardian_id>', methods=['GET'])
@jwt_required()
def tutor_guardian(credential_id, guardian_id):
    tutor = _tutor(current_user(), credential_id)
    if not tutor:
        return jsonify(NOT_FOUND), 404

    guardian = Guardian.query.filter_by(id=guardian_id, tutor_id=tutor.id).first()
    if not guardian:
        return jsonify({"error": "Responsable no encontrado o no autorizado"}), 404
    return jsonify({"responsable": guardian.to_dict(), "tutor": tutor.to_dict()}), 200


@tutors_bp.route('/<int:credential_id>/foto', methods=['POST'])
@jwt_required()
@role_required("admin", "tutor")
def update_photo(credential_id):
    user = current_user()
    tutor = _tutor(user, credential_id)
    if not tutor:
        return jsonify(NOT_FOUND), 404

    accounts.update_tutor_photo(tutor, request.files)
    log_event("TUTOR_PHOTO", user_id=user.id, ip=request.remote_addr, description=tutor.email)
    return jsonify({"message": "Foto actualizada exitosamente", "photo": tutor.photo}), 200
