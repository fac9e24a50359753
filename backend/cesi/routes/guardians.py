from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required
from cesi.models import Guardian, Tutor, RoleEnum
from cesi.services import accounts
from utils.access_control import scoped_get
from utils.audit import log_event
from utils.decorators import current_user, role_required
from utils.request_data import request_data
from utils.validation import FormValidator

guardians_bp = Blueprint('guardians', __name__)

NOT_FOUND = {"error": "Responsable no encontrado"}


def _guardian(user, guardian_id):
    guardian = scoped_get(Guardian, guardian_id, user)
    if guardian is None:
        return None
    # tutors manage only the guardians they authorised
    if user.role == RoleEnum.tutor and guardian.tutor.email != user.email:
        return None
    return guardian


@guardians_bp.route('/', methods=['POST'])
@jwt_required()
@role_required("admin", "tutor")
def create_guardian():
    user = current_user()
    data = request_data()

    if user.role == RoleEnum.tutor:
        tutor = Tutor.query.filter_by(email=user.email).first()
    else:
        v = FormValidator(data)
        tutor_id = v.integer("tutor_id", "tutor")
        v.validate()
        tutor = scoped_get(Tutor, tutor_id, user)
    if not tutor:
        return jsonify({"error": "Tutor no encontrado"}), 404

    v = FormValidator(data)
    active = v.boolean("active", default=False)
    v.validate()

    guardian = accounts.create_guardian(tutor, data, request.files, active=active)
    log_event("GUARDIAN_CREATED", user_id=user.id, ip=request.remote_addr,
              description=f"{guardian.email} for tutor {tutor.id}")
    return jsonify({"message": "Responsable creado exitosamente", "responsable": guardian.to_dict()}), 201


@guardians_bp.route('/<int:guardian_id>', methods=['GET'])
@jwt_required()
def show_guardian(guardian_id):
    guardian = _guardian(current_user(), guardian_id)
    if not guardian:
        return jsonify(NOT_FOUND), 404
    return jsonify(guardian.to_dict()), 200


@guardians_bp.route('/<int:guardian_id>', methods=['PUT'])
@jwt_required()
@role_required("admin", "tutor")
def update_guardian(guardian_id):
    guardian = _guardian(current_user(), guardian_id)
    if not guardian:
        return jsonify(NOT_FOUND), 404

    accounts.update_guardian(guardian, request_data(), request.files)
    return jsonify({"message": "Responsable actualizado exitosamente", "responsable": guardian.to_dict()}), 200


@guardians_bp.route('/<int:guardian_id>/activar', methods=['POST'])
@jwt_required()
@role_required("admin", "tutor")
def activate_guardian(guardian_id):
    user = current_user()
    guardian = _guardian(user, guardian_id)
    if not guardian:
        return jsonify(NOT_FOUND), 404

    accounts.activate_guardian(guardian)
    log_event("GUARDIAN_ACTIVATED", user_id=user.id, ip=request.remote_addr, description=guardian.email)
    return jsonify({"message": "Responsable activado exitosamente", "responsable": guardian.to_dict()}), 200


@guardians_bp.route('/<int:guardian_id>', methods=['DELETE'])
@jwt_required()
@role_required("admin", "tutor")
def delete_guardian(guardian_id):
    user = current_user()
    guardian = _guardian(user, guardian_id)
    if not guardian:
        return jsonify(NOT_FOUND), 404

    email = guardian.email
    accounts.delete_guardian(guardian)
    log_event("GUARDIAN_DELETED", user_id=user.id, ip=request.remote_addr, description=email)
    return jsonify({"message": "Responsable eliminado exitosamente"}), 200


@guardians_bp.route('/<int:guardian_id>/school-colors', methods=['GET'])
@jwt_required()
def school_colors(guardian_id):
    guardian = _guardian(current_user(), guardian_id)
    if not guardian:
        return jsonify(NOT_FOUND), 404

    school = guardian.tutor.school
    if not school or not school.branding:
        return jsonify({"error": "No se encontraron colores para la escuela"}), 404

    return jsonify({"escuela": school.name, "colores": school.branding.to_dict()}), 200
