from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required
from cesi.models import Teacher
from cesi.services import accounts
from utils.access_control import allowed_school_ids, scope_to_administrator, scoped_get
from utils.audit import log_event
from utils.decorators import current_user, role_required
from utils.pagination import apply_pagination_and_search, pagination_payload
from utils.request_data import request_data

teachers_bp = Blueprint('teachers', __name__)

NOT_FOUND = {"error": "Maestro no encontrado"}


@teachers_bp.route('/', methods=['GET'])
@jwt_required()
@role_required("admin")
def list_teachers():
    query = Teacher.query.filter(Teacher.school_id.in_(allowed_school_ids(current_user())))

    page = request.args.get('page', 1, type=int)
    per_page = request.args.get('per_page', 10, type=int)
    paginated = apply_pagination_and_search(
        query.order_by(Teacher.name), Teacher, request.args.get('nombre'), ['name'],
        page=page, per_page=per_page
    )
    return jsonify(pagination_payload("maestros", paginated)), 200


@teachers_bp.route('/<int:teacher_id>/colores', methods=['GET'])
@jwt_required()
def teacher_school_colors(teacher_id):
    teacher = scoped_get(Teacher, teacher_id, current_user())
    if not teacher:
        return jsonify(NOT_FOUND), 404

    branding = teacher.school.branding
    if not branding:
        return jsonify({"error": "No se encontraron colores para la escuela"}), 404
    return jsonify({"colores": branding.to_dict()}), 200


@teachers_bp.route('/<int:teacher_id>', methods=['GET'])
@jwt_required()
def show_teacher(teacher_id):
    teacher = scoped_get(Teacher, teacher_id, current_user())
    if not teacher:
        return jsonify(NOT_FOUND), 404
    return jsonify({"data": teacher.to_dict()}), 200


@teachers_bp.route('/', methods=['POST'])
@jwt_required()
@role_required("admin")
def create_teacher():
    user = current_user()
    teacher = accounts.create_teacher(request_data(), request.files, scope_to_administrator(user))
    log_event("TEACHER_CREATED", user_id=user.id, ip=request.remote_addr, description=teacher.email)
    return jsonify({"message": "Maestro creado exitosamente", "maestro": teacher.to_dict()}), 201


@teachers_bp.route('/<int:teacher_id>', methods=['PUT'])
@jwt_required()
@role_required("admin")
def update_teacher(teacher_id):
    user = current_user()
    teacher = scoped_get(Teacher, teacher_id, user)
    if not teacher:
        return jsonify(NOT_FOUND), 404

    accounts.update_teacher(teacher, request_data(), request.files, scope_to_administrator(user))
    return jsonify({"message": "Maestro actualizado exitosamente", "maestro": teacher.to_dict()}), 200


@teachers_bp.route('/<int:teacher_id>', methods=['DELETE'])
@jwt_required()
@role_required("admin")
def delete_teacher(teacher_id):
    user = current_user()
    teacher = scoped_get(Teacher, teacher_id, user)
    if not teacher:
        return jsonify(NOT_FOUND), 404

    email = teacher.email
    accounts.delete_teacher(teacher)
    log_event("TEACHER_DELETED", user_id=user.id, ip=request.remote_addr, description=email)
    return jsonify({"message": "Maestro eliminado exitosamente"}), 200
