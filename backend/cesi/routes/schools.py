from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required
from cesi.models import School, Administrator
from cesi.services import schools as school_service
from utils.access_control import scope_to_administrator, scoped_get
from utils.audit import log_event
from utils.decorators import current_user, role_required
from utils.pagination import apply_search
from utils.request_data import request_data

schools_bp = Blueprint('schools', __name__)

NOT_FOUND = {"error": "Escuela no encontrada"}


@schools_bp.route('/', methods=['GET'])
@jwt_required()
@role_required("admin")
def list_schools():
    school_ids = scope_to_administrator(current_user())
    query = School.query.filter(School.id.in_(school_ids))
    query = apply_search(query, School, request.args.get('nombre'), ['name'])

    schools = query.order_by(School.name).all()
    return jsonify({"escuelas": [s.to_dict(include_branding=True) for s in schools]}), 200


@schools_bp.route('/crear', methods=['POST'])
@jwt_required()
@role_required("admin")
def create_school():
    user = current_user()
    administrator = Administrator.query.filter_by(email=user.email).first()
    if not administrator:
        return jsonify({"error": "Administrador no encontrado"}), 404

    school = school_service.create_school(administrator, request_data(), request.files)
    log_event("SCHOOL_CREATED", user_id=user.id, ip=request.remote_addr, description=school.name)
    return jsonify({"message": "Escuela creada exitosamente", "escuela": school.to_dict(include_branding=True)}), 201


@schools_bp.route('/<int:school_id>', methods=['GET'])
@jwt_required()
@role_required("admin")
def show_school(school_id):
    school = scoped_get(School, school_id, current_user())
    if not school:
        return jsonify(NOT_FOUND), 404

    data = school.to_dict(include_branding=True)
    data["classrooms"] = [c.to_dict() for c in school.classrooms]
    data["teachers"] = [t.to_dict() for t in school.teachers]
    data["tutors"] = [t.to_dict() for t in school.tutors]
    return jsonify(data), 200


@schools_bp.route('/<int:school_id>', methods=['PUT'])
@jwt_required()
@role_required("admin")
def update_school(school_id):
    school = scoped_get(School, school_id, current_user())
    if not school:
        return jsonify(NOT_FOUND), 404

    school_service.update_school(school, request_data(), request.files)
    return jsonify({"message": "Escuela actualizada exitosamente", "escuela": school.to_dict(include_branding=True)}), 200


@schools_bp.route('/<int:school_id>', methods=['DELETE'])
@jwt_required()
@role_required("admin")
def delete_school(school_id):
    user = current_user()
    school = scoped_get(School, school_id, user)
    if not school:
        return jsonify(NOT_FOUND), 404

    name = school.name
    school_service.delete_school(school)
    log_event("SCHOOL_DELETED", user_id=user.id, ip=request.remote_addr, description=name)
    return jsonify({"message": "Escuela eliminada exitosamente"}), 200
