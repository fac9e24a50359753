from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required
from cesi.models import ClassSession, Classroom, Teacher, RoleEnum
from utils.access_control import allowed_school_ids, scoped_get
from utils.db import atomic
from utils.decorators import current_user, role_required
from utils.request_data import request_data
from utils.serialization import to_dict
from utils.validation import FormValidator

sessions_bp = Blueprint('sessions', __name__)

NOT_FOUND = {"error": "Sesión no encontrada"}


def _session_form(user, data, session=None):
    partial = session is not None
    v = FormValidator(data)
    form = {
        "name": v.string("name", "nombre", required=not partial),
        "date": v.date("date", "fecha", required=not partial),
        "classroom_id": v.integer("classroom_id", "salón", required=not partial),
        "teacher_id": v.integer("teacher_id", "maestro", required=False),
    }
    if form["classroom_id"] is not None and scoped_get(Classroom, form["classroom_id"], user) is None:
        v.error("classroom_id", "El salón seleccionado no es válido.")
    if form["teacher_id"] is not None and scoped_get(Teacher, form["teacher_id"], user) is None:
        v.error("teacher_id", "El maestro seleccionado no es válido.")
    v.validate()

    if form["teacher_id"] is None and not partial and user.role == RoleEnum.teacher:
        teacher = Teacher.query.filter_by(email=user.email).first()
        form["teacher_id"] = teacher.id if teacher else None
    return form


@sessions_bp.route('/', methods=['GET'])
@jwt_required()
def list_sessions():
    user = current_user()
    query = ClassSession.query.join(Classroom, ClassSession.classroom_id == Classroom.id).filter(
        Classroom.school_id.in_(allowed_school_ids(user))
    )

    classroom_id = request.args.get('classroom_id', type=int)
    if classroom_id:
        query = query.filter(ClassSession.classroom_id == classroom_id)
    teacher_id = request.args.get('teacher_id', type=int)
    if teacher_id:
        query = query.filter(ClassSession.teacher_id == teacher_id)

    sessions = query.order_by(ClassSession.date.desc(), ClassSession.id.desc()).all()
    return jsonify([to_dict(s) for s in sessions]), 200


@sessions_bp.route('/', methods=['POST'])
@jwt_required()
@role_required("admin", "teacher")
def create_session():
    user = current_user()
    form = _session_form(user, request_data())

    with atomic() as db_session:
        session = ClassSession(**form)
        db_session.add(session)
    return jsonify({"message": "Sesión creada exitosamente", "sesion": to_dict(session)}), 201


@sessions_bp.route('/<int:session_id>', methods=['GET'])
@jwt_required()
def show_session(session_id):
    session = scoped_get(ClassSession, session_id, current_user())
    if not session:
        return jsonify(NOT_FOUND), 404
    return jsonify(to_dict(session)), 200


@sessions_bp.route('/<int:session_id>', methods=['PUT'])
@jwt_required()
@role_required("admin", "teacher")
def update_session(session_id):
    user = current_user()
    session = scoped_get(ClassSession, session_id, user)
    if not session:
        return jsonify(NOT_FOUND), 404

    form = _session_form(user, request_data(), session=session)
    with atomic():
        for key, value in form.items():
            if value is not None:
                setattr(session, key, value)
    return jsonify({"message": "Sesión actualizada exitosamente", "sesion": to_dict(session)}), 200


@sessions_bp.route('/<int:session_id>', methods=['DELETE'])
@jwt_required()
@role_required("admin", "teacher")
def delete_session(session_id):
    session = scoped_get(ClassSession, session_id, current_user())
    if not session:
        return jsonify(NOT_FOUND), 404

    with atomic() as db_session:
        db_session.delete(session)
    return jsonify({"message": "Sesión eliminada exitosamente"}), 200


@sessions_bp.route('/<int:session_id>/responsable', methods=['GET'])
@jwt_required()
def session_teacher(session_id):
    """The teacher in charge of the session."""
    session = scoped_get(ClassSession, session_id, current_user())
    if not session:
        return jsonify(NOT_FOUND), 404
    if not session.teacher:
        return jsonify({"error": "La sesión no tiene un maestro responsable"}), 404
    return jsonify(session.teacher.to_dict()), 200
