from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required
from cesi.models import Classroom, School, Teacher
from utils.access_control import allowed_school_ids, scoped_get
from utils.db import atomic
from utils.decorators import current_user, role_required
from utils.pagination import apply_search
from utils.request_data import request_data
from utils.validation import FormValidator, ValidationError

classrooms_bp = Blueprint('classrooms', __name__)

NOT_FOUND = {"error": "Salón no encontrado"}


def _classroom_form(user, data, classroom=None):
    partial = classroom is not None
    v = FormValidator(data)
    form = {
        "name": v.string("name", "nombre del salón", required=not partial, max_length=100),
        "grade": v.string("grade", "grado", required=False, max_length=50),
        "school_id": v.integer("school_id", "escuela", required=not partial),
        "teacher_id": v.integer("teacher_id", "maestro", required=False),
    }
    if form["school_id"] is not None and scoped_get(School, form["school_id"], user) is None:
        v.error("school_id", "La escuela seleccionada no es válida.")
    # a kept teacher is checked again when only the school changes
    teacher_id = form["teacher_id"]
    if teacher_id is None and partial and "teacher_id" not in data:
        teacher_id = classroom.teacher_id
    if teacher_id is not None:
        teacher = scoped_get(Teacher, teacher_id, user)
        school_id = form["school_id"] or (classroom.school_id if classroom else None)
        if teacher is None or teacher.school_id != school_id:
            v.error("teacher_id", "El maestro seleccionado no pertenece a la escuela.")
    v.validate()
    return form


@classrooms_bp.route('/', methods=['GET'])
@jwt_required()
def list_classrooms():
    user = current_user()
    query = Classroom.query.filter(Classroom.school_id.in_(allowed_school_ids(user)))

    school_id = request.args.get('school_id', type=int)
    if school_id:
        query = query.filter(Classroom.school_id == school_id)
    query = apply_search(query, Classroom, request.args.get('nombre'), ['name'])

    classrooms = query.order_by(Classroom.name).all()
    return jsonify({"salones": [c.to_dict() for c in classrooms]}), 200


@classrooms_bp.route('/', methods=['POST'])
@jwt_required()
@role_required("admin")
def create_classroom():
    form = _classroom_form(current_user(), request_data())

    with atomic() as session:
        classroom = Classroom(**form)
        session.add(classroom)
    return jsonify({"message": "Salón creado exitosamente", "salon": classroom.to_dict()}), 201


@classrooms_bp.route('/<int:classroom_id>', methods=['GET'])
@jwt_required()
def show_classroom(classroom_id):
    classroom = scoped_get(Classroom, classroom_id, current_user())
    if not classroom:
        return jsonify(NOT_FOUND), 404

    data = classroom.to_dict()
    data["school"] = classroom.school.to_dict()
    data["teacher"] = classroom.teacher.to_dict() if classroom.teacher else None
    data["students"] = [s.to_dict() for s in classroom.students]
    return jsonify(data), 200


@classrooms_bp.route('/<int:classroom_id>', methods=['PUT'])
@jwt_required()
@role_required("admin")
def update_classroom(classroom_id):
    user = current_user()
    classroom = scoped_get(Classroom, classroom_id, user)
    if not classroom:
        return jsonify(NOT_FOUND), 404

    data = request_data()
    form = _classroom_form(user, data, classroom=classroom)
    with atomic():
        for key, value in form.items():
            if value is not None:
                setattr(classroom, key, value)
        # an explicit empty teacher_id unassigns the teacher
        if "teacher_id" in data and data.get("teacher_id") in (None, ""):
            classroom.teacher_id = None
    return jsonify({"message": "Salón actualizado exitosamente", "salon": classroom.to_dict()}), 200


@classrooms_bp.route('/<int:classroom_id>', methods=['DELETE'])
@jwt_required()
@role_required("admin")
def delete_classroom(classroom_id):
    classroom = scoped_get(Classroom, classroom_id, current_user())
    if not classroom:
        return jsonify(NOT_FOUND), 404
    if classroom.students:
        raise ValidationError(
            {"students": ["No se puede eliminar un salón con alumnos inscritos."]},
            message="El salón tiene alumnos inscritos."
        )

    with atomic() as session:
        session.delete(classroom)
    return jsonify({"message": "Salón eliminado exitosamente"}), 200
