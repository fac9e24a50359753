from flask import Blueprint, request, jsonify, send_file
from io import BytesIO
from flask_jwt_extended import jwt_required
from cesi.models import Pickup, PickupStatus, Student, Guardian, Tutor, Teacher, Report
from cesi.services import pickups as pickup_service
from cesi.services import reports as report_service
from cesi.services.storage import serve_file
from utils.access_control import scoped_get
from utils.audit import log_event
from utils.decorators import current_user, role_required
from utils.request_data import request_data
from utils.validation import FormValidator

pickups_bp = Blueprint('pickups', __name__)


@pickups_bp.route('/alumnos/<int:tutor_id>', methods=['GET'])
@jwt_required()
def students_without_pickup(tutor_id):
    tutor = scoped_get(Tutor, tutor_id, current_user())
    if not tutor:
        return jsonify({"error": "Tutor no encontrado"}), 404

    students = pickup_service.students_without_pickup(tutor)
    return jsonify([s.to_dict() for s in students]), 200


@pickups_bp.route('/generar', methods=['POST'])
@jwt_required()
@role_required("admin", "tutor", "guardian")
def create_pickup():
    user = current_user()
    data = request_data()

    v = FormValidator(data)
    student_id = v.integer("student_id", "alumno")
    guardian_id = v.integer("guardian_id", "responsable")
    observation = v.string("observation", "observación", required=False, max_length=2000)
    v.validate()

    student = scoped_get(Student, student_id, user)
    if not student:
        return jsonify({"error": "Alumno no encontrado"}), 404
    guardian = scoped_get(Guardian, guardian_id, user)
    if not guardian:
        return jsonify({"error": "Responsable no encontrado"}), 404

    pickup = pickup_service.create_pickup(student, guardian, observation)
    log_event("PICKUP_CREATED", user_id=user.id, ip=request.remote_addr,
              description=f"pickup {pickup.id} for student {student.id}")
    return jsonify({"message": "Recogida generada exitosamente", "recogida": pickup.to_dict()}), 201


@pickups_bp.route('/tutor/<int:tutor_id>', methods=['GET'])
@jwt_required()
def pickups_by_tutor(tutor_id):
    tutor = scoped_get(Tutor, tutor_id, current_user())
    if not tutor:
        return jsonify({"error": "Tutor no encontrado"}), 404

    pickups = (
        Pickup.query.filter_by(tutor_id=tutor.id)
        .order_by(Pickup.created_at.desc(), Pickup.id.desc())
        .all()
    )
    return jsonify([p.to_dict(include_related=True) for p in pickups]), 200


@pickups_bp.route('/estatus', methods=['GET'])
@jwt_required()
def pickups_by_status():
    user = current_user()

    v = FormValidator(request.args)
    status = v.choice("status", "estatus", PickupStatus)
    tutor_id = v.integer("tutor_id", "tutor", required=False)
    guardian_id = v.integer("guardian_id", "responsable", required=False)
    teacher_id = v.integer("teacher_id", "maestro", required=False)
    v.validate()
    pickup_service.check_single_scope(tutor_id, guardian_id, teacher_id)

    # the requester named in the scope must itself be visible to the caller
    for model, obj_id in ((Tutor, tutor_id), (Guardian, guardian_id), (Teacher, teacher_id)):
        if obj_id is not None and scoped_get(model, obj_id, user) is None:
            return jsonify([]), 200

    pickups = pickup_service.list_pickups_by_status(
        status, tutor_id=tutor_id, guardian_id=guardian_id, teacher_id=teacher_id
    )
    return jsonify([p.to_dict(include_related=True) for p in pickups]), 200


@pickups_bp.route('/<int:pickup_id>', methods=['GET'])
@jwt_required()
def show_pickup(pickup_id):
    pickup = scoped_get(Pickup, pickup_id, current_user())
    if not pickup:
        return jsonify({"error": "Recogida no encontrada"}), 404

    data = pickup.to_dict(include_related=True)
    data["rastreos"] = [e.to_dict() for e in pickup.tracking_events]
    return jsonify(data), 200


@pickups_bp.route('/<int:pickup_id>/estatus', methods=['PUT'])
@jwt_required()
def advance_status(pickup_id):
    user = current_user()
    pickup = scoped_get(Pickup, pickup_id, user)
    if not pickup:
        return jsonify({"error": "Recogida no encontrada"}), 404

    previous = pickup.status.value
    pickup_service.advance_status(pickup, request_data())
    log_event("PICKUP_STATUS", user_id=user.id, ip=request.remote_addr,
              description=f"pickup {pickup.id}: {previous} -> {pickup.status.value}")
    return jsonify({"message": "Estatus actualizado", "recogida": pickup.to_dict()}), 200


@pickups_bp.route('/reporte/<int:tutor_id>', methods=['GET'])
@jwt_required()
@role_required("admin", "tutor")
def generate_report(tutor_id):
    tutor = scoped_get(Tutor, tutor_id, current_user())
    if not tutor:
        return jsonify({"error": "Tutor no encontrado"}), 404

    report, content = report_service.generate_report(tutor)
    return send_file(
        BytesIO(content),
        as_attachment=True,
        download_name=report.report_pdf.rsplit("/", 1)[-1],
        mimetype='application/pdf'
    )


@pickups_bp.route('/reportes/<int:tutor_id>', methods=['GET'])
@jwt_required()
@role_required("admin", "tutor")
def reports_by_tutor(tutor_id):
    tutor = scoped_get(Tutor, tutor_id, current_user())
    if not tutor:
        return jsonify({"error": "Tutor no encontrado"}), 404

    reports = Report.query.filter_by(tutor_id=tutor.id).order_by(Report.created_at.desc()).all()
    return jsonify([
        {
            "id": r.id,
            "report_pdf": r.report_pdf,
            "tutor_id": r.tutor_id,
            "created_at": r.created_at.isoformat(),
        } for r in reports
    ]), 200


@pickups_bp.route('/reportes/<int:tutor_id>/<int:report_id>', methods=['GET'])
@jwt_required()
@role_required("admin", "tutor")
def download_report(tutor_id, report_id):
    report = scoped_get(Report, report_id, current_user())
    if not report or report.tutor_id != tutor_id:
        return jsonify({"error": "Reporte no encontrado"}), 404
    return serve_file(report.report_pdf, mimetype='application/pdf', as_attachment=True)
