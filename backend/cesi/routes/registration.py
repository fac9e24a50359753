from flask import Blueprint, request, jsonify
from cesi.extensions import db, limiter
from cesi.models import Tutor
from cesi.services import accounts
from utils.audit import log_event
from utils.request_data import request_data
from utils.validation import FormValidator

registration_bp = Blueprint('registration', __name__)


@registration_bp.route('/', methods=['POST'])
@limiter.limit("5 per minute", override_defaults=False)
def register():
    """Self-registration of a guardian. The account stays inactive until
    the tutor or an administrator activates it."""
    data = request_data()

    v = FormValidator(data)
    tutor_id = v.integer("tutor_id", "tutor")
    v.validate()

    tutor = db.session.get(Tutor, tutor_id)
    if not tutor:
        return jsonify({"error": "Tutor no encontrado"}), 404

    guardian = accounts.create_guardian(tutor, data, request.files, active=False)

    log_event("GUARDIAN_REGISTERED", ip=request.remote_addr,
              description=f"{guardian.email} registered for tutor {tutor.id}")
    return jsonify({
        "message": "Registro exitoso. Tu cuenta será activada por el tutor.",
        "responsable": guardian.to_dict(),
    }), 201
