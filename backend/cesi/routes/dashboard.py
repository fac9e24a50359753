from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required
from cesi.models import Guardian, Tutor, RoleEnum
from utils.access_control import allowed_school_ids
from utils.decorators import current_user, role_required

dashboard_bp = Blueprint('dashboard', __name__)


@dashboard_bp.route('/responsables-inactivos', methods=['GET'])
@jwt_required()
@role_required("admin", "tutor")
def inactive_guardians():
    user = current_user()
    school_ids = allowed_school_ids(user)

    query = Guardian.query.join(Tutor, Guardian.tutor_id == Tutor.id).filter(
        Guardian.active.is_(False),
        Tutor.school_id.in_(school_ids),
    )
    # tutors only see the guardians they authorised
    if user.role == RoleEnum.tutor:
        query = query.filter(Tutor.email == user.email)

    guardians = query.order_by(Guardian.name).all()

    return jsonify({
        "responsables": [g.to_dict() for g in guardians],
        "total": len(guardians),
    }), 200
