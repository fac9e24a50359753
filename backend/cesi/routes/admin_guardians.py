from flask import Blueprint, request, render_template, redirect, url_for, flash, abort
from flask_jwt_extended import jwt_required
from cesi.models import Guardian, Tutor, RoleEnum
from cesi.services import accounts
from utils.access_control import allowed_school_ids, scoped_get
from utils.audit import log_event
from utils.decorators import current_user, role_required
from utils.validation import ValidationError

admin_guardians_bp = Blueprint('admin_guardians', __name__)


def _guardians_query(user):
    query = Guardian.query.join(Tutor, Guardian.tutor_id == Tutor.id).filter(
        Tutor.school_id.in_(allowed_school_ids(user))
    )
    if user.role == RoleEnum.tutor:
        query = query.filter(Tutor.email == user.email)
    return query


def _guardian_or_404(user, guardian_id):
    guardian = scoped_get(Guardian, guardian_id, user)
    if guardian is None or (user.role == RoleEnum.tutor and guardian.tutor.email != user.email):
        abort(404)
    return guardian


@admin_guardians_bp.route('/', methods=['GET'])
@jwt_required()
@role_required("admin", "tutor")
def index():
    query = _guardians_query(current_user()).order_by(Guardian.name)
    active = query.filter(Guardian.active.is_(True)).all()
    inactive = query.filter(Guardian.active.is_(False)).all()
    return render_template('guardians/index.html', active=active, inactive=inactive)


@admin_guardians_bp.route('/<int:guardian_id>/editar', methods=['GET', 'POST'])
@jwt_required()
@role_required("admin", "tutor")
def edit(guardian_id):
    guardian = _guardian_or_404(current_user(), guardian_id)
    if accounts.is_tutor_mirror(guardian):
        flash('Los datos del tutor se administran desde el registro del tutor.', 'error')
        return redirect(url_for('admin_guardians.index'))

    if request.method == 'GET':
        return render_template('guardians/edit.html', guardian=guardian, errors={}, form={})

    try:
        accounts.update_guardian(guardian, request.form, request.files)
    except ValidationError as e:
        return render_template('guardians/edit.html', guardian=guardian,
                               errors=e.errors, form=request.form), 422

    flash('Responsable actualizado exitosamente.', 'success')
    return redirect(url_for('admin_guardians.index'))


@admin_guardians_bp.route('/<int:guardian_id>/activar', methods=['POST'])
@jwt_required()
@role_required("admin", "tutor")
def activate(guardian_id):
    user = current_user()
    guardian = _guardian_or_404(user, guardian_id)

    accounts.activate_guardian(guardian)
    log_event("GUARDIAN_ACTIVATED", user_id=user.id, ip=request.remote_addr, description=guardian.email)
    flash('Responsable activado exitosamente.', 'success')
    return redirect(url_for('admin_guardians.index'))


@admin_guardians_bp.route('/<int:guardian_id>/eliminar', methods=['POST'])
@jwt_required()
@role_required("admin", "tutor")
def delete(guardian_id):
    user = current_user()
    guardian = _guardian_or_404(user, guardian_id)

    try:
        email = guardian.email
        accounts.delete_guardian(guardian)
    except ValidationError as e:
        flash(next(iter(e.errors.values()))[0], 'error')
        return redirect(url_for('admin_guardians.index'))

    log_event("GUARDIAN_DELETED", user_id=user.id, ip=request.remote_addr, description=email)
    flash('Responsable eliminado exitosamente.', 'success')
    return redirect(url_for('admin_guardians.index'))
