"""
Server-rendered tutor administration. Authentication rides on the JWT
cookies set by ``/auth/login``.
"""
from flask import Blueprint, request, render_template, redirect, url_for, flash, abort
from flask_jwt_extended import jwt_required
from cesi.models import School, Tutor
from cesi.services import accounts
from utils.access_control import scope_to_administrator, scoped_get
from utils.audit import log_event
from utils.decorators import current_user, role_required
from utils.pagination import apply_search
from utils.validation import ValidationError

admin_tutors_bp = Blueprint('admin_tutors', __name__)


def _schools(user):
    return School.query.filter(School.id.in_(scope_to_administrator(user))).order_by(School.name).all()


def _tutor_or_404(user, tutor_id):
    tutor = scoped_get(Tutor, tutor_id, user)
    if tutor is None:
        abort(404)
    return tutor


@admin_tutors_bp.route('/', methods=['GET'])
@jwt_required()
@role_required("admin")
def index():
    user = current_user()
    nombre = request.args.get('nombre', '').strip()

    query = Tutor.query.filter(Tutor.school_id.in_(scope_to_administrator(user)))
    tutors = apply_search(query, Tutor, nombre, ['name']).order_by(Tutor.name).all()
    return render_template('tutors/index.html', tutors=tutors, nombre=nombre)


@admin_tutors_bp.route('/crear', methods=['GET', 'POST'])
@jwt_required()
@role_required("admin")
def create():
    user = current_user()
    schools = _schools(user)
    if not schools:
        flash('Genere una escuela primero.', 'error')
        return redirect(url_for('admin_tutors.index'))

    if request.method == 'GET':
        return render_template('tutors/form.html', tutor=None, schools=schools, errors={}, form={})

    try:
        tutor = accounts.create_tutor(request.form, request.files, {s.id for s in schools})
    except ValidationError as e:
        return render_template('tutors/form.html', tutor=None, schools=schools,
                               errors=e.errors, form=request.form), 422

    log_event("TUTOR_CREATED", user_id=user.id, ip=request.remote_addr, description=tutor.email)
    flash('Tutor creado exitosamente.', 'success')
    return redirect(url_for('admin_tutors.index'))


@admin_tutors_bp.route('/<int:tutor_id>', methods=['GET'])
@jwt_required()
@role_required("admin")
def show(tutor_id):
    tutor = _tutor_or_404(current_user(), tutor_id)
    return render_template('tutors/show.html', tutor=tutor)


@admin_tutors_bp.route('/<int:tutor_id>/editar', methods=['GET', 'POST'])
@jwt_required()
@role_required("admin")
def edit(tutor_id):
    user = current_user()
    tutor = _tutor_or_404(user, tutor_id)
    schools = _schools(user)

    if request.method == 'GET':
        return render_template('tutors/form.html', tutor=tutor, schools=schools, errors={}, form={})

    try:
        accounts.update_tutor(tutor, request.form, request.files, {s.id for s in schools})
    except ValidationError as e:
        return render_template('tutors/form.html', tutor=tutor, schools=schools,
                               errors=e.errors, form=request.form), 422

    flash('Tutor actualizado exitosamente.', 'success')
    return redirect(url_for('admin_tutors.index'))


@admin_tutors_bp.route('/<int:tutor_id>/eliminar', methods=['POST'])
@jwt_required()
@role_required("admin")
def delete(tutor_id):
    user = current_user()
    tutor = _tutor_or_404(user, tutor_id)

    email = tutor.email
    accounts.delete_tutor(tutor)
    log_event("TUTOR_DELETED", user_id=user.id, ip=request.remote_addr, description=email)
    flash('Tutor eliminado exitosamente.', 'success')
    return redirect(url_for('admin_tutors.index'))
