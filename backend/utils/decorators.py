from functools import wraps
from flask_jwt_extended import get_jwt_identity
from flask import jsonify
from cesi.extensions import db
from cesi.models import User


def current_user():
    user_id = get_jwt_identity()
    if not user_id:
        return None
    return db.session.get(User, int(user_id))


def role_required(*allowed_roles):
    """
    Restrict access to users with specific roles.
    Usage: @role_required("admin", "teacher")
    Must be stacked under @jwt_required().
    """
    allowed_roles = set(role.lower() for role in allowed_roles)

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            user_id = get_jwt_identity()
            if not user_id:
                return jsonify({"error": "Token inválido o ausente"}), 401

            user = db.session.get(User, int(user_id))
            if not user:
                return jsonify({"error": "Usuario no encontrado"}), 401

            if user.role.value not in allowed_roles:
                return jsonify({"error": "Acceso denegado: permisos insuficientes"}), 403

            return fn(*args, **kwargs)
        return wrapper
    return decorator
