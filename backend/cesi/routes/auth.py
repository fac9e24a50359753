from flask import Blueprint, request, jsonify, current_app, make_response
from flask_jwt_extended import (
    create_access_token, create_refresh_token, jwt_required,
    get_jwt_identity, get_jwt
)
from cesi.models import User, TokenBlocklist
from cesi.extensions import db, limiter
from utils.audit import log_event
from utils.request_data import request_data
from datetime import datetime

auth_bp = Blueprint('auth', __name__)


def _access_token(user):
    return create_access_token(
        identity=str(user.id),
        additional_claims={"role": user.role.value, "email": user.email}
    )


def _set_auth_cookies(response, access_token, refresh_token=None):
    secure_flag = current_app.config["JWT_COOKIE_SECURE"]
    same_site = current_app.config["JWT_COOKIE_SAMESITE"]
    access_expires = current_app.config["JWT_ACCESS_TOKEN_EXPIRES"]
    refresh_expires = current_app.config["JWT_REFRESH_TOKEN_EXPIRES"]

    response.set_cookie(
        "access_token_cookie",
        access_token,
        max_age=int(access_expires.total_seconds()),
        httponly=True,
        secure=secure_flag,
        samesite=same_site,
        path="/"
    )
    if refresh_token:
        response.set_cookie(
            "refresh_token_cookie",
            refresh_token,
            max_age=int(refresh_expires.total_seconds()),
            httponly=True,
            secure=secure_flag,
            samesite=same_site,
            path="/auth/refresh"
        )
    return response


@auth_bp.route('/login', methods=['POST'])
@limiter.limit("5 per minute", override_defaults=False)
def login():
    data = request_data()
    email = data.get('email') or ''
    password = data.get('password') or ''
    ip = request.remote_addr

    if not isinstance(email, str) or not isinstance(password, str):
        return jsonify({"error": "El correo y la contraseña deben ser texto"}), 400

    email = email.strip()
    if not email or not password:
        return jsonify({"error": "El correo y la contraseña son obligatorios"}), 400

    user = User.query.filter_by(email=email).first()

    if user and user.check_password(password):
        access_token = _access_token(user)
        refresh_token = create_refresh_token(identity=str(user.id))

        response = make_response(jsonify({
            "message": "Inicio de sesión exitoso",
            "access_token": access_token,
            "token_type": "Bearer",
            "user": user.to_dict(),
        }))
        _set_auth_cookies(response, access_token, refresh_token)

        log_event("LOGIN_SUCCESS", user_id=user.id, ip=ip, description=f"{email} logged in")
        return response

    log_event("LOGIN_FAILED", ip=ip, description=f"Failed login attempt for {email}", level="WARNING")
    return jsonify({"error": "Credenciales inválidas"}), 401


@auth_bp.route('/me', methods=['GET'])
@jwt_required()
def get_current_user():
    user = db.session.get(User, int(get_jwt_identity()))
    if not user:
        return jsonify({"error": "Usuario no encontrado"}), 404
    return jsonify(user.to_dict()), 200


@auth_bp.route('/refresh', methods=['POST'])
@jwt_required(refresh=True)
def refresh_access_token():
    user = db.session.get(User, int(get_jwt_identity()))
    if not user:
        return jsonify({"error": "Usuario no encontrado"}), 404

    access_token = _access_token(user)
    response = make_response(jsonify({"message": "Token renovado", "access_token": access_token}))
    _set_auth_cookies(response, access_token)

    log_event("REFRESH_TOKEN", user_id=user.id, ip=request.remote_addr)
    return response


@auth_bp.route("/logout", methods=["POST"])
@jwt_required()
def logout():
    claims = get_jwt()
    user_id = int(get_jwt_identity())

    token_block = TokenBlocklist(
        jti=claims["jti"],
        token_type=claims.get("type", "access"),
        user_id=user_id,
        expires_at=datetime.utcfromtimestamp(claims["exp"]),
    )
    db.session.add(token_block)
    db.session.commit()

    response = make_response(jsonify({"message": "Sesión cerrada correctamente"}))
    response.delete_cookie("access_token_cookie", path="/")
    response.delete_cookie("refresh_token_cookie", path="/auth/refresh")

    log_event("LOGOUT", user_id=user_id, ip=request.remote_addr)
    return response
