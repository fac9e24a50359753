from flask import request, jsonify, make_response, current_app
from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request
from datetime import datetime


def log_rate_limit_violation(request_limit):
    """Flask-Limiter ``on_breach`` hook: records the breach and answers 429."""
    from cesi.models import AuditLog
    from cesi.extensions import db

    try:
        verify_jwt_in_request(optional=True)
        user_id = get_jwt_identity()
    except Exception:
        user_id = None

    current_app.logger.warning(
        "Rate limit %s exceeded: %s %s from %s",
        request_limit.limit, request.method, request.path, request.remote_addr,
    )

    log = AuditLog(
        user_id=int(user_id) if user_id else None,
        action=f"RATE_LIMIT_EXCEEDED: {request.method} {request.path}",
        ip_address=request.remote_addr,
        timestamp=datetime.utcnow(),
    )
    db.session.add(log)
    db.session.commit()

    return make_response(jsonify({
        "error": "Demasiadas solicitudes. Intenta de nuevo más tarde."
    }), 429)
