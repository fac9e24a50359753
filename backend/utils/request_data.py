from flask import request


def request_data():
    """Body fields from a JSON payload or a submitted form."""
    if request.is_json:
        return request.get_json(silent=True) or {}
    return request.form
