from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required
from cesi.services.storage import serve_file
from utils.access_control import scoped_file_owner
from utils.decorators import current_user

upload_bp = Blueprint('uploads', __name__)


@upload_bp.route('/<path:path>', methods=['GET'])
@jwt_required()
def serve(path):
    """Stored photos, logos and reports, addressed by their relative path.

    Only files referenced by a row in the caller's schools are served.
    """
    if scoped_file_owner(path, current_user()) is None:
        return jsonify({"error": "Archivo no encontrado"}), 404
    return serve_file(path)
