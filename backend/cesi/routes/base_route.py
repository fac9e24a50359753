from flask import Blueprint, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from cesi.extensions import db

base_bp = Blueprint("base", __name__)


@base_bp.route("/")
def home():
    return jsonify({"message": "Bienvenido a la API de CESI"})


@base_bp.route("/api/test-db")
def test_db():
    try:
        db.session.execute(text("SELECT 1"))
        return {"status": "success"}
    except SQLAlchemyError as e:
        return {"status": "error", "message": str(e)}, 500
