from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required
from cesi.extensions import db
from cesi.models import Pickup, TrackingEvent
from cesi.services import pickups as pickup_service
from utils.access_control import scoped_get
from utils.decorators import current_user
from utils.request_data import request_data

tracking_bp = Blueprint('tracking', __name__)

PICKUP_NOT_FOUND = {"error": "Recogida no encontrada"}
EVENT_NOT_FOUND = {"error": "Rastreo no encontrado"}


def _event(pickup, event_id):
    event = db.session.get(TrackingEvent, event_id)
    if event is None or event.pickup_id != pickup.id:
        return None
    return event


@tracking_bp.route('/recogida/<int:pickup_id>', methods=['GET'])
@jwt_required()
def list_events(pickup_id):
    pickup = scoped_get(Pickup, pickup_id, current_user())
    if not pickup:
        return jsonify(PICKUP_NOT_FOUND), 404
    return jsonify([e.to_dict() for e in pickup.tracking_events]), 200


@tracking_bp.route('/recogida/<int:pickup_id>', methods=['POST'])
@jwt_required()
def create_event(pickup_id):
    pickup = scoped_get(Pickup, pickup_id, current_user())
    if not pickup:
        return jsonify(PICKUP_NOT_FOUND), 404

    event = pickup_service.record_tracking_event(pickup, request_data())
    return jsonify({"message": "Rastreo registrado", "rastreo": event.to_dict()}), 201


@tracking_bp.route('/recogida/<int:pickup_id>/<int:event_id>', methods=['GET'])
@jwt_required()
def show_event(pickup_id, event_id):
    pickup = scoped_get(Pickup, pickup_id, current_user())
    if not pickup:
        return jsonify(PICKUP_NOT_FOUND), 404
    event = _event(pickup, event_id)
    if not event:
        return jsonify(EVENT_NOT_FOUND), 404
    return jsonify(event.to_dict()), 200


@tracking_bp.route('/recogida/<int:pickup_id>/<int:event_id>', methods=['PUT'])
@jwt_required()
def update_event(pickup_id, event_id):
    pickup = scoped_get(Pickup, pickup_id, current_user())
    if not pickup:
        return jsonify(PICKUP_NOT_FOUND), 404
    event = _event(pickup, event_id)
    if not event:
        return jsonify(EVENT_NOT_FOUND), 404

    pickup_service.update_tracking_event(event, request_data())
    return jsonify({"message": "Rastreo actualizado", "rastreo": event.to_dict()}), 200


@tracking_bp.route('/recogida/<int:pickup_id>/<int:event_id>', methods=['DELETE'])
@jwt_required()
def delete_event(pickup_id, event_id):
    pickup = scoped_get(Pickup, pickup_id, current_user())
    if not pickup:
        return jsonify(PICKUP_NOT_FOUND), 404
    event = _event(pickup, event_id)
    if not event:
        return jsonify(EVENT_NOT_FOUND), 404

    pickup_service.delete_tracking_event(event)
    return jsonify({"message": "Rastreo eliminado"}), 200
