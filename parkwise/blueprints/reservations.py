from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required

from parkwise.blueprints.utils import (
    current_user_id,
    get_json_body,
    parse_datetime_field,
    parse_id,
    parse_int_field,
)
from parkwise.errors import ValidationError
from parkwise.services import get_services

reservations_bp = Blueprint('reservations', __name__)


@reservations_bp.route('')
@jwt_required()
def list_reservations():
    return jsonify(get_services().reservations.list_for_user(current_user_id()))


@reservations_bp.route('', methods=['POST'])
@jwt_required()
def create_reservation():
    data = get_json_body()
    missing = [key for key in ('spotId', 'vehicleId', 'startTime', 'endTime') if not data.get(key)]
    if missing:
        raise ValidationError('Missing required fields',
                              errors={key: 'This field is required.' for key in missing})

    errors = {}
    spot_id = parse_int_field(data, 'spotId', errors)
    vehicle_id = parse_int_field(data, 'vehicleId', errors)
    start_time = parse_datetime_field(data, 'startTime', errors)
    end_time = parse_datetime_field(data, 'endTime', errors)
    if errors:
        raise ValidationError('Validation error', errors=errors)

    reservation = get_services().reservations.create(
        user_id=current_user_id(),
        spot_id=spot_id,
        vehicle_id=vehicle_id,
        start_time=start_time,
        end_time=end_time,
    )
    return jsonify(reservation), 201


@reservations_bp.route('/<reservation_id>/cancel', methods=['PUT'])
@jwt_required()
def cancel_reservation(reservation_id):
    reservation = get_services().reservations.cancel(
        parse_id(reservation_id, 'reservation'), current_user_id())
    return jsonify(reservation.to_dict())
