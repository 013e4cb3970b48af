import re

from flask import Blueprint, current_app, jsonify
from flask_jwt_extended import jwt_required

from parkwise.blueprints.utils import clean_text, current_user_id, get_json_body
from parkwise.errors import NotFoundError, ValidationError
from parkwise.services import get_services

user_bp = Blueprint('user', __name__)

PLATE_RE = re.compile(r'^[A-Z0-9][A-Z0-9 -]{0,9}$')
STATE_RE = re.compile(r'^[A-Z]{2}$')


@user_bp.route('/user/current')
@jwt_required()
def current_user():
    user = get_services().storage.get_user(current_user_id())
    if user is None:
        raise NotFoundError('User not found')
    return jsonify(user.to_dict())


# =========================================================
# VEHICLES
# =========================================================
@user_bp.route('/vehicles')
@jwt_required()
def list_vehicles():
    vehicles = get_services().storage.list_vehicles(current_user_id())
    return jsonify([v.to_dict() for v in vehicles])


def validate_vehicle(data):
    errors = {}
    cleaned = clean_text(data, ['make', 'model', 'licensePlate', 'state'], errors)

    if 'licensePlate' in cleaned:
        cleaned['licensePlate'] = cleaned['licensePlate'].upper()
        if not PLATE_RE.match(cleaned['licensePlate']):
            errors['licensePlate'] = 'Invalid license plate (up to 10 letters, digits, spaces or dashes).'
    if 'state' in cleaned:
        cleaned['state'] = cleaned['state'].upper()
        if not STATE_RE.match(cleaned['state']):
            errors['state'] = 'Use the two-letter state code (e.g. NJ).'
    return cleaned, errors


@user_bp.route('/vehicles', methods=['POST'])
@jwt_required()
def add_vehicle():
    user_id = current_user_id()
    data, errors = validate_vehicle(get_json_body())
    if errors:
        raise ValidationError('Validation error', errors=errors)

    vehicle = get_services().storage.create_vehicle(
        user_id=user_id,
        make=data['make'],
        model=data['model'],
        license_plate=data['licensePlate'],
        state=data['state'],
    )
    current_app.logger.info("User %s added vehicle %s (%s)", user_id, vehicle.id, vehicle.license_plate)
    return jsonify(vehicle.to_dict()), 201
