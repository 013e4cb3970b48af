from flask import Blueprint, jsonify, request

from parkwise.availability import lot_availability, lot_detail, spots_by_type
from parkwise.blueprints.utils import parse_id
from parkwise.errors import NotFoundError, ValidationError
from parkwise.services import get_services

lots_bp = Blueprint('lots', __name__)


def get_lot_or_404(storage, raw_id):
    lot = storage.get_parking_lot(parse_id(raw_id, 'parking lot'))
    if lot is None:
        raise NotFoundError('Parking lot not found')
    return lot


@lots_bp.route('')
def list_lots():
    storage = get_services().storage
    return jsonify([lot_availability(storage, lot) for lot in storage.list_parking_lots()])


@lots_bp.route('/<lot_id>')
def get_lot(lot_id):
    storage = get_services().storage
    return jsonify(lot_detail(storage, get_lot_or_404(storage, lot_id)))


@lots_bp.route('/<lot_id>/spots')
def get_spots_by_type(lot_id):
    """Available spots of one type, e.g. /api/parking-lots/1/spots?type=student"""
    storage = get_services().storage
    lot = get_lot_or_404(storage, lot_id)
    spot_type = request.args.get('type')
    if not spot_type:
        raise ValidationError('Spot type is required', errors={'type': 'This field is required.'})
    return jsonify(spots_by_type(storage, lot.id, spot_type))
