from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required

from parkwise.blueprints.utils import current_user_id, parse_id
from parkwise.services import get_services

notifications_bp = Blueprint('notifications', __name__)


@notifications_bp.route('')
@jwt_required()
def list_notifications():
    notifications = get_services().notifications.list_for_user(current_user_id())
    return jsonify([n.to_dict() for n in notifications])


@notifications_bp.route('/unread-count')
@jwt_required()
def unread_count():
    return jsonify({'count': get_services().notifications.unread_count(current_user_id())})


@notifications_bp.route('/<notification_id>/read', methods=['PUT'])
@jwt_required()
def mark_read(notification_id):
    notification = get_services().notifications.mark_read(
        parse_id(notification_id, 'notification'), current_user_id())
    return jsonify(notification.to_dict())
