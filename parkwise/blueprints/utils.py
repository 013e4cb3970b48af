from datetime import datetime

from flask import request
from flask_jwt_extended import get_jwt_identity

from parkwise.errors import ValidationError
from parkwise.records import to_utc


def current_user_id():
    """Id of the logged-in user; only valid inside a @jwt_required() view."""
    return int(get_jwt_identity())


def get_json_body():
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data


def parse_id(raw, label):
    """Path ids arrive as strings so a bad one is a 400, not a 404."""
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {label} ID")


def clean_text(data, fields, errors):
    """Pull stripped, non-empty strings out of ``data``; record what's missing."""
    cleaned = {}
    for key in fields:
        value = data.get(key)
        if not isinstance(value, str) or not value.strip():
            errors[key] = 'This field is required.'
        else:
            cleaned[key] = value.strip()
    return cleaned


def parse_int_field(data, key, errors):
    value = data.get(key)
    # 1.9 must not quietly become 1
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    errors[key] = 'Must be an integer.'
    return None


def parse_datetime_field(data, key, errors):
    """ISO-8601 timestamp -> naive UTC datetime. A trailing Z is accepted."""
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        errors[key] = 'Must be an ISO-8601 timestamp.'
        return None
    text = value.strip()
    if text.endswith(('Z', 'z')):
        text = text[:-1] + '+00:00'
    try:
        return to_utc(datetime.fromisoformat(text))
    except ValueError:
        errors[key] = 'Must be an ISO-8601 timestamp.'
        return None
