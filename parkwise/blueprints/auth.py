import re

from flask import Blueprint, current_app, jsonify
from flask_jwt_extended import create_access_token, jwt_required, set_access_cookies, unset_jwt_cookies

from parkwise.blueprints.utils import clean_text, current_user_id, get_json_body
from parkwise.errors import AuthenticationError, ValidationError
from parkwise.services import get_services

auth_bp = Blueprint('auth', __name__)

USERNAME_RE = re.compile(r'^[A-Za-z0-9_.-]{3,50}$')
EMAIL_RE = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')


# --- VALIDATION HELPERS ---
def validate_registration(data):
    """Returns (cleaned fields, field errors)."""
    errors = {}
    cleaned = clean_text(data, ['username', 'fullName', 'email'], errors)

    password = data.get('password')
    if not isinstance(password, str) or not password:
        errors['password'] = 'This field is required.'
    elif len(password) < 6:
        errors['password'] = 'Password must be at least 6 characters long.'

    if 'username' in cleaned and not USERNAME_RE.match(cleaned['username']):
        errors['username'] = 'Username must be 3-50 letters, digits, dots, dashes or underscores.'
    if 'email' in cleaned and not EMAIL_RE.match(cleaned['email']):
        errors['email'] = 'Invalid email address.'

    cleaned['password'] = password
    return cleaned, errors


def login_response(user, status=200):
    access_token = create_access_token(identity=str(user.id))
    response = jsonify(user.to_dict())
    set_access_cookies(response, access_token)
    return response, status


# --- REGISTER ROUTE ---
@auth_bp.route('/register', methods=['POST'])
def register():
    services = get_services()
    data, errors = validate_registration(get_json_body())
    if errors:
        raise ValidationError('Validation error', errors=errors)

    # DuplicateUsernameError (400) comes straight out of the store
    new_user = services.storage.create_user(
        username=data['username'],
        password=services.credentials.hash(data['password']),
        full_name=data['fullName'],
        email=data['email'].lower(),
    )
    current_app.logger.info("Registered user %s (%s)", new_user.username, new_user.id)
    return login_response(new_user, 201)


@auth_bp.route('/login', methods=['POST'])
def login():
    services = get_services()
    data = get_json_body()
    username = data.get('username')
    password = data.get('password')

    if not isinstance(username, str) or not isinstance(password, str) or not username or not password:
        raise ValidationError('Username and password are required')

    user = services.storage.get_user_by_username(username)
    if user is None or not services.credentials.verify(user.password, password):
        current_app.logger.info("Failed login for %s", username)
        raise AuthenticationError('Invalid credentials')

    return login_response(user)


@auth_bp.route('/logout', methods=['POST'])
@jwt_required()
def logout():
    current_app.logger.info("User %s logged out", current_user_id())
    response = jsonify({'message': 'Logged out successfully'})
    unset_jwt_cookies(response)
    return response
