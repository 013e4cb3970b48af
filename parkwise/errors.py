from flask import current_app, jsonify
from werkzeug.exceptions import HTTPException

from parkwise.extensions import jwt


class ParkWiseError(Exception):
    """Base for every error that maps onto an HTTP response."""

    status_code = 500

    def __init__(self, message, errors=None):
        super().__init__(message)
        self.message = message
        self.errors = errors

    def to_dict(self):
        payload = {'message': self.message}
        if self.errors:
            payload['errors'] = self.errors
        return payload


class ValidationError(ParkWiseError):
    status_code = 400


class AuthenticationError(ParkWiseError):
    status_code = 401


class ForbiddenError(ParkWiseError):
    status_code = 403


class NotFoundError(ParkWiseError):
    status_code = 404


class ConflictError(ParkWiseError):
    status_code = 400


class ServerError(ParkWiseError):
    status_code = 500


class DuplicateUsernameError(ValidationError):
    def __init__(self, username):
        super().__init__('Username already exists')
        self.username = username


def _unauthorized(*args):
    return jsonify({'message': 'Unauthorized'}), 401


def register_error_handlers(app):
    @app.errorhandler(ParkWiseError)
    def handle_parkwise_error(error):
        if error.status_code >= 500:
            current_app.logger.error('%s: %s', type(error).__name__, error.message)
        else:
            current_app.logger.info('Rejected request (%s): %s', error.status_code, error.message)
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({'message': error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        current_app.logger.exception('Unhandled error')
        failure = ServerError('Server error')
        return jsonify(failure.to_dict()), failure.status_code

    # Missing, malformed and expired session cookies all look the same to clients
    jwt.unauthorized_loader(_unauthorized)
    jwt.invalid_token_loader(_unauthorized)
    jwt.expired_token_loader(_unauthorized)
    jwt.revoked_token_loader(_unauthorized)
