"""Application errors and their JSON rendering."""
import traceback

from flask import jsonify, current_app
from werkzeug.exceptions import HTTPException

from studysync.extensions import db


class StudySyncError(ValueError):
    """Base error carrying the HTTP status it maps to."""

    status_code = 400

    def __init__(self, message: str, status_code: int = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class ValidationError(StudySyncError):
    status_code = 400


class BookingLimitError(StudySyncError):
    status_code = 400


class AuthenticationError(StudySyncError):
    status_code = 401


class PermissionDeniedError(StudySyncError):
    status_code = 403


class NotFoundError(StudySyncError):
    status_code = 404


class ConflictError(StudySyncError):
    status_code = 409


def error_response(message, status_code):
    return jsonify({'success': False, 'message': message}), status_code


def register_error_handlers(app):

    @app.errorhandler(StudySyncError)
    def handle_studysync_error(e):
        db.session.rollback()
        current_app.logger.info(f"{type(e).__name__} ({e.status_code}): {e.message}")
        return error_response(e.message, e.status_code)

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return error_response(e.description, e.code)

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        db.session.rollback()
        current_app.logger.error(f"Unhandled error: {e}\n{traceback.format_exc()}")
        return error_response('Internal server error', 500)
