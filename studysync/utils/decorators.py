from functools import wraps
from flask import request, jsonify, current_app
import jwt
from studysync.extensions import db
from studysync.models import User

def _token_from_request():
    # Bearer <token>, then the session cookie, then the cookie older clients set
    auth_header = request.headers.get('Authorization', '')
    if auth_header.startswith("Bearer "):
        return auth_header.split(" ")[1]
    return (request.cookies.get(current_app.config['JWT_COOKIE_NAME'])
            or request.cookies.get(current_app.config['JWT_LEGACY_COOKIE_NAME']))

def token_required(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        token = _token_from_request()
        if not token:
            return jsonify({'success': False, 'message': 'Authentication required'}), 401

        try:
            data = jwt.decode(token, current_app.config['SECRET_KEY'], algorithms=["HS256"])
        except jwt.ExpiredSignatureError:
            return jsonify({'success': False, 'message': 'Token has expired'}), 401
        except jwt.InvalidTokenError:
            return jsonify({'success': False, 'message': 'Invalid token'}), 401

        user_id = data.get('user_id')
        current_user = db.session.get(User, user_id) if user_id is not None else None
        if not current_user:
            return jsonify({'success': False, 'message': 'User not found'}), 401

        return f(current_user, *args, **kwargs)

    return decorated
