from flask import Blueprint, request, jsonify, current_app
from studysync.models import User
from studysync.extensions import db
from studysync.errors import ValidationError, AuthenticationError, ConflictError
from studysync.utils.decorators import token_required
from werkzeug.security import generate_password_hash, check_password_hash
import jwt
from datetime import datetime, timedelta

auth_bp = Blueprint('auth', __name__)

def issue_token(user):
    return jwt.encode({
        'user_id': user.id,
        'exp': datetime.utcnow() + timedelta(hours=current_app.config['JWT_EXPIRATION_HOURS'])
    }, current_app.config['SECRET_KEY'], algorithm="HS256")

def _token_response(user, status_code=200):
    token = issue_token(user)
    response = jsonify({'success': True, 'data': {'token': token, 'user': user.to_dict()}})
    response.set_cookie(
        current_app.config['JWT_COOKIE_NAME'], token,
        httponly=True,
        samesite='Lax',
        secure=current_app.config.get('SESSION_COOKIE_SECURE', False),
        max_age=current_app.config['JWT_EXPIRATION_HOURS'] * 3600
    )
    return response, status_code

@auth_bp.route('/register', methods=['POST'])
def register():
    data = request.get_json(silent=True) or {}
    if not data.get('email') or not data.get('password') or not data.get('name'):
        raise ValidationError('Name, email and password are required')

    email = data['email'].strip().lower()
    if User.query.filter_by(email=email).first():
        raise ConflictError('Email already exists')

    user = User(
        name=data['name'],
        email=email,
        password_hash=generate_password_hash(data['password']),
        department=data.get('department')
    )
    db.session.add(user)
    db.session.commit()
    current_app.logger.info(f"Registered user {user.id}")
    return _token_response(user, 201)

@auth_bp.route('/login', methods=['POST'])
def login():
    data = request.get_json(silent=True) or {}
    user = User.query.filter_by(email=(data.get('email') or '').strip().lower()).first()

    if not user or not check_password_hash(user.password_hash or '', data.get('password') or ''):
        raise AuthenticationError('Invalid credentials')

    return _token_response(user)

@auth_bp.route('/logout', methods=['POST'])
def logout():
    response = jsonify({'success': True, 'message': 'Logged out'})
    response.delete_cookie(current_app.config['JWT_COOKIE_NAME'])
    response.delete_cookie(current_app.config['JWT_LEGACY_COOKIE_NAME'])
    return response

@auth_bp.route('/me', methods=['GET'])
@token_required
def me(current_user):
    return jsonify({'success': True, 'data': current_user.to_dict()})
