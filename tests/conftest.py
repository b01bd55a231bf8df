import pytest
from datetime import timedelta
from studysync import create_app, db
from studysync.models import User, LibraryRoom, Seat
from studysync.config import TestingConfig
from studysync.api.routes.auth import issue_token
from studysync.utils.timeparse import utcnow
from werkzeug.security import generate_password_hash

@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()

@pytest.fixture
def client(app):
    return app.test_client()

@pytest.fixture
def init_data(app):
    user = User(name='Test', email='test@test.com', password_hash=generate_password_hash('password'))
    other = User(name='Other', email='other@test.com', password_hash=generate_password_hash('password'))
    room_small = LibraryRoom(name='Group Study Room', room_number='01', floor_number=1, capacity=6,
                             features=['whiteboard'])
    room_large = LibraryRoom(name='Silent Hall', room_number='05', floor_number=1, capacity=20,
                             features=['power_outlets'])
    db.session.add_all([user, other, room_small, room_large])
    db.session.flush()
    for n in range(1, 21):
        db.session.add(Seat(room_id=room_large.id, seat_number=f'S-{n}'))
    db.session.commit()
    return user, other, room_small, room_large

@pytest.fixture
def tomorrow():
    """09:00 UTC tomorrow, far enough ahead for reservations to count as active."""
    return (utcnow() + timedelta(days=1)).replace(hour=9, minute=0, second=0, microsecond=0)

def auth_headers(user):
    return {'Authorization': f'Bearer {issue_token(user)}'}

def seat_by_number(room, number):
    return Seat.query.filter_by(room_id=room.id, seat_number=number).first()
