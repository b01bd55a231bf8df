from studysync.extensions import db
from studysync.utils.timeparse import isoformat_utc
from datetime import datetime

# Statuses that hold the room or seat
BLOCKING_STATUSES = ('reserved', 'occupied')

class Reservation(db.Model):
    __tablename__ = 'reservations'

    id = db.Column(db.Integer, primary_key=True)
    room_id = db.Column(db.Integer, db.ForeignKey('library_rooms.id'), nullable=False, index=True)
    seat_id = db.Column(db.Integer, db.ForeignKey('seats.id'), nullable=True, index=True)  # NULL = whole room
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)

    start_time = db.Column(db.DateTime, nullable=False, index=True)
    end_time = db.Column(db.DateTime, nullable=False, index=True)

    purpose = db.Column(db.String(255))
    status = db.Column(db.String(20), nullable=False, default='reserved')  # reserved, occupied, completed
    room_capacity = db.Column(db.Integer)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    room = db.relationship('LibraryRoom')
    seat = db.relationship('Seat')

    __table_args__ = (db.CheckConstraint('end_time > start_time', name='check_reservation_window'),)

    @property
    def is_blocking(self):
        return self.status in BLOCKING_STATUSES

    def to_dict(self, include_room=False):
        data = {
            'id': self.id,
            'room_id': self.room_id,
            'seat_id': self.seat_id,
            'seat_number': self.seat.seat_number if self.seat else None,
            'user_id': self.user_id,
            'start_time': isoformat_utc(self.start_time),
            'end_time': isoformat_utc(self.end_time),
            'purpose': self.purpose,
            'status': self.status,
            'room_capacity': self.room_capacity,
            'created_at': isoformat_utc(self.created_at)
        }
        if include_room and self.room:
            data['room'] = {
                'id': self.room.id,
                'name': self.room.name,
                'room_number': self.room.room_number,
                'formatted_room_number': self.room.formatted_room_number,
                'floor_number': self.room.floor_number,
                'capacity': self.room.capacity
            }
        return data
