import re
from studysync.extensions import db

def seat_sort_key(seat):
    # "S-2" before "S-10", "2" before "10"
    return [int(part) if part.isdigit() else part.lower() for part in re.split(r"(\d+)", seat.seat_number or "")]

class Seat(db.Model):
    __tablename__ = 'seats'

    id = db.Column(db.Integer, primary_key=True)
    room_id = db.Column(db.Integer, db.ForeignKey('library_rooms.id'), nullable=False, index=True)
    seat_number = db.Column(db.String(16), nullable=False)
    position_x = db.Column(db.Integer)
    position_y = db.Column(db.Integer)
    has_computer = db.Column(db.Boolean, default=False)
    has_power_outlet = db.Column(db.Boolean, default=False)
    is_accessible = db.Column(db.Boolean, default=False)
    is_active = db.Column(db.Boolean, default=True)

    __table_args__ = (db.UniqueConstraint('room_id', 'seat_number', name='uq_seat_room_number'),)

    def to_dict(self, reservations=None):
        data = {
            'id': self.id,
            'room_id': self.room_id,
            'seat_number': self.seat_number,
            'position_x': self.position_x,
            'position_y': self.position_y,
            'has_computer': self.has_computer,
            'has_power_outlet': self.has_power_outlet,
            'is_accessible': self.is_accessible,
            'is_active': self.is_active
        }
        if reservations is not None:
            data['reservations'] = [r.to_dict() for r in reservations]
        return data
