from studysync.extensions import db
from flask import current_app
from studysync.models.seat import seat_sort_key

ROOM_TYPES = ('conference', 'study', 'meeting', 'silent')

def is_room_mode(capacity, threshold=None):
    """Rooms below the threshold are booked whole; larger ones seat by seat."""
    if threshold is None:
        threshold = current_app.config['ROOM_MODE_CAPACITY_THRESHOLD']
    return capacity < threshold

class LibraryRoom(db.Model):
    __tablename__ = 'library_rooms'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    room_number = db.Column(db.String(16), nullable=False)
    floor_number = db.Column(db.Integer)
    capacity = db.Column(db.Integer, nullable=False)
    features = db.Column(db.JSON, default=list)  # e.g. ["whiteboard", "projector"]
    size_sqft = db.Column(db.Integer)
    description = db.Column(db.Text)
    image_url = db.Column(db.String(512))
    is_active = db.Column(db.Boolean, default=True)

    seats = db.relationship('Seat', backref='room', lazy='dynamic', order_by='Seat.seat_number')

    __table_args__ = (db.CheckConstraint('capacity > 0', name='check_capacity_positive'),)

    @property
    def formatted_room_number(self):
        # floor 1, room "05" -> "0105"
        if self.floor_number is not None and self.room_number:
            return f"{self.floor_number:02d}{self.room_number}"
        return self.room_number or ''

    @property
    def room_type(self):
        name = (self.name or '').lower()
        for room_type in ROOM_TYPES:
            if room_type in name:
                return room_type
        return 'other'

    @property
    def booking_mode(self):
        return 'room' if is_room_mode(self.capacity) else 'seat'

    def to_dict(self, include_seats=False):
        data = {
            'id': self.id,
            'name': self.name,
            'room_number': self.room_number,
            'formatted_room_number': self.formatted_room_number,
            'floor_number': self.floor_number,
            'capacity': self.capacity,
            'features': self.features or [],
            'size_sqft': self.size_sqft,
            'description': self.description,
            'image_url': self.image_url,
            'room_type': self.room_type,
            'booking_mode': self.booking_mode,
            'is_active': self.is_active
        }
        if include_seats:
            data['seats'] = [s.to_dict() for s in sorted(self.seats.filter_by(is_active=True), key=seat_sort_key)]
        return data
