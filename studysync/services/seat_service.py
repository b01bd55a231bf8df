from studysync.models import Seat, Reservation
from studysync.models.reservation import BLOCKING_STATUSES
from studysync.extensions import db
from studysync.errors import NotFoundError
from studysync.services.availability_service import AvailabilityService
from studysync.services.room_service import RoomService
from studysync.utils.timeparse import utcnow

class SeatService:

    @staticmethod
    def current_reservations(seat_id, now=None):
        """Reservations on the seat in effect right now."""
        now = now or utcnow()
        return Reservation.query.filter(
            Reservation.seat_id == seat_id,
            Reservation.status.in_(BLOCKING_STATUSES),
            Reservation.start_time <= now,
            Reservation.end_time >= now
        ).order_by(Reservation.start_time).all()

    @staticmethod
    def seats_with_reservations(room_id, now=None):
        RoomService.get_room(room_id)
        seats = AvailabilityService.active_seats(room_id)
        return [(seat, SeatService.current_reservations(seat.id, now)) for seat in seats]

    @staticmethod
    def get_seat(seat_id):
        seat = db.session.get(Seat, seat_id)
        if not seat:
            raise NotFoundError("Seat not found")
        return seat

    @staticmethod
    def booked_seats(room_id, start_time, end_time):
        RoomService.get_room(room_id)
        return AvailabilityService.booked_seats(room_id, start_time, end_time)
