from datetime import datetime
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from studysync.extensions import db
from studysync.models import LibraryRoom, Seat, Reservation
from studysync.models.reservation import BLOCKING_STATUSES
from studysync.models.room import is_room_mode
from studysync.models.seat import seat_sort_key

class AvailabilityService:

    @staticmethod
    def overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
        """Half-open interval test: [a_start, a_end) intersects [b_start, b_end)."""
        return a_start < b_end and a_end > b_start

    @staticmethod
    def conflicts_query(start_time, end_time):
        """Blocking reservations whose window intersects [start_time, end_time)."""
        # (StartA < EndB) and (EndA > StartB)
        return Reservation.query.filter(
            Reservation.status.in_(BLOCKING_STATUSES),
            Reservation.start_time < end_time,
            Reservation.end_time > start_time
        )

    @staticmethod
    def find_conflicts(start_time, end_time, room_id=None, seat_id=None, room_level_only=False):
        query = AvailabilityService.conflicts_query(start_time, end_time)
        if room_id is not None:
            query = query.filter(Reservation.room_id == room_id)
        if seat_id is not None:
            query = query.filter(Reservation.seat_id == seat_id)
        if room_level_only:
            query = query.filter(Reservation.seat_id.is_(None))
        return query.all()

    @staticmethod
    def active_seats(room_id):
        return sorted(Seat.query.filter_by(room_id=room_id, is_active=True).all(), key=seat_sort_key)

    @staticmethod
    def booked_seats(room_id, start_time, end_time):
        """Seats of the room that cannot be taken for the window.

        A whole-room reservation blocks every seat, otherwise only the seats
        holding an intersecting reservation are returned.
        """
        if AvailabilityService.find_conflicts(start_time, end_time, room_id=room_id, room_level_only=True):
            return AvailabilityService.active_seats(room_id)

        booked_ids = {
            r.seat_id for r in AvailabilityService.find_conflicts(start_time, end_time, room_id=room_id)
            if r.seat_id is not None
        }
        if not booked_ids:
            return []
        # Seats taken out of service no longer count towards the room's capacity
        seats = Seat.query.filter(Seat.id.in_(booked_ids), Seat.is_active.is_(True)).all()
        return sorted(seats, key=seat_sort_key)

    @staticmethod
    def is_room_available(room_id, start_time, end_time) -> bool:
        room = db.session.get(LibraryRoom, room_id)
        if not room or not room.is_active:
            return False

        if is_room_mode(room.capacity):
            return not AvailabilityService.find_conflicts(start_time, end_time, room_id=room.id)

        # Seat-mode: a whole-room hold blocks it, otherwise it stays open while a seat is free
        if AvailabilityService.find_conflicts(start_time, end_time, room_id=room.id, room_level_only=True):
            return False
        total_seats = len(AvailabilityService.active_seats(room.id))
        booked = AvailabilityService.booked_seats(room.id, start_time, end_time)
        return len(booked) < total_seats

    @staticmethod
    def is_seat_available(seat_id, start_time, end_time) -> bool:
        seat = db.session.get(Seat, seat_id)
        if not seat or not seat.is_active:
            return False
        if AvailabilityService.find_conflicts(start_time, end_time, seat_id=seat.id):
            return False
        return not AvailabilityService.find_conflicts(
            start_time, end_time, room_id=seat.room_id, room_level_only=True
        )

    @staticmethod
    def check_room_availability(room_id, start_time, end_time):
        """
        Availability as reported to clients.
        A failed lookup is reported with status 'unknown'; whether it counts as
        available follows the AVAILABILITY_FAIL_OPEN setting.
        """
        try:
            available = AvailabilityService.is_room_available(room_id, start_time, end_time)
        except SQLAlchemyError as e:
            db.session.rollback()
            fail_open = current_app.config.get('AVAILABILITY_FAIL_OPEN', True)
            current_app.logger.warning(
                f"Availability lookup failed for room {room_id} "
                f"({start_time} - {end_time}), reporting available={fail_open}: {e}"
            )
            return {'available': fail_open, 'status': 'unknown'}

        return {'available': available, 'status': 'available' if available else 'unavailable'}
