from flask import current_app
from studysync.models import LibraryRoom, Seat, Reservation
from studysync.models.reservation import BLOCKING_STATUSES
from studysync.models.room import is_room_mode
from studysync.extensions import db
from studysync.errors import (
    ValidationError, BookingLimitError, NotFoundError, ConflictError, PermissionDeniedError
)
from studysync.services.availability_service import AvailabilityService
from studysync.utils.timeparse import utcnow

class BookingService:

    @staticmethod
    def count_active_reservations(user_id, now=None):
        """Reservations still holding a room or seat (not completed, not yet ended)."""
        now = now or utcnow()
        return Reservation.query.filter(
            Reservation.user_id == user_id,
            Reservation.status.in_(BLOCKING_STATUSES),
            Reservation.end_time >= now
        ).count()

    @staticmethod
    def _lock_room(room_id):
        # Serializes concurrent bookings of the same room on backends with row locks
        room = LibraryRoom.query.filter_by(id=room_id).with_for_update().first()
        if not room or not room.is_active:
            raise NotFoundError("Room not found")
        return room

    @staticmethod
    def _resolve_seats(room, selected_seats):
        """Map client selections (seat ids or seat numbers) to active seats of the room."""
        seats = []
        seen = set()
        for selection in selected_seats:
            if isinstance(selection, bool):
                raise ValidationError(f"Invalid seat selection: {selection}")
            if isinstance(selection, int):
                seat = Seat.query.filter_by(id=selection, room_id=room.id, is_active=True).first()
            else:
                seat = Seat.query.filter_by(
                    seat_number=str(selection), room_id=room.id, is_active=True
                ).first()
            if not seat:
                raise NotFoundError(f"Seat {selection} not found in room {room.room_number}")
            if seat.id in seen:
                continue
            seen.add(seat.id)
            seats.append(seat)
        return seats

    @staticmethod
    def _check_seat_limit(seats):
        max_seats = current_app.config['MAX_SEATS_PER_BOOKING']
        if not seats:
            raise ValidationError("Please select at least one seat")
        if len(seats) > max_seats:
            raise BookingLimitError(f"You can only book up to {max_seats} seats at a time")

    @staticmethod
    def create_reservation(user, room_id, start_time, end_time, purpose=None,
                           selected_seats=None, room_capacity=None):
        """
        Validate and persist a booking.
        Small rooms produce one room-level row; large rooms one row per selected seat.
        Every row is written in one transaction, so either all seats are booked or none.
        """
        if end_time <= start_time:
            raise ValidationError("End time must be after start time")

        try:
            room = BookingService._lock_room(room_id)

            if room_capacity is not None and room_capacity != room.capacity:
                current_app.logger.warning(
                    f"Client sent room_capacity={room_capacity} for room {room.id}, stored capacity is {room.capacity}"
                )

            # 1. Room or seat availability, re-checked under the lock
            if is_room_mode(room.capacity):
                seats = []
                if AvailabilityService.find_conflicts(start_time, end_time, room_id=room.id):
                    raise ConflictError("Room is already reserved for the selected time period")
            else:
                seats = BookingService._resolve_seats(room, selected_seats or [])
                BookingService._check_seat_limit(seats)
                if AvailabilityService.find_conflicts(start_time, end_time, room_id=room.id, room_level_only=True):
                    raise ConflictError("Room is already reserved for the selected time period")
                for seat in seats:
                    if AvailabilityService.find_conflicts(start_time, end_time, seat_id=seat.id):
                        raise ConflictError(f"Seat {seat.seat_number} is already booked for the selected time period")

            # 2. One place at a time per user
            overlapping = AvailabilityService.conflicts_query(start_time, end_time).filter(
                Reservation.user_id == user.id
            ).first()
            if overlapping:
                raise ConflictError("You already have a reservation during this time period")

            # 3. Booking cap
            max_active = current_app.config['MAX_ACTIVE_RESERVATIONS']
            new_rows = len(seats) or 1
            if BookingService.count_active_reservations(user.id) + new_rows > max_active:
                raise BookingLimitError(f"You have reached the maximum limit of {max_active} active reservations")

            # 4. Transaction
            if seats:
                reservations = [
                    Reservation(
                        room_id=room.id,
                        seat_id=seat.id,
                        user_id=user.id,
                        start_time=start_time,
                        end_time=end_time,
                        purpose=f"{purpose or 'Seat reservation'} - Seat {seat.seat_number}",
                        status='reserved',
                        room_capacity=room.capacity
                    )
                    for seat in seats
                ]
            else:
                reservations = [Reservation(
                    room_id=room.id,
                    user_id=user.id,
                    start_time=start_time,
                    end_time=end_time,
                    purpose=purpose or 'Room reservation',
                    status='reserved',
                    room_capacity=room.capacity
                )]
            db.session.add_all(reservations)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        current_app.logger.info(
            f"User {user.id} reserved room {room.id} ({room.booking_mode} mode, "
            f"{len(reservations)} row(s)) {start_time.isoformat()} - {end_time.isoformat()}"
        )
        return reservations

    @staticmethod
    def reserve_seat(user, seat_id, start_time, end_time, purpose=None):
        """Book a single seat by id through the same validation as a room booking."""
        seat = db.session.get(Seat, seat_id)
        if not seat or not seat.is_active:
            raise NotFoundError("Seat not found")
        if is_room_mode(seat.room.capacity):
            raise ValidationError("This room is booked as a whole, seats cannot be reserved individually")
        reservations = BookingService.create_reservation(
            user, seat.room_id, start_time, end_time, purpose=purpose, selected_seats=[seat.id]
        )
        return reservations[0]

    @staticmethod
    def get_user_reservations(user_id, now=None):
        """Upcoming and ongoing reservations for a user."""
        now = now or utcnow()
        return Reservation.query.filter(
            Reservation.user_id == user_id,
            Reservation.status.in_(BLOCKING_STATUSES),
            Reservation.end_time >= now
        ).order_by(Reservation.start_time).all()

    @staticmethod
    def cancel_reservation(reservation_id, user_id, allow_occupied=True):
        """Delete a reservation that belongs to the user, freeing its window immediately."""
        reservation = db.session.get(Reservation, reservation_id)
        if not reservation:
            raise NotFoundError("Reservation not found")

        if reservation.user_id != user_id:
            raise PermissionDeniedError("You can only cancel your own reservations")

        if not allow_occupied and reservation.status == 'occupied':
            raise ValidationError("Cannot cancel an occupied seat")

        db.session.delete(reservation)
        db.session.commit()
        current_app.logger.info(f"User {user_id} cancelled reservation {reservation_id}")
        return True

    @staticmethod
    def update_availability(now=None):
        """
        Status sweep, safe to run repeatedly:
        ended reservations become 'completed', started ones become 'occupied'.
        """
        now = now or utcnow()

        ended = Reservation.query.filter(
            Reservation.status.in_(BLOCKING_STATUSES),
            Reservation.end_time <= now
        ).all()
        for r in ended:
            r.status = 'completed'

        started = Reservation.query.filter(
            Reservation.status == 'reserved',
            Reservation.start_time <= now,
            Reservation.end_time > now
        ).all()
        for r in started:
            r.status = 'occupied'

        db.session.commit()
        result = {'endedReservations': len(ended), 'activatedReservations': len(started)}
        current_app.logger.info(f"Availability sweep at {now.isoformat()}: {result}")
        return result
