from flask import Blueprint, request, jsonify
from studysync.services.booking_service import BookingService
from studysync.services.seat_service import SeatService
from studysync.utils.decorators import token_required
from studysync.utils.timeparse import parse_window

seats_bp = Blueprint('seats', __name__)

@seats_bp.route('/room/<int:room_id>', methods=['GET'])
def get_room_seats(room_id):
    seats = SeatService.seats_with_reservations(room_id)
    return jsonify({'success': True, 'data': [seat.to_dict(reservations) for seat, reservations in seats]})

@seats_bp.route('/room/<int:room_id>/booked', methods=['GET'])
def get_booked_seats(room_id):
    start, end = parse_window(request.args.get('start_time'), request.args.get('end_time'))
    seats = SeatService.booked_seats(room_id, start, end)
    return jsonify({
        'success': True,
        'bookedSeats': [s.seat_number for s in seats],
        'bookedSeatIds': [s.id for s in seats]
    })

@seats_bp.route('/<int:seat_id>', methods=['GET'])
def get_seat(seat_id):
    seat = SeatService.get_seat(seat_id)
    data = seat.to_dict(SeatService.current_reservations(seat.id))
    data['room'] = seat.room.to_dict()
    return jsonify({'success': True, 'data': data})

@seats_bp.route('/<int:seat_id>/reserve', methods=['POST'])
@token_required
def reserve_seat(current_user, seat_id):
    data = request.get_json(silent=True) or {}
    start, end = parse_window(data.get('startTime'), data.get('endTime'))
    reservation = BookingService.reserve_seat(current_user, seat_id, start, end, purpose=data.get('purpose'))
    return jsonify({'success': True, 'data': reservation.to_dict(include_room=True)}), 201

@seats_bp.route('/reservations/<int:reservation_id>', methods=['DELETE'])
@token_required
def cancel_seat_reservation(current_user, reservation_id):
    BookingService.cancel_reservation(reservation_id, current_user.id, allow_occupied=False)
    return jsonify({'success': True, 'message': 'Reservation cancelled successfully'})

@seats_bp.route('/reservations/my', methods=['GET'])
@token_required
def get_my_seat_reservations(current_user):
    reservations = BookingService.get_user_reservations(current_user.id)
    return jsonify({'success': True, 'data': [r.to_dict(include_room=True) for r in reservations]})
