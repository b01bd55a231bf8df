from flask import Blueprint, request, jsonify, current_app
from studysync.services.booking_service import BookingService
from studysync.services.availability_service import AvailabilityService
from studysync.services.room_service import RoomService
from studysync.errors import ValidationError
from studysync.utils.decorators import token_required
from studysync.utils.timeparse import parse_window

reservations_bp = Blueprint('reservations', __name__)

@reservations_bp.route('', methods=['POST'])
@token_required
def create_reservation(current_user):
    data = request.get_json(silent=True) or {}
    if data.get('room_id') is None:
        raise ValidationError('room_id is required')
    start, end = parse_window(data.get('start_time'), data.get('end_time'))

    selected_seats = data.get('selected_seats') or []
    if not isinstance(selected_seats, list):
        raise ValidationError('selected_seats must be a list')

    reservations = BookingService.create_reservation(
        user=current_user,
        room_id=data['room_id'],
        start_time=start,
        end_time=end,
        purpose=data.get('purpose'),
        selected_seats=selected_seats,
        room_capacity=data.get('room_capacity')
    )
    return jsonify({'success': True, 'data': [r.to_dict() for r in reservations]}), 201

@reservations_bp.route('/my', methods=['GET'])
@token_required
def get_my_reservations(current_user):
    reservations = BookingService.get_user_reservations(current_user.id)
    return jsonify({'success': True, 'data': [r.to_dict(include_room=True) for r in reservations]})

@reservations_bp.route('/<int:reservation_id>', methods=['DELETE'])
@token_required
def cancel_reservation(current_user, reservation_id):
    BookingService.cancel_reservation(reservation_id, current_user.id)
    return jsonify({'success': True, 'message': 'Reservation cancelled successfully'})

@reservations_bp.route('/update-availability', methods=['POST'])
def update_availability():
    # Triggered by cron; also available as `flask update-availability`
    result = BookingService.update_availability()
    return jsonify({'success': True, 'data': result})

@reservations_bp.route('/room/<int:room_id>/check-availability', methods=['GET'])
def check_availability(room_id):
    start, end = parse_window(request.args.get('start_time'), request.args.get('end_time'))
    result = AvailabilityService.check_room_availability(room_id, start, end)
    current_app.logger.debug(f"Availability room {room_id} {start} - {end}: {result}")
    return jsonify({'success': True, **result})
