from flask import Blueprint, request, jsonify
from studysync.services.room_service import RoomService
from studysync.utils.timeparse import parse_window

library_rooms_bp = Blueprint('library_rooms', __name__)

@library_rooms_bp.route('', methods=['GET'])
def list_rooms():
    args = request.args
    start_time = end_time = None
    if args.get('start_time') and args.get('end_time'):
        start_time, end_time = parse_window(args['start_time'], args['end_time'])

    rooms = RoomService.search_rooms(
        start_time=start_time,
        end_time=end_time,
        sort_by=args.get('sort', 'room_number'),
        search=args.get('search'),
        floor=args.get('floor', type=int),
        min_capacity=args.get('min_capacity', type=int),
        capacity_range=args.get('capacity_range'),
        feature=args.get('feature'),
        room_type=args.get('room_type')
    )
    return jsonify({'success': True, 'data': [r.to_dict() for r in rooms]})

@library_rooms_bp.route('/<int:room_id>', methods=['GET'])
def get_room(room_id):
    room = RoomService.get_room(room_id)
    return jsonify({'success': True, 'data': room.to_dict(include_seats=True)})
