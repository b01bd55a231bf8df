from studysync.models import LibraryRoom
from studysync.errors import ValidationError, NotFoundError
from studysync.extensions import db
from studysync.services.availability_service import AvailabilityService

CAPACITY_RANGES = {
    '1-4': (1, 4),
    '5-8': (5, 8),
    '9-12': (9, 12),
}

SORT_KEYS = {
    'room_number': lambda r: r.formatted_room_number,
    'floor': lambda r: (r.floor_number if r.floor_number is not None else -1, r.formatted_room_number),
    'capacity': lambda r: -r.capacity,
    'name': lambda r: (r.name or '').lower(),
    'room_type': lambda r: r.room_type,
}

class RoomService:

    @staticmethod
    def list_active_rooms():
        return LibraryRoom.query.filter_by(is_active=True).order_by(
            LibraryRoom.floor_number, LibraryRoom.room_number
        ).all()

    @staticmethod
    def get_room(room_id):
        room = db.session.get(LibraryRoom, room_id)
        if not room or not room.is_active:
            raise NotFoundError("Room not found")
        return room

    @staticmethod
    def matches_search(room, search):
        term = search.strip().lower()
        if not term:
            return True
        return (term in (room.name or '').lower()
                or term in (room.room_number or '').lower()
                or term in room.formatted_room_number.lower())

    @staticmethod
    def filter_rooms(rooms, search=None, floor=None, min_capacity=None, capacity_range=None,
                     feature=None, room_type=None):
        """Apply the listing filters; each one is skipped when not given."""
        if capacity_range and capacity_range not in CAPACITY_RANGES:
            raise ValidationError(f"Unknown capacity range: {capacity_range}")

        result = []
        for room in rooms:
            if search and not RoomService.matches_search(room, search):
                continue
            if floor is not None and room.floor_number != floor:
                continue
            if min_capacity is not None and room.capacity < min_capacity:
                continue
            if capacity_range:
                low, high = CAPACITY_RANGES[capacity_range]
                if not low <= room.capacity <= high:
                    continue
            if feature and feature not in (room.features or []):
                continue
            if room_type and room.room_type != room_type.lower():
                continue
            result.append(room)
        return result

    @staticmethod
    def sort_rooms(rooms, sort_by='room_number'):
        key = SORT_KEYS.get(sort_by or 'room_number')
        if key is None:
            raise ValidationError(f"Unknown sort: {sort_by}")
        return sorted(rooms, key=key)

    @staticmethod
    def filter_available(rooms, start_time, end_time):
        """Keep rooms reported available for the window (failed checks follow the fail-open setting)."""
        return [
            room for room in rooms
            if AvailabilityService.check_room_availability(room.id, start_time, end_time)['available']
        ]

    @staticmethod
    def search_rooms(start_time=None, end_time=None, sort_by='room_number', **filters):
        rooms = RoomService.filter_rooms(RoomService.list_active_rooms(), **filters)
        if start_time and end_time:
            rooms = RoomService.filter_available(rooms, start_time, end_time)
        return RoomService.sort_rooms(rooms, sort_by)
