"""Read-only HTTP views of the rooms held by this server.

Lookups here never create rooms; only socket connections do.
"""

from flask import Blueprint, jsonify


def init_room_routes(registry):
    room_bp = Blueprint('rooms', __name__, url_prefix='/api')

    @room_bp.route('/rooms', methods=['GET'])
    def get_rooms():
        """List rooms with their member counts (for debugging/admin)"""
        rooms = [
            {'name': room.name, 'members': len(room)}
            for room in registry.rooms()
        ]
        return jsonify({'rooms': rooms}), 200

    @room_bp.route('/rooms/<room_name>', methods=['GET'])
    def get_room_details(room_name):
        """Get member display names of one room"""
        room = registry.find(room_name)
        if room is None:
            return jsonify({'error': 'Room not found'}), 404

        return jsonify({'room': {
            'name': room.name,
            'members': [member.name for member in room.members]
        }}), 200

    return room_bp
