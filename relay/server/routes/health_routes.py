"""Health check routes for the chat relay server."""

from flask import Blueprint, jsonify, current_app

from relay import __version__

SERVICE_NAME = 'chat-relay'


def init_health_routes():
    """Initialize health check routes."""
    health_bp = Blueprint('health', __name__)

    @health_bp.route('/api/health', methods=['GET'])
    def health_check():
        """Basic health check - always returns healthy if server is running."""
        return jsonify({
            'status': 'healthy',
            'service': SERVICE_NAME,
            'version': __version__
        }), 200

    @health_bp.route('/api/health/ready', methods=['GET'])
    def readiness_check():
        """Readiness check - reports in-memory room and session counts."""
        registry = current_app.extensions['room_registry']
        sessions = current_app.extensions['chat_sessions']

        return jsonify({
            'status': 'ready',
            'service': SERVICE_NAME,
            'rooms': len(registry),
            'sessions': len(sessions)
        }), 200

    return health_bp
