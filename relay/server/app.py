"""WebSocket server application - in-memory chat relay.

This module provides the Flask-SocketIO application for room chat.
All state lives in this process:
1. A RoomRegistry mapping room names to rooms
2. A table of ChatSessions keyed by Socket.IO sid

Architecture:
    Client → Socket.IO → ChatSession → Room → ChatSessions → Clients

NOTE: Eventlet monkey patching is done in wsgi.py entry point
"""

import logging
from typing import Optional

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from prometheus_client import CollectorRegistry
from prometheus_flask_exporter import PrometheusMetrics

from common.utils.config import Settings, settings
from relay import __version__
from relay.server.models import RoomRegistry

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def create_app(config: Optional[Settings] = None):
    """Application factory for the chat relay server.

    Every call builds its own SocketIO server, room registry and session
    table, so two apps never share chat state.
    """
    config = config or settings
    app = Flask(__name__)
    app.config['DEBUG'] = config.debug

    # Configure CORS
    CORS(app, resources={
        r"/api/*": {
            "origins": config.websocket_cors_origins,
            "methods": ["GET", "OPTIONS"],
            "allow_headers": ["Content-Type"],
        }
    })

    socketio = SocketIO()
    socketio.init_app(
        app,
        cors_allowed_origins=config.websocket_cors_origins,
        async_mode=config.websocket_async_mode,
        ping_interval=config.websocket_ping_interval,
        ping_timeout=config.websocket_ping_timeout,
        logger=config.socketio_logger,
        engineio_logger=config.socketio_logger
    )

    # Initialize Prometheus metrics
    metrics = PrometheusMetrics(app, registry=CollectorRegistry())
    metrics.info("chat_relay_info", "Chat Relay WebSocket Server", version=__version__)

    # Chat state, explicitly scoped to this app
    registry = RoomRegistry()
    sessions = {}

    # Store dependencies in app.extensions
    app.extensions['socketio'] = socketio
    app.extensions['room_registry'] = registry
    app.extensions['chat_sessions'] = sessions
    app.extensions['settings'] = config

    # Register HTTP routes
    from relay.server.routes.health_routes import init_health_routes
    from relay.server.routes.room_routes import init_room_routes
    app.register_blueprint(init_health_routes())
    app.register_blueprint(init_room_routes(registry))

    # Register Socket.IO event handlers
    from relay.server.socket_handlers import chat_handlers
    chat_handlers.register_handlers(
        socketio, registry, sessions, room_param=config.room_query_param
    )

    logger.info("chat_relay_server_initialized async_mode=%s", config.websocket_async_mode)
    return app


def run(config: Optional[Settings] = None):
    """Serve until interrupted, then drop every room."""
    config = config or settings
    app = create_app(config)
    socketio = app.extensions['socketio']
    registry = app.extensions['room_registry']

    logger.info("=" * 60)
    logger.info("Starting Chat Relay Server on %s:%s", config.host, config.port)
    logger.info("=" * 60)
    try:
        socketio.run(app, host=config.host, port=config.port, debug=config.debug)
    finally:
        registry.close()


if __name__ == '__main__':
    run()
