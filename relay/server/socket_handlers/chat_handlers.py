"""Socket.IO handlers for the chat relay.

Each Socket.IO connection gets one ChatSession bound to the room named in the
connect query string (``?room=lobby``). Protocol frames travel as ``message``
events carrying JSON text, in both directions.
"""

import logging
from typing import Dict

from flask import request
from flask_socketio import disconnect, emit

from relay.server.models import ChatSession, ProtocolError, RoomRegistry

logger = logging.getLogger(__name__)


def _sender(socketio, sid):
    """Send capability that targets only the connection ``sid``."""

    def send(data):
        socketio.send(data, to=sid)

    return send


def register_handlers(socketio, registry: RoomRegistry, sessions: Dict[str, ChatSession],
                      room_param: str = 'room'):
    """Register chat Socket.IO event handlers.

    Args:
        socketio: SocketIO instance the handlers are attached to
        registry: rooms shared by every connection of this server
        sessions: table of live sessions keyed by Socket.IO sid
        room_param: connect query parameter that names the room
    """

    @socketio.on('connect')
    def handle_connect(auth=None):
        """Bind a new session to the requested room; refuse if none given."""
        room_name = (request.args.get(room_param) or '').strip()
        if not room_name:
            logger.warning("client_rejected reason=no_room sid=%s", request.sid)
            return False

        room = registry.get(room_name)
        sessions[request.sid] = ChatSession(_sender(socketio, request.sid), room)
        logger.info("client_connected room=%s sid=%s", room_name, request.sid)

    @socketio.on('message')
    def handle_message(data):
        """Feed one protocol frame to the caller's session.

        Malformed frames end the connection: the client gets an ``error``
        event and is disconnected, which runs the normal close path.
        """
        session = sessions.get(request.sid)
        if session is None:
            logger.warning("message_without_session sid=%s", request.sid)
            return

        try:
            session.handle_message(data)
        except ProtocolError as e:
            logger.warning("protocol_error user=%s room=%s sid=%s error=%s",
                           session.name, session.room.name, request.sid, e)
            emit('error', {'message': str(e)})
            disconnect()

    @socketio.on('disconnect')
    def handle_disconnect(reason=None):
        """Close the caller's session so the room forgets it."""
        session = sessions.pop(request.sid, None)
        if session is None:
            logger.info("client_disconnected sid=%s", request.sid)
            return

        logger.info("client_disconnected user=%s room=%s sid=%s reason=%s",
                    session.name, session.room.name, request.sid, reason)
        session.handle_close()
