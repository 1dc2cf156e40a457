"""Room membership and chat session models."""

from relay.server.models.protocol import ProtocolError
from relay.server.models.room import Room, RoomRegistry
from relay.server.models.session import ChatSession

__all__ = ["ChatSession", "ProtocolError", "Room", "RoomRegistry"]
