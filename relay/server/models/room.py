"""Rooms and the registry that hands them out by name.

A room is a named broadcast scope holding the sessions that joined it.
Rooms are created on first lookup and live as long as their registry.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from relay.server.models import protocol

if TYPE_CHECKING:
    from relay.server.models.session import ChatSession

logger = logging.getLogger(__name__)


class Room:
    """Named set of sessions sharing one broadcast scope."""

    def __init__(self, name: str) -> None:
        self.name = name
        # dict keys keep join order, which /members and /priv rely on
        self._members: Dict["ChatSession", None] = {}
        self._lock = threading.RLock()

    def __repr__(self) -> str:
        return f"Room({self.name!r}, members={len(self)})"

    def __len__(self) -> int:
        with self._lock:
            return len(self._members)

    def __contains__(self, session: "ChatSession") -> bool:
        with self._lock:
            return session in self._members

    @property
    def members(self) -> Tuple["ChatSession", ...]:
        """Snapshot of current members in join order."""
        with self._lock:
            return tuple(self._members)

    def join(self, session: "ChatSession") -> None:
        with self._lock:
            self._members[session] = None
        logger.debug("room_member_added room=%s members=%d", self.name, len(self))

    def leave(self, session: "ChatSession") -> None:
        with self._lock:
            self._members.pop(session, None)
        logger.debug("room_member_removed room=%s members=%d", self.name, len(self))

    def broadcast(self, message: Dict[str, Any]) -> int:
        """Send ``message`` to every current member.

        The message is serialized once. Sessions absorb their own delivery
        failures, so one dead connection never stops the others.

        Returns:
            Number of members the message was handed to.
        """
        data = protocol.encode(message)
        members = self.members
        for member in members:
            member.send(data)
        logger.debug(
            "room_broadcast room=%s type=%s recipients=%d",
            self.name, message.get("type"), len(members)
        )
        return len(members)


class RoomRegistry:
    """Lookup from room name to Room, creating rooms on first use.

    One registry is built per application and handed to the socket handlers;
    ``close()`` is the teardown counterpart called when the server stops.
    """

    def __init__(self) -> None:
        self._rooms: Dict[str, Room] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._rooms)

    def __contains__(self, name: str) -> bool:
        with self._lock:
            return name in self._rooms

    def get(self, name: str) -> Room:
        """Return the room called ``name``, creating it if needed."""
        with self._lock:
            room = self._rooms.get(name)
            if room is None:
                room = Room(name)
                self._rooms[name] = room
                logger.info("room_created room=%s", name)
            return room

    def find(self, name: str) -> Optional[Room]:
        """Return the room called ``name`` without creating it."""
        with self._lock:
            return self._rooms.get(name)

    def rooms(self) -> List[Room]:
        with self._lock:
            return list(self._rooms.values())

    def close(self) -> None:
        with self._lock:
            count = len(self._rooms)
            self._rooms.clear()
        logger.info("room_registry_closed rooms=%d", count)
