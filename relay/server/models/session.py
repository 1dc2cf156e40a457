"""Server-side state for one connected chat participant.

A ChatSession sits between a transport connection and its room: the transport
feeds it raw frames and the close event, and the session turns them into room
membership changes, broadcasts and private replies.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from relay.server.models import protocol
from relay.server.models.protocol import Command, MessageType, ProtocolError
from relay.server.models.room import Room

logger = logging.getLogger(__name__)

SendCapability = Callable[[str], Any]


@dataclass(frozen=True)
class Delivery:
    """Outcome of one send attempt on a transport connection."""

    ok: bool
    error: Optional[Exception] = None


def attempt_delivery(send: SendCapability, data: str) -> Delivery:
    """Call ``send`` with ``data`` and report what happened instead of raising."""
    try:
        send(data)
    except Exception as e:
        return Delivery(ok=False, error=e)
    return Delivery(ok=True)


class SessionState(str, Enum):
    UNJOINED = "unjoined"
    JOINED = "joined"
    CLOSED = "closed"


class ChatSession:
    """One participant's connection, bound to a single room for its lifetime."""

    def __init__(self, send: SendCapability, room: Room) -> None:
        self._send = send
        self._room = room
        self.name: Optional[str] = None
        self.state = SessionState.UNJOINED
        logger.debug("session_created room=%s", room.name)

    def __repr__(self) -> str:
        return f"ChatSession(name={self.name!r}, room={self._room.name!r}, state={self.state.value})"

    @property
    def room(self) -> Room:
        return self._room

    def send(self, data: str) -> None:
        """Best-effort delivery to this participant; never raises."""
        outcome = attempt_delivery(self._send, data)
        if not outcome.ok:
            # dropped on purpose: the connection is usually already gone
            logger.debug(
                "delivery_dropped user=%s room=%s error=%s",
                self.name, self._room.name, outcome.error
            )

    def _reply(self, message: dict) -> None:
        self.send(protocol.encode(message))

    def handle_join(self, name: str) -> None:
        """Take ``name``, enter the room and announce it to everyone there."""
        if self.state is not SessionState.UNJOINED:
            raise ProtocolError(f"already joined as {self.name}")

        self.name = name
        self.state = SessionState.JOINED
        self._room.join(self)
        logger.info("user_joined_room user=%s room=%s", name, self._room.name)
        self._room.broadcast(protocol.note(f'{name} joined "{self._room.name}".'))

    def handle_chat(self, text: str) -> None:
        """Run a slash command or broadcast ``text`` to the room."""
        parsed = protocol.parse_command(text)

        if parsed.command is Command.JOKE:
            self._reply(protocol.chat(self.name, protocol.JOKE))
        elif parsed.command is Command.MEMBERS:
            self.handle_members()
        elif parsed.command is Command.PRIV:
            username, message = parsed.args
            self.handle_private_message(username, message)
        else:
            self._room.broadcast(protocol.chat(self.name, text))

    def handle_members(self) -> None:
        names = [member.name for member in self._room.members]
        self._reply(protocol.note("In room: " + ", ".join(names)))

    def handle_private_message(self, username: str, message: str) -> None:
        """Deliver ``message`` to the first member named ``username``."""
        target = next(
            (member for member in self._room.members if member.name == username),
            None,
        )
        if target is None:
            raise ProtocolError(f"User does not exist: {username}")

        target.send(protocol.encode(protocol.chat(f"{self.name} (Private)", message)))
        logger.info(
            "private_message user=%s to=%s room=%s", self.name, username, self._room.name
        )

    def handle_message(self, raw: Any) -> None:
        """Dispatch one inbound frame.

        Expected frames:
            {"type": "join", "name": "alice"}
            {"type": "chat", "text": "hello"}

        Raises:
            ProtocolError: malformed frame, unknown type or bad command.
        """
        envelope = protocol.decode_envelope(raw)
        msg_type = envelope.get("type")

        if msg_type == MessageType.JOIN.value:
            name = envelope.get("name")
            if not isinstance(name, str) or not name.strip():
                raise ProtocolError("bad join: name must be a non-empty string")
            self.handle_join(name)
        elif msg_type == MessageType.CHAT.value:
            text = envelope.get("text")
            if not isinstance(text, str):
                raise ProtocolError("bad chat: text must be a string")
            self.handle_chat(text)
        else:
            raise ProtocolError(f"bad message: {msg_type}")

    def handle_close(self) -> None:
        """Leave the room and tell the remaining members."""
        if self.state is SessionState.CLOSED:
            return

        self.state = SessionState.CLOSED
        self._room.leave(self)
        logger.info("user_left_room user=%s room=%s", self.name, self._room.name)
        self._room.broadcast(protocol.note(f"{self.name} left {self._room.name}."))
