"""Wire protocol for the chat relay.

Every frame is a flat JSON object discriminated by ``type``:

    inbound   {"type": "join", "name": "alice"}
              {"type": "chat", "text": "hello"}
    outbound  {"type": "note", "text": "alice joined \\"lobby\\"."}
              {"name": "alice", "type": "chat", "text": "hello"}

Chat text starting with a known slash command is parsed into a ``Command``
before the session acts on it.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

JOKE = (
    "Where do you take someone who has been injured in a Peek-a-boo accident? "
    "To the I.C.U."
)


class ProtocolError(ValueError):
    """Inbound data does not follow the relay protocol."""


class MessageType(str, Enum):
    """Values of the envelope ``type`` field."""

    JOIN = "join"
    CHAT = "chat"
    NOTE = "note"


class Command(str, Enum):
    """Slash commands understood in chat text."""

    JOKE = "/joke"
    MEMBERS = "/members"
    PRIV = "/priv"
    # plain chat, no command
    NONE = ""


@dataclass(frozen=True)
class ParsedCommand:
    command: Command
    args: Tuple[str, ...] = ()


def parse_command(text: str) -> ParsedCommand:
    """Parse the first whitespace-separated token of ``text`` into a command.

    ``/priv`` needs a username and a non-empty message; the message keeps its
    inner whitespace. Raises ProtocolError when that format is not met.
    """
    parts = text.split(maxsplit=2)
    head = parts[0] if parts else ""

    if head == Command.JOKE.value:
        return ParsedCommand(Command.JOKE)
    if head == Command.MEMBERS.value:
        return ParsedCommand(Command.MEMBERS)
    if head == Command.PRIV.value:
        if len(parts) < 3 or not parts[2].strip():
            raise ProtocolError("Incorrect private message format")
        return ParsedCommand(Command.PRIV, (parts[1], parts[2]))
    return ParsedCommand(Command.NONE, (text,))


def decode_envelope(raw: Any) -> Dict[str, Any]:
    """Parse a raw inbound frame into an envelope dict."""
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8")
    if not isinstance(raw, str):
        raise ProtocolError(f"bad frame: expected text, got {type(raw).__name__}")
    try:
        envelope = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ProtocolError(f"bad frame: {e.msg}") from e
    if not isinstance(envelope, dict):
        raise ProtocolError("bad frame: envelope must be an object")
    return envelope


def encode(message: Dict[str, Any]) -> str:
    return json.dumps(message)


def note(text: str) -> Dict[str, Any]:
    """System notice."""
    return {"type": MessageType.NOTE.value, "text": text}


def chat(name: Optional[str], text: str) -> Dict[str, Any]:
    """Chat line attributed to ``name`` (None before the sender joined)."""
    return {"name": name, "type": MessageType.CHAT.value, "text": text}
