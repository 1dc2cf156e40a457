"""Socket.IO event handlers for the chat relay.

These handlers own the connection side of a chat session:
1. Bind each connection to a room on connect
2. Feed protocol frames to the connection's session
3. Close the session when the connection goes away
"""

from relay.server.socket_handlers import chat_handlers

__all__ = ['chat_handlers']
