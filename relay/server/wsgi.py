"""WSGI entry point for the chat relay server.

Builds one relay app per worker process: its own SocketIO server, room
registry and session table, all held in memory. Run it under gunicorn with a
single eventlet worker (``gunicorn -k eventlet -w 1 relay.server.wsgi:app``).
Rooms are not shared between workers, so more workers means split rooms.

The async mode comes from ``WEBSOCKET_ASYNC_MODE`` and defaults to eventlet,
which needs monkey patching before anything else imports the socket or
threading modules.
"""

# CRITICAL: Monkey-patch FIRST, before ANY other imports
import eventlet
eventlet.monkey_patch()

# Now safe to import the app
from relay.server.app import create_app  # noqa: E402

app = create_app()
