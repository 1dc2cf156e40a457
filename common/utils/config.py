"""Runtime configuration helpers for the chat relay."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Mapping


def _flag(value: str) -> bool:
    return value.lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class Settings:
    """Immutable application configuration loaded from the environment."""

    debug: bool
    host: str
    port: int
    log_level: str
    # WebSocket configuration
    websocket_cors_origins: str
    websocket_ping_interval: int
    websocket_ping_timeout: int
    websocket_async_mode: str
    socketio_logger: bool
    # Name of the connect query parameter carrying the room
    room_query_param: str

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> "Settings":
        env = env or os.environ
        return Settings(

            # toggle Flask debugger (disabled in prod)
            debug=_flag(env.get("FLASK_DEBUG", "false")),
            host=env.get("FLASK_HOST", "0.0.0.0"),  # nosec B104 - Required for containerized deployment
            port=int(env.get("FLASK_PORT", "3000")),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),

            # websocket configuration
            websocket_cors_origins=env.get("WEBSOCKET_CORS_ORIGINS", "*"),
            websocket_ping_interval=int(env.get("WEBSOCKET_PING_INTERVAL", "25")),
            websocket_ping_timeout=int(env.get("WEBSOCKET_PING_TIMEOUT", "60")),
            # eventlet in production, threading is enough for tests
            websocket_async_mode=env.get("WEBSOCKET_ASYNC_MODE", "eventlet"),
            socketio_logger=_flag(env.get("SOCKETIO_LOGGER", "false")),

            room_query_param=env.get("ROOM_QUERY_PARAM", "room"),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached Settings loaded from environment variables."""

    return Settings.from_env()


settings = get_settings()
