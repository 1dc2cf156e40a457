"""Pytest configuration and fixtures for chat relay tests."""

import json
from typing import Any, Dict, List

import pytest

from common.utils.config import Settings
from relay.server.app import create_app
from relay.server.models import ChatSession, RoomRegistry


class Recorder:
    """Send capability that keeps every frame handed to it."""

    def __init__(self):
        self.frames: List[str] = []

    def __call__(self, data):
        self.frames.append(data)

    @property
    def messages(self) -> List[Dict[str, Any]]:
        return [json.loads(frame) for frame in self.frames]

    def clear(self):
        self.frames.clear()


@pytest.fixture
def join_frame():
    """Encode an inbound join frame."""

    def _join(name):
        return json.dumps({"type": "join", "name": name})

    return _join


@pytest.fixture
def chat_frame():
    """Encode an inbound chat frame."""

    def _chat(text):
        return json.dumps({"type": "chat", "text": text})

    return _chat


@pytest.fixture
def registry():
    return RoomRegistry()


@pytest.fixture
def make_session(registry):
    """Build a session in ``room`` wired to a fresh Recorder."""

    def _make(room="lobby"):
        recorder = Recorder()
        return ChatSession(recorder, registry.get(room)), recorder

    return _make


@pytest.fixture
def test_settings():
    """Settings for tests: threading async mode, no eventlet needed."""
    return Settings.from_env({
        "WEBSOCKET_ASYNC_MODE": "threading",
        "LOG_LEVEL": "DEBUG",
    })


@pytest.fixture
def app(test_settings):
    """Create a fresh application instance for each test."""
    application = create_app(test_settings)
    application.config['TESTING'] = True
    yield application
    application.extensions['room_registry'].close()


@pytest.fixture
def client(app):
    """Create HTTP test client."""
    return app.test_client()


@pytest.fixture
def connect(app):
    """Open Socket.IO test clients; ``room=None`` connects without a room."""
    socketio = app.extensions['socketio']
    clients = []

    def _connect(room="lobby"):
        query_string = f"room={room}" if room else None
        sio_client = socketio.test_client(app, query_string=query_string)
        clients.append(sio_client)
        return sio_client

    yield _connect

    for sio_client in clients:
        if sio_client.is_connected():
            sio_client.disconnect()


@pytest.fixture
def received_frames():
    """Decode the ``message`` events a Socket.IO test client has received."""

    def _received(sio_client):
        return [
            json.loads(event['args'])
            for event in sio_client.get_received()
            if event['name'] == 'message'
        ]

    return _received
