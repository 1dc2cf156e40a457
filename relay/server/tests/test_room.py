"""Tests for rooms and the room registry."""

import json
from unittest.mock import MagicMock

from relay.server.models import ChatSession, Room, RoomRegistry


def test_registry_returns_same_room_for_same_name(registry):
    assert registry.get("lobby") is registry.get("lobby")


def test_registry_returns_distinct_rooms_for_distinct_names(registry):
    lobby = registry.get("lobby")
    kitchen = registry.get("kitchen")
    assert lobby is not kitchen
    assert lobby.name == "lobby"
    assert kitchen.name == "kitchen"


def test_registry_creates_empty_rooms_lazily(registry):
    assert "lobby" not in registry
    assert registry.find("lobby") is None

    room = registry.get("lobby")
    assert len(room) == 0
    assert "lobby" in registry
    assert registry.find("lobby") is room
    assert len(registry) == 1


def test_registries_do_not_share_rooms():
    assert RoomRegistry().get("lobby") is not RoomRegistry().get("lobby")


def test_empty_rooms_are_kept(registry, make_session):
    session, _ = make_session("lobby")
    session.handle_join("A")
    session.handle_close()

    assert registry.find("lobby") is session.room
    assert len(session.room) == 0


def test_close_drops_every_room(registry):
    registry.get("lobby")
    registry.get("kitchen")
    registry.close()
    assert len(registry) == 0
    assert registry.rooms() == []


def test_join_and_leave(make_session):
    session, _ = make_session()
    room = session.room

    room.join(session)
    assert session in room

    room.leave(session)
    assert session not in room


def test_join_is_idempotent(make_session):
    session, _ = make_session()
    session.room.join(session)
    session.room.join(session)
    assert session.room.members == (session,)


def test_leave_non_member_is_noop(make_session):
    session, _ = make_session()
    session.room.leave(session)
    assert len(session.room) == 0


def test_members_keep_join_order(make_session):
    sessions = [make_session()[0] for _ in range(4)]
    room = sessions[0].room
    for session in reversed(sessions):
        room.join(session)
    assert room.members == tuple(reversed(sessions))


def test_broadcast_to_empty_room_reaches_nobody():
    assert Room("empty").broadcast({"type": "note", "text": "anyone?"}) == 0


def test_broadcast_sends_serialized_message_to_every_member(make_session):
    (a, rec_a), (b, rec_b) = make_session(), make_session()
    room = a.room
    room.join(a)
    room.join(b)

    sent = room.broadcast({"type": "note", "text": "hello"})

    assert sent == 2
    for recorder in (rec_a, rec_b):
        assert recorder.frames == ['{"type": "note", "text": "hello"}']


def test_broadcast_survives_failing_member(registry, make_session):
    room = registry.get("lobby")
    broken = ChatSession(MagicMock(side_effect=ConnectionError("closed")), room)
    healthy, recorder = make_session("lobby")
    room.join(broken)
    room.join(healthy)

    assert room.broadcast({"type": "note", "text": "still here"}) == 2
    assert [json.loads(f)["text"] for f in recorder.frames] == ["still here"]
