"""Tests for the in-process room registry."""

import asyncio
from uuid import uuid4

import pytest

from app.core.realtime import RoomRegistry


class FakeConnection:
    def __init__(self, fail=False, delay=0.0, loop=None):
        self.id = uuid4().hex
        self.loop = loop
        self.fail = fail
        self.delay = delay
        self.sent = []

    async def send_json(self, data):
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent.append(data)


EVENT = {"type": "receive-message", "data": {"message": "hi"}}


@pytest.fixture
def registry():
    return RoomRegistry(send_timeout=0.1)


def test_join_is_idempotent(registry):
    conn = FakeConnection()
    assert registry.join(conn, "room-1") is True
    assert registry.join(conn, "room-1") is False
    assert registry.subscribers("room-1") == [conn]


def test_disconnect_drops_every_subscription(registry):
    conn = FakeConnection()
    other = FakeConnection()
    registry.join(conn, "room-1")
    registry.join(conn, "room-2")
    registry.join(other, "room-1")

    registry.disconnect(conn)

    assert registry.subscribers("room-1") == [other]
    assert registry.subscribers("room-2") == []


def test_disconnect_unknown_connection_is_silent(registry):
    registry.disconnect(FakeConnection())


def test_leave_single_room(registry):
    conn = FakeConnection()
    registry.join(conn, "room-1")
    registry.join(conn, "room-2")
    registry.leave(conn, "room-1")
    assert registry.subscribers("room-1") == []
    assert registry.subscribers("room-2") == [conn]


def test_publish_without_loop_and_without_subscribers(registry):
    assert registry.publish("empty-room", EVENT) == 0


async def test_publish_reaches_current_subscribers_only(registry):
    a, b, outsider = FakeConnection(), FakeConnection(), FakeConnection()
    registry.join(a, "room-1")
    registry.join(b, "room-1")
    registry.join(outsider, "room-2")

    assert registry.publish("room-1", EVENT) == 2
    await registry.drain()

    assert a.sent == [EVENT]
    assert b.sent == [EVENT]
    assert outsider.sent == []


async def test_late_joiner_gets_no_replay(registry):
    early = FakeConnection()
    registry.join(early, "room-1")
    registry.publish("room-1", EVENT)
    await registry.drain()

    late = FakeConnection()
    registry.join(late, "room-1")
    await registry.drain()
    assert late.sent == []


async def test_failing_connection_is_dropped(registry):
    healthy, broken = FakeConnection(), FakeConnection(fail=True)
    registry.join(healthy, "room-1")
    registry.join(broken, "room-1")

    registry.publish("room-1", EVENT)
    await registry.drain()

    assert healthy.sent == [EVENT]
    assert registry.subscribers("room-1") == [healthy]


async def test_slow_connection_does_not_block_publish(registry):
    slow = FakeConnection(delay=5.0)
    fast = FakeConnection()
    registry.join(slow, "room-1")
    registry.join(fast, "room-1")

    # publish returns before any send completes
    assert registry.publish("room-1", EVENT) == 2
    assert fast.sent == []

    await registry.drain()
    assert fast.sent == [EVENT]
    assert slow.sent == []
    assert registry.subscribers("room-1") == [fast]


async def test_publish_from_worker_thread(registry):
    conn = FakeConnection(loop=asyncio.get_running_loop())
    registry.join(conn, "room-1")

    scheduled = await asyncio.to_thread(registry.publish, "room-1", EVENT)
    assert scheduled == 1

    for _ in range(100):
        if conn.sent:
            break
        await asyncio.sleep(0.01)
    assert conn.sent == [EVENT]
