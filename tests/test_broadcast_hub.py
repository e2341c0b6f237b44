import asyncio

import pytest
from conftest import FakeConnection

from Public.Party.Libs import BroadcastHub
from Public.Party.Libs import broadcast_hub


class BrokenConnection(FakeConnection):
    async def send(self, message):
        raise ConnectionResetError("gone")


class SlowConnection(FakeConnection):
    async def send(self, message):
        await asyncio.sleep(5)


@pytest.fixture
def hub() -> BroadcastHub:
    return BroadcastHub()


def test_index_add_remove(hub):
    """Test that the connection and room indexes stay in step"""
    a1 = FakeConnection("room", "alice")
    a2 = FakeConnection("room", "alice")
    b = FakeConnection("room", "bob")
    other = FakeConnection("elsewhere", "alice")
    for conn in (a1, a2, b, other):
        hub.add(conn)

    assert hub.room_connections("elsewhere") == [other]
    assert set(hub.connections_for_user("room", "alice")) == {a1, a2}
    assert sorted(hub.active_room_ids()) == ["elsewhere", "room"]

    assert hub.remove(a1) is True
    assert hub.remove(a1) is False
    assert hub.has_open_connection_for_user("room", "alice")
    assert not hub.has_open_connection_for_user("room", "alice", exclude_connection_id=a2.connection_id)

    hub.remove(other)
    assert hub.active_room_ids() == ["room"]
    assert hub.room_connections("elsewhere") == []


@pytest.mark.asyncio
async def test_broadcast_excludes_and_skips_closed(hub):
    """Test that broadcast skips the excluded and closed connections"""
    a = FakeConnection("room", "alice")
    b = FakeConnection("room", "bob")
    c = FakeConnection("room", "carol")
    c.is_open = False
    outsider = FakeConnection("other", "dave")
    for conn in (a, b, c, outsider):
        hub.add(conn)

    await hub.broadcast("room", {"type": "pong"}, exclude_connection_id=a.connection_id)

    assert a.sent == []
    assert b.sent == [{"type": "pong"}]
    assert c.sent == []
    assert outsider.sent == []


@pytest.mark.asyncio
async def test_failing_send_does_not_block_others(hub, monkeypatch):
    """Test that broken and slow receivers are dropped silently"""
    monkeypatch.setattr(broadcast_hub, "SEND_TIMEOUT", 0.05)

    broken = BrokenConnection("room", "alice")
    slow = SlowConnection("room", "bob")
    ok = FakeConnection("room", "carol")
    for conn in (broken, slow, ok):
        hub.add(conn)

    await asyncio.wait_for(hub.broadcast("room", {"type": "pong"}), timeout=1)
    assert ok.sent == [{"type": "pong"}]


@pytest.mark.asyncio
async def test_send_each_skip(hub):
    a = FakeConnection("room", "alice")
    b = FakeConnection("room", "bob")
    hub.add(a)
    hub.add(b)

    await hub.send_each("room", {"type": "x"}, skip=lambda conn: conn.user_id == "alice")
    assert a.sent == []
    assert b.sent == [{"type": "x"}]


@pytest.mark.asyncio
async def test_ticker_runs_until_stopped(hub):
    """Test that the ambient ticker keeps firing and survives tick errors"""
    calls = []

    async def tick():
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("first tick fails")

    hub.start_ticker(tick, 0.02)
    hub.start_ticker(tick, 0.02)
    await asyncio.sleep(0.15)
    await hub.stop_ticker()

    seen = len(calls)
    assert seen >= 2

    await asyncio.sleep(0.06)
    assert len(calls) == seen
