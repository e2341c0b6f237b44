import os
import tempfile

# Settings reads DATA_DIR at import time; keep the app lifespan out of the repo tree
os.environ.setdefault("DATA_DIR", tempfile.mkdtemp(prefix="party-data-"))

import typing as t

import pytest
from fastapi.testclient import TestClient

from Public.Party.Libs import BroadcastHub, PartyManager, VideoStore, to_video_id
from Public.Party.Models import PlaybackState, Room, yeni_id

START = 1_700_000_000.0


class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, start: float = START):
        self.t = start

    def __call__(self) -> float:
        return self.t

    def advance(self, seconds: float) -> float:
        self.t += seconds
        return self.t


class FakeConnection:
    """In-memory PartyConnection recording every outbound message."""

    def __init__(self, room_id: str, user_id: str, connection_id: str | None = None):
        self.connection_id = connection_id or yeni_id()
        self.room_id = room_id
        self.user_id = user_id
        self.is_open = True
        self.sent: list[dict] = []
        self.closed: tuple[int, str | None] | None = None

    async def send(self, message: dict) -> None:
        self.sent.append(message)

    async def close(self, code: int = 1000, reason: str | None = None) -> None:
        self.closed = (code, reason)
        self.is_open = False

    def of_type(self, message_type: str) -> list[dict]:
        return [m for m in self.sent if m["type"] == message_type]

    def room_states(self, reason: str | None = None) -> list[dict]:
        return [
            m
            for m in self.of_type("room_state")
            if reason is None or m["reason"] == reason
        ]


def make_room(
    creator_id: str = "alice",
    video_id: str = "dmlk",
    now: float = START,
    **playback,
) -> Room:
    state = PlaybackState(
        video_id=video_id,
        video_url=f"/videos/{video_id}/stream",
        last_updated=now,
        **playback,
    )
    return Room(creator_id=creator_id, playback=state, members={creator_id}, created_at=now)


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def video_dir(tmp_path):
    """DATA_DIR with two playable videos and one file that must be ignored."""
    (tmp_path / "movie.mp4").write_bytes(bytes(range(100)))
    (tmp_path / "other.webm").write_bytes(b"w" * 10)
    (tmp_path / "notes.txt").write_text("not a video")
    os.utime(tmp_path / "movie.mp4", (START, START))
    os.utime(tmp_path / "other.webm", (START + 10, START + 10))
    return tmp_path


@pytest.fixture
def store(video_dir) -> VideoStore:
    return VideoStore(video_dir)


@pytest.fixture
def movie_id() -> str:
    return to_video_id("movie.mp4")


@pytest.fixture
def other_id() -> str:
    return to_video_id("other.webm")


@pytest.fixture
def manager(store, clock) -> PartyManager:
    return PartyManager(
        store,
        hub=BroadcastHub(),
        clock=clock,
        public_base_url="http://party.test",
    )


@pytest.fixture
def connect(manager):
    """Admit a fake connection into a room and return it."""

    async def _connect(room: Room, user_id: str, nickname: str | None = None) -> FakeConnection:
        connection = FakeConnection(room.room_id, user_id)
        await manager.connect(connection, nickname)
        return connection

    return _connect


@pytest.fixture
def client(store, clock) -> t.Generator[TestClient, None, None]:
    """TestClient whose engine reads videos from the temporary DATA_DIR."""
    from Core import party_FastAPI

    with TestClient(party_FastAPI) as test_client:
        party = party_FastAPI.state.party
        party.video_store = store
        party.now = clock
        party.public_base_url = ""
        party.rooms.clear()
        yield test_client
