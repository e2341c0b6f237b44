import pytest
from conftest import START

from Public.Party.Libs import VideoStore, content_type_for, from_video_id, to_video_id
from Public.Videos.Routers.videos import parse_single_range


def test_video_id_is_unpadded_base64url():
    """Test that ids are URL safe and decode back to the file name"""
    video_id = to_video_id("film ?ü.mp4")

    assert "=" not in video_id
    assert "/" not in video_id and "+" not in video_id
    assert from_video_id(video_id) == "film ?ü.mp4"


@pytest.mark.parametrize(
    ("file_name", "content_type"),
    [
        ("a.mp4", "video/mp4"),
        ("a.WEBM", "video/webm"),
        ("a.mkv", "video/x-matroska"),
        ("a.mov", "video/quicktime"),
        ("a.m4v", "video/x-m4v"),
    ],
)
def test_content_type_by_extension(file_name, content_type):
    assert content_type_for(file_name) == content_type


@pytest.mark.asyncio
async def test_list_videos_newest_first(store):
    """Test that only video files are listed, newest modification first"""
    videolar = await store.list_videos()

    assert [video.file_name for video in videolar] == ["other.webm", "movie.mp4"]
    assert videolar[1].size_bytes == 100
    assert videolar[1].modified_at == START
    assert videolar[1].stream_path == f"/videos/{to_video_id('movie.mp4')}/stream"


@pytest.mark.asyncio
async def test_resolve(store, movie_id):
    video = await store.resolve(movie_id)
    assert video.file_name == "movie.mp4"
    assert store.path_for(video).read_bytes() == bytes(range(100))


@pytest.mark.asyncio
@pytest.mark.parametrize("file_name", ["notes.txt", "missing.mp4", "../movie.mp4", "sub/clip.mp4", ""])
async def test_resolve_rejects(store, video_dir, file_name):
    """Test that traversal, nested paths, other extensions and missing files do not resolve"""
    (video_dir / "sub").mkdir()
    (video_dir / "sub" / "clip.mp4").write_bytes(b"x")

    assert await store.resolve(to_video_id(file_name)) is None


@pytest.mark.asyncio
async def test_directory_named_like_video_is_ignored(store, video_dir):
    (video_dir / "folder.mp4").mkdir()
    assert await store.resolve(to_video_id("folder.mp4")) is None
    assert len(await store.list_videos()) == 2


@pytest.mark.asyncio
async def test_missing_data_dir(tmp_path):
    store = VideoStore(tmp_path / "absent")
    assert await store.list_videos() == []

    store.ensure_dir()
    assert store.data_dir.is_dir()


@pytest.mark.parametrize(
    ("header", "expected"),
    [
        ("bytes=0-9", (0, 9)),
        ("bytes=10-", (10, 99)),
        ("bytes=90-500", (90, 99)),
        ("bytes=-10", (90, 99)),
        ("bytes=-500", (0, 99)),
        (" bytes=5-5 ", (5, 5)),
    ],
)
def test_parse_single_range(header, expected):
    assert parse_single_range(header, 100) == expected


@pytest.mark.parametrize(
    "header",
    ["bytes=100-", "bytes=9-2", "bytes=-", "bytes=-0", "items=0-1", "bytes=0-1,5-6", "bytes=abc"],
)
def test_parse_single_range_unsatisfiable(header):
    assert parse_single_range(header, 100) is None
