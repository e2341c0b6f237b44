# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from pathlib  import Path
from ..Models import VideoItem
import asyncio, base64, binascii

VIDEO_EXTENSIONS = {".mp4", ".webm", ".mkv", ".mov", ".m4v"}

CONTENT_TYPES = {
    ".webm" : "video/webm",
    ".mkv"  : "video/x-matroska",
    ".mov"  : "video/quicktime",
    ".m4v"  : "video/x-m4v",
}

def to_video_id(file_name: str) -> str:
    """Dosya adı -> padding'siz base64url"""
    return base64.urlsafe_b64encode(file_name.encode("utf-8")).decode("ascii").rstrip("=")

def from_video_id(video_id: str) -> str | None:
    try:
        dolgu = "=" * (-len(video_id) % 4)
        return base64.urlsafe_b64decode(video_id + dolgu).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError, ValueError):
        return None

def content_type_for(file_name: str) -> str:
    return CONTENT_TYPES.get(Path(file_name).suffix.lower(), "video/mp4")

class VideoStore:
    """DATA_DIR altındaki video dosyaları"""

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir).resolve()

    def ensure_dir(self) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, video: VideoItem) -> Path:
        return self.data_dir / video.file_name

    def _item_for(self, file_name: str) -> VideoItem | None:
        try:
            tam_yol = (self.data_dir / file_name).resolve()
        except (OSError, ValueError):
            return None

        # Dizin dışına kaçan id'ler (../ vb.) çözülmez
        if tam_yol.parent != self.data_dir:
            return None

        if tam_yol.suffix.lower() not in VIDEO_EXTENSIONS:
            return None

        try:
            stat = tam_yol.stat()
        except (OSError, ValueError):
            return None

        if not tam_yol.is_file():
            return None

        return VideoItem(
            id          = to_video_id(file_name),
            file_name   = file_name,
            size_bytes  = stat.st_size,
            modified_at = stat.st_mtime,
        )

    async def resolve(self, video_id: str) -> VideoItem | None:
        file_name = from_video_id(video_id)
        if not file_name:
            return None

        return await asyncio.to_thread(self._item_for, file_name)

    def _list_sync(self) -> list[VideoItem]:
        if not self.data_dir.is_dir():
            return []

        videolar = [
            video
            for dosya in self.data_dir.iterdir()
            if dosya.is_file() and (video := self._item_for(dosya.name))
        ]
        videolar.sort(key=lambda video: video.modified_at, reverse=True)
        return videolar

    async def list_videos(self) -> list[VideoItem]:
        """En son değiştirilen önce"""
        return await asyncio.to_thread(self._list_sync)
