# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI          import konsol
from dataclasses  import dataclass
from typing       import Awaitable, Callable
from ..Models     import PlaybackAction
from Settings     import PLAYBACK_DEDUPE_WINDOW_MS
import asyncio

@dataclass
class PlaybackBurstEvent:
    """Debounce kuyruğundaki tek oynatım olayı"""
    action                : PlaybackAction
    playback_time_sec     : float
    exclude_connection_id : str | None = None  # Olayı başlatan bağlantı (zaten güncel)
    base_url              : str | None = None

def dedupe_playback_burst(events: list[PlaybackBurstEvent]) -> list[PlaybackBurstEvent]:
    """
    Kısa bir patlamayı temsilci olay(lar)a indir.

    Patlamada seek varsa sadece SON seek kalır (istemcilerin play/pause gürültüsü atılır),
    yoksa dizi olduğu gibi döner.
    """
    if len(events) <= 1:
        return events

    for event in reversed(events):
        if event.action is PlaybackAction.SEEK:
            return [event]

    return events

FlushCallback = Callable[[str, str, PlaybackBurstEvent], Awaitable[None]]

class BurstDeduplicator:
    """(oda, kullanıcı) başına debounce kuyruğu"""

    def __init__(self, on_flush: FlushCallback, window_ms: int = PLAYBACK_DEDUPE_WINDOW_MS):
        self.on_flush = on_flush
        self.window   = window_ms / 1000
        self._pending : dict[tuple[str, str], list[PlaybackBurstEvent]] = {}
        self._tasks   : dict[tuple[str, str], asyncio.Task]             = {}

    def enqueue(self, room_id: str, user_id: str, event: PlaybackBurstEvent) -> None:
        """Olayı kuyruğa ekle ve zamanlayıcıyı sıfırla"""
        key = (room_id, user_id)
        self._pending.setdefault(key, []).append(event)

        eski = self._tasks.pop(key, None)
        if eski and not eski.done():
            eski.cancel()

        task = asyncio.create_task(self._flush_later(room_id, user_id))
        task.add_done_callback(self._log_task_exception)
        self._tasks[key] = task

    async def _flush_later(self, room_id: str, user_id: str) -> None:
        await asyncio.sleep(self.window)

        # Sadece kimlikler taşınır; oda/kullanıcı durumu on_flush içinde yeniden okunur
        key = (room_id, user_id)
        self._tasks.pop(key, None)
        events = self._pending.pop(key, [])

        for event in dedupe_playback_burst(events):
            await self.on_flush(room_id, user_id, event)

    def cancel(self, room_id: str, user_id: str) -> None:
        """Kullanıcının bekleyen patlamasını yayınlamadan at"""
        key = (room_id, user_id)
        self._pending.pop(key, None)

        task = self._tasks.pop(key, None)
        if task and not task.done():
            task.cancel()

    def cancel_all(self) -> None:
        for task in self._tasks.values():
            if not task.done():
                task.cancel()

        self._tasks.clear()
        self._pending.clear()

    def pending_events(self, room_id: str, user_id: str) -> list[PlaybackBurstEvent]:
        return list(self._pending.get((room_id, user_id), []))

    @staticmethod
    def _log_task_exception(task: asyncio.Task) -> None:
        if task.cancelled():
            return

        if exc := task.exception():
            konsol.log(f"[red]Playback flush hatası:[/] {exc}")
