# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI                 import konsol
from fastapi             import WebSocket
from starlette.websockets import WebSocketState
from typing              import Awaitable, Callable, Protocol
from ..Models            import yeni_id
import asyncio, json

SEND_TIMEOUT = 1.5  # Yavaş istemci yayını bekletmesin

class PartyConnection(Protocol):
    """Hub'ın beklediği çift yönlü kanal"""
    connection_id : str
    room_id       : str
    user_id       : str

    @property
    def is_open(self) -> bool: ...

    async def send(self, message: dict) -> None: ...

    async def close(self, code: int = 1000, reason: str | None = None) -> None: ...

class WebSocketConnection:
    """FastAPI WebSocket üzerinde PartyConnection"""

    def __init__(self, websocket: WebSocket, room_id: str, user_id: str):
        self.websocket     = websocket
        self.room_id       = room_id
        self.user_id       = user_id
        self.connection_id = yeni_id()

    @property
    def is_open(self) -> bool:
        return (
            self.websocket.client_state == WebSocketState.CONNECTED
            and self.websocket.application_state == WebSocketState.CONNECTED
        )

    async def send(self, message: dict) -> None:
        await self.websocket.send_text(json.dumps(message, ensure_ascii=False))

    async def close(self, code: int = 1000, reason: str | None = None) -> None:
        if self.websocket.application_state != WebSocketState.DISCONNECTED:
            await self.websocket.close(code=code, reason=reason)

class BroadcastHub:
    """Odalardaki canlı bağlantılar ve mesaj dağıtımı"""

    def __init__(self):
        # bağlantı id -> bağlantı (oda ve kullanıcı bağlantının üzerinde)
        self._connections      : dict[str, PartyConnection] = {}
        # oda id -> bağlantı id'leri
        self._room_connections : dict[str, set[str]]        = {}
        self._ticker           : asyncio.Task | None        = None

    # ============== Index ==============

    def add(self, connection: PartyConnection) -> None:
        self._connections[connection.connection_id] = connection
        self._room_connections.setdefault(connection.room_id, set()).add(connection.connection_id)

    def remove(self, connection: PartyConnection) -> bool:
        if self._connections.pop(connection.connection_id, None) is None:
            return False

        oda_baglantilari = self._room_connections.get(connection.room_id)
        if oda_baglantilari is not None:
            oda_baglantilari.discard(connection.connection_id)
            if not oda_baglantilari:
                del self._room_connections[connection.room_id]

        return True

    def room_connections(self, room_id: str) -> list[PartyConnection]:
        return [self._connections[cid] for cid in self._room_connections.get(room_id, ())]

    def connections_for_user(self, room_id: str, user_id: str) -> list[PartyConnection]:
        return [conn for conn in self.room_connections(room_id) if conn.user_id == user_id]

    def has_open_connection_for_user(self, room_id: str, user_id: str, exclude_connection_id: str | None = None) -> bool:
        return any(
            conn.connection_id != exclude_connection_id
            for conn in self.connections_for_user(room_id, user_id)
        )

    def active_room_ids(self) -> list[str]:
        return [room_id for room_id, baglantilar in self._room_connections.items() if baglantilar]

    # ============== Delivery ==============

    async def send(self, connection: PartyConnection, message: dict) -> None:
        """Tek bağlantıya best-effort gönderim"""
        if not connection.is_open:
            return

        try:
            await asyncio.wait_for(connection.send(message), timeout=SEND_TIMEOUT)
        except Exception:
            pass  # Kopmuş veya yavaş istemci, yeniden deneme yok

    async def broadcast(self, room_id: str, message: dict, exclude_connection_id: str | None = None) -> None:
        """Odadaki herkese gönder (parallel safe send)"""
        tasks = [
            self.send(conn, message)
            for conn in self.room_connections(room_id)
            if conn.connection_id != exclude_connection_id
        ]
        if tasks:
            await asyncio.gather(*tasks)

    async def send_each(self, room_id: str, message: dict, skip: Callable[[PartyConnection], bool]) -> None:
        """`skip` True dönen bağlantılar hariç herkese gönder"""
        tasks = [self.send(conn, message) for conn in self.room_connections(room_id) if not skip(conn)]
        if tasks:
            await asyncio.gather(*tasks)

    # ============== Ambient Sync ==============

    def start_ticker(self, tick: Callable[[], Awaitable[None]], interval: float) -> None:
        """Süreç boyunca her `interval` saniyede `tick` çalıştır"""
        if self._ticker and not self._ticker.done():
            return

        async def _loop():
            while True:
                await asyncio.sleep(interval)
                try:
                    await tick()
                except Exception as hata:
                    konsol.log(f"[red]Sync tick hatası:[/] {hata}")

        self._ticker = asyncio.create_task(_loop())
        konsol.log(f"[green]Periyodik senkron başlatıldı[/] ({interval} sn)")

    async def stop_ticker(self) -> None:
        if not self._ticker:
            return

        self._ticker.cancel()
        try:
            await self._ticker
        except asyncio.CancelledError:
            pass

        self._ticker = None
        konsol.log("[yellow]Periyodik senkron durduruldu[/]")
