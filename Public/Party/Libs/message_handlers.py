# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI            import konsol
from datetime       import datetime, timezone
from .PartyManager  import PartyManager
from .broadcast_hub import PartyConnection
from .errors        import ErrorCode, PartyError
import json

MAX_PAYLOAD = 64 * 1024  # 64 KB

class MessageHandler:
    """Tek bağlantının gelen mesajlarını işler"""

    def __init__(self, manager: PartyManager, connection: PartyConnection, base_url: str | None = None):
        self.manager    = manager
        self.connection = connection
        self.base_url   = base_url

        self.handlers = {
            "playback" : self.handle_playback,
            "chat"     : self.handle_chat,
            "sync"     : self.handle_sync,
            "profile"  : self.handle_profile,
            "ping"     : self.handle_ping,
        }

    async def send_json(self, data: dict):
        await self.manager.hub.send(self.connection, data)

    async def send_error(self, code: ErrorCode):
        await self.send_json(PartyError(code).to_message())

    async def handle_raw(self, raw: str):
        """Ham metin çerçevesini çöz ve ilgili handler'a yönlendir"""
        if len(raw.encode("utf-8")) > MAX_PAYLOAD:
            await self.send_error(ErrorCode.PAYLOAD_TOO_LARGE)
            return

        try:
            message = json.loads(raw)
        except json.JSONDecodeError:
            await self.send_error(ErrorCode.INVALID_JSON)
            return

        if not isinstance(message, dict):
            await self.send_error(ErrorCode.INVALID_PAYLOAD)
            return

        tip     = message.get("type")
        handler = self.handlers.get(tip) if isinstance(tip, str) else None
        if handler is None:
            await self.send_error(ErrorCode.INVALID_PAYLOAD)
            return

        try:
            await handler(message)
        except PartyError as hata:
            konsol.log(
                f"[yellow]Geçersiz komut:[/] {self.connection.room_id} | {self.connection.user_id} "
                f"» {message.get('type')} [red]{hata.code.value}[/]"
            )
            await self.send_json(hata.to_message())

    # ============== Handlers ==============

    async def handle_playback(self, message: dict):
        await self.manager.handle_playback(
            self.connection,
            action      = message.get("action"),
            at_time_sec = message.get("atTimeSec"),
            video_id    = message.get("videoId"),
            base_url    = self.base_url,
        )

    async def handle_chat(self, message: dict):
        await self.manager.handle_chat(
            self.connection,
            text                = message.get("message"),
            reply_to_message_id = message.get("replyToMessageId"),
        )

    async def handle_sync(self, message: dict):
        await self.manager.handle_sync(self.connection, base_url=self.base_url)

    async def handle_profile(self, message: dict):
        await self.manager.handle_nickname(
            self.connection,
            action   = message.get("action"),
            nickname = message.get("nickname"),
            base_url = self.base_url,
        )

    async def handle_ping(self, message: dict):
        await self.send_json({
            "type" : "pong",
            "at"   : datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        })

    async def handle_disconnect(self):
        """Bağlantı koptuğunda çağrılır"""
        await self.manager.disconnect(self.connection, base_url=self.base_url)
