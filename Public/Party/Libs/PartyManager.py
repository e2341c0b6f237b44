# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI              import konsol
from dataclasses      import replace
from typing           import Callable
from ..Models         import (
    PlaybackAction, RoomStateReason, Sender, DEDUPABLE_ACTIONS,
    PlaybackState, MemberProfile, Room,
)
from .errors          import ErrorCode, PartyError
from .video_store     import VideoStore
from .broadcast_hub   import BroadcastHub, PartyConnection
from .playback_clock  import extrapolate, apply_action, parse_action, parse_seek_time, resolve_video
from .control_lease   import acquire_control_lease, holds_active_lease, release_control_lease
from .playback_dedupe import BurstDeduplicator, PlaybackBurstEvent
from .chat_log        import post_chat_message
from Settings         import (
    HOST, PORT, PUBLIC_BASE_URL,
    CONTROL_LEASE_MS, PLAYBACK_SYNC_INTERVAL_MS, PLAYBACK_DEDUPE_WINDOW_MS,
    SEEK_PAUSE_NOISE_WINDOW_MS, SEEK_EPSILON_SEC, CHAT_HISTORY_LIMIT,
)
import time

NICKNAME_MAX_LENGTH = 32

def normalize_nickname(value) -> str:
    """Kırpılmış, 1-32 karakter; aksi halde invalid_nickname"""
    if not isinstance(value, str):
        raise PartyError(ErrorCode.INVALID_NICKNAME)

    temiz = value.strip()
    if not temiz or len(temiz) > NICKNAME_MAX_LENGTH:
        raise PartyError(ErrorCode.INVALID_NICKNAME)

    return temiz

def playback_summary(playback: PlaybackState) -> str:
    return f"{playback.position:.2f}s ({playback.position / 60:.2f}m)"

class PartyManager:
    """Oda & üyelik kaydı ve oynatım senkronizasyon motoru"""

    def __init__(
        self,
        video_store          : VideoStore,
        hub                  : BroadcastHub | None     = None,
        clock                : Callable[[], float]     = time.time,
        public_base_url      : str                     = PUBLIC_BASE_URL,
        lease_ms             : int                     = CONTROL_LEASE_MS,
        sync_interval_ms     : int                     = PLAYBACK_SYNC_INTERVAL_MS,
        dedupe_window_ms     : int                     = PLAYBACK_DEDUPE_WINDOW_MS,
        seek_pause_window_ms : int                     = SEEK_PAUSE_NOISE_WINDOW_MS,
        seek_epsilon         : float                   = SEEK_EPSILON_SEC,
        chat_limit           : int                     = CHAT_HISTORY_LIMIT,
    ):
        self.rooms       : dict[str, Room] = {}
        self.video_store = video_store
        self.hub         = hub or BroadcastHub()
        self.now         = clock

        self.public_base_url   = public_base_url
        self.lease_ms          = lease_ms
        self.sync_interval     = sync_interval_ms / 1000
        self.seek_pause_window = seek_pause_window_ms / 1000
        self.seek_epsilon      = seek_epsilon
        self.chat_limit        = chat_limit

        self.dedupe = BurstDeduplicator(self._flush_playback_event, window_ms=dedupe_window_ms)
        # (oda, kullanıcı) -> oynayan odayı son durdurduğu an
        self._recent_pause : dict[tuple[str, str], float] = {}

    # ============== Lifecycle ==============

    def start(self) -> None:
        self.hub.start_ticker(self.sync_tick, self.sync_interval)

    async def stop(self) -> None:
        await self.hub.stop_ticker()
        self.dedupe.cancel_all()

    # ============== Projections ==============

    def base_url(self, request_base_url: str | None = None) -> str:
        return self.public_base_url or request_base_url or f"http://{HOST}:{PORT}"

    def room_response(self, room: Room, base_url: str | None = None) -> dict:
        members = sorted(
            (room.member_profiles.get(uid) or MemberProfile(uid, uid) for uid in room.members),
            key=lambda profil: (profil.nickname.casefold(), profil.user_id),
        )
        return {
            "roomId"      : room.room_id,
            "creatorId"   : room.creator_id,
            "inviteToken" : room.invite_token,
            "shareUrl"    : f"{self.base_url(base_url)}/room/{room.room_id}?token={room.invite_token}",
            "memberCount" : len(room.members),
            "members"     : [profil.to_dict() for profil in members],
            "revision"    : room.revision,
            "playback"    : room.playback.to_dict(),
        }

    def room_state_message(
        self,
        room            : Room,
        reason          : RoomStateReason,
        by_user_id      : str | None            = None,
        action          : PlaybackAction | None = None,
        base_url        : str | None            = None,
        by_display_name : str | None            = None,
        sender          : Sender                = Sender.USER,
    ) -> dict:
        mesaj = {
            "type"     : "room_state",
            "room"     : self.room_response(room, base_url),
            "reason"   : reason.value,
            "sender"   : sender.value,
            "byUserId" : by_user_id if sender is Sender.USER else None,
        }
        if sender is Sender.USER:
            mesaj["byDisplayName"] = by_display_name or room.display_name(by_user_id)
        if action is not None:
            mesaj["action"] = action.value

        return mesaj

    # ============== Registry ==============

    def get_room(self, room_id: str) -> Room | None:
        return self.rooms.get(room_id)

    def require_room(self, room_id: str) -> Room:
        room = self.rooms.get(room_id)
        if room is None:
            raise PartyError(ErrorCode.ROOM_NOT_FOUND)

        return room

    def check_admission(self, room_id: str, user_id: str | None, invite_token: str | None) -> Room:
        """Bağlantı/istek kabul ön koşulları - state'e dokunmaz"""
        room = self.require_room(room_id)

        if not user_id or not user_id.strip():
            raise PartyError(ErrorCode.MISSING_USER_ID)

        if invite_token != room.invite_token:
            raise PartyError(ErrorCode.INVALID_INVITE_TOKEN)

        return room

    async def create_room(self, creator_id: str | None, video_id: str | None, creator_nickname: str | None = None) -> Room:
        """Videodan yeni oda oluştur - kurucu üye ve kira sahibi olur"""
        creator_id = creator_id.strip() if isinstance(creator_id, str) else ""
        if not creator_id:
            raise PartyError(ErrorCode.MISSING_USER_ID)

        nickname = normalize_nickname(creator_nickname) if creator_nickname else creator_id
        video    = await resolve_video(self.video_store, video_id)

        now  = self.now()
        room = Room(
            creator_id      = creator_id,
            playback        = PlaybackState(video_id=video.id, video_url=video.stream_path, last_updated=now),
            members         = {creator_id},
            member_profiles = {creator_id: MemberProfile(user_id=creator_id, nickname=nickname)},
            created_at      = now,
            active_controller_id    = creator_id,
            active_controller_until = now + self.lease_ms / 1000,
        )
        self.rooms[room.room_id] = room

        konsol.log(f"[green]Oda oluşturuldu:[/] {room.room_id} [dim]({video.file_name} | {creator_id})[/]")
        return room

    def join(self, room: Room, user_id: str, nickname: str | None = None) -> None:
        """Idempotent katılım - her çağrı revision'ı arttırır"""
        temiz = normalize_nickname(nickname) if nickname is not None else None

        room.members.add(user_id)
        if temiz:
            room.member_profiles[user_id] = MemberProfile(user_id=user_id, nickname=temiz)
        else:
            room.profile_for(user_id)

        room.playback = extrapolate(room.playback, self.now())
        room.bump_revision()

    def set_nickname(self, room: Room, user_id: str, nickname) -> bool:
        temiz  = normalize_nickname(nickname)
        profil = room.profile_for(user_id)
        if profil.nickname == temiz:
            return False

        room.member_profiles[user_id] = MemberProfile(user_id=user_id, nickname=temiz)
        room.bump_revision()
        return True

    def leave(self, room: Room, user_id: str) -> bool:
        """Üyeyi çıkar; zaten yoksa False (idempotent)"""
        if user_id not in room.members:
            return False

        self.dedupe.cancel(room.room_id, user_id)
        self._recent_pause.pop((room.room_id, user_id), None)

        room.members.discard(user_id)
        room.member_profiles.pop(user_id, None)
        release_control_lease(room, user_id)
        room.bump_revision()
        return True

    # ============== Playback ==============

    async def apply_playback(
        self,
        room        : Room,
        user_id     : str,
        action,
        at_time_sec = None,
        video_id    = None,
    ) -> bool:
        """
        Doğrula -> kira -> saat geçişi -> revision.

        Geçersiz komutlarda PartyError fırlatır; kira reddi ve no-op için False döner.
        """
        action = parse_action(action)

        video = None
        if action is PlaybackAction.SEEK:
            parse_seek_time(at_time_sec)
        elif action is PlaybackAction.CHANGE_VIDEO:
            # Tek I/O noktası: state'e dokunmadan önce
            video = await resolve_video(self.video_store, video_id)

        now = self.now()
        if not acquire_control_lease(room, user_id, now, self.lease_ms):
            konsol.log(
                f"[yellow]Kira reddi:[/] {room.room_id} | {user_id} » {action.value} "
                f"[dim](sahip: {room.active_controller_id})[/]"
            )
            return False

        state         = extrapolate(room.playback, now)
        yeni, changed = apply_action(state, action, now, at_time_sec, video, self.seek_epsilon)
        if not changed:
            konsol.log(f"[dim]Değişiklik yok:[/] {room.room_id} | {user_id} » {action.value} @ {playback_summary(state)}")
            return False

        room.playback = yeni
        room.bump_revision()
        self._track_scrub(room, user_id, action, now)

        konsol.log(
            f"[cyan]Oynatım:[/] {room.room_id} | {user_id} » [bold]{action.value}[/] "
            f"@ {playback_summary(room.playback)} | playing={room.playback.is_playing} | rev={room.revision}"
        )
        return True

    def _track_scrub(self, room: Room, user_id: str, action: PlaybackAction, now: float) -> None:
        """Pause'tan hemen sonra gelen seek -> sürükleme bitti, oynatmaya devam"""
        key = (room.room_id, user_id)

        if action is PlaybackAction.PAUSE:
            self._recent_pause[key] = now
            return

        if action is not PlaybackAction.SEEK:
            self._recent_pause.pop(key, None)
            return

        if room.playback.is_playing:
            return

        paused_at = self._recent_pause.pop(key, None)
        if paused_at is not None and now - paused_at <= self.seek_pause_window:
            room.playback = replace(room.playback, is_playing=True, last_updated=now)
            room.bump_revision()

    async def handle_playback(self, connection: PartyConnection, action, at_time_sec=None, video_id=None, base_url: str | None = None) -> None:
        room   = self.require_room(connection.room_id)
        action = parse_action(action)

        if not await self.apply_playback(room, connection.user_id, action, at_time_sec, video_id):
            return

        if action is PlaybackAction.CHANGE_VIDEO:
            mesaj = self.room_state_message(room, RoomStateReason.VIDEO_CHANGE, connection.user_id, action, base_url)
            await self.hub.send(connection, mesaj)
            await self.hub.broadcast(room.room_id, mesaj, exclude_connection_id=connection.connection_id)
            return

        # Başlatana hemen, diğerlerine debounce sonrası
        await self.hub.send(
            connection,
            self.room_state_message(room, RoomStateReason.PLAYBACK, connection.user_id, action, base_url),
        )
        if action in DEDUPABLE_ACTIONS:
            self.dedupe.enqueue(room.room_id, connection.user_id, PlaybackBurstEvent(
                action                = action,
                playback_time_sec     = room.playback.position,
                exclude_connection_id = connection.connection_id,
                base_url              = base_url,
            ))

    async def _flush_playback_event(self, room_id: str, user_id: str, event: PlaybackBurstEvent) -> None:
        room = self.rooms.get(room_id)
        if room is None or user_id not in room.members:
            return

        konsol.log(f"[dim]Yayın:[/] {room_id} | {user_id} » {event.action.value} @ {event.playback_time_sec:.2f}s")

        await self.hub.broadcast(
            room_id,
            self.room_state_message(room, RoomStateReason.PLAYBACK, user_id, event.action, event.base_url),
            exclude_connection_id=event.exclude_connection_id,
        )

    def sync_snapshot(self, room: Room, base_url: str | None = None) -> dict:
        """Pozisyonu şimdiye dondur ve oda görüntüsünü döndür"""
        room.playback = extrapolate(room.playback, self.now())
        return self.room_response(room, base_url)

    async def handle_sync(self, connection: PartyConnection, base_url: str | None = None) -> None:
        room = self.require_room(connection.room_id)
        room.playback = extrapolate(room.playback, self.now())
        await self.hub.send(
            connection,
            self.room_state_message(room, RoomStateReason.SYNC, connection.user_id, base_url=base_url),
        )

    async def sync_tick(self) -> None:
        """Oynayan ve bağlantısı olan her odaya sistem kaynaklı sync"""
        now = self.now()
        for room_id in self.hub.active_room_ids():
            room = self.rooms.get(room_id)
            if room is None or not room.playback.is_playing:
                continue

            room.playback = extrapolate(room.playback, now)
            mesaj = self.room_state_message(room, RoomStateReason.SYNC, sender=Sender.SYSTEM)

            # Kira sahibi zaten en güncel yerel state'e sahip
            await self.hub.send_each(room_id, mesaj, skip=lambda conn, r=room: holds_active_lease(r, conn.user_id, now))

    # ============== Chat & Profile ==============

    async def handle_chat(self, connection: PartyConnection, text, reply_to_message_id=None) -> None:
        room  = self.require_room(connection.room_id)
        mesaj = post_chat_message(room, connection.user_id, text, self.now(), reply_to_message_id, self.chat_limit)

        await self.hub.broadcast(room.room_id, {
            "type"     : "chat_message",
            "message"  : mesaj.to_dict(),
            "revision" : room.revision,
        })

    async def handle_nickname(self, connection: PartyConnection, action, nickname, base_url: str | None = None) -> None:
        if action != "setNickname":
            raise PartyError(ErrorCode.INVALID_PROFILE_ACTION)

        room = self.require_room(connection.room_id)
        if not self.set_nickname(room, connection.user_id, nickname):
            return

        await self.hub.broadcast(
            room.room_id,
            self.room_state_message(room, RoomStateReason.NICKNAME_CHANGE, connection.user_id, base_url=base_url),
        )

    # ============== Connections ==============

    async def connect(self, connection: PartyConnection, nickname: str | None = None, base_url: str | None = None) -> Room:
        """Kabul edilmiş bağlantıyı odaya kat: welcome + diğerlerine join"""
        room = self.require_room(connection.room_id)
        self.join(room, connection.user_id, nickname)
        self.hub.add(connection)

        konsol.log(f"[green]Katıldı:[/] {room.room_id} | {connection.user_id} [dim](rev={room.revision})[/]")

        await self.hub.send(connection, {
            "type"     : "welcome",
            "room"     : self.room_response(room, base_url),
            "messages" : [mesaj.to_dict() for mesaj in room.chat_messages],
        })
        await self.hub.broadcast(
            room.room_id,
            self.room_state_message(room, RoomStateReason.JOIN, connection.user_id, base_url=base_url),
            exclude_connection_id=connection.connection_id,
        )
        return room

    async def disconnect(self, connection: PartyConnection, base_url: str | None = None) -> bool:
        """Bağlantı kapandı; kullanıcının başka açık bağlantısı yoksa odadan çıkar"""
        if not self.hub.remove(connection):
            return False

        if self.hub.has_open_connection_for_user(connection.room_id, connection.user_id):
            return False

        room = self.rooms.get(connection.room_id)
        if room is None:
            return False

        return await self._leave_and_broadcast(room, connection.user_id, base_url)

    async def leave_room(self, room_id: str, user_id: str | None, invite_token: str | None, base_url: str | None = None) -> tuple[bool, Room]:
        """Açık ayrılma isteği: üyeliği bitir ve kullanıcının soketlerini kapat"""
        user_id = user_id.strip() if isinstance(user_id, str) else ""
        if not user_id:
            raise PartyError(ErrorCode.MISSING_USER_ID)

        room = self.check_admission(room_id, user_id, invite_token)
        left = await self._leave_and_broadcast(room, user_id, base_url)

        for connection in self.hub.connections_for_user(room_id, user_id):
            if connection.is_open:
                await connection.close(code=1000, reason="left_room")

        return left, room

    async def _leave_and_broadcast(self, room: Room, user_id: str, base_url: str | None = None) -> bool:
        gorunen_ad = room.display_name(user_id)
        if not self.leave(room, user_id):
            return False

        konsol.log(f"[yellow]Ayrıldı:[/] {room.room_id} | {user_id} [dim](rev={room.revision})[/]")

        await self.hub.broadcast(
            room.room_id,
            self.room_state_message(room, RoomStateReason.LEAVE, user_id, base_url=base_url, by_display_name=gorunen_ad),
        )
        return True
