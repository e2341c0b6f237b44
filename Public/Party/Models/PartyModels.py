# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from dataclasses import dataclass, field
from enum        import Enum
import time, uuid

class PlaybackAction(str, Enum):
    PLAY         = "play"
    PAUSE        = "pause"
    SEEK         = "seek"
    CHANGE_VIDEO = "changeVideo"

class RoomStateReason(str, Enum):
    JOIN            = "join"
    LEAVE           = "leave"
    PLAYBACK        = "playback"
    VIDEO_CHANGE    = "video_change"
    SYNC            = "sync"
    NICKNAME_CHANGE = "nickname_change"

class Sender(str, Enum):
    """room_state mesajını kim tetikledi"""
    USER   = "user"
    SYSTEM = "system"  # Periyodik sync

# Debounce'a giren aksiyonlar
DEDUPABLE_ACTIONS = {PlaybackAction.PLAY, PlaybackAction.PAUSE, PlaybackAction.SEEK}

def yeni_id() -> str:
    return str(uuid.uuid4())

def to_ms(timestamp: float) -> int:
    return int(round(timestamp * 1000))

@dataclass(frozen=True)
class PlaybackState:
    """Odanın oynatım durumu - yerinde değiştirilmez, her geçişte yenisi üretilir"""
    video_id     : str
    video_url    : str
    position     : float = 0.0   # saniye
    is_playing   : bool  = False
    last_updated : float = field(default_factory=time.time)  # position'ın doğru olduğu an

    def to_dict(self) -> dict:
        return {
            "videoId"         : self.video_id,
            "videoUrl"        : self.video_url,
            "playbackTimeSec" : self.position,
            "isPlaying"       : self.is_playing,
            "lastUpdatedAtMs" : to_ms(self.last_updated),
        }

@dataclass
class MemberProfile:
    user_id  : str
    nickname : str

    def to_dict(self) -> dict:
        return {"userId": self.user_id, "nickname": self.nickname}

@dataclass
class ChatMessage:
    """Chat mesajı"""
    room_id             : str
    user_id             : str
    user_display_name   : str
    message             : str
    reply_to_message_id : str | None = None
    id                  : str   = field(default_factory=yeni_id)
    created_at          : float = field(default_factory=time.time)

    def to_dict(self) -> dict:
        veri = {
            "id"              : self.id,
            "roomId"          : self.room_id,
            "userId"          : self.user_id,
            "userDisplayName" : self.user_display_name,
            "message"         : self.message,
            "createdAtMs"     : to_ms(self.created_at),
        }
        if self.reply_to_message_id:
            veri["replyToMessageId"] = self.reply_to_message_id

        return veri

@dataclass
class VideoItem:
    """DATA_DIR içindeki tek bir video dosyası"""
    id          : str
    file_name   : str
    size_bytes  : int
    modified_at : float

    @property
    def stream_path(self) -> str:
        return f"/videos/{self.id}/stream"

@dataclass
class Room:
    """Watch Party odası"""
    creator_id      : str
    playback        : PlaybackState
    room_id         : str = field(default_factory=yeni_id)
    invite_token    : str = field(default_factory=yeni_id)
    members         : set[str]                 = field(default_factory=set)
    member_profiles : dict[str, MemberProfile] = field(default_factory=dict)
    chat_messages   : list[ChatMessage]        = field(default_factory=list)
    created_at      : float = field(default_factory=time.time)
    revision        : int   = 1
    # Kontrol kirası (lease)
    active_controller_id    : str | None = None
    active_controller_until : float      = 0.0

    def bump_revision(self) -> int:
        self.revision += 1
        return self.revision

    def profile_for(self, user_id: str) -> MemberProfile:
        """Profil yoksa user_id ile varsayılan profil oluştur"""
        profil = self.member_profiles.get(user_id)
        if profil is None:
            profil = MemberProfile(user_id=user_id, nickname=user_id)
            self.member_profiles[user_id] = profil

        return profil

    def display_name(self, user_id: str) -> str:
        profil = self.member_profiles.get(user_id)
        return profil.nickname if profil else user_id
