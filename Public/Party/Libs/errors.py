# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from enum import Enum

class ErrorCode(str, Enum):
    """İstemciye `{"type": "error", "error": ...}` olarak giden hata kodları"""

    # Kabul (admission) - bağlantı kapatılır
    ROOM_NOT_FOUND       = "room_not_found"
    MISSING_USER_ID      = "missing_user_id"
    INVALID_INVITE_TOKEN = "invalid_invite_token"

    # Komut doğrulama - bağlantı açık kalır
    INVALID_SEEK_TIME        = "invalid_seek_time"
    MISSING_VIDEO_ID         = "missing_video_id"
    VIDEO_NOT_FOUND          = "video_not_found"
    INVALID_PLAYBACK_ACTION  = "invalid_playback_action"
    MESSAGE_EMPTY            = "message_empty"
    INVALID_REPLY_MESSAGE_ID = "invalid_reply_message_id"
    REPLY_MESSAGE_NOT_FOUND  = "reply_message_not_found"
    INVALID_NICKNAME         = "invalid_nickname"
    INVALID_PROFILE_ACTION   = "invalid_profile_action"

    # Protokol
    INVALID_JSON      = "invalid_json"
    INVALID_PAYLOAD   = "invalid_payload"
    PAYLOAD_TOO_LARGE = "payload_too_large"

# REST tarafında kullanılacak HTTP durum kodları
HTTP_STATUS = {
    ErrorCode.ROOM_NOT_FOUND       : 404,
    ErrorCode.VIDEO_NOT_FOUND      : 404,
    ErrorCode.INVALID_INVITE_TOKEN : 403,
}

class PartyError(Exception):
    """Tek bir komut veya bağlantıyla sınırlı, kodlu hata"""

    def __init__(self, code: ErrorCode):
        self.code = code
        super().__init__(code.value)

    @property
    def status_code(self) -> int:
        return HTTP_STATUS.get(self.code, 400)

    def to_message(self) -> dict:
        return {"type": "error", "error": self.code.value}
