# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from .PartyModels   import (
    PlaybackAction,
    RoomStateReason,
    Sender,
    DEDUPABLE_ACTIONS,
    PlaybackState,
    MemberProfile,
    ChatMessage,
    VideoItem,
    Room,
    yeni_id,
    to_ms,
)
from .RequestModels import CreateRoomRequest, LeaveRoomRequest
