# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from ..Models import ChatMessage, Room
from .errors  import ErrorCode, PartyError
from Settings import CHAT_HISTORY_LIMIT

def find_message(room: Room, message_id: str) -> ChatMessage | None:
    return next((mesaj for mesaj in room.chat_messages if mesaj.id == message_id), None)

def post_chat_message(
    room                : Room,
    user_id             : str,
    text,
    now                 : float,
    reply_to_message_id = None,
    limit               : int = CHAT_HISTORY_LIMIT,
) -> ChatMessage:
    """
    Odanın chat geçmişine mesaj ekle ve revision'ı arttır.

    Geçmiş ekleme sırasını korur, `limit`'i aşınca en eskiler atılır.
    Yayın (broadcast) çağıranın işidir.
    """
    metin = text.strip() if isinstance(text, str) else ""
    if not metin:
        raise PartyError(ErrorCode.MESSAGE_EMPTY)

    reply_id = None
    if reply_to_message_id is not None:
        if not isinstance(reply_to_message_id, str) or not reply_to_message_id.strip():
            raise PartyError(ErrorCode.INVALID_REPLY_MESSAGE_ID)

        reply_id = reply_to_message_id.strip()
        if find_message(room, reply_id) is None:
            raise PartyError(ErrorCode.REPLY_MESSAGE_NOT_FOUND)

    mesaj = ChatMessage(
        room_id             = room.room_id,
        user_id             = user_id,
        user_display_name   = room.display_name(user_id),
        message             = metin,
        reply_to_message_id = reply_id,
        created_at          = now,
    )

    room.chat_messages.append(mesaj)
    if len(room.chat_messages) > limit:
        room.chat_messages = room.chat_messages[-limit:]

    room.bump_revision()
    return mesaj
