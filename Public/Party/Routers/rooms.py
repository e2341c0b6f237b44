# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from fastapi            import Request
from fastapi.responses  import JSONResponse
from .                  import party_router, get_party, request_base_url
from ..Models           import CreateRoomRequest, LeaveRoomRequest
from ..Libs             import ErrorCode, PartyError

@party_router.post("/from-video")
async def create_room_from_video(request: Request, body: CreateRoomRequest):
    """Videodan yeni oda oluştur"""
    party = get_party(request)
    room  = await party.create_room(body.creatorId, body.videoId, body.creatorNickname)

    return JSONResponse(status_code=201, content=party.room_response(room, request_base_url(request)))

@party_router.get("/{room_id}")
async def get_room(request: Request, room_id: str, inviteToken: str | None = None):
    """Davet token'ı ile oda görüntüsü"""
    party = get_party(request)
    room  = party.require_room(room_id)
    if inviteToken != room.invite_token:
        raise PartyError(ErrorCode.INVALID_INVITE_TOKEN)

    return party.sync_snapshot(room, request_base_url(request))

@party_router.post("/{room_id}/leave")
async def leave_room(request: Request, room_id: str, body: LeaveRoomRequest):
    """Odadan açıkça ayrıl - kullanıcının tüm soketleri kapatılır"""
    party    = get_party(request)
    base_url = request_base_url(request)
    left, room = await party.leave_room(room_id, body.userId, body.inviteToken, base_url)

    return {
        "left" : left,
        "room" : party.room_response(room, base_url),
    }
