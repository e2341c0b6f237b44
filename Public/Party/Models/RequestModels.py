# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from pydantic import BaseModel

class CreateRoomRequest(BaseModel):
    creatorId       : str        = ""
    videoId         : str        = ""
    creatorNickname : str | None = None

class LeaveRoomRequest(BaseModel):
    userId      : str = ""
    inviteToken : str = ""
