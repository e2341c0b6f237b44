# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from .errors           import ErrorCode, PartyError
from .video_store      import VideoStore, to_video_id, from_video_id, content_type_for
from .broadcast_hub    import BroadcastHub, PartyConnection, WebSocketConnection
from .PartyManager     import PartyManager
from .message_handlers import MessageHandler
