# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from fastapi            import APIRouter
from starlette.requests import HTTPConnection
from Public.Party.Libs  import PartyManager

party_router = APIRouter(prefix="/rooms")

def get_party(conn: HTTPConnection) -> PartyManager:
    """Lifespan'da oluşturulan motor"""
    return conn.app.state.party

def request_base_url(conn: HTTPConnection) -> str | None:
    """İsteğin Host başlığından dış adres (ws -> http)"""
    host = conn.headers.get("host")
    if not host:
        return None

    scheme = {"ws": "http", "wss": "https"}.get(conn.url.scheme, conn.url.scheme)
    scheme = conn.headers.get("X-Forwarded-Proto", scheme)
    return f"{scheme}://{host}"

from . import rooms, party_ws
