# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from fastapi  import Request
from datetime import datetime, timezone
from .        import api_v1_router, api_v1_global_message

@api_v1_router.get("/health")
async def health_check(request: Request):
    """API sağlık kontrolü"""
    party = request.app.state.party
    return {
        "ok"    : True,
        **api_v1_global_message,
        "rooms" : len(party.rooms),
        "at"    : datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    }
