# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from fastapi  import APIRouter
from Settings import PROJE

api_v1_router         = APIRouter(prefix="/api/v1")
api_v1_global_message = {
    "service" : PROJE
}

@api_v1_router.get("")
async def get_api_v1_router():
    return api_v1_global_message


# ! ----------------------------------------» Routers
from . import health
