# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from fastapi                 import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from Core.Modules            import lifespan
from fastapi.responses       import JSONResponse
from Settings                import PROJE

party_FastAPI = FastAPI(
    title       = PROJE,
    openapi_url = None,
    docs_url    = None,
    redoc_url   = None,
    lifespan    = lifespan
)

# ! ----------------------------------------» Middlewares

party_FastAPI.add_middleware(CORSMiddleware, allow_origins=["*"], allow_credentials=False, allow_methods=["*"], allow_headers=["*"])

# ! ----------------------------------------» Routers

from Core.Modules          import _istek, _hata, _security
from Public.API.v1.Routers import api_v1_router
from Public.Party.Routers  import party_router
from Public.Videos.Routers import videos_router

party_FastAPI.include_router(api_v1_router)
party_FastAPI.include_router(party_router)
party_FastAPI.include_router(videos_router)
