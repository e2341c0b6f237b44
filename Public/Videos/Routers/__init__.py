# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from fastapi import APIRouter

videos_router = APIRouter(prefix="/videos")

from . import videos
