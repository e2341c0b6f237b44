# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from fastapi                import Request
from fastapi.responses      import JSONResponse, StreamingResponse
from .                      import videos_router
from Public.Party.Libs      import ErrorCode, content_type_for
from Public.Party.Routers   import get_party, request_base_url
from pathlib                import Path
import re

CHUNK_SIZE = 64 * 1024
RANGE_RE   = re.compile(r"^bytes=(\d*)-(\d*)$")

def parse_single_range(range_header: str, size_bytes: int) -> tuple[int, int] | None:
    """
    Tek `bytes=` aralığını çöz.

    Desteklenenler: `a-b` (son bayt dosya sonuna kırpılır), `a-`, `-n` (son n bayt).
    Karşılanamayan aralıkta None döner.
    """
    eslesme = RANGE_RE.match(range_header.strip())
    if not eslesme:
        return None

    ham_bas, ham_son = eslesme.groups()
    if not ham_bas and not ham_son:
        return None

    # bytes=-500 -> son 500 bayt
    if not ham_bas:
        uzunluk = int(ham_son)
        if uzunluk <= 0 or size_bytes == 0:
            return None
        uzunluk = min(size_bytes, uzunluk)
        return size_bytes - uzunluk, size_bytes - 1

    bas = int(ham_bas)
    if bas >= size_bytes:
        return None

    if not ham_son:
        return bas, size_bytes - 1

    son = int(ham_son)
    if son < bas:
        return None

    return bas, min(size_bytes - 1, son)

def iter_file(path: Path, start: int, end: int):
    """[start, end] aralığını parça parça oku"""
    with open(path, "rb") as dosya:
        dosya.seek(start)
        kalan = end - start + 1
        while kalan > 0:
            parca = dosya.read(min(CHUNK_SIZE, kalan))
            if not parca:
                break
            kalan -= len(parca)
            yield parca

@videos_router.get("")
async def list_videos(request: Request):
    """DATA_DIR içindeki videolar (en yeni önce)"""
    party    = get_party(request)
    store    = party.video_store
    base_url = party.base_url(request_base_url(request))
    videolar = await store.list_videos()

    return {
        "dataDir" : str(store.data_dir),
        "count"   : len(videolar),
        "videos"  : [
            {
                "id"           : video.id,
                "fileName"     : video.file_name,
                "sizeBytes"    : video.size_bytes,
                "modifiedAtMs" : int(video.modified_at * 1000),
                "streamUrl"    : f"{base_url}{video.stream_path}",
            }
            for video in videolar
        ],
    }

@videos_router.get("/{video_id}/stream")
async def stream_video(request: Request, video_id: str):
    """Video baytlarını (Range destekli) akıt"""
    store = get_party(request).video_store
    video = await store.resolve(video_id)
    if video is None:
        return JSONResponse(status_code=404, content={"error": ErrorCode.VIDEO_NOT_FOUND.value})

    yol          = store.path_for(video)
    content_type = content_type_for(video.file_name)
    range_header = request.headers.get("range")

    if not range_header:
        return StreamingResponse(
            iter_file(yol, 0, video.size_bytes - 1),
            media_type = content_type,
            headers    = {
                "Accept-Ranges"  : "bytes",
                "Content-Length" : str(video.size_bytes),
            },
        )

    aralik = parse_single_range(range_header, video.size_bytes)
    if aralik is None:
        return JSONResponse(
            status_code = 416,
            content     = {"error": "invalid_range"},
            headers     = {"Content-Range": f"bytes */{video.size_bytes}"},
        )

    bas, son = aralik
    return StreamingResponse(
        iter_file(yol, bas, son),
        status_code = 206,
        media_type  = content_type,
        headers     = {
            "Accept-Ranges"  : "bytes",
            "Content-Length" : str(son - bas + 1),
            "Content-Range"  : f"bytes {bas}-{son}/{video.size_bytes}",
        },
    )
