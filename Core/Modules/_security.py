# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from Core import party_FastAPI, Request

@party_FastAPI.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)

    # --- Temel Güvenlik Başlıkları ---
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["Referrer-Policy"]        = "strict-origin-when-cross-origin"

    # Video akışı başka origin'lerdeki oynatıcılardan da okunabilmeli
    response.headers["Cross-Origin-Resource-Policy"] = "cross-origin"

    # Oynatıcılar kısmi yanıtın sınırlarını okuyabilsin
    if request.url.path.startswith("/videos"):
        response.headers["Access-Control-Expose-Headers"] = "Content-Range, Content-Length, Accept-Ranges"

    # Oda ve API yanıtları davet token'ı taşır, önbelleğe alınmasın
    if request.url.path.startswith(("/rooms", "/api")):
        response.headers["Cache-Control"] = "no-store"
        response.headers["X-Robots-Tag"]  = "noindex, nofollow"

    # --- Gereksiz Bilgi Sızmalarını Temizle ---
    for header in ("server", "x-powered-by"):
        if header in response.headers:
            del response.headers[header]

    return response
