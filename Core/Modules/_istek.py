# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI         import konsol
from Core        import party_FastAPI, Request, JSONResponse
from time        import time
from user_agents import parse

# Range istekleri çok sık gelir, loglanmaz
SKIP_PATHS = ("/favicon.ico", "/stream", "/api/v1/health")

@party_FastAPI.middleware("http")
async def istekten_once_sonra(request: Request, call_next):
    baslangic_zamani = time()

    try:
        response = await call_next(request)
        kod      = response.status_code
    except Exception as exc:
        kod      = 500
        response = JSONResponse(status_code=500, content={"error": "internal_error"})
        konsol.log(f"[red]❌ Beklenmeyen hata:[/] {request.url.path} - {exc}")

    if request.url.path.endswith(SKIP_PATHS):
        return response

    log_salla(request, kod, round(time() - baslangic_zamani, 2))
    return response

def cihaz_bilgisi(request: Request) -> str:
    ua_header = request.headers.get("User-Agent") or ""
    try:
        parsed_ua = parse(ua_header)
        return ua_header if str(parsed_ua).split("/")[2].strip() == "Other" else str(parsed_ua)
    except Exception:
        return ua_header

def log_salla(request: Request, kod: int, sure: float):
    fw_for    = request.headers.get("X-Forwarded-For")
    client_ip = fw_for.split(",")[0].strip() if fw_for else (request.client.host if request.client else "-")

    LABEL_WIDTH = 5
    durum_label = f"[green]{'durum':<{LABEL_WIDTH}}:[/]"
    ip_label    = f"[green]{'ip':<{LABEL_WIDTH}}:[/]"
    cihaz_label = f"[green]{'cihaz':<{LABEL_WIDTH}}:[/]"

    log_lines = [
        f"[bold blue]»[/] [bold turquoise2]{request.url.path}[/]",
        f"  {durum_label} [bold green]{request.method}[/] [blue]-[/] [bold bright_yellow]{kod}[/] [blue]-[/] [bold yellow2]{sure} sn[/]",
        f"  {ip_label} [bold red]{client_ip}[/]",
    ]

    if cihaz := cihaz_bilgisi(request):
        log_lines.append(f"  {cihaz_label} [magenta]{cihaz}[/]")

    konsol.log("\n".join(log_lines) + "\n")
