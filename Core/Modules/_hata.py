# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI                    import konsol
from Core                   import party_FastAPI, Request, JSONResponse
from starlette.exceptions   import HTTPException as StarletteHTTPException
from fastapi.exceptions     import RequestValidationError
from Public.Party.Libs      import ErrorCode, PartyError

@party_FastAPI.exception_handler(StarletteHTTPException)
async def custom_http_exception_handler(request: Request, exc):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

@party_FastAPI.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Pydantic validation hatalarını JSON olarak döndür"""
    errors   = exc.errors()
    messages = [f"{'.'.join(str(loc) for loc in e['loc'])}: {e['msg']}" for e in errors]

    return JSONResponse(
        status_code = 422,
        content     = {"error": ErrorCode.INVALID_PAYLOAD.value, "message": " | ".join(messages)}
    )

@party_FastAPI.exception_handler(PartyError)
async def party_exception_handler(request: Request, exc: PartyError):
    """Kodlu motor hatalarını `{"error": kod}` olarak döndür"""
    konsol.log(f"[yellow]{request.method} {request.url.path}[/] » [red]{exc.code.value}[/]")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.code.value})
