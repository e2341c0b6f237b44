# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI     import konsol
from fastapi import WebSocket, WebSocketDisconnect
from .       import party_router, get_party, request_base_url
from ..Libs  import MessageHandler, PartyError, WebSocketConnection
import json

@party_router.websocket("/{room_id}/ws")
async def party_websocket(websocket: WebSocket, room_id: str):
    await websocket.accept()

    party        = get_party(websocket)
    base_url     = request_base_url(websocket)
    user_id      = (websocket.query_params.get("userId") or "").strip()
    invite_token = websocket.query_params.get("inviteToken")
    nickname     = websocket.query_params.get("nickname") or None

    # Kabul: herhangi bir hata -> error mesajı + kapat
    try:
        party.check_admission(room_id, user_id, invite_token)
        connection = WebSocketConnection(websocket, room_id, user_id)
        await party.connect(connection, nickname, base_url)
    except PartyError as hata:
        konsol.log(f"[red]Bağlantı reddedildi:[/] {room_id} | {user_id or '-'} » {hata.code.value}")
        await websocket.send_text(json.dumps(hata.to_message()))
        await websocket.close(code=1008, reason=hata.code.value)
        return

    handler = MessageHandler(party, connection, base_url)

    try:
        while True:
            raw = await websocket.receive_text()
            await handler.handle_raw(raw)

    except WebSocketDisconnect:
        pass
    except Exception as e:
        konsol.log(f"[red]WebSocket Error:[/] {e}")
    finally:
        await handler.handle_disconnect()
