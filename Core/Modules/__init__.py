# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI               import konsol
from fastapi           import FastAPI
from contextlib        import asynccontextmanager
from Public.Party.Libs import PartyManager, VideoStore
from Settings          import DATA_DIR

@asynccontextmanager
async def lifespan(app: FastAPI):
    """FastAPI lifespan events - startup ve shutdown"""

    # Oda kaydı süreç başında oluşur, süreç bitene kadar yaşar
    video_store = VideoStore(DATA_DIR)
    video_store.ensure_dir()

    party = PartyManager(video_store)
    app.state.party = party
    party.start()

    konsol.log(f"[green]Video dizini:[/] {video_store.data_dir}")

    yield

    await party.stop()
