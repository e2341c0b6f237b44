# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from pathlib import Path
from yaml    import load, FullLoader
from dotenv  import load_dotenv
import os

PROJE_DIZINI = Path(__file__).resolve().parent.parent

# .env yükleme
load_dotenv(dotenv_path=PROJE_DIZINI / ".env")

# AYAR.yml yükleme
with open(PROJE_DIZINI / "AYAR.yml", "r", encoding="utf-8") as yaml_dosyasi:
    AYAR = load(yaml_dosyasi, Loader=FullLoader)

# Genel ayarlar
PRODUCTION = os.getenv("PRODUCTION", "false").lower() == "true"

PROJE = AYAR["PROJE"]
HOST  = os.getenv("HOST", AYAR["APP"]["HOST"])
PORT  = int(os.getenv("PORT", AYAR["APP"]["PORT"]))

# Video dizini ve dış erişim adresi
DATA_DIR        = Path(os.getenv("DATA_DIR", "data")).resolve()
PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "").rstrip("/")

# Senkronizasyon motoru ayarları
CONTROL_LEASE_MS           = int(os.getenv("CONTROL_LEASE_MS", "2000"))
PLAYBACK_SYNC_INTERVAL_MS  = int(os.getenv("PLAYBACK_SYNC_INTERVAL_MS", "2000"))
PLAYBACK_DEDUPE_WINDOW_MS  = int(os.getenv("PLAYBACK_DEDUPE_WINDOW_MS", "250"))
SEEK_PAUSE_NOISE_WINDOW_MS = int(os.getenv("SEEK_PAUSE_NOISE_WINDOW_MS", "500"))
SEEK_EPSILON_SEC           = float(os.getenv("SEEK_EPSILON_SEC", "1.0"))
CHAT_HISTORY_LIMIT         = int(os.getenv("CHAT_HISTORY_LIMIT", "200"))
