# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from ..Models import Room
from Settings import CONTROL_LEASE_MS

def acquire_control_lease(room: Room, user_id: str, now: float, lease_duration_ms: int = CONTROL_LEASE_MS) -> bool:
    """
    Odanın oynatımını değiştirme hakkını (lease) almaya çalış.

    Sahip yoksa, sahip zaten bu kullanıcıysa veya süre dolduysa verilir ve süre yenilenir.
    Reddedilen komut sessizce düşürülür; kira asla açıkça bırakılmaz, kendiliğinden dolar.
    """
    if (
        room.active_controller_id is None
        or room.active_controller_id == user_id
        or now > room.active_controller_until
    ):
        room.active_controller_id    = user_id
        room.active_controller_until = now + lease_duration_ms / 1000
        return True

    return False

def holds_active_lease(room: Room, user_id: str, now: float) -> bool:
    """Kullanıcı şu an geçerli bir kiraya sahip mi"""
    return room.active_controller_id == user_id and now <= room.active_controller_until

def release_control_lease(room: Room, user_id: str) -> None:
    """Odadan ayrılan kullanıcının kirasını temizle"""
    if room.active_controller_id == user_id:
        room.active_controller_id    = None
        room.active_controller_until = 0.0
