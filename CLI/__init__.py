# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from rich.console   import Console
from rich.traceback import Traceback
import sys

konsol = Console(log_path=False, highlight=False)

def cikis_yap(temizle: bool = True):
    """Çıkış mesajı bas ve süreci sonlandır"""
    if temizle:
        konsol.clear()

    konsol.print("\n[bold red]Çıkış yapılıyor...[/]", justify="center")
    sys.exit(0)

def hata_yakala(hata: BaseException):
    """Yakalanmamış hatayı konsola bas"""
    if isinstance(hata, KeyboardInterrupt):
        cikis_yap(False)

    konsol.print(Traceback.from_exception(type(hata), hata, hata.__traceback__, show_locals=False))
    konsol.log(f"[bold red]{type(hata).__name__}[/] » {hata}")
    sys.exit(1)
