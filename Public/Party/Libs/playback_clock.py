# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from dataclasses  import replace
from ..Models     import PlaybackAction, PlaybackState, VideoItem
from .errors      import ErrorCode, PartyError
from .video_store import VideoStore
from Settings     import SEEK_EPSILON_SEC
import math

def extrapolate(state: PlaybackState, now: float) -> PlaybackState:
    """Saklanan pozisyonu `now` anına taşı (oynatılıyorsa geçen süre eklenir)"""
    if not state.is_playing:
        return state

    elapsed = max(0.0, now - state.last_updated)
    return replace(state, position=max(0.0, state.position + elapsed), last_updated=now)

def parse_seek_time(value) -> float:
    """Sonlu ve negatif olmayan bir sayı bekler; bool kabul edilmez"""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise PartyError(ErrorCode.INVALID_SEEK_TIME)

    try:
        value = float(value)
    except OverflowError:
        raise PartyError(ErrorCode.INVALID_SEEK_TIME) from None

    if not math.isfinite(value) or value < 0:
        raise PartyError(ErrorCode.INVALID_SEEK_TIME)

    return value

def parse_action(value) -> PlaybackAction:
    try:
        return PlaybackAction(value)
    except ValueError:
        raise PartyError(ErrorCode.INVALID_PLAYBACK_ACTION) from None

async def resolve_video(store: VideoStore, video_id) -> VideoItem:
    """changeVideo için video id'yi çöz - state'e dokunmadan önce çağrılır"""
    if not isinstance(video_id, str) or not video_id.strip():
        raise PartyError(ErrorCode.MISSING_VIDEO_ID)

    video = await store.resolve(video_id.strip())
    if video is None:
        raise PartyError(ErrorCode.VIDEO_NOT_FOUND)

    return video

def apply_action(
    state      : PlaybackState,
    action     : PlaybackAction,
    now        : float,
    at_time_sec: float | None     = None,
    video      : VideoItem | None = None,
    epsilon    : float            = SEEK_EPSILON_SEC,
) -> tuple[PlaybackState, bool]:
    """
    Oynatım geçişini uygula.

    `state` çağıran tarafından `extrapolate` edilmiş olmalı.
    Returns: (yeni_state, changed) - changed=False ise state aynen döner.
    """
    if action is PlaybackAction.PLAY:
        if state.is_playing:
            return state, False
        return replace(state, is_playing=True, last_updated=now), True

    if action is PlaybackAction.PAUSE:
        if not state.is_playing:
            return state, False
        return replace(state, is_playing=False, last_updated=now), True

    if action is PlaybackAction.SEEK:
        hedef = parse_seek_time(at_time_sec)
        # Titreşim kaynaklı yakın seek'ler gürültü sayılır
        if abs(state.position - hedef) <= epsilon:
            return state, False
        return replace(state, position=hedef, last_updated=now), True

    if action is PlaybackAction.CHANGE_VIDEO:
        if video is None:
            raise PartyError(ErrorCode.VIDEO_NOT_FOUND)
        if video.id == state.video_id:
            return state, False
        return PlaybackState(
            video_id     = video.id,
            video_url    = video.stream_path,
            position     = 0.0,
            is_playing   = False,
            last_updated = now,
        ), True

    raise PartyError(ErrorCode.INVALID_PLAYBACK_ACTION)
