"""
Player event names and playback states.

Event names are ``str`` enums so they hash and compare equal to the
plain strings controllers emit: ``bus.on(PlayerEvent.READY, cb)`` and
``bus.trigger("ready")`` address the same subscriptions.
"""

from __future__ import annotations

from enum import Enum


class PlayerEvent(str, Enum):
    """Event names re-broadcast by the player handle."""

    ALL = "all"
    """Wildcard channel: receives (name, payload) for every event."""

    # Lifecycle
    READY = "ready"
    REMOVE = "remove"
    SETUP = "setup"
    SETUP_ERROR = "setupError"
    ERROR = "error"

    # Playback
    PLAY = "play"
    PAUSE = "pause"
    IDLE = "idle"
    BUFFER = "buffer"
    BUFFER_CHANGE = "bufferChange"
    BUFFER_FULL = "bufferFull"
    BEFORE_PLAY = "beforePlay"
    BEFORE_COMPLETE = "beforeComplete"
    COMPLETE = "complete"
    SEEK = "seek"
    TIME = "time"
    VOLUME = "volume"
    MUTE = "mute"

    # Media metadata
    META = "meta"
    PLAYLIST = "playlist"
    PLAYLIST_ITEM = "playlistItem"
    PLAYLIST_COMPLETE = "playlistComplete"

    # Presentation
    RESIZE = "resize"
    FULLSCREEN = "fullscreen"
    DISPLAY_CLICK = "displayClick"
    CONTROLS = "controls"

    # Quality, captions, audio
    LEVELS = "levels"
    LEVEL_CHANGED = "levelChanged"
    CAPTIONS_LIST = "captionsList"
    CAPTIONS_CHANGED = "captionsChanged"
    AUDIO_TRACK_CHANGED = "audioTrackChanged"
    AUDIO_TRACKS = "audioTracks"

    # Advertising
    AD_ERROR = "adError"
    AD_CLICK = "adClick"
    AD_IMPRESSION = "adImpression"
    AD_TIME = "adTime"
    AD_COMPLETE = "adComplete"
    AD_COMPANIONS = "adCompanions"
    AD_SKIPPED = "adSkipped"
    AD_PLAY = "adPlay"
    AD_PAUSE = "adPause"
    AD_META = "adMeta"

    # Casting
    CAST_SESSION = "castSession"

    def __str__(self) -> str:
        return self.value


class PlayerState(str, Enum):
    """Playback states reported by the controller's getState."""

    IDLE = "idle"
    BUFFERING = "buffering"
    PLAYING = "playing"
    PAUSED = "paused"
    COMPLETE = "complete"
    ERROR = "error"

    def __str__(self) -> str:
        return self.value


ALL_EVENTS = PlayerEvent.ALL.value
