"""
Player configuration.

Two kinds of configuration live here:

    PlayerSettings  - process-wide switches (debug dispatch, log level)
    setup options   - the open record handed to PlayerHandle.setup(),
                      loadable from YAML or JSON

The ``events`` sub-record of setup options is applied through
EVENT_BINDINGS, an explicit allow-list of handle operations that
configuration may invoke.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from player_api.errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass
class PlayerSettings:
    """Process-wide player settings.

    Attributes:
        debug: When True, PlayerHandle.trigger propagates subscriber
            exceptions (fail loud). When False, faults are contained
            and logged (fail contained).
        log_level: Level for the global structured logger; read by
            get_logger() unless configure_logging() pinned one.
    """

    debug: bool = False
    log_level: str = "info"

LOG_LEVELS = ("debug", "info", "warning", "error")


_settings: PlayerSettings | None = None


def get_settings() -> PlayerSettings:
    """Get the process-wide settings instance."""
    global _settings
    if _settings is None:
        _settings = PlayerSettings()
    return _settings


def set_debug(enabled: bool) -> None:
    """Switch handles between unsafe (debug) and safe dispatch."""
    get_settings().debug = bool(enabled)


def configure(**kwargs: Any) -> PlayerSettings:
    """Update process-wide settings.

    Raises:
        ConfigError: If a key is not a PlayerSettings field, or
            log_level is not one of LOG_LEVELS.
    """
    settings = get_settings()
    known = {f.name for f in fields(PlayerSettings)}
    for key, value in kwargs.items():
        if key not in known:
            raise ConfigError(f"Unknown setting: {key}")
        if key == "log_level" and value not in LOG_LEVELS:
            raise ConfigError(f"Unknown log level: {value}")
        setattr(settings, key, value)
    return settings


def reset_settings() -> None:
    """Restore default settings."""
    global _settings
    _settings = None


# Configuration key -> PlayerHandle method.
# Keys use the wire (camelCase) spelling; the snake_case method names
# are accepted as well.
_WIRE_BINDINGS: dict[str, str] = {
    # Subscriptions
    "onReady": "on_ready",
    "onSetupError": "on_setup_error",
    "onError": "on_error",
    "onPlay": "on_play",
    "onPause": "on_pause",
    "onIdle": "on_idle",
    "onBuffer": "on_buffer",
    "onBufferChange": "on_buffer_change",
    "onBufferFull": "on_buffer_full",
    "onBeforePlay": "on_before_play",
    "onBeforeComplete": "on_before_complete",
    "onComplete": "on_complete",
    "onSeek": "on_seek",
    "onTime": "on_time",
    "onVolume": "on_volume",
    "onMute": "on_mute",
    "onMeta": "on_meta",
    "onPlaylist": "on_playlist",
    "onPlaylistItem": "on_playlist_item",
    "onPlaylistComplete": "on_playlist_complete",
    "onResize": "on_resize",
    "onFullscreen": "on_fullscreen",
    "onDisplayClick": "on_display_click",
    "onControls": "on_controls",
    "onQualityLevels": "on_quality_levels",
    "onQualityChange": "on_quality_change",
    "onCaptionsList": "on_captions_list",
    "onCaptionsChange": "on_captions_change",
    "onAudioTrackChange": "on_audio_track_change",
    "onAudioTracks": "on_audio_tracks",
    "onAdError": "on_ad_error",
    "onAdClick": "on_ad_click",
    "onAdImpression": "on_ad_impression",
    "onAdTime": "on_ad_time",
    "onAdComplete": "on_ad_complete",
    "onAdCompanions": "on_ad_companions",
    "onAdSkipped": "on_ad_skipped",
    "onAdPlay": "on_ad_play",
    "onAdPause": "on_ad_pause",
    "onAdMeta": "on_ad_meta",
    "onCast": "on_cast",
    # Single-argument mutators
    "setVolume": "set_volume",
    "setMute": "set_mute",
    "setControls": "set_controls",
    "setFullscreen": "set_fullscreen",
    "setPlaybackRate": "set_playback_rate",
    "setCaptions": "set_captions",
    "setCues": "set_cues",
    "setConfig": "set_config",
    "setCurrentQuality": "set_current_quality",
    "setCurrentCaptions": "set_current_captions",
    "setCurrentAudioTrack": "set_current_audio_track",
    "seek": "seek",
    "load": "load",
    "playlistItem": "playlist_item",
}

EVENT_BINDINGS: dict[str, str] = {
    **_WIRE_BINDINGS,
    **{method: method for method in _WIRE_BINDINGS.values()},
}


def resolve_binding(key: str) -> str | None:
    """Map an ``events`` key to the handle method it may invoke."""
    return EVENT_BINDINGS.get(key)


def load_options(path: str | Path) -> dict[str, Any]:
    """Load setup options from a YAML or JSON file.

    Args:
        path: File ending in .yaml, .yml or .json.

    Returns:
        Options mapping suitable for PlayerHandle.setup().

    Raises:
        ConfigError: On unsupported suffix, unreadable content, or a
            document that is not a mapping.
    """
    path = Path(path)

    try:
        if path.suffix in (".yaml", ".yml"):
            with open(path) as f:
                data = yaml.safe_load(f)
        elif path.suffix == ".json":
            with open(path) as f:
                data = json.load(f)
        else:
            raise ConfigError(f"Unsupported file format: {path.suffix}")
    except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot load options from {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"Options in {path} must be a mapping, got {type(data).__name__}"
        )

    events = data.get("events")
    if events is not None and not isinstance(events, dict):
        raise ConfigError("'events' must be a mapping")

    logger.debug("Loaded %d option keys from %s", len(data), path)
    return data
