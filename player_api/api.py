"""
PlayerHandle - the long-lived public player object.

A handle keeps its identity (id, unique_id, plugins, QoE timer) across
any number of setup() calls, while the controller behind it is thrown
away and rebuilt each time. Everything the controller emits is
re-broadcast on the handle's own event bus, and every accessor or
mutator is forwarded by name to whichever controller is live.

Example:
    player = PlayerHandle("player-1")
    player.on("ready", lambda e: print("ready after", e["setupTime"], "ms"))
    player.setup({"file": "movie.m3u8", "events": {"setVolume": 50}})

    player.seek(30).set_mute(True)
    player.get_position()

    player.remove()
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable

from player_api.controller import ControllerFactory, default_controller_factory
from player_api.events.bus import DispatchPolicy, ErrorReporter, EventBus, Subscription
from player_api.events.names import PlayerEvent, PlayerState
from player_api.forwarder import CallForwarder, ControllerRef
from player_api.lifecycle import ControllerLifecycle, HandleState
from player_api.plugins.registry import get_plugin_registry
from player_api.plugins.base import PluginConstructor
from player_api.qoe import QoETimer
from player_api.registry import InstanceRegistry, get_instance_registry
from player_api.version import __version__

Callback = Callable[..., Any]

_EXTERNAL = "external"


def _external_meta() -> dict[str, str]:
    return {"reason": _EXTERNAL}


class PlayerHandle:
    """Public player facade.

    Args:
        element: Target surface. A str is used as the id; any other
            object must carry an ``id`` attribute.
        controller_factory: Builds a controller for ``element``. Called
            at construction and on every setup().
        registry: Instance registry; the process-wide one by default.
        dispatch_policy: How trigger() treats subscriber exceptions.
            AUTO follows the process-wide debug flag.
        error_reporter: Receives faults contained by safe dispatch.
    """

    def __init__(
        self,
        element: Any,
        controller_factory: ControllerFactory | None = None,
        registry: InstanceRegistry | None = None,
        dispatch_policy: DispatchPolicy = DispatchPolicy.AUTO,
        error_reporter: ErrorReporter | None = None,
    ):
        self._registry = registry or get_instance_registry()
        self._unique_id = self._registry.next_unique_id()
        self._id = element if isinstance(element, str) else getattr(element, "id", None)
        self._qoe = QoETimer()
        self._plugins: dict[str, Any] = {}
        self._events = EventBus(policy=dispatch_policy, reporter=error_reporter)

        self._qoe.tick("init")

        ref = ControllerRef()
        self._forwarder = CallForwarder(ref)
        self._lifecycle = ControllerLifecycle(
            handle=self,
            element=element,
            factory=controller_factory or default_controller_factory,
            registry=self._registry,
            qoe=self._qoe,
            ref=ref,
        )
        self._lifecycle.attach()
        self._registry.register(self)

    # Identity

    @property
    def id(self) -> str | None:
        return self._id

    @property
    def unique_id(self) -> int:
        return self._unique_id

    @property
    def plugins(self) -> dict[str, Any]:
        return self._plugins

    @property
    def qoe_timer(self) -> QoETimer:
        return self._qoe

    @property
    def version(self) -> str:
        return __version__

    @property
    def state(self) -> HandleState:
        """Lifecycle state of the handle (not the playback state)."""
        return self._lifecycle.state

    def __repr__(self) -> str:
        return f"<PlayerHandle id={self._id!r} unique_id={self._unique_id}>"

    # Lifecycle

    def setup(self, options: Mapping[str, Any] | None = None) -> "PlayerHandle":
        """Replace the controller and configure it with ``options``.

        ``options["events"]`` maps allow-listed operation names to a
        single argument, e.g. ``{"setVolume": 50, "onReady": callback}``.
        ``options["id"]`` is always overwritten with this handle's id.
        """
        self._lifecycle.setup(dict(options or {}))
        return self

    def remove(self) -> "PlayerHandle":
        """Unregister, emit "remove", and destroy the controller."""
        self._lifecycle.remove()
        return self

    # Events

    def on(self, name: str, callback: Callback, context: Any = None) -> "PlayerHandle":
        self._events.on(name, callback, context)
        return self

    def once(self, name: str, callback: Callback, context: Any = None) -> "PlayerHandle":
        self._events.once(name, callback, context)
        return self

    def off(
        self,
        name: str | None = None,
        callback: Callback | None = None,
        context: Any = None,
    ) -> "PlayerHandle":
        self._events.off(name, callback, context)
        return self

    def listeners(self, name: str) -> list[Subscription]:
        return self._events.listeners(name)

    def trigger(self, name: str, payload: Any = None) -> "PlayerHandle":
        """Emit ``name`` with a normalized copy of ``payload``.

        Non-mapping payloads become ``{}``; mappings are shallow-copied.
        ``type`` is always set to the event name. Subscriber faults are
        contained unless the dispatch policy resolves to UNSAFE.
        """
        event = str(name)
        args = dict(payload) if isinstance(payload, Mapping) else {}
        args["type"] = event
        self._events.emit(event, args)
        return self

    def trigger_safe(self, name: str, payload: Any = None) -> "PlayerHandle":
        self._events.trigger_safe(str(name), payload)
        return self

    def dispatch_event(self, *args: Any) -> None:
        self.trigger(*args)

    def remove_event_listener(self, *args: Any) -> None:
        self.off(*args)

    # Forwarding

    def call_internal(self, name: str, *args: Any) -> Any:
        """Call operation ``name`` on the live controller; None if missing."""
        return self._forwarder.call(name, *args)

    def qoe(self) -> dict[str, Any]:
        """Setup time, first frame time, and QoE dumps for player and item."""
        item = self.call_internal("getItemQoe")
        first_frame = None
        item_dump: dict[str, Any] = {}
        if item is not None:
            get_first_frame = getattr(item, "getFirstFrame", None)
            if callable(get_first_frame):
                first_frame = get_first_frame()
            dump = getattr(item, "dump", None)
            if callable(dump):
                item_dump = dump()
        return {
            "setupTime": self._qoe.between("setup", "ready"),
            "firstFrame": first_frame,
            "player": self._qoe.dump(),
            "item": item_dump,
        }

    # Accessors

    def get_audio_tracks(self):
        return self.call_internal("getAudioTracks")

    def get_buffer(self):
        return self.call_internal("get", "buffer")

    def get_captions(self):
        return self.call_internal("get", "captions")

    def get_captions_list(self):
        return self.call_internal("getCaptionsList")

    def get_config(self):
        return self.call_internal("getConfig")

    def get_container(self):
        return self.call_internal("getContainer")

    def get_controls(self):
        return self.call_internal("get", "controls")

    def get_current_audio_track(self):
        return self.call_internal("getCurrentAudioTrack")

    def get_current_captions(self):
        return self.call_internal("getCurrentCaptions")

    def get_current_quality(self):
        return self.call_internal("getCurrentQuality")

    def get_duration(self):
        return self.call_internal("get", "duration")

    def get_fullscreen(self):
        return self.call_internal("get", "fullscreen")

    def get_height(self):
        return self.call_internal("getHeight")

    def get_item(self):
        return self.get_playlist_index()

    def get_item_meta(self) -> dict[str, Any]:
        return self.call_internal("get", "itemMeta") or {}

    def get_meta(self) -> dict[str, Any]:
        return self.get_item_meta()

    def get_mute(self):
        return self.call_internal("getMute")

    def get_playback_rate(self):
        return self.call_internal("get", "playbackRate")

    def get_playlist(self):
        return self.call_internal("get", "playlist")

    def get_playlist_index(self):
        return self.call_internal("get", "item")

    def get_playlist_item(self, index: int | None = None):
        if index is None:
            return self.call_internal("get", "playlistItem")
        playlist = self.get_playlist()
        if playlist:
            try:
                return playlist[index]
            except (IndexError, KeyError, TypeError):
                return None
        return None

    def get_position(self):
        return self.call_internal("get", "position")

    def get_provider(self):
        return self.call_internal("getProvider")

    def get_quality_levels(self):
        return self.call_internal("getQualityLevels")

    def get_safe_region(self):
        return self.call_internal("getSafeRegion")

    def get_state(self):
        return self.call_internal("getState")

    def get_stretching(self):
        return self.call_internal("get", "stretching")

    def get_viewable(self):
        return self.call_internal("get", "viewable")

    def get_visual_quality(self):
        return self.call_internal("getVisualQuality")

    def get_volume(self):
        return self.call_internal("get", "volume")

    def get_width(self):
        return self.call_internal("getWidth")

    # Mutators

    def set_captions(self, captions_styles: Any) -> "PlayerHandle":
        self.call_internal("setCaptions", captions_styles)
        return self

    def set_config(self, options: Any) -> "PlayerHandle":
        self.call_internal("setConfig", options)
        return self

    def set_controls(self, toggle: Any) -> "PlayerHandle":
        self.call_internal("setControls", toggle)
        return self

    # The three set_current_* calls return None, unlike the other mutators.

    def set_current_audio_track(self, index: int) -> None:
        self.call_internal("setCurrentAudioTrack", index)

    def set_current_captions(self, index: int) -> None:
        self.call_internal("setCurrentCaptions", index)

    def set_current_quality(self, index: int) -> None:
        self.call_internal("setCurrentQuality", index)

    def set_fullscreen(self, toggle: Any) -> "PlayerHandle":
        self.call_internal("setFullscreen", toggle)
        return self

    def set_mute(self, toggle: Any) -> "PlayerHandle":
        self.call_internal("setMute", toggle)
        return self

    def set_playback_rate(self, playback_rate: float) -> "PlayerHandle":
        self.call_internal("setPlaybackRate", playback_rate)
        return self

    def set_cues(self, slider_cues: Any) -> "PlayerHandle":
        self.call_internal("setCues", slider_cues)
        return self

    def set_volume(self, level: int) -> "PlayerHandle":
        self.call_internal("setVolume", level)
        return self

    def load(self, to_load: Any, feed_data: Any = None) -> "PlayerHandle":
        self.call_internal("load", to_load, feed_data)
        return self

    def play(self, state: Any = None, meta: Mapping[str, Any] | None = None) -> "PlayerHandle":
        """Play (True), pause (False), or toggle based on the playback state.

        ``state`` may also be a meta mapping carrying a ``reason``.
        """
        if isinstance(state, Mapping) and state.get("reason"):
            meta = state
        if not meta:
            meta = _external_meta()

        if state is True:
            self.call_internal("play", meta)
            return self
        if state is False:
            self.call_internal("pause", meta)
            return self

        current = self.get_state()
        if current in (PlayerState.PLAYING.value, PlayerState.BUFFERING.value):
            self.call_internal("pause", meta)
        else:
            self.call_internal("play", meta)
        return self

    def pause(self, state: Any = None, meta: Mapping[str, Any] | None = None) -> "PlayerHandle":
        if isinstance(state, bool):
            return self.play(not state, meta)
        return self.play(meta)

    def seek(self, position: float, meta: Mapping[str, Any] | None = None) -> "PlayerHandle":
        self.call_internal("seek", position, meta or _external_meta())
        return self

    def playlist_item(self, index: int, meta: Mapping[str, Any] | None = None) -> "PlayerHandle":
        self.call_internal("playlistItem", index, meta or _external_meta())
        return self

    def playlist_next(self, meta: Mapping[str, Any] | None = None) -> "PlayerHandle":
        self.call_internal("playlistNext", meta or _external_meta())
        return self

    def playlist_prev(self, meta: Mapping[str, Any] | None = None) -> "PlayerHandle":
        self.call_internal("playlistPrev", meta or _external_meta())
        return self

    def next(self) -> "PlayerHandle":
        self.call_internal("next")
        return self

    def cast_toggle(self) -> "PlayerHandle":
        self.call_internal("castToggle")
        return self

    def create_instream(self):
        return self.call_internal("createInstream")

    def skip_ad(self) -> "PlayerHandle":
        self.call_internal("skipAd")
        return self

    def stop(self) -> "PlayerHandle":
        self.call_internal("stop")
        return self

    def resize(self, width: Any, height: Any) -> "PlayerHandle":
        self.call_internal("resize", width, height)
        return self

    def add_button(
        self,
        img: str,
        tooltip: str,
        callback: Callback,
        button_id: str,
        btn_class: str | None = None,
    ) -> "PlayerHandle":
        self.call_internal("addButton", img, tooltip, callback, button_id, btn_class)
        return self

    def remove_button(self, button_id: str) -> "PlayerHandle":
        self.call_internal("removeButton", button_id)
        return self

    def attach_media(self) -> "PlayerHandle":
        self.call_internal("attachMedia")
        return self

    def detach_media(self) -> "PlayerHandle":
        self.call_internal("detachMedia")
        return self

    def is_before_complete(self):
        return self.call_internal("isBeforeComplete")

    def is_before_play(self):
        return self.call_internal("isBeforePlay")

    # Fixed answers for the html5 rendering mode

    def get_ad_block(self) -> bool:
        return False

    def play_ad(self, ad_break: Any) -> None:
        pass

    def pause_ad(self, toggle: Any) -> None:
        pass

    def get_rendering_mode(self) -> str:
        return "html5"

    # Plugins

    def get_plugin(self, name: str) -> Any:
        return self._plugins.get(name)

    def add_plugin(self, name: str, instance: Any) -> None:
        """Store ``instance`` and bind its lifecycle hooks.

        ``add_to_player`` runs on every "ready"; ``resize_handler`` runs on
        "resize" when the instance has a truthy ``resize``.
        """
        self._plugins[name] = instance
        add_to_player = getattr(instance, "add_to_player", None)
        if callable(add_to_player):
            self.on(PlayerEvent.READY, add_to_player)
        if getattr(instance, "resize", None):
            resize_handler = getattr(instance, "resize_handler", None)
            if callable(resize_handler):
                self.on(PlayerEvent.RESIZE, resize_handler)

    def register_plugin(
        self,
        name: str,
        minimum_version: str,
        constructor: PluginConstructor,
    ) -> None:
        get_plugin_registry().register_plugin(name, minimum_version, constructor)

    # Per-event subscriptions

    def on_buffer(self, callback: Callback) -> "PlayerHandle":
        return self.on(PlayerEvent.BUFFER, callback)

    def on_pause(self, callback: Callback) -> "PlayerHandle":
        return self.on(PlayerEvent.PAUSE, callback)

    def on_play(self, callback: Callback) -> "PlayerHandle":
        return self.on(PlayerEvent.PLAY, callback)

    def on_idle(self, callback: Callback) -> "PlayerHandle":
        return self.on(PlayerEvent.IDLE, callback)

    def on_buffer_change(self, callback: Callback) -> "PlayerHandle":
        return self.on(PlayerEvent.BUFFER_CHANGE, callback)

    def on_buffer_full(self, callback: Callback) -> "PlayerHandle":
        return self.on(PlayerEvent.BUFFER_FULL, callback)

    def on_error(self, callback: Callback) -> "PlayerHandle":
        return self.on(PlayerEvent.ERROR, callback)

    def on_setup_error(self, callback: Callback) -> "PlayerHandle":
        return self.on(PlayerEvent.SETUP_ERROR, callback)

    def on_fullscreen(self, callback: Callback) -> "PlayerHandle":
        return self.on(PlayerEvent.FULLSCREEN, callback)

    def on_meta(self, callback: Callback) -> "PlayerHandle":
        return self.on(PlayerEvent.META, callback)

    def on_mute(self, callback: Callback) -> "PlayerHandle":
        return self.on(PlayerEvent.MUTE, callback)

    def on_playlist(self, callback: Callback) -> "PlayerHandle":
        return self.on(PlayerEvent.PLAYLIST, callback)

    def on_playlist_item(self, callback: Callback) -> "PlayerHandle":
        return self.on(PlayerEvent.PLAYLIST_ITEM, callback)

    def on_playlist_complete(self, callback: Callback) -> "PlayerHandle":
        return self.on(PlayerEvent.PLAYLIST_COMPLETE, callback)

    def on_ready(self, callback: Callback) -> "PlayerHandle":
        return self.on(PlayerEvent.READY, callback)

    def on_resize(self, callback: Callback) -> "PlayerHandle":
        return self.on(PlayerEvent.RESIZE, callback)

    def on_complete(self, callback: Callback) -> "PlayerHandle":
        return self.on(PlayerEvent.COMPLETE, callback)

    def on_seek(self, callback: Callback) -> "PlayerHandle":
        return self.on(PlayerEvent.SEEK, callback)

    def on_time(self, callback: Callback) -> "PlayerHandle":
        return self.on(PlayerEvent.TIME, callback)

    def on_volume(self, callback: Callback) -> "PlayerHandle":
        return self.on(PlayerEvent.VOLUME, callback)

    def on_before_play(self, callback: Callback) -> "PlayerHandle":
        return self.on(PlayerEvent.BEFORE_PLAY, callback)

    def on_before_complete(self, callback: Callback) -> "PlayerHandle":
        return self.on(PlayerEvent.BEFORE_COMPLETE, callback)

    def on_display_click(self, callback: Callback) -> "PlayerHandle":
        return self.on(PlayerEvent.DISPLAY_CLICK, callback)

    def on_controls(self, callback: Callback) -> "PlayerHandle":
        return self.on(PlayerEvent.CONTROLS, callback)

    def on_quality_levels(self, callback: Callback) -> "PlayerHandle":
        return self.on(PlayerEvent.LEVELS, callback)

    def on_quality_change(self, callback: Callback) -> "PlayerHandle":
        return self.on(PlayerEvent.LEVEL_CHANGED, callback)

    def on_captions_list(self, callback: Callback) -> "PlayerHandle":
        return self.on(PlayerEvent.CAPTIONS_LIST, callback)

    def on_captions_change(self, callback: Callback) -> "PlayerHandle":
        return self.on(PlayerEvent.CAPTIONS_CHANGED, callback)

    def on_ad_error(self, callback: Callback) -> "PlayerHandle":
        return self.on(PlayerEvent.AD_ERROR, callback)

    def on_ad_click(self, callback: Callback) -> "PlayerHandle":
        return self.on(PlayerEvent.AD_CLICK, callback)

    def on_ad_impression(self, callback: Callback) -> "PlayerHandle":
        return self.on(PlayerEvent.AD_IMPRESSION, callback)

    def on_ad_time(self, callback: Callback) -> "PlayerHandle":
        return self.on(PlayerEvent.AD_TIME, callback)

    def on_ad_complete(self, callback: Callback) -> "PlayerHandle":
        return self.on(PlayerEvent.AD_COMPLETE, callback)

    def on_ad_companions(self, callback: Callback) -> "PlayerHandle":
        return self.on(PlayerEvent.AD_COMPANIONS, callback)

    def on_ad_skipped(self, callback: Callback) -> "PlayerHandle":
        return self.on(PlayerEvent.AD_SKIPPED, callback)

    def on_ad_play(self, callback: Callback) -> "PlayerHandle":
        return self.on(PlayerEvent.AD_PLAY, callback)

    def on_ad_pause(self, callback: Callback) -> "PlayerHandle":
        return self.on(PlayerEvent.AD_PAUSE, callback)

    def on_ad_meta(self, callback: Callback) -> "PlayerHandle":
        return self.on(PlayerEvent.AD_META, callback)

    def on_cast(self, callback: Callback) -> "PlayerHandle":
        return self.on(PlayerEvent.CAST_SESSION, callback)

    def on_audio_track_change(self, callback: Callback) -> "PlayerHandle":
        return self.on(PlayerEvent.AUDIO_TRACK_CHANGED, callback)

    def on_audio_tracks(self, callback: Callback) -> "PlayerHandle":
        return self.on(PlayerEvent.AUDIO_TRACKS, callback)
