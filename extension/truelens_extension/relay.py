# truelens_extension/relay.py
"""
Background-worker message relay.

The host browser has no docked side panel, so the UI lives in a popup
window glued to the right edge of the current window. The relay tracks
that single window, caches the latest article snapshot in local storage
and answers every message it receives.
"""
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Protocol

logger = logging.getLogger(__name__)

UI_PATH = "index.html"
CONFIG_PATH = "firebase-config.json"

PANEL_WIDTH = 420
PANEL_HEIGHT = 800
FALLBACK_WINDOW_WIDTH = 1200

LATEST_ARTICLE_KEY = "latestArticle"
CONFIG_KEY = "firebaseConfig"
CONFIG_UPDATED_MESSAGE = {"type": "FIREBASE_CONFIG_UPDATED"}

SNAPSHOT_ACTIONS = ("articleDetected", "articleNotFound")


@dataclass(frozen=True)
class Result:
    """Outcome of a best-effort operation. Callers log `error` and move on."""
    value: Any = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Any = None) -> "Result":
        return cls(value=value)

    @classmethod
    def failure(cls, error: BaseException) -> "Result":
        return cls(error=error)


def attempt(fn: Callable[..., Any], *args, **kwargs) -> Result:
    try:
        return Result.success(fn(*args, **kwargs))
    except Exception as e:
        return Result.failure(e)


@dataclass
class WindowInfo:
    id: Optional[int] = None
    left: Optional[int] = None
    top: Optional[int] = None
    width: Optional[int] = None
    height: Optional[int] = None


class BrowserHost(Protocol):
    """The slice of the extension runtime the relay talks to."""

    def get_current_window(self) -> WindowInfo: ...

    def focus_window(self, window_id: int) -> None: ...

    def create_window(self, url: str, type: str, focused: bool,
                      width: int, height: int, left: int, top: int) -> WindowInfo: ...

    def create_tab(self, url: str) -> None: ...

    def get_url(self, path: str) -> str: ...

    def send_message(self, message: Dict[str, Any]) -> None: ...


class PanelWindowState:
    """Id of the one panel window this process has opened, if any."""

    def __init__(self):
        self._window_id: Optional[int] = None

    def get(self) -> Optional[int]:
        return self._window_id

    def set(self, window_id: Optional[int]):
        self._window_id = window_id

    def clear(self):
        self._window_id = None


class LocalStorage:
    """Key/value store, written through to a JSON file when a path is given."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else None
        self._data: Dict[str, Any] = {}
        if self.path and self.path.exists():
            with open(self.path, "r", encoding="utf-8") as f:
                self._data = json.load(f)

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any):
        self._data[key] = value
        if self.path:
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(self._data, f, indent=2)


def load_bundled_config(path: Path) -> Optional[Dict[str, Any]]:
    """Read the configuration shipped with the extension, None when it is missing."""
    path = Path(path)
    if not path.is_file():
        return None
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def panel_geometry(current: WindowInfo) -> Dict[str, int]:
    width = PANEL_WIDTH
    current_width = current.width if current.width is not None else FALLBACK_WINDOW_WIDTH
    return {
        "width": width,
        "height": current.height if current.height is not None else PANEL_HEIGHT,
        "left": (current.left or 0) + max(current_width - width, 0),
        "top": current.top or 0,
    }


class MessageRelay:
    def __init__(self, host: BrowserHost, storage: LocalStorage,
                 panel: Optional[PanelWindowState] = None,
                 clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc)):
        self.host = host
        self.storage = storage
        self.panel = panel or PanelWindowState()
        self.clock = clock

    def _create_panel_window(self) -> Optional[int]:
        geometry = panel_geometry(self.host.get_current_window())
        created = self.host.create_window(
            url=self.host.get_url(UI_PATH), type="popup", focused=True, **geometry
        )
        return created.id if created else None

    def open_or_focus_panel(self) -> Result:
        """Focus the tracked panel window, or open a new one. Never raises."""
        window_id = self.panel.get()
        if window_id is not None:
            focused = attempt(self.host.focus_window, window_id)
            if focused.ok:
                return Result.success(window_id)
            logger.info(f"Panel window {window_id} is gone, opening a new one")
            self.panel.clear()

        created = attempt(self._create_panel_window)
        if created.ok:
            self.panel.set(created.value)
            return created

        logger.warning(f"Failed to open right-side panel window: {created.error}")
        fallback = attempt(lambda: self.host.create_tab(self.host.get_url(UI_PATH)))
        if not fallback.ok:
            logger.warning(f"Failed to open panel tab: {fallback.error}")
        return fallback

    def _store_snapshot(self, message: Dict[str, Any]):
        snapshot = dict(message)
        snapshot.setdefault("detectedAt", self.clock().isoformat())
        stored = attempt(self.storage.set, LATEST_ARTICLE_KEY, snapshot)
        if not stored.ok:
            logger.warning(f"Failed to cache article snapshot: {stored.error}")

    def handle_message(self, message: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Dispatch on `action`. Every message gets a response."""
        message = message or {}
        action = message.get("action")

        if action in SNAPSHOT_ACTIONS:
            self._store_snapshot(message)
            return {"success": True}
        if action == "openSidePanel":
            self.open_or_focus_panel()
            return {"success": True}
        # Placeholders kept for older UI builds
        if action == "getArticleText":
            return {"received": True}
        if action == "analyzeArticle":
            return {"status": "processing"}

        logger.debug(f"Ignoring message with action {action!r}")
        return {"success": False, "ignored": True}

    def start(self, config_path: Path = Path(CONFIG_PATH)) -> Result:
        """One-time startup work of the background worker."""
        return self.seed_config(lambda: load_bundled_config(config_path))

    def seed_config(self, loader: Callable[[], Optional[Dict[str, Any]]]) -> Result:
        """Cache the bundled configuration once, then announce it to whoever listens."""
        existing = self.storage.get(CONFIG_KEY)
        if existing is not None:
            return Result.success(existing)

        loaded = attempt(loader)
        if not loaded.ok:
            logger.warning(f"Failed to seed firebase config: {loaded.error}")
            return loaded
        if loaded.value is None:
            return loaded

        stored = attempt(self.storage.set, CONFIG_KEY, loaded.value)
        if not stored.ok:
            logger.warning(f"Failed to seed firebase config: {stored.error}")
            return stored

        # Nobody may be listening yet
        notified = attempt(self.host.send_message, CONFIG_UPDATED_MESSAGE)
        if not notified.ok:
            logger.debug(f"Config update notification not delivered: {notified.error}")
        return Result.success(loaded.value)
