"""In-process game server host.

Owns the map lifecycle, the named console variables (convars) that plugins
write to, and the event listeners plugins register. Events are delivered
serially: `change_level` returns only after every `map_start` listener ran.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

PLUGIN_START = "plugin_start"
MAP_START = "map_start"
EVENTS = (PLUGIN_START, MAP_START)

logger = logging.getLogger(__name__)


class HostStateError(RuntimeError):
    """Raised when the host is driven out of order."""


@dataclass
class ConVar:
    """A named, string-valued console variable owned by the host."""

    name: str
    value: str = ""
    description: str = ""

    def set_value(self, value: str) -> None:
        logger.debug("convar %s = %r", self.name, value)
        self.value = str(value)


class HostRuntime:
    def __init__(self, max_map_name_length: int = 255):
        self.max_map_name_length = max_map_name_length
        self._convars: Dict[str, ConVar] = {}
        self._listeners: Dict[str, List[Callable]] = {event: [] for event in EVENTS}
        self._current_map: Optional[str] = None
        self.started = False

    # convars

    def register_convar(self, name: str, default: str = "", description: str = "") -> ConVar:
        if name in self._convars:
            return self._convars[name]
        convar = ConVar(name=name, value=str(default), description=description)
        self._convars[name] = convar
        return convar

    def find_convar(self, name: str) -> Optional[ConVar]:
        return self._convars.get(name)

    def convar_names(self) -> List[str]:
        return sorted(self._convars)

    # maps

    def current_map(self) -> Optional[str]:
        """Return the active map name, truncated to the host's path length."""
        if self._current_map is None:
            return None
        return self._current_map[: self.max_map_name_length]

    # events

    def add_listener(self, event: str, handler: Callable) -> None:
        if event not in self._listeners:
            raise ValueError(f"Unknown host event: {event}")
        self._listeners[event].append(handler)

    def emit(self, event: str) -> None:
        """Deliver `event` to its listeners in registration order.

        `plugin_start` failures propagate to the caller. `map_start` failures are
        logged and the remaining listeners still run.
        """
        for handler in list(self._listeners.get(event, [])):
            if event == PLUGIN_START:
                handler()
                continue
            try:
                handler()
            except Exception:
                logger.exception("Listener %r failed during %s", handler, event)

    def start(self) -> None:
        if self.started:
            raise HostStateError("Host already started")
        logger.info("Host starting plugins...")
        self.emit(PLUGIN_START)
        self.started = True

    def change_level(self, map_name: str) -> None:
        if not self.started:
            raise HostStateError("Cannot change level before the host has started")
        map_name = (map_name or "").strip()
        if not map_name:
            raise ValueError("Map name must not be empty")
        self._current_map = map_name
        logger.info("Map %s loaded", self.current_map())
        self.emit(MAP_START)
