"""Publishes the current map's Workshop file ID into a host convar."""
from typing import Any, Optional

from core.gate import verify_dependency
from core.host import MAP_START, PLUGIN_START, ConVar, HostRuntime
from core.logging_config import get_logger
from core.resolver import MapResolver, Resolution
from utils import get_path  # type: ignore

logger = get_logger(__name__)


class WorkshopMapPlugin:
    def __init__(self, host: HostRuntime, convar_name: str, mapping_path, sentinel: str):
        self.host = host
        self.convar_name = convar_name
        self.mapping_path = mapping_path
        self.sentinel = sentinel
        self.convar: Optional[ConVar] = None
        self.last_resolution: Optional[Resolution] = None

    def on_plugin_start(self) -> None:
        # DependencyMissingError is left to the host: startup must not continue without it
        self.convar = verify_dependency(self.host, self.convar_name)

    def on_map_start(self) -> Optional[Resolution]:
        if self.convar is None:
            logger.error("Map started before %s was verified; skipping", self.convar_name)
            return None
        map_name = self.host.current_map()
        if not map_name:
            logger.error("Host reported no current map; skipping")
            return None
        resolver = MapResolver(self.convar, self.mapping_path, sentinel=self.sentinel)
        self.last_resolution = resolver.resolve(map_name)
        return self.last_resolution


def get_handlers(host: HostRuntime, config: dict) -> dict[str, Any]:
    plugin = WorkshopMapPlugin(
        host,
        convar_name=config["convar_name"],
        mapping_path=get_path("mapping_file", config),
        sentinel=str(config["unmapped_sentinel"]),
    )
    return {
        PLUGIN_START: plugin.on_plugin_start,
        MAP_START: plugin.on_map_start,
    }
