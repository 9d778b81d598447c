from typing import Any

from core.host import HostRuntime, HostStateError


def get_tools(host: HostRuntime) -> dict[str, Any]:
    # Closures capture the running host but expose clean signatures

    async def change_level(map_name: str) -> str:
        """Load a map on the host, firing the map_start event."""
        try:
            host.change_level(map_name)
        except (HostStateError, ValueError) as e:
            return f"Unable to change level: {e}"
        return f"Map {host.current_map()} loaded."

    async def get_convar(name: str) -> str:
        convar = host.find_convar(name)
        if convar is None:
            return f"No convar named '{name}'. Known convars: {', '.join(host.convar_names())}"
        return f'{convar.name} = "{convar.value}"'

    async def current_map() -> str:
        return host.current_map() or "No map loaded."

    return {
        "change_level": {
            "func": change_level,
            "title": "Change level",
            "description": "Load the given map on the game server host. The workshop ID convar is republished for the new map.",
        },
        "get_convar": {
            "func": get_convar,
            "title": "Read convar",
            "description": "Return the current value of a host console variable, e.g. the published workshop ID.",
        },
        "current_map": {
            "func": current_map,
            "title": "Current map",
            "description": "Return the name of the map currently loaded on the host.",
        },
    }
