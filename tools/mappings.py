from typing import Any

from core.config import get_config  # type: ignore
from core.host import HostRuntime
from core.resolver import MappingLoadError, load_mapping
from utils import get_path  # type: ignore


async def list_workshop_maps() -> str:
    """List every map -> workshop ID entry in the mapping file.

    The file is read fresh on each call. Entries with an empty ID are shown as unmapped.
    """
    try:
        mapping = load_mapping(get_path("mapping_file"))
    except MappingLoadError as e:
        return str(e)
    if not mapping:
        return "No workshop maps in the mapping file."
    width = max(len(name) for name in mapping)
    lines = [f"{name:<{width}}  {wid or '(unmapped)'}" for name, wid in sorted(mapping.items())]
    return f"Workshop maps ({len(mapping)}):\n" + "\n".join(lines)


async def lookup_workshop_map(map_name: str) -> str:
    """Look up one map in the mapping file without publishing anything."""
    map_name = (map_name or "").strip()
    if not map_name:
        return "Please provide a map name to look up."
    try:
        mapping = load_mapping(get_path("mapping_file"))
    except MappingLoadError as e:
        return str(e)
    workshop_id = mapping.get(map_name)
    if workshop_id:
        return f"{map_name} -> {workshop_id}"
    return f"No workshop mapping for {map_name}."


def get_tools(host: HostRuntime) -> dict[str, Any]:

    async def resolver_info() -> str:
        cfg = get_config() or {}
        path = get_path("mapping_file")
        convar = host.find_convar(cfg["convar_name"])
        try:
            entries = str(len(load_mapping(path)))
        except MappingLoadError as e:
            entries = f"unavailable ({e.reason})"
        rows = [
            ("Convar", cfg["convar_name"]),
            ("Published value", convar.value if convar is not None else "(convar missing)"),
            ("Unmapped sentinel", str(cfg["unmapped_sentinel"])),
            ("Mapping file", str(path)),
            ("Mapping file exists", "yes" if path.is_file() else "no"),
            ("Entries", entries),
            ("Current map", host.current_map() or "(none)"),
        ]
        return "\n".join(f"{label:<20}: {value}" for label, value in rows)

    return {
        "list_workshop_maps": {
            "func": list_workshop_maps,
            "title": "List workshop maps",
            "description": "Return every map name and workshop file ID from workshop_maps.txt.",
        },
        "lookup_workshop_map": {
            "func": lookup_workshop_map,
            "title": "Look up workshop map",
            "description": "Return the workshop file ID mapped to a map name, without publishing it.",
        },
        "resolver_info": {
            "func": resolver_info,
            "title": "Resolver info",
            "description": "Show the convar, sentinel, mapping file location and current published value.",
        },
    }
