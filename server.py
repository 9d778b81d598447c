from core.config import get_config
from core.gate import DependencyMissingError
from core.host import HostRuntime
from core.logging_config import get_logger, setup_logging
from mcp.server.fastmcp import FastMCP
from pathlib import Path
from importlib import import_module
import pkgutil
import inspect
import sys
from typing import Any, Dict, List

logger = get_logger("server")

PLUGINS_PACKAGE = "plugins"
TOOLS_PACKAGE = "tools"
BASE_DIR = Path(__file__).resolve().parent

INSTRUCTIONS = (
    "This server controls a game server host running the workshop map plugin. "
    "Loading a map publishes its Workshop file ID into the configured convar, or the "
    "unmapped sentinel when workshop_maps.txt has no entry for it."
)


def _iter_modules(package: str):
    package_path = BASE_DIR / package
    if not package_path.is_dir():
        return
    for finder, name, ispkg in pkgutil.iter_modules([str(package_path)]):
        if name.startswith("_"):
            continue
        module_name = f"{package}.{name}"
        try:
            yield module_name, import_module(module_name)
        except Exception:
            logger.exception(f"Failed to import module {module_name}")


###################################################### Host ######################################################

def build_host(cfg: Dict[str, Any]) -> HostRuntime:
    """Create the host and register the convars it exposes."""
    host = HostRuntime(max_map_name_length=int(cfg["max_map_name_length"]))
    for entry in (cfg.get("host") or {}).get("convars") or []:
        if isinstance(entry, str):
            entry = {"name": entry}
        if not isinstance(entry, dict) or not entry.get("name"):
            logger.warning(f"Ignoring malformed convar entry in config: {entry!r}")
            continue
        host.register_convar(entry["name"], entry.get("default", ""), entry.get("description", ""))
    logger.info(f"Host exposes convars: {host.convar_names()}")
    return host


###################################################### Plugins ######################################################

def load_plugins(host: HostRuntime, cfg: Dict[str, Any]) -> List[str]:
    """Import every plugin module and register its event handlers with the host."""
    loaded: List[str] = []
    for module_name, mod in _iter_modules(PLUGINS_PACKAGE):
        if not hasattr(mod, "get_handlers"):
            continue
        handlers = mod.get_handlers(host, cfg)
        for event, handler in handlers.items():
            host.add_listener(event, handler)
            logger.info(f"Registered {event} handler from {module_name}")
        loaded.append(module_name)
    logger.info(f"Total plugins loaded: {len(loaded)}, plugins: {loaded}")
    return loaded


###################################################### MCP Tools ######################################################

def register_tools(mcp: FastMCP, host: HostRuntime) -> List[str]:
    registered_tool_names: List[str] = []
    for module_name, mod in _iter_modules(TOOLS_PACKAGE):
        if not hasattr(mod, "get_tools"):
            continue
        sig = inspect.signature(mod.get_tools)
        mapping = mod.get_tools(host) if len(sig.parameters) > 0 else mod.get_tools()
        # mapping: tool_name -> { 'func': callable, 'title': str, 'description': str }
        for tool_name, meta in mapping.items():
            if isinstance(meta, dict):
                func = meta.get("func")
                title = meta.get("title")
                description = meta.get("description")
            else:
                func, title, description = meta, None, None

            if not func:
                logger.warning(f"Tool {tool_name} in {module_name} did not provide a callable; skipping")
                continue
            try:
                mcp.add_tool(func, name=tool_name, title=title, description=description)
                logger.info(f"Added tool via add_tool: {tool_name} (title={title}) from {module_name}")
                registered_tool_names.append(tool_name)
            except Exception:
                logger.exception(f"Failed to register tool {tool_name} from {module_name}")
    logger.info(f"Total tools registered: {len(registered_tool_names)} , tool names: {registered_tool_names}")
    return registered_tool_names


###################################################### Startup ######################################################

def start_host(cfg: Dict[str, Any]) -> HostRuntime:
    """Build the host, load plugins and fire plugin_start.

    Exits the process when a plugin's required convar is missing.
    """
    host = build_host(cfg)
    load_plugins(host, cfg)
    try:
        host.start()
    except DependencyMissingError as e:
        logger.critical(f"{e}. Shutting down.")
        sys.exit(1)

    start_map = cfg.get("start_map")
    if start_map:
        host.change_level(str(start_map))
    return host


def main() -> int:
    cfg = get_config()
    log_cfg = cfg.get("logging") or {}
    setup_logging(
        logs_dir=log_cfg.get("logs_dir"),
        log_file_name=log_cfg.get("log_file_name", "server.log"),
        level=log_cfg.get("level", "INFO"),
    )
    logger.info("Workshop map server bootstrap starting.")

    host = start_host(cfg)

    try:
        mcp = FastMCP("workshop-maps", instructions=INSTRUCTIONS)
    except Exception:
        logger.exception("Failed to create FastMCP instance")
        raise
    register_tools(mcp, host)

    logger.info("Starting MCP server...")
    try:
        mcp.run(transport="stdio")
        logger.info("MCP server shut down.")
    except Exception:
        logger.exception("Unhandled exception running MCP server")
        print("Unhandled exception occurred. See logs/ for details.", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
