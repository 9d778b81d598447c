# tools package for MCP operator tools
# Modules in this package should expose a `get_tools(host) -> dict[str, dict]` mapping
# tool name -> {'func': callable, 'title': str, 'description': str}.
# Server will dynamically import modules from this directory and register returned callables as MCP tools.
__all__ = []
