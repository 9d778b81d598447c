# plugins package for host plugins
# Modules in this package should expose a `get_handlers(host, config) -> dict[str, callable]`
# keyed by host event name. The server imports every module here and registers the
# returned callables as host event listeners.
__all__ = []
