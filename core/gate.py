import logging

from core.host import ConVar, HostRuntime

logger = logging.getLogger(__name__)


class DependencyMissingError(RuntimeError):
    """The host does not expose a convar this plugin requires."""

    def __init__(self, name: str):
        super().__init__(f"Unable to find convar '{name}'; this host is not supported")
        self.name = name


def verify_dependency(host: HostRuntime, name: str) -> ConVar:
    """Return the host's handle for convar `name` or raise DependencyMissingError.

    Nothing is written to the convar here.
    """
    convar = host.find_convar(name)
    if convar is None:
        raise DependencyMissingError(name)
    logger.info("Found required convar %s", name)
    return convar
