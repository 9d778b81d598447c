from pathlib import Path
import sys

from core.config import get_config  # type: ignore


def get_path(key, config=None):
    """Return the configured file path for `key`, relative to the working directory."""
    _cfg = config if config is not None else (get_config() or {})
    value = _cfg.get(key)
    if not value:
        sys.exit(f"Error: '{key}' must be set in config.yaml")

    path = Path(value)
    if not path.is_absolute():
        path = Path.cwd() / path
    return path
