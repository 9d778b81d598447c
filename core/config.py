import copy
import os

import yaml
from dotenv import load_dotenv

load_dotenv()  # Loads variables from .env into the environment

CONFIG_ENV_VAR = "WORKSHOP_RESOLVER_CONFIG"

DEFAULTS = {
    "convar_name": "sv_workshop_id",
    "mapping_file": "workshop_maps.txt",
    "unmapped_sentinel": "-1",
    "max_map_name_length": 255,
    "start_map": None,
    "host": {
        "convars": [
            {"name": "sv_workshop_id", "default": "", "description": "Workshop file ID of the current map"},
        ],
    },
    "logging": {
        "logs_dir": None,
        "log_file_name": "server.log",
        "level": "INFO",
    },
}


def _merge(base, override):
    merged = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class ConfigLoader:
    _instance = None
    _config = None

    def __new__(cls):
        """
        Create a singleton instance of ConfigLoader.
        Loads configuration from YAML file on first instantiation.
        """
        if cls._instance is None:
            cls._load_config()
            cls._instance = super(ConfigLoader, cls).__new__(cls)
        return cls._instance

    @classmethod
    def _config_path(cls):
        env_path = os.getenv(CONFIG_ENV_VAR)
        if env_path:
            return os.path.abspath(env_path)
        config_path = os.path.join(os.path.dirname(__file__), "..", "config.yaml")
        return os.path.abspath(config_path)

    @classmethod
    def _load_config(cls):
        """
        Load the YAML file into the class variable _config, layered over DEFAULTS.
        A missing file leaves the defaults in place.
        """
        config_path = cls._config_path()
        loaded = {}
        if os.path.isfile(config_path):
            with open(config_path, "r", encoding="utf-8") as f:
                loaded = yaml.safe_load(f) or {}
        if not isinstance(loaded, dict):
            raise ValueError(f"{config_path} must contain a mapping at the top level")
        cls._config = _merge(DEFAULTS, loaded)

    @classmethod
    def reset(cls):
        """Forget the cached configuration so the next access reloads it."""
        cls._instance = None
        cls._config = None

    def get_config(self):
        """
        Return the loaded configuration dictionary.
        """
        return self._config


def get_config():
    """
    Helper function to get the singleton configuration instance's config dictionary.
    """
    return ConfigLoader().get_config()
