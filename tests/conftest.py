"""
Shared pytest fixtures for the workshop map resolver test suite.

Provides a recording sink, a mapping-file writer and an isolated configuration
so tests never touch the repository's config.yaml or working directory.
"""

import pytest
import yaml

from core.config import CONFIG_ENV_VAR, ConfigLoader
from core.host import HostRuntime


class RecordingSink:
    """Configuration sink that remembers every published value."""

    def __init__(self, value="untouched"):
        self.value = value
        self.writes = []

    def set_value(self, value):
        self.writes.append(value)
        self.value = value


def render_mapping(entries, root="WorkshopMaps"):
    lines = [f'"{root}"', "{"]
    for name, workshop_id in entries.items():
        lines.append(f'\t"{name}"\t\t"{workshop_id}"')
    lines.append("}")
    return "\n".join(lines) + "\n"


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def mapping_file(tmp_path):
    """Return a writer: mapping_file({"map": "id"}) writes workshop_maps.txt and returns its path."""
    path = tmp_path / "workshop_maps.txt"

    def write(entries=None, text=None):
        path.write_text(text if text is not None else render_mapping(entries or {}), encoding="utf-8")
        return path

    write.path = path
    return write


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    """Point the configuration loader at a temporary YAML file and run from tmp_path."""
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "config.yaml"

    def write(data):
        path.write_text(yaml.safe_dump(data), encoding="utf-8")
        ConfigLoader.reset()
        return path

    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
    write({})
    yield write
    ConfigLoader.reset()


@pytest.fixture
def host():
    runtime = HostRuntime()
    runtime.register_convar("sv_workshop_id")
    return runtime
