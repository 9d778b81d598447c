"""Map name -> Workshop file ID resolution.

Every call to `MapResolver.resolve` is a complete resolution cycle: the mapping
file is read fresh, the map is looked up, and the sink receives either the
identifier or the unmapped sentinel. When the file cannot be loaded the sink is
not touched at all.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

from core import keyvalues

DEFAULT_SENTINEL = "-1"

logger = logging.getLogger(__name__)


class ConfigSink(Protocol):
    """Anything that can publish a single string value."""

    def set_value(self, value: str) -> None:
        ...


class MappingLoadError(Exception):
    """The mapping file is missing, unreadable or malformed."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Failed to load {path}: {reason}")
        self.path = path
        self.reason = reason


class Outcome(enum.Enum):
    PUBLISHED = "published"
    UNMAPPED = "unmapped"
    LOAD_FAILED = "load_failed"


@dataclass(frozen=True)
class Resolution:
    map_name: str
    outcome: Outcome
    value: Optional[str] = None


def load_mapping(path: str | Path) -> dict[str, str]:
    """Read and parse the mapping file, raising MappingLoadError on any failure."""
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as fh:
            document = keyvalues.load(fh)
    except FileNotFoundError:
        raise MappingLoadError(path, "file not found") from None
    except (OSError, UnicodeDecodeError) as e:
        raise MappingLoadError(path, str(e)) from e
    except keyvalues.KeyValuesError as e:
        raise MappingLoadError(path, f"malformed KeyValues ({e})") from e
    return keyvalues.entries(document)


class MapResolver:
    def __init__(self, sink: ConfigSink, mapping_path: str | Path, sentinel: str = DEFAULT_SENTINEL):
        self.sink = sink
        self.mapping_path = Path(mapping_path)
        self.sentinel = sentinel

    def resolve(self, map_name: str) -> Resolution:
        try:
            mapping = load_mapping(self.mapping_path)
        except MappingLoadError as e:
            logger.error("%s; leaving published workshop ID unchanged for %s", e, map_name)
            return Resolution(map_name, Outcome.LOAD_FAILED)

        workshop_id = mapping.get(map_name, "")
        if workshop_id:
            self.sink.set_value(workshop_id)
            logger.info("Mapped %s to workshop ID %s", map_name, workshop_id)
            return Resolution(map_name, Outcome.PUBLISHED, workshop_id)

        self.sink.set_value(self.sentinel)
        logger.info("No workshop mapping for %s; published %s", map_name, self.sentinel)
        return Resolution(map_name, Outcome.UNMAPPED, self.sentinel)
