"""Configuration store adapters.

Role in pipeline:
    Supplies the size table (key `image-sizes`) to `config.sizes.SizeResolver`.
    When no store is configured, or the store has no table, the resolver falls
    back to its built-in presets.

Failure handling:
    An unreadable JSON file is logged and treated as an empty store.
"""

import json
import logging
import os
from typing import Any, Mapping, Protocol


logger = logging.getLogger(__name__)

SIZES_KEY = "image-sizes"


class ConfigStore(Protocol):
    """Minimal read interface for external configuration."""

    def get(self, key: str) -> Any:
        """Return the value stored under `key`, or `None` when absent."""
        ...


class DictConfigStore:
    """In-memory configuration store."""

    def __init__(self, values: Mapping[str, Any] | None = None):
        self._values = dict(values or {})

    def get(self, key: str) -> Any:
        return self._values.get(key)


class JsonConfigStore:
    """Configuration store backed by a JSON file.

    The file is read once, on first access. The top-level JSON value must be an
    object; a file that is itself a size table can be wrapped by passing
    `key=SIZES_KEY`.
    """

    def __init__(self, path: str, key: str | None = None):
        self.path = path
        self.key = key
        self._values: dict | None = None

    def _load(self) -> dict:
        if self._values is not None:
            return self._values

        values: dict = {}
        if not os.path.exists(self.path):
            logger.warning("Configuration file %s not found", self.path)
        else:
            try:
                with open(self.path, "r", encoding="utf-8") as f:
                    data = json.load(f)
            except (OSError, ValueError):
                logger.exception("Failed to load configuration from %s", self.path)
                data = {}

            if not isinstance(data, dict):
                logger.warning("Configuration file %s does not contain an object", self.path)
                data = {}
            values = {self.key: data} if self.key else data

        self._values = values
        return values

    def get(self, key: str) -> Any:
        return self._load().get(key)
