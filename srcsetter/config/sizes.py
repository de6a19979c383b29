"""Size table parsing and symbolic size resolution.

Architectural role:
    Maps size names used by templates (`"thumbnail"`, `"hero.mobile"`) to the
    transformation parameters handed to `images.urls.UrlBuilder`.

Size config shapes:
    - `SingleSize`: one parameter set applied to every viewport.
    - `ViewportSizes`: per-viewport parameter sets (`desktop`, optional
      `mobile`/`tablet`).
    A raw table entry is classified once, when the table is loaded or merged:
    a mapping with a `desktop` key is per-viewport, anything else is single.

Lookup rules:
    1. `group.viewport` indexes `viewport` inside `group` directly and returns
       it as a `SingleSize` without classifying it.
    2. Any other key is looked up directly.
    3. Unknown keys log a warning and resolve to an empty `SingleSize`.

Concurrency:
    Reads never lock. `merge()` builds a complete new table and publishes it
    with a single attribute assignment under a writer lock, so concurrent
    readers always see either the old or the new table.
"""

import logging
import threading
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Union

from srcsetter.config.store import SIZES_KEY, ConfigStore


logger = logging.getLogger(__name__)

VIEWPORTS = ("desktop", "mobile", "tablet")
NESTED_SEPARATOR = "."

DEFAULT_SIZES = {
    "thumbnail": {
        "desktop": {"w": 300, "h": 300, "fit": "crop"},
        "mobile": {"w": 150, "h": 150, "fit": "crop"},
        "tablet": {"w": 225, "h": 225, "fit": "crop"},
    },
    "medium": {
        "desktop": {"w": 600, "h": 400, "fit": "crop"},
        "mobile": {"w": 300, "h": 200, "fit": "crop"},
        "tablet": {"w": 450, "h": 300, "fit": "crop"},
    },
    "large": {
        "desktop": {"w": 1200, "h": 800, "fit": "crop"},
        "mobile": {"w": 600, "h": 400, "fit": "crop"},
        "tablet": {"w": 900, "h": 600, "fit": "crop"},
    },
    "hero": {
        "desktop": {"w": 1920, "h": 1080, "fit": "crop"},
        "mobile": {"w": 768, "h": 432, "fit": "crop"},
        "tablet": {"w": 1024, "h": 576, "fit": "crop"},
    },
}


@dataclass(frozen=True)
class SingleSize:
    """One parameter set applied uniformly."""

    params: dict = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.params

    def for_viewport(self, viewport: str) -> dict:
        """Single sizes apply to the desktop slot only."""
        return dict(self.params) if viewport == "desktop" else {}


@dataclass(frozen=True)
class ViewportSizes:
    """Per-viewport parameter sets."""

    desktop: dict
    mobile: dict | None = None
    tablet: dict | None = None

    @property
    def is_empty(self) -> bool:
        return not (self.desktop or self.mobile or self.tablet)

    def for_viewport(self, viewport: str) -> dict:
        return dict(getattr(self, viewport, None) or {})


SizeConfig = Union[SingleSize, ViewportSizes]


def _as_params(value: Any) -> dict:
    if isinstance(value, Mapping):
        return dict(value)
    return {}


def parse_size_config(value: Any) -> SizeConfig:
    """Classify a raw table entry into a `SizeConfig` variant.

    Args:
        value: Raw entry, normally a mapping loaded from configuration.

    Returns:
        `ViewportSizes` when `value` has a `desktop` key, `SingleSize` otherwise.
        Non-mapping values yield an empty `SingleSize`.
    """
    if isinstance(value, (SingleSize, ViewportSizes)):
        return value
    if isinstance(value, Mapping) and "desktop" in value:
        return ViewportSizes(
            desktop=_as_params(value["desktop"]),
            mobile=_as_params(value["mobile"]) if value.get("mobile") is not None else None,
            tablet=_as_params(value["tablet"]) if value.get("tablet") is not None else None,
        )
    return SingleSize(_as_params(value))


class SizeResolver:
    """Resolve size names against a merged size table.

    The table starts from `DEFAULT_SIZES`; a `ConfigStore` table (key
    `image-sizes`) and later `merge()` calls are layered on top, last writer
    wins per key.
    """

    def __init__(self, config_store: ConfigStore | None = None, sizes: Mapping[str, Any] | None = None):
        self._lock = threading.Lock()
        self._raw: Mapping[str, Any] = MappingProxyType({})
        self._table: Mapping[str, SizeConfig] = MappingProxyType({})
        self.merge(DEFAULT_SIZES)

        if config_store is not None:
            stored = config_store.get(SIZES_KEY)
            if isinstance(stored, Mapping):
                self.merge(stored)
            elif stored is not None:
                logger.warning("Ignoring %s configuration of type %s", SIZES_KEY, type(stored).__name__)

        if sizes:
            self.merge(sizes)

    @property
    def table(self) -> Mapping[str, SizeConfig]:
        """Read-only snapshot of the parsed table."""
        return self._table

    def names(self) -> list[str]:
        return sorted(self._table)

    def merge(self, sizes: Mapping[str, Any]) -> None:
        """Merge `sizes` into the table and publish a new snapshot.

        Args:
            sizes: Mapping of size name to raw entry.
        """
        with self._lock:
            raw = dict(self._raw)
            raw.update(sizes)
            table = dict(self._table)
            for name, value in sizes.items():
                table[name] = parse_size_config(value)
            self._raw = MappingProxyType(raw)
            self._table = MappingProxyType(table)

    def resolve(self, size: str | Mapping[str, Any]) -> SizeConfig:
        """Resolve a size name (or explicit size mapping) to a `SizeConfig`.

        Args:
            size: Size name, dotted `group.viewport` path, or an explicit raw
                size mapping (legacy callers pass arrays directly).

        Returns:
            The resolved variant. Unknown names resolve to an empty
            `SingleSize` after logging a warning.
        """
        if isinstance(size, Mapping):
            return parse_size_config(size)

        if NESTED_SEPARATOR in size:
            return self._resolve_nested(size)

        config = self._table.get(size)
        if config is None:
            logger.warning("Image size %s not found. Have you added it to the config?", size)
            return SingleSize()
        return config

    def _resolve_nested(self, size: str) -> SizeConfig:
        group_name, viewport = size.split(NESTED_SEPARATOR, 1)
        group = self._raw.get(group_name)
        value = group.get(viewport) if isinstance(group, Mapping) else None
        if not isinstance(value, Mapping):
            logger.warning("Image size %s not found. Have you added it to the config?", size)
            return SingleSize()
        return SingleSize(dict(value))
