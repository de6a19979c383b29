"""Media store interface and adapters.

Role in pipeline:
    `images.urls.UrlBuilder` calls `resolve_url`; `images.srcset.SrcsetBuilder`
    additionally calls `metadata` and `alt_text`.

Adapters:
    - `StaticMediaStore`: in-memory records, optionally loaded from a JSON
      manifest (`{"42": {"url": ..., "width": ..., "height": ..., "alt": ...}}`).
    - `RestMediaStore`: WordPress-style REST media endpoint
      (`<api>/<id>` returning `source_url`, `media_details`, `alt_text`).

Error handling strategy:
    Missing ids resolve to `None` (URL/metadata) or `""` (alt text). REST
    transport and status failures are logged and treated as missing so that
    markup generation degrades instead of failing the page.
"""

import json
import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Mapping, Protocol

import requests


logger = logging.getLogger(__name__)


class MediaStore(Protocol):
    """Lookup interface for media ids."""

    def resolve_url(self, image_id: int) -> str | None:
        ...

    def metadata(self, image_id: int) -> dict | None:
        """Return `{"width": int, "height": int}` (either may be missing) or `None`."""
        ...

    def alt_text(self, image_id: int) -> str:
        ...


@dataclass(frozen=True)
class MediaItem:
    """One media record."""

    url: str
    width: int | None = None
    height: int | None = None
    alt: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MediaItem":
        return cls(
            url=str(data.get("url") or ""),
            width=data.get("width"),
            height=data.get("height"),
            alt=str(data.get("alt") or ""),
        )

    def dimensions(self) -> dict | None:
        dims = {}
        if self.width is not None:
            dims["width"] = int(self.width)
        if self.height is not None:
            dims["height"] = int(self.height)
        return dims or None


class StaticMediaStore:
    """Media store backed by an in-memory id -> `MediaItem` mapping."""

    def __init__(self, items: Mapping[int, MediaItem | Mapping[str, Any]] | None = None):
        self._items: dict[int, MediaItem] = {}
        for image_id, item in (items or {}).items():
            if not isinstance(item, MediaItem):
                item = MediaItem.from_dict(item)
            self._items[int(image_id)] = item

    @classmethod
    def from_json(cls, path: str) -> "StaticMediaStore":
        """Load a manifest file keyed by image id."""
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return cls({int(key): value for key, value in data.items()})

    def resolve_url(self, image_id: int) -> str | None:
        item = self._items.get(image_id)
        return item.url if item and item.url else None

    def metadata(self, image_id: int) -> dict | None:
        item = self._items.get(image_id)
        return item.dimensions() if item else None

    def alt_text(self, image_id: int) -> str:
        item = self._items.get(image_id)
        return item.alt if item else ""


class RestMediaStore:
    """Media store reading a REST media endpoint with `requests`.

    Successful records are kept for `ttl_seconds` in a cache bounded to
    `max_entries`; failed lookups are never cached, so the next call retries.
    """

    def __init__(
        self,
        api_url: str,
        timeout: float = 10.0,
        session: requests.Session | None = None,
        ttl_seconds: float = 60.0,
        max_entries: int = 256,
    ):
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.session = session
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._records: OrderedDict[int, tuple[float, dict]] = OrderedDict()
        self._lock = threading.Lock()

    def _cached(self, image_id: int) -> dict | None:
        with self._lock:
            entry = self._records.get(image_id)
            if entry is None:
                return None
            expires, record = entry
            if expires <= time.monotonic():
                del self._records[image_id]
                return None
            return record

    def _remember(self, image_id: int, record: dict) -> None:
        if self.ttl_seconds <= 0 or self.max_entries <= 0:
            return
        with self._lock:
            self._records[image_id] = (time.monotonic() + self.ttl_seconds, record)
            self._records.move_to_end(image_id)
            while len(self._records) > self.max_entries:
                self._records.popitem(last=False)

    def _fetch(self, image_id: int) -> dict | None:
        record = self._cached(image_id)
        if record is not None:
            return record

        url = f"{self.api_url}/{image_id}"
        getter = self.session.get if self.session is not None else requests.get
        try:
            response = getter(url, timeout=self.timeout)
            if response.status_code != 200:
                logger.warning("Media lookup for id=%s returned status %s", image_id, response.status_code)
                return None
            record = response.json()
        except (requests.exceptions.RequestException, ValueError):
            logger.exception("Media lookup failed for id=%s", image_id)
            return None

        if not isinstance(record, Mapping):
            logger.warning("Media lookup for id=%s returned a non-object payload", image_id)
            return None

        record = dict(record)
        self._remember(image_id, record)
        return record

    def resolve_url(self, image_id: int) -> str | None:
        record = self._fetch(image_id)
        if not record:
            return None
        return record.get("source_url") or None

    def metadata(self, image_id: int) -> dict | None:
        record = self._fetch(image_id)
        if not record:
            return None
        details = record.get("media_details") or {}
        dims = {key: details[key] for key in ("width", "height") if details.get(key) is not None}
        return dims or None

    def alt_text(self, image_id: int) -> str:
        record = self._fetch(image_id)
        if not record:
            return ""
        return record.get("alt_text") or ""
