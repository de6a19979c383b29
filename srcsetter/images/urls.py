"""Transformation URL builder.

Processing flow:
    1. Resolve the image reference (`int` id via the media store, `str` verbatim).
    2. Return `""` when nothing resolves.
    3. Return vector (`.svg`) sources unchanged.
    4. Strip the configured source root to get the relative asset path.
    5. Emit `<public base>/<base path><relative path>?<query>`.

Determinism:
    The query string preserves parameter insertion order, so identical inputs
    always produce byte-identical URLs (downstream caches key on the URL).
"""

import posixpath
from typing import Any, Mapping
from urllib.parse import urlencode, urlsplit

from srcsetter.config.settings import ImagesSettings
from srcsetter.images.descriptors import ImageRef
from srcsetter.media.store import MediaStore

VECTOR_EXTENSIONS = {".svg"}


def is_media_id(ref: Any) -> bool:
    return isinstance(ref, int) and not isinstance(ref, bool)


def is_vector_url(url: str) -> bool:
    """True when the URL path ends in a vector extension (case-insensitive)."""
    path = urlsplit(url).path
    return posixpath.splitext(path)[1].lower() in VECTOR_EXTENSIONS


def build_query(params: Mapping[str, Any]) -> str:
    """Serialize parameters in insertion order; booleans become `1`/`0`."""
    pairs = []
    for key, value in params.items():
        if isinstance(value, bool):
            value = int(value)
        pairs.append((key, value))
    return urlencode(pairs)


class UrlBuilder:
    """Build transformation URLs against a settings snapshot."""

    def __init__(self, settings: ImagesSettings, media_store: MediaStore):
        self.settings = settings
        self.media_store = media_store

    def resolve(self, ref: ImageRef | None) -> str:
        """Resolve a reference to its source URL, `""` when it does not resolve."""
        if ref is None:
            return ""
        if is_media_id(ref):
            return self.media_store.resolve_url(ref) or ""
        if isinstance(ref, str):
            return ref
        return ""

    def relative_path(self, url: str) -> str:
        """Path of `url` relative to the source root, with a leading slash.

        URLs outside the source root fall back to their own path component.
        """
        root = self.settings.source_root.rstrip("/")
        if root and url.startswith(root + "/"):
            path = url[len(root):]
        else:
            path = urlsplit(url).path
        if not path.startswith("/"):
            path = "/" + path
        return path

    def build_url(self, ref: ImageRef | None, params: Mapping[str, Any] | None = None) -> str:
        """Return the transformation URL for `ref` with `params`.

        Args:
            ref: Media id or literal URL.
            params: Transformation parameters, forwarded verbatim as query keys.

        Returns:
            Transformation URL; the source URL itself for vectors; `""` when the
            reference does not resolve.
        """
        url = self.resolve(ref)
        if not url:
            return ""

        if is_vector_url(url):
            return url

        base = self.settings.public_base.rstrip("/")
        prefix = self.settings.base_path.strip("/")
        result = f"{base}/{prefix}{self.relative_path(url)}"

        query = build_query(params or {})
        if query:
            result = f"{result}?{query}"
        return result
