"""Environment-driven settings for URL building and request dispatch.

Architectural role:
    Centralizes the public base URL, source root, transform prefix and engine
    connection values consumed by `images.urls`, `api.dispatcher` and
    `api.http_api`.

Determinism:
    Values are resolved from the process environment (plus an optional `.env`
    file) when `ImagesSettings.from_env()` is called. A settings object is
    immutable; reconfiguration produces a new snapshot via `merged()`.

Relevant environment variables:
    - `IMAGES_BASE_PATH`
    - `IMAGES_PUBLIC_BASE`
    - `IMAGES_SOURCE_ROOT`
    - `IMAGES_CACHE_DIR`
    - `IMAGES_ENGINE_URL`
    - `IMAGES_ENGINE_TIMEOUT_SECONDS`
    - `IMAGES_SIZES_FILE`
    - `IMAGES_MEDIA_API_URL`
    - `IMAGES_MEDIA_MANIFEST`
"""

import os
from dataclasses import dataclass, replace
from typing import Any, Mapping

from dotenv import load_dotenv

load_dotenv()

DEFAULT_BASE_PATH = "img"
DEFAULT_PUBLIC_BASE = "http://localhost:8000"
DEFAULT_CACHE_DIR = "cache"

# Legacy option names accepted by `merged()`.
_OPTION_ALIASES = {
    "source": "source_root",
    "cache": "cache_dir",
    "base": "public_base",
}


@dataclass(frozen=True)
class ImagesSettings:
    """Immutable settings snapshot.

    Attributes:
        base_path: Transform prefix used in generated URLs and matched by the dispatcher.
        public_base: Public site URL that generated transformation URLs start with.
        source_root: URL prefix of source assets; stripped to form relative paths.
        cache_dir: Derivative cache directory handed to the engine.
        engine_url: Base URL of the remote transformation engine (empty = none).
        engine_timeout_seconds: Engine request timeout.
        sizes_file: JSON configuration store path (empty = built-in sizes only).
        media_api_url: REST media endpoint for numeric image ids.
        media_manifest: JSON manifest path for the static media store.
    """

    base_path: str = DEFAULT_BASE_PATH
    public_base: str = DEFAULT_PUBLIC_BASE
    source_root: str = DEFAULT_PUBLIC_BASE + "/uploads"
    cache_dir: str = DEFAULT_CACHE_DIR
    engine_url: str = ""
    engine_timeout_seconds: float = 30.0
    sizes_file: str = ""
    media_api_url: str = ""
    media_manifest: str = ""

    @classmethod
    def from_env(cls) -> "ImagesSettings":
        """Build settings from environment variables with module defaults."""
        public_base = os.getenv("IMAGES_PUBLIC_BASE", DEFAULT_PUBLIC_BASE).strip().rstrip("/")
        return cls(
            base_path=os.getenv("IMAGES_BASE_PATH", DEFAULT_BASE_PATH).strip().strip("/"),
            public_base=public_base,
            source_root=os.getenv("IMAGES_SOURCE_ROOT", public_base + "/uploads").strip().rstrip("/"),
            cache_dir=os.getenv("IMAGES_CACHE_DIR", DEFAULT_CACHE_DIR).strip(),
            engine_url=os.getenv("IMAGES_ENGINE_URL", "").strip().rstrip("/"),
            engine_timeout_seconds=float(os.getenv("IMAGES_ENGINE_TIMEOUT_SECONDS", "30")),
            sizes_file=os.getenv("IMAGES_SIZES_FILE", "").strip(),
            media_api_url=os.getenv("IMAGES_MEDIA_API_URL", "").strip().rstrip("/"),
            media_manifest=os.getenv("IMAGES_MEDIA_MANIFEST", "").strip(),
        )

    def merged(self, options: Mapping[str, Any]) -> "ImagesSettings":
        """Return a new snapshot with recognized `options` applied.

        Args:
            options: Mapping of setting names (or legacy aliases `source`,
                `cache`, `base`) to values. Unknown keys are ignored so a
                combined options mapping (for example one that also carries
                `image-sizes`) can be passed as-is.

        Returns:
            New `ImagesSettings`; `self` is left untouched.
        """
        changes = {}
        for key, value in options.items():
            name = _OPTION_ALIASES.get(key, key)
            if name in self.__dataclass_fields__:
                changes[name] = value
        if not changes:
            return self
        return replace(self, **changes)
