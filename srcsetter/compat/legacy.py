"""Legacy image adapter.

Output shape:
    Multi-viewport calls return exactly the keys `desktop`, `mobile` and
    `tablet`. Each value is either `""` (viewport not configured or image not
    resolvable) or a record `{"url", "webp", "alt"[, "width"][, "height"]}`
    where width/height echo the `w`/`h` parameters when present.

Viewport fallback:
    Mobile and tablet images default to the primary image. `None` marks an
    unset image; the historical `-1` marker is still accepted.

Forwarding:
    Attribute access for the modern operations listed in
    `FORWARDED_OPERATIONS` is forwarded to the wrapped `Images`. Any other
    unknown name raises `UnsupportedOperationError`.
"""

from typing import Any, Mapping

from srcsetter.config.sizes import SingleSize
from srcsetter.errors import UnsupportedOperationError
from srcsetter.images.descriptors import ImageRef
from srcsetter.images.urls import is_media_id
from srcsetter.service import Images, get_images

LEGACY_UNSET = -1
VIEWPORTS = ("desktop", "mobile", "tablet")
DEFAULT_IMAGE_PARAMS = {"w": 500, "h": 500, "fit": "crop"}

FORWARDED_OPERATIONS = frozenset({
    "configure",
    "create_image_tag",
    "create_picture_tag",
    "get_url",
    "get_url_for_size",
    "image",
    "picture",
    "relative_path",
    "resolve_size",
})


def _is_unset(image: Any) -> bool:
    return image is None or (is_media_id(image) and image == LEGACY_UNSET)


class LegacyImages:
    """Adapter exposing the pre-3.0 image API on top of `Images`."""

    def __init__(self, images: Images | None = None):
        self.images = images if images is not None else get_images()

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_") or name == "images":
            raise AttributeError(name)
        if name in FORWARDED_OPERATIONS:
            return getattr(self.images, name)
        raise UnsupportedOperationError(name)

    def call(self, name: str, *args: Any, **kwargs: Any) -> Any:
        """Invoke a legacy or forwarded operation by name."""
        if name.startswith("_") or name == "call":
            raise UnsupportedOperationError(name)
        method = getattr(self, name)
        if not callable(method):
            raise UnsupportedOperationError(name)
        return method(*args, **kwargs)

    def config(self, options: Mapping[str, Any]) -> None:
        self.images.configure(options)

    def get_glide_image_url(self, image: ImageRef | None, params: Mapping[str, Any] | None = None) -> str:
        return self.images.get_url(image, params or {})

    def _record(self, image: ImageRef | None, params: Mapping[str, Any]) -> dict | str:
        if _is_unset(image):
            return ""
        url = self.images.get_url(image, params)
        if not url:
            return ""

        record = {
            "url": url,
            "webp": self.images.get_url(image, {**params, "fm": "webp"}),
            "alt": self.images.media_store.alt_text(image) if is_media_id(image) else "",
        }
        if "w" in params:
            record["width"] = params["w"]
        if "h" in params:
            record["height"] = params["h"]
        return record

    def get(
        self,
        image: ImageRef | None,
        size: str | Mapping[str, Any],
        mobile_image: ImageRef | None = None,
        tablet_image: ImageRef | None = None,
    ) -> dict:
        """Images for every viewport of a named (or explicit) size.

        Args:
            image: Primary (desktop) image.
            size: Size name, dotted `group.viewport` name, or explicit size mapping.
            mobile_image: Mobile override; defaults to `image`.
            tablet_image: Tablet override; defaults to `image`.

        Returns:
            Mapping with exactly the keys `desktop`, `mobile`, `tablet`.
        """
        result = {viewport: "" for viewport in VIEWPORTS}
        config = self.images.resolve_size(size)
        if config.is_empty:
            return result

        if isinstance(config, SingleSize):
            result["desktop"] = self._record(image, config.params)
            return result

        images = {
            "desktop": image,
            "mobile": image if _is_unset(mobile_image) else mobile_image,
            "tablet": image if _is_unset(tablet_image) else tablet_image,
        }
        for viewport in VIEWPORTS:
            params = config.for_viewport(viewport)
            if params:
                result[viewport] = self._record(images[viewport], params)
        return result

    def get_image(self, image: ImageRef | None, params: Mapping[str, Any] | None = None) -> dict | str:
        """Single record with explicit parameters (default 500x500 crop)."""
        if params is None:
            params = DEFAULT_IMAGE_PARAMS
        return self._record(image, dict(params))

    def get_images(
        self,
        desktop: Mapping[str, Any] | ImageRef | None,
        mobile: Mapping[str, Any] | None = None,
        tablet: Mapping[str, Any] | None = None,
    ) -> dict:
        """Records for explicit per-viewport entries.

        Each viewport entry is a mapping with an image under `id` (or `image`) and
        optional `params`. `desktop` may also be a bare image reference.
        """
        result = {viewport: "" for viewport in VIEWPORTS}
        specs = {"desktop": desktop, "mobile": mobile, "tablet": tablet}
        for viewport, spec in specs.items():
            if spec is None or spec == "" or (isinstance(spec, Mapping) and not spec):
                continue
            if isinstance(spec, Mapping):
                image = spec.get("id", spec.get("image"))
                params = dict(spec.get("params") or {})
            else:
                image, params = spec, {}
            result[viewport] = self._record(image, params)
        return result

    def get_image_url_for_size(self, image: ImageRef | Mapping[str, Any] | None, size: str) -> str:
        """Desktop transformation URL for a named size."""
        if isinstance(image, Mapping):
            image = image.get("id")
        config = self.images.resolve_size(size)
        return self.images.get_url(image, config.for_viewport("desktop"))
