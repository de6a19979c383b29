"""`Images` facade wiring settings, media store and builders.

Role in pipeline:
    Templates and adapters call this facade; it owns one `SizeResolver` and
    rebuilds its URL/srcset/picture builders whenever settings change.

Reconfiguration:
    `configure()` swaps in a new settings snapshot and merges any
    `image-sizes` entries into the resolver. Settings and builders form one
    immutable snapshot replaced in a single assignment, so in-flight calls
    keep the snapshot they started with.

Default instance:
    `get_images()` lazily creates a process-wide instance from environment
    settings; `set_images()` overrides or clears it.
"""

import html
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from srcsetter.config.settings import ImagesSettings
from srcsetter.config.sizes import SizeConfig, SizeResolver
from srcsetter.config.store import SIZES_KEY, ConfigStore, JsonConfigStore
from srcsetter.images.descriptors import ImageRef, PictureDescriptor, ResponsiveImage
from srcsetter.images.markup import Escaper, render_img, render_picture
from srcsetter.images.picture import (
    DEFAULT_BREAKPOINT,
    DEFAULT_DESKTOP_WIDTHS,
    DEFAULT_MOBILE_WIDTHS,
    PictureAssembler,
)
from srcsetter.images.srcset import DEFAULT_WIDTHS, SrcsetBuilder
from srcsetter.images.urls import UrlBuilder
from srcsetter.media.store import MediaStore, RestMediaStore, StaticMediaStore


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Snapshot:
    settings: ImagesSettings
    urls: UrlBuilder
    srcset: SrcsetBuilder
    picture: PictureAssembler


def _make_snapshot(settings: ImagesSettings, media_store: MediaStore) -> _Snapshot:
    urls = UrlBuilder(settings, media_store)
    srcset = SrcsetBuilder(urls, media_store)
    return _Snapshot(settings=settings, urls=urls, srcset=srcset, picture=PictureAssembler(srcset))


class Images:
    """Modern image API.

    Args:
        settings: Settings snapshot (defaults to `ImagesSettings()`).
        media_store: Id lookup adapter (defaults to an empty static store).
        config_store: Optional configuration store supplying `image-sizes`.
        escape: Attribute escaper used when rendering tags.
    """

    def __init__(
        self,
        settings: ImagesSettings | None = None,
        media_store: MediaStore | None = None,
        config_store: ConfigStore | None = None,
        escape: Escaper = html.escape,
    ):
        self.media_store = media_store if media_store is not None else StaticMediaStore()
        self.sizes = SizeResolver(config_store)
        self.escape = escape
        self._snapshot = _make_snapshot(settings or ImagesSettings(), self.media_store)

    @classmethod
    def from_settings(cls, settings: ImagesSettings) -> "Images":
        """Build an instance with stores selected from `settings`."""
        config_store = JsonConfigStore(settings.sizes_file) if settings.sizes_file else None

        if settings.media_api_url:
            media_store: MediaStore = RestMediaStore(settings.media_api_url)
        elif settings.media_manifest:
            media_store = StaticMediaStore.from_json(settings.media_manifest)
        else:
            media_store = StaticMediaStore()

        return cls(settings=settings, media_store=media_store, config_store=config_store)

    @property
    def settings(self) -> ImagesSettings:
        return self._snapshot.settings

    def configure(self, options: Mapping[str, Any]) -> None:
        """Merge configuration options.

        Recognized settings keys (and the legacy `source`/`cache` aliases)
        produce a new settings snapshot; an `image-sizes` mapping is merged
        into the size table.
        """
        sizes = options.get(SIZES_KEY)
        if isinstance(sizes, Mapping):
            self.sizes.merge(sizes)

        current = self._snapshot
        settings = current.settings.merged(options)
        if settings is not current.settings:
            self._snapshot = _make_snapshot(settings, self.media_store)
            logger.info("Image settings updated: base_path=%s source_root=%s", settings.base_path, settings.source_root)

    def resolve_size(self, size: str | Mapping[str, Any]) -> SizeConfig:
        return self.sizes.resolve(size)

    def relative_path(self, url: str) -> str:
        return self._snapshot.urls.relative_path(url)

    def get_url(self, image: ImageRef | None, params: Mapping[str, Any] | None = None) -> str:
        """Transformation URL for `image` with explicit parameters."""
        return self._snapshot.urls.build_url(image, params)

    def get_url_for_size(self, image: ImageRef | None, size: str, viewport: str = "desktop") -> str:
        """Transformation URL for a named size and viewport."""
        params = self.resolve_size(size).for_viewport(viewport)
        return self._snapshot.urls.build_url(image, params)

    def image(
        self,
        image: ImageRef | None,
        sizes: str = "100vw",
        widths: Sequence[int] = DEFAULT_WIDTHS,
        attributes: Mapping[str, Any] | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> ResponsiveImage:
        return self._snapshot.srcset.build(image, widths, params, sizes=sizes, attributes=attributes)

    def picture(
        self,
        mobile_image: ImageRef | None,
        desktop_image: ImageRef | None,
        breakpoint: str = DEFAULT_BREAKPOINT,
        mobile_widths: Sequence[int] = DEFAULT_MOBILE_WIDTHS,
        desktop_widths: Sequence[int] = DEFAULT_DESKTOP_WIDTHS,
        attributes: Mapping[str, Any] | None = None,
        mobile_params: Mapping[str, Any] | None = None,
        desktop_params: Mapping[str, Any] | None = None,
        picture_attributes: Mapping[str, Any] | None = None,
    ) -> PictureDescriptor:
        return self._snapshot.picture.assemble(
            mobile_image,
            desktop_image,
            breakpoint,
            mobile_widths,
            desktop_widths,
            attributes,
            mobile_params,
            desktop_params,
            picture_attributes,
        )

    def create_image_tag(
        self,
        image: ImageRef | None,
        sizes: str = "100vw",
        widths: Sequence[int] = DEFAULT_WIDTHS,
        attributes: Mapping[str, Any] | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> str:
        """Rendered responsive `img` tag, `""` when the image does not resolve."""
        return render_img(self.image(image, sizes, widths, attributes, params), self.escape)

    def create_picture_tag(self, mobile_image: ImageRef | None, desktop_image: ImageRef | None, **kwargs: Any) -> str:
        """Rendered `picture` (or plain `img`) tag; accepts `picture()` keyword arguments."""
        return render_picture(self.picture(mobile_image, desktop_image, **kwargs), self.escape)


_DEFAULT_IMAGES: Images | None = None


def get_images() -> Images:
    """Return the process default `Images`, creating it from the environment."""
    global _DEFAULT_IMAGES
    if _DEFAULT_IMAGES is None:
        _DEFAULT_IMAGES = Images.from_settings(ImagesSettings.from_env())
    return _DEFAULT_IMAGES


def set_images(images: Images | None) -> None:
    """Override or clear the process default `Images`."""
    global _DEFAULT_IMAGES
    _DEFAULT_IMAGES = images


def image_url(image: ImageRef | None, params: Mapping[str, Any] | None = None) -> str:
    return get_images().get_url(image, params)


def image_tag(
    image: ImageRef | None,
    sizes: str = "100vw",
    widths: Sequence[int] = DEFAULT_WIDTHS,
    attributes: Mapping[str, Any] | None = None,
) -> str:
    return get_images().create_image_tag(image, sizes, widths, attributes)


def picture_tag(
    mobile_image: ImageRef | None,
    desktop_image: ImageRef | None,
    breakpoint: str = DEFAULT_BREAKPOINT,
    mobile_widths: Sequence[int] = DEFAULT_MOBILE_WIDTHS,
    desktop_widths: Sequence[int] = DEFAULT_DESKTOP_WIDTHS,
    attributes: Mapping[str, Any] | None = None,
) -> str:
    return get_images().create_picture_tag(
        mobile_image,
        desktop_image,
        breakpoint=breakpoint,
        mobile_widths=mobile_widths,
        desktop_widths=desktop_widths,
        attributes=attributes,
    )
