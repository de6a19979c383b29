"""Responsive image and picture descriptors.

Architectural role:
    Plain data returned by `images.srcset` and `images.picture` and consumed by
    `images.markup` (or any other attribute renderer). Descriptors carry
    attribute mappings only, never rendered markup.

Attribute precedence:
    Computed defaults first, caller-supplied attributes last, so the caller
    always wins on collision.
"""

from dataclasses import dataclass, field
from typing import Union

ImageRef = Union[int, str]

NATIVE = "native"
WEBP = "webp"

DEFAULT_LOADING = "lazy"
DEFAULT_DECODING = "async"
DEFAULT_PICTURE_IMG_CLASS = "w-full h-full object-cover"


@dataclass(frozen=True)
class SourceSetEntry:
    """One responsive candidate."""

    url: str
    width: int
    variant: str = NATIVE

    @property
    def candidate(self) -> str:
        return f"{self.url} {self.width}w"


@dataclass(frozen=True)
class ResponsiveImage:
    """Everything needed to emit one responsive `img` element.

    Attributes:
        src: Default source URL (empty when the reference did not resolve).
        entries: Source-set candidates, native/webp pairs in width order.
        sizes: Value of the `sizes` attribute.
        width: Intrinsic width, when known.
        height: Intrinsic height, when known.
        alt: Alt text.
        attributes: Caller-supplied extra attributes.
        is_vector: True for SVG sources, which are never transformed.
    """

    src: str = ""
    entries: tuple = ()
    sizes: str = "100vw"
    width: int | None = None
    height: int | None = None
    alt: str = ""
    attributes: dict = field(default_factory=dict)
    is_vector: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.src

    @property
    def srcset(self) -> str:
        return ", ".join(entry.candidate for entry in self.entries)

    def img_attributes(self) -> dict:
        """Merged `img` attributes; `{}` for an empty descriptor."""
        if self.is_empty:
            return {}

        attrs = {"src": self.src}
        if not self.is_vector:
            attrs["srcset"] = self.srcset
            attrs["sizes"] = self.sizes
        attrs.update({
            "alt": self.alt,
            "loading": DEFAULT_LOADING,
            "decoding": DEFAULT_DECODING,
        })
        attrs.update(self.attributes)

        if self.width is not None and self.height is not None:
            attrs.setdefault("width", self.width)
            attrs.setdefault("height", self.height)
        return attrs


@dataclass(frozen=True)
class PictureDescriptor:
    """Art-directed picture: mobile `source` plus desktop fallback `img`.

    When only one viewport is present the descriptor degenerates to a plain
    image (`is_picture` is False and no `source` is produced).
    """

    mobile: ResponsiveImage | None = None
    desktop: ResponsiveImage | None = None
    breakpoint: str = "640px"
    alt: str = ""
    attributes: dict = field(default_factory=dict)
    picture_attributes: dict = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return self.mobile is None and self.desktop is None

    @property
    def is_picture(self) -> bool:
        return self.mobile is not None and self.desktop is not None

    @property
    def image(self) -> ResponsiveImage | None:
        """The fallback image: desktop when present, else mobile."""
        return self.desktop if self.desktop is not None else self.mobile

    def source_attributes(self) -> dict:
        """Attributes of the mobile `source` element, or `{}` when there is none."""
        if not self.is_picture:
            return {}
        srcset = self.mobile.srcset
        if not srcset and self.mobile.is_vector:
            srcset = self.mobile.src
        if not srcset:
            return {}
        return {"media": f"(max-width: {self.breakpoint})", "srcset": srcset}

    def img_attributes(self) -> dict:
        if not self.is_picture:
            image = self.image
            return image.img_attributes() if image is not None else {}

        desktop = self.desktop
        attrs = {
            "class": DEFAULT_PICTURE_IMG_CLASS,
            "src": desktop.src,
            "alt": self.alt,
            "loading": DEFAULT_LOADING,
            "decoding": DEFAULT_DECODING,
        }
        if desktop.srcset:
            attrs["srcset"] = desktop.srcset
        attrs.update(self.attributes)

        if desktop.width is not None and desktop.height is not None:
            attrs.setdefault("width", desktop.width)
            attrs.setdefault("height", desktop.height)
        return attrs
