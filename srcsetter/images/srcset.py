"""Responsive source-set builder.

Processing flow:
    1. Resolve the source URL, intrinsic dimensions and alt text.
    2. Unresolvable reference -> empty descriptor.
    3. Vector source -> descriptor with the source URL and no candidates.
    4. For each requested width, in order, skip widths above the intrinsic
       width; otherwise emit a native candidate and a webp candidate.
    5. The default source uses the width at index `len(widths) // 2` of the
       unfiltered list (1100 when the list is empty).

Size validation:
    Widths are not upscaled past the source. When the source width is unknown
    a 3000px ceiling applies.
"""

from typing import Any, Mapping, Sequence

from srcsetter.images.descriptors import (
    NATIVE,
    WEBP,
    ImageRef,
    ResponsiveImage,
    SourceSetEntry,
)
from srcsetter.images.urls import UrlBuilder, is_media_id, is_vector_url
from srcsetter.media.store import MediaStore

DEFAULT_WIDTHS = (375, 750, 1100, 1500, 2200)
DEFAULT_SRC_WIDTH = 1100
UNKNOWN_SOURCE_WIDTH = 3000


def default_width(widths: Sequence[int]) -> int:
    """Width used for the default `src`: the element at `len // 2`."""
    if not widths:
        return DEFAULT_SRC_WIDTH
    return widths[len(widths) // 2]


class SrcsetBuilder:
    """Build `ResponsiveImage` descriptors."""

    def __init__(self, url_builder: UrlBuilder, media_store: MediaStore):
        self.url_builder = url_builder
        self.media_store = media_store

    def _metadata(self, ref: ImageRef) -> dict:
        if not is_media_id(ref):
            return {}
        return self.media_store.metadata(ref) or {}

    def _alt(self, ref: ImageRef) -> str:
        if not is_media_id(ref):
            return ""
        return self.media_store.alt_text(ref) or ""

    def entries(
        self,
        ref: ImageRef,
        widths: Sequence[int],
        params: Mapping[str, Any] | None = None,
        max_width: int = UNKNOWN_SOURCE_WIDTH,
    ) -> tuple:
        """Native/webp candidate pairs for every width not above `max_width`."""
        params = dict(params or {})
        result = []
        for width in widths:
            if width > max_width:
                continue
            native = {**params, "w": width}
            webp = {**native, "fm": "webp"}
            result.append(SourceSetEntry(self.url_builder.build_url(ref, native), width, NATIVE))
            result.append(SourceSetEntry(self.url_builder.build_url(ref, webp), width, WEBP))
        return tuple(result)

    def build(
        self,
        ref: ImageRef | None,
        widths: Sequence[int] = DEFAULT_WIDTHS,
        params: Mapping[str, Any] | None = None,
        sizes: str = "100vw",
        attributes: Mapping[str, Any] | None = None,
    ) -> ResponsiveImage:
        """Build the responsive descriptor for one image.

        Args:
            ref: Media id or literal URL.
            widths: Candidate widths, emitted in the given order.
            params: Transformation parameters merged under each width.
            sizes: `sizes` attribute value.
            attributes: Extra `img` attributes; they win over computed ones.

        Returns:
            `ResponsiveImage`; empty when `ref` does not resolve.
        """
        attributes = dict(attributes or {})
        source_url = self.url_builder.resolve(ref)
        if not source_url:
            return ResponsiveImage(sizes=sizes, attributes=attributes)

        alt = self._alt(ref)

        if is_vector_url(source_url):
            return ResponsiveImage(
                src=source_url,
                sizes=sizes,
                alt=alt,
                attributes=attributes,
                is_vector=True,
            )

        metadata = self._metadata(ref)
        max_width = metadata.get("width") or UNKNOWN_SOURCE_WIDTH
        params = dict(params or {})

        default_params = {**params, "w": default_width(widths)}
        return ResponsiveImage(
            src=self.url_builder.build_url(ref, default_params),
            entries=self.entries(ref, widths, params, max_width),
            sizes=sizes,
            width=metadata.get("width"),
            height=metadata.get("height"),
            alt=alt,
            attributes=attributes,
        )
