"""Art-directed picture assembly.

Role in pipeline:
    Composes two `ResponsiveImage` descriptors (mobile, desktop) into one
    `PictureDescriptor`. The mobile image becomes a `source` gated by
    `max-width: <breakpoint>`; the desktop image is the fallback `img`.

Degenerate cases:
    - Both references absent -> empty descriptor (renders nothing).
    - One reference absent -> plain image for the present viewport, built from
      that viewport's own widths and parameters, with no `source`.
"""

import logging
from typing import Any, Mapping, Sequence

from srcsetter.images.descriptors import ImageRef, PictureDescriptor
from srcsetter.images.srcset import DEFAULT_WIDTHS, SrcsetBuilder

logger = logging.getLogger(__name__)

DEFAULT_BREAKPOINT = "640px"
DEFAULT_MOBILE_WIDTHS = (375, 750)
DEFAULT_DESKTOP_WIDTHS = (1100, 1500, 2200)

# Multipliers applied to an explicit `w` parameter when no widths are given.
DERIVED_WIDTH_FACTORS = (0.5, 1, 1.5, 2)


def derive_widths(widths: Sequence[int] | None, params: Mapping[str, Any] | None) -> list[int]:
    """Return `widths` when given, else widths derived from `params["w"]`.

    Numeric strings are accepted for `w`. Falls back to `DEFAULT_WIDTHS` when
    neither is available or `w` is not a positive number.
    """
    if widths:
        return list(widths)
    base = (params or {}).get("w")
    if base and not isinstance(base, bool):
        try:
            base = float(base)
        except (TypeError, ValueError):
            logger.warning("Ignoring non-numeric w=%r when deriving widths", base)
            base = 0
        if 0 < base < float("inf"):
            return [int(base * factor) for factor in DERIVED_WIDTH_FACTORS]
    return list(DEFAULT_WIDTHS)


class PictureAssembler:
    """Build `PictureDescriptor` values from a `SrcsetBuilder`."""

    def __init__(self, srcset_builder: SrcsetBuilder):
        self.srcset_builder = srcset_builder

    def assemble(
        self,
        mobile_ref: ImageRef | None,
        desktop_ref: ImageRef | None,
        breakpoint: str = DEFAULT_BREAKPOINT,
        mobile_widths: Sequence[int] = DEFAULT_MOBILE_WIDTHS,
        desktop_widths: Sequence[int] = DEFAULT_DESKTOP_WIDTHS,
        attributes: Mapping[str, Any] | None = None,
        mobile_params: Mapping[str, Any] | None = None,
        desktop_params: Mapping[str, Any] | None = None,
        picture_attributes: Mapping[str, Any] | None = None,
    ) -> PictureDescriptor:
        """Assemble an art-directed picture.

        Args:
            mobile_ref: Image shown below the breakpoint, or `None`.
            desktop_ref: Fallback image, or `None`.
            breakpoint: CSS length used in the mobile `max-width` media query.
            mobile_widths: Mobile candidate widths (empty -> derived).
            desktop_widths: Desktop candidate widths (empty -> derived).
            attributes: Extra `img` attributes.
            mobile_params: Transformation parameters for the mobile image.
            desktop_params: Transformation parameters for the desktop image.
            picture_attributes: Extra `picture` attributes.

        Returns:
            `PictureDescriptor`, empty when both references are absent.
        """
        attributes = dict(attributes or {})
        picture_attributes = dict(picture_attributes or {})

        if mobile_ref is None and desktop_ref is None:
            return PictureDescriptor(breakpoint=breakpoint)

        if mobile_ref is None or desktop_ref is None:
            if desktop_ref is not None:
                image = self.srcset_builder.build(
                    desktop_ref, desktop_widths, desktop_params, attributes=attributes
                )
                return PictureDescriptor(desktop=image, breakpoint=breakpoint, alt=image.alt)
            image = self.srcset_builder.build(
                mobile_ref, mobile_widths, mobile_params, attributes=attributes
            )
            return PictureDescriptor(mobile=image, breakpoint=breakpoint, alt=image.alt)

        mobile = self.srcset_builder.build(
            mobile_ref, derive_widths(mobile_widths, mobile_params), mobile_params
        )
        desktop = self.srcset_builder.build(
            desktop_ref, derive_widths(desktop_widths, desktop_params), desktop_params
        )

        return PictureDescriptor(
            mobile=mobile,
            desktop=desktop,
            breakpoint=breakpoint,
            alt=desktop.alt or mobile.alt or "",
            attributes=attributes,
            picture_attributes=picture_attributes,
        )
