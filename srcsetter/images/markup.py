"""Render descriptors into HTML tags.

Escaping:
    Every attribute name and value passes through the injected `escape`
    callable (default `html.escape`). Attributes whose value is `None` or `""`
    are omitted.
"""

import html
from typing import Any, Callable, Mapping

from srcsetter.images.descriptors import PictureDescriptor, ResponsiveImage

Escaper = Callable[[str], str]


def render_attributes(attributes: Mapping[str, Any], escape: Escaper = html.escape) -> str:
    """Serialize attributes as ` name="value"` pairs in mapping order."""
    parts = []
    for name, value in attributes.items():
        if value is None or value == "":
            continue
        parts.append(f' {escape(str(name))}="{escape(str(value))}"')
    return "".join(parts)


def render_img(image: ResponsiveImage | None, escape: Escaper = html.escape) -> str:
    if image is None or image.is_empty:
        return ""
    return f"<img{render_attributes(image.img_attributes(), escape)}>"


def render_picture(picture: PictureDescriptor, escape: Escaper = html.escape) -> str:
    """Render a picture descriptor.

    Returns `""` for an empty descriptor and a bare `img` tag when only one
    viewport is present.
    """
    if picture.is_empty:
        return ""
    if not picture.is_picture:
        return render_img(picture.image, escape)

    out = f"<picture{render_attributes(picture.picture_attributes, escape)}>"
    source = picture.source_attributes()
    if source:
        out += f"<source{render_attributes(source, escape)}>"
    out += f"<img{render_attributes(picture.img_attributes(), escape)}>"
    out += "</picture>"
    return out
