"""Backwards-compatible call shapes for pre-3.0 templates.

Scope:
    Translates the historical `get`/`get_image`/`get_images`/
    `get_image_url_for_size` calls onto `srcsetter.service.Images` and
    reproduces their `desktop`/`mobile`/`tablet` output mapping.
"""
