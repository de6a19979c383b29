"""Responsive image generation package.

Module split:
    - `descriptors`: data returned to callers and renderers.
    - `urls`: transformation URL construction.
    - `srcset`: responsive source sets for one image.
    - `picture`: art-directed mobile/desktop composition.
    - `markup`: attribute rendering into `img`/`picture` tags.
"""
