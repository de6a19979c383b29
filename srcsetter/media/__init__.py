"""Media store adapters.

Scope:
    Resolve numeric image ids to absolute source URLs, intrinsic dimensions and
    alt text. Literal URL references never reach a media store.

Non-goals:
    - No image bytes are read or stored.
    - No persistent caching of lookups.
"""
