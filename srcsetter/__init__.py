"""Responsive image URL and markup generation.

Architectural role:
    Sits between a media store and an on-demand image transformation engine.
    Resolves symbolic size names into transformation parameters, builds
    deterministic transformation URLs, derives responsive source sets and
    art-directed `picture` descriptors, and proxies matching HTTP requests to
    the engine.

Package split:
    - `config`: environment settings, configuration store, size table resolver.
    - `media`: media store adapters (id -> URL, metadata, alt text).
    - `images`: URL builder, source-set builder, picture assembler, markup.
    - `compat`: legacy call-shape adapter.
    - `api`: render dispatcher, FastAPI app and CLI.
    - `service`: the `Images` facade wiring the pieces together.
"""

__version__ = "3.1.0"
