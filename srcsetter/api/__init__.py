"""Request-facing adapters.

Architectural role:
- `dispatcher`: path matching and transformation engine forwarding.
- `http_api`: FastAPI application wiring the dispatcher and JSON endpoints.
- `cli`: terminal access to URL and markup generation.
"""
