"""On-demand rendering dispatcher.

Request lifecycle:
    1. Inspect the request path for the `/<base path>/` segment.
    2. No segment -> `None`; the request falls through to normal handling.
    3. Strip everything up to and including the segment, leaving the asset
       path relative to the source root.
    4. Call the transformation engine once with the asset path and the raw
       query parameters, and hand its response back unchanged.

Retry behavior:
    None. Each matching request produces exactly one engine call.

Error handling strategy:
    Engine HTTP statuses (missing source, invalid parameters) are passed
    through as-is. Only a missing engine or a transport failure raises
    `EngineUnavailableError`.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Awaitable, Callable, Protocol

import httpx

from srcsetter.config.settings import ImagesSettings
from srcsetter.errors import EngineUnavailableError


logger = logging.getLogger(__name__)

# Engine response headers copied onto the client response.
PASSTHROUGH_HEADERS = ("cache-control", "etag", "last-modified", "expires", "content-encoding")


@dataclass
class EngineResponse:
    """Engine output: status, byte stream and content metadata."""

    status_code: int
    body: AsyncIterator[bytes]
    media_type: str | None = None
    headers: dict = field(default_factory=dict)
    close: Callable[[], Awaitable[None]] | None = None


class TransformationEngine(Protocol):
    """Interface of the external transformation engine."""

    async def output_image(self, path: str, params: Any) -> EngineResponse:
        ...


class HttpTransformationEngine:
    """Proxy transformation requests to a remote engine over HTTP.

    The engine receives `GET <engine_url>/<path>?<params>` plus the source
    root and cache directory as `X-Source-Root`/`X-Cache-Dir` headers. The
    response body is streamed, not buffered.
    """

    def __init__(self, settings: ImagesSettings):
        if not settings.engine_url:
            raise EngineUnavailableError("IMAGES_ENGINE_URL is not configured")
        self.settings = settings

    async def output_image(self, path: str, params: Any) -> EngineResponse:
        url = f"{self.settings.engine_url.rstrip('/')}/{path.lstrip('/')}"
        headers = {
            "X-Source-Root": self.settings.source_root,
            "X-Cache-Dir": self.settings.cache_dir,
        }

        client = httpx.AsyncClient(timeout=self.settings.engine_timeout_seconds, follow_redirects=True)
        try:
            request = client.build_request("GET", url, params=params, headers=headers)
            response = await client.send(request, stream=True)
        except httpx.RequestError as exc:
            await client.aclose()
            logger.exception("Transformation engine request failed for path=%r", path)
            raise EngineUnavailableError(f"Transformation engine unreachable: {exc}") from exc

        async def close() -> None:
            await response.aclose()
            await client.aclose()

        return EngineResponse(
            status_code=response.status_code,
            body=response.aiter_raw(),
            media_type=response.headers.get("content-type"),
            headers={
                name: response.headers[name]
                for name in PASSTHROUGH_HEADERS
                if name in response.headers
            },
            close=close,
        )


def extract_asset_path(path: str, base_path: str) -> str | None:
    """Return the asset path after the first `/<base_path>/` segment.

    Returns:
        Relative asset path, or `None` when the segment does not occur.
    """
    segment = f"/{base_path.strip('/')}/"
    if not path.startswith("/"):
        path = "/" + path
    pos = path.find(segment)
    if pos < 0:
        return None
    return path[pos + len(segment):]


class RenderDispatcher:
    """Match request paths and forward them to the engine."""

    def __init__(self, settings: ImagesSettings, engine: TransformationEngine | None = None):
        self.settings = settings
        self.engine = engine

    def matches(self, path: str) -> bool:
        return extract_asset_path(path, self.settings.base_path) is not None

    async def dispatch(self, path: str, params: Any = None) -> EngineResponse | None:
        """Forward a matching request to the engine.

        Args:
            path: Request path.
            params: Raw query parameters (mapping or list of pairs).

        Returns:
            The engine response, or `None` when `path` does not match.

        Raises:
            EngineUnavailableError: No engine configured, or engine unreachable.
        """
        asset_path = extract_asset_path(path, self.settings.base_path)
        if asset_path is None:
            return None
        if self.engine is None:
            raise EngineUnavailableError("No transformation engine configured")
        return await self.engine.output_image(asset_path, params if params is not None else {})


async def stream_body(result: EngineResponse) -> AsyncIterator[bytes]:
    """Yield the engine body, closing the engine stream when iteration stops.

    `close` runs on normal completion, on errors and when the consumer
    abandons the stream (client disconnect).
    """
    try:
        async for chunk in result.body:
            yield chunk
    finally:
        if result.close is not None:
            await result.close()
