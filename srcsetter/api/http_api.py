"""
HTTP adapter for on-demand image rendering.

Architectural role:
- Intercept requests under `/<base path>/` and stream them from the
  transformation engine (`api.dispatcher.RenderDispatcher`).
- Expose small JSON endpoints over the `Images` facade.

Endpoint responsibilities:
- `GET /<base path>/<asset>?<params>`: rendered derivative bytes.
- `GET /v1/sizes`: list configured size names and their viewports.
- `POST /v1/image`: responsive `img` tag and descriptor fields.
- `POST /v1/picture`: art-directed `picture` tag.

Request lifecycle (render path):
1. The HTTP middleware checks the path for the base path segment.
2. Non-matching requests continue to the routes below.
3. Matching requests go to the engine once; its status, content type and
   body are streamed back and no further handler runs. The engine stream
   is closed once the body is exhausted or abandoned.

Error handling strategy:
- Engine statuses pass through unchanged.
- Missing/unreachable engine -> HTTP 503 JSON error.

Side effects:
- Loads environment variables at import time via `load_dotenv()`.
- Emits request debug logs only when `DEBUG == "true"`.
"""

from dotenv import load_dotenv

load_dotenv()

import logging
import os
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel, Field

from srcsetter.api.dispatcher import HttpTransformationEngine, RenderDispatcher, TransformationEngine, stream_body
from srcsetter.config.sizes import ViewportSizes
from srcsetter.errors import EngineUnavailableError
from srcsetter.images.markup import render_img
from srcsetter.images.picture import DEFAULT_BREAKPOINT, DEFAULT_DESKTOP_WIDTHS, DEFAULT_MOBILE_WIDTHS
from srcsetter.images.srcset import DEFAULT_WIDTHS
from srcsetter.service import Images, get_images


logger = logging.getLogger(__name__)

# Request debug logging is opt-in.
DEBUG = os.getenv("DEBUG") == "true"


# ============================================================
# Request Schemas
# ============================================================

class ImageRequest(BaseModel):
    """Payload for `POST /v1/image`."""

    image: int | str
    sizes: str = "100vw"
    widths: list[int] = Field(default_factory=lambda: list(DEFAULT_WIDTHS))
    attributes: dict[str, Any] = Field(default_factory=dict)
    params: dict[str, Any] = Field(default_factory=dict)


class PictureRequest(BaseModel):
    """Payload for `POST /v1/picture`."""

    mobile_image: int | str | None = None
    desktop_image: int | str | None = None
    breakpoint: str = DEFAULT_BREAKPOINT
    mobile_widths: list[int] = Field(default_factory=lambda: list(DEFAULT_MOBILE_WIDTHS))
    desktop_widths: list[int] = Field(default_factory=lambda: list(DEFAULT_DESKTOP_WIDTHS))
    attributes: dict[str, Any] = Field(default_factory=dict)
    mobile_params: dict[str, Any] = Field(default_factory=dict)
    desktop_params: dict[str, Any] = Field(default_factory=dict)
    picture_attributes: dict[str, Any] = Field(default_factory=dict)


def _default_engine(images: Images) -> TransformationEngine | None:
    if not images.settings.engine_url:
        return None
    return HttpTransformationEngine(images.settings)


def create_app(images: Images | None = None, engine: TransformationEngine | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        images: Facade to serve; defaults to the process default instance.
        engine: Transformation engine; defaults to an HTTP engine when
            `IMAGES_ENGINE_URL` is set, else rendering requests return 503.
    """
    images = images if images is not None else get_images()
    if engine is None:
        engine = _default_engine(images)

    app = FastAPI()
    app.state.images = images
    app.state.dispatcher = RenderDispatcher(images.settings, engine)

    # ============================================================
    # On-demand rendering
    # ============================================================

    @app.middleware("http")
    async def render_on_demand(request: Request, call_next):
        dispatcher: RenderDispatcher = request.app.state.dispatcher
        settings = request.app.state.images.settings
        if dispatcher.settings is not settings:
            dispatcher = RenderDispatcher(settings, dispatcher.engine)
            request.app.state.dispatcher = dispatcher
        path = request.url.path
        if not dispatcher.matches(path):
            return await call_next(request)

        if DEBUG:
            logger.info("Render request path=%s query=%s", path, request.url.query)

        try:
            result = await dispatcher.dispatch(path, list(request.query_params.multi_items()))
        except EngineUnavailableError as exc:
            return JSONResponse(status_code=503, content={"error": str(exc)})

        return StreamingResponse(
            stream_body(result),
            status_code=result.status_code,
            media_type=result.media_type,
            headers=result.headers,
        )

    # ============================================================
    # JSON endpoints
    # ============================================================

    @app.get("/v1/sizes")
    def list_sizes():
        """Return configured size names with their viewports."""
        resolver = app.state.images.sizes
        data = []
        for name in resolver.names():
            config = resolver.table[name]
            if isinstance(config, ViewportSizes):
                viewports = [v for v in ("desktop", "mobile", "tablet") if config.for_viewport(v)]
            else:
                viewports = ["desktop"]
            data.append({"id": name, "object": "size", "viewports": viewports})
        return {"object": "list", "data": data}

    @app.post("/v1/image")
    def image_tag(body: ImageRequest):
        facade: Images = app.state.images
        image = facade.image(body.image, body.sizes, body.widths, body.attributes, body.params)
        if image.is_empty:
            return JSONResponse(status_code=404, content={"error": "Image not found"})
        return {
            "src": image.src,
            "srcset": image.srcset,
            "sizes": image.sizes,
            "alt": image.alt,
            "html": render_img(image, facade.escape),
        }

    @app.post("/v1/picture")
    def picture_tag(body: PictureRequest):
        facade: Images = app.state.images
        html = facade.create_picture_tag(
            body.mobile_image,
            body.desktop_image,
            breakpoint=body.breakpoint,
            mobile_widths=body.mobile_widths,
            desktop_widths=body.desktop_widths,
            attributes=body.attributes,
            mobile_params=body.mobile_params,
            desktop_params=body.desktop_params,
            picture_attributes=body.picture_attributes,
        )
        return {"html": html}

    return app


app = create_app()
