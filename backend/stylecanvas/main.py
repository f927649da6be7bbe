"""FastAPI app factory."""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from stylecanvas import __version__
from stylecanvas.config import settings
from stylecanvas.engine.errors import StyleFilterError

load_dotenv()

logging.basicConfig(
    level=getattr(logging, settings.stylecanvas_log_level.upper(), logging.DEBUG),
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(
        title="StyleCanvas",
        description="Artistic style filters for uploaded photos",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StyleFilterError, _style_filter_error_handler)

    # Import all style modules to trigger registration
    _register_styles()

    from stylecanvas.api.router import api_router

    app.include_router(api_router)

    return app


def _register_styles() -> None:
    from stylecanvas.engine.registry import get_catalog

    catalog = get_catalog()
    logger.debug("Style catalog ready: %s", ", ".join(catalog.ids()))


async def _style_filter_error_handler(request: Request, exc: StyleFilterError) -> JSONResponse:
    logger.warning("%s %s -> %s: %s", request.method, request.url.path, type(exc).__name__, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": type(exc).__name__},
    )


app = create_app()
