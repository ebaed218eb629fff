"""FastAPI app factory."""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from svgbridge import __version__
from svgbridge.config import settings

load_dotenv()

logging.basicConfig(
    level=getattr(logging, settings.svgbridge_log_level.upper(), logging.INFO),
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)


def create_app() -> FastAPI:
    app = FastAPI(
        title="svgbridge",
        description="SVG import/export: documents to an in-memory shape model and back",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Import all builder modules to trigger registration
    from svgbridge.svg.registry import register_builders

    register_builders()

    from svgbridge.api.router import api_router

    app.include_router(api_router)

    return app


app = create_app()
