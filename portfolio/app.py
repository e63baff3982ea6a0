"""
FastAPI application entry point for the portfolio service.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from portfolio.config import get_settings
from portfolio.routes import router


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())
    app = FastAPI(title="Portfolio API", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router, prefix=settings.api_prefix)
    # Fixed-path downloadable resume and other static assets.
    app.mount(
        "/assets",
        StaticFiles(directory=settings.static_dir, check_dir=False),
        name="assets",
    )
    return app


app = create_app()
