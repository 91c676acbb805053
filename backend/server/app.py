"""
FastAPI app factory.

Responsibilities:
- Create and configure FastAPI app
- Set up middleware
- Apply process-wide configuration (JSON logging switch)
- Register routes
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import AppConfig
from observability import logger

from server.routes import register_routes


def create_app(config: AppConfig | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Pass config explicitly in tests; otherwise it is read from the
    environment.
    """
    config = config or AppConfig.load_from_env()

    logger.configure(enabled=config.enable_json_logs)

    app = FastAPI(title="VoiceChain Assistant API")

    app.state.config = config

    # Middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # tighten later
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routes
    register_routes(app)

    return app
