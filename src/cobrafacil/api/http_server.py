"""
Main HTTP server for CobraFácil Push APIs.

Serves subscription, send and worker preview endpoints.
"""

import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cobrafacil import __version__
from cobrafacil.core.config import get_config
from .push_api import router as push_router
from .worker_api import router as worker_router

logger = logging.getLogger(__name__)


def setup_logging(log_level: str):
    """
    Setup logging configuration.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    config = get_config()

    app = FastAPI(
        title="CobraFácil Push API",
        description="Web Push subscriptions and delivery for CobraFácil",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.api.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(push_router)
    app.include_router(worker_router)

    @app.get("/")
    async def root():
        """Root endpoint with API information."""
        return {
            "name": "CobraFácil Push API",
            "version": __version__,
            "endpoints": {
                "push": "/push",
                "worker": "/worker",
                "docs": "/docs",
            },
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "vapid_configured": get_config().push.is_configured,
        }

    return app


app = create_app()


def main():
    """Main entry point for HTTP server."""
    config = get_config()
    setup_logging(config.log_level)

    host = config.api.host
    port = config.api.port

    logger.info("=" * 60)
    logger.info("CobraFácil Push - API Server")
    logger.info("=" * 60)
    logger.info(f"Host: {host}")
    logger.info(f"Port: {port}")
    logger.info(f"VAPID configured: {config.push.is_configured}")
    logger.info("=" * 60)
    logger.info(f"API Documentation: http://{host}:{port}/docs")
    logger.info("=" * 60)

    uvicorn.run(
        "cobrafacil.api.http_server:app",
        host=host,
        port=port,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    main()
