"""
main.py
-------
Entry point for the SubTrack API.

Responsibilities:
    - Open the database connection pool and create the schema.
    - Build the FastAPI application and register all routers.
    - Start the HTTP listener.
"""

from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import CORS_ORIGINS, HOST, PORT
from db.connection import Database
from db.init_db import create_tables
from handlers import health_handler, stats_handler, subscription_handler
from handlers.errors import register_error_handlers
from utils.logger import configure_logging, get_logger

logger = get_logger(__name__)


def create_app(database: Optional[Database] = None) -> FastAPI:
    """
    Build the application around one Database.

    Args:
        database: Pool to use; a default one built from config when omitted.

    Returns:
        The configured FastAPI app. The pool is opened and the schema
        created when the app starts; either failing aborts startup.
    """
    database = database or Database()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # ── 1. Database setup ─────────────────────────────
        logger.info("Initializing database...")
        database.open()
        try:
            create_tables(database)
        except Exception:
            database.close()
            raise

        yield

        # ── 2. Cleanup on shutdown ────────────────────────
        database.close()
        logger.info("SubTrack stopped.")

    app = FastAPI(title="subtrack-api", version="0.1.0", lifespan=lifespan)
    app.state.database = database

    if CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=CORS_ORIGINS,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # ── 3. Register routes ────────────────────────────────
    app.include_router(health_handler.router)
    app.include_router(subscription_handler.router)
    app.include_router(stats_handler.router)
    register_error_handlers(app)

    return app


def main() -> None:
    """Build the app and serve it until interrupted."""
    configure_logging()
    logger.info(f"Starting server on port {PORT}...")
    uvicorn.run(create_app(), host=HOST, port=PORT, log_config=None)


if __name__ == "__main__":
    main()
