"""
Voteboard API Server

FastAPI application serving aggregate vote views. Routes, services, and
utilities are organized into focused modules.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import config, get_logger
from database.db_postgres import Database
from server.middleware.logging import log_requests
from server.middleware.metrics import metrics_middleware
from server.middleware.request_id import RequestIDMiddleware
from server.reference import load_reference_data
from server.routes import compare, country_map, departments, monitoring

logger = get_logger(__name__)

# Mirror log lines to a file next to stdout
logging.getLogger().addHandler(logging.FileHandler(config.LOG_PATH, mode="a"))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize and cleanup async database connection pool"""
    db = await Database.create()
    logger.info("initialized PostgreSQL database with async connection pool")

    app.state.db = db

    yield

    try:
        await db.close()
        logger.info("closed PostgreSQL connection pool")
    except Exception as e:
        # Shutdown proceeds regardless
        logger.error("error closing connection pool", error=str(e), exc_info=True)


def create_app() -> FastAPI:
    """Build the FastAPI app with middleware, routers and reference data"""
    app = FastAPI(title="voteboard API", description="Vote results dashboard", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.ALLOWED_ORIGINS,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    # Request ID middleware (must be early in stack for tracing)
    app.add_middleware(RequestIDMiddleware)

    # Static tables are built once and injected via server.dependencies.get_reference
    app.state.reference = load_reference_data(config.HOME_COUNTRY)

    # Register middleware (execution order: metrics -> logging)
    # FastAPI middleware stack: last registered runs first, so register in reverse order
    @app.middleware("http")
    async def log_requests_middleware(request, call_next):
        return await log_requests(request, call_next)

    @app.middleware("http")
    async def metrics_middleware_wrapper(request, call_next):
        return await metrics_middleware(request, call_next)

    app.include_router(monitoring.router)   # Root, health and metrics
    app.include_router(compare.router)      # Candidate comparison
    app.include_router(country_map.router)  # Country map
    app.include_router(departments.router)  # Department breakdown

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    import sys

    logger.info("Starting voteboard API server...")
    logger.info("configuration", config_summary=config.summary())

    if len(sys.argv) > 1 and sys.argv[1] == "--init-db":
        logger.info("Initializing database schema...")
        import asyncio

        async def init_db():
            db = await Database.create()
            try:
                await db.init_schema()
                logger.info("Database initialized successfully")
            finally:
                await db.close()

        asyncio.run(init_db())
        sys.exit(0)

    uvicorn.run(
        app,
        host=config.API_HOST,
        port=config.API_PORT,
        access_log=False,  # Request logging middleware covers access lines
    )
