#!/usr/bin/env python3
"""Registration intake web server"""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from registration_intake import __version__
from registration_intake.config import config
from registration_intake.logging_config import get_logger, setup_logging
from registration_intake.routers.admin import router as admin_router
from registration_intake.routers.health import health
from registration_intake.routers.registration import router as registration_router
from registration_intake.services import get_export_materializer
from registration_intake.services.refresh_scheduler import PeriodicRefresh

# Configure logging (INFO -> stdout, WARNING/ERROR -> stderr)
setup_logging()
logger = get_logger(__name__)

# Legacy prefix used by the browser client; hidden from the OpenAPI schema
LEGACY_API_PREFIX = "/api"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Refresh exports once at startup, then keep refreshing until shutdown"""
    materializer = get_export_materializer()
    materializer.refresh()

    scheduler = PeriodicRefresh(
        materializer.refresh, config["export_interval_seconds"]
    )
    scheduler.start()
    app.state.export_scheduler = scheduler
    try:
        yield
    finally:
        await scheduler.stop()


app = FastAPI(
    title="Registration Intake",
    description="Accepts registrations and exports them as CSV and Excel files",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config["cors_origins"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health)
for router in (registration_router, admin_router):
    app.include_router(router)
    app.include_router(router, prefix=LEGACY_API_PREFIX, include_in_schema=False)


def run():
    host = config["host"]
    port = config["port"]
    logger.info(f"Server running at http://{host}:{port}")
    logger.info(f"Writing registrations and exports to {config['data_dir']}")

    try:
        uvicorn.run(app, host=host, port=port, log_level=config["log_level"].lower())
    except Exception as e:
        logger.error(f"Failed to start server: {e}")
        raise


if __name__ == "__main__":
    run()
