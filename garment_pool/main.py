"""
Garment Pool FastAPI application.

This is the entry point for the application.
All routers are registered here.
"""

from fastapi import FastAPI

from garment_pool.config import get_settings
from garment_pool.logging_config import configure_logging
from garment_pool.api.health import router as health_router
from garment_pool.api.items import router as items_router
from garment_pool.api.logs import router as logs_router

settings = get_settings()

configure_logging("DEBUG" if settings.DEBUG else settings.LOG_LEVEL)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Lifecycle tracking for a pool of work garments",
)

# Register routers
app.include_router(health_router)
app.include_router(items_router)
app.include_router(logs_router)
