from fastapi import FastAPI
from loguru import logger

from erp_backend.app.config import settings
from erp_backend.app.services.analytics_service import (
    initialize_analytics_service_dependencies,
)
from erp_backend.app.api.router import api_router, inventory_router


app = FastAPI(title=settings.app_title)
logger.info("Main FastAPI application instance created.")


@app.on_event("startup")
async def startup_event():
    logger.info("FastAPI Event: Application startup initiated...")
    logger.info(f"Spreadsheet data directory: {settings.backend.data_dir}")
    await initialize_analytics_service_dependencies()
    logger.info(
        "FastAPI Event: Analytics service dependencies initialized. Application startup complete."
    )


@app.on_event("shutdown")
def shutdown_event():
    logger.info("FastAPI Event: Application shutdown complete.")


# --- API router (analytics) ---
app.include_router(api_router, prefix="/api")

# --- Inventory form handlers and fixtures ---
app.include_router(inventory_router)


# --- Root and Health Endpoints ---
@app.get("/")
async def root():
    logger.debug("API GET / (FastAPI root) called.")
    return {
        "message": settings.app_title,
        "api_docs_url": "/docs",
        "redoc_url": "/redoc",
        "analytics_url": "/api/analytics/excel",
        "inventory_url": "/inventory",
        "health_check": "/health",
    }


@app.get("/health", tags=["Health Check"])
async def health_check():
    return {"status": "ok", "message": "API is healthy"}
