"""
Addon API - FastAPI application

Serves the addon lookup over HTTP. The same pipeline is exposed to AWS
Lambda through addon_api.handler.
"""

import logging

from fastapi import FastAPI

from addon_api.config import settings
from addon_api.routers.api import router as api_router

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
log = logging.getLogger("addon_api")

app = FastAPI(
    title="Addon API",
    description="Resolves Ember addons and schedules their builds",
    version=settings.service_version,
)

app.include_router(api_router, prefix="/api/v1")


@app.get("/")
async def root():
    """Root endpoint - service information"""
    return {
        "service": settings.service_name,
        "version": settings.service_version,
        "env": settings.env,
        "status": "running",
        "endpoints": {
            "addon": "POST /api/v1/addon",
            "addon_redirect": "GET /api/v1/addon/{addon}/{addon_version}?ember_version=",
            "ember_versions": "GET /api/v1/ember-versions",
            "health": "GET /health",
        },
    }


@app.get("/health")
async def health_check():
    """Health check endpoint for load balancers"""
    return {"status": "healthy", "service": settings.service_name}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000, log_level="info")
