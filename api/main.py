"""
Monthly Coupon Engine API - Main Application.

Thin FastAPI adapter that lets the host platform deliver customer events and
trigger rule pruning over HTTP.
"""

import logging

from fastapi import FastAPI

from api import __version__

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

app = FastAPI(
    title="Monthly Coupon Engine API",
    description="Issues monthly customer discount codes and prunes expired rules",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)


@app.get("/health", tags=["Health"])
def health_check():
    """
    Health check endpoint.

    Returns the API status and version.
    """
    return {
        "status": "healthy",
        "version": __version__,
        "service": "monthly-coupon-engine-api"
    }


@app.get("/", tags=["Root"])
def root():
    return {
        "message": "Monthly Coupon Engine API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health"
    }


# Import and include routers
from api.routers import customer_events, maintenance

app.include_router(customer_events.router, prefix="/api/v1", tags=["Customer Events"])
app.include_router(maintenance.router, prefix="/api/v1", tags=["Maintenance"])
