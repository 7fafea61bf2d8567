"""Health check endpoints"""

import os
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException

from registration_intake.config import config
from registration_intake.services import get_registration_store
from registration_intake.services.registration_store import RegistrationStore

health = APIRouter(tags=["Health"])


@health.get("/health")
async def health_check():
    """Basic health check endpoint"""
    return {
        "status": "healthy",
        "service": "registration-intake",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": config["environment"],
    }


@health.get("/health/detailed")
async def detailed_health_check(
    store: RegistrationStore = Depends(get_registration_store),
):
    """Detailed health check covering the data directory"""
    health_status = {
        "status": "healthy",
        "service": "registration-intake",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": config["environment"],
        "checks": {},
    }

    # Data directory must exist (or be creatable) and be writable
    try:
        store.ensure_data_dir()
        writable = os.access(store.data_dir, os.W_OK)
        health_status["checks"]["storage"] = "healthy" if writable else "unhealthy"
        if not writable:
            health_status["status"] = "unhealthy"
    except Exception as e:
        health_status["checks"]["storage"] = f"unhealthy: {str(e)}"
        health_status["status"] = "unhealthy"

    # Collection file must be readable when present
    try:
        health_status["checks"]["registrations"] = len(store.load())
    except Exception as e:
        health_status["checks"]["registrations"] = f"unhealthy: {str(e)}"
        health_status["status"] = "unhealthy"

    if health_status["status"] == "unhealthy":
        raise HTTPException(status_code=503, detail=health_status)

    return health_status
