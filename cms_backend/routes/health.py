"""Health check route."""

from fastapi import APIRouter

from cms_backend.config import get_settings
from cms_backend.dates import iso_timestamp

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "OK",
        "timestamp": iso_timestamp(),
        "environment": get_settings().environment,
    }
