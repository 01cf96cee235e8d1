"""Health check endpoints."""

from fastapi import APIRouter

from .... import __version__

router = APIRouter()


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "service": "fse-compliance"}


@router.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "FSE Compliance Assessment API", "version": __version__}
