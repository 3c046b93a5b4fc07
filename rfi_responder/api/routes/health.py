"""Detailed health endpoint."""

from fastapi import APIRouter, Request

from rfi_responder.config import settings
from rfi_responder.database.client import db_client

router = APIRouter()


@router.get("/health/detailed", tags=["Health"])
async def detailed_health(request: Request):
    """Health check including the database and the background pipeline."""
    db_health = await db_client.health_check()

    dispatcher = getattr(request.app.state, "dispatcher", None)
    status_store = getattr(request.app.state, "status_store", None)

    return {
        "status": "healthy" if db_health["status"] == "healthy" else "degraded",
        "database": db_health,
        "pipeline": {
            "in_flight": dispatcher.in_flight if dispatcher else 0,
            "tracked_documents": len(status_store) if status_store is not None else 0,
        },
        "llm_provider": settings.llm_provider,
        "version": settings.app_version,
    }
