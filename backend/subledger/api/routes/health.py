"""Health check endpoints."""
from fastapi import APIRouter

from subledger.db.session import check_db_connection

router = APIRouter()


@router.get("/health")
def health_check() -> dict:
    """
    Health check endpoint.
    Returns status and whether the database answers.
    """
    return {"status": "ok", "database": check_db_connection()}
