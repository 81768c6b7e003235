"""
handlers/health_handler.py
--------------------------
Liveness and readiness checks.
`/api/health` never touches the database; `/api/dbcheck` pings it.
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from db.connection import Database
from handlers.dependencies import get_database
from utils.errors import StorageError
from utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/api", tags=["Health"])


@router.get("/health")
def health_check() -> dict:
    return {"status": "ok", "message": "Server is running"}


@router.get("/dbcheck")
def db_check(database: Database = Depends(get_database)) -> JSONResponse:
    """Report whether the database answers a ping."""
    try:
        database.ping()
    except StorageError as e:
        logger.warning(f"Database ping failed: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"status": "error", "message": "Database connection failed"},
        )
    return JSONResponse(content={"status": "ok", "message": "Database connection successful"})
