# warranty_hub/api/routers/health.py
from fastapi import APIRouter, HTTPException
from sqlalchemy.exc import SQLAlchemyError

from warranty_hub.data.database import ping
from warranty_hub.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    try:
        result = ping()
    except SQLAlchemyError as e:
        logger.error(f"Health check failed: {e}")
        raise HTTPException(status_code=503, detail="Database unavailable")
    return {"status": "ok", "db": result}
