# app/routers/health.py
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter()


def check_database(db: Session) -> dict:
    try:
        db.execute(text("SELECT 1"))
        return {"status": "up"}
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        return {"status": "down", "error": str(e)}


def health_response(checks: dict) -> JSONResponse:
    healthy = all(check["status"] == "up" for check in checks.values())
    return JSONResponse(
        status_code=200 if healthy else 503,
        content={"status": "ok" if healthy else "error", "details": checks},
    )


@router.get("")
def health(db: Session = Depends(get_db)):
    return health_response({"database": check_database(db)})


@router.get("/liveness")
def liveness():
    return {"status": "ok"}


@router.get("/readiness")
def readiness(db: Session = Depends(get_db)):
    return health_response({"database": check_database(db)})
