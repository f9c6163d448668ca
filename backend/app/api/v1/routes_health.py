# health check (optionally pings the DB)

from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.db.session import engine

router = APIRouter(tags=["health"])


@router.get("/health")
def health(db: bool = False):
    if not db:
        return {"status": "ok"}
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        return {"status": "degraded", "db": str(e.__class__.__name__)}
    return {"status": "ok", "db": "ok"}
