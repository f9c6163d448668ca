# export entry, for scripts / quick table creation

from .session import engine, SessionLocal, get_db, dispose_engine
from app.db.model import *  # loads every model into Base.metadata
from .base import Base


"""
    Create the tables on an empty dev database:
        python -c "from app.db import create_all; create_all()"
    Production uses `alembic upgrade head`.
"""
def create_all() -> None:
    Base.metadata.create_all(bind=engine)
