"""
   Persistence-layer errors.
   Repositories wrap SQLAlchemy failures so the orchestrator can record a readable message.
"""


class PersistenceError(Exception):
    """Database write failed while storing products, catalog or job state."""
