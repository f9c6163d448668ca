# aggregate all models so alembic can discover them

from .catalog_job import CatalogJob, JobStatus
from .catalog import Catalog, CatalogProduct, CatalogStatus

__all__ = [
    "CatalogJob", "JobStatus",
    "Catalog", "CatalogProduct", "CatalogStatus",
]
