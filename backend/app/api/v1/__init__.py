from fastapi import APIRouter

from .routes_health import router as health_router
from .catalog_jobs import router as catalog_jobs_router


api_v1 = APIRouter()
api_v1.include_router(health_router)          # /health
api_v1.include_router(catalog_jobs_router)    # /catalog-jobs
