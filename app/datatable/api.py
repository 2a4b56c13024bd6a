from fastapi import APIRouter

from app.datatable.routers.health import router as health_router
from app.datatable.routers.tables import router as tables_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(tables_router, tags=["datatable"])
