"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.businesses import router as businesses_router
from api.v1.routes.dev import router as dev_router
from api.v1.routes.sub_areas import business_sub_areas_router
from api.v1.routes.sub_areas import router as sub_areas_router
from api.v1.routes.todos import files_router
from api.v1.routes.todos import router as todos_router


def build_router(include_dev: bool = False) -> APIRouter:
    """Assemble the v1 router; reset routes only when ``include_dev`` is set."""
    router = APIRouter()
    router.include_router(businesses_router)
    router.include_router(business_sub_areas_router)
    router.include_router(sub_areas_router)
    router.include_router(todos_router)
    router.include_router(files_router)
    if include_dev:
        router.include_router(dev_router)
    return router
