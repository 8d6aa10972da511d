"""FastAPI dependencies for the services built in the application lifespan.

Usage in routes:
    from app.dependencies import get_catalog

    @router.get("/items")
    async def list_items(catalog: CatalogService = Depends(get_catalog)):
        ...
"""
from fastapi import Request

from app.services.catalog import CatalogService
from app.services.file_storage import FileStorageService


def get_catalog(request: Request) -> CatalogService:
    return request.app.state.catalog


def get_file_storage(request: Request) -> FileStorageService:
    return request.app.state.file_storage
