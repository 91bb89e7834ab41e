# warranty_hub/api/__init__.py
from fastapi import APIRouter

from warranty_hub.api.routers import (
    auth,
    categories,
    contact,
    health,
    products,
    serials,
    subcategories,
    warranty,
)


def build_api_router() -> APIRouter:
    api = APIRouter(prefix="/api")
    api.include_router(health.router)
    api.include_router(auth.router)
    api.include_router(categories.router)
    api.include_router(subcategories.router)
    api.include_router(serials.router)
    api.include_router(products.router)
    api.include_router(warranty.router)
    api.include_router(contact.router)
    return api
