from fastapi import APIRouter

from app.api.v1.endpoints import (
    debug,
    documents,
    labels,
    notifications,
    products,
    raw_materials,
    search,
    shelf_life,
    suppliers,
    tasks,
    templates,
    users,
)

# Create API router
api_router = APIRouter()

# Include routers
api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(documents.router, prefix="/documents", tags=["Documents"])
api_router.include_router(products.router, prefix="/products", tags=["Products"])
api_router.include_router(templates.router, prefix="/templates", tags=["Templates"])
api_router.include_router(tasks.router, prefix="/tasks", tags=["Tasks"])
api_router.include_router(labels.router, prefix="/labels", tags=["Labels"])
api_router.include_router(raw_materials.router, prefix="/raw-materials", tags=["Catalog"])
api_router.include_router(suppliers.router, prefix="/suppliers", tags=["Catalog"])
api_router.include_router(shelf_life.router, prefix="/shelf-life", tags=["Catalog"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])
api_router.include_router(search.router, prefix="/search", tags=["Search"])
api_router.include_router(debug.router, prefix="/debug", tags=["Diagnostics"])

__all__ = ["api_router"]
