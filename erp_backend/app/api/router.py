from fastapi import APIRouter
from erp_backend.app.api.endpoints import analytics, inventory

api_router = APIRouter()

api_router.include_router(
    analytics.router, prefix="/analytics", tags=["Analytics"]
)

inventory_router = APIRouter()

inventory_router.include_router(
    inventory.router, prefix="/inventory", tags=["Inventory"]
)
