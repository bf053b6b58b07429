"""API route modules."""

from stockledger.api.routes.health import router as health_router
from stockledger.api.routes.inventory import router as inventory_router
from stockledger.api.routes.products import router as products_router
from stockledger.api.routes.stock_movements import router as stock_movements_router
from stockledger.api.routes.warehouses import router as warehouses_router

__all__ = [
    "health_router",
    "inventory_router",
    "products_router",
    "stock_movements_router",
    "warehouses_router",
]
