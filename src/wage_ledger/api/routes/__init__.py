"""API routes."""

from wage_ledger.api.routes.health import router as health_router
from wage_ledger.api.routes.labour import router as labour_router
from wage_ledger.api.routes.ledger import router as ledger_router
from wage_ledger.api.routes.materials import router as materials_router
from wage_ledger.api.routes.wage_rates import router as wage_rates_router
from wage_ledger.api.routes.wages import router as wages_router

__all__ = [
    "health_router",
    "labour_router",
    "ledger_router",
    "materials_router",
    "wage_rates_router",
    "wages_router",
]
