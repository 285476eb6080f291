"""V1 API router — aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from atelier.presentation.api.v1.endpoints.health import router as health_router
from atelier.presentation.api.v1.endpoints.data import router as data_router
from atelier.presentation.api.v1.endpoints.catalog import router as catalog_router
from atelier.presentation.api.v1.endpoints.quotes import router as quotes_router
from atelier.presentation.api.v1.endpoints.pricing import router as pricing_router
from atelier.presentation.api.v1.endpoints.ledger import router as ledger_router
from atelier.presentation.api.v1.endpoints.settings import router as settings_router

router = APIRouter(prefix="/v1")
router.include_router(health_router)
router.include_router(data_router)
router.include_router(catalog_router)
router.include_router(quotes_router)
router.include_router(pricing_router)
router.include_router(ledger_router)
router.include_router(settings_router)
