"""API v1 router aggregating all endpoint routers.

All endpoints are mounted under /api/v1/allergen-finder/ via the v1_prefix
configuration.
"""

from __future__ import annotations

from fastapi import APIRouter

from allergen_finder.api.v1.endpoints import health, search


router = APIRouter()

router.include_router(health.router)
router.include_router(search.router)
