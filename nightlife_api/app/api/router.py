"""
Top‑level router for the API.

This router aggregates the domain routers under a single prefix
(``/api``, applied in ``main.create_app``).  The paths are fixed by the
front-end, so the domains are included without prefixes of their own.
"""

from fastapi import APIRouter

from .endpoints import github, session, venues, yelp

router = APIRouter()

router.include_router(session.router, tags=["session"])
router.include_router(github.router, tags=["session"])
router.include_router(venues.router, tags=["venues"])
router.include_router(yelp.router, tags=["yelp"])
