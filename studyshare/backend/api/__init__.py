"""
HTTP routers.

Page routers render templates; a few endpoints under the same paths answer
JSON for the browser scripts.
"""

from fastapi import APIRouter

from studyshare.backend.api import admin, health
from studyshare.backend.api.pages import assistant, auth, notes, playground
from studyshare.backend.core.config_schema import FeaturesSchema


def build_router(features: FeaturesSchema) -> APIRouter:
    """Aggregate the routers, leaving out the features switched off in features.yaml."""
    router = APIRouter()

    router.include_router(health.router, tags=["health"])
    router.include_router(auth.router, tags=["auth"])
    router.include_router(notes.router, tags=["notes"])
    router.include_router(admin.router, prefix="/admin", tags=["admin"])

    if features.playground_enabled:
        router.include_router(playground.router, tags=["playground"])
    if features.assistant_enabled:
        router.include_router(assistant.router, tags=["assistant"])

    return router
