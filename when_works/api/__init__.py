from fastapi import APIRouter

from when_works.api.routers import system


def create_api_router(prefix: str = "") -> APIRouter:
    router = APIRouter(prefix=prefix)
    router.include_router(system.router, tags=["System"])
    return router


__all__ = [
    "create_api_router",
]
