from __future__ import annotations

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings
from .registry import UserRegistry
from .routers import actions as actions_router
from .routers import users as users_router

# -----------------------------
# FastAPI application factory
# -----------------------------

def create_app(registry: Optional[UserRegistry] = None, settings: Optional[Settings] = None) -> FastAPI:
    """Build the HTTP application around *registry*.

    The registry lives on ``app.state`` for the lifetime of the process;
    every handler reaches it through :func:`gamebackend.auth_utils.get_registry`.
    Serve with ``uvicorn --factory gamebackend.app:create_app`` or
    ``python -m gamebackend``.
    """
    app = FastAPI(title="Game Backend")
    app.state.registry = registry if registry is not None else UserRegistry()
    app.state.settings = settings if settings is not None else Settings.from_env()

    # Allow all origins during development – adjust for production.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(users_router.router)
    app.include_router(actions_router.router)

    return app


__all__ = ["create_app"]
