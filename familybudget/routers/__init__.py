"""Router aggregation.

Each resource lives in its own module; ``register_routers`` mounts them all
under ``/api``.
"""

from fastapi import FastAPI

from . import auth, budgets, categories, reports, transactions, users

API_PREFIX = "/api"


def register_routers(app: FastAPI) -> None:
    """Attach all API routes to the FastAPI application."""

    for module in (auth, transactions, categories, budgets, reports, users):
        app.include_router(module.router, prefix=API_PREFIX)
