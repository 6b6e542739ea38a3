"""API router registration helpers.

Routers are imported lazily inside `register_routes` so importing a single
router module (e.g. in tests) does not pull in the rest of the API.
"""

from fastapi import FastAPI


def register_routes(app: FastAPI) -> None:
    """Attach all API routers (lazy imports)."""
    from codepair.api.sessions import router as sessions_router
    from codepair.api.system import router as system_router

    routers = [
        system_router,
        sessions_router,
    ]
    for router in routers:
        app.include_router(router)
