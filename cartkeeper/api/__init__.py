# cartkeeper/api/__init__.py
from fastapi import FastAPI
from cartkeeper.api.routers import carts
from cartkeeper.api.routers.health import router as health_router


def create_app() -> FastAPI:
    app = FastAPI(
        title="Cart Service",
        version="1.0.0",
    )
    app.include_router(health_router)
    app.include_router(carts.router)
    return app
