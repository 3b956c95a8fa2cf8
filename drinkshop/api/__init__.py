# drinkshop/api/__init__.py
from fastapi import FastAPI

from drinkshop.api.routers import carts, health, orders, vouchers


def create_app() -> FastAPI:
    app = FastAPI(
        title="Drink Shop Cart Service",
        version="1.0.0",
    )

    app.include_router(health.router)
    app.include_router(carts.router)
    app.include_router(vouchers.router)
    app.include_router(orders.router)

    return app
