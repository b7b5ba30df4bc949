# gifty/api/__init__.py
from fastapi import APIRouter

from gifty.api.routers import admin, auth, cart, giftboxes, orders, products, readyboxes

api_router = APIRouter(prefix="/api")
api_router.include_router(auth.router)
api_router.include_router(products.router)
api_router.include_router(cart.router)
api_router.include_router(orders.router)
api_router.include_router(giftboxes.router)
api_router.include_router(readyboxes.router)
api_router.include_router(admin.router)
