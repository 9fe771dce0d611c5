"""FastAPI dependencies resolving the per-application stores and clients"""

from fastapi import Request

from ..database.carts import CartDatabase
from ..database.orders import OrderDatabase
from ..services.checkout import OrderMaterializer
from ..services.order_client import OrderIntakeClient


def get_cart_db(request: Request) -> CartDatabase:
    return request.app.state.cart_db


def get_order_db(request: Request) -> OrderDatabase:
    return request.app.state.order_db


def get_order_client(request: Request) -> OrderIntakeClient:
    return request.app.state.order_client


def get_materializer(request: Request) -> OrderMaterializer:
    return OrderMaterializer(request.app.state.order_client)
