"""
RC Hobby Storefront

Cart and checkout service for the storefront. Carts live in memory and are
mirrored to a durable cache; checkout submits orders to an order-intake API,
which this service also provides at /api/orders.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .core.cache import Cache
from .core.config import Settings, get_settings
from .database.carts import CartDatabase
from .database.orders import OrderDatabase
from .routes import cart_router, checkout_router, orders_router
from .services.order_client import OrderIntakeClient

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

IN_PROCESS_BASE_URL = "http://storefront"


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    settings: Settings = app.state.settings
    logger.info("Storefront starting up...")
    logger.info(f"Cart cache: {settings.cart_cache_path or 'memory'}")
    logger.info(f"Order intake: {settings.order_intake_url or 'in-process'}")
    yield
    await app.state.order_client.close()
    logger.info("Storefront shutting down...")


def create_app(
    settings: Optional[Settings] = None,
    cart_cache: Optional[Cache] = None,
    order_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Settings to use instead of the environment
        cart_cache: Cache for cart snapshots; built from settings when omitted
        order_transport: Transport for order-intake requests. Defaults to the
            app itself when no order-intake URL is configured.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Cart and checkout service for the RC hobby storefront",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if order_transport is None and not settings.order_intake_url:
        order_transport = httpx.ASGITransport(app=app)

    app.state.settings = settings
    app.state.cart_db = CartDatabase(
        cart_cache if cart_cache is not None else settings.build_cart_cache(),
        key_prefix=settings.cart_cache_key,
    )
    app.state.order_db = OrderDatabase()
    app.state.order_client = OrderIntakeClient(
        settings.order_intake_url or IN_PROCESS_BASE_URL,
        timeout=settings.order_intake_timeout,
        transport=order_transport,
    )

    app.include_router(cart_router)
    app.include_router(checkout_router)
    app.include_router(orders_router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {"status": "healthy", "service": "storefront"}

    return app


def main() -> None:
    import uvicorn

    settings = get_settings()
    configure_logging(settings)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
    )


if __name__ == "__main__":
    main()
