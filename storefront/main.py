"""
Storefront Checkout Application

Session carts that are reconciled against the live catalog before they are
turned into orders.
"""

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

from .core.config import get_settings
from .routes import products_router, cart_router, checkout_router
from .services.cart_service import get_cart_service

# Load environment variables
load_dotenv()

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

SESSION_SWEEP_INTERVAL_SECONDS = 3600


async def _sweep_sessions() -> None:
    """Drop idle session carts once an hour"""
    service = get_cart_service()
    while True:
        await asyncio.sleep(SESSION_SWEEP_INTERVAL_SECONDS)
        service.cleanup_sessions()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    settings = get_settings()
    logger.info(f"{settings.app_name} starting up...")
    logger.info(
        f"Order numbers: prefix={settings.order_number_prefix}, "
        f"max attempts={settings.order_number_max_attempts}, "
        f"commit timeout={settings.persistence_timeout_seconds}s"
    )
    sweeper = asyncio.create_task(_sweep_sessions())
    yield
    sweeper.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await sweeper
    logger.info(f"{settings.app_name} shutting down...")


# Create FastAPI app
app = FastAPI(
    title="Storefront Checkout",
    description="Session carts, catalog reconciliation and checkout",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(products_router)
app.include_router(cart_router)
app.include_router(checkout_router)


@app.get("/")
async def home():
    """API index"""
    return {
        "message": "Storefront Checkout API",
        "docs": "/docs",
        "endpoints": {
            "products": "/api/products",
            "cart": "/api/cart",
            "checkout": "/api/checkout",
        },
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "storefront-checkout"}


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "storefront.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
