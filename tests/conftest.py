import pytest

from storefront.core.config import Settings
from storefront.core.session import SessionManager
from storefront.database.orders import OrderDatabase
from storefront.database.products import ProductDatabase
from storefront.models.cart import Cart
from storefront.models.checkout import CustomerInfo
from storefront.services.cart_service import CartService

from fakes import make_product


@pytest.fixture()
def catalog() -> ProductDatabase:
    return ProductDatabase(
        [
            make_product("P1", price=10.0, stock=10),
            make_product("P2", price=5.0, stock=3),
            make_product("P3", price=2.5, stock=100),
        ]
    )


@pytest.fixture()
def order_store(catalog) -> OrderDatabase:
    return OrderDatabase(catalog=catalog)


@pytest.fixture()
def customer() -> CustomerInfo:
    return CustomerInfo(name="Ada Lovelace", email="Ada@Example.com ")


@pytest.fixture()
def empty_cart() -> Cart:
    return Cart()


@pytest.fixture()
def settings() -> Settings:
    return Settings(persistence_timeout_seconds=1.0, order_number_max_attempts=3)


@pytest.fixture()
def service(catalog, order_store, settings) -> CartService:
    return CartService(catalog=catalog, orders=order_store, sessions=SessionManager(), settings=settings)
