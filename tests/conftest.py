import pytest
from fastapi.testclient import TestClient

from storefront.core.cache import MemoryCache
from storefront.core.config import Settings
from storefront.database.carts import CartStore
from storefront.main import create_app
from storefront.models.checkout import CustomerForm


class FailingCache:
    """Cache whose backing storage is unavailable"""

    def __init__(self, fail_get: bool = True, fail_set: bool = True):
        self.fail_get = fail_get
        self.fail_set = fail_set

    def get(self, key):
        if self.fail_get:
            raise OSError("cache unavailable")
        return None

    def set(self, key, value):
        if self.fail_set:
            raise OSError("cache unavailable")

    def delete(self, key):
        if self.fail_set:
            raise OSError("cache unavailable")


@pytest.fixture()
def cache():
    return MemoryCache()


@pytest.fixture()
def store(cache):
    return CartStore(cache)


@pytest.fixture()
def customer():
    return CustomerForm(
        name="Rahim Uddin",
        email="rahim@example.com",
        phone="01712345678",
        address="House 12, Road 5, Dhanmondi",
        city="Dhaka",
        postal_code="1205",
    )


@pytest.fixture()
def settings():
    return Settings(cart_cache_path=None, order_intake_url=None, _env_file=None)


@pytest.fixture()
def client(settings, cache):
    app = create_app(settings, cart_cache=cache)
    return TestClient(app)
