import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from crushstore.app.config import Config
from crushstore.app.factory import create_app
from crushstore.modules.storefront.client import StorefrontClient


class StoreTestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    SHOPIFY_STORE_DOMAIN = "https://crush-test.myshopify.com"
    SHOPIFY_STOREFRONT_ACCESS_TOKEN = "test-token"


class EmptyShopifyConfig(StoreTestConfig):
    SHOPIFY_STORE_DOMAIN = ""
    SHOPIFY_STOREFRONT_ACCESS_TOKEN = ""


def raw_product(n, variants=1, price="19.5"):
    """A product record as StorefrontClient.fetch_all_products returns it."""
    return {
        "id": f"gid://shopify/Product/{n}",
        "title": f"Hoodie {n}",
        "description": f"Heavyweight hoodie #{n}",
        "handle": f"hoodie-{n}",
        "images": [{"url": f"https://cdn.example.com/{n}.png"}],
        "variants": [
            {
                "id": f"gid://shopify/ProductVariant/{n}{v}",
                "title": f"Size {v}",
                "price": {"amount": price, "currencyCode": "USD"},
            }
            for v in range(variants)
        ],
    }


class FakeStorefrontClient:
    """Records calls instead of talking to Shopify."""

    def __init__(self, products=None, fetch_error=None, create_error=None, add_error=None,
                 web_url="https://crush-test.myshopify.com/checkouts/abc"):
        self.products = products or []
        self.fetch_error = fetch_error
        self.create_error = create_error
        self.add_error = add_error
        self.web_url = web_url
        self.fetch_calls = 0
        self.create_calls = 0
        self.add_calls = []

    def fetch_all_products(self):
        self.fetch_calls += 1
        if self.fetch_error:
            raise self.fetch_error
        return list(self.products)

    def create_checkout(self):
        self.create_calls += 1
        if self.create_error:
            raise self.create_error
        return {"id": f"gid://shopify/Checkout/{self.create_calls}", "webUrl": self.web_url}

    def add_line_items(self, checkout_id, line_items):
        self.add_calls.append((checkout_id, list(line_items)))
        if self.add_error:
            raise self.add_error
        return {"id": checkout_id, "webUrl": self.web_url}


@pytest.fixture()
def fake_client():
    return FakeStorefrontClient(products=[raw_product(n) for n in range(1, 6)])


@pytest.fixture()
def use_fake_client(monkeypatch):
    """Make every bootstrap build the given fake; returns the config it was built with."""
    built = []

    def install(fake):
        def build(cls, store_config, **kwargs):
            built.append((store_config, kwargs))
            return fake

        monkeypatch.setattr(StorefrontClient, "build", classmethod(build))
        return built

    return install


@pytest.fixture()
def app():
    return create_app(StoreTestConfig)


@pytest.fixture()
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture()
def empty_client():
    app = create_app(EmptyShopifyConfig)
    with app.test_client() as client:
        yield client
