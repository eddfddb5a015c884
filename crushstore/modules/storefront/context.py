from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from typing import Optional

from flask import Flask

from crushstore.modules.storefront.client import StorefrontClient
from crushstore.modules.storefront.config import StoreConfig


@dataclass
class StorefrontContext:
    """Handle to the Storefront client, passed explicitly to checkout.

    ``client`` is ``None`` when the store config is incomplete.
    """

    client: Optional[StorefrontClient] = None

    @property
    def ready(self) -> bool:
        return self.client is not None


def client_factory(app: Flask):
    return partial(
        StorefrontClient.build,
        api_version=app.config.get("SHOPIFY_API_VERSION", "2024-01"),
        timeout=app.config.get("SHOPIFY_TIMEOUT", 30.0),
    )


def context_for(app: Flask) -> StorefrontContext:
    """Build a request-scoped context from the app's store config.

    Building the client makes no network call.
    """
    store_config = StoreConfig.from_mapping(app.config)
    if not store_config.is_complete:
        return StorefrontContext()
    return StorefrontContext(client=client_factory(app)(store_config))
