"""Catalog bootstrap: config -> Storefront client -> products -> view.

Runs once per page load. ``LOADING`` ends in ``READY`` or in the terminal
``CONFIG_ERROR``; nothing is retried.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Protocol, Sequence, Tuple

import requests

from crushstore.app.common.errors import CatalogFetchFailed, ConfigurationMissing, StorefrontError
from crushstore.modules.catalog.models import Product, map_product
from crushstore.modules.storefront.client import StorefrontClient
from crushstore.modules.storefront.config import StoreConfig
from crushstore.modules.storefront.context import StorefrontContext

logger = logging.getLogger(__name__)

FEATURED_COUNT = 3
CONFIG_PATH = "/api/config/shopify"


class CatalogState(enum.Enum):
    LOADING = "loading"
    READY = "ready"
    CONFIG_ERROR = "config_error"


@dataclass
class CatalogView:
    state: CatalogState = CatalogState.LOADING
    products: Sequence[Product] = field(default_factory=tuple)
    featured: Sequence[Product] = field(default_factory=tuple)
    error: Optional[StorefrontError] = None

    @property
    def is_empty(self) -> bool:
        return self.state is CatalogState.READY and not self.products

    def to_dict(self) -> dict:
        return {
            "state": self.state.value,
            "featured": [p.to_dict() for p in self.featured],
            "products": [p.to_dict() for p in self.products],
        }


def partition(products: Sequence[Product], featured_count: int = FEATURED_COUNT) -> Tuple[Tuple[Product, ...], Tuple[Product, ...]]:
    """Return ``(featured, catalog)``; featured is the first few in platform order."""
    catalog = tuple(products)
    return catalog[:featured_count], catalog


class ConfigSource(Protocol):
    def load(self) -> StoreConfig: ...


class AppConfigSource:
    """Reads the same values ``/api/config/shopify`` serves, in-process."""

    def __init__(self, app_config: Mapping[str, Any]):
        self.app_config = app_config

    def load(self) -> StoreConfig:
        return StoreConfig.from_mapping(self.app_config)


class HttpConfigSource:
    """Fetches ``/api/config/shopify`` from a running server."""

    def __init__(self, base_url: str, session: Optional[requests.Session] = None, timeout: float = 10.0):
        self.url = base_url.rstrip("/") + CONFIG_PATH
        self.session = session or requests.Session()
        self.timeout = timeout

    def load(self) -> StoreConfig:
        r = self.session.get(self.url, timeout=self.timeout)
        r.raise_for_status()
        return StoreConfig.from_payload(r.json())


ClientFactory = Callable[[StoreConfig], StorefrontClient]


class CatalogBootstrapper:
    def __init__(self, config_source: ConfigSource, client_factory: Optional[ClientFactory] = None):
        self.config_source = config_source
        self.client_factory = client_factory or StorefrontClient.build

    def _fail(self, error: StorefrontError) -> Tuple[CatalogView, StorefrontContext]:
        return CatalogView(state=CatalogState.CONFIG_ERROR, error=error), StorefrontContext()

    def run(self) -> Tuple[CatalogView, StorefrontContext]:
        # LOADING until one of the returns below
        try:
            store_config = self.config_source.load()
        except Exception as e:
            logger.exception("Shopify config fetch error")
            err = CatalogFetchFailed(f"config retrieval failed: {e}")
            err.__cause__ = e
            return self._fail(err)

        if not store_config.is_complete:
            missing = [
                name
                for name, value in (("domain", store_config.domain), ("storefrontAccessToken", store_config.access_token))
                if not value.strip()
            ]
            logger.error("Shopify configuration missing: %s", ", ".join(missing))
            return self._fail(ConfigurationMissing(f"missing {', '.join(missing)}"))

        try:
            client = self.client_factory(store_config)
            raw_products = client.fetch_all_products()
            products = [map_product(raw) for raw in raw_products]
        except Exception as e:
            logger.exception("Shopify fetch error")
            err = CatalogFetchFailed(f"catalog fetch failed: {e}")
            err.__cause__ = e
            return self._fail(err)

        featured, catalog = partition(products)
        view = CatalogView(state=CatalogState.READY, products=catalog, featured=featured)
        logger.info("Catalog ready: %d products, %d featured", len(catalog), len(featured))
        return view, StorefrontContext(client=client)
