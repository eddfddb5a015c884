"""Thin client for the Shopify Storefront GraphQL API.

Only what the storefront needs: the product catalog and checkout creation.
Errors are never retried here.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

import requests

from crushstore.modules.storefront.config import StoreConfig

logger = logging.getLogger(__name__)

DEFAULT_API_VERSION = "2024-01"
DEFAULT_TIMEOUT = 30.0
PAGE_SIZE = 250

PRODUCTS_QUERY = """
query Products($first: Int!, $after: String) {
  products(first: $first, after: $after) {
    pageInfo { hasNextPage endCursor }
    edges {
      node {
        id
        title
        description
        handle
        images(first: 20) { edges { node { url } } }
        variants(first: 100) {
          edges { node { id title price { amount currencyCode } } }
        }
      }
    }
  }
}
"""

CHECKOUT_CREATE_MUTATION = """
mutation CheckoutCreate($input: CheckoutCreateInput!) {
  checkoutCreate(input: $input) {
    checkout { id webUrl }
    checkoutUserErrors { code field message }
  }
}
"""

CHECKOUT_LINE_ITEMS_ADD_MUTATION = """
mutation CheckoutLineItemsAdd($checkoutId: ID!, $lineItems: [CheckoutLineItemInput!]!) {
  checkoutLineItemsAdd(checkoutId: $checkoutId, lineItems: $lineItems) {
    checkout { id webUrl }
    checkoutUserErrors { code field message }
  }
}
"""


class StorefrontAPIError(Exception):
    """Transport, HTTP or GraphQL level failure talking to Shopify."""

    def __init__(self, message: str, errors: Optional[List[Any]] = None):
        super().__init__(message)
        self.errors = errors or []


def normalize_domain(domain: str) -> str:
    v = (domain or "").strip()
    # remove protocol if provided and any stray slashes
    if v.lower().startswith("https://"):
        v = v[8:]
    elif v.lower().startswith("http://"):
        v = v[7:]
    return v.strip().strip("/")


def _nodes(connection: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
    if not connection:
        return []
    return [edge["node"] for edge in connection.get("edges") or []]


class StorefrontClient:
    def __init__(
        self,
        domain: str,
        access_token: str,
        api_version: str = DEFAULT_API_VERSION,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.domain = normalize_domain(domain)
        self.access_token = access_token
        self.api_version = api_version
        self.timeout = timeout
        self.session = session or requests.Session()
        self.graphql_url = f"https://{self.domain}/api/{self.api_version}/graphql.json"

    @classmethod
    def build(cls, store_config: StoreConfig, **kwargs: Any) -> "StorefrontClient":
        return cls(store_config.domain, store_config.access_token, **kwargs)

    def _headers(self) -> Dict[str, str]:
        return {
            "X-Shopify-Storefront-Access-Token": self.access_token,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def execute(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        try:
            r = self.session.post(
                self.graphql_url,
                headers=self._headers(),
                json={"query": query, "variables": variables or {}},
                timeout=self.timeout,
            )
            r.raise_for_status()
            body = r.json()
        except requests.exceptions.RequestException as e:
            raise StorefrontAPIError(f"Storefront request failed: {e}") from e
        except ValueError as e:
            raise StorefrontAPIError("Storefront returned a non-JSON response") from e

        if not isinstance(body, dict):
            raise StorefrontAPIError("Storefront returned an unexpected payload")
        if body.get("errors"):
            raise StorefrontAPIError(f"GraphQL errors: {body['errors']}", body["errors"])
        data = body.get("data")
        if data is None:
            raise StorefrontAPIError("Storefront response has no data")
        return data

    def fetch_all_products(self) -> List[Dict[str, Any]]:
        """Fetch every product, following cursors until the last page."""
        products: List[Dict[str, Any]] = []
        cursor = None
        while True:
            data = self.execute(PRODUCTS_QUERY, {"first": PAGE_SIZE, "after": cursor})
            connection = data.get("products") or {}
            for node in _nodes(connection):
                products.append(
                    {
                        **node,
                        "images": _nodes(node.get("images")),
                        "variants": _nodes(node.get("variants")),
                    }
                )
            page_info = connection.get("pageInfo") or {}
            if not page_info.get("hasNextPage"):
                break
            cursor = page_info.get("endCursor")
        logger.info("Fetched %d products from %s", len(products), self.domain)
        return products

    def _checkout_payload(self, data: Dict[str, Any], field: str) -> Dict[str, Any]:
        result = data.get(field) or {}
        user_errors = result.get("checkoutUserErrors") or []
        if user_errors:
            messages = "; ".join(str(e.get("message")) for e in user_errors)
            raise StorefrontAPIError(f"{field} rejected: {messages}", user_errors)
        checkout = result.get("checkout")
        if not checkout or not checkout.get("id"):
            raise StorefrontAPIError(f"{field} returned no checkout")
        return checkout

    def create_checkout(self) -> Dict[str, Any]:
        data = self.execute(CHECKOUT_CREATE_MUTATION, {"input": {}})
        return self._checkout_payload(data, "checkoutCreate")

    def add_line_items(self, checkout_id: str, line_items: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
        data = self.execute(
            CHECKOUT_LINE_ITEMS_ADD_MUTATION,
            {"checkoutId": checkout_id, "lineItems": list(line_items)},
        )
        checkout = self._checkout_payload(data, "checkoutLineItemsAdd")
        if not checkout.get("webUrl"):
            raise StorefrontAPIError("checkoutLineItemsAdd returned no webUrl")
        return checkout
