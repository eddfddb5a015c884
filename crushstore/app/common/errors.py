from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class ApiError(Exception):
    """Raise to return a consistent JSON error response."""

    status_code: int
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None

    def to_dict(self, request_id: str | None = None) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details or {},
                "request_id": request_id,
            }
        }
        return payload


def abort_json(status_code: int, code: str, message: str, details: Optional[Dict[str, Any]] = None) -> None:
    """Convenience wrapper."""
    raise ApiError(status_code=status_code, code=code, message=message, details=details)


class StorefrontError(Exception):
    """Base class for storefront failures.

    ``user_message`` is what the shopper sees; the exception message and
    its ``__cause__`` are for the logs.
    """

    code = "storefront_error"
    user_message = "Something went wrong. Please try again later."


class ConfigurationMissing(StorefrontError):
    code = "configuration_missing"
    user_message = "Unable to load Shopify configuration."


class CatalogFetchFailed(StorefrontError):
    code = "catalog_fetch_failed"
    user_message = "Unable to load Shopify configuration."


class CheckoutFailed(StorefrontError):
    code = "checkout_failed"
    user_message = "Could not start checkout. Please try again."


class ClientNotReady(StorefrontError):
    code = "client_not_ready"
    user_message = "Shopify client not initialized"
