"""Store credentials exposed to the storefront.

The provider never validates; callers check ``StoreConfig.is_complete``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from flask import Blueprint, current_app, jsonify

bp = Blueprint("storefront_config", __name__)


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


@dataclass(frozen=True)
class StoreConfig:
    domain: str = ""
    access_token: str = ""

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> "StoreConfig":
        return cls(
            domain=_as_str(config.get("SHOPIFY_STORE_DOMAIN")),
            access_token=_as_str(config.get("SHOPIFY_STOREFRONT_ACCESS_TOKEN")),
        )

    @classmethod
    def from_payload(cls, payload: Any) -> "StoreConfig":
        """Parse the ``/api/config/shopify`` document."""
        if not isinstance(payload, Mapping):
            return cls()
        return cls(
            domain=_as_str(payload.get("domain")),
            access_token=_as_str(payload.get("storefrontAccessToken")),
        )

    def to_payload(self) -> dict[str, str]:
        return {"domain": self.domain, "storefrontAccessToken": self.access_token}

    @property
    def is_complete(self) -> bool:
        return bool(self.domain.strip()) and bool(self.access_token.strip())


@bp.get("/config/shopify")
def shopify_config():
    """GET /api/config/shopify - Store domain and Storefront access token.

    Always 200, even when the values are empty.
    """
    return jsonify(StoreConfig.from_mapping(current_app.config).to_payload()), 200
