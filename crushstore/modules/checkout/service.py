from __future__ import annotations

import logging
from dataclasses import dataclass

from crushstore.app.common.errors import CheckoutFailed, ClientNotReady
from crushstore.modules.storefront.context import StorefrontContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckoutResult:
    checkout_id: str
    web_url: str


class CheckoutInitiator:
    """Creates a fresh Shopify checkout for one variant and returns its hosted URL.

    Sessions are never reused; a session orphaned by a failed line-item add
    is left for Shopify to expire.
    """

    def __init__(self, context: StorefrontContext):
        self.context = context

    def start(self, variant_id: str, quantity: int = 1) -> CheckoutResult:
        if not self.context.ready:
            logger.warning("Checkout attempted before the Shopify client was initialized")
            raise ClientNotReady("Shopify client not initialized")
        if not variant_id:
            raise CheckoutFailed("variant_id is required")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise CheckoutFailed(f"quantity must be an integer >= 1, got {quantity!r}")

        client = self.context.client
        try:
            checkout = client.create_checkout()
            updated = client.add_line_items(checkout["id"], [{"variantId": variant_id, "quantity": quantity}])
        except Exception as e:
            logger.exception("Checkout failed for variant %s", variant_id)
            raise CheckoutFailed(f"checkout failed: {e}") from e

        logger.info("Checkout %s created for variant %s x%d", updated["id"], variant_id, quantity)
        return CheckoutResult(checkout_id=updated["id"], web_url=updated["webUrl"])
