from __future__ import annotations

from flask import Blueprint, current_app, flash, redirect, request, url_for

from crushstore.app.common.errors import CheckoutFailed, ClientNotReady, abort_json
from crushstore.app.common.request_context import current_request_id
from crushstore.app.common.validation import get_json, require_fields
from crushstore.modules.checkout.service import CheckoutInitiator
from crushstore.modules.storefront.context import context_for

bp = Blueprint("checkout", __name__)
api_bp = Blueprint("checkout_api", __name__)


def _parse_quantity(raw) -> int:
    if raw in (None, ""):
        return 1
    try:
        return int(raw)
    except (TypeError, ValueError) as e:
        raise CheckoutFailed(f"invalid quantity {raw!r}") from e


@bp.post("/checkout")
def start_checkout():
    """POST /checkout - form post from a product card; redirects to Shopify."""
    initiator = CheckoutInitiator(context_for(current_app))
    try:
        quantity = _parse_quantity(request.form.get("quantity"))
        result = initiator.start(request.form.get("variant_id", "").strip(), quantity)
    except (ClientNotReady, CheckoutFailed) as e:
        current_app.logger.warning("checkout not started (%s) request_id=%s", e.code, current_request_id())
        flash(e.user_message, "error")
        return redirect(url_for("ui.home"))
    return redirect(result.web_url)


@api_bp.post("/checkout")
def create_checkout():
    """POST /api/checkout - JSON variant of the form post.

    Body: {"variantId": str, "quantity": int (default 1)}
    """
    data = get_json()
    require_fields(data, ["variantId"])
    quantity = data.get("quantity", 1)
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        abort_json(400, "validation_error", "Quantity must be an integer >= 1")

    initiator = CheckoutInitiator(context_for(current_app))
    try:
        result = initiator.start(str(data["variantId"]), quantity)
    except ClientNotReady as e:
        abort_json(503, e.code, e.user_message)
    except CheckoutFailed as e:
        abort_json(502, e.code, e.user_message)
    return {"checkoutId": result.checkout_id, "webUrl": result.web_url}, 201
