# run with: pytest tests/test_checkout.py -v

import pytest

from conftest import EmptyShopifyConfig, FakeStorefrontClient, StoreTestConfig
from crushstore.app.common.errors import CheckoutFailed, ClientNotReady
from crushstore.app.factory import create_app
from crushstore.modules.checkout.service import CheckoutInitiator
from crushstore.modules.storefront.context import StorefrontContext, context_for

WEB_URL = "https://crush-test.myshopify.com/checkouts/abc"


# CHK-001: no client handle -> no network call, immediate failure
def test_no_client_fails_without_network():
    with pytest.raises(ClientNotReady):
        CheckoutInitiator(StorefrontContext()).start("v1")


# CHK-002: one create, one add with quantity 1, returns the hosted URL
def test_successful_checkout():
    fake = FakeStorefrontClient(web_url=WEB_URL)

    result = CheckoutInitiator(StorefrontContext(fake)).start("v1")

    assert fake.create_calls == 1
    assert fake.add_calls == [("gid://shopify/Checkout/1", [{"variantId": "v1", "quantity": 1}])]
    assert result.web_url == WEB_URL


# CHK-003: each call creates its own session
def test_sessions_are_not_reused():
    fake = FakeStorefrontClient()
    initiator = CheckoutInitiator(StorefrontContext(fake))

    initiator.start("v1")
    initiator.start("v2", 3)

    assert fake.create_calls == 2
    assert [c[0] for c in fake.add_calls] == ["gid://shopify/Checkout/1", "gid://shopify/Checkout/2"]
    assert fake.add_calls[1][1] == [{"variantId": "v2", "quantity": 3}]


# CHK-004: create rejection -> CheckoutFailed, no line items added
def test_create_failure():
    boom = RuntimeError("platform rejected")
    fake = FakeStorefrontClient(create_error=boom)

    with pytest.raises(CheckoutFailed) as exc:
        CheckoutInitiator(StorefrontContext(fake)).start("v1")

    assert exc.value.__cause__ is boom
    assert fake.add_calls == []


def test_add_failure_abandons_session():
    fake = FakeStorefrontClient(add_error=RuntimeError("invalid variant"))
    with pytest.raises(CheckoutFailed):
        CheckoutInitiator(StorefrontContext(fake)).start("bogus")
    assert fake.create_calls == 1


@pytest.mark.parametrize("variant_id, quantity", [("", 1), ("v1", 0), ("v1", -2), ("v1", True)])
def test_invalid_input_makes_no_calls(variant_id, quantity):
    fake = FakeStorefrontClient()
    with pytest.raises(CheckoutFailed):
        CheckoutInitiator(StorefrontContext(fake)).start(variant_id, quantity)
    assert fake.create_calls == 0


def test_context_built_from_complete_config(app, use_fake_client):
    fake = FakeStorefrontClient()
    built = use_fake_client(fake)

    context = context_for(app)

    assert context.client is fake
    assert built[0][0].domain == "https://crush-test.myshopify.com"
    assert built[0][1] == {"api_version": app.config["SHOPIFY_API_VERSION"], "timeout": app.config["SHOPIFY_TIMEOUT"]}


def test_context_not_ready_on_incomplete_config(use_fake_client):
    built = use_fake_client(FakeStorefrontClient())

    context = context_for(create_app(EmptyShopifyConfig))

    assert not context.ready
    assert built == []


# --- HTTP surfaces ---

# CHK-005: a fresh app with complete config checks out without any prior page load
def test_form_checkout_on_fresh_app(use_fake_client):
    fake = FakeStorefrontClient(web_url=WEB_URL)
    use_fake_client(fake)
    app = create_app(StoreTestConfig)

    with app.test_client() as c:
        r = c.post("/checkout", data={"variant_id": "v1"})

    assert r.status_code == 302
    assert r.headers["Location"] == WEB_URL
    assert fake.fetch_calls == 0
    assert fake.create_calls == 1
    assert fake.add_calls[0][1] == [{"variantId": "v1", "quantity": 1}]


def test_form_checkout_without_client_flashes(empty_client):
    r = empty_client.post("/checkout", data={"variant_id": "v1"}, follow_redirects=True)

    assert r.status_code == 200
    assert b"Shopify client not initialized" in r.data
    assert b'data-testid="notification"' in r.data


def test_form_checkout_failure_does_not_redirect_to_shopify(client, use_fake_client):
    use_fake_client(FakeStorefrontClient(create_error=RuntimeError("boom")))

    r = client.post("/checkout", data={"variant_id": "v1"})

    assert r.status_code == 302
    assert r.headers["Location"].endswith("/")
    r = client.get("/")
    assert b"Could not start checkout" in r.data


def test_form_checkout_bad_quantity(client, use_fake_client):
    fake = FakeStorefrontClient()
    use_fake_client(fake)

    r = client.post("/checkout", data={"variant_id": "v1", "quantity": "lots"})

    assert r.status_code == 302
    assert fake.create_calls == 0


def test_api_checkout_success(client, use_fake_client):
    use_fake_client(FakeStorefrontClient(web_url=WEB_URL))

    r = client.post("/api/checkout", json={"variantId": "v1", "quantity": 2})

    assert r.status_code == 201
    assert r.json["webUrl"] == WEB_URL


def test_api_checkout_client_not_ready(empty_client):
    r = empty_client.post("/api/checkout", json={"variantId": "v1"})
    assert r.status_code == 503
    assert r.json["error"]["code"] == "client_not_ready"


def test_api_checkout_platform_failure(client, use_fake_client):
    use_fake_client(FakeStorefrontClient(add_error=RuntimeError("rejected")))

    r = client.post("/api/checkout", json={"variantId": "v1"})

    assert r.status_code == 502
    assert r.json["error"]["code"] == "checkout_failed"


@pytest.mark.parametrize("body", [{}, {"variantId": ""}, {"variantId": "v1", "quantity": 0}, {"variantId": "v1", "quantity": "2"}])
def test_api_checkout_validation(client, body):
    r = client.post("/api/checkout", json=body)
    assert r.status_code == 400
