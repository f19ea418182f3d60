from fastapi.testclient import TestClient

from backend import config
from backend.checkout import initiator
from backend.checkout.views import EMPTY_CART


def _add(client, product_id):
    return client.post("/api/v1/cart/items", json={"product_id": product_id})


def test_products_page_lists_catalog(client):
    r = client.get("/products")
    assert r.status_code == 200
    assert "Chair" in r.text
    assert "Sofa" in r.text
    assert 'action="/cart/add"' in r.text


def test_home_page_renders_products(client):
    r = client.get("/")
    assert r.status_code == 200
    assert "Lamp" in r.text


def test_products_page_degrades_when_catalog_unavailable(client, monkeypatch):
    monkeypatch.setattr("backend.catalog.repository.list_products", lambda tag=None: [])
    r = client.get("/products")
    assert r.status_code == 200
    assert "No products available." in r.text


def test_add_from_page_opens_cart_panel(client):
    r = client.post("/cart/add", data={"product_id": "p1"})
    assert r.status_code == 200
    assert "Shopping Cart" in r.text
    assert "x1" in r.text
    assert "Total: $20.00" in r.text


def test_checkout_page_lists_cart(client):
    _add(client, "p1")
    _add(client, "p1")
    r = client.get("/checkout")

    assert r.status_code == 200
    assert "Chair" in r.text
    assert "Quantity: 2" in r.text
    assert "Total: $40.00" in r.text
    assert "no-store" in r.headers["cache-control"]


def test_checkout_empty_cart_shows_notice(client, fake_stripe):
    r = client.post("/checkout")
    assert r.status_code == 200
    assert EMPTY_CART in r.text
    assert fake_stripe == []


def test_checkout_redirects_to_payment_page(client, fake_stripe):
    _add(client, "p1")
    _add(client, "p1")
    r = client.post("/checkout", follow_redirects=False)

    assert r.status_code == 303
    assert r.headers["location"] == "https://checkout.stripe.test/c/pay/cs_test_123"
    (call,) = fake_stripe
    item = call["line_items"][0]
    assert item["quantity"] == 2
    assert item["price_data"]["unit_amount"] == 2000
    assert call["success_url"] == "http://testserver/success"


def test_checkout_failure_shows_message_and_keeps_cart(client, monkeypatch):
    def _declined(**kwargs):
        raise RuntimeError("card_declined")

    monkeypatch.setattr("backend.payments.stripe_client.create_session", _declined)
    _add(client, "p1")
    r = client.post("/checkout", follow_redirects=False)

    assert r.status_code == 200
    assert initiator.SESSION_ERROR in r.text
    assert client.get("/api/v1/cart").json()["item_count"] == 1


def test_checkout_without_publishable_key(client, monkeypatch, fake_stripe):
    monkeypatch.setattr(config, "STRIPE_PUBLIC_KEY", "")
    _add(client, "p1")
    r = client.post("/checkout", follow_redirects=False)

    assert r.status_code == 200
    assert "Le module de paiement" in r.text
    assert fake_stripe == []


def test_checkout_uses_initiator_outcome(client, monkeypatch):
    async def _fake_initiate(lines, **kwargs):
        assert [line.id for line in lines] == ["p2"]
        assert kwargs["publishable_key"] == "pk_test_123"
        return initiator.CheckoutOutcome(ok=True, session_id="cs_x", redirect_url="https://pay.test/cs_x")

    monkeypatch.setattr(initiator, "initiate_checkout", _fake_initiate)
    _add(client, "p2")
    r = client.post("/checkout", follow_redirects=False)
    assert r.headers["location"] == "https://pay.test/cs_x"


def test_success_page_keeps_cart_by_default(client):
    _add(client, "p1")
    r = client.get("/success")

    assert r.status_code == 200
    assert "Payment Successful!" in r.text
    assert "TRACK-" in r.text
    assert client.get("/api/v1/cart").json()["count"] == 1


def test_success_page_clears_cart_when_enabled(client, monkeypatch):
    monkeypatch.setattr(config, "CLEAR_CART_ON_SUCCESS", True)
    _add(client, "p1")
    r = client.get("/success")

    assert r.status_code == 200
    assert "Items: 1" in r.text
    assert client.get("/api/v1/cart").json()["count"] == 0


def test_success_page_with_empty_cart(client):
    r = client.get("/success")
    assert r.status_code == 200
    assert "TRACK-" in r.text


def test_cancel_page_keeps_cart(client):
    _add(client, "p3")
    r = client.get("/cancel")

    assert r.status_code == 200
    assert "Payment Cancelled" in r.text
    assert "1 product(s)" in r.text
    assert 'href="/checkout"' in r.text
    assert client.get("/api/v1/cart").json()["count"] == 1


def test_checkout_rate_limit_is_per_shopper(app, client, monkeypatch):
    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")
    monkeypatch.setattr(app.state, "_rl_store", {}, raising=False)

    _add(client, "p1")
    for _ in range(10):
        assert client.post("/checkout", follow_redirects=False).status_code == 303
    # 11e tentative du même navigateur: limitée
    r = client.post("/checkout", follow_redirects=False)
    assert r.status_code == 200
    assert initiator.SESSION_ERROR in r.text

    # Un autre navigateur garde son propre quota
    with TestClient(app) as other:
        _add(other, "p2")
        r = other.post("/checkout", follow_redirects=False)
        assert r.status_code == 303
        assert r.headers["location"] == "https://checkout.stripe.test/c/pay/cs_test_123"


def test_cart_panel_offers_quantity_controls(client):
    _add(client, "p1")
    r = client.get("/products?cart=open")

    assert 'action="/cart/increment"' in r.text
    assert 'action="/cart/decrement"' in r.text
    assert 'action="/cart/remove"' in r.text


def test_cart_panel_controls_update_cart(client):
    _add(client, "p1")

    r = client.post("/cart/increment", data={"product_id": "p1"}, follow_redirects=False)
    assert r.status_code == 303
    assert r.headers["location"] == "/products?cart=open"
    assert client.get("/api/v1/cart").json()["items"][0]["quantity"] == 2

    client.post("/cart/decrement", data={"product_id": "p1"})
    client.post("/cart/decrement", data={"product_id": "p1"})
    assert client.get("/api/v1/cart").json()["items"][0]["quantity"] == 1

    r = client.post("/cart/remove", data={"product_id": "p1"})
    assert r.status_code == 200
    assert "Shopping Cart" in r.text
    assert client.get("/api/v1/cart").json()["items"] == []


def test_cart_panel_controls_ignore_absent_items(client):
    r = client.post("/cart/increment", data={"product_id": "ghost"}, follow_redirects=False)
    assert r.status_code == 303
    assert client.get("/api/v1/cart").json()["items"] == []


def test_product_list_links_to_detail_page(client):
    r = client.get("/products")
    assert 'href="/product/p1"' in r.text
    assert "/api/v1/products/" not in r.text


def test_product_detail_page(client):
    r = client.get("/product/p3")

    assert r.status_code == 200
    assert "Lamp" in r.text
    assert "Brass desk lamp" in r.text
    assert "$35.50" in r.text
    assert "<s>$39.99</s>" in r.text
    assert "10% OFF" in r.text
    assert "New" in r.text
    assert "In stock (5 left)" in r.text
    assert "disabled" not in r.text


def test_product_detail_unknown_product_returns_404(client):
    assert client.get("/product/ghost").status_code == 404


def test_out_of_stock_product_cannot_be_added(client, monkeypatch, catalog):
    sold_out = catalog["p2"].model_copy(update={"inventory": 0})
    monkeypatch.setattr("backend.catalog.repository.get_product", lambda product_id: sold_out)

    r = client.get("/product/p2")
    assert "Out of stock" in r.text
    assert "disabled" in r.text

    r = client.post("/cart/add", data={"product_id": "p2"}, follow_redirects=False)
    assert r.headers["location"] == "/products"
    assert client.post("/api/v1/cart/items", json={"product_id": "p2"}).status_code == 409
    assert client.get("/api/v1/cart").json()["items"] == []


def test_cart_read_payload_has_no_transient_flags(client):
    _add(client, "p1")
    assert set(client.get("/api/v1/cart").json()) == {"items", "total", "count", "item_count"}
