from backend import config


def test_health_root_reports_integrations(client, monkeypatch):
    r = client.get("/health")
    assert r.status_code == 200
    data = r.json()
    assert data["ok"] is True
    # conftest: clé publique présente, clé secrète absente
    assert data["payments_configured"] is False
    assert "catalog_configured" in data


def test_health_supabase_reports_catalog(client, monkeypatch):
    monkeypatch.setattr(
        "backend.health.service.catalog_health_info",
        lambda: {"configured": True, "tables": {"products": {"ok": True, "sample_rows": 1}}},
    )
    r = client.get("/health/supabase")
    assert r.status_code == 200
    assert r.json()["tables"]["products"]["ok"] is True


def test_health_payments_never_leaks_keys(client, monkeypatch):
    monkeypatch.setattr(config, "STRIPE_SECRET_KEY", "sk_test_secret_value")
    r = client.get("/health/payments")

    assert r.status_code == 200
    data = r.json()
    assert data["publishable_key"] is True
    assert data["secret_key"] is True
    assert data["mode"] == "test"
    assert data["currency"] == config.CHECKOUT_CURRENCY
    assert "sk_test_secret_value" not in r.text
    assert "pk_test_123" not in r.text


def test_health_rate_limit_disabled_in_tests(client):
    r = client.get("/health/rate-limit")
    assert r.status_code == 200
    assert r.json()["enabled"] is False


def test_security_headers_present(client):
    r = client.get("/health")
    assert r.headers["X-Frame-Options"] == "DENY"
    assert r.headers["X-Content-Type-Options"] == "nosniff"
    assert "js.stripe.com" in r.headers["Content-Security-Policy"]
