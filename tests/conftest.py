import os

# Pas de Redis en tests: le lifespan désactive proprement le rate limiting
os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")

import pytest
from typing import Dict, Generator, List
from unittest.mock import MagicMock
from fastapi.testclient import TestClient

from backend import config
from backend.app import app as fastapi_app
from backend.catalog.models import Product

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "/tests/unit/" in nodeid or nodeid.startswith("tests/unit/"):
            item.add_marker(pytest.mark.unit)
        elif "/tests/integration/" in nodeid or nodeid.startswith("tests/integration/"):
            item.add_marker(pytest.mark.integration)
        elif "/tests/functional/" in nodeid or nodeid.startswith("tests/functional/"):
            item.add_marker(pytest.mark.functional)

@pytest.fixture(scope="session")
def app():
    return fastapi_app

@pytest.fixture()
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c

@pytest.fixture
def catalog() -> Dict[str, Product]:
    return {
        "p1": Product(_id="p1", title="Chair", price=20, image="https://cdn.test/chair.png"),
        "p2": Product(_id="p2", title="Sofa", price="149.99", image="https://cdn.test/sofa.png", tags=["featured"]),
        "p3": Product(
            _id="p3", title="Lamp", price=35.5, discount=10, priceWithoutDiscount="39.99",
            image="https://cdn.test/lamp.png", inventory=5, badge="New", description="Brass desk lamp",
        ),
    }

# Catalogue en mémoire: aucun accès Supabase pendant les tests
@pytest.fixture(autouse=True)
def mock_catalog(monkeypatch, catalog):
    monkeypatch.setattr("backend.infra.supabase_client.get_supabase", lambda: MagicMock())
    monkeypatch.setattr(
        "backend.catalog.repository.list_products",
        lambda tag=None: [p for p in catalog.values() if not tag or tag in p.tags],
    )
    monkeypatch.setattr("backend.catalog.repository.get_product", lambda product_id: catalog.get(product_id))
    monkeypatch.setattr(
        "backend.catalog.repository.get_products_map",
        lambda ids: {i: catalog[i] for i in ids if i in catalog},
    )
    monkeypatch.setattr("backend.catalog.repository.list_categories", lambda: [])

# Stripe simulé: enregistre les appels create_session
@pytest.fixture(autouse=True)
def fake_stripe(monkeypatch) -> List[dict]:
    calls: List[dict] = []

    def _fake_create_session(**kwargs):
        calls.append(kwargs)
        return {"id": "cs_test_123", "url": "https://checkout.stripe.test/c/pay/cs_test_123"}

    monkeypatch.setattr("backend.payments.stripe_client.create_session", _fake_create_session)
    return calls

@pytest.fixture(autouse=True)
def stripe_keys(monkeypatch):
    monkeypatch.setattr(config, "STRIPE_PUBLIC_KEY", "pk_test_123")
    monkeypatch.setattr(config, "STRIPE_SECRET_KEY", "")
