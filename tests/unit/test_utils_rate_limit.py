import time

from fastapi import Depends, FastAPI, Request
from fastapi.testclient import TestClient
from fastapi_limiter import FastAPILimiter
from starlette.middleware.sessions import SessionMiddleware

from backend import config
from backend.utils.rate_limit import optional_rate_limit, rate_limit_health_info


def _make_app(times=2, seconds=60, enabled=None):
    app = FastAPI()
    if enabled is not None:
        app.state.rate_limit_enabled = enabled

    @app.post("/limitedA", dependencies=[Depends(optional_rate_limit(times, seconds))])
    def limited_a():
        return {"ok": True}

    @app.post("/limitedB", dependencies=[Depends(optional_rate_limit(times, seconds))])
    def limited_b():
        return {"ok": True}

    @app.get("/rl_info")
    def rl_info(request: Request):
        return rate_limit_health_info(request)

    return app


def test_rate_limit_fallback_blocks_after_limit(monkeypatch):
    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")
    client = TestClient(_make_app(times=2, seconds=60))

    assert client.post("/limitedA").status_code == 200
    assert client.post("/limitedA").status_code == 200
    r3 = client.post("/limitedA")
    assert r3.status_code == 429


def test_rate_limit_is_per_path_and_session(monkeypatch):
    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")
    client = TestClient(_make_app(times=1, seconds=60))
    client.cookies.set("session", "signed-cart-session")

    assert client.post("/limitedA").status_code == 200
    assert client.post("/limitedA").status_code == 429
    # path B: compteur indépendant
    assert client.post("/limitedB").status_code == 200

    # autre navigateur (autre cookie): compteur indépendant
    other = TestClient(client.app)
    other.cookies.set("session", "another-session")
    assert other.post("/limitedA").status_code == 200


def test_rate_limit_resets_after_window(monkeypatch):
    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")
    client = TestClient(_make_app(times=1, seconds=1))

    assert client.post("/limitedA").status_code == 200
    assert client.post("/limitedA").status_code == 429
    time.sleep(1.1)
    assert client.post("/limitedA").status_code == 200


def test_rate_limit_disabled_never_blocks(monkeypatch):
    monkeypatch.delenv("LOCAL_RATE_LIMIT_FALLBACK", raising=False)
    client = TestClient(_make_app(times=1, seconds=60, enabled=False))
    for _ in range(5):
        assert client.post("/limitedA").status_code == 200


def test_rate_limit_uninitialized_limiter_does_not_block(monkeypatch):
    # Redis absent: fastapi-limiter non initialisé, la dépendance laisse passer
    monkeypatch.delenv("LOCAL_RATE_LIMIT_FALLBACK", raising=False)
    monkeypatch.setattr(FastAPILimiter, "redis", None)
    client = TestClient(_make_app(times=1, seconds=60))
    for _ in range(3):
        assert client.post("/limitedA").status_code == 200


def test_rate_limit_health_info_shape(monkeypatch):
    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")
    monkeypatch.setattr(FastAPILimiter, "redis", None)
    info = TestClient(_make_app(enabled=False)).get("/rl_info").json()

    assert info["enabled"] is False
    assert info["ready"] is False
    assert info["backend"] is None
    assert info["local_fallback"] is True


def test_rate_limit_health_info_reports_redis(monkeypatch):
    monkeypatch.setenv("RATE_LIMIT_REDIS_URL", "redis://cache.internal:6380/0")
    monkeypatch.setattr(FastAPILimiter, "redis", object())
    info = TestClient(_make_app(enabled=True)).get("/rl_info").json()

    assert info["enabled"] is True
    assert info["backend"] == "redis"
    assert info["redis"] == {"scheme": "redis", "host": "cache.internal", "port": 6380}


def test_rate_limit_keys_on_session_visitor(monkeypatch):
    # Même IP, cookies re-signés à chaque réponse: la clé reste le visiteur de la session
    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")
    app = _make_app(times=1, seconds=60)

    @app.get("/visit")
    def visit(request: Request):
        request.session[config.VISITOR_SESSION_KEY] = request.query_params["v"]
        return {"ok": True}

    app.add_middleware(SessionMiddleware, secret_key="test-secret")
    alice, bob = TestClient(app), TestClient(app)
    alice.get("/visit", params={"v": "alice"})
    bob.get("/visit", params={"v": "bob"})

    assert alice.post("/limitedA").status_code == 200
    assert alice.post("/limitedA").status_code == 429
    assert bob.post("/limitedA").status_code == 200
