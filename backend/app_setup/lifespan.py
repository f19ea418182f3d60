"""
Lifespan FastAPI de la boutique.
Au démarrage:
- relève l'état des intégrations (catalogue Supabase, paiement Stripe) dans app.state
  et signale dans les logs ce qui manque pour servir le catalogue ou encaisser;
- prépare le rate limiting de l'endpoint de session de paiement (fastapi-limiter sur Redis).
À l'arrêt: ferme la connexion Redis du limiter.

Variables d'environnement du rate limiting:
- DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS=1: aucun limiter (tests)
- USE_FAKE_REDIS_FOR_TESTS=1: Redis en mémoire via fakeredis
- RATE_LIMIT_REDIS_URL: URL Redis (défaut redis://127.0.0.1:6379/0)
- LOCAL_RATE_LIMIT_FALLBACK=1: fenêtre locale en mémoire si Redis est injoignable
"""
import os
import logging
from contextlib import asynccontextmanager

import redis.asyncio as aioredis
from fastapi import FastAPI
from fastapi_limiter import FastAPILimiter

from backend import config

try:
    from fakeredis.aioredis import FakeRedis  # tests only
except ImportError:
    FakeRedis = None

logger = logging.getLogger("uvicorn.error")

def record_integrations(app: FastAPI) -> None:
    """Catalogue et paiement sont-ils configurés ? Résultat exposé dans app.state."""
    app.state.catalog_configured = bool(config.SUPABASE_URL and config.SUPABASE_KEY)
    app.state.payments_configured = bool(config.STRIPE_PUBLIC_KEY and config.STRIPE_SECRET_KEY)
    if not app.state.catalog_configured:
        logger.warning("storefront catalog not configured (SUPABASE_URL/SUPABASE_KEY): product pages will be empty")
    if not app.state.payments_configured:
        logger.warning("storefront payments not configured (STRIPE_PUBLIC_KEY/STRIPE_SECRET_KEY): checkout will fail")
    logger.info(
        "storefront integrations catalog=%s payments=%s currency=%s",
        app.state.catalog_configured, app.state.payments_configured, config.CHECKOUT_CURRENCY,
    )

async def init_rate_limiter(app: FastAPI) -> bool:
    """Initialise fastapi-limiter; retourne True si Redis est prêt."""
    if os.getenv("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS") == "1":
        app.state.rate_limit_enabled = False
        logger.info("payment rate limiting disabled (DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS)")
        return False
    try:
        if os.getenv("USE_FAKE_REDIS_FOR_TESTS") == "1":
            if FakeRedis is None:
                raise RuntimeError("USE_FAKE_REDIS_FOR_TESTS=1 mais fakeredis n'est pas installé")
            redis_conn = FakeRedis(decode_responses=True)
        else:
            redis_url = os.getenv("RATE_LIMIT_REDIS_URL", "redis://127.0.0.1:6379/0")
            redis_conn = aioredis.from_url(redis_url, encoding="utf-8", decode_responses=True)
        await FastAPILimiter.init(redis_conn)
    except Exception as e:
        # Le fallback local (s'il est activé) est appliqué par optional_rate_limit
        local = os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1"
        app.state.rate_limit_enabled = local
        logger.warning("payment rate limiting %s: redis init error=%s", "local fallback" if local else "disabled", e)
        return False
    app.state.rate_limit_enabled = True
    logger.info("payment rate limiting enabled (redis)")
    return True

@asynccontextmanager
async def lifespan(app: FastAPI):
    record_integrations(app)
    redis_ready = await init_rate_limiter(app)
    yield
    if redis_ready:
        await FastAPILimiter.close()
