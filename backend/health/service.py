"""
Diagnostics de la boutique, exposés par /health/*.
- catalog_health_info: backend de contenu Supabase (hôte, tables du catalogue, bucket d'images)
- payments_health_info: configuration Stripe (présence des clés, mode test/live, devise, URLs de retour)
Aucun secret n'est renvoyé, seulement leur présence.
"""
from typing import Any, Dict, Optional
from urllib.parse import urlparse
import logging
import socket

from backend import config
import backend.infra.supabase_client as supabase_client

logger = logging.getLogger(__name__)

# module backend.health.service
def _resolve_host(hostname: Optional[str]) -> Dict[str, Any]:
    if not hostname:
        return {"ok": None}
    try:
        socket.getaddrinfo(hostname, 443)
    except OSError as e:
        return {"ok": False, "error": str(e)}
    return {"ok": True}

def _probe_table(client, table: str) -> Dict[str, Any]:
    try:
        res = client.table(table).select("id").limit(1).execute()
    except Exception as e:
        logger.warning("health.service table probe failed table=%s error=%s", table, e)
        return {"ok": False, "error": str(e)}
    return {"ok": True, "sample_rows": len(res.data or [])}

def _probe_bucket(client, bucket: str) -> Dict[str, Any]:
    try:
        client.storage.get_bucket(bucket)
    except Exception as e:
        logger.warning("health.service bucket probe failed bucket=%s error=%s", bucket, e)
        return {"ok": False, "error": str(e)}
    return {"ok": True}

def catalog_health_info() -> Dict[str, Any]:
    hostname = urlparse(config.SUPABASE_URL).hostname if config.SUPABASE_URL else None
    info: Dict[str, Any] = {
        "configured": bool(config.SUPABASE_URL and config.SUPABASE_KEY),
        "hostname": hostname,
        "dns": _resolve_host(hostname),
        "tables": {},
        "images_bucket": {"name": config.PRODUCT_IMAGES_BUCKET},
        "error": None,
    }
    try:
        client = supabase_client.get_supabase()
    except RuntimeError as e:
        info["error"] = str(e)
        return info
    for table in (config.PRODUCTS_TABLE, config.CATEGORIES_TABLE):
        info["tables"][table] = _probe_table(client, table)
    info["images_bucket"].update(_probe_bucket(client, config.PRODUCT_IMAGES_BUCKET))
    return info

def _stripe_mode(secret_key: str) -> Optional[str]:
    if secret_key.startswith(("sk_test_", "rk_test_")):
        return "test"
    if secret_key.startswith(("sk_live_", "rk_live_")):
        return "live"
    return None

def payments_health_info() -> Dict[str, Any]:
    return {
        "publishable_key": bool(config.STRIPE_PUBLIC_KEY),
        "secret_key": bool(config.STRIPE_SECRET_KEY),
        "mode": _stripe_mode(config.STRIPE_SECRET_KEY),
        "currency": config.CHECKOUT_CURRENCY,
        "success_path": config.CHECKOUT_SUCCESS_PATH,
        "cancel_path": config.CHECKOUT_CANCEL_PATH,
        "trust_client_prices": config.CHECKOUT_TRUST_CLIENT_PRICES,
    }
