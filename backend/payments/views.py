import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from backend.utils.rate_limit import optional_rate_limit
from backend.payments import service as payments_service
from backend.payments.cart import PaymentSessionError

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/payments", tags=["Payments API"])
# Chemin historique utilisé par le front de la boutique
compat_router = APIRouter(tags=["Payments API"])

def request_origin(request: Request) -> str:
    """Origine de la requête (en-tête Origin), à défaut l'URL de base du serveur."""
    origin = (request.headers.get("origin") or "").strip()
    if origin and origin != "null":
        return origin.rstrip("/")
    return str(request.base_url).rstrip("/")

# module backend.payments.views
@router.post("/session", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
@compat_router.post("/api/payment", include_in_schema=False, dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
async def create_payment_session(request: Request):
    """
    Crée une session Stripe Checkout à partir du panier soumis.
    - Entrée JSON: { "cartProducts": [ { "_id", "title", "image", "totalPrice", "quantity" }, ... ] }
    - Prix recalculés côté serveur depuis le catalogue (voir payments.service)
    - Retour: { "id": "<session_id>", "url": "<checkout_url>" }
    - Erreurs: { "error": "<message>" } avec un statut 500, aucune session créée
    """
    try:
        body: Dict[str, Any] = await request.json()
    except Exception:
        return JSONResponse({"error": "Corps JSON invalide"}, status_code=500)

    cart_products = body.get("cartProducts") if isinstance(body, dict) else None
    try:
        session = payments_service.create_checkout_session(cart_products, origin=request_origin(request))
    except PaymentSessionError as e:
        logger.warning("payments.views.create_payment_session rejected error=%s", e)
        return JSONResponse({"error": str(e)}, status_code=500)
    except Exception as e:
        logger.exception("Erreur create_payment_session")
        return JSONResponse({"error": str(e)}, status_code=500)
    return JSONResponse({"id": session.get("id"), "url": session.get("url")})
